"""Writes the verification report and the verified fee table."""
import json
import os
from datetime import datetime
from typing import Dict, Iterable, Optional

import structlog
from jinja2 import Environment, FileSystemLoader

from parafort.config import config
from .cross_validation import VALIDATED
from .verifier import combination_key

logger = structlog.get_logger()

REPORT_FILENAME = "state-verification-report.json"
FEES_FILENAME = "stateFilingFees-verified.ts"
TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
NEEDS_REVIEW = "VERIFICATION FAILED - NEEDS MANUAL REVIEW"


def ts_string(value) -> str:
    """Single-quoted TypeScript string literal."""
    text = "" if value is None else str(value)
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'").replace("\n", " ") + "'"


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["ts_string"] = ts_string
    return env


def write_report(report: dict, output_dir: str = None) -> str:
    output_dir = output_dir or config.VERIFICATION_OUTPUT_DIR
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, REPORT_FILENAME)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
    logger.info("📄 Verification report saved", path=path)
    return path


def validated_rate(report: dict) -> float:
    summary = report.get("summary") or {}
    total = summary.get("total") or 0
    return summary.get("validated", 0) / total if total else 0.0


def _entry(result: Optional[dict]) -> dict:
    consensus = (result or {}).get("consensusData")
    if not result or result.get("status") != VALIDATED or not consensus:
        return {"verified": False, "notes": NEEDS_REVIEW}
    return {
        "verified": True,
        "formationFee": consensus.get("formationFee") or 0,
        "annualReportRequired": bool(consensus.get("annualReportRequired")),
        "annualReportFee": consensus.get("annualFilingFee") or 0,
        "frequency": consensus.get("frequency"),
        "dueDate": consensus.get("dueDate"),
        "lateFee": consensus.get("lateFee") or 0,
        "sources": consensus.get("sources") or [],
    }


def render_verified_fees(
    results: Dict[str, dict],
    states: Iterable[str],
    entity_types: Iterable[str],
    generated_at: datetime = None,
) -> str:
    """
    TypeScript module with one record per state and entity type.

    Combinations that did not validate are emitted with a manual review
    note instead of fees.
    """
    entity_types = list(entity_types)
    table = [
        {
            "state": state,
            "entities": [
                {"entityType": entity_type, **_entry(results.get(combination_key(state, entity_type)))}
                for entity_type in entity_types
            ],
        }
        for state in states
    ]
    generated_at = generated_at or datetime.utcnow()
    return _environment().get_template("state_filing_fees.ts.j2").render(
        table=table,
        generated_at=generated_at.isoformat() + "Z",
    )


def write_verified_fees(report: dict, states: Iterable[str], entity_types: Iterable[str],
                        output_dir: str = None, min_rate: float = None) -> Optional[str]:
    """Writes the fee table only when enough combinations validated; returns the path or None."""
    output_dir = output_dir or config.VERIFICATION_OUTPUT_DIR
    min_rate = config.VERIFICATION_MIN_VALIDATED_RATE if min_rate is None else min_rate

    rate = validated_rate(report)
    if rate <= min_rate:
        logger.warning("⚠️ Too many unverified combinations, fee table not written",
                       validated_rate=round(rate, 3), required=min_rate)
        return None

    content = render_verified_fees(report.get("verificationResults") or {}, states, entity_types)
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, FEES_FILENAME)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.info("✅ Verified fee table written", path=path)
    return path
