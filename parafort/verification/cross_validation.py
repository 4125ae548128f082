import math
from typing import Optional

from parafort.config import config
from .models import CombinationResult, ConsensusData, GeminiAnswer, OpenAIAnswer, parse_fee

VALIDATED = "validated"
DISCREPANCY = "discrepancy"
INCOMPLETE = "incomplete"
ERROR = "error"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _fmt(value: Optional[float]) -> str:
    if value is None:
        return "unparseable"
    return f"{value:g}"


def _differ(a: Optional[float], b: Optional[float], tolerance: float) -> bool:
    """Unreadable amounts always count as a difference."""
    if a is None or b is None:
        return True
    return abs(a - b) > tolerance


def _average(a: Optional[float], b: Optional[float]) -> Optional[int]:
    if a is None and b is None:
        return None
    return round_half_up(((a or 0) + (b or 0)) / 2)


def cross_validate(openai_answer: Optional[OpenAIAnswer], gemini_answer: Optional[GeminiAnswer],
                   tolerance: float = None) -> CombinationResult:
    """
    Compares two providers' answers for one state / entity type.

    Fees within `tolerance` dollars agree; the annual fee is only compared
    when both providers say an annual report is required.
    """
    tolerance = config.VERIFICATION_FEE_TOLERANCE if tolerance is None else tolerance

    if openai_answer is None or gemini_answer is None:
        return CombinationResult(status=INCOMPLETE, issues=["Missing AI verification data"])

    issues = []

    openai_fee, gemini_fee = openai_answer.formation_fee, gemini_answer.formation_fee
    if _differ(openai_fee, gemini_fee, tolerance):
        issues.append(f"Formation fee mismatch: OpenAI={_fmt(openai_fee)}, Gemini={_fmt(gemini_fee)}")

    openai_required = openai_answer.annual_report_required
    gemini_required = gemini_answer.annual_report_required
    if openai_required != gemini_required:
        issues.append(
            f"Annual report requirement mismatch: OpenAI={openai_required}, Gemini={gemini_required}"
        )

    openai_annual, gemini_annual = openai_answer.annual_filing_fee, gemini_answer.annual_fee
    if openai_required and gemini_required and _differ(openai_annual, gemini_annual, tolerance):
        issues.append(
            f"Annual filing fee mismatch: OpenAI={_fmt(openai_annual)}, Gemini={_fmt(gemini_annual)}"
        )

    consensus = ConsensusData(
        state=openai_answer.state,
        entityType=openai_answer.entity_type,
        formationFee=_average(openai_fee, gemini_fee),
        annualReportRequired=bool(openai_required and gemini_required),
        annualFilingFee=(_average(openai_annual, gemini_annual) or 0) if openai_required else 0,
        frequency=openai_answer.frequency,
        dueDate=openai_answer.due_date,
        lateFee=openai_answer.late_fee or 0,
        sources=[s for s in (openai_answer.source, gemini_answer.official_source) if s],
    )

    return CombinationResult(
        status=VALIDATED if not issues else DISCREPANCY,
        issues=issues,
        consensusData=consensus,
    )


__all__ = ['cross_validate', 'parse_fee', 'round_half_up', 'VALIDATED', 'DISCREPANCY', 'INCOMPLETE', 'ERROR']
