import time
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

import structlog

from parafort.config import config
from parafort.domain.entity_types import ENTITY_TYPES
from parafort.domain.value_objects.us_state import STATE_CODES
from parafort.error_codes import ErrorCode
from .cross_validation import DISCREPANCY, ERROR, INCOMPLETE, VALIDATED, cross_validate
from .models import CombinationResult

logger = structlog.get_logger()

STATES = list(STATE_CODES)


def combination_key(state: str, entity_type: str) -> str:
    return f"{state}_{entity_type}"


class StateDataVerifier:
    """
    Verifies filing data for every state / entity type combination.

    Providers are called one after the other with a pause between
    combinations to stay under their rate limits. A failure in one
    combination is recorded and the run continues.
    """

    def __init__(
        self,
        openai_client,
        gemini_client,
        states: Optional[Iterable[str]] = None,
        entity_types: Optional[Iterable[str]] = None,
        tolerance: float = None,
        delay_seconds: float = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.openai_client = openai_client
        self.gemini_client = gemini_client
        self.states: List[str] = list(states or STATES)
        self.entity_types: List[str] = list(entity_types or ENTITY_TYPES)
        self.tolerance = config.VERIFICATION_FEE_TOLERANCE if tolerance is None else tolerance
        self.delay_seconds = config.VERIFICATION_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self._sleep = sleep

    @property
    def total(self) -> int:
        return len(self.states) * len(self.entity_types)

    def _ask(self, provider: str, client, state: str, entity_type: str):
        """A provider failure is logged and counts as a missing answer."""
        try:
            return client.verify(state, entity_type)
        except Exception as e:
            logger.error(f"❌ {provider} verification failed", state=state, entity_type=entity_type,
                         error=str(e), error_code=ErrorCode.get_error(e)["code"])
            return None

    def verify_combination(self, state: str, entity_type: str) -> CombinationResult:
        openai_answer = self._ask("OpenAI", self.openai_client, state, entity_type)
        gemini_answer = self._ask("Gemini", self.gemini_client, state, entity_type)
        try:
            return cross_validate(openai_answer, gemini_answer, self.tolerance)
        except Exception as e:
            logger.error("Cross-validation failed", state=state, entity_type=entity_type, error=str(e))
            return CombinationResult(status=ERROR, error=str(e))

    def run(self, now: datetime = None) -> dict:
        logger.info("🔍 Starting state data verification",
                    states=len(self.states), entity_types=len(self.entity_types), total=self.total)

        results: Dict[str, CombinationResult] = {}
        issues = []
        completed = 0

        for state in self.states:
            logger.info(f"📍 Verifying {state}")
            for entity_type in self.entity_types:
                result = self.verify_combination(state, entity_type)
                results[combination_key(state, entity_type)] = result

                if result.status == DISCREPANCY:
                    issues.append({'state': state, 'entityType': entity_type, 'issues': result.issues})
                    logger.warning("⚠️ Discrepancy detected", state=state, entity_type=entity_type, issues=result.issues)
                elif result.status == VALIDATED:
                    logger.info("✅ Verified", state=state, entity_type=entity_type)
                else:
                    logger.warning("❌ Not verified", state=state, entity_type=entity_type, status=result.status)

                completed += 1
                logger.info("Progress", completed=completed, total=self.total,
                            percent=round(completed / self.total * 100))

                if self.delay_seconds and completed < self.total:
                    self._sleep(self.delay_seconds)

        return self.build_report(results, issues, now)

    def build_report(self, results: Dict[str, CombinationResult], issues: list, now: datetime = None) -> dict:
        now = now or datetime.utcnow()
        statuses = [r.status for r in results.values()]
        summary = {
            'total': self.total,
            'validated': statuses.count(VALIDATED),
            'discrepancies': statuses.count(DISCREPANCY),
            'incomplete': statuses.count(INCOMPLETE),
            'errors': statuses.count(ERROR),
        }
        logger.info("📋 Verification complete", **summary)
        return {
            'timestamp': now.isoformat() + 'Z',
            'summary': summary,
            'issues': issues,
            'verificationResults': {key: r.to_report() for key, r in results.items()},
        }
