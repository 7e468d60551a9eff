# app/workflow.py
"""
Assessment workflow state machine.

One instance backs one assessment screen. Phases:

    FORM --submit()--> SUBMITTING --success--> RESULT
                           |                      |
                           +--failure--> FORM <---+ reset() ("try another")

There is no failed phase: any failure returns to FORM with the answers
untouched and exactly one error notification. SUBMITTING is the mutual
exclusion for submit(): a second call while in flight is rejected.

Every run carries a generation number. reset(), close() and
initialize() bump it and cancel the in-flight request, so a response
for a run the user has left never touches workflow state. A rejected
credential still ends the session, stale or not.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from app.catalog import MAX_ANSWER, MIN_ANSWER, Assessment, AssessmentType, get_assessment
from app.eligibility import (
    PROFILE_INCOMPLETE_NOTICE,
    UNKNOWN_ASSESSMENT_NOTICE,
    is_eligible,
)
from app.errors import (
    HealifyError,
    InvalidStateError,
    ProfileIncompleteError,
    ServiceError,
    UnauthorizedError,
    UnknownAssessmentTypeError,
    ValidationError,
)
from app.models import PredictionResult, RiskFactor
from app.notifications import Notifier
from app.remote.base import HealthService
from app.risk_tiers import FactorSeverity, TierSummary, factor_severity, summarize
from auth.store import SessionStore

_logger = logging.getLogger(__name__)

MIN_SIGNAL_MESSAGE = "Please provide at least some symptom information"
SCORE_FAILED_MESSAGE = "Failed to generate prediction. Please try again."
SCORE_SUCCESS_MESSAGE = "Prediction completed successfully!"
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."


class WorkflowPhase(str, Enum):
    FORM = "form"
    SUBMITTING = "submitting"
    RESULT = "result"


class ResetOutcome(str, Enum):
    RESEEDED = "reseeded"  # fresh form for another run
    NAVIGATE_AWAY = "navigate_away"  # caller should leave the screen


class AssessmentWorkflow:
    """
    Drives one assessment screen.

    Usage:
        workflow = AssessmentWorkflow(store, service, notifier)
        workflow.initialize("diabetes")
        workflow.set_answer("fatigue", 60)
        result = await workflow.submit()
    """

    def __init__(self, store: SessionStore, service: HealthService, notifier: Notifier):
        self._store = store
        self._service = service
        self._notifier = notifier

        self._assessment: Optional[Assessment] = None
        self._answers: Dict[str, int] = {}
        self._phase: Optional[WorkflowPhase] = None
        self._result: Optional[PredictionResult] = None
        self._generation = 0
        self._inflight: Optional[asyncio.Future] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self._assessment is not None

    @property
    def assessment(self) -> Optional[Assessment]:
        return self._assessment

    @property
    def phase(self) -> Optional[WorkflowPhase]:
        return self._phase

    @property
    def answers(self) -> Mapping[str, int]:
        return MappingProxyType(self._answers)

    @property
    def result(self) -> Optional[PredictionResult]:
        return self._result

    @property
    def answered_count(self) -> int:
        return sum(1 for value in self._answers.values() if value > 0)

    @property
    def progress(self) -> float:
        """Fraction of questions with a nonzero answer."""
        if not self._answers:
            return 0.0
        return self.answered_count / len(self._answers)

    @property
    def summary(self) -> Optional[TierSummary]:
        """Tier and next steps for the current result."""
        if self._result is None:
            return None
        return summarize(self._result.percentage)

    def factor_rows(self) -> List[Tuple[RiskFactor, FactorSeverity]]:
        if self._result is None:
            return []
        return [(f, factor_severity(f.impact)) for f in self._result.risk_factors]

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def initialize(self, assessment_type: Union[str, AssessmentType]) -> None:
        """
        Start a run for `assessment_type`.

        Raises:
            UnknownAssessmentTypeError: Type not in the catalog
            ProfileIncompleteError: Profile gate denied entry
        """
        assessment = get_assessment(assessment_type)
        if assessment is None:
            self._notifier.error(UNKNOWN_ASSESSMENT_NOTICE)
            raise UnknownAssessmentTypeError(str(assessment_type))

        if not is_eligible(self._store.account):
            self._notifier.error(PROFILE_INCOMPLETE_NOTICE)
            raise ProfileIncompleteError(PROFILE_INCOMPLETE_NOTICE)

        self._abandon_inflight()
        self._assessment = assessment
        self._seed()
        _logger.debug(f"Started {assessment.type.value} assessment")

    def set_answer(self, key: str, value: int) -> None:
        """
        Record one answer.

        Out-of-range values are rejected, not clamped.

        Raises:
            InvalidStateError: Not in FORM
            ValidationError: Unknown key, non-integer or out-of-range value
        """
        assessment = self._require_active()
        if self._phase != WorkflowPhase.FORM:
            raise InvalidStateError(f"Cannot change answers while {self._phase.value}")

        if not assessment.has_question(key):
            raise ValidationError(
                f"Unknown question for {assessment.type.value}: {key}",
                field_errors={key: "Unknown question"},
            )
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                f"Answer for {key} must be a whole number",
                field_errors={key: "Must be a whole number"},
            )
        if not MIN_ANSWER <= value <= MAX_ANSWER:
            raise ValidationError(
                f"Answer for {key} must be between {MIN_ANSWER} and {MAX_ANSWER}",
                field_errors={key: f"Must be between {MIN_ANSWER} and {MAX_ANSWER}"},
            )

        self._answers[key] = value

    async def submit(self) -> Optional[PredictionResult]:
        """
        Send the answers for scoring.

        Returns:
            The result, or None if the run was abandoned while in flight

        Raises:
            InvalidStateError: Not in FORM (including a second concurrent call)
            ValidationError: All answers are zero (no call is made)
            UnauthorizedError: Credential rejected; the session is invalidated
            ServiceError: Scoring failed; back in FORM, answers kept
        """
        assessment = self._require_active()
        if self._phase == WorkflowPhase.SUBMITTING:
            raise InvalidStateError("A prediction is already in progress")
        if self._phase != WorkflowPhase.FORM:
            raise InvalidStateError(f"Cannot submit while {self._phase.value}")

        if not any(self._answers.values()):
            self._notifier.error(MIN_SIGNAL_MESSAGE)
            raise ValidationError(MIN_SIGNAL_MESSAGE)

        credential = self._store.credential
        if not credential:
            self._notifier.error(SESSION_EXPIRED_MESSAGE)
            raise UnauthorizedError(SESSION_EXPIRED_MESSAGE)

        generation = self._generation
        self._phase = WorkflowPhase.SUBMITTING
        inflight = asyncio.ensure_future(
            self._service.score(credential, assessment.type, dict(self._answers))
        )
        self._inflight = inflight

        try:
            result = await inflight
        except asyncio.CancelledError:
            if self._is_stale(generation):
                _logger.info("Discarded cancelled prediction for an abandoned run")
                return None
            self._phase = WorkflowPhase.FORM
            raise
        except UnauthorizedError:
            # The credential is dead even when the run was abandoned
            if self._store.credential == credential:
                self._store.invalidate("prediction request rejected")
            if self._is_stale(generation):
                return None
            self._phase = WorkflowPhase.FORM
            self._notifier.error(SESSION_EXPIRED_MESSAGE)
            raise
        except HealifyError as e:
            if self._is_stale(generation):
                return None
            self._phase = WorkflowPhase.FORM
            _logger.warning(f"Prediction failed: {e.message}")
            self._notifier.error(SCORE_FAILED_MESSAGE)
            raise
        except Exception as e:
            if self._is_stale(generation):
                return None
            self._phase = WorkflowPhase.FORM
            _logger.exception("Unexpected error from remote service")
            self._notifier.error(SCORE_FAILED_MESSAGE)
            raise ServiceError(SCORE_FAILED_MESSAGE) from e
        finally:
            if self._inflight is inflight:
                self._inflight = None

        if self._is_stale(generation):
            _logger.info("Discarded prediction for an abandoned run")
            return None

        self._result = result
        self._phase = WorkflowPhase.RESULT
        self._notifier.success(SCORE_SUCCESS_MESSAGE)
        return result

    def reset(self) -> ResetOutcome:
        """
        Leave the current run.

        From RESULT, starts a fresh run of the same type. Otherwise the
        run is discarded (cancelling any in-flight request) and the
        caller should navigate away.
        """
        if self._phase == WorkflowPhase.RESULT:
            self._abandon_inflight()
            self._seed()
            return ResetOutcome.RESEEDED

        self.close()
        return ResetOutcome.NAVIGATE_AWAY

    def close(self) -> None:
        """Discard the run; used when the screen is left."""
        self._abandon_inflight()
        self._assessment = None
        self._answers = {}
        self._phase = None
        self._result = None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _seed(self) -> None:
        self._answers = {key: 0 for key in self._assessment.question_keys}
        self._result = None
        self._phase = WorkflowPhase.FORM

    def _require_active(self) -> Assessment:
        if self._assessment is None:
            raise InvalidStateError("No active assessment")
        return self._assessment

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    def _abandon_inflight(self) -> None:
        self._generation += 1
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None
