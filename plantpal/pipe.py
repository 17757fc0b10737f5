import logging
from enum import Enum
from typing import Optional

from plantpal.agent.deps import SymptomRequest
from plantpal.agent.models import DiagnosisReport
from plantpal.errors import DiagnosisError, DiagnosisInProgress, UnreadableImage
from plantpal.vision.images import encode_image

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Please describe your plant's symptoms. A description is required."
FAILURE_MESSAGE = (
    "Sorry, we couldn't get a diagnosis. The AI may be busy, or an error occurred. Please try again."
)


class Phase(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"


class Outcome(str, Enum):
    REJECTED = "rejected"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class DiagnosisSession:
    """
    Form state plus the single in-flight diagnosis attempt.

    Idle -> Validating -> (Rejected | Submitting -> Succeeded | Failed) -> Idle.
    The report and error are cleared when an attempt starts submitting and
    only the report of a successful attempt is stored.
    """

    def __init__(self, diagnoser):
        self.diagnoser = diagnoser
        self.description = ""
        self.plant_type: Optional[str] = None
        self.image: Optional[bytes] = None
        self.report: Optional[DiagnosisReport] = None
        self.error: Optional[str] = None
        self.phase = Phase.IDLE
        self.outcome: Optional[Outcome] = None

    @property
    def busy(self) -> bool:
        return self.phase != Phase.IDLE

    @property
    def can_submit(self) -> bool:
        return not self.busy and bool(self.description.strip())

    def set_image(self, raw: Optional[bytes]):
        self.image = raw or None

    def clear_image(self):
        self.image = None

    def _finish(self, outcome: Outcome) -> Outcome:
        self.outcome = outcome
        self.phase = Phase.IDLE
        return outcome

    async def submit(self) -> Outcome:
        if self.busy:
            raise DiagnosisInProgress("A diagnosis is already in progress.")

        self.phase = Phase.VALIDATING
        if not self.description.strip():
            self.error = VALIDATION_MESSAGE
            return self._finish(Outcome.REJECTED)

        self.phase = Phase.SUBMITTING
        self.report = None
        self.error = None
        try:
            payload = encode_image(self.image) if self.image else None
            request = SymptomRequest(
                description=self.description,
                plant_type=self.plant_type or None,
                image=payload,
            )
            report = await self.diagnoser.diagnose(request)
        except (DiagnosisError, UnreadableImage):
            logger.exception("Diagnosis Error")
            self.error = FAILURE_MESSAGE
            return self._finish(Outcome.FAILED)
        except BaseException:
            # Unexpected errors propagate, but the form must not stay locked.
            self.error = FAILURE_MESSAGE
            self.phase = Phase.IDLE
            raise

        self.report = report
        self.clear_image()
        return self._finish(Outcome.SUCCEEDED)
