import json
import logging
from typing import Optional

from pydantic import ValidationError as SchemaViolation

from plantpal.agent.models import DiagnosisReport
from plantpal.errors import EmptyResponse, MalformedResponse

logger = logging.getLogger(__name__)


def parse_report(raw_text: Optional[str]) -> DiagnosisReport:
    """
    Decode the model's JSON reply into a DiagnosisReport.

    No best-effort recovery: anything that does not match the shape
    exactly is rejected as a whole.
    """
    text = (raw_text or "").strip()
    if not text:
        raise EmptyResponse("API returned an empty response.")

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Response is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        report = DiagnosisReport.model_validate(payload)
    except SchemaViolation as e:
        raise MalformedResponse(f"Response does not match the diagnosis schema: {e}") from e

    logger.debug("Parsed report with %d candidate disease(s)", len(report.possible_diseases))
    return report
