from dataclasses import dataclass
from typing import List, Optional

from google.genai import types

from plantpal import config
from plantpal.agent.deps import ImagePayload, SymptomRequest
from plantpal.agent.models import DIAGNOSIS_SCHEMA
from plantpal.errors import ValidationError


SYSTEM_ROLE = (
    "You are an expert botanist and plant pathologist AI assistant named 'Plant Pal'. "
    "A user is describing their plant's symptoms and may also have provided a photo and the plant type. "
    "Your task is to analyze these inputs and provide a helpful diagnosis."
)

INSTRUCTIONS = (
    "Analyze the user's text description and, if provided, the image and plant type. "
    "Identify 1 to 3 potential diseases. For each disease, provide its name, a simple description, "
    "a list of remedies, and a list of prevention tips. Also include a brief, encouraging overall summary. "
    "Format your response according to the provided JSON schema. "
    "If the image is unclear or doesn't seem to show a plant, mention that in your summary "
    "but still provide a diagnosis based on the text if possible."
)


@dataclass
class RequestEnvelope:
    """Everything needed for one generate_content call."""
    model: str
    parts: List[types.Part]
    config: types.GenerateContentConfig

    @property
    def has_image(self) -> bool:
        return any(part.inline_data is not None for part in self.parts)

    @property
    def text(self) -> str:
        return "\n".join(part.text for part in self.parts if part.text)

    def contents(self) -> List[types.Content]:
        return [types.Content(role="user", parts=self.parts)]


def plant_context(plant_type: Optional[str]) -> str:
    if plant_type and plant_type.strip():
        return (
            f'The user has specified the plant type as: "{plant_type.strip()}". '
            "Take this into special consideration when diagnosing."
        )
    return "The user has not specified the plant type."


def build_prompt(description: str, plant_type: Optional[str] = None) -> str:
    return (
        f"{SYSTEM_ROLE}\n\n"
        f"{plant_context(plant_type)}\n\n"
        f'User\'s description of symptoms: "{description.strip()}"\n\n'
        f"{INSTRUCTIONS}"
    )


def build_request(
    description: str,
    plant_type: Optional[str] = None,
    image: Optional[ImagePayload] = None,
    model: str = None,
    temperature: float = None,
) -> RequestEnvelope:
    """
    Assemble the content parts and generation config for a diagnosis.
    The image (if any) goes first, followed by the text instruction.
    """
    if not description or not description.strip():
        raise ValidationError("A symptom description is required.")

    parts = []
    if image is not None:
        parts.append(types.Part.from_bytes(data=image.to_bytes(), mime_type=image.media_type))
    parts.append(types.Part.from_text(text=build_prompt(description, plant_type)))

    generation_config = types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=DIAGNOSIS_SCHEMA,
        temperature=config.TEMPERATURE if temperature is None else temperature,
    )
    return RequestEnvelope(
        model=model or config.MODEL_NAME,
        parts=parts,
        config=generation_config,
    )


def build_from_request(request: SymptomRequest, **kwargs) -> RequestEnvelope:
    return build_request(request.description, request.plant_type, request.image, **kwargs)
