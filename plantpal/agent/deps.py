import base64
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImagePayload:
    data: str           # base64 text, safe to embed in a request body
    media_type: str     # e.g. "image/jpeg"

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)


@dataclass(frozen=True)
class SymptomRequest:
    description: str
    plant_type: Optional[str] = None
    image: Optional[ImagePayload] = None
