import io
import base64
import logging

from PIL import Image, UnidentifiedImageError

from plantpal.agent.deps import ImagePayload
from plantpal.errors import UnreadableImage

logger = logging.getLogger(__name__)

# Formats the model accepts as-is. Anything else decodable is re-encoded to PNG.
PASSTHROUGH_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
}

_DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError)


def _identify(raw: bytes) -> str:
    """Return the PIL format name, raising UnreadableImage if it cannot be decoded."""
    try:
        with Image.open(io.BytesIO(raw)) as image:
            image.verify()
            return image.format
    except _DECODE_ERRORS as e:
        raise UnreadableImage(f"Could not decode image: {e}") from e


def _to_png(raw: bytes) -> bytes:
    try:
        with Image.open(io.BytesIO(raw)) as image:
            if image.mode not in ("RGB", "RGBA", "L", "LA"):
                image = image.convert("RGBA")
            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            return buffer.getvalue()
    except _DECODE_ERRORS as e:
        raise UnreadableImage(f"Could not re-encode image: {e}") from e


def encode_image(raw: bytes) -> ImagePayload:
    """
    Turn raw image bytes into a base64 payload plus its media type.
    PNG/JPEG/WEBP are passed through untouched.
    """
    if not raw:
        raise UnreadableImage("Image is empty.")

    fmt = _identify(raw)
    if fmt in PASSTHROUGH_TYPES:
        data, media_type = raw, PASSTHROUGH_TYPES[fmt]
    else:
        logger.info("Re-encoding %s image to PNG", fmt)
        data, media_type = _to_png(raw), "image/png"

    return ImagePayload(data=base64.b64encode(data).decode("ascii"), media_type=media_type)


def decode_image(payload: ImagePayload) -> bytes:
    return payload.to_bytes()
