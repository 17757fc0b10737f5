import os
from dotenv import load_dotenv

from plantpal.errors import MissingApiKey

# Load env for API keys (Gemini)
load_dotenv()

# --- MODEL ---
MODEL_NAME = os.getenv("PLANTPAL_MODEL", "gemini-2.5-flash")
TEMPERATURE = float(os.getenv("PLANTPAL_TEMPERATURE", "0.5"))
REQUEST_TIMEOUT = float(os.getenv("PLANTPAL_REQUEST_TIMEOUT", "60"))  # seconds

# --- CAPTURE DEVICE ---
CAMERA_INDEX = int(os.getenv("PLANTPAL_CAMERA_INDEX", "0"))
JPEG_QUALITY = 95

# --- PREFERENCES ---
PREFERENCES_PATH = os.path.expanduser(
    os.getenv("PLANTPAL_PREFERENCES", os.path.join("~", ".plantpal", "preferences.json"))
)

LOG_LEVEL = os.getenv("PLANTPAL_LOG_LEVEL", "INFO")


def get_api_key() -> str:
    """Return the Gemini API key, failing hard when it is not configured."""
    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        raise MissingApiKey("GOOGLE_API_KEY environment variable not set. Check your .env file.")
    return api_key


def get_base_url():
    """Optional endpoint override (proxy or gateway in front of the Gemini API)."""
    return os.getenv("PLANTPAL_API_BASE_URL") or None
