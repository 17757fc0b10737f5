class PlantPalError(Exception):
    """Base class for every error raised by Plant Pal."""


class ValidationError(PlantPalError):
    """The symptom request is not fit to be sent (e.g. blank description)."""


class MissingApiKey(PlantPalError):
    """No API key configured. Fatal at startup, not a per-request error."""


# --- Capture device ---
class CaptureError(PlantPalError):
    pass


class PermissionDenied(CaptureError):
    pass


class DeviceUnavailable(CaptureError):
    pass


class CaptureNotStreaming(CaptureError):
    """capture() called while the device is not streaming."""


# --- Images ---
class UnreadableImage(PlantPalError):
    pass


# --- Diagnosis ---
class DiagnosisError(PlantPalError):
    pass


class TransportError(DiagnosisError):
    """The model call itself failed (network, API error, timeout)."""


class EmptyResponse(DiagnosisError):
    pass


class MalformedResponse(DiagnosisError):
    """The reply is not JSON matching the DiagnosisReport shape."""


class DiagnosisInProgress(PlantPalError):
    """A second submission was attempted while one is still in flight."""
