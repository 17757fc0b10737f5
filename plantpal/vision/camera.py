import os
import sys
import logging
from enum import Enum
from typing import Callable, Optional

import cv2
import numpy as np

from plantpal import config
from plantpal.errors import CaptureNotStreaming, DeviceUnavailable, PermissionDenied

logger = logging.getLogger(__name__)


class CaptureState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    CAPTURED = "captured"
    CLOSED = "closed"


def device_node(camera_index: int) -> Optional[str]:
    # Only Linux exposes a device node; elsewhere the backend decides.
    if sys.platform.startswith("linux"):
        return f"/dev/video{camera_index}"
    return None


class CameraSession:
    """
    Owns at most one open video device.

    open() is only ever called from an explicit user action. close() is
    idempotent and must run on every way out of a session;
    the session is also a context manager for scoped use.
    """

    def __init__(
        self,
        camera_index: int = None,
        backend: Callable[[int], "cv2.VideoCapture"] = cv2.VideoCapture,
        jpeg_quality: int = config.JPEG_QUALITY,
    ):
        self.camera_index = config.CAMERA_INDEX if camera_index is None else camera_index
        self.jpeg_quality = jpeg_quality
        self._backend = backend
        self._capture = None
        self.state = CaptureState.IDLE
        self.error: Optional[str] = None

    @property
    def is_streaming(self) -> bool:
        return self.state == CaptureState.STREAMING

    def _check_permission(self):
        node = device_node(self.camera_index)
        if node and os.path.exists(node) and not os.access(node, os.R_OK | os.W_OK):
            raise PermissionDenied(f"No permission to open {node}")

    def open(self):
        # Never hold two devices: replace any stream that is still open.
        if self._capture is not None:
            logger.info("Camera %s already open, releasing previous stream", self.camera_index)
            self.close()

        self.state = CaptureState.REQUESTING
        self.error = None
        capture = None
        try:
            self._check_permission()
            capture = self._backend(self.camera_index)
            if not capture.isOpened():
                raise DeviceUnavailable(f"No camera available at index {self.camera_index}")
        except (PermissionDenied, DeviceUnavailable) as e:
            if capture is not None:
                capture.release()
            self.state = CaptureState.IDLE
            self.error = (
                "Could not access the camera. Please check permissions and try again. "
                "You may need to grant access to the camera device."
            )
            logger.warning("Error accessing camera: %s", e)
            raise

        self._capture = capture
        self.state = CaptureState.STREAMING
        logger.info("Camera %s streaming", self.camera_index)
        return self

    def _read(self) -> np.ndarray:
        if not self.is_streaming:
            raise CaptureNotStreaming(f"Camera is {self.state.value}, not streaming")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise DeviceUnavailable("Camera opened but read() returned no frame")
        return frame

    def capture(self) -> bytes:
        """Grab one still as JPEG bytes. Only valid while streaming."""
        frame = self._read()
        ok, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
        if not ok:
            raise DeviceUnavailable("Could not encode captured frame")
        self.state = CaptureState.CAPTURED
        return buffer.tobytes()

    def close(self):
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Camera %s released", self.camera_index)
        if self.state != CaptureState.IDLE:
            self.state = CaptureState.CLOSED

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
