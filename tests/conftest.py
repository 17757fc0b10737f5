import io
import json
import time
import socket
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from types import SimpleNamespace

import numpy as np
import pytest
from PIL import Image

from plantpal import sample
from plantpal.vision import camera as camera_module


VALID_REPORT = sample.output.model_dump(by_alias=True)


class FakeModels:
    """Stands in for client.models; records every generate_content call."""

    def __init__(self, text=None, exc=None, delay=0.0):
        self.text = text
        self.exc = exc
        self.delay = delay
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.delay:
            time.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(text=self.text)


def make_client(**kwargs):
    """Client factory for GeminiDiagnoser plus the recorder behind it."""
    models = FakeModels(**kwargs)
    client = SimpleNamespace(models=models)
    return (lambda: client), models


class FakeVideoCapture:
    """cv2.VideoCapture double. Class-level registry tracks open devices."""

    instances = []

    def __init__(self, index, opened=True, frame_ok=True):
        self.index = index
        self.opened = opened
        self.frame_ok = frame_ok
        self.released = 0
        self.frame = np.full((48, 64, 3), (30, 160, 60), dtype=np.uint8)
        FakeVideoCapture.instances.append(self)

    def isOpened(self):
        return self.opened

    def read(self):
        if not self.frame_ok:
            return False, None
        return True, self.frame.copy()

    def release(self):
        self.released += 1
        self.opened = False

    @classmethod
    def live(cls):
        return [cap for cap in cls.instances if cap.opened]


@pytest.fixture
def report_json():
    return json.dumps(VALID_REPORT)


@pytest.fixture
def fake_client():
    return make_client


@pytest.fixture
def video_backend(monkeypatch):
    FakeVideoCapture.instances = []
    monkeypatch.setattr(camera_module, "device_node", lambda index: None)
    return FakeVideoCapture


def _image_bytes(fmt, size=(32, 24), color=(34, 139, 34)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return _image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return _image_bytes("JPEG")


@pytest.fixture
def bmp_bytes():
    return _image_bytes("BMP")


class _GeminiStub(BaseHTTPRequestHandler):
    """Answers every generateContent POST with the sample report."""

    hits = []

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        self.rfile.read(length)
        _GeminiStub.hits.append(self.path)
        body = json.dumps({
            "candidates": [
                {
                    "content": {"role": "model", "parts": [{"text": json.dumps(VALID_REPORT)}]},
                    "finishReason": "STOP",
                }
            ]
        }).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def gemini_stub():
    """Local HTTP server speaking just enough of the Gemini API. Yields its base URL."""
    _GeminiStub.hits = []
    server = ThreadingHTTPServer(("127.0.0.1", 0), _GeminiStub)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield SimpleNamespace(url=f"http://127.0.0.1:{server.server_port}", hits=_GeminiStub.hits)
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def closed_port_url():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"
