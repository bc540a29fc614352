"""
Shared fakes for the Gemini / Veo backend.

The fake mirrors the slice of google-genai the client touches:
client.aio.models.generate_content / generate_videos and client.aio.operations.get.
"""
import base64
import os
import sys
from types import SimpleNamespace

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from schemas import RetryPolicy, TaggedImage
from agents import GenerationClient, StaticCredentialProvider, VideoJobPoller
from utils.error_manager import ErrorManager


# ==========================================================================
# Response builders
# ==========================================================================

def text_response(text):
    return SimpleNamespace(text=text, candidates=[])


def image_response(data=b"\x89PNG-fake"):
    part = SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type="image/png"), text=None)
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def no_image_response():
    part = SimpleNamespace(inline_data=None, text="I cannot draw that.")
    return SimpleNamespace(text="I cannot draw that.", candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def operation(done=False, uri=None, error=None):
    response = None
    if uri is not None:
        response = SimpleNamespace(generated_videos=[SimpleNamespace(video=SimpleNamespace(uri=uri))])
    return SimpleNamespace(done=done, response=response, error=error)


# ==========================================================================
# Fake backend
# ==========================================================================

class FakeBackend:
    """
    `content` and `video` are callables receiving the call kwargs and returning
    a response (or raising). `operations` is the queue served by operations.get.
    """

    def __init__(self, content=None, video=None, operations=None):
        self.content = content or (lambda **kw: text_response(""))
        self.video = video or (lambda **kw: operation(done=True, uri="https://video/default"))
        self.operations = list(operations or [])
        self.api_keys = []
        self.content_calls = []
        self.video_calls = []
        self.operation_checks = 0

    def factory(self, api_key):
        self.api_keys.append(api_key)
        backend = self

        class _Models:
            async def generate_content(self, **kwargs):
                backend.content_calls.append(kwargs)
                return backend.content(**kwargs)

            async def generate_videos(self, **kwargs):
                backend.video_calls.append(kwargs)
                return backend.video(**kwargs)

        class _Operations:
            async def get(self, op):
                backend.operation_checks += 1
                return backend.operations.pop(0)

        return SimpleNamespace(aio=SimpleNamespace(models=_Models(), operations=_Operations()))


class SleepRecorder:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture(autouse=True)
def isolated_error_ledger(tmp_path, monkeypatch):
    monkeypatch.setattr(ErrorManager, "LOG_FILE", str(tmp_path / "api_errors.log"))


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def credentials():
    return StaticCredentialProvider("test-key")


@pytest.fixture
def make_client(credentials, sleeps):
    def _make(backend, policy=None):
        poller = VideoJobPoller(policy or RetryPolicy(interval_sec=5), sleep=sleeps)
        return GenerationClient(credentials=credentials, client_factory=backend.factory, poller=poller)
    return _make


@pytest.fixture
def product_image():
    return TaggedImage(data=b"jpeg-bytes", mime_type="image/jpeg", tag="@img1")


@pytest.fixture
def model_image():
    return TaggedImage(data=b"model-bytes", mime_type="image/jpeg", tag="@img2")


def b64(data):
    return base64.b64encode(data).decode("ascii")
