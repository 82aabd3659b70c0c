"""
Shared fixtures: in-memory images and a scripted HTTP backend.
"""

import json
from io import BytesIO

import httpx
import pytest
from PIL import Image

from magic_studio.api.base import ApiSession
from magic_studio.core.config import ApiConfig, ImageConfig, VideoConfig
from magic_studio.utils.image_utils import UploadedImagePayload


TEST_KEY = "test-key"

# Long enough to pass the plausibility threshold (valid base64 as well)
IMAGE_B64 = "A" * 400


def make_image(width, height, mime_type="image/png", color=(200, 30, 30)):
    fmt = {"image/png": "PNG", "image/jpeg": "JPEG", "image/webp": "WEBP"}[mime_type]
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, fmt)
    return UploadedImagePayload.from_bytes(buffer.getvalue(), mime_type)


def image_response(data=IMAGE_B64, mime_type="image/png"):
    return {
        "candidates": [
            {"content": {"parts": [{"inlineData": {"mimeType": mime_type, "data": data}}]}}
        ]
    }


def text_response(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeApi:
    """
    Scripted backend for ``httpx.MockTransport``.

    Each route maps a URL path suffix to either a callable taking the request
    or a list of responses served in order (the last one repeats).
    """

    EDIT = "gemini-2.5-flash-image-preview:generateContent"
    TRANSLATE = "gemini-2.5-flash:generateContent"
    PREDICT = "imagen-4.0-generate-001:predict"
    SUBMIT = "veo-2.0-generate-001:predictLongRunning"
    OPERATION = "operations/op-1"
    DOWNLOAD = "files/video.mp4"

    IMAGE_B64 = IMAGE_B64
    image_response = staticmethod(image_response)
    text_response = staticmethod(text_response)

    def __init__(self):
        self.routes = {}
        self.requests = []

    def route(self, suffix, *responses):
        if len(responses) == 1 and callable(responses[0]):
            self.routes[suffix] = responses[0]
        else:
            self.routes[suffix] = list(responses)

    def calls(self, suffix):
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    def bodies(self, suffix):
        return [json.loads(r.content) for r in self.calls(suffix)]

    def __call__(self, request):
        self.requests.append(request)
        for suffix, responses in self.routes.items():
            if not request.url.path.endswith(suffix):
                continue
            if callable(responses):
                response = responses(request)
            else:
                response = responses.pop(0) if len(responses) > 1 else responses[0]
            if isinstance(response, httpx.Response):
                return response
            return httpx.Response(200, json=response)
        return httpx.Response(404, json={"error": {"message": "not found"}})


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def http_client(fake_api):
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_api))


@pytest.fixture
def session(http_client):
    return ApiSession(api_key=TEST_KEY, http_client=http_client)


@pytest.fixture
def api_config():
    return ApiConfig(api_key=TEST_KEY)


@pytest.fixture
def image_config():
    return ImageConfig()


@pytest.fixture
def video_config():
    return VideoConfig(poll_interval=10.0)


@pytest.fixture
def subject():
    return make_image(64, 64)


@pytest.fixture
def context():
    return make_image(160, 90, "image/jpeg", color=(20, 90, 200))


@pytest.fixture
def image_factory():
    return make_image
