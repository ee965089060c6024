import base64
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from door_studio.deps import get_image_editor, get_relay_profile
from door_studio.main import app
from door_studio.profiles import PROFILES
from door_studio.schemas import EditResult


def make_png(size=(200, 100), color=(200, 30, 30), mode="RGB") -> bytes:
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


def open_png(data: bytes) -> Image.Image:
    return Image.open(BytesIO(data))


def decode_data_url(data_url: str) -> bytes:
    assert data_url.startswith("data:image/png;base64,")
    return base64.b64decode(data_url.split(",", 1)[1])


class FakeEditor:
    """Records calls and returns a canned result."""

    def __init__(self, result=None, error=None):
        self.result = result if result is not None else EditResult(url="https://cdn.test/out.png")
        self.error = error
        self.calls = []

    def edit(self, image, mask, prompt, *, model, size, response_format):
        self.calls.append(
            {
                "image": image,
                "mask": mask,
                "prompt": prompt,
                "model": model,
                "size": size,
                "response_format": response_format,
            }
        )
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_editor():
    return FakeEditor()


@pytest.fixture
def profile():
    return PROFILES["dalle2-url"]


@pytest.fixture
def client(fake_editor, profile):
    app.dependency_overrides[get_image_editor] = lambda: fake_editor
    app.dependency_overrides[get_relay_profile] = lambda: profile
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
