"""
Shared service instances that can be injected into any endpoint

Manages:
- The image-editor client
- The active relay profile

Keeping them here gives a single point to override in tests through
``app.dependency_overrides``.
"""

from door_studio.config import OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_TIMEOUT, RELAY_PROFILE
from door_studio.editor import ImageEditor, OpenAIImageEditor
from door_studio.profiles import get_profile
from door_studio.schemas import RelayProfile

image_editor = OpenAIImageEditor(
    api_key=OPENAI_API_KEY,
    base_url=OPENAI_BASE_URL,
    timeout=OPENAI_TIMEOUT,
)

active_profile = get_profile(RELAY_PROFILE)


def get_image_editor() -> ImageEditor:
    return image_editor


def get_relay_profile() -> RelayProfile:
    return active_profile
