"""Named relay configurations, one per supported editing model setup."""

from door_studio.config import (DALLE2_SIZES, DEFAULT_PROMPT, DEFAULT_SIZE,
                                GPT_IMAGE_SIZES)
from door_studio.schemas import RelayProfile

PROFILES: dict[str, RelayProfile] = {
    "dalle2-url": RelayProfile(
        name="dalle2-url",
        model="dall-e-2",
        require_mask=False,
        response_format="url",
        default_prompt=DEFAULT_PROMPT,
        default_size=DEFAULT_SIZE,
        sizes=DALLE2_SIZES,
    ),
    "dalle2-mask": RelayProfile(
        name="dalle2-mask",
        model="dall-e-2",
        require_mask=True,
        response_format="url",
        default_prompt=DEFAULT_PROMPT,
        default_size=DEFAULT_SIZE,
        sizes=DALLE2_SIZES,
    ),
    "gpt-image": RelayProfile(
        name="gpt-image",
        model="gpt-image-1",
        require_mask=True,
        response_format="b64_json",
        default_prompt=DEFAULT_PROMPT,
        default_size=DEFAULT_SIZE,
        sizes=GPT_IMAGE_SIZES,
    ),
}


def get_profile(name: str) -> RelayProfile:
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(
            f"Unknown relay profile {name!r}, expected one of {sorted(PROFILES)}"
        ) from None
