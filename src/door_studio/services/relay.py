"""
Relay services

Sits between the API endpoints and the image editor:
- Validates the uploads against the active relay profile
- Re-normalizes image and mask to the square PNG canvas
- Forwards them with the prompt and shapes the editor result for the caller
"""

from typing import Optional

from door_studio.config import CANVAS_SIZE
from door_studio.editor import ImageEditor
from door_studio.errors import UpstreamError, ValidationError
from door_studio.logger import console
from door_studio.schemas import ComposeResponse, EditResult, RelayProfile
from door_studio.services.images import normalize_square_png
from door_studio.utils import parse_size, to_data_url


def resolve_size(size: Optional[str], profile: RelayProfile) -> str:
    size = (size or profile.default_size).strip().lower()
    parse_size(size)
    if size not in profile.sizes:
        raise ValidationError(
            f"Unsupported size {size!r} for {profile.model}, "
            f"expected one of {', '.join(profile.sizes)}"
        )
    return size


def prepare_api_response(result: EditResult, size: str) -> ComposeResponse:
    if result.is_empty():
        raise UpstreamError("No image returned from image editor", status_code=502)
    if result.url:
        return ComposeResponse(image=result.url, kind="url", size=size)
    return ComposeResponse(
        image=to_data_url(result.b64_json), kind="b64_json", size=size
    )


def relay_compose(
    editor: ImageEditor,
    profile: RelayProfile,
    image: Optional[bytes],
    mask: Optional[bytes] = None,
    prompt: Optional[str] = None,
    size: Optional[str] = None,
    canvas_size: int = CANVAS_SIZE,
) -> ComposeResponse:
    if not image:
        raise ValidationError("Missing image file (field name: image)")
    if profile.require_mask and not mask:
        raise ValidationError("Missing mask file (field name: mask)")

    size = resolve_size(size, profile)
    image_png = normalize_square_png(image, canvas_size, "image")
    mask_png = normalize_square_png(mask, canvas_size, "mask") if mask else None
    prompt = (prompt or "").strip() or profile.default_prompt

    console.log(
        f"[blue]Relaying edit via profile {profile.name} "
        f"(model={profile.model}, size={size}, mask={mask_png is not None})[/blue]"
    )
    result = editor.edit(
        image_png,
        mask_png,
        prompt,
        model=profile.model,
        size=size,
        response_format=profile.response_format,
    )
    return prepare_api_response(result, size)
