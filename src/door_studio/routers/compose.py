from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from door_studio.config import (BOX_HEIGHT_BOUNDS, BOX_WIDTH_BOUNDS,
                                DEFAULT_BOX_HEIGHT, DEFAULT_BOX_WIDTH)
from door_studio.deps import get_image_editor, get_relay_profile
from door_studio.editor import ImageEditor
from door_studio.errors import ValidationError
from door_studio.schemas import ComposeResponse, PrepareResponse, RelayProfile
from door_studio.services.compositor import compose
from door_studio.services.relay import relay_compose
from door_studio.utils import get_image_bytes_from_url, to_data_url

router = APIRouter()


async def read_upload(upload: Optional[UploadFile]) -> Optional[bytes]:
    if upload is None:
        return None
    return await upload.read()


def check_bounds(value: float, bounds: tuple, name: str):
    low, high = bounds
    if not low <= value <= high:
        raise ValidationError(f"{name} must be between {low} and {high}, got {value}")


async def load_source(image: Optional[UploadFile], image_url: str) -> bytes:
    """Read the photo from the upload, or fetch it when only a URL was given."""
    data = await read_upload(image)
    if data:
        return data
    if image_url:
        return await run_in_threadpool(get_image_bytes_from_url, image_url)
    raise ValidationError("Missing image file (field name: image) or image_url")


@router.get("/health")
async def health(profile: RelayProfile = Depends(get_relay_profile)):
    return {"status": "ok", "profile": profile.name}


@router.post("/compose", response_model=ComposeResponse)
async def compose_image(
    image: Optional[UploadFile] = File(None),
    mask: Optional[UploadFile] = File(None),
    prompt: str = Form(""),
    size: str = Form(""),
    editor: ImageEditor = Depends(get_image_editor),
    profile: RelayProfile = Depends(get_relay_profile),
):
    """Forward an already composited image and mask to the image editor."""
    image_bytes = await read_upload(image)
    mask_bytes = await read_upload(mask)
    return await run_in_threadpool(
        relay_compose, editor, profile, image_bytes, mask_bytes, prompt, size
    )


@router.post("/compose/prepare", response_model=PrepareResponse)
async def prepare_composite(
    image: Optional[UploadFile] = File(None),
    image_url: str = Form(""),
    box_width: float = Form(DEFAULT_BOX_WIDTH),
    box_height: float = Form(DEFAULT_BOX_HEIGHT),
):
    """Letterbox a photo and build its protection mask without calling the editor."""
    check_bounds(box_width, BOX_WIDTH_BOUNDS, "box_width")
    check_bounds(box_height, BOX_HEIGHT_BOUNDS, "box_height")
    source = await load_source(image, image_url)

    composite = await run_in_threadpool(compose, source, box_width, box_height)
    return PrepareResponse(
        image=to_data_url(composite.image),
        mask=to_data_url(composite.mask),
        box=composite.box,
        size=composite.size,
    )


@router.post("/compose/door", response_model=ComposeResponse)
async def compose_door(
    image: Optional[UploadFile] = File(None),
    image_url: str = Form(""),
    box_width: float = Form(DEFAULT_BOX_WIDTH),
    box_height: float = Form(DEFAULT_BOX_HEIGHT),
    prompt: str = Form(""),
    size: str = Form(""),
    editor: ImageEditor = Depends(get_image_editor),
    profile: RelayProfile = Depends(get_relay_profile),
):
    """Composite a raw photo and relay it to the image editor in one call."""
    check_bounds(box_width, BOX_WIDTH_BOUNDS, "box_width")
    check_bounds(box_height, BOX_HEIGHT_BOUNDS, "box_height")
    source = await load_source(image, image_url)

    composite = await run_in_threadpool(compose, source, box_width, box_height)
    return await run_in_threadpool(
        relay_compose,
        editor,
        profile,
        composite.image,
        composite.mask,
        prompt,
        size,
        composite.size,
    )


def get_router():
    return router
