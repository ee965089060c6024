"""
Compositor

Prepares the pair of images sent to the image editor:
- The source photo letterboxed into a square canvas, aspect ratio preserved
- An alpha mask of the same size, opaque white everywhere except a centered
  box that is cleared to full transparency
"""

from PIL import Image

from door_studio.config import BACKGROUND_COLOR, CANVAS_SIZE
from door_studio.errors import ValidationError
from door_studio.schemas import Composite, ProtectedBox
from door_studio.services.images import decode_image, encode_png
from door_studio.utils import round_half_up

EDITABLE = (255, 255, 255, 255)
PROTECTED = (0, 0, 0, 0)


def fit_scale(src_width: int, src_height: int, canvas_size: int) -> float:
    return min(canvas_size / src_width, canvas_size / src_height)


def letterbox(
    img: Image.Image, canvas_size: int = CANVAS_SIZE, background=BACKGROUND_COLOR
) -> Image.Image:
    """Scale ``img`` to fit inside the canvas and center it on ``background``."""
    scale = fit_scale(img.width, img.height, canvas_size)
    draw_width = max(1, round_half_up(img.width * scale))
    draw_height = max(1, round_half_up(img.height * scale))
    offset_x = round_half_up((canvas_size - draw_width) / 2)
    offset_y = round_half_up((canvas_size - draw_height) / 2)

    scaled = img.convert("RGBA").resize(
        (draw_width, draw_height), Image.Resampling.LANCZOS
    )
    canvas = Image.new("RGB", (canvas_size, canvas_size), background)
    # alpha doubles as the paste mask
    canvas.paste(scaled, (offset_x, offset_y), scaled)
    return canvas


def _check_fraction(value: float, name: str):
    if not 0.0 <= value <= 1.0:
        raise ValidationError(f"{name} must be between 0 and 1, got {value}")


def protected_box(
    canvas_size: int, width_fraction: float, height_fraction: float
) -> ProtectedBox:
    _check_fraction(width_fraction, "Box width")
    _check_fraction(height_fraction, "Box height")
    width = round_half_up(canvas_size * width_fraction)
    height = round_half_up(canvas_size * height_fraction)
    return ProtectedBox(
        x=round_half_up((canvas_size - width) / 2),
        y=round_half_up((canvas_size - height) / 2),
        width=width,
        height=height,
    )


def render_mask(
    canvas_size: int, width_fraction: float, height_fraction: float
) -> Image.Image:
    box = protected_box(canvas_size, width_fraction, height_fraction)
    mask = Image.new("RGBA", (canvas_size, canvas_size), EDITABLE)
    if box.width and box.height:
        mask.paste(
            PROTECTED, (box.x, box.y, box.x + box.width, box.y + box.height)
        )
    return mask


def compose(
    img_bytes: bytes,
    width_fraction: float,
    height_fraction: float,
    canvas_size: int = CANVAS_SIZE,
) -> Composite:
    """Letterbox the photo and build its protection mask, both as PNG bytes."""
    box = protected_box(canvas_size, width_fraction, height_fraction)
    source = decode_image(img_bytes)
    image = letterbox(source, canvas_size)
    mask = render_mask(canvas_size, width_fraction, height_fraction)
    return Composite(
        image=encode_png(image), mask=encode_png(mask), box=box, size=canvas_size
    )
