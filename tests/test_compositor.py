from io import BytesIO

import pytest
from PIL import Image

from conftest import make_png, open_png
from door_studio.errors import DecodeError, ValidationError
from door_studio.services.compositor import (
    compose,
    fit_scale,
    letterbox,
    protected_box,
    render_mask,
)
from door_studio.services.images import decode_image, normalize_square_png

WHITE = (255, 255, 255)
RED = (200, 30, 30)


def is_red(pixel):
    return all(abs(a - b) <= 2 for a, b in zip(pixel, RED))


def test_fit_scale_uses_limiting_side():
    assert fit_scale(2000, 1000, 1024) == pytest.approx(0.512)
    assert fit_scale(500, 1000, 1024) == pytest.approx(1.024)


def test_letterbox_wide_image_pads_top_and_bottom():
    img = Image.new("RGB", (2000, 1000), RED)
    out = letterbox(img, 1024)

    assert out.size == (1024, 1024)
    # drawn at 1024x512, offset 256 vertically
    assert out.getpixel((512, 255)) == WHITE
    assert is_red(out.getpixel((512, 256)))
    assert is_red(out.getpixel((512, 767)))
    assert out.getpixel((512, 768)) == WHITE
    assert is_red(out.getpixel((0, 512)))
    assert is_red(out.getpixel((1023, 512)))


def test_letterbox_tall_image_pads_left_and_right():
    img = Image.new("RGB", (300, 600), RED)
    out = letterbox(img, 1024)

    assert out.size == (1024, 1024)
    assert out.getpixel((255, 512)) == WHITE
    assert is_red(out.getpixel((256, 512)))
    assert is_red(out.getpixel((767, 512)))
    assert out.getpixel((768, 512)) == WHITE


def test_letterbox_transparent_source_shows_background():
    img = Image.new("RGBA", (100, 100), (0, 0, 0, 0))
    out = letterbox(img, 64)
    assert out.mode == "RGB"
    assert out.getpixel((32, 32)) == WHITE


def test_protected_box_door_defaults():
    box = protected_box(1024, 0.45, 0.80)
    assert (box.width, box.height) == (461, 819)
    assert (box.x, box.y) == (282, 103)


@pytest.mark.parametrize(
    "fw,fh", [(0.2, 0.5), (0.45, 0.8), (0.8, 0.95), (0.33, 0.67), (0.0, 1.0)]
)
def test_protected_box_is_centered(fw, fh):
    box = protected_box(1024, fw, fh)
    left, right = box.x, 1024 - box.x - box.width
    top, bottom = box.y, 1024 - box.y - box.height
    assert abs(left - right) <= 1
    assert abs(top - bottom) <= 1


@pytest.mark.parametrize("fw,fh", [(-0.1, 0.5), (0.5, 1.2)])
def test_protected_box_rejects_out_of_range(fw, fh):
    with pytest.raises(ValidationError):
        protected_box(1024, fw, fh)


def test_render_mask_polarity():
    mask = render_mask(1024, 0.45, 0.80)
    box = protected_box(1024, 0.45, 0.80)
    alpha = mask.getchannel("A")

    assert mask.size == (1024, 1024)
    assert mask.mode == "RGBA"
    # inside corners
    assert alpha.getpixel((box.x, box.y)) == 0
    assert alpha.getpixel((box.x + box.width - 1, box.y + box.height - 1)) == 0
    # just outside
    assert alpha.getpixel((box.x - 1, box.y)) == 255
    assert alpha.getpixel((box.x + box.width, box.y)) == 255
    assert alpha.getpixel((box.x, box.y - 1)) == 255
    assert alpha.getpixel((box.x, box.y + box.height)) == 255
    assert mask.getpixel((0, 0)) == (255, 255, 255, 255)
    # strictly two-valued
    assert set(alpha.getdata()) == {0, 255}
    assert alpha.histogram()[0] == box.width * box.height


def test_compose_returns_matching_pngs():
    composite = compose(make_png((1600, 900)), 0.45, 0.80)
    image = open_png(composite.image)
    mask = open_png(composite.mask)

    assert image.format == "PNG" and mask.format == "PNG"
    assert image.size == mask.size == (1024, 1024)
    assert composite.size == 1024
    assert composite.box == protected_box(1024, 0.45, 0.80)


def test_compose_custom_canvas():
    composite = compose(make_png((64, 32)), 0.5, 0.5, canvas_size=256)
    assert open_png(composite.image).size == (256, 256)
    assert open_png(composite.mask).size == (256, 256)
    assert (composite.box.x, composite.box.y) == (64, 64)


def test_compose_rejects_undecodable_bytes():
    with pytest.raises(DecodeError):
        compose(b"definitely not an image", 0.45, 0.80)


def test_renormalizing_composite_keeps_geometry():
    composite = compose(make_png((1600, 900)), 0.45, 0.80)
    box = composite.box

    image = open_png(normalize_square_png(composite.image, 1024))
    mask = open_png(normalize_square_png(composite.mask, 1024, "mask"))

    assert image.size == mask.size == (1024, 1024)
    alpha = mask.getchannel("A")
    assert alpha.getbbox() == (0, 0, 1024, 1024)
    inverted = alpha.point(lambda a: 255 - a)
    assert inverted.getbbox() == (box.x, box.y, box.x + box.width, box.y + box.height)


def make_rotated_jpeg(size=(200, 100), orientation=6) -> bytes:
    exif = Image.Exif()
    exif[0x0112] = orientation
    buf = BytesIO()
    Image.new("RGB", size, RED).save(buf, format="JPEG", exif=exif)
    return buf.getvalue()


def test_decode_applies_exif_orientation():
    img = decode_image(make_rotated_jpeg())
    assert img.size == (100, 200)


def test_compose_letterboxes_exif_rotated_photo_upright():
    composite = compose(make_rotated_jpeg(), 0.45, 0.80)
    image = open_png(composite.image).convert("RGB")

    # shown as 100x200 portrait: drawn 512x1024 with side padding
    assert image.getpixel((5, 512)) == WHITE
    assert image.getpixel((1018, 512)) == WHITE
    assert image.getpixel((512, 5)) != WHITE


def test_decode_refuses_images_over_pixel_limit(monkeypatch):
    monkeypatch.setattr("door_studio.services.images.MAX_DECODE_PIXELS", 100 * 100)
    with pytest.raises(DecodeError, match="too large"):
        decode_image(make_png((200, 200)))


def test_decode_turns_decompression_bomb_into_decode_error(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(DecodeError, match="too large"):
        compose(make_png((400, 400)), 0.45, 0.80)
