"""
Image processing services

Low level helpers shared by the compositor and the relay:
- Decoding uploaded bytes into Pillow images
- Encoding images to PNG
- Normalizing images to the square canvas sent to the image editor
"""

from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from door_studio.config import MAX_DECODE_PIXELS
from door_studio.errors import DecodeError

Image.MAX_IMAGE_PIXELS = MAX_DECODE_PIXELS


def _too_large(img_type: str) -> DecodeError:
    return DecodeError(
        f"The {img_type} resolution is too large to process, "
        f"limit is {MAX_DECODE_PIXELS / 1_000_000:.0f} megapixels"
    )


def decode_image(img_bytes: bytes, img_type: str = "image") -> Image.Image:
    """
    Open and fully load an upload, upright according to its EXIF orientation.

    The pixel count is checked from the header before any pixel data is
    decoded.
    """
    if not img_bytes:
        raise DecodeError(f"Empty {img_type} upload")
    try:
        img = Image.open(BytesIO(img_bytes))
        width, height = img.size
        if width * height > MAX_DECODE_PIXELS:
            raise _too_large(img_type)
        img.load()
        img = ImageOps.exif_transpose(img)
    except Image.DecompressionBombError as e:
        raise _too_large(img_type) from e
    except (UnidentifiedImageError, OSError) as e:
        raise DecodeError(f"Could not decode {img_type}: {e}") from e
    return img


def encode_png(img: Image.Image) -> bytes:
    output_buffer = BytesIO()
    img.save(output_buffer, format="PNG")
    return output_buffer.getvalue()


def normalize_square_png(img_bytes: bytes, size: int, img_type: str = "image") -> bytes:
    """
    Re-encode an upload as an RGBA PNG of ``size`` x ``size``.

    Non-square input is cover-fitted around its center. Input that already
    has the target size is only converted, so composites coming from the
    compositor keep their exact pixels.
    """
    img = decode_image(img_bytes, img_type).convert("RGBA")
    if img.size != (size, size):
        img = ImageOps.fit(
            img, (size, size), Image.Resampling.LANCZOS, centering=(0.5, 0.5)
        )
    return encode_png(img)
