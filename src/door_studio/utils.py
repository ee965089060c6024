import base64
import ipaddress
import math
import socket
from urllib.parse import urlparse

import requests

from door_studio.config import FETCH_MAX_BYTES, FETCH_TIMEOUT
from door_studio.errors import ValidationError


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going up, the way canvas
    geometry is rounded (``round`` in Python rounds halves to even).
    """
    return int(math.floor(value + 0.5))


def is_remote_url(data: str) -> bool:
    """
    Check if the provided string is an http(s) URL
    """
    return data.startswith(("http://", "https://"))


def check_public_host(url: str):
    """
    Refuse URLs whose host resolves to a loopback, private, link-local or
    otherwise non-public address.
    """
    host = urlparse(url).hostname
    if not host:
        raise ValidationError(f"Unsupported image URL: {url}")
    try:
        infos = socket.getaddrinfo(host, None)
    except socket.gaierror as e:
        raise ValidationError(f"Could not resolve image host {host}: {e}") from e
    for info in infos:
        address = ipaddress.ip_address(info[4][0].split("%", 1)[0])
        if not address.is_global:
            raise ValidationError(f"Image URL points to a non-public address: {host}")


def get_image_bytes_from_url(
    url: str, timeout: float = FETCH_TIMEOUT, max_bytes: int = FETCH_MAX_BYTES
) -> bytes:
    """
    Fetch image bytes from a public URL.

    Redirects are not followed, the response must be ``image/*`` and the
    body is streamed up to ``max_bytes``.
    """
    if not is_remote_url(url):
        raise ValidationError(f"Unsupported image URL: {url}")
    check_public_host(url)

    try:
        resp = requests.get(url, timeout=timeout, stream=True, allow_redirects=False)
        try:
            if resp.status_code != 200:
                raise ValidationError(
                    f"Failed to fetch image from {url}: HTTP {resp.status_code}"
                )
            content_type = resp.headers.get("Content-Type", "")
            if not content_type.lower().startswith("image/"):
                raise ValidationError(
                    f"URL did not return an image (Content-Type: {content_type or 'missing'})"
                )
            length = resp.headers.get("Content-Length", "")
            if length.isdigit() and int(length) > max_bytes:
                raise ValidationError(f"Image at URL is larger than {max_bytes} bytes")

            chunks = []
            total = 0
            for chunk in resp.iter_content(chunk_size=64 * 1024):
                total += len(chunk)
                if total > max_bytes:
                    raise ValidationError(f"Image at URL is larger than {max_bytes} bytes")
                chunks.append(chunk)
            return b"".join(chunks)
        finally:
            resp.close()
    except requests.exceptions.RequestException as e:
        raise ValidationError(f"Failed to fetch image from {url}: {e}") from e


def to_data_url(data: bytes | str, mime: str = "image/png") -> str:
    if isinstance(data, bytes):
        data = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{data}"


def parse_size(size: str) -> tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` size string."""
    try:
        width, height = (int(part) for part in size.lower().split("x"))
    except ValueError as e:
        raise ValidationError(f"Invalid size: {size!r}") from e
    if width <= 0 or height <= 0:
        raise ValidationError(f"Invalid size: {size!r}")
    return width, height
