"""
Client for the external image-editing service.

All communication with the provider lives here, behind the small
``ImageEditor`` interface the relay depends on: submit an image, an optional
mask and a prompt, get back either a URL or inline base64 image data.

Responsibilities:
- Building the multipart request for the OpenAI images/edits endpoint
- Translating provider error payloads into ``UpstreamError``
- Parsing both response shapes into an ``EditResult``
"""

from io import BytesIO
from typing import Optional, Protocol

import requests

from door_studio.errors import UpstreamError
from door_studio.logger import console
from door_studio.schemas import EditResult


class ImageEditor(Protocol):
    def edit(
        self,
        image: bytes,
        mask: Optional[bytes],
        prompt: str,
        *,
        model: str,
        size: str,
        response_format: str,
    ) -> EditResult: ...


def extract_error_message(response: requests.Response) -> str:
    """Pick the most specific message out of a provider error response."""
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if payload.get("message"):
            return str(payload["message"])

    if response.text:
        return response.text
    return f"Image edit failed with status {response.status_code}"


def parse_edit_response(payload: dict) -> EditResult:
    data = payload.get("data") or []
    if not data:
        return EditResult()
    first = data[0] or {}
    return EditResult(url=first.get("url"), b64_json=first.get("b64_json"))


class OpenAIImageEditor:

    def __init__(self, api_key: str, base_url: str, timeout: float = 120):
        self.api_key = api_key
        self.edit_url = f"{base_url.rstrip('/')}/images/edits"
        self.timeout = timeout

    def edit(
        self,
        image: bytes,
        mask: Optional[bytes],
        prompt: str,
        *,
        model: str,
        size: str,
        response_format: str,
    ) -> EditResult:
        if not self.api_key:
            raise UpstreamError("OPENAI_API_KEY is not configured", status_code=500)

        files = {"image": ("image.png", BytesIO(image), "image/png")}
        if mask is not None:
            files["mask"] = ("mask.png", BytesIO(mask), "image/png")
        data = {"model": model, "prompt": prompt, "n": "1", "size": size}
        # gpt-image models always answer with b64_json and reject the field
        if model.startswith("dall-e"):
            data["response_format"] = response_format

        try:
            resp = requests.post(
                self.edit_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                data=data,
                files=files,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            console.log(f"[red]Error reaching image editor: {e}[/red]")
            raise UpstreamError(f"Error reaching image editor: {e}") from e

        if not resp.ok:
            message = extract_error_message(resp)
            console.log(f"[red]Image editor error {resp.status_code}: {message}[/red]")
            # an upstream 400 stays a client error
            status = 400 if resp.status_code == 400 else 502
            raise UpstreamError(message, status_code=status)

        try:
            payload = resp.json()
        except ValueError as e:
            raise UpstreamError("Image editor returned a non-JSON response") from e
        return parse_edit_response(payload)
