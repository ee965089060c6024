"""
Data models and validation

Defines the Pydantic models used to:
- Describe the relay configuration profiles
- Carry compositor and image-editor results between layers
- Document the API responses in OpenAPI
"""

from typing import Literal, Optional

from pydantic import BaseModel


class RelayProfile(BaseModel):
    name: str
    model: str
    require_mask: bool = False
    response_format: Literal["url", "b64_json"] = "url"
    default_prompt: str = ""
    default_size: str = "1024x1024"
    sizes: tuple[str, ...] = ("1024x1024",)


class ProtectedBox(BaseModel):
    x: int
    y: int
    width: int
    height: int


class Composite(BaseModel):
    image: bytes
    mask: bytes
    box: ProtectedBox
    size: int


class EditResult(BaseModel):
    url: Optional[str] = None
    b64_json: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.url and not self.b64_json


class ComposeResponse(BaseModel):
    image: str
    kind: Literal["url", "b64_json"]
    size: str


class PrepareResponse(BaseModel):
    image: str
    mask: str
    box: ProtectedBox
    size: int
