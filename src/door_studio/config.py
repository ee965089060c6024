"""Configuration values for the application, read from the environment."""

import os

from dotenv import load_dotenv

load_dotenv()

OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_TIMEOUT: float = float(os.getenv("OPENAI_TIMEOUT", "120"))  # seconds

RELAY_PROFILE: str = os.getenv("RELAY_PROFILE", "dalle2-url")

CANVAS_SIZE: int = int(os.getenv("CANVAS_SIZE", "1024"))
BACKGROUND_COLOR: tuple = (255, 255, 255)
DALLE2_SIZES: tuple = ("256x256", "512x512", "1024x1024")
GPT_IMAGE_SIZES: tuple = ("1024x1024", "1024x1536", "1536x1024")
DEFAULT_SIZE: str = "1024x1024"

# Uploads larger than this are refused before decoding
MAX_DECODE_PIXELS: int = int(float(os.getenv("MAX_DECODE_MEGAPIXELS", "36")) * 1_000_000)

# Remote photos fetched through image_url
FETCH_TIMEOUT: float = float(os.getenv("FETCH_TIMEOUT", "10"))  # seconds
FETCH_MAX_BYTES: int = int(os.getenv("FETCH_MAX_BYTES", str(20 * 1024 * 1024)))

# Slider ranges of the editor, as fractions of the canvas
BOX_WIDTH_BOUNDS: tuple = (0.20, 0.80)
BOX_HEIGHT_BOUNDS: tuple = (0.50, 0.95)
DEFAULT_BOX_WIDTH: float = 0.45
DEFAULT_BOX_HEIGHT: float = 0.80

DEFAULT_PROMPT: str = (
    "Regenerate the room background to look realistic and premium, "
    "but keep the door (leaf, frame, casing, glass, hardware) untouched."
)

CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "http://localhost:3000,*").split(",")
