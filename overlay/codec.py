import base64
import binascii
import io
from typing import Union

from PIL import Image, UnidentifiedImageError

from .errors import InvalidOverlayInput


def data_url_to_bytes(data: str) -> bytes:
    """Accept a bare base64 string or a `data:image/...;base64,` URL."""
    payload = data.split(",", 1)[1] if "," in data else data
    # MIME-style base64 arrives wrapped at 76 columns.
    payload = "".join(payload.split())
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidOverlayInput(f"Image data is not valid base64: {exc}") from exc


def to_data_url(raw: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"


def decode_image(data: Union[bytes, str]) -> Image.Image:
    """Decode raw image bytes, base64 or a data URL into a loaded Pillow image."""
    raw = data_url_to_bytes(data) if isinstance(data, str) else data
    try:
        with Image.open(io.BytesIO(raw)) as img:
            return img.copy()
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidOverlayInput(f"Could not decode base image: {exc}") from exc


def encode_png(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
