"""Image decoding and encoding helpers for the compositor."""

from __future__ import annotations

import base64
import binascii
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from .errors import DecodeFailure


def decode_image(image_bytes: bytes) -> Image.Image:
    """Decode image bytes into an upright RGBA PIL Image."""
    try:
        img = Image.open(BytesIO(image_bytes))
        img = ImageOps.exif_transpose(img)
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeFailure("Invalid image bytes") from exc

    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img


def decode_base64_image(data: str) -> Image.Image:
    """Decode a base64 string, with or without a data URL prefix."""
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    try:
        raw = base64.b64decode(data, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise DecodeFailure("Invalid base64 image data") from exc
    return decode_image(raw)


def encode_png(img: Image.Image) -> bytes:
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def encode_base64_png(img: Image.Image) -> str:
    return base64.b64encode(encode_png(img)).decode("utf-8")
