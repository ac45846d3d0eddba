"""Synthetic frames and photos for compositing tests."""

import base64
import io
from typing import Dict, Iterable, Tuple

from PIL import Image, ImageDraw

from stripbooth.models.strip import FrameId
from stripbooth.strip.frames import FrameCatalog

GREEN = (0, 200, 0, 255)
WHITE = (255, 255, 255, 255)
ARTWORK = (120, 60, 200, 255)
CLEAR = (0, 0, 0, 0)

Box = Tuple[int, int, int, int]


def marker_frame(size: Tuple[int, int], boxes: Iterable[Box], background=WHITE) -> Image.Image:
    """Frame with green marker rectangles; boxes are inclusive (x0, y0, x1, y1)."""
    img = Image.new("RGBA", size, background)
    draw = ImageDraw.Draw(img)
    for box in boxes:
        draw.rectangle(box, fill=GREEN)
    return img


def holed_frame(size: Tuple[int, int], boxes: Iterable[Box], background=ARTWORK) -> Image.Image:
    """Opaque frame with fully transparent rectangles punched into it."""
    img = Image.new("RGBA", size, background)
    draw = ImageDraw.Draw(img)
    for box in boxes:
        draw.rectangle(box, fill=CLEAR)
    return img


def solid_photo(size: Tuple[int, int], color) -> Image.Image:
    return Image.new("RGB", size, color)


def png_bytes(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def jpeg_b64(img: Image.Image) -> str:
    buffer = io.BytesIO()
    img.convert("RGB").save(buffer, format="JPEG", quality=95)
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


def catalog_of(frames: Dict[FrameId, Image.Image]) -> FrameCatalog:
    encoded = {frame_id: png_bytes(img) for frame_id, img in frames.items()}
    return FrameCatalog({frame_id: (lambda data=data: data) for frame_id, data in encoded.items()})
