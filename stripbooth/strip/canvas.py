"""Drawing surface with explicit, per-call clip rectangles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image

from .geometry import BBox, Region


@dataclass(frozen=True)
class Placement:
    """Where an aspect-filled photo lands relative to its region."""

    scale: float
    scaled_width: float
    scaled_height: float
    offset_x: float
    offset_y: float

    def covers(self, region: Region) -> bool:
        tolerance = 1e-6
        return (
            self.offset_x <= region.left + tolerance
            and self.offset_y <= region.top + tolerance
            and self.offset_x + self.scaled_width >= region.right - tolerance
            and self.offset_y + self.scaled_height >= region.bottom - tolerance
        )


def aspect_fill(photo_width: int, photo_height: int, region: Region) -> Placement:
    """Scale a photo to cover ``region`` completely, centred on it."""
    if photo_width <= 0 or photo_height <= 0:
        raise ValueError("Photo dimensions must be positive")
    scale = max(region.width / photo_width, region.height / photo_height)
    scaled_width = photo_width * scale
    scaled_height = photo_height * scale
    return Placement(
        scale=scale,
        scaled_width=scaled_width,
        scaled_height=scaled_height,
        offset_x=region.center_x - scaled_width / 2,
        offset_y=region.center_y - scaled_height / 2,
    )


class Canvas:
    """An RGBA surface sized to the frame; every draw names its own clip."""

    def __init__(self, size: Tuple[int, int], background: Tuple[int, int, int, int] = (0, 0, 0, 0)):
        self.image = Image.new("RGBA", size, background)

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def draw_in_region(self, photo: Image.Image, region: Region) -> Optional[Placement]:
        """Aspect-fill ``photo`` into ``region``, drawing nothing outside it.

        Returns ``None`` when the region has no visible pixels on the canvas.
        """
        clip = region.clip_box(*self.size)
        if clip[2] <= clip[0] or clip[3] <= clip[1]:
            return None

        placement = aspect_fill(photo.width, photo.height, region)
        origin_x = math.floor(placement.offset_x)
        origin_y = math.floor(placement.offset_y)
        target_width = max(1, math.ceil(placement.offset_x + placement.scaled_width) - origin_x)
        target_height = max(1, math.ceil(placement.offset_y + placement.scaled_height) - origin_y)

        source = photo if photo.mode == "RGBA" else photo.convert("RGBA")
        scaled = source.resize((target_width, target_height), Image.Resampling.LANCZOS)
        visible = scaled.crop(_shift(clip, -origin_x, -origin_y))
        self.image.alpha_composite(visible, dest=(clip[0], clip[1]))
        return placement

    def overlay(self, layer: Image.Image) -> None:
        """Composite a full-canvas layer on top, scaling it if its size differs."""
        if layer.mode != "RGBA":
            layer = layer.convert("RGBA")
        if layer.size != self.size:
            layer = layer.resize(self.size, Image.Resampling.LANCZOS)
        self.image.alpha_composite(layer)


def _shift(box: BBox, dx: int, dy: int) -> BBox:
    return (box[0] + dx, box[1] + dy, box[2] + dx, box[3] + dy)
