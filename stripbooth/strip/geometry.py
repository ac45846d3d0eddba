"""Rectangles, pixel-extent accumulators and slot banding for frame analysis."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

BBox = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Region:
    """A photo placement rectangle in frame pixel coordinates."""

    center_x: float
    center_y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.center_x - self.width / 2

    @property
    def top(self) -> float:
        return self.center_y - self.height / 2

    @property
    def right(self) -> float:
        return self.center_x + self.width / 2

    @property
    def bottom(self) -> float:
        return self.center_y + self.height / 2

    def intersects(self, other: "Region") -> bool:
        """True when the two rectangles share interior area."""
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def clip_box(self, width: int, height: int) -> BBox:
        """Integer pixel box of this region clamped to a canvas."""
        x1 = max(0, min(int(round(self.left)), width))
        y1 = max(0, min(int(round(self.top)), height))
        x2 = max(0, min(int(round(self.right)), width))
        y2 = max(0, min(int(round(self.bottom)), height))
        return (x1, y1, x2, y2)


@dataclass
class RegionBounds:
    """Running pixel extent of one slot during a classification scan."""

    min_x: float = float("inf")
    max_x: float = float("-inf")
    min_y: float = float("inf")
    max_y: float = float("-inf")
    count: int = 0

    def include(self, xs: np.ndarray, ys: np.ndarray) -> None:
        if xs.size == 0:
            return
        self.min_x = min(self.min_x, int(xs.min()))
        self.max_x = max(self.max_x, int(xs.max()))
        self.min_y = min(self.min_y, int(ys.min()))
        self.max_y = max(self.max_y, int(ys.max()))
        self.count += int(xs.size)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)


def splits_horizontally(photo_count: int, portrait: bool) -> bool:
    """Whether slots are laid out left-to-right instead of top-to-bottom."""
    return photo_count == 2 and not portrait


def slot_indices(
    xs: np.ndarray, ys: np.ndarray, width: int, height: int, photo_count: int, portrait: bool
) -> np.ndarray:
    """Assign each pixel coordinate to the equal band that contains it.

    Bands split the height, except for two landscape slots, which split the
    width. ``coord * n // extent`` is ``coord < k * extent / n`` done in
    integers, so pixels on a band edge always land in the later band.
    """
    if splits_horizontally(photo_count, portrait):
        coords, extent = xs, width
    else:
        coords, extent = ys, height
    slots = (coords.astype(np.int64) * photo_count) // extent
    return np.minimum(slots, photo_count - 1)


def slot_band(index: int, width: int, height: int, photo_count: int, portrait: bool) -> Tuple[float, float]:
    """Start and end of a slot's band along the split axis."""
    extent = width if splits_horizontally(photo_count, portrait) else height
    size = extent / photo_count
    return index * size, (index + 1) * size


def accumulate_bounds(
    mask: np.ndarray, photo_count: int, portrait: bool
) -> List[RegionBounds]:
    """Collect per-slot pixel extents for every set pixel of ``mask``."""
    height, width = mask.shape
    bounds = [RegionBounds() for _ in range(photo_count)]
    ys, xs = np.nonzero(mask)
    if xs.size == 0:
        return bounds
    slots = slot_indices(xs, ys, width, height, photo_count, portrait)
    for index, region in enumerate(bounds):
        selected = slots == index
        region.include(xs[selected], ys[selected])
    return bounds
