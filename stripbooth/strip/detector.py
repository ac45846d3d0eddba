"""Photo slot detection inside decorative frame images.

Frames mark their photo windows one of two ways:

* marker mode: the windows are painted a saturated green, keyed out later;
* transparency mode: the windows are alpha holes enclosed by frame artwork.

Either way the marked pixels are split into equal bands (halves, thirds or
quarters), one per photo, and each band's pixel extent becomes a region that
is grown toward its band and then clamped so neighbours can never overlap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import cv2
import numpy as np
from PIL import Image

from stripbooth.models.strip import Orientation

from .errors import UnsupportedPhotoCount
from .geometry import Region, RegionBounds, accumulate_bounds, slot_band, splits_horizontally

logger = logging.getLogger(__name__)

SUPPORTED_PHOTO_COUNTS = (2, 3, 4)
_SLOT_LABELS = {
    3: ("top", "middle", "bottom"),
    4: ("top", "top-mid", "bottom-mid", "bottom"),
}


@dataclass(frozen=True)
class DetectionPolicy:
    """Pixel classification thresholds; all of them are empirical."""

    green_min: int = 100
    green_dominance: float = 1.5
    min_marker_pixels: int = 1000
    alpha_threshold: int = 128
    side_margin: float = 0.05

    @classmethod
    def from_settings(cls, settings) -> "DetectionPolicy":
        return cls(
            green_min=settings.marker_green_min,
            green_dominance=settings.marker_green_dominance,
            min_marker_pixels=settings.min_marker_pixels,
            alpha_threshold=settings.alpha_threshold,
            side_margin=settings.side_margin,
        )


@dataclass(frozen=True)
class SlotPolicy:
    """How a detected slot is grown and clamped along its split axis."""

    expansion: float
    gap_margin: float
    min_fraction: float
    band_cap: float = 1.0
    band_floor: Optional[float] = None


# Keyed by (photo_count, used_marker_mode).
SLOT_POLICIES = {
    (2, True): SlotPolicy(expansion=1.2, gap_margin=0.10, min_fraction=0.8, band_cap=0.90),
    (2, False): SlotPolicy(expansion=1.2, gap_margin=0.10, min_fraction=0.8, band_cap=0.90),
    (3, True): SlotPolicy(expansion=1.2, gap_margin=0.10, min_fraction=0.8, band_cap=0.85),
    (3, False): SlotPolicy(expansion=1.2, gap_margin=0.10, min_fraction=0.8, band_cap=0.85),
    (4, True): SlotPolicy(expansion=1.0, gap_margin=0.12, min_fraction=0.8, band_floor=0.70),
    (4, False): SlotPolicy(expansion=0.95, gap_margin=0.15, min_fraction=0.7, band_cap=0.70),
}


@dataclass
class Detection:
    regions: List[Region] = field(default_factory=list)
    used_marker_mode: bool = False
    orientation: Orientation = Orientation.portrait
    marker_pixels: int = 0


def rgba_pixels(frame: Image.Image) -> np.ndarray:
    if frame.mode != "RGBA":
        frame = frame.convert("RGBA")
    return np.asarray(frame)


def marker_mask(pixels: np.ndarray, policy: DetectionPolicy) -> np.ndarray:
    """Boolean mask of saturated green marker pixels."""
    rgb = pixels[..., :3].astype(np.float32)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    return (
        (g > policy.green_min)
        & (g > r * policy.green_dominance)
        & (g > b * policy.green_dominance)
    )


def transparent_mask(pixels: np.ndarray, policy: DetectionPolicy) -> np.ndarray:
    return pixels[..., 3] < policy.alpha_threshold


def border_reachable(transparent: np.ndarray) -> np.ndarray:
    """Transparent pixels 4-connected to any transparent pixel on the image edge."""
    _, labels = cv2.connectedComponents(transparent.astype(np.uint8), connectivity=4)
    edge_labels = np.unique(
        np.concatenate((labels[0, :], labels[-1, :], labels[:, 0], labels[:, -1]))
    )
    edge_labels = edge_labels[edge_labels != 0]
    if edge_labels.size == 0:
        return np.zeros_like(transparent, dtype=bool)
    return np.isin(labels, edge_labels)


def bleeding_windows(transparent: np.ndarray, photo_count: int, portrait: bool) -> np.ndarray:
    """Edge-touching transparent components cut straight across one band.

    A window that bleeds off the frame runs from one side to the opposite side
    (left to right when slots stack vertically, top to bottom for two landscape
    slots) without leaving its band. A transparent outer ring or rounded
    corners never qualify.
    """
    count, labels, stats, _ = cv2.connectedComponentsWithStats(
        transparent.astype(np.uint8), connectivity=4
    )
    height, width = transparent.shape
    horizontal = splits_horizontally(photo_count, portrait)
    windows = np.zeros_like(transparent, dtype=bool)
    for label in range(1, count):
        left, top, box_width, box_height = stats[label, :4]
        if horizontal:
            spans = top == 0 and top + box_height == height
            first, last, extent = left, left + box_width - 1, width
        else:
            spans = left == 0 and left + box_width == width
            first, last, extent = top, top + box_height - 1, height
        if spans and first * photo_count // extent == last * photo_count // extent:
            windows |= labels == label
    return windows


def resolve_portrait(width: int, height: int, orientation: Optional[Orientation]) -> bool:
    if orientation is not None:
        return Orientation(orientation) is Orientation.portrait
    return height > width


def _constrain(extent: float, base: float, band: float, max_extent: float, policy: SlotPolicy) -> float:
    min_extent = base * policy.min_fraction
    if policy.band_floor is not None:
        floor = band * policy.band_floor
        min_extent = max(min_extent, floor)
        if max_extent >= min_extent:
            return min(max(extent, floor), max_extent)
        return max_extent
    if max_extent >= min_extent:
        return min(extent, max_extent)
    # Never exceed max_extent, even below the minimum size.
    return min(min_extent, max_extent, band * policy.band_cap)


def finalize_region(
    bounds: RegionBounds,
    index: int,
    width: int,
    height: int,
    photo_count: int,
    portrait: bool,
    slot_policy: SlotPolicy,
    side_margin: float,
) -> Region:
    """Grow a slot's pixel extent into a region that stays inside its band."""
    center_x, center_y = bounds.center
    region_width = bounds.width * slot_policy.expansion
    region_height = bounds.height * slot_policy.expansion

    start, end = slot_band(index, width, height, photo_count, portrait)
    band = end - start
    margin = band * slot_policy.gap_margin

    if splits_horizontally(photo_count, portrait):
        max_half = min(center_x - start - margin, end - center_x - margin)
        region_width = _constrain(
            region_width, bounds.width, band, max(0.0, 2 * max_half), slot_policy
        )
    else:
        max_half = min(center_y - start - margin, end - center_y - margin)
        region_height = _constrain(
            region_height, bounds.height, band, max(0.0, 2 * max_half), slot_policy
        )

    region_width = min(region_width, width - 2 * width * side_margin)
    return Region(center_x=center_x, center_y=center_y, width=region_width, height=region_height)


def order_regions(regions: Sequence[Region], photo_count: int, portrait: bool) -> List[Region]:
    """Put regions in capture order: left/top first for two, top-down otherwise."""
    ordered = list(regions)
    if len(ordered) != photo_count:
        return ordered
    if photo_count == 2:
        first, second = ordered
        if portrait:
            swap = first.center_y > second.center_y
        else:
            swap = first.center_x > second.center_x
        return [second, first] if swap else ordered
    return sorted(ordered, key=lambda region: region.center_y)


def slot_labels(photo_count: int, portrait: bool) -> Sequence[str]:
    if photo_count == 2:
        return ("top", "bottom") if portrait else ("left", "right")
    return _SLOT_LABELS[photo_count]


class RegionDetector:
    def __init__(self, policy: Optional[DetectionPolicy] = None):
        self.policy = policy or DetectionPolicy()

    def detect(
        self,
        frame: Image.Image,
        photo_count: int,
        orientation: Optional[Orientation] = None,
    ) -> Detection:
        """Find ``photo_count`` photo windows in ``frame``.

        Fewer regions come back when some band holds no marked pixels; the
        caller decides what to do about it.
        """
        if photo_count not in SUPPORTED_PHOTO_COUNTS:
            raise UnsupportedPhotoCount(f"Cannot detect {photo_count} photo regions")

        pixels = rgba_pixels(frame)
        height, width = pixels.shape[:2]
        portrait = resolve_portrait(width, height, orientation)
        resolved = Orientation.portrait if portrait else Orientation.landscape

        markers = marker_mask(pixels, self.policy)
        marker_pixels = int(markers.sum())
        logger.debug("Found %d marker pixels in %dx%d frame", marker_pixels, width, height)

        if marker_pixels >= self.policy.min_marker_pixels:
            used_marker_mode = True
            mask = markers
            logger.info("Using marker detection (%s, %d regions)", resolved.value, photo_count)
        else:
            used_marker_mode = False
            transparent = transparent_mask(pixels, self.policy)
            mask = transparent & ~border_reachable(transparent)
            if not mask.any() and transparent.any():
                mask = bleeding_windows(transparent, photo_count, portrait)
                logger.info("No enclosed transparency, %d edge-bleeding window pixels", int(mask.sum()))
            logger.info(
                "Using transparency detection (%s, %d interior pixels)",
                resolved.value,
                int(mask.sum()),
            )

        bounds = accumulate_bounds(mask, photo_count, portrait)
        slot_policy = SLOT_POLICIES[(photo_count, used_marker_mode)]
        labels = slot_labels(photo_count, portrait)

        regions = []
        for index, slot in enumerate(bounds):
            if slot.count == 0:
                logger.debug("Slot %s has no pixels", labels[index])
                continue
            region = finalize_region(
                slot, index, width, height, photo_count, portrait, slot_policy, self.policy.side_margin
            )
            logger.debug(
                "Slot %s: %d px, center (%.0f, %.0f), size %.0fx%.0f",
                labels[index],
                slot.count,
                region.center_x,
                region.center_y,
                region.width,
                region.height,
            )
            regions.append(region)

        return Detection(
            regions=order_regions(regions, photo_count, portrait),
            used_marker_mode=used_marker_mode,
            orientation=resolved,
            marker_pixels=marker_pixels,
        )
