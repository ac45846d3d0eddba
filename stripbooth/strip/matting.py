"""Key out marker pixels so photos drawn underneath a frame show through."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np
from PIL import Image

from .detector import DetectionPolicy, marker_mask

logger = logging.getLogger(__name__)


def key_out(frame: Image.Image, policy: Optional[DetectionPolicy] = None) -> Tuple[Image.Image, int]:
    """Return a copy of ``frame`` with marker pixels fully transparent, and how many were keyed."""
    policy = policy or DetectionPolicy()
    pixels = np.array(frame.convert("RGBA"))
    mask = marker_mask(pixels, policy)
    pixels[mask, 3] = 0
    return Image.fromarray(pixels, "RGBA"), int(mask.sum())


def matte(frame: Image.Image, used_marker_mode: bool, policy: Optional[DetectionPolicy] = None) -> Image.Image:
    """Frame layer to draw over the placed photos.

    Transparency frames already have alpha holes and are returned as they are.
    """
    if not used_marker_mode:
        return frame
    layer, keyed = key_out(frame, policy)
    logger.info("Made %d marker pixels transparent", keyed)
    return layer
