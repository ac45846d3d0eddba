"""Frameless strip renderer: photos stacked on a gradient background."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
from PIL import Image, ImageColor

from stripbooth.models.strip import Layout

PHOTO_WIDTH = 800
PHOTO_HEIGHT = 1000
SPACING = 32

COUPLES_GRADIENT = ("#ff6b6b", "#ff8e8e")
FRIENDS_GRADIENT = ("#4facfe", "#00f2fe")


def linear_gradient(
    size: Tuple[int, int], start: str, end: str, direction: Tuple[float, float]
) -> Image.Image:
    """Gradient from the top-left corner along ``direction``, like a canvas linear gradient."""
    width, height = size
    dx, dy = direction
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
    t = np.clip((xs * dx + ys * dy) / float(dx * dx + dy * dy), 0.0, 1.0)[..., None]
    start_rgb = np.array(ImageColor.getrgb(start), dtype=np.float32)
    end_rgb = np.array(ImageColor.getrgb(end), dtype=np.float32)
    rgb = start_rgb + (end_rgb - start_rgb) * t
    return Image.fromarray(np.round(rgb).astype(np.uint8), "RGB").convert("RGBA")


def stack_photos(photos: Sequence[Image.Image], layout: Layout) -> Image.Image:
    """Couples side by side on a diagonal pink gradient, everyone else stacked on blue."""
    if not photos:
        raise ValueError("No photos provided")

    count = len(photos)
    if Layout(layout) is Layout.couples:
        width = PHOTO_WIDTH * count + SPACING * (count + 1)
        height = PHOTO_HEIGHT + SPACING * 2
        canvas = linear_gradient((width, height), *COUPLES_GRADIENT, direction=(width, height))
        positions = [(SPACING + index * (PHOTO_WIDTH + SPACING), SPACING) for index in range(count)]
    else:
        width = PHOTO_WIDTH + SPACING * 2
        height = PHOTO_HEIGHT * count + SPACING * (count + 1)
        canvas = linear_gradient((width, height), *FRIENDS_GRADIENT, direction=(0, height))
        positions = [(SPACING, SPACING + index * (PHOTO_HEIGHT + SPACING)) for index in range(count)]

    for photo, position in zip(photos, positions):
        cell = photo.convert("RGBA").resize((PHOTO_WIDTH, PHOTO_HEIGHT), Image.Resampling.LANCZOS)
        canvas.alpha_composite(cell, dest=position)
    return canvas
