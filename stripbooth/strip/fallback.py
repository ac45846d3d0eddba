"""Fixed proportional photo positions for frames where detection fails."""

from __future__ import annotations

from typing import List

from stripbooth.models.strip import Orientation

from .geometry import Region


def fallback_regions(
    frame_width: float, frame_height: float, photo_count: int, orientation: Orientation
) -> List[Region]:
    if frame_width <= 0 or frame_height <= 0:
        raise ValueError("Frame dimensions must be positive")

    if photo_count == 2:
        if Orientation(orientation) is Orientation.portrait:
            return [
                Region(frame_width / 2, frame_height * fraction, frame_width * 0.4, frame_height * 0.25)
                for fraction in (0.3, 0.7)
            ]
        return [
            Region(frame_width * fraction, frame_height / 2, frame_width * 0.25, frame_height * 0.4)
            for fraction in (0.3, 0.7)
        ]

    if photo_count in (3, 4):
        band = frame_height / photo_count
        return [
            Region(frame_width / 2, band * (index + 0.5), frame_width * 0.8, band * 0.8)
            for index in range(photo_count)
        ]

    raise ValueError(f"No fallback layout for {photo_count} photos")
