"""Frame asset lookup."""

from __future__ import annotations

import logging
import os
from functools import partial
from typing import Callable, Dict, List, Mapping, Optional, Union

from stripbooth.models.strip import FRAME_ORIENTATIONS, FRAME_PHOTO_COUNTS, FrameId, Orientation

from .errors import FrameAssetMissing

logger = logging.getLogger(__name__)

FrameLoader = Callable[[], bytes]


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class FrameCatalog:
    """Maps frame identifiers to loaders for their image bytes.

    Keys are checked when the catalog is built, so an unknown identifier fails
    here rather than during compositing.
    """

    def __init__(self, loaders: Mapping[Union[FrameId, str], FrameLoader]):
        self._loaders: Dict[FrameId, FrameLoader] = {}
        for key, loader in loaders.items():
            try:
                frame_id = FrameId(key)
            except ValueError:
                raise ValueError(f"Unknown frame identifier: {key!r}") from None
            if not callable(loader):
                raise TypeError(f"Loader for {frame_id.value} is not callable")
            self._loaders[frame_id] = loader

    @classmethod
    def from_directory(cls, directory: str) -> "FrameCatalog":
        loaders = {}
        missing = []
        for frame_id in FrameId:
            path = os.path.join(directory, f"{frame_id.value}.png")
            if os.path.isfile(path):
                loaders[frame_id] = partial(_read_file, path)
            else:
                missing.append(frame_id.value)
        if not loaders:
            logger.warning("No frame assets in %s, strips will use the gradient layout", directory)
        elif missing:
            logger.warning("Frame assets missing from %s: %s", directory, ", ".join(missing))
        return cls(loaders)

    def __contains__(self, frame_id) -> bool:
        return frame_id in self._loaders

    def __len__(self) -> int:
        return len(self._loaders)

    def variants(self, photo_count: int, orientation: Optional[Orientation] = None) -> List[FrameId]:
        """Registered frames for a photo count, in declaration order."""
        return [
            frame_id
            for frame_id in FrameId
            if frame_id in self._loaders
            and FRAME_PHOTO_COUNTS[frame_id] == photo_count
            and (orientation is None or FRAME_ORIENTATIONS[frame_id] is Orientation(orientation))
        ]

    def load(self, frame_id: FrameId) -> bytes:
        loader = self._loaders.get(FrameId(frame_id))
        if loader is None:
            raise FrameAssetMissing(f"No asset registered for frame {FrameId(frame_id).value}")
        try:
            return loader()
        except FileNotFoundError as exc:
            raise FrameAssetMissing(f"Asset for frame {FrameId(frame_id).value} not found") from exc
