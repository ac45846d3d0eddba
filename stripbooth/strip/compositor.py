"""Photo strip compositing: photos placed into a frame's windows, frame on top."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from PIL import Image

from stripbooth.models.strip import FRAME_ORIENTATIONS, FRAME_PHOTO_COUNTS, FrameId, Layout, Orientation

from .canvas import Canvas
from .detector import DetectionPolicy, RegionDetector, order_regions, slot_labels
from .errors import FrameAssetMissing
from .fallback import fallback_regions
from .frames import FrameCatalog
from .geometry import Region
from .imaging import decode_image, encode_png
from .legacy import stack_photos
from .matting import matte

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameSelection:
    frame_id: FrameId
    orientation: Orientation


@dataclass
class StripResult:
    image: Image.Image
    frame_id: Optional[FrameId] = None
    orientation: Optional[Orientation] = None
    regions: List[Region] = field(default_factory=list)
    used_marker_mode: bool = False
    used_fallback: bool = False
    used_legacy: bool = False


class StripCompositor:
    def __init__(
        self,
        catalog: FrameCatalog,
        detector: Optional[RegionDetector] = None,
        rng: Optional[random.Random] = None,
        policy: Optional[DetectionPolicy] = None,
    ):
        self.catalog = catalog
        self.policy = policy or (detector.policy if detector else DetectionPolicy())
        self.detector = detector or RegionDetector(self.policy)
        self.rng = rng or random.Random()

    def select_frame(
        self,
        photos: Sequence[Image.Image],
        frame_id: Optional[FrameId] = None,
        orientation: Optional[Orientation] = None,
    ) -> Optional[FrameSelection]:
        """Pick the frame for these photos, or ``None`` if no frame fits."""
        count = len(photos)
        if frame_id is not None:
            try:
                frame_id = FrameId(frame_id)
            except ValueError:
                logger.warning("Unknown frame %r, choosing one", frame_id)
                frame_id = None
        if frame_id is not None:
            if FRAME_PHOTO_COUNTS[frame_id] == count and frame_id in self.catalog:
                if count == 2:
                    resolved = FRAME_ORIENTATIONS[frame_id]
                else:
                    resolved = Orientation.portrait
                logger.info("Using selected frame %s", frame_id.value)
                return FrameSelection(frame_id, Orientation(resolved))
            logger.warning("Frame %s does not fit %d photos, choosing one", frame_id.value, count)

        if count == 2:
            if orientation is None:
                first = photos[0]
                orientation = Orientation.portrait if first.height > first.width else Orientation.landscape
                logger.info(
                    "First photo is %dx%d, using %s frame", first.width, first.height, orientation.value
                )
            candidates = self.catalog.variants(2, orientation)
            resolved = Orientation(orientation)
        else:
            candidates = self.catalog.variants(count)
            resolved = Orientation.portrait

        if not candidates:
            return None
        return FrameSelection(self.rng.choice(candidates), resolved)

    def compose(
        self,
        photos: Sequence[Image.Image],
        layout: Layout,
        frame_id: Optional[FrameId] = None,
        orientation: Optional[Orientation] = None,
    ) -> StripResult:
        """Build a strip from decoded photos, in the order given."""
        if not photos:
            raise ValueError("No photos provided")

        layout = Layout(layout)
        count = len(photos)
        if not layout.accepts(count):
            logger.warning("%s layout cannot frame %d photos, stacking instead", layout.value, count)
            return StripResult(image=stack_photos(photos, layout), used_legacy=True)

        selection = self.select_frame(photos, frame_id, orientation)
        if selection is None:
            logger.warning("No frame assets for %d photos, stacking instead", count)
            return StripResult(image=stack_photos(photos, layout), used_legacy=True)

        try:
            frame_bytes = self.catalog.load(selection.frame_id)
        except FrameAssetMissing:
            logger.warning("Frame %s could not be loaded, stacking instead", selection.frame_id.value)
            return StripResult(image=stack_photos(photos, layout), used_legacy=True)
        frame = decode_image(frame_bytes)

        canvas = Canvas(frame.size)
        detection = self.detector.detect(frame, count, selection.orientation)
        portrait = selection.orientation is Orientation.portrait

        if len(detection.regions) == count:
            regions = order_regions(detection.regions, count, portrait)
            used_fallback = False
        else:
            logger.warning(
                "Detected %d regions in frame %s, expected %d; using fallback positions",
                len(detection.regions),
                selection.frame_id.value,
                count,
            )
            regions = fallback_regions(frame.width, frame.height, count, selection.orientation)
            used_fallback = True

        labels = slot_labels(count, portrait)
        for index, (photo, region) in enumerate(zip(photos, regions)):
            placement = canvas.draw_in_region(photo, region)
            if placement is not None:
                logger.debug(
                    "Photo %d -> %s, scale %.3f", index + 1, labels[index], placement.scale
                )

        canvas.overlay(matte(frame, detection.used_marker_mode, self.policy))
        return StripResult(
            image=canvas.image,
            frame_id=selection.frame_id,
            orientation=selection.orientation,
            regions=regions,
            used_marker_mode=detection.used_marker_mode,
            used_fallback=used_fallback,
        )

    def composite(
        self,
        photos: Sequence[bytes],
        layout: Layout,
        frame_id: Optional[FrameId] = None,
        orientation: Optional[Orientation] = None,
    ) -> bytes:
        """Decode, compose and encode as PNG. Decode failures propagate."""
        images = [decode_image(data) for data in photos]
        return encode_png(self.compose(images, layout, frame_id, orientation).image)
