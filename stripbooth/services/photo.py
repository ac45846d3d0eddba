import asyncio
import base64
import logging
import os
import random
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from stripbooth.config import settings
from stripbooth.models.strip import FrameId, Layout, Orientation
from stripbooth.strip.compositor import StripCompositor, StripResult
from stripbooth.strip.detector import DetectionPolicy, RegionDetector
from stripbooth.strip.errors import DecodeFailure
from stripbooth.strip.frames import FrameCatalog
from stripbooth.strip.imaging import decode_base64_image, encode_base64_png

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@dataclass
class StripOutcome:
    strip: str
    degraded: bool = False
    result: Optional[StripResult] = None


class PhotoService:
    def __init__(self, compositor: StripCompositor, photos_dir: str = settings.photos_dir):
        self.compositor = compositor
        self.photos_dir = photos_dir

    async def create_strip(
        self,
        photos: List[str],
        layout: Optional[Layout] = None,
        frame_id: Optional[FrameId] = None,
        orientation: Optional[Orientation] = None,
    ) -> StripOutcome:
        """Composite base64 photos into a PNG strip.

        If any image cannot be decoded the first capture is returned unedited
        and the outcome is marked degraded.
        """
        if not photos:
            raise ValueError("No photos provided")
        layout = layout or Layout.for_count(len(photos))

        try:
            images = await asyncio.gather(*[run_in_threadpool(decode_base64_image, photo) for photo in photos])
            result = await run_in_threadpool(self.compositor.compose, images, layout, frame_id, orientation)
            strip = await run_in_threadpool(encode_base64_png, result.image)
        except DecodeFailure as exc:
            logger.warning("Strip compositing failed (%s), keeping the first capture", exc)
            return StripOutcome(strip=photos[0], degraded=True)

        logger.info(
            "Created %s strip %dx%d with frame %s",
            layout.value,
            result.image.width,
            result.image.height,
            result.frame_id.value if result.frame_id else "none",
        )
        return StripOutcome(strip=strip, result=result)

    def save_photo(self, photo_b64: str, filename: str = None) -> str:
        img_data = base64.b64decode(photo_b64)
        if filename is None:
            extension = "png" if img_data.startswith(PNG_SIGNATURE) else "jpg"
            filename = f"strip_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}.{extension}"

        filepath = os.path.join(self.photos_dir, filename)
        with open(filepath, 'wb') as f:
            f.write(img_data)

        return filename


frame_catalog = FrameCatalog.from_directory(settings.frames_dir)
photo_service = PhotoService(
    StripCompositor(
        frame_catalog,
        detector=RegionDetector(DetectionPolicy.from_settings(settings)),
        rng=random.Random(settings.random_seed),
    )
)
