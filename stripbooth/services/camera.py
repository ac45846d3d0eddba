import base64
import logging
from typing import Optional

import cv2

from stripbooth.config import settings

logger = logging.getLogger(__name__)


class CameraUnavailable(RuntimeError):
    pass


class CameraService:
    def __init__(self, index: int = settings.camera_index):
        self.index = index
        self.camera = None
        self.is_active = False

    def initialize(self) -> bool:
        camera = cv2.VideoCapture(self.index)
        if not camera.isOpened():
            camera.release()
            logger.warning("Could not open camera %d", self.index)
            return False

        camera.set(cv2.CAP_PROP_FRAME_WIDTH, settings.camera_width)
        camera.set(cv2.CAP_PROP_FRAME_HEIGHT, settings.camera_height)
        camera.set(cv2.CAP_PROP_FPS, settings.camera_fps)

        self.camera = camera
        self.is_active = True
        return True

    def _read_frame(self):
        if not self.is_active or self.camera is None:
            if not self.initialize():
                raise CameraUnavailable("Camera not available")

        ret, frame = self.camera.read()
        if not ret:
            raise CameraUnavailable("Failed to read a camera frame")
        if settings.camera_mirror:
            frame = cv2.flip(frame, 1)
        return frame

    def capture_photo(self) -> bytes:
        """Full resolution JPEG bytes of the current frame."""
        frame = self._read_frame()
        ok, buffer = cv2.imencode('.jpg', frame, [cv2.IMWRITE_JPEG_QUALITY, settings.photo_quality])
        if not ok:
            raise CameraUnavailable("Failed to encode photo")
        return buffer.tobytes()

    def get_preview_frame(self) -> Optional[str]:
        try:
            frame = self._read_frame()
        except CameraUnavailable:
            return None

        height, width = frame.shape[:2]
        preview_height = int(height * settings.preview_width / width)
        frame = cv2.resize(frame, (settings.preview_width, preview_height))

        _, buffer = cv2.imencode('.jpg', frame, [cv2.IMWRITE_JPEG_QUALITY, settings.preview_quality])
        return base64.b64encode(buffer).decode('utf-8')

    def cleanup(self):
        if self.camera:
            self.camera.release()
            self.is_active = False


camera_service = CameraService()
