import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from stripbooth.config import settings
from stripbooth.models.strip import FrameId, Layout, Orientation
from stripbooth.services.capture import CaptureSequence

logger = logging.getLogger(__name__)


@dataclass
class PhotoSession:
    session_id: str
    layout: Layout
    sequence: CaptureSequence
    frame_id: Optional[FrameId] = None
    orientation: Optional[Orientation] = None
    task: Optional[asyncio.Task] = None
    error: Optional[str] = None

    @property
    def photo_count(self) -> int:
        return self.sequence.photo_count

    @property
    def is_running(self) -> bool:
        return self.task is not None and not self.task.done()


class SessionStore:
    """Holds the booth's current capture session; one session at a time."""

    def __init__(self):
        self.sessions: Dict[str, PhotoSession] = {}
        self.current_id: Optional[str] = None

    @property
    def current(self) -> Optional[PhotoSession]:
        if self.current_id is None:
            return None
        return self.sessions.get(self.current_id)

    def create(
        self,
        photo_count: int,
        frame_id: Optional[FrameId] = None,
        orientation: Optional[Orientation] = None,
        countdown_seconds: int = settings.countdown_seconds,
    ) -> PhotoSession:
        self.discard()
        session = PhotoSession(
            session_id=str(uuid.uuid4()),
            layout=Layout.for_count(photo_count),
            sequence=CaptureSequence(photo_count, countdown_seconds),
            frame_id=frame_id,
            orientation=orientation,
        )
        self.sessions[session.session_id] = session
        self.current_id = session.session_id
        return session

    def discard(self):
        session = self.current
        if session is not None:
            if session.is_running:
                session.task.cancel()
                logger.info("Cancelled capture for session %s", session.session_id)
            del self.sessions[session.session_id]
        self.current_id = None


session_store = SessionStore()
