from pydantic import BaseModel, Field
from typing import List, Optional

from stripbooth.models.strip import FrameId, Layout, Orientation


class SessionCreateRequest(BaseModel):
    photo_count: int = Field(2, ge=2, le=4)
    frame_id: Optional[FrameId] = None
    orientation: Optional[Orientation] = None


class SessionCreateResponse(BaseModel):
    session_id: str
    layout: Layout
    photo_count: int
    frame_id: Optional[FrameId] = None
    orientation: Optional[Orientation] = None


class SessionStatusResponse(BaseModel):
    session_id: Optional[str]
    state: str
    countdown: int = 0
    photo_count: int
    photos_taken: int
    layout: Optional[Layout]
    frame_id: Optional[FrameId] = None
    capture_complete: bool
    error: Optional[str] = None
    photos: List[str] = []


class SessionFinalizeResponse(BaseModel):
    success: bool
    filename: str
    download_url: str
    strip: str
    degraded: bool = False
    frame_id: Optional[FrameId] = None
    used_fallback: bool = False
