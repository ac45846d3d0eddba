from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Tuple
from enum import Enum


class Layout(str, Enum):
    couples = "couples"
    friends = "friends"

    @property
    def photo_counts(self) -> Tuple[int, ...]:
        return (2,) if self is Layout.couples else (3, 4)

    def accepts(self, photo_count: int) -> bool:
        return photo_count in self.photo_counts

    @classmethod
    def for_count(cls, photo_count: int) -> "Layout":
        return cls.couples if photo_count == 2 else cls.friends


class Orientation(str, Enum):
    portrait = "portrait"
    landscape = "landscape"


class FrameId(str, Enum):
    landscape = "landscape"
    portrait1 = "portrait1"
    portrait2 = "portrait2"
    portrait3 = "portrait3"
    three1 = "three1"
    three2 = "three2"
    three3 = "three3"
    three4 = "three4"
    three5 = "three5"
    four1 = "four1"
    four2 = "four2"
    four3 = "four3"


FRAME_PHOTO_COUNTS: Dict[FrameId, int] = {
    FrameId.landscape: 2,
    FrameId.portrait1: 2,
    FrameId.portrait2: 2,
    FrameId.portrait3: 2,
    FrameId.three1: 3,
    FrameId.three2: 3,
    FrameId.three3: 3,
    FrameId.three4: 3,
    FrameId.three5: 3,
    FrameId.four1: 4,
    FrameId.four2: 4,
    FrameId.four3: 4,
}

FRAME_ORIENTATIONS: Dict[FrameId, Orientation] = {
    frame_id: Orientation.landscape if frame_id is FrameId.landscape else Orientation.portrait
    for frame_id in FrameId
}


class StripRequest(BaseModel):
    photos: List[str] = Field(..., min_length=1, description="Base64 encoded photos in capture order")
    layout: Optional[Layout] = None
    frame_id: Optional[FrameId] = None
    orientation: Optional[Orientation] = None


class RegionModel(BaseModel):
    center_x: float
    center_y: float
    width: float
    height: float


class StripResponse(BaseModel):
    success: bool
    strip: str
    degraded: bool = False
    frame_id: Optional[FrameId] = None
    orientation: Optional[Orientation] = None
    used_marker_mode: bool = False
    used_fallback: bool = False
    used_legacy: bool = False
    regions: List[RegionModel] = []


class FrameInfo(BaseModel):
    frame_id: FrameId
    photo_count: int
    orientation: Orientation
    available: bool
