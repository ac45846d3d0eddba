from fastapi import APIRouter, Depends

from stripbooth.models.strip import (
    FRAME_ORIENTATIONS, FRAME_PHOTO_COUNTS, FrameId, FrameInfo, RegionModel, StripRequest, StripResponse
)
from stripbooth.services.photo import PhotoService
from stripbooth.api.dependencies import get_photo_service

router = APIRouter(tags=["strips"])


@router.post("/strips", response_model=StripResponse)
async def create_strip(
        request: StripRequest,
        photo_service: PhotoService = Depends(get_photo_service)
):
    outcome = await photo_service.create_strip(
        request.photos, request.layout, request.frame_id, request.orientation
    )
    result = outcome.result
    if result is None:
        return StripResponse(success=True, strip=outcome.strip, degraded=outcome.degraded)

    return StripResponse(
        success=True,
        strip=outcome.strip,
        frame_id=result.frame_id,
        orientation=result.orientation,
        used_marker_mode=result.used_marker_mode,
        used_fallback=result.used_fallback,
        used_legacy=result.used_legacy,
        regions=[
            RegionModel(center_x=r.center_x, center_y=r.center_y, width=r.width, height=r.height)
            for r in result.regions
        ]
    )


@router.get("/frames")
async def list_frames(photo_service: PhotoService = Depends(get_photo_service)):
    catalog = photo_service.compositor.catalog
    frames = [
        FrameInfo(
            frame_id=frame_id,
            photo_count=FRAME_PHOTO_COUNTS[frame_id],
            orientation=FRAME_ORIENTATIONS[frame_id],
            available=frame_id in catalog
        )
        for frame_id in FrameId
    ]
    return {"frames": frames}
