from fastapi import APIRouter, HTTPException, Depends
from starlette.concurrency import run_in_threadpool
import asyncio
import base64

from stripbooth.models.session import (
    SessionCreateRequest, SessionCreateResponse, SessionStatusResponse, SessionFinalizeResponse
)
from stripbooth.services.camera import CameraService
from stripbooth.services.capture import run_capture_sequence
from stripbooth.services.photo import PhotoService
from stripbooth.services.session import PhotoSession, SessionStore
from stripbooth.services.websocket import WebSocketManager
from stripbooth.api.dependencies import (
    get_camera_service, get_photo_service, get_session_store, get_websocket_manager
)
from stripbooth.config import settings

router = APIRouter(prefix="/session", tags=["session"])


def _require_session(store: SessionStore) -> PhotoSession:
    session = store.current
    if session is None:
        raise HTTPException(status_code=404, detail="No active session")
    return session


async def _drive_capture(session: PhotoSession, camera_service: CameraService, websocket_manager: WebSocketManager):
    async def capture() -> bytes:
        return await run_in_threadpool(camera_service.capture_photo)

    try:
        await run_capture_sequence(
            session.sequence,
            capture=capture,
            notify=websocket_manager.broadcast,
            pause=settings.pause_between_photos,
        )
    except Exception as exc:
        session.error = str(exc) or type(exc).__name__
        print(f"Capture failed for session {session.session_id}: {exc}")
        await websocket_manager.broadcast({
            "type": "capture_failed",
            "session_id": session.session_id,
            "error": session.error
        })
        return

    await websocket_manager.broadcast({
        "type": "capture_complete",
        "session_id": session.session_id,
        "photo_count": session.sequence.photos_taken
    })


@router.post("/create", response_model=SessionCreateResponse)
async def create_session(
        request: SessionCreateRequest,
        store: SessionStore = Depends(get_session_store)
):
    session = store.create(request.photo_count, request.frame_id, request.orientation)
    print(f"Created session {session.session_id} for {request.photo_count} photos ({session.layout.value})")

    return SessionCreateResponse(
        session_id=session.session_id,
        layout=session.layout,
        photo_count=session.photo_count,
        frame_id=session.frame_id,
        orientation=session.orientation
    )


@router.post("/start")
async def start_capture(
        store: SessionStore = Depends(get_session_store),
        camera_service: CameraService = Depends(get_camera_service),
        websocket_manager: WebSocketManager = Depends(get_websocket_manager)
):
    session = _require_session(store)
    if session.task is not None:
        raise HTTPException(status_code=409, detail="Capture already started for this session")

    session.task = asyncio.create_task(_drive_capture(session, camera_service, websocket_manager))
    return {"success": True, "session_id": session.session_id, "photo_count": session.photo_count}


@router.get("/status", response_model=SessionStatusResponse)
async def get_session_status(store: SessionStore = Depends(get_session_store)):
    session = store.current
    if session is None:
        return SessionStatusResponse(
            session_id=None,
            state="idle",
            photo_count=0,
            photos_taken=0,
            layout=None,
            capture_complete=False
        )

    sequence = session.sequence
    return SessionStatusResponse(
        session_id=session.session_id,
        state=sequence.state.value,
        countdown=sequence.remaining,
        photo_count=sequence.photo_count,
        photos_taken=sequence.photos_taken,
        layout=session.layout,
        frame_id=session.frame_id,
        error=session.error,
        capture_complete=sequence.is_complete,
        photos=[base64.b64encode(photo).decode('utf-8') for photo in sequence.photos] if sequence.is_complete else []
    )


@router.post("/finalize", response_model=SessionFinalizeResponse)
async def finalize_session(
        store: SessionStore = Depends(get_session_store),
        photo_service: PhotoService = Depends(get_photo_service),
        websocket_manager: WebSocketManager = Depends(get_websocket_manager)
):
    session = _require_session(store)
    if not session.sequence.is_complete:
        raise HTTPException(status_code=400, detail="Photo capture not complete yet")

    photos = [base64.b64encode(photo).decode('utf-8') for photo in session.sequence.photos]
    outcome = await photo_service.create_strip(photos, session.layout, session.frame_id, session.orientation)
    filename = photo_service.save_photo(outcome.strip)
    print(f"Finalized session {session.session_id} as {filename}")

    result = outcome.result
    await websocket_manager.broadcast({
        "type": "session_complete",
        "session_id": session.session_id,
        "filename": filename,
        "degraded": outcome.degraded
    })
    store.discard()

    return SessionFinalizeResponse(
        success=True,
        filename=filename,
        download_url=f"/api/photos/{filename}",
        strip=outcome.strip,
        degraded=outcome.degraded,
        frame_id=result.frame_id if result else None,
        used_fallback=result.used_fallback if result else False
    )


@router.delete("/reset")
async def reset_session(store: SessionStore = Depends(get_session_store)):
    store.discard()
    return {"success": True}
