from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Depends
from starlette.concurrency import run_in_threadpool
import json
import asyncio

from stripbooth.config import settings
from stripbooth.services.camera import CameraService
from stripbooth.services.websocket import WebSocketManager
from stripbooth.api.dependencies import get_camera_service, get_websocket_manager

router = APIRouter()

@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    camera_service: CameraService = Depends(get_camera_service),
    websocket_manager: WebSocketManager = Depends(get_websocket_manager)
):
    await websocket_manager.connect(websocket)
    try:
        while True:
            frame = await run_in_threadpool(camera_service.get_preview_frame)
            if frame:
                await websocket.send_text(json.dumps({
                    "type": "preview",
                    "data": frame
                }))
            await asyncio.sleep(1 / settings.preview_fps)
    except WebSocketDisconnect:
        websocket_manager.disconnect(websocket)
    except Exception as e:
        print(f"WebSocket error: {e}")
        websocket_manager.disconnect(websocket)
