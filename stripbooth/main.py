import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from stripbooth.config import settings
from stripbooth.api.routes import session, photos, strips, websocket
from stripbooth.services.camera import camera_service, CameraUnavailable
from stripbooth.services.photo import frame_catalog
from stripbooth.strip.errors import StripError, UnsupportedPhotoCount

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    debug=settings.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(session.router, prefix="/api")
app.include_router(photos.router, prefix="/api")
app.include_router(strips.router, prefix="/api")
app.include_router(websocket.router)
app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")


@app.exception_handler(CameraUnavailable)
async def camera_unavailable_handler(request: Request, exc: CameraUnavailable):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(UnsupportedPhotoCount)
async def unsupported_count_handler(request: Request, exc: UnsupportedPhotoCount):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(StripError)
async def strip_error_handler(request: Request, exc: StripError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.on_event("startup")
async def startup_event():
    logging.getLogger(__name__).info("%d frame assets available", len(frame_catalog))
    camera_service.initialize()

@app.on_event("shutdown")
async def shutdown_event():
    camera_service.cleanup()

@app.get("/health")
async def health_check():
    return {"status": "healthy", "camera_active": camera_service.is_active, "frames": len(frame_catalog)}
