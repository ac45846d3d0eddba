from pydantic_settings import BaseSettings
from typing import Optional
import os


class Settings(BaseSettings):
    app_name: str = "Stripbooth"
    app_description: str = "A web photobooth that composites captured photos into decorative frame strips"
    debug: bool = False
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8000

    camera_index: int = 0
    camera_width: int = 1920
    camera_height: int = 1080
    camera_fps: int = 30
    camera_mirror: bool = True
    preview_width: int = 640
    preview_fps: int = 15

    photo_quality: int = 95
    preview_quality: int = 60
    static_dir: str = "stripbooth/static"
    photos_dir: str = "stripbooth/static/photos"
    frames_dir: str = "stripbooth/static/frames"

    countdown_seconds: int = 3
    pause_between_photos: float = 1.5

    # Frame detection policy
    marker_green_min: int = 100
    marker_green_dominance: float = 1.5
    min_marker_pixels: int = 1000
    alpha_threshold: int = 128
    side_margin: float = 0.05

    random_seed: Optional[int] = None

    class Config:
        env_file = ".env"
        env_prefix = "STRIPBOOTH_"


settings = Settings()
os.makedirs(settings.photos_dir, exist_ok=True)
os.makedirs(settings.frames_dir, exist_ok=True)
