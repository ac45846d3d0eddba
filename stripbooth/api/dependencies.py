from stripbooth.services.camera import camera_service
from stripbooth.services.photo import photo_service
from stripbooth.services.websocket import websocket_manager
from stripbooth.services.session import session_store

def get_camera_service():
    return camera_service

def get_photo_service():
    return photo_service

def get_websocket_manager():
    return websocket_manager

def get_session_store():
    return session_store
