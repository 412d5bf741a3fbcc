import os

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend import room_registry
from constants import CORS_ORIGINS, LOG_FILE, LOG_LEVEL, SOCKETIO_PATH, STATIC_DIR
from logging_config import get_logger, setup_logging
from routers.rooms import rooms_router
from routers.signaling import SignalingRouter

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)

fastapi_app = FastAPI(title="Signaling Relay")

fastapi_app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if isinstance(CORS_ORIGINS, list) else ["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

fastapi_app.include_router(rooms_router)

# Static client assets, mounted last so API routes take precedence
if os.path.isdir(STATIC_DIR):
    fastapi_app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
    logger.info(f"Serving static assets from {STATIC_DIR}")
else:
    logger.info(f"Static directory {STATIC_DIR} not found, skipping static assets")

# Socket.IO transport: one process, one event loop, registry shared by all handlers
sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins=CORS_ORIGINS)
signaling_router = SignalingRouter(sio, room_registry).register()

app = socketio.ASGIApp(sio, other_asgi_app=fastapi_app, socketio_path=SOCKETIO_PATH)

logger.info("Signaling relay application initialized")
