import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 5000))
RELOAD = os.getenv("RELOAD", "false").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

STATIC_DIR = os.getenv("STATIC_DIR", "public")
SOCKETIO_PATH = os.getenv("SOCKETIO_PATH", "socket.io")

_cors = os.getenv("CORS_ORIGINS", "*")
CORS_ORIGINS = "*" if _cors.strip() == "*" else [o.strip() for o in _cors.split(",") if o.strip()]
