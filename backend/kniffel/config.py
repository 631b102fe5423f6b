import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Empty means: pick per platform in create_app
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rooms
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "2"))
    MAX_PLAYERS = int(os.environ.get("MAX_PLAYERS", "6"))
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "4"))

    # Automated players: thinking time before each action
    AI_DELAY_EASY_SEC = float(os.environ.get("AI_DELAY_EASY_SEC", "0.8"))
    AI_DELAY_MEDIUM_SEC = float(os.environ.get("AI_DELAY_MEDIUM_SEC", "1.2"))
    AI_DELAY_HARD_SEC = float(os.environ.get("AI_DELAY_HARD_SEC", "1.6"))
    # Run AI steps in the calling thread instead of a background task
    AI_RUN_INLINE = os.environ.get("AI_RUN_INLINE", "0") == "1"
