import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Project root is where .env lives
project_root = Path(__file__).parent.parent
env_path = project_root / ".env"

load_dotenv(dotenv_path=env_path)

# Placeholder values shipped in .env.example
MAPBOX_TOKEN_SENTINEL = "your-mapbox-token"


def mongo_uri() -> Optional[str]:
    return os.getenv("MONGO_URI")


def db_name() -> str:
    return os.getenv("DB_NAME", "gottago")


def mapbox_token() -> Optional[str]:
    """Return the Mapbox token, or None when it is missing or still the placeholder."""
    token = os.getenv("MAPBOX_TOKEN")
    if not token or token == MAPBOX_TOKEN_SENTINEL:
        return None
    return token


def mapbox_style() -> str:
    return os.getenv("MAPBOX_STYLE", "mapbox/dark-v11")


def map_image_size() -> str:
    return os.getenv("MAP_IMAGE_SIZE", "800x600@2x")


def jwt_secret() -> str:
    return os.getenv("JWT_SECRET", "change-me")


def jwt_algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


def access_token_expire_minutes() -> int:
    return int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS")
    if not raw:
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO")
