import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    backend: str = field(default_factory=lambda: os.getenv("POST_STORE_BACKEND", "memory").lower())
    firebase_credentials: str = field(default_factory=lambda: os.getenv("FIREBASE_CREDENTIALS", "./firebase.json"))
    posts_collection: str = field(default_factory=lambda: os.getenv("POSTS_COLLECTION", "posts"))
    empty_results_as_error: bool = field(default_factory=lambda: _env_bool("EMPTY_RESULTS_AS_ERROR", True))
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "http://localhost:3000"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())


def get_settings() -> Settings:
    return Settings()
