"""Service configuration loaded from environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_MAX_UPLOAD_BYTES = 32 * 1024 * 1024


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""
    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    env: str = "development"
    log_level: str = "INFO"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    jpeg_quality: int = 95


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        env=os.getenv("ENV", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
        jpeg_quality=int(os.getenv("JPEG_QUALITY", "95")),
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return _build_settings()
