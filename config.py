# config.py
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

# --- Defaults ---
DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB per file
DEFAULT_PORT = 4000
PUBLIC_PREFIX = "/uploads"
UPLOAD_FIELD = "images[]"


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed to constructors."""
    storage_root: Path
    base_url: Optional[str] = None
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    cors_origins: Tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"

    def __post_init__(self):
        # storage_root is always absolute so containment checks compare like with like
        object.__setattr__(self, "storage_root", Path(self.storage_root).resolve())
        if self.base_url:
            object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.max_file_size <= 0:
            raise ValueError(f"max_file_size must be positive, got {self.max_file_size}")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def load_settings(env_file: Optional[str] = None) -> Settings:
    load_dotenv(env_file)

    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        storage_root=Path(os.getenv("UPLOAD_DIR", DEFAULT_UPLOAD_DIR)),
        base_url=os.getenv("BASE_URL") or None,
        max_file_size=_int_env("MAX_FILE_SIZE_BYTES", DEFAULT_MAX_FILE_SIZE),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_env("PORT", DEFAULT_PORT),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
