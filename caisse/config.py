# caisse/config.py
from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel

from .store import DB_FILENAME


def _default_db_path() -> str:
    data_dir = Path(os.getenv("CAISSE_DATA_DIR", str(Path.home() / ".caisse")))
    return os.getenv("CAISSE_DB_PATH", str(data_dir / DB_FILENAME))


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


# -------------------
# Config (env-driven)
# -------------------
class Settings(BaseModel):
    db_path: str = _default_db_path()
    seed_locale: str = os.getenv("CAISSE_SEED_LOCALE", "fr").strip().lower()

    host: str = os.getenv("CAISSE_HOST", "127.0.0.1")
    port: int = _env_int("CAISSE_PORT", 8765)
    log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
