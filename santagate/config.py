from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


BACKENDS = ("file", "redis", "sql")


@dataclass(frozen=True)
class Settings:
    storage_backend: str = "file"
    state_file: str = "state.json"
    redis_url: str = "redis://localhost:6379/0"
    redis_key: str = "santagate:state"
    database_url: str = "sqlite:///santagate.db"
    # Empty means /api/reset is not password gated.
    reset_password: str = ""
    reshuffle_on_start: bool = False
    result_path: str = "/result.html"
    frontend_dir: str = ""
    log_level: str = "INFO"
    log_path: str = ""
    host: str = "0.0.0.0"
    port: int = 8080


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))

    backend = os.getenv("SANTA_STORAGE", "file").strip().lower()
    if backend not in BACKENDS:
        raise ValueError(f"SANTA_STORAGE must be one of {', '.join(BACKENDS)}, got {backend!r}.")

    port_raw = os.getenv("PORT", "8080").strip() or "8080"
    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer, got {port_raw!r}.") from None

    return Settings(
        storage_backend=backend,
        state_file=os.getenv("SANTA_STATE_FILE", "state.json"),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        redis_key=os.getenv("SANTA_REDIS_KEY", "santagate:state"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///santagate.db"),
        reset_password=os.getenv("SANTA_RESET_PASSWORD", ""),
        reshuffle_on_start=_env_flag("SANTA_RESHUFFLE_ON_START"),
        result_path=os.getenv("SANTA_RESULT_PATH", "/result.html"),
        frontend_dir=os.getenv("SANTA_FRONTEND_DIR", "").strip(),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_path=os.getenv("LOG_PATH", "").strip(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
    )
