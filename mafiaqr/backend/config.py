"""Configuration helpers for backend runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class BackendSettings:
    database_url: str | None
    store_path: str | None
    host: str
    port: int
    base_url: str
    log_level: str


def load_settings() -> BackendSettings:
    port_raw = os.getenv("MAFIAQR_PORT", "8000")
    return BackendSettings(
        database_url=os.getenv("MAFIAQR_DATABASE_URL"),
        store_path=os.getenv("MAFIAQR_STORE_PATH"),
        host=os.getenv("MAFIAQR_HOST", "127.0.0.1"),
        port=int(port_raw),
        base_url=os.getenv("MAFIAQR_BASE_URL", "http://127.0.0.1:8000/"),
        log_level=os.getenv("MAFIAQR_LOG_LEVEL", "INFO").upper(),
    )
