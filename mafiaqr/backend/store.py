"""Persistence interfaces and implementations for event configurations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import tempfile
from typing import Any, Protocol

from mafiaqr.backend.models import EventConfig

logger = logging.getLogger(__name__)


class EventConfigStore(Protocol):
    def get(self, event_id: str) -> EventConfig | None:
        """Return the event configuration, or None when unknown."""

    def put(self, event_id: str, config: EventConfig) -> None:
        """Create or replace the event configuration."""


@dataclass
class InMemoryEventStore:
    def __post_init__(self) -> None:
        self._events: dict[str, EventConfig] = {}

    def get(self, event_id: str) -> EventConfig | None:
        return self._events.get(event_id)

    def put(self, event_id: str, config: EventConfig) -> None:
        self._events[event_id] = config
        logger.info("Stored event %s in memory", event_id)


@dataclass
class JsonFileEventStore:
    """Device-local store: one JSON document mapping event id to config."""

    path: Path

    def _load(self) -> dict[str, Any]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable event store %s: %s", self.path, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def get(self, event_id: str) -> EventConfig | None:
        payload = self._load().get(event_id)
        if not isinstance(payload, dict):
            return None
        try:
            return EventConfig.from_dict(payload)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed event %s in %s: %s", event_id, self.path, exc)
            return None

    def put(self, event_id: str, config: EventConfig) -> None:
        events = self._load()
        events[event_id] = config.to_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Readers only ever see the old document or the complete new one.
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            json.dump(events, handle, ensure_ascii=False, indent=2)
        staged = Path(handle.name)
        try:
            staged.replace(self.path)
        except OSError:
            staged.unlink(missing_ok=True)
            raise
        logger.info("Stored event %s in %s", event_id, self.path)


@dataclass
class PostgresEventStore:
    database_url: str

    def _connect(self) -> Any:
        import psycopg

        return psycopg.connect(self.database_url)

    def get(self, event_id: str) -> EventConfig | None:
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT config_json
                    FROM event_configs
                    WHERE id = %s
                    """,
                    (event_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        (config_json,) = row
        payload = config_json if isinstance(config_json, dict) else json.loads(config_json)
        try:
            return EventConfig.from_dict(payload)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring malformed event %s in PostgreSQL: %s", event_id, exc)
            return None

    def put(self, event_id: str, config: EventConfig) -> None:
        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO event_configs (id, config_json, created_at, updated_at)
                    VALUES (%s, %s::jsonb, %s, %s)
                    ON CONFLICT (id) DO UPDATE
                    SET config_json = EXCLUDED.config_json, updated_at = EXCLUDED.updated_at
                    """,
                    (event_id, json.dumps(config.to_dict()), now, now),
                )
            conn.commit()
        logger.info("Stored event %s in PostgreSQL", event_id)


def create_store(database_url: str | None, store_path: str | None = None) -> EventConfigStore:
    if database_url:
        return PostgresEventStore(database_url=database_url)
    if store_path:
        return JsonFileEventStore(path=Path(store_path))
    return InMemoryEventStore()
