"""Event identifiers and organizer PIN checks."""

from __future__ import annotations

import secrets
import string
from typing import Protocol

from .models import EventConfig

EVENT_ID_LENGTH = 8
EVENT_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_event_id() -> str:
    """Generate an 8-character uppercase alphanumeric event id."""
    return "".join(secrets.choice(EVENT_ID_ALPHABET) for _ in range(EVENT_ID_LENGTH))


def is_valid_event_id(event_id: str) -> bool:
    return len(event_id) == EVENT_ID_LENGTH and all(char in EVENT_ID_ALPHABET for char in event_id)


class GmAuthenticator(Protocol):
    def authenticate(self, config: EventConfig, pin: str) -> bool:
        """Return True when ``pin`` grants organizer access to ``config``."""


class PinAuthenticator:
    """Plain-text PIN equality. Gameplay scaffolding: no hashing, no rate limiting."""

    def authenticate(self, config: EventConfig, pin: str) -> bool:
        return pin == config.gm_pin
