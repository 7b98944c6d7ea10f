"""Backend package for Mafia QR role assignment."""

from .codec import decode_token, encode_token
from .config import BackendSettings, load_settings
from .engine import assign_one, assign_roster, parse_roster, resolve_ability
from .models import Ability, AssignmentResult, ConfigurationError, EventConfig, Gender, Role, RosterEntry
from .security import GmAuthenticator, PinAuthenticator, generate_event_id
from .store import EventConfigStore, InMemoryEventStore, JsonFileEventStore, PostgresEventStore, create_store

__all__ = [
    "Ability",
    "assign_one",
    "assign_roster",
    "AssignmentResult",
    "BackendSettings",
    "ConfigurationError",
    "create_store",
    "decode_token",
    "encode_token",
    "EventConfig",
    "EventConfigStore",
    "Gender",
    "generate_event_id",
    "GmAuthenticator",
    "InMemoryEventStore",
    "JsonFileEventStore",
    "load_settings",
    "parse_roster",
    "PinAuthenticator",
    "PostgresEventStore",
    "resolve_ability",
    "Role",
    "RosterEntry",
]
