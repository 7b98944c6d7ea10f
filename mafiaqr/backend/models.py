"""Domain models for events, roster rows and assignment results."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable


class ConfigurationError(ValueError):
    """Raised when an event configuration cannot be used for assignment."""


class Gender(str, Enum):
    FEMALE = "K"
    MALE = "M"

    @classmethod
    def parse(cls, raw: str) -> "Gender | None":
        tag = raw.strip().upper()
        for gender in cls:
            if gender.value == tag:
                return gender
        return None


class Role(str, Enum):
    MAFIA = "mafia"
    CITIZEN = "citizen"


@dataclass(frozen=True)
class Ability:
    name: str
    description: str


@dataclass(frozen=True)
class EventConfig:
    display_name: str
    gm_pin: str
    mafia_quota: int
    female_pool: tuple[str, ...]
    male_pool: tuple[str, ...]

    def pool_for(self, gender: Gender) -> tuple[str, ...]:
        if gender is Gender.FEMALE:
            return self.female_pool
        if gender is Gender.MALE:
            return self.male_pool
        raise ConfigurationError(f"Unknown gender: {gender!r}")

    def with_quota(self, mafia_quota: int) -> "EventConfig":
        return replace(self, mafia_quota=mafia_quota)

    def validate(self) -> "EventConfig":
        if self.mafia_quota < 1:
            raise ConfigurationError(f"Mafia quota must be at least 1, got {self.mafia_quota}")
        if not self.female_pool:
            raise ConfigurationError("Female character pool is empty")
        if not self.male_pool:
            raise ConfigurationError("Male character pool is empty")
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.display_name,
            "pin": self.gm_pin,
            "mafias": self.mafia_quota,
            "femalePool": list(self.female_pool),
            "malePool": list(self.male_pool),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "EventConfig":
        """Rebuild a stored config; malformed fields raise ConfigurationError."""
        try:
            mafia_quota = int(payload.get("mafias") or 3)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Stored mafia quota is not a number: {payload.get('mafias')!r}") from exc
        return cls(
            display_name=str(payload.get("name", "")),
            gm_pin=str(payload.get("pin", "")),
            mafia_quota=mafia_quota,
            female_pool=_stored_pool(payload, "femalePool"),
            male_pool=_stored_pool(payload, "malePool"),
        )


def _stored_pool(payload: dict[str, Any], key: str) -> tuple[str, ...]:
    names = payload.get(key, [])
    if not isinstance(names, list):
        raise ConfigurationError(f"Stored {key} must be a list of names, got {type(names).__name__}")
    return clean_pool(names)


def clean_pool(names: Iterable[str]) -> tuple[str, ...]:
    """Trim pool entries and drop blanks, keeping order."""
    return tuple(name.strip() for name in names if isinstance(name, str) and name.strip())


@dataclass(frozen=True)
class RosterEntry:
    name: str
    gender: Gender


@dataclass(frozen=True)
class AssignmentResult:
    event_id: str
    participant_name: str
    character: str
    role: Role
    ability: Ability
    timestamp: int
