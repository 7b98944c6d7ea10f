"""Organizer and participant flows over the event configuration store."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable

from .catalog import FEMALE_CHARACTERS, MALE_CHARACTERS
from .codec import encode_token
from .engine import assign_one, assign_roster, parse_roster
from .links import build_gm_url, build_join_url, build_reveal_url
from .models import AssignmentResult, ConfigurationError, EventConfig, Gender, clean_pool
from .security import GmAuthenticator, PinAuthenticator, generate_event_id
from .store import EventConfigStore

logger = logging.getLogger(__name__)

DEFAULT_MAFIA_QUOTA = 3


@dataclass(frozen=True)
class CreatedEvent:
    event_id: str
    config: EventConfig
    join_url: str
    gm_url: str


@dataclass(frozen=True)
class PreAssignment:
    result: AssignmentResult
    token: str
    url: str


def build_event_config(
    display_name: str,
    gm_pin: str,
    mafia_quota: int = DEFAULT_MAFIA_QUOTA,
    female_pool: Iterable[str] | None = None,
    male_pool: Iterable[str] | None = None,
) -> EventConfig:
    """Return a validated config, defaulting the pools to the full catalog lists."""
    config = EventConfig(
        display_name=display_name.strip(),
        gm_pin=gm_pin,
        mafia_quota=mafia_quota,
        female_pool=clean_pool(FEMALE_CHARACTERS if female_pool is None else female_pool),
        male_pool=clean_pool(MALE_CHARACTERS if male_pool is None else male_pool),
    )
    return config.validate()


def create_event(
    store: EventConfigStore,
    display_name: str,
    gm_pin: str,
    base: str,
    mafia_quota: int = DEFAULT_MAFIA_QUOTA,
    female_pool: Iterable[str] | None = None,
    male_pool: Iterable[str] | None = None,
) -> CreatedEvent:
    config = build_event_config(display_name, gm_pin, mafia_quota, female_pool, male_pool)
    event_id = generate_event_id()
    store.put(event_id, config)
    return CreatedEvent(
        event_id=event_id,
        config=config,
        join_url=build_join_url(base, event_id),
        gm_url=build_gm_url(base, event_id),
    )


def authenticate_gm(
    store: EventConfigStore,
    event_id: str,
    pin: str,
    authenticator: GmAuthenticator | None = None,
) -> EventConfig | None:
    config = store.get(event_id)
    if config is None:
        return None
    checker = authenticator if authenticator is not None else PinAuthenticator()
    if not checker.authenticate(config, pin):
        logger.warning("Rejected organizer PIN for event %s", event_id)
        return None
    return config


def update_mafia_quota(
    store: EventConfigStore,
    event_id: str,
    pin: str,
    mafia_quota: int,
    authenticator: GmAuthenticator | None = None,
) -> EventConfig | None:
    config = authenticate_gm(store, event_id, pin, authenticator)
    if config is None:
        return None
    updated = config.with_quota(mafia_quota).validate()
    store.put(event_id, updated)
    return updated


def _package(result: AssignmentResult, base: str) -> PreAssignment:
    token = encode_token(result)
    return PreAssignment(result=result, token=token, url=build_reveal_url(base, result.event_id, token))


def blind_join(
    store: EventConfigStore,
    event_id: str,
    participant_name: str,
    gender: Gender,
    base: str,
) -> PreAssignment | None:
    config = store.get(event_id)
    if config is None:
        return None
    if not participant_name.strip():
        raise ConfigurationError("Participant name must not be blank")
    return _package(assign_one(event_id, participant_name, gender, config), base)


def pre_assign(store: EventConfigStore, event_id: str, roster_text: str, base: str) -> list[PreAssignment] | None:
    config = store.get(event_id)
    if config is None:
        return None
    roster = parse_roster(roster_text)
    return [_package(result, base) for result in assign_roster(event_id, roster, config)]
