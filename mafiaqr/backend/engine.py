"""Deterministic character, role and ability assignment."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import re
from typing import Sequence

from .catalog import DEFAULT_CATALOG, Catalog
from .models import Ability, AssignmentResult, ConfigurationError, EventConfig, Gender, RosterEntry, Role
from .rng import pick, seed_hash, shuffle, stream

logger = logging.getLogger(__name__)

HINTED_MAFIA_PROBABILITY = 0.7
DEFAULT_MAFIA_PROBABILITY = 0.3

_ROSTER_FIELD_SPLIT = re.compile(r",|;|\t")


def _utc_now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def _require_pool(config: EventConfig, gender: Gender) -> tuple[str, ...]:
    pool = config.pool_for(gender)
    if not pool:
        raise ConfigurationError(f"Character pool for gender {gender.value} is empty")
    return pool


def resolve_ability(
    character: str,
    role: Role | str,
    seed_text: str,
    *,
    catalog: Catalog = DEFAULT_CATALOG,
) -> Ability:
    """Return the character's forced ability, else a seeded pick from the role's fallback pool."""
    forced = catalog.forced.get(character)
    if forced is not None:
        return forced
    try:
        resolved_role = Role(role)
    except ValueError:
        resolved_role = Role.CITIZEN
    return pick(stream(seed_hash(seed_text)), catalog.fallback_for(resolved_role))


def assign_one(
    event_id: str,
    participant_name: str,
    gender: Gender,
    config: EventConfig,
    *,
    catalog: Catalog = DEFAULT_CATALOG,
    timestamp: int | None = None,
) -> AssignmentResult:
    """Blind-join draw: a pure function of the identity key, config and catalog.

    Independent participants may draw the same character; this mode makes no
    uniqueness guarantee.
    """
    pool = _require_pool(config, gender)
    draw = stream(seed_hash(f"{event_id}|{participant_name}|{gender.value}"))
    character = pick(draw, pool)

    hint = catalog.hint_for(character)
    mafia_probability = HINTED_MAFIA_PROBABILITY if hint is Role.MAFIA else DEFAULT_MAFIA_PROBABILITY
    role = Role.MAFIA if draw() < mafia_probability else Role.CITIZEN

    ability = resolve_ability(character, role, f"{event_id}|{participant_name}", catalog=catalog)
    logger.debug("Blind join %s/%s drew %s as %s", event_id, participant_name, character, role.value)
    return AssignmentResult(
        event_id=event_id,
        participant_name=participant_name,
        character=character,
        role=role,
        ability=ability,
        timestamp=_utc_now_ms() if timestamp is None else timestamp,
    )


def mafia_count_for(mafia_quota: int, roster_size: int) -> int:
    """Clamp the quota so at least one citizen remains; never below one mafia."""
    return max(1, min(mafia_quota, roster_size - 1))


def _select_mafia(event_id: str, characters: list[str], mafia_count: int, catalog: Catalog) -> set[int]:
    order = shuffle(range(len(characters)), seed_hash(event_id + "ROLES"))
    selected: set[int] = set()
    for index in order:
        if len(selected) >= mafia_count:
            break
        if catalog.hint_for(characters[index]) is Role.CITIZEN:
            continue
        selected.add(index)
    # Second pass ignores hints so the quota is always met exactly.
    for index in order:
        if len(selected) >= mafia_count:
            break
        selected.add(index)
    return selected


def assign_roster(
    event_id: str,
    roster: Sequence[RosterEntry],
    config: EventConfig,
    *,
    catalog: Catalog = DEFAULT_CATALOG,
    timestamp: int | None = None,
) -> list[AssignmentResult]:
    """Pre-assign characters and roles to an enumerated roster, preserving its order."""
    if not roster:
        return []

    pools: dict[Gender, list[str]] = {}
    for gender, salt in ((Gender.FEMALE, "FEMALEPOOL"), (Gender.MALE, "MALEPOOL")):
        if any(entry.gender is gender for entry in roster):
            pools[gender] = shuffle(_require_pool(config, gender), seed_hash(event_id + salt))

    cursors = {gender: 0 for gender in pools}
    characters: list[str] = []
    for entry in roster:
        pool = pools[entry.gender]
        characters.append(pool[cursors[entry.gender] % len(pool)])
        cursors[entry.gender] += 1

    mafia_count = mafia_count_for(config.mafia_quota, len(roster))
    mafia_indices = _select_mafia(event_id, characters, mafia_count, catalog)

    issued_at = _utc_now_ms() if timestamp is None else timestamp
    results: list[AssignmentResult] = []
    for index, (entry, character) in enumerate(zip(roster, characters)):
        role = Role.MAFIA if index in mafia_indices else Role.CITIZEN
        results.append(
            AssignmentResult(
                event_id=event_id,
                participant_name=entry.name,
                character=character,
                role=role,
                ability=resolve_ability(character, role, f"{event_id}|{entry.name}", catalog=catalog),
                timestamp=issued_at,
            )
        )

    logger.info("Pre-assigned %d participants for event %s with %d mafia", len(results), event_id, mafia_count)
    return results


def parse_roster(text: str) -> list[RosterEntry]:
    """Parse ``Name, K|M`` lines; rows without a name or a valid gender are skipped."""
    entries: list[RosterEntry] = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue
        fields = _ROSTER_FIELD_SPLIT.split(line)
        name = fields[0].strip()
        gender = Gender.parse(fields[1]) if len(fields) > 1 else None
        if not name or gender is None:
            logger.warning("Skipping malformed roster line %d: %r", line_number, line)
            continue
        entries.append(RosterEntry(name=name, gender=gender))
    return entries
