"""Token codec: AssignmentResult <-> URL-safe opaque string."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .models import Ability, AssignmentResult, Role

logger = logging.getLogger(__name__)


class AbilityPayload(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)

    name: str
    description: str = Field(alias="desc")


class TokenPayload(BaseModel):
    """Wire shape of a token, keyed the way shared reveal links have always been."""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    event_id: str = Field(alias="eventId")
    name: str
    character: str
    role: Literal["mafia", "citizen"]
    ability: AbilityPayload
    stamp: int

    @classmethod
    def from_result(cls, result: AssignmentResult) -> "TokenPayload":
        return cls(
            event_id=result.event_id,
            name=result.participant_name,
            character=result.character,
            role=result.role.value,
            ability=AbilityPayload(name=result.ability.name, description=result.ability.description),
            stamp=result.timestamp,
        )

    def to_result(self) -> AssignmentResult:
        return AssignmentResult(
            event_id=self.event_id,
            participant_name=self.name,
            character=self.character,
            role=Role(self.role),
            ability=Ability(name=self.ability.name, description=self.ability.description),
            timestamp=self.stamp,
        )


def encode_token(result: AssignmentResult) -> str:
    payload = TokenPayload.from_result(result).model_dump_json(by_alias=True)
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def _b64decode(token: str) -> bytes:
    # Accept both alphabets so tokens with '+', '/' and padding still decode.
    normalized = token.strip().replace("-", "+").replace("_", "/").rstrip("=")
    normalized += "=" * (-len(normalized) % 4)
    return base64.b64decode(normalized, validate=True)


def decode_token(token: str | None) -> AssignmentResult | None:
    """Return the encoded result, or None when the token is empty or malformed."""
    if not token or not token.strip():
        return None
    try:
        raw = _b64decode(token)
        payload = TokenPayload.model_validate_json(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError, ValidationError) as exc:
        logger.debug("Rejected token: %s", exc)
        return None
    return payload.to_result()
