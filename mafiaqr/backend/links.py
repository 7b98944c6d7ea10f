"""Join, organizer and reveal links carried in the URL query string."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from urllib.parse import parse_qs, urlencode, urlsplit

EntryMode = Literal["reveal", "gm", "join"]


@dataclass(frozen=True)
class EntryLink:
    mode: EntryMode
    event_id: str
    token: str | None = None


def base_url(url: str) -> str:
    return url.split("?", maxsplit=1)[0]


def _with_query(base: str, params: dict[str, str]) -> str:
    return f"{base_url(base)}?{urlencode(params)}"


def build_join_url(base: str, event_id: str) -> str:
    return _with_query(base, {"event": event_id})


def build_gm_url(base: str, event_id: str) -> str:
    return _with_query(base, {"event": event_id, "gm": "1"})


def build_reveal_url(base: str, event_id: str, token: str) -> str:
    return _with_query(base, {"event": event_id, "t": token})


def parse_entry_url(url: str) -> EntryLink | None:
    """Resolve which screen a scanned link opens; None without an event id."""
    params = parse_qs(urlsplit(url).query)
    event_id = params.get("event", [""])[0]
    if not event_id:
        return None
    token = params.get("t", [""])[0]
    if token:
        return EntryLink(mode="reveal", event_id=event_id, token=token)
    if params.get("gm", [""])[0]:
        return EntryLink(mode="gm", event_id=event_id)
    return EntryLink(mode="join", event_id=event_id)
