"""Command line launcher for the API server and offline organizer tasks."""

from __future__ import annotations

import argparse
from dataclasses import asdict, replace
import json
import logging
from pathlib import Path
import sys
from typing import Any, Sequence

from mafiaqr.backend.codec import decode_token
from mafiaqr.backend.config import BackendSettings, load_settings
from mafiaqr.backend.events import (
    DEFAULT_MAFIA_QUOTA,
    PreAssignment,
    authenticate_gm,
    blind_join,
    create_event,
    pre_assign,
)
from mafiaqr.backend.links import parse_entry_url
from mafiaqr.backend.models import ConfigurationError, Gender
from mafiaqr.backend.qr import write_event_qr, write_roster_qr
from mafiaqr.backend.store import EventConfigStore, InMemoryEventStore, create_store

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Mafia QR role assignment")
    parser.add_argument("--store", default=None, help="JSON file used as the event store")
    parser.add_argument("--base-url", default=None, help="Base URL for generated links")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    create = commands.add_parser("create-event", help="Create an event and print its links")
    create.add_argument("--name", required=True)
    create.add_argument("--pin", required=True)
    create.add_argument("--mafias", type=int, default=DEFAULT_MAFIA_QUOTA)
    create.add_argument("--female-pool", default=None, help="File with one female character per line")
    create.add_argument("--male-pool", default=None, help="File with one male character per line")
    create.add_argument("--qr-dir", default=None, help="Directory for join and GM QR codes (SVG)")

    join = commands.add_parser("join", help="Blind-join an event")
    join.add_argument("event_id")
    join.add_argument("--name", required=True)
    join.add_argument("--gender", choices=["K", "M"], required=True)

    roster = commands.add_parser("roster", help="Pre-assign a roster of 'Name, K|M' lines")
    roster.add_argument("event_id")
    roster.add_argument("roster_file", nargs="?", default="-")
    roster.add_argument("--pin", required=True, help="Organizer PIN of the event")
    roster.add_argument("--qr-dir", default=None, help="Directory for one reveal QR code (SVG) per participant")

    reveal = commands.add_parser("reveal", help="Decode a token or a reveal link")
    reveal.add_argument("token")
    return parser.parse_args(argv)


def _open_store(args: argparse.Namespace, settings: BackendSettings) -> EventConfigStore:
    store = create_store(database_url=settings.database_url, store_path=args.store or settings.store_path)
    if isinstance(store, InMemoryEventStore):
        logger.warning("No MAFIAQR_STORE_PATH or --store given; events will not outlive this process")
    return store


def _read_lines(path: str) -> list[str]:
    with open(path, encoding="utf-8") as handle:
        return handle.read().splitlines()


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as handle:
        return handle.read()


def _assignment_payload(item: PreAssignment) -> dict[str, Any]:
    return {"assignment": asdict(item.result), "token": item.token, "url": item.url}


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def run_serve(args: argparse.Namespace, settings: BackendSettings, base: str) -> int:
    import uvicorn

    from mafiaqr.backend.api import create_app

    served = replace(settings, base_url=base)
    app = create_app(store=_open_store(args, served), settings=served)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def run_reveal(args: argparse.Namespace) -> int:
    token = args.token
    if "?" in token:
        entry = parse_entry_url(token)
        token = entry.token if entry is not None and entry.token else ""
    result = decode_token(token)
    if result is None:
        print("Invalid or empty token.", file=sys.stderr)
        return 1
    _print_json(asdict(result))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    base = args.base_url or settings.base_url

    if args.command == "serve":
        return run_serve(args, settings, base)
    if args.command == "reveal":
        return run_reveal(args)

    store = _open_store(args, settings)
    try:
        if args.command == "create-event":
            created = create_event(
                store,
                display_name=args.name,
                gm_pin=args.pin,
                base=base,
                mafia_quota=args.mafias,
                female_pool=_read_lines(args.female_pool) if args.female_pool else None,
                male_pool=_read_lines(args.male_pool) if args.male_pool else None,
            )
            _print_json({"event_id": created.event_id, "join_url": created.join_url, "gm_url": created.gm_url})
            if args.qr_dir:
                write_event_qr(created, Path(args.qr_dir))
            return 0

        if args.command == "join":
            joined = blind_join(store, args.event_id, args.name, Gender(args.gender), base)
            if joined is None:
                print(f"Unknown event: {args.event_id}", file=sys.stderr)
                return 1
            _print_json(_assignment_payload(joined))
            return 0

        if args.command == "roster":
            if authenticate_gm(store, args.event_id, args.pin) is None:
                print(f"Unknown event or wrong PIN: {args.event_id}", file=sys.stderr)
                return 1
            assigned = pre_assign(store, args.event_id, _read_text(args.roster_file), base)
            if assigned is None:
                print(f"Unknown event: {args.event_id}", file=sys.stderr)
                return 1
            _print_json([_assignment_payload(item) for item in assigned])
            if args.qr_dir:
                write_roster_qr(assigned, Path(args.qr_dir))
            return 0
    except (ConfigurationError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
