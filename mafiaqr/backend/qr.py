"""QR codes for join, organizer and reveal links, written as SVG files."""

from __future__ import annotations

import logging
from pathlib import Path
import re
from typing import Sequence
import unicodedata

import qrcode
from qrcode.image.svg import SvgPathImage

from .events import CreatedEvent, PreAssignment

logger = logging.getLogger(__name__)


def build_qr(url: str) -> qrcode.QRCode:
    qr = qrcode.QRCode(border=2, box_size=10)
    qr.add_data(url)
    qr.make(fit=True)
    return qr


def write_qr_svg(url: str, path: Path) -> Path:
    """Render ``url`` as a standalone SVG at ``path``, creating parent directories."""
    image = build_qr(url).make_image(image_factory=SvgPathImage)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as handle:
        image.save(handle)
    logger.debug("Wrote QR code for %s to %s", url, path)
    return path


def slugify(name: str) -> str:
    """Convert a participant name to a filesystem-safe slug.

    "Julia Nowak" -> "julia-nowak"
    """
    text = unicodedata.normalize("NFKD", name)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = re.sub(r"['\"]", "", text)
    text = re.sub(r"[^a-z0-9]+", "-", text).strip("-")
    return text or "participant"


def write_event_qr(created: CreatedEvent, directory: Path) -> list[Path]:
    """Write ``<event>-join.svg`` and ``<event>-gm.svg`` for a freshly created event."""
    return [
        write_qr_svg(created.join_url, directory / f"{created.event_id}-join.svg"),
        write_qr_svg(created.gm_url, directory / f"{created.event_id}-gm.svg"),
    ]


def write_roster_qr(assignments: Sequence[PreAssignment], directory: Path) -> list[Path]:
    """Write one reveal QR per participant; the index prefix keeps roster order and duplicate names apart."""
    paths = [
        write_qr_svg(item.url, directory / f"{index:03d}-{slugify(item.result.participant_name)}.svg")
        for index, item in enumerate(assignments, start=1)
    ]
    logger.info("Wrote %d reveal QR codes to %s", len(paths), directory)
    return paths
