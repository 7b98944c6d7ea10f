from mafiaqr.backend.events import create_event, pre_assign
from mafiaqr.backend.qr import build_qr, slugify, write_event_qr, write_qr_svg, write_roster_qr
from mafiaqr.backend.store import InMemoryEventStore

BASE = "https://mafia.example/"


def _encoded_data(url: str) -> bytes:
    return b"".join(chunk.data for chunk in build_qr(url).data_list)


def test_build_qr_encodes_reveal_url_verbatim() -> None:
    url = "https://mafia.example/?event=AB12CD34&t=eyJldmVudElkIjoiQUIxMkNEMzQifQ"

    assert _encoded_data(url) == url.encode("utf-8")


def test_write_qr_svg_creates_parent_directories(tmp_path) -> None:
    path = write_qr_svg(BASE + "?event=AB12CD34", tmp_path / "nested" / "join.svg")

    content = path.read_bytes()
    assert b"<svg" in content
    assert content == write_qr_svg(BASE + "?event=AB12CD34", tmp_path / "again.svg").read_bytes()


def test_slugify_drops_diacritics_and_punctuation() -> None:
    assert slugify("Julia Nowak") == "julia-nowak"
    assert slugify("Zażółć O'Neill") == "zazoc-oneill"
    assert slugify("???") == "participant"


def test_write_event_qr_names_files_by_event_id(tmp_path) -> None:
    created = create_event(InMemoryEventStore(), display_name="Ognisko", gm_pin="1111", base=BASE)

    paths = write_event_qr(created, tmp_path)

    assert [path.name for path in paths] == [f"{created.event_id}-join.svg", f"{created.event_id}-gm.svg"]
    assert paths[0].read_bytes() == write_qr_svg(created.join_url, tmp_path / "join-copy.svg").read_bytes()


def test_write_roster_qr_keeps_roster_order_and_duplicate_names(tmp_path) -> None:
    store = InMemoryEventStore()
    created = create_event(store, display_name="Ognisko", gm_pin="1111", base=BASE, mafia_quota=1)
    assigned = pre_assign(store, created.event_id, "Anna, K\nAnna, K\nPiotr, M\n", BASE)

    paths = write_roster_qr(assigned, tmp_path / "qr")

    assert [path.name for path in paths] == ["001-anna.svg", "002-anna.svg", "003-piotr.svg"]
    for path, item in zip(paths, assigned):
        assert _encoded_data(item.url) == item.url.encode("utf-8")
        assert path.read_bytes() == write_qr_svg(item.url, tmp_path / "copy.svg").read_bytes()
