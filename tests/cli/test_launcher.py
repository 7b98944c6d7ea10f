import json

import pytest

from mafiaqr.backend.qr import write_qr_svg
from mafiaqr.cli.launcher import main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    monkeypatch.delenv("MAFIAQR_DATABASE_URL", raising=False)
    monkeypatch.delenv("MAFIAQR_STORE_PATH", raising=False)
    monkeypatch.setenv("MAFIAQR_BASE_URL", "https://mafia.example/")


def _create_event(store: str, capsys, *extra: str) -> dict:
    assert main(["--store", store, "create-event", "--name", "Ognisko", "--pin", "1111", "--mafias", "1", *extra]) == 0
    return json.loads(capsys.readouterr().out)


def test_create_join_and_reveal_round_trip(tmp_path, capsys) -> None:
    store = str(tmp_path / "events.json")
    event_id = _create_event(store, capsys)["event_id"]

    assert main(["--store", store, "join", event_id, "--name", "Julia Nowak", "--gender", "K"]) == 0
    joined = json.loads(capsys.readouterr().out)

    assert main(["reveal", joined["url"]]) == 0
    revealed = json.loads(capsys.readouterr().out)
    assert revealed == joined["assignment"]
    assert revealed["participant_name"] == "Julia Nowak"


def test_roster_reads_file_and_skips_bad_rows(tmp_path, capsys) -> None:
    store = str(tmp_path / "events.json")
    roster_file = tmp_path / "roster.txt"
    roster_file.write_text("Anna, K\nPiotr, M\nnot a row\nEwa, K\n", encoding="utf-8")
    event_id = _create_event(store, capsys)["event_id"]

    assert main(["--store", store, "roster", event_id, str(roster_file), "--pin", "1111"]) == 0
    assigned = json.loads(capsys.readouterr().out)

    assert [item["assignment"]["participant_name"] for item in assigned] == ["Anna", "Piotr", "Ewa"]
    assert sum(item["assignment"]["role"] == "mafia" for item in assigned) == 1


def test_roster_rejects_wrong_pin(tmp_path, capsys) -> None:
    store = str(tmp_path / "events.json")
    roster_file = tmp_path / "roster.txt"
    roster_file.write_text("Anna, K\nPiotr, M\n", encoding="utf-8")
    event_id = _create_event(store, capsys)["event_id"]

    assert main(["--store", store, "roster", event_id, str(roster_file), "--pin", "9999"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "wrong PIN" in captured.err


def test_roster_requires_pin(tmp_path) -> None:
    with pytest.raises(SystemExit):
        main(["--store", str(tmp_path / "events.json"), "roster", "AB12CD34"])


def test_create_event_writes_join_and_gm_qr_codes(tmp_path, capsys) -> None:
    store = str(tmp_path / "events.json")
    qr_dir = tmp_path / "qr"
    created = _create_event(store, capsys, "--qr-dir", str(qr_dir))
    event_id = created["event_id"]

    join_svg = qr_dir / f"{event_id}-join.svg"
    gm_svg = qr_dir / f"{event_id}-gm.svg"
    assert b"<svg" in join_svg.read_bytes()
    assert gm_svg.read_bytes() == write_qr_svg(created["gm_url"], tmp_path / "expected-gm.svg").read_bytes()
    assert join_svg.read_bytes() != gm_svg.read_bytes()


def test_roster_writes_one_reveal_qr_per_participant(tmp_path, capsys) -> None:
    store = str(tmp_path / "events.json")
    roster_file = tmp_path / "roster.txt"
    roster_file.write_text("Julia Nowak, K\nPiotr, M\n", encoding="utf-8")
    qr_dir = tmp_path / "qr"
    event_id = _create_event(store, capsys)["event_id"]

    assert main(["--store", store, "roster", event_id, str(roster_file), "--pin", "1111", "--qr-dir", str(qr_dir)]) == 0
    assigned = json.loads(capsys.readouterr().out)

    written = sorted(qr_dir.glob("*.svg"))
    assert [path.name for path in written] == ["001-julia-nowak.svg", "002-piotr.svg"]
    expected = write_qr_svg(assigned[0]["url"], tmp_path / "expected.svg")
    assert written[0].read_bytes() == expected.read_bytes()


def test_join_on_malformed_stored_event_exits_with_error(tmp_path, capsys) -> None:
    store = tmp_path / "events.json"
    store.write_text(
        json.dumps({"AB12CD34": {"name": "Ognisko", "pin": "1111", "mafias": "lots", "femalePool": [], "malePool": []}}),
        encoding="utf-8",
    )

    assert main(["--store", str(store), "join", "AB12CD34", "--name", "Julia", "--gender", "K"]) == 1
    assert "Unknown event" in capsys.readouterr().err


def test_serve_uses_store_and_base_url_arguments(tmp_path, capsys, monkeypatch) -> None:
    uvicorn = pytest.importorskip("uvicorn")
    pytest.importorskip("fastapi")
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    store = str(tmp_path / "events.json")
    event_id = _create_event(store, capsys)["event_id"]
    served: dict = {}

    def _fake_run(app, **kwargs) -> None:
        served["app"] = app
        served.update(kwargs)

    monkeypatch.setattr(uvicorn, "run", _fake_run)

    assert main(["--store", store, "--base-url", "https://serve.example/game", "serve", "--port", "9001"]) == 0
    assert served["port"] == 9001
    client = TestClient(served["app"])

    assert client.get(f"/api/events/{event_id}").status_code == 200
    response = client.post("/api/events", json={"name": "Druga gra", "pin": "2222"})
    assert response.status_code == 200
    assert response.json()["join_url"].startswith("https://serve.example/game?event=")


def test_unknown_event_and_bad_token_exit_with_error(tmp_path, capsys) -> None:
    store = str(tmp_path / "events.json")

    assert main(["--store", store, "join", "MISSING0", "--name", "Julia", "--gender", "K"]) == 1
    assert main(["reveal", "not-a-token!"]) == 1
    assert "Invalid or empty token" in capsys.readouterr().err
