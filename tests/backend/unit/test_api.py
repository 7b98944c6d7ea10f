import pytest

fastapi = pytest.importorskip("fastapi")
pytest.importorskip("httpx")
from fastapi.testclient import TestClient

from mafiaqr.backend.api import create_app
from mafiaqr.backend.codec import encode_token
from mafiaqr.backend.config import BackendSettings
from mafiaqr.backend.models import Ability, AssignmentResult, Role
from mafiaqr.backend.store import InMemoryEventStore

SETTINGS = BackendSettings(
    database_url=None,
    store_path=None,
    host="127.0.0.1",
    port=8000,
    base_url="https://mafia.example/",
    log_level="INFO",
)


def _client() -> TestClient:
    return TestClient(create_app(store=InMemoryEventStore(), settings=SETTINGS))


def _create_event(client: TestClient, **overrides) -> dict:
    payload = {"name": "Ognisko", "pin": "1111", "mafia_quota": 2}
    payload.update(overrides)
    response = client.post("/api/events", json=payload)
    assert response.status_code == 200
    return response.json()


def test_post_events_returns_id_and_links() -> None:
    client = _client()

    data = _create_event(client)

    assert len(data["event_id"]) == 8
    assert data["join_url"] == f"https://mafia.example/?event={data['event_id']}"
    assert data["gm_url"] == f"https://mafia.example/?event={data['event_id']}&gm=1"


def test_post_events_rejects_empty_pool() -> None:
    client = _client()

    response = client.post("/api/events", json={"name": "Ognisko", "pin": "1111", "female_pool": [" "]})

    assert response.status_code == 422


def test_get_event_returns_summary_or_404() -> None:
    client = _client()
    created = _create_event(client, female_pool=["Ciri", "Triss Merigold"], male_pool=["Geralt z Rivii"])

    response = client.get(f"/api/events/{created['event_id']}")
    missing = client.get("/api/events/MISSING0")

    assert response.status_code == 200
    assert response.json() == {
        "event_id": created["event_id"],
        "name": "Ognisko",
        "female_pool_size": 2,
        "male_pool_size": 1,
    }
    assert missing.status_code == 404


def test_join_is_deterministic_apart_from_timestamp() -> None:
    client = _client()
    event_id = _create_event(client)["event_id"]

    first = client.post(f"/api/events/{event_id}/join", json={"name": "Julia Nowak", "gender": "K"})
    second = client.post(f"/api/events/{event_id}/join", json={"name": "Julia Nowak", "gender": "K"})

    assert first.status_code == 200
    first_assignment = first.json()["assignment"]
    second_assignment = second.json()["assignment"]
    first_assignment.pop("timestamp")
    second_assignment.pop("timestamp")
    assert first_assignment == second_assignment
    assert first.json()["url"].startswith(f"https://mafia.example/?event={event_id}&t=")


def test_join_rejects_unknown_event_and_bad_gender() -> None:
    client = _client()
    event_id = _create_event(client)["event_id"]

    assert client.post("/api/events/MISSING0/join", json={"name": "Julia", "gender": "K"}).status_code == 404
    assert client.post(f"/api/events/{event_id}/join", json={"name": "Julia", "gender": "X"}).status_code == 422
    assert client.post(f"/api/events/{event_id}/join", json={"name": "  ", "gender": "K"}).status_code == 422


def test_gm_login_and_quota_update_require_pin() -> None:
    client = _client()
    event_id = _create_event(client)["event_id"]

    denied = client.post(f"/api/events/{event_id}/gm", json={"pin": "0000"})
    allowed = client.post(f"/api/events/{event_id}/gm", json={"pin": "1111"})
    quota_denied = client.patch(f"/api/events/{event_id}/quota", json={"pin": "0000", "mafia_quota": 4})
    quota_allowed = client.patch(f"/api/events/{event_id}/quota", json={"pin": "1111", "mafia_quota": 4})

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert allowed.json() == {"event_id": event_id, "name": "Ognisko", "mafia_quota": 2}
    assert quota_denied.status_code == 403
    assert quota_allowed.status_code == 200
    assert quota_allowed.json()["mafia_quota"] == 4


def test_roster_pre_assigns_with_exact_quota() -> None:
    client = _client()
    event_id = _create_event(client, mafia_quota=3)["event_id"]
    roster = "\n".join(["Anna, K", "Piotr, M", "Ewa, K", "Jan, M", "Ola, K", "bad line", "Kuba, M"])

    denied = client.post(f"/api/events/{event_id}/roster", json={"pin": "0000", "roster": roster})
    response = client.post(f"/api/events/{event_id}/roster", json={"pin": "1111", "roster": roster})

    assert denied.status_code == 403
    assert response.status_code == 200
    assignments = response.json()["assignments"]
    assert [item["assignment"]["name"] for item in assignments] == ["Anna", "Piotr", "Ewa", "Jan", "Ola", "Kuba"]
    assert sum(item["assignment"]["role"] == "mafia" for item in assignments) == 3


def test_reveal_decodes_token_and_rejects_garbage() -> None:
    client = _client()
    result = AssignmentResult(
        event_id="AB12CD34",
        participant_name="Zażółć Gęślą",
        character="Ciri",
        role=Role.CITIZEN,
        ability=Ability(name="Skok Przez Wymiary", description="Raz pomijasz skutki akcji."),
        timestamp=1700000000000,
    )

    response = client.get("/api/reveal", params={"t": encode_token(result)})
    empty = client.get("/api/reveal")
    garbage = client.get("/api/reveal", params={"t": "!!!"})

    assert response.status_code == 200
    assert response.json() == {
        "event_id": "AB12CD34",
        "name": "Zażółć Gęślą",
        "character": "Ciri",
        "role": "citizen",
        "ability": {"name": "Skok Przez Wymiary", "description": "Raz pomijasz skutki akcji."},
        "timestamp": 1700000000000,
    }
    assert empty.status_code == 400
    assert garbage.status_code == 400
    assert garbage.json()["detail"] == "Invalid or empty token"
