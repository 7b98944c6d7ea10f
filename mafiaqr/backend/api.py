"""FastAPI endpoints for event setup, joining, pre-assignment and reveal."""

from __future__ import annotations

from typing import Literal

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from .codec import decode_token
from .config import BackendSettings, load_settings
from .events import (
    DEFAULT_MAFIA_QUOTA,
    PreAssignment,
    authenticate_gm,
    blind_join,
    create_event,
    pre_assign,
    update_mafia_quota,
)
from .models import AssignmentResult, ConfigurationError, Gender
from .security import GmAuthenticator, PinAuthenticator
from .store import EventConfigStore, create_store


class CreateEventRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    pin: str = Field(min_length=1, max_length=32)
    mafia_quota: int = Field(default=DEFAULT_MAFIA_QUOTA, ge=1)
    female_pool: list[str] | None = None
    male_pool: list[str] | None = None


class CreateEventResponse(BaseModel):
    event_id: str
    join_url: str
    gm_url: str


class EventSummaryResponse(BaseModel):
    event_id: str
    name: str
    female_pool_size: int
    male_pool_size: int


class JoinRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    gender: Literal["K", "M"]


class PinRequest(BaseModel):
    pin: str = Field(min_length=1)


class QuotaRequest(PinRequest):
    mafia_quota: int = Field(ge=1)


class RosterRequest(PinRequest):
    roster: str = Field(min_length=1)


class GmSettingsResponse(BaseModel):
    event_id: str
    name: str
    mafia_quota: int


class AbilityView(BaseModel):
    name: str
    description: str


class AssignmentView(BaseModel):
    event_id: str
    name: str
    character: str
    role: str
    ability: AbilityView
    timestamp: int

    @classmethod
    def from_result(cls, result: AssignmentResult) -> "AssignmentView":
        return cls(
            event_id=result.event_id,
            name=result.participant_name,
            character=result.character,
            role=result.role.value,
            ability=AbilityView(name=result.ability.name, description=result.ability.description),
            timestamp=result.timestamp,
        )


class AssignmentResponse(BaseModel):
    assignment: AssignmentView
    token: str
    url: str

    @classmethod
    def from_pre_assignment(cls, item: PreAssignment) -> "AssignmentResponse":
        return cls(assignment=AssignmentView.from_result(item.result), token=item.token, url=item.url)


class RosterResponse(BaseModel):
    assignments: list[AssignmentResponse]


def create_app(
    store: EventConfigStore | None = None,
    settings: BackendSettings | None = None,
    authenticator: GmAuthenticator | None = None,
) -> FastAPI:
    app = FastAPI(title="Mafia QR API", version="0.1.0")
    runtime_settings = settings if settings is not None else load_settings()
    event_store = (
        store
        if store is not None
        else create_store(database_url=runtime_settings.database_url, store_path=runtime_settings.store_path)
    )
    gm_authenticator = authenticator if authenticator is not None else PinAuthenticator()
    base = runtime_settings.base_url

    def get_store() -> EventConfigStore:
        return event_store

    @app.post("/api/events", response_model=CreateEventResponse)
    def post_event(
        payload: CreateEventRequest,
        local_store: EventConfigStore = Depends(get_store),
    ) -> CreateEventResponse:
        try:
            created = create_event(
                local_store,
                display_name=payload.name,
                gm_pin=payload.pin,
                base=base,
                mafia_quota=payload.mafia_quota,
                female_pool=payload.female_pool,
                male_pool=payload.male_pool,
            )
        except ConfigurationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return CreateEventResponse(event_id=created.event_id, join_url=created.join_url, gm_url=created.gm_url)

    @app.get("/api/events/{event_id}", response_model=EventSummaryResponse)
    def get_event(
        event_id: str,
        local_store: EventConfigStore = Depends(get_store),
    ) -> EventSummaryResponse:
        config = local_store.get(event_id)
        if config is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return EventSummaryResponse(
            event_id=event_id,
            name=config.display_name,
            female_pool_size=len(config.female_pool),
            male_pool_size=len(config.male_pool),
        )

    @app.post("/api/events/{event_id}/join", response_model=AssignmentResponse)
    def post_join(
        event_id: str,
        payload: JoinRequest,
        local_store: EventConfigStore = Depends(get_store),
    ) -> AssignmentResponse:
        try:
            joined = blind_join(local_store, event_id, payload.name, Gender(payload.gender), base)
        except ConfigurationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if joined is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return AssignmentResponse.from_pre_assignment(joined)

    @app.post("/api/events/{event_id}/gm", response_model=GmSettingsResponse)
    def post_gm(
        event_id: str,
        payload: PinRequest,
        local_store: EventConfigStore = Depends(get_store),
    ) -> GmSettingsResponse:
        config = authenticate_gm(local_store, event_id, payload.pin, gm_authenticator)
        if config is None:
            raise HTTPException(status_code=403, detail="Wrong PIN or unknown event")
        return GmSettingsResponse(event_id=event_id, name=config.display_name, mafia_quota=config.mafia_quota)

    @app.patch("/api/events/{event_id}/quota", response_model=GmSettingsResponse)
    def patch_quota(
        event_id: str,
        payload: QuotaRequest,
        local_store: EventConfigStore = Depends(get_store),
    ) -> GmSettingsResponse:
        config = update_mafia_quota(local_store, event_id, payload.pin, payload.mafia_quota, gm_authenticator)
        if config is None:
            raise HTTPException(status_code=403, detail="Wrong PIN or unknown event")
        return GmSettingsResponse(event_id=event_id, name=config.display_name, mafia_quota=config.mafia_quota)

    @app.post("/api/events/{event_id}/roster", response_model=RosterResponse)
    def post_roster(
        event_id: str,
        payload: RosterRequest,
        local_store: EventConfigStore = Depends(get_store),
    ) -> RosterResponse:
        if authenticate_gm(local_store, event_id, payload.pin, gm_authenticator) is None:
            raise HTTPException(status_code=403, detail="Wrong PIN or unknown event")
        try:
            assigned = pre_assign(local_store, event_id, payload.roster, base)
        except ConfigurationError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if assigned is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return RosterResponse(assignments=[AssignmentResponse.from_pre_assignment(item) for item in assigned])

    @app.get("/api/reveal", response_model=AssignmentView)
    def get_reveal(t: str = Query(default="")) -> AssignmentView:
        result = decode_token(t)
        if result is None:
            raise HTTPException(status_code=400, detail="Invalid or empty token")
        return AssignmentView.from_result(result)

    return app


app = create_app()
