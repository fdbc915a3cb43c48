from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field, ValidationError

from acuity.config import FAST_GUESS_MS, MAX_FAST_FRACTION, zest_config_from_env
from acuity.errors import SessionCompleteError, SessionNotFoundError
from acuity.levels import LOGMAR_LEVELS, closest_level
from acuity.models import LogMARLevel, ZestConfig
from acuity.summary import AcuityResult, Eye, summarize
from acuity.zest import get_next_stimulus, get_threshold_estimate, initialize_zest, update_zest_state
from api.session_store import AcuitySession, InMemorySessionStore

logger = logging.getLogger(__name__)


class ConfigOverrides(BaseModel):
    max_trials: Optional[int] = None
    confidence_threshold: Optional[float] = None
    prior_mean: Optional[float] = None
    prior_sd: Optional[float] = None


class SessionCreateRequest(BaseModel):
    eye: Eye = Eye.both
    participant_id: Optional[str] = None
    overrides: Optional[ConfigOverrides] = None


class ResponseRequest(BaseModel):
    stimulus_logmar: float
    is_correct: bool
    response_time_ms: float = Field(...)


class SessionSnapshot(BaseModel):
    session_id: str
    eye: Eye
    participant_id: Optional[str] = None
    trial_number: int
    is_complete: bool
    confidence_interval: float
    threshold_estimate: float
    next_stimulus: Optional[float] = None
    next_level: Optional[LogMARLevel] = None


def _snapshot(session: AcuitySession) -> SessionSnapshot:
    state = session.state
    next_stimulus = None if state.is_complete else get_next_stimulus(state)
    return SessionSnapshot(
        session_id=session.id,
        eye=session.eye,
        participant_id=session.participant_id,
        trial_number=state.trial_number,
        is_complete=state.is_complete,
        confidence_interval=state.confidence_interval,
        threshold_estimate=get_threshold_estimate(state),
        next_stimulus=next_stimulus,
        next_level=closest_level(next_stimulus) if next_stimulus is not None else None,
    )


def _build_config(base: ZestConfig, overrides: Optional[ConfigOverrides]) -> ZestConfig:
    if overrides is None:
        return base
    values = base.model_dump()
    values.update(overrides.model_dump(exclude_none=True))
    return ZestConfig(**values)


def build_acuity_router(store: InMemorySessionStore, base_config: Optional[ZestConfig] = None) -> APIRouter:
    router = APIRouter(prefix="/acuity", tags=["acuity"])
    api_key = os.getenv("ACUITY_API_KEY")
    defaults = base_config or zest_config_from_env()

    def _require_api_key(request: Request) -> None:
        if not api_key:
            return
        provided = request.headers.get("x-api-key")
        if provided != api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    def _load(session_id: str) -> AcuitySession:
        try:
            return store.get(session_id)
        except SessionNotFoundError:
            raise HTTPException(status_code=404, detail="Session not found")

    @router.get("/levels", response_model=List[LogMARLevel])
    def list_levels(request: Request) -> List[LogMARLevel]:
        _require_api_key(request)
        return list(LOGMAR_LEVELS)

    @router.post("/sessions", response_model=SessionSnapshot)
    def create_session(request: Request, body: SessionCreateRequest) -> SessionSnapshot:
        _require_api_key(request)
        try:
            config = _build_config(defaults, body.overrides)
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))
        session = store.create(body.eye, initialize_zest(config), participant_id=body.participant_id)
        logger.info("Created acuity session %s (eye=%s)", session.id, session.eye.value)
        return _snapshot(session)

    @router.get("/sessions", response_model=List[SessionSnapshot])
    def list_sessions(request: Request, participant_id: Optional[str] = None) -> List[SessionSnapshot]:
        _require_api_key(request)
        return [_snapshot(s) for s in store.list(participant_id=participant_id)]

    @router.get("/sessions/{session_id}", response_model=SessionSnapshot)
    def get_session(request: Request, session_id: str) -> SessionSnapshot:
        _require_api_key(request)
        return _snapshot(_load(session_id))

    @router.post("/sessions/{session_id}/responses", response_model=SessionSnapshot)
    def submit_response(request: Request, session_id: str, body: ResponseRequest) -> SessionSnapshot:
        _require_api_key(request)
        try:
            session = store.apply(
                session_id,
                lambda state: update_zest_state(state, body.stimulus_logmar, body.is_correct, body.response_time_ms),
            )
        except SessionNotFoundError:
            raise HTTPException(status_code=404, detail="Session not found")
        except SessionCompleteError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        if session.state.is_complete:
            logger.info("Acuity session %s complete after %d trials", session_id, session.state.trial_number)
        return _snapshot(session)

    @router.get("/sessions/{session_id}/result", response_model=AcuityResult)
    def get_result(request: Request, session_id: str) -> AcuityResult:
        _require_api_key(request)
        session = _load(session_id)
        if not session.state.is_complete:
            raise HTTPException(status_code=409, detail="Session still running")
        return summarize(session.state, session.eye, FAST_GUESS_MS, MAX_FAST_FRACTION)

    @router.delete("/sessions/{session_id}")
    def delete_session(request: Request, session_id: str) -> Dict[str, str]:
        _require_api_key(request)
        try:
            store.delete(session_id)
        except SessionNotFoundError:
            raise HTTPException(status_code=404, detail="Session not found")
        return {"status": "deleted", "session_id": session_id}

    return router
