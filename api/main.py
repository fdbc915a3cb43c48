from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from acuity.config import ACUITY_MAX_SESSIONS
from api.acuity_api import build_acuity_router
from api.session_store import InMemorySessionStore

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

session_store = InMemorySessionStore(max_sessions=ACUITY_MAX_SESSIONS)

app = FastAPI(title="Acuity API", version="0.1.0")

allowed_origins = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]
if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
app.include_router(build_acuity_router(session_store))


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "sessions": len(session_store)}
