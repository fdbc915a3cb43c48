from __future__ import annotations

import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

from acuity.errors import SessionNotFoundError
from acuity.models import ZestState
from acuity.summary import Eye


@dataclass
class AcuitySession:
    id: str
    eye: Eye
    state: ZestState
    participant_id: Optional[str] = None
    created_at: float = field(default_factory=time.time)


class InMemorySessionStore:
    """Live test sessions, bounded; the oldest session is dropped first."""

    def __init__(self, max_sessions: int = 1000):
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, AcuitySession]" = OrderedDict()
        self._lock = threading.Lock()

    def create(self, eye: Eye, state: ZestState, participant_id: Optional[str] = None) -> AcuitySession:
        session = AcuitySession(id=str(uuid.uuid4()), eye=eye, state=state, participant_id=participant_id)
        with self._lock:
            self._sessions[session.id] = session
            while len(self._sessions) > self.max_sessions:
                self._sessions.popitem(last=False)
        return session

    def get(self, session_id: str) -> AcuitySession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def apply(self, session_id: str, fn: Callable[[ZestState], ZestState]) -> AcuitySession:
        """Replace a session's state with ``fn(state)`` as one locked step.

        Returns a copy of the updated session; exceptions from ``fn`` leave
        the stored state untouched.
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)
            session.state = fn(session.state)
            return replace(session)

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)

    def list(self, participant_id: Optional[str] = None) -> List[AcuitySession]:
        with self._lock:
            sessions = list(self._sessions.values())
        if participant_id is not None:
            sessions = [s for s in sessions if s.participant_id == participant_id]
        return sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
