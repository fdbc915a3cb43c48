from __future__ import annotations


class AcuityError(Exception):
    """Base class for acuity engine errors."""


class SessionCompleteError(AcuityError):
    """Raised when a response is applied to a state that already terminated."""


class SessionNotFoundError(AcuityError, KeyError):
    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Unknown session {self.session_id}"
