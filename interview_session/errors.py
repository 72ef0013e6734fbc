"""Errors raised by the interview session state machine."""
from __future__ import annotations


class StateTransitionError(RuntimeError):
    """A call was made that is not valid in the session's current state."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"cannot move from '{current}' to '{target}'")
        self.current = current
        self.target = target


class HandoffError(RuntimeError):
    """The completion handler failed after the session finished."""

    def __init__(self, session_id: str, message: str) -> None:
        super().__init__(f"session {session_id}: {message}")
        self.session_id = session_id
