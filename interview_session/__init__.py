"""Interview session state machine."""
from .errors import HandoffError, StateTransitionError
from .machine import VALID_TRANSITIONS, CompletionHandler, InterviewSession, SessionState

__all__ = [
    "CompletionHandler",
    "HandoffError",
    "InterviewSession",
    "SessionState",
    "StateTransitionError",
    "VALID_TRANSITIONS",
]
