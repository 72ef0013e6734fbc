"""Session event logging, spans and the admin CLI."""
from .logger import log_event
from .tracing import span

__all__ = ["log_event", "span"]
