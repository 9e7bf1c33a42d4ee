"""In-process messaging for arena events."""
from .event_bus import EventBus

__all__ = ["EventBus"]
