"""
Event bus for observability notifications.
"""

from .bus import EventBus
from .types import AgentEvent, EventHandler, EventTypes

__all__ = ["AgentEvent", "EventBus", "EventHandler", "EventTypes"]
