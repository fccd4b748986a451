# 📣 homego/shared/events/__init__.py
from .event_bus import AUTH_STATE_CHANGED, CURRENCY_CHANGED, EventBus, EventListener, Unsubscribe

__all__ = ["AUTH_STATE_CHANGED", "CURRENCY_CHANGED", "EventBus", "EventListener", "Unsubscribe"]
