# 📣 homego/shared/events/event_bus.py
"""
📣 event_bus.py: синхронна in-process шина подій для UI-шару.

🎯 Призначення:
    • Зберігає підписників по темах (`authStateChanged`, `currencyChanged`, ...)
    • Доставляє подію одразу, в порядку реєстрації, без черги пропущених подій
    • Ізолює підписників: виняток одного лише логуються, решта отримує подію

⚙️ Особливості:
    • `subscribe()` повертає функцію відписки
    • Підписник, зареєстрований після події, її не отримає (best-effort)
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Any, Callable, Dict, List, Mapping

from homego.shared.utils.logger import LOG_NAME


logger = logging.getLogger(LOG_NAME)

AUTH_STATE_CHANGED = "authStateChanged"
CURRENCY_CHANGED = "currencyChanged"

EventListener = Callable[[Mapping[str, Any]], None]
Unsubscribe = Callable[[], None]


class EventBus:
    """📣 Реєстр слухачів `topic → [listener, ...]`."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[EventListener]] = {}

    def subscribe(self, topic: str, listener: EventListener) -> Unsubscribe:
        """
        Реєструє слухача теми.

        Raises:
            TypeError: якщо `listener` не callable.
        """
        if not callable(listener):
            raise TypeError(f"Listener for '{topic}' must be callable, got {type(listener).__name__}")
        self._listeners.setdefault(topic, []).append(listener)
        logger.debug("➕ Subscribed %r to '%s'", listener, topic)

        def _unsubscribe() -> None:
            listeners = self._listeners.get(topic, [])
            if listener in listeners:
                listeners.remove(listener)
                logger.debug("➖ Unsubscribed %r from '%s'", listener, topic)

        return _unsubscribe

    def publish(self, topic: str, payload: Mapping[str, Any]) -> int:
        """Доставляє подію всім поточним слухачам. Повертає кількість успішних доставок."""
        delivered = 0
        for listener in list(self._listeners.get(topic, ())):		# 📋 Копія: слухач може відписатися під час доставки
            try:
                listener(payload)
                delivered += 1
            except Exception:										# noqa: BLE001
                logger.exception("🔥 Listener %r failed on '%s'", listener, topic)
        logger.debug("📣 '%s' delivered to %d listener(s)", topic, delivered)
        return delivered

    def listener_count(self, topic: str) -> int:
        return len(self._listeners.get(topic, ()))

    def clear(self) -> None:
        self._listeners.clear()


__all__ = ["EventBus", "EventListener", "Unsubscribe", "AUTH_STATE_CHANGED", "CURRENCY_CHANGED"]
