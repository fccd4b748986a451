# 📣 homego/infrastructure/auth/auth_broadcaster.py
"""
📣 Транслює переходи сесії (`SIGNED_IN` / `SIGNED_OUT`) у шину подій як `authStateChanged`.
"""

from __future__ import annotations

import logging
from typing import Optional

from homego.domain.auth.entities import AuthEvent, AuthStateChange, User
from homego.shared.events.event_bus import AUTH_STATE_CHANGED, EventBus, EventListener, Unsubscribe
from homego.shared.metrics.counters import AUTH_TRANSITIONS
from homego.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)


class AuthStateBroadcaster:
    """Синхронна, best-effort доставка: пропущені події не накопичуються."""

    def __init__(self, event_bus: EventBus) -> None:
        self._bus = event_bus

    def subscribe(self, listener: EventListener) -> Unsubscribe:
        return self._bus.subscribe(AUTH_STATE_CHANGED, listener)

    def emit(self, event: AuthEvent, user: Optional[User], is_authenticated: bool) -> AuthStateChange:
        change = AuthStateChange(event=event, user=user, is_authenticated=is_authenticated)
        AUTH_TRANSITIONS.labels(event=event.value).inc()
        logger.info("📣 %s (user=%s)", event.value, user.email if user else None)
        self._bus.publish(AUTH_STATE_CHANGED, change.to_payload())
        return change


__all__ = ["AuthStateBroadcaster"]
