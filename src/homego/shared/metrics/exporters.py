# 🚀 homego/shared/metrics/exporters.py
"""
🚀 Опційний HTTP-експортер `/metrics` для Prometheus.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server

# 🔠 Системні імпорти
import logging
from typing import Any, Mapping, Optional

from homego.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

_started = False


def maybe_start_prometheus(node: Optional[Mapping[str, Any]]) -> bool:
    """Піднімає експортер один раз, якщо `metrics.enabled` увімкнено. Повертає True, якщо запущено."""
    global _started
    node = node or {}
    if not node.get("enabled") or _started:
        return False
    port = int(node.get("port", 9108))
    try:
        start_http_server(port)
    except OSError as e:
        logger.error("❌ Не вдалося запустити Prometheus-експортер на порту %s: %s", port, e)
        return False
    _started = True
    logger.info("📈 Prometheus exporter listening on :%s", port)
    return True


__all__ = ["maybe_start_prometheus"]
