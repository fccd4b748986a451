# 📈 homego/shared/metrics/counters.py
"""
📈 Prometheus-лічильники ядра.

🔹 `AUTH_TRANSITIONS`: переходи сесії (SIGNED_IN / SIGNED_OUT).
🔹 `AUTH_FAILURES`: невдалі запити автентифікації за операцією та причиною.
🔹 `RATE_REFRESHES`: результати оновлення курсів (live / persisted / memory).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter                                # 📊 Prometheus-метрики

AUTH_TRANSITIONS = Counter(
    "homego_auth_transitions_total",
    "Session state transitions",
    ["event"],
)

AUTH_FAILURES = Counter(
    "homego_auth_failures_total",
    "Failed authentication requests",
    ["operation", "reason"],
)

RATE_REFRESHES = Counter(
    "homego_rate_refresh_total",
    "Exchange rate refresh outcomes",
    ["outcome"],
)


__all__ = ["AUTH_TRANSITIONS", "AUTH_FAILURES", "RATE_REFRESHES"]
