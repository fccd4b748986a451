# 📊 homego/shared/metrics/__init__.py
"""
📊 Метрики Prometheus для сесії та курсів валют.
"""

from __future__ import annotations

from .counters import AUTH_FAILURES, AUTH_TRANSITIONS, RATE_REFRESHES
from .exporters import maybe_start_prometheus

__all__ = [
    "AUTH_FAILURES",
    "AUTH_TRANSITIONS",
    "RATE_REFRESHES",
    "maybe_start_prometheus",
]
