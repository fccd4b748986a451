# homego/config/setup/__init__.py
"""
⚙️ Пакет для 'збірки' всіх компонентів ядра перед використанням.
"""

from .container import Container, bootstrap_logging

__all__ = [
    "Container",
    "bootstrap_logging",
]
