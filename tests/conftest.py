# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Додаємо src в sys.path, щоб працював імпорт "homego.…" без pip install -e
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from homego.config.config_service import ConfigService  # noqa: E402


@pytest.fixture
def make_config():
    """Фабрика ізольованих ConfigService (без файлів і .env)."""
    def _make(**sections):
        data = {
            "auth_api": {"base_url": "http://api.test/api", "login_redirect": "login.html"},
            "currency_api": {
                "url": "https://rates.test/v4",
                "base": "USD",
                "retry_attempts": 1,
                "retry_delay_sec": 0,
            },
            "metrics": {"enabled": False},
        }
        data.update(sections)
        return ConfigService.from_mapping(data)

    return _make
