# ⚙️ homego/config/config_service.py
"""
⚙️ config_service.py: доступ до статичної конфігурації ядра HomeGo.

🔹 Клас `ConfigService`:
- Збирає конфігурацію з config.yaml, config.json та змінних середовища (.env).
- Надає єдиний метод .get("section.key") для доступу до будь-якого параметра.
- Працює як Singleton; `from_mapping()` створює ізольований екземпляр (тести, вбудовування).
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Змінні з .env

# 🔠 Системні імпорти
import copy                                 # 🧬 Глибокі копії вузлів
import json                                 # 📄 JSON-файл конфігурації
import logging                              # 🧾 Логування
import os                                   # 📁 Змінні середовища
from pathlib import Path                    # 📁 Шляхи до файлів
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("homego.config")

_CONFIG_DIR = Path(__file__).parent

# 🔐 Змінна середовища → крапковий ключ конфігу
_ENV_OVERRIDES: Dict[str, str] = {
    "HOMEGO_API_BASE_URL": "auth_api.base_url",
    "HOMEGO_RATES_URL": "currency_api.url",
    "HOMEGO_STORAGE_FILE": "storage.file",
    "HOMEGO_LOG_LEVEL": "logging.level",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх статичних параметрів ядра.
    Конфігурація зчитується один раз на процес.
    """

    _instance: Optional["ConfigService"] = None
    _config: Dict[str, Any]

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            cls._instance = instance
            logger.debug("🔄 Singleton ConfigService створено")
        return cls._instance

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConfigService":
        """🧪 Екземпляр поза Singleton, наповнений готовим словником (крапкові ключі дозволені)."""
        instance = object.__new__(cls)
        instance._config = {}
        plain = {k: v for k, v in data.items() if "." not in k}
        dotted = {k: v for k, v in data.items() if "." in k}
        instance._deep_update(instance._config, copy.deepcopy(plain))
        instance._deep_update(instance._config, instance._unflatten_dict(dotted))
        return instance

    @classmethod
    def reset(cls) -> None:
        """Скидає Singleton (наступний виклик перечитає файли)."""
        cls._instance = None

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела в один словник.
        Пріоритет (від нижчого до вищого): config.yaml → config.json → .env/оточення.
        """
        yaml_path = _CONFIG_DIR / "config.yaml"
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                self._deep_update(self._config, yaml.safe_load(f) or {})
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити config.yaml: %s", e)

        json_path = _CONFIG_DIR / "config.json"
        if json_path.exists():
            try:
                with open(json_path, "r", encoding="utf-8") as f:
                    self._deep_update(self._config, json.load(f))
            except json.JSONDecodeError as e:
                logger.warning("⚠️ Не вдалося розібрати config.json: %s", e)

        load_dotenv()
        env_values = {
            key: os.environ[env_name]
            for env_name, key in _ENV_OVERRIDES.items()
            if os.environ.get(env_name)
        }
        self._deep_update(self._config, self._unflatten_dict(env_values))
        logger.info("✅ Конфігурацію завантажено (секцій: %d)", len(self._config))

    def get(self, key: str, default: Any = None) -> Any:
        """
        🔑 Повертає значення за крапковим ключем (наприклад: 'auth_api.base_url').

        Args:
            key: Ключ у форматі з крапкою.
            default: Значення, якщо ключ не знайдено.
        """
        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                logger.debug("❓ Ключ '%s' не знайдено, повертаємо default", key)
                return default
        return value

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ
    # ===============================
    @staticmethod
    def _unflatten_dict(d: Mapping[str, Any]) -> Dict[str, Any]:
        """'auth_api.base_url' → {'auth_api': {'base_url': ...}}"""
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            ref = result
            for part in parts[:-1]:
                ref = ref.setdefault(part, {})
            ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict[str, Any], overrides: Mapping[str, Any]) -> None:
        """Рекурсивно зливає `overrides` у `source`."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)
            else:
                source[key] = value
