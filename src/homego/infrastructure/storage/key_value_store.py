# 💾 homego/infrastructure/storage/key_value_store.py
"""
💾 Реалізації `IKeyValueStore`: аналог localStorage браузера.

🔹 `InMemoryKeyValueStore`: для тестів і короткоживучих процесів.
🔹 `JsonFileKeyValueStore`: один JSON-файл на диску, асинхронний I/O через aiofiles.
    Запис іде у тимчасовий файл і атомарно підміняє основний.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                     # 💽 Асинхронна робота з файлами
import aiofiles.os

# 🔠 Системні імпорти
import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from homego.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)


class InMemoryKeyValueStore:
    """🧠 Словник у пам'яті з async-інтерфейсом."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class JsonFileKeyValueStore:
    """
    💾 Key-value сховище в JSON-файлі.

    Файл читається ліниво при першому зверненні; зіпсований або відсутній файл
    трактується як порожнє сховище (з попередженням у лозі).
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()
        self._data: Optional[Dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            data = await self._ensure_loaded()
            return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await self._ensure_loaded()
            updated = dict(data)
            updated[key] = str(value)
            await self._flush(updated)
            self._data = updated                                    # 🔁 Кеш міняємо лише після успішного запису

    async def remove(self, key: str) -> None:
        async with self._lock:
            data = await self._ensure_loaded()
            if key not in data:
                return
            updated = {k: v for k, v in data.items() if k != key}
            await self._flush(updated)
            self._data = updated

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _ensure_loaded(self) -> Dict[str, str]:
        if self._data is not None:
            return self._data
        data: Dict[str, str] = {}
        try:
            async with aiofiles.open(self._path, "r", encoding="utf-8") as f:
                parsed = json.loads(await f.read())
            if isinstance(parsed, dict):
                data = {str(k): str(v) for k, v in parsed.items()}
            else:
                logger.warning("⚠️ %s не містить JSON-об'єкт, сховище починаємо з нуля", self._path)
        except FileNotFoundError:
            logger.debug("📭 Файл сховища %s ще не існує", self._path)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("⚠️ Не вдалося прочитати сховище %s: %s", self._path, e)
        self._data = data
        return data

    async def _flush(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        payload = json.dumps(data, indent=2, ensure_ascii=False)
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(payload)
        await aiofiles.os.replace(tmp_path, self._path)
        logger.debug("💾 Сховище збережено (%d ключів) → %s", len(data), self._path)


__all__ = ["InMemoryKeyValueStore", "JsonFileKeyValueStore"]
