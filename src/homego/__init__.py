# 🛋️ homego/__init__.py
"""
🛋️ HomeGo: клієнтське ядро меблевого магазину.

🔹 `infrastructure.auth`: сесія, логін/реєстрація, ролі.
🔹 `infrastructure.currency`: курси валют, конвертація та форматування цін.
🔹 `config.setup.container`: збирає все разом для UI-шару.
"""

__version__ = "1.0.0"
