# 🧩 homego/shared/__init__.py
"""
🧩 Спільний шар: логування, шина подій та метрики.
"""
