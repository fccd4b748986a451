# 🏗️ homego/infrastructure/__init__.py
"""
🏗️ Інфраструктурний шар: HTTP-клієнти, сховища, менеджери сесії та валют.
"""
