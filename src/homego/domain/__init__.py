# 🏛️ homego/domain/__init__.py
"""
🏛️ Доменний шар: сутності та контракти без залежностей від інфраструктури.
"""
