from .interfaces import CURRENCY_KEY, RATES_KEY, TOKEN_KEY, IKeyValueStore

__all__ = ["IKeyValueStore", "TOKEN_KEY", "CURRENCY_KEY", "RATES_KEY"]
