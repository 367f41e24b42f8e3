# 💵 teleshop/infrastructure/currency/__init__.py
from .currency_service import BASE_CURRENCY, CurrencyService, DEFAULT_FALLBACK_RATES

__all__ = ["BASE_CURRENCY", "CurrencyService", "DEFAULT_FALLBACK_RATES"]
