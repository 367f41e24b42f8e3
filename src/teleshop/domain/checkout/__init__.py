# 🧾 teleshop/domain/checkout/__init__.py
"""
🧾 Пакет `domain.checkout` — правила оформлення замовлення.
"""

from .services import (
    CheckoutDraft,
    CheckoutDraftStore,
    CheckoutQuote,
    CheckoutService,
    CompletionResult,
    mint_order_number,
    parse_customer_info,
)

__all__ = [
    "CheckoutDraft",
    "CheckoutDraftStore",
    "CheckoutQuote",
    "CheckoutService",
    "CompletionResult",
    "mint_order_number",
    "parse_customer_info",
]
