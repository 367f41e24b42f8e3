# 💸 teleshop/domain/pricing/__init__.py
"""
💸 Пакет `domain.pricing` — ціна за кількістю (тири).

🔹 `interfaces.py` — ITierSource, IPricingResolver.
🔹 `rounding.py` — `q2`, `to_decimal`.
🔹 `services.py` — `TierPricingResolver` і валідатор перетину діапазонів.
"""

from .interfaces import IPricingResolver, ITierSource
from .rounding import q2, to_decimal
from .services import (
    PricedLine,
    TierOverlapError,
    TierPricingResolver,
    TierValidationError,
    ranges_overlap,
    validate_new_tier,
    validate_tier,
    validate_tiers,
)

__all__ = [
    "IPricingResolver",
    "ITierSource",
    "PricedLine",
    "TierOverlapError",
    "TierPricingResolver",
    "TierValidationError",
    "q2",
    "ranges_overlap",
    "to_decimal",
    "validate_new_tier",
    "validate_tier",
    "validate_tiers",
]
