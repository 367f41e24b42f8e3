# 🧩 teleshop/domain/pricing/interfaces.py
"""
🧩 Контракти ціноутворення за тирами.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol

# 🧩 Внутрішні модулі проєкту
from teleshop.domain.shop.entities import CartLine, PricingTier, Product


class ITierSource(Protocol):
    """Звідки резолвер бере товар і його активні тири (зазвичай — IShopRepository)."""

    async def get_product(self, product_id: str) -> Optional[Product]: ...
    async def list_active_tiers(self, product_id: str) -> List[PricingTier]: ...


class IPricingResolver(ABC):
    """💰 Ціна за одиницю з урахуванням кількості."""

    @abstractmethod
    async def price_for(self, product_id: str, quantity: int) -> Decimal:
        """Повертає ціну за одиницю для `quantity` штук."""

    @abstractmethod
    async def cart_total(self, lines: Iterable[CartLine]) -> Decimal:
        """Сума кошика за актуальними цінами."""


__all__ = ["ITierSource", "IPricingResolver"]
