# 📦 teleshop/domain/pricing/services.py
"""
📦 Резолвер ціни за кількістю (тири) та валідатор діапазонів.

🔹 `TierPricingResolver.price_for` — перший активний тир (за зростанням min), що містить кількість,
   інакше базова ціна товару. Функція тотальна для будь-якої кількості ≥ 1.
🔹 `ranges_overlap` / `validate_tiers` — перевірка перетину напіввідкритих інтервалів
   `[min, max + 1)`, де `max=None` означає нескінченність.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from teleshop.domain.shop.entities import CartLine, PricingTier, Product
from teleshop.shared.errors import StaleReferenceError
from teleshop.shared.utils.logger import LOG_NAME
from .interfaces import IPricingResolver, ITierSource
from .rounding import q2

logger = logging.getLogger(f"{LOG_NAME}.domain.pricing")


# ================================
# ⚠️ ПОМИЛКИ ВАЛІДАЦІЇ ТИРІВ
# ================================
class TierValidationError(ValueError):
    """Некоректний тир або набір тирів."""


class TierOverlapError(TierValidationError):
    """Діапазони двох тирів одного товару перетинаються."""

    def __init__(self, first: PricingTier, second: PricingTier) -> None:
        super().__init__(
            f"Tier ranges overlap for product {first.product_id}: "
            f"[{first.min_quantity}-{first.max_quantity or '∞'}] vs "
            f"[{second.min_quantity}-{second.max_quantity or '∞'}]"
        )
        self.first = first
        self.second = second


# ================================
# 📏 ІНТЕРВАЛИ
# ================================
def _half_open(tier: PricingTier) -> Tuple[int, Optional[int]]:
    """[min, max] → [min, max + 1); None — без верхньої межі."""
    end = None if tier.max_quantity is None else tier.max_quantity + 1
    return tier.min_quantity, end


def ranges_overlap(first: PricingTier, second: PricingTier) -> bool:
    """True, якщо напіввідкриті інтервали двох тирів мають спільну кількість."""
    a_start, a_end = _half_open(first)
    b_start, b_end = _half_open(second)
    a_before_b_ends = b_end is None or a_start < b_end
    b_before_a_ends = a_end is None or b_start < a_end
    return a_before_b_ends and b_before_a_ends


def validate_tier(tier: PricingTier) -> None:
    """Перевіряє один тир: min ≥ 1, max ≥ min, ціна > 0."""
    if tier.min_quantity < 1:
        raise TierValidationError(f"min_quantity must be >= 1, got {tier.min_quantity}")
    if tier.max_quantity is not None and tier.max_quantity < tier.min_quantity:
        raise TierValidationError(
            f"max_quantity {tier.max_quantity} is lower than min_quantity {tier.min_quantity}"
        )
    if tier.unit_price <= 0:
        raise TierValidationError(f"unit_price must be positive, got {tier.unit_price}")


def validate_tiers(tiers: Sequence[PricingTier]) -> None:
    """
    Валідує набір тирів одного товару. Неактивні тири не беруть участі в перевірці перетинів.

    Raises:
        TierValidationError / TierOverlapError
    """
    for tier in tiers:
        validate_tier(tier)
    active = sorted((t for t in tiers if t.is_active), key=lambda t: t.min_quantity)
    for index, tier in enumerate(active):
        for other in active[index + 1:]:
            if tier.product_id == other.product_id and ranges_overlap(tier, other):
                raise TierOverlapError(tier, other)


def validate_new_tier(existing: Iterable[PricingTier], candidate: PricingTier) -> None:
    """Перевірка перед створенням/оновленням тиру в адмінці."""
    validate_tiers([*existing, candidate])


# ================================
# 🧾 РЯДОК КОШИКА З ЦІНОЮ
# ================================
@dataclass(frozen=True, slots=True)
class PricedLine:
    product: Product
    quantity: int
    unit_price: Decimal

    @property
    def total(self) -> Decimal:
        return q2(self.unit_price * self.quantity)


# ================================
# 💰 РЕЗОЛВЕР
# ================================
class TierPricingResolver(IPricingResolver):
    """💰 Ціна за одиницю з урахуванням тирів. Нічого не кешує — кожен виклик читає сховище."""

    def __init__(self, source: ITierSource) -> None:
        self._source = source

    async def price_for(self, product_id: str, quantity: int) -> Decimal:
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")
        product = await self._source.get_product(product_id)
        if product is None or not product.is_active:
            raise StaleReferenceError("product", product_id)
        return await self._resolve(product, quantity)

    async def line_total(self, product_id: str, quantity: int) -> Decimal:
        return q2(await self.price_for(product_id, quantity) * quantity)

    async def price_lines(self, lines: Iterable[CartLine]) -> List[PricedLine]:
        """Рядки кошика з актуальною ціною. Рядки з видаленими чи вимкненими товарами пропускаються."""
        priced: List[PricedLine] = []
        for line in lines:
            product = await self._source.get_product(line.product_id)
            if product is None or not product.is_active:
                logger.warning("🕸️ Cart line references missing or inactive product %s — skipped", line.product_id)
                continue
            unit_price = await self._resolve(product, line.quantity)
            priced.append(PricedLine(product=product, quantity=line.quantity, unit_price=unit_price))
        return priced

    async def cart_total(self, lines: Iterable[CartLine]) -> Decimal:
        priced = await self.price_lines(lines)
        return q2(sum((line.total for line in priced), Decimal("0")))

    # ================================
    # 🔒 ВНУТРІШНЄ
    # ================================
    async def _resolve(self, product: Product, quantity: int) -> Decimal:
        tiers = await self._source.list_active_tiers(product.id)
        ordered = sorted((t for t in tiers if t.is_active), key=lambda t: t.min_quantity)
        for tier in ordered:
            if tier.contains(quantity):
                logger.debug(
                    "💸 Tier hit product=%s qty=%s range=[%s-%s] price=%s",
                    product.id,
                    quantity,
                    tier.min_quantity,
                    tier.max_quantity,
                    tier.unit_price,
                )
                return q2(tier.unit_price)
        logger.debug("💸 Base price product=%s qty=%s price=%s", product.id, quantity, product.price)
        return q2(product.price)


__all__ = [
    "PricedLine",
    "TierPricingResolver",
    "TierValidationError",
    "TierOverlapError",
    "ranges_overlap",
    "validate_tier",
    "validate_tiers",
    "validate_new_tier",
]
