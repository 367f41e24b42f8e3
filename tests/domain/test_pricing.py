"""
🧪 test_pricing.py — unit-тести для тирових цін

Перевіряє:
- Вибір ціни за кількістю (тир або базова ціна)
- Ігнорування неактивних тирів і вимкнених товарів
- Перетин напіввідкритих діапазонів і валідацію
- Відмову сховища додати тир, що перетинається
"""

from decimal import Decimal

import pytest

from teleshop.domain.pricing import (
    TierOverlapError,
    TierPricingResolver,
    TierValidationError,
    ranges_overlap,
    validate_tier,
    validate_tiers,
)
from teleshop.domain.shop.entities import CartLine, PricingTier, Product
from teleshop.infrastructure.storage import JsonShopStorage
from teleshop.shared.errors import StaleReferenceError


class FakeTierSource:
    def __init__(self, products, tiers):
        self.products = {p.id: p for p in products}
        self.tiers = list(tiers)

    async def get_product(self, product_id):
        return self.products.get(product_id)

    async def list_active_tiers(self, product_id):
        return [t for t in self.tiers if t.product_id == product_id]


def tier(lo, hi, price, product_id="p1", active=True):
    return PricingTier(
        product_id=product_id,
        min_quantity=lo,
        max_quantity=hi,
        unit_price=Decimal(price),
        is_active=active,
    )


@pytest.fixture
def resolver():
    source = FakeTierSource(
        products=[
            Product(id="p1", name="Beans", price=Decimal("12.00")),
            Product(id="p2", name="Mug", price=Decimal("5.00")),
            Product(id="p3", name="Retired", price=Decimal("7.00"), is_active=False),
        ],
        tiers=[tier(1, 9, "10.00"), tier(10, None, "8.00"), tier(1, None, "1.00", product_id="p2", active=False)],
    )
    return TierPricingResolver(source)


@pytest.mark.asyncio
@pytest.mark.parametrize("quantity,expected", [(1, "10.00"), (5, "10.00"), (9, "10.00"), (10, "8.00"), (100, "8.00")])
async def test_price_follows_tiers(resolver, quantity, expected):
    """💸 [1-9] → 10.00, [10-∞) → 8.00."""
    assert await resolver.price_for("p1", quantity) == Decimal(expected)


@pytest.mark.asyncio
async def test_inactive_tier_falls_back_to_base_price(resolver):
    """💤 Неактивний тир ігнорується — базова ціна товару."""
    assert await resolver.price_for("p2", 3) == Decimal("5.00")


@pytest.mark.asyncio
async def test_zero_quantity_rejected(resolver):
    """🚫 Кількість 0 — ValueError."""
    with pytest.raises(ValueError):
        await resolver.price_for("p1", 0)


@pytest.mark.asyncio
async def test_missing_product_is_stale(resolver):
    """🕸️ Видалений товар → StaleReferenceError."""
    with pytest.raises(StaleReferenceError) as exc_info:
        await resolver.price_for("ghost", 1)
    assert exc_info.value.reference == "ghost"


@pytest.mark.asyncio
async def test_cart_total_skips_missing_products(resolver):
    """🧮 5×10 + 10×8 = 130; рядок з видаленим товаром пропущено."""
    lines = [CartLine("u", "p1", 5), CartLine("u", "p1", 10), CartLine("u", "ghost", 3)]
    assert await resolver.cart_total(lines) == Decimal("130.00")
    assert await resolver.line_total("p1", 10) == Decimal("80.00")


@pytest.mark.parametrize(
    "first,second,overlap",
    [
        ((1, 9), (10, None), False),
        ((1, 10), (10, None), True),
        ((5, None), (1, 4), False),
        ((5, None), (1, 5), True),
        ((1, None), (100, None), True),
        ((3, 3), (4, 4), False),
    ],
)
def test_ranges_overlap_is_half_open(first, second, overlap):
    """📏 Сусідні діапазони [a-b] і [b+1-…] не перетинаються; спільна межа — перетинаються."""
    a = tier(first[0], first[1], "1")
    b = tier(second[0], second[1], "1")
    assert ranges_overlap(a, b) is overlap
    assert ranges_overlap(b, a) is overlap


def test_validate_tiers_reports_overlap():
    """⚠️ Перетин двох активних тирів → TierOverlapError з обома тирами."""
    first, second = tier(1, 10, "10"), tier(10, None, "8")
    with pytest.raises(TierOverlapError) as exc_info:
        validate_tiers([second, first])
    assert {exc_info.value.first, exc_info.value.second} == {first, second}


def test_validate_tiers_ignores_inactive_and_other_products():
    """💤 Неактивні тири та тири інших товарів не конфліктують."""
    validate_tiers([tier(1, None, "10"), tier(1, None, "9", active=False)])
    validate_tiers([tier(1, None, "10"), tier(1, None, "9", product_id="p2")])


@pytest.mark.parametrize("bad", [tier(0, 5, "1"), tier(5, 4, "1"), tier(1, None, "0")])
def test_validate_tier_rejects_malformed(bad):
    """🚫 min < 1, max < min або ціна ≤ 0."""
    with pytest.raises(TierValidationError):
        validate_tier(bad)


@pytest.mark.asyncio
async def test_storage_rejects_overlapping_tier():
    """🗄️ add_pricing_tier валідує новий тир проти наявних."""
    storage = JsonShopStorage(
        catalog={
            "products": [{"id": "p1", "name": "Beans", "price": "12.00"}],
            "pricing_tiers": [{"product_id": "p1", "min_quantity": 1, "max_quantity": 9, "unit_price": "10.00"}],
        }
    )

    with pytest.raises(TierOverlapError):
        await storage.add_pricing_tier(tier(5, None, "8.00"))

    await storage.add_pricing_tier(tier(10, None, "8.00"))
    assert [t.min_quantity for t in await storage.list_active_tiers("p1")] == [1, 10]


def test_catalog_with_overlapping_tiers_is_rejected():
    """🧱 Перетин у конфігу каталогу — помилка на старті."""
    with pytest.raises(TierOverlapError):
        JsonShopStorage(
            catalog={
                "products": [{"id": "p1", "price": "12.00"}],
                "pricing_tiers": [
                    {"product_id": "p1", "min_quantity": 1, "max_quantity": 10, "unit_price": "10.00"},
                    {"product_id": "p1", "min_quantity": 10, "unit_price": "8.00"},
                ],
            }
        )


@pytest.mark.asyncio
async def test_inactive_product_is_not_priced(resolver):
    """💤 Товар вимкнули посеред чекауту: рядок пропущено, пряма ціна → StaleReferenceError."""
    lines = [CartLine("u", "p1", 2), CartLine("u", "p3", 4)]

    priced = await resolver.price_lines(lines)

    assert [line.product.id for line in priced] == ["p1"]
    assert await resolver.cart_total(lines) == Decimal("20.00")
    with pytest.raises(StaleReferenceError):
        await resolver.price_for("p3", 1)
