"""
🧪 test_checkout_service.py — unit-тести доменних правил чекауту

Перевіряє:
- Формат номера замовлення
- Позиційний розбір контактів
- Витіснення старих чернеток
- Ідемпотентне створення замовлення і звільнення локів користувачів
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from teleshop.domain.checkout import CheckoutDraftStore, CheckoutService
from teleshop.domain.checkout.services import mint_order_number, parse_customer_info
from teleshop.domain.pricing import TierPricingResolver
from teleshop.domain.shop.entities import CustomerInfo, Order
from teleshop.infrastructure.storage import JsonShopStorage
from teleshop.shared.errors import StaleReferenceError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
CATALOG = {
    "products": [{"id": "p1", "name": "Beans", "price": "12.00"}],
    "pricing_tiers": [
        {"product_id": "p1", "min_quantity": 1, "max_quantity": 9, "unit_price": "10.00"},
        {"product_id": "p1", "min_quantity": 10, "unit_price": "8.00"},
    ],
    "delivery_methods": [{"id": "courier", "name": "Courier", "price": "5.00"}],
    "payment_methods": [{"id": "card", "name": "Card"}],
}


@pytest.fixture
def storage():
    return JsonShopStorage(catalog=CATALOG)


@pytest.fixture
def service(storage):
    return CheckoutService(storage, TierPricingResolver(storage), clock=lambda: NOW)


async def _methods(storage):
    return await storage.get_delivery_method("courier"), await storage.get_payment_method("card")


def test_order_number_format():
    """🔢 ORD + 10 цифр, без «_»."""
    number = mint_order_number(NOW)
    assert number.startswith("ORD")
    assert len(number) == 13
    assert number[3:].isdigit()
    assert "_" not in number


def test_parse_customer_info_is_positional():
    """📇 Рядок 1 — імʼя, 2 — телефон, решта — адреса; порожні рядки пропускаються."""
    info = parse_customer_info("Bob\n\n+380\nKyiv\napt 5\n")
    assert (info.name, info.phone, info.address) == ("Bob", "+380", "Kyiv\napt 5")

    short = parse_customer_info("Just a name")
    assert (short.name, short.phone, short.address) == ("Just a name", "", "")


def test_draft_store_keeps_latest_numbers():
    """📝 Понад ліміт — найстаріша чернетка витісняється; решта оновлюється поступово."""
    drafts = CheckoutDraftStore(max_per_user=2)
    drafts.update("u", "A", delivery_method_id="courier")
    drafts.update("u", "B")
    drafts.update("u", "A", payment_method_id="card")
    drafts.update("u", "C")

    assert drafts.get("u", "B") is None
    kept = drafts.get("u", "A")
    assert (kept.delivery_method_id, kept.payment_method_id) == ("courier", "card")

    drafts.discard("u", "A")
    assert drafts.get("u", "A") is None


@pytest.mark.asyncio
async def test_quote_uses_tier_prices(storage, service):
    """💵 12 шт → тир 8.00; з доставкою +5.00."""
    await storage.set_cart_quantity("u", "p1", 12)
    quote = await service.quote("u")
    delivery, _ = await _methods(storage)

    assert quote.subtotal == Decimal("96.00")
    assert quote.total_with(delivery) == Decimal("101.00")


@pytest.mark.asyncio
async def test_complete_is_idempotent(storage, service):
    """♻️ Другий виклик з тим самим номером повертає наявне замовлення."""
    await storage.set_cart_quantity("u", "p1", 2)
    delivery, payment = await _methods(storage)
    customer = CustomerInfo(name="Bob", phone="+1", address="Main st")

    first = await service.complete("u", "ORD0000000001", customer=customer, delivery=delivery, payment=payment)
    second = await service.complete("u", "ORD0000000001", customer=customer, delivery=delivery, payment=payment)

    assert first.created and not second.created
    assert second.order == first.order
    assert first.order.total_amount == Decimal("25.00")
    assert first.order.created_at == NOW
    assert await storage.list_cart("u") == []
    assert len(await storage.list_orders("u")) == 1


@pytest.mark.asyncio
async def test_complete_with_empty_cart_is_stale(storage, service):
    """🕸️ Кошик спорожнів до оплати → StaleReferenceError."""
    delivery, payment = await _methods(storage)
    with pytest.raises(StaleReferenceError):
        await service.complete(
            "u", "ORD0000000002", customer=CustomerInfo.placeholder(), delivery=delivery, payment=payment
        )


@pytest.mark.asyncio
async def test_number_taken_by_other_user_gets_suffix(storage, service):
    """🔀 Номер зайнятий іншим користувачем — додається суфікс."""
    await storage.create_order(
        Order(order_number="ORD0000000003", user_id="other", items=(), total_amount=Decimal("1.00"))
    )
    await storage.set_cart_quantity("u", "p1", 1)
    delivery, payment = await _methods(storage)

    result = await service.complete(
        "u", "ORD0000000003", customer=CustomerInfo.placeholder(), delivery=delivery, payment=payment
    )

    assert result.order.order_number == "ORD00000000031"
    assert result.order.user_id == "u"


@pytest.mark.asyncio
async def test_inactive_methods_are_stale(service):
    """🚚 Невідомі способи доставки/оплати → StaleReferenceError."""
    with pytest.raises(StaleReferenceError):
        await service.require_delivery("teleport")
    with pytest.raises(StaleReferenceError):
        await service.require_payment("barter")


@pytest.mark.asyncio
async def test_concurrent_completion_creates_once_and_releases_lock(storage, service):
    """🔒 Два одночасні «оплачено» → одне замовлення; лок користувача не лишається в памʼяті."""
    await storage.set_cart_quantity("u", "p1", 1)
    delivery, payment = await _methods(storage)

    results = await asyncio.gather(
        *(
            service.complete(
                "u", "ORD0000000005", customer=CustomerInfo.placeholder(), delivery=delivery, payment=payment
            )
            for _ in range(2)
        )
    )

    assert sorted(result.created for result in results) == [False, True]
    assert len(await storage.list_orders("u")) == 1
    assert service.held_locks == 0

    with pytest.raises(StaleReferenceError):
        await service.complete(
            "u", "ORD0000000006", customer=CustomerInfo.placeholder(), delivery=delivery, payment=payment
        )
    assert service.held_locks == 0
