"""
🧪 test_callback_handler.py — unit-тести для CallbackHandler

Перевіряє:
- Відповідь на кожен callback до маршрутизації
- Тиху зупинку, якщо відповісти не вдалося
- Невідомий payload → головне меню
- Передачу параметрів і винятків
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from teleshop.bot.handlers import CallbackHandler
from teleshop.bot.services import CallbackRegistry
from teleshop.config.setup.constants import CONST


@pytest.fixture
def calls():
    return []


@pytest.fixture
def registry(calls):
    registry = CallbackRegistry()

    async def on_product(update, context):
        calls.append(("product", dict(context.callback_params)))

    async def on_broken(update, context):
        raise RuntimeError("boom")

    registry.register_map({CONST.CALLBACKS.PRODUCT: on_product, CONST.CALLBACKS.CARTS: on_broken})
    return registry


@pytest.fixture
def handler(registry, transport, calls):
    async def fallback(update, context):
        calls.append(("menu", dict(context.callback_params)))

    eh = MagicMock()
    eh.handle = AsyncMock()
    return CallbackHandler(registry=registry, transport=transport, exception_handler=eh, fallback=fallback)


@pytest.mark.asyncio
async def test_routes_with_params_after_answer(handler, transport, callback_update, calls):
    """🎯 product_p1 → обробник з product_id=p1, callback підтверджено."""
    update = callback_update("product_p1")
    await handler.handle(update, SimpleNamespace())

    assert transport.answered == [update.callback_query.id]
    assert calls == [("product", {"product_id": "p1"})]


@pytest.mark.asyncio
async def test_answer_failure_aborts_silently(handler, transport, callback_update, calls):
    """🤫 Якщо answer впав — нічого не обробляємо і нічого не піднімаємо."""
    transport.fail_answer = True
    await handler.handle(callback_update("product_p1"), SimpleNamespace())

    assert calls == []
    handler._eh.handle.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_payload_falls_back_to_menu(handler, callback_update, calls):
    """❓ Невідомий payload → головне меню з порожніми параметрами."""
    await handler.handle(callback_update("no_such_button_42"), SimpleNamespace())
    assert calls == [("menu", {})]


@pytest.mark.asyncio
async def test_handler_error_goes_to_exception_service(handler, callback_update):
    """🚑 Виняток обробника — у ExceptionHandlerService разом з апдейтом."""
    update = callback_update("carts")
    await handler.handle(update, SimpleNamespace())

    handler._eh.handle.assert_awaited_once()
    error, passed_update = handler._eh.handle.await_args.args
    assert isinstance(error, RuntimeError)
    assert passed_update is update


@pytest.mark.asyncio
async def test_unknown_payload_renders_main_menu_end_to_end(press, transport):
    """🏠 Через справжній контейнер: застаріла кнопка показує привітання."""
    await press("legacy_button_from_old_release")
    assert "Welcome to Test Shop" in transport.last_text
    assert "listings" in transport.last_callbacks()
