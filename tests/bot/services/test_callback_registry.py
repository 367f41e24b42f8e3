"""
🧪 test_callback_registry.py — unit-тести для CallbackRegistry

Перевіряє:
- Кожен payload застосунку приймає рівно один маршрут
- Точні збіги раніше за префіксні, найдовший префікс виграє
- Валідацію обробників при реєстрації
"""

import pytest

from teleshop.bot.services import CallbackData, CallbackRegistry
from teleshop.config.setup.constants import CONST


async def _noop(update, context):
    return None


async def _other(update, context):
    return None


def _sample_payload(spec):
    return spec.build(*(f"x{index}" for index, _ in enumerate(spec.params)))


@pytest.mark.asyncio
async def test_application_table_is_unambiguous(container):
    """🧭 Жоден payload не «ловиться» двома маршрутами."""
    registry = container.callback_registry
    for spec in CONST.CALLBACKS.all():
        payload = _sample_payload(spec)
        assert registry.ambiguous_matches(payload) == [spec], payload
        route, _ = registry.resolve(payload)
        assert route.spec == spec


@pytest.mark.asyncio
async def test_every_callback_has_a_handler(container):
    """📋 Усі токени з констант мають обробник."""
    assert container.callback_registry.missing_keys(CONST.CALLBACKS.all()) == []


def test_longest_prefix_wins_and_exact_goes_first():
    """📏 sel_qty_5 дістається sel_qty, а не sel; точний токен — першим."""
    registry = CallbackRegistry()
    short = CallbackData(action="sel", params=("a", "b"))
    long = CallbackData(action="sel_qty", params=("n",))
    exact = CallbackData(action="sel_qty_5")
    registry.register_map({short: _noop, long: _other, exact: _noop})

    route, params = registry.resolve("sel_qty_5")
    assert route.spec == exact
    assert params == {}

    route, params = registry.resolve("sel_qty_7")
    assert route.spec == long
    assert params == {"n": "7"}
    assert registry.ambiguous_matches("sel_qty_7") == [long, short]


def test_unknown_payload_resolves_to_none():
    """❓ Невідомий payload — None (далі головне меню)."""
    registry = CallbackRegistry()
    registry.register_map({CONST.CALLBACKS.CARTS: _noop})
    assert registry.resolve("definitely_unknown") is None


def test_sync_handler_is_rejected():
    """🚫 Обробник має бути async."""
    registry = CallbackRegistry()
    with pytest.raises(TypeError):
        registry.register_map({CONST.CALLBACKS.CARTS: lambda update, context: None})


def test_non_spec_key_is_rejected():
    """🚫 Ключ — лише CallbackData."""
    registry = CallbackRegistry()
    with pytest.raises(TypeError):
        registry.register_map({"carts": _noop})
