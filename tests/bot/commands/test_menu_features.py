"""
🧪 test_menu_features.py — тести пунктів головного меню

Перевіряє:
- /start: облік користувача та привітання; /help і /catalog
- Налаштування мови/валюти і їх вплив на наступні екрани
- Оцінки (валидні й зіпсовані), список бажань, замовлення, підтримку
"""

import pytest

CHAT = 100
USER = str(CHAT)


@pytest.mark.asyncio
async def test_start_tracks_user_and_shows_menu(container, text_update, context, transport):
    """▶️ /start зберігає користувача і показує привітання з назвою магазину."""
    await container.core_feature.start_command(text_update("/start"), context)

    assert USER in await container.storage.list_user_ids()
    assert "Welcome to Test Shop!" in transport.last_text
    assert container.conversations.tracked(CHAT) == (transport.sent[-1][1],)


@pytest.mark.asyncio
async def test_set_language_switches_catalog(press, container, transport):
    """🌐 set_lang_uk → наступне меню українською."""
    await press("set_lang_uk")
    prefs = await container.storage.get_preferences(USER)
    assert prefs.language == "uk"

    await press("back_to_menu")
    assert "Вітаємо в Test Shop" in transport.last_text


@pytest.mark.asyncio
async def test_unknown_language_keeps_settings(press, container, transport):
    """🌐 set_lang_xx → екран налаштувань без змін."""
    await press("set_lang_xx")

    assert (await container.storage.get_preferences(USER)).language == "en"
    assert "Settings" in transport.last_text


@pytest.mark.asyncio
async def test_set_currency_changes_price_rendering(press, container, transport):
    """💱 set_currency_eur → ціни в євро за резервним курсом."""
    await press("set_currency_eur")
    assert (await container.storage.get_preferences(USER)).currency == "EUR"

    await container.storage.set_cart_quantity(USER, "p1", 1)
    await press("carts")
    assert "€8.50" in transport.last_text


@pytest.mark.asyncio
async def test_shop_rating_is_saved(press, container, transport):
    """⭐ rate_5 → оцінка магазину і подяка."""
    await press("rate_5")

    ratings = await container.storage.list_ratings()
    assert [(r.user_id, r.rating, r.product_id) for r in ratings] == [(USER, 5, None)]
    assert "5-star" in transport.last_text


@pytest.mark.asyncio
async def test_product_rating_is_saved(press, container):
    """⭐ rate_product_p1_4 → оцінка товару."""
    await press("rate_product_p1_4")
    ratings = await container.storage.list_ratings("p1")
    assert [r.rating for r in ratings] == [4]


@pytest.mark.asyncio
async def test_malformed_rating_goes_to_main_menu(press, container, transport):
    """🚫 rate_9 → меню, нічого не збережено."""
    await press("rate_9")

    assert await container.storage.list_ratings() == []
    assert "Welcome to Test Shop" in transport.last_text


@pytest.mark.asyncio
async def test_wishlist_add_and_remove(press, container, transport):
    """❤️ wishlist_add / wishlist_remove."""
    await press("wishlist_add_p1")
    assert [i.product_id for i in await container.storage.list_wishlist(USER)] == ["p1"]
    assert "Added to wishlist" in transport.last_text

    await press("wishlist_remove_p1")
    assert await container.storage.list_wishlist(USER) == []


@pytest.mark.asyncio
async def test_orders_empty(press, transport):
    """📦 Без замовлень — підказка зробити перше."""
    await press("orders")
    assert "No orders yet" in transport.last_text


@pytest.mark.asyncio
async def test_operator_uses_shop_settings(press, transport):
    """👤 Контакти оператора з налаштувань магазину."""
    await press("operator")

    assert "@ops" in transport.last_text
    assert "ops@example.com" in transport.last_text
    assert {"live_chat", "send_email", "view_faq"} <= set(transport.last_callbacks())


@pytest.mark.asyncio
async def test_spanish_falls_back_to_english_for_missing_keys(press, container, transport):
    """🌍 es: відсутній ключ кнопки FAQ береться з англійського каталогу."""
    await press("set_lang_es")
    await press("operator")

    labels = [btn.text for row in transport.last_keyboard.inline_keyboard for btn in row]
    assert container.localization.translate_for("en", "button_faq") in labels
    assert container.localization.translate_for("es", "button_faq") == container.localization.translate_for("en", "button_faq")


@pytest.mark.asyncio
async def test_help_command_default_text(container, text_update, context, transport):
    """ℹ️ /help без налаштування → текст із каталогу локалізації + кнопка до меню."""
    await container.core_feature.help_command(text_update("/help"), context)

    assert "/catalog - View products" in transport.last_text
    assert transport.last_callbacks() == ["back_to_menu"]
    assert container.conversations.tracked(CHAT) == (transport.sent[-1][1],)


@pytest.mark.asyncio
async def test_help_command_uses_shop_setting(container, text_update, context, transport):
    """⚙️ help_message з налаштувань магазину має пріоритет."""
    await container.storage.update_bot_settings({"help_message": "Ask @ops anything"})

    await container.core_feature.help_command(text_update("/help"), context)

    assert transport.last_text == "Ask @ops anything"


@pytest.mark.asyncio
async def test_catalog_command_opens_listings(container, text_update, context, transport):
    """📋 /catalog показує той самий екран, що й кнопка listings, замінюючи попередній."""
    await container.core_feature.start_command(text_update("/start"), context)
    menu_id = transport.sent[-1][1]

    await container.core_feature.catalog_command(text_update("/catalog"), context)

    assert "Choose Product Category" in transport.last_text
    assert "category_coffee" in transport.last_callbacks()
    assert (CHAT, menu_id) in transport.deleted
    assert container.conversations.tracked(CHAT) == (transport.sent[-1][1],)
