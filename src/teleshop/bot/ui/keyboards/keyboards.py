# ⌨️ teleshop/bot/ui/keyboards/keyboards.py
"""
⌨️ Формує всі inline-клавіатури магазину.

🔹 Підписи кнопок локалізуються під користувача (`ILocalizer`)
🔹 callback_data будуються лише через `CONST.CALLBACKS.*.build(...)` (ліміт 64 байти перевіряється там)
🔹 Кожен екран, окрім головного меню, має шлях назад до меню
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import InlineKeyboardButton, InlineKeyboardMarkup          # 🤖 Telegram Bot API

# 🔠 Системні імпорти
import logging                                                           # 🧾 Логування побудови клавіатур
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from teleshop.config.setup.constants import AppConstants                 # ⚙️ Константи UI/Callback
from teleshop.domain.shop.entities import Category, DeliveryMethod, PaymentMethod, Product
from teleshop.domain.shop.interfaces import ILocalizer
from teleshop.shared.utils.logger import LOG_NAME                        # 🏷️ Ім'я кореневого логера

# ================================
# 🧾 ЛОГЕР МОДУЛЯ
# ================================
logger = logging.getLogger(f"{LOG_NAME}.keyboards")

Rows = List[List[InlineKeyboardButton]]


def button(text: str, callback_data: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(text=text, callback_data=callback_data)


def grid(buttons: Sequence[InlineKeyboardButton], per_row: int) -> Rows:
    """Розкладає кнопки рядами по `per_row`."""
    step = max(1, per_row)
    return [list(buttons[i:i + step]) for i in range(0, len(buttons), step)]


# ================================
# 🏛️ ФАБРИКА КЛАВІАТУР
# ================================
class Keyboard:
    """
    🎛️ Побудова клавіатур для кожного екрану.
    """

    def __init__(self, localizer: ILocalizer, constants: AppConstants) -> None:
        self._i18n = localizer
        self.const = constants

    async def _t(self, user_id: str, key: str, params: Optional[Mapping[str, Any]] = None) -> str:
        return await self._i18n.translate(user_id, key, params)

    async def _back_row(self, user_id: str) -> List[InlineKeyboardButton]:
        return [button(await self._t(user_id, "back_to_main_menu"), self.const.CALLBACKS.BACK_TO_MENU.build())]

    # ================================
    # 🧭 ГОЛОВНЕ МЕНЮ / НАВІГАЦІЯ
    # ================================
    async def main_menu(self, user_id: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        t = lambda key: self._t(user_id, key)  # noqa: E731
        rows = [
            [button(await t("menu_listings"), cb.LISTINGS.build()), button(await t("menu_carts"), cb.CARTS.build())],
            [button(await t("menu_orders"), cb.ORDERS.build()), button(await t("menu_wishlist"), cb.WISHLIST.build())],
            [button(await t("menu_rating"), cb.RATING.build()), button(await t("menu_operator"), cb.OPERATOR.build())],
            [button(await t("menu_settings"), cb.SETTINGS.build())],
        ]
        logger.debug("⌨️ Головне меню для user=%s", user_id)
        return InlineKeyboardMarkup(rows)

    async def back_to_menu(self, user_id: str) -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup([await self._back_row(user_id)])

    async def with_back(self, user_id: str, rows: Rows) -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup([*rows, await self._back_row(user_id)])

    # ================================
    # 📋 КАТАЛОГ
    # ================================
    async def categories(self, user_id: str, categories: Iterable[Tuple[Category, int]]) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows: Rows = []
        for category, count in categories:
            label = await self._t(user_id, "category_button", {"name": category.name, "count": count})
            rows.append([button(label, cb.CATEGORY.build(category.id))])
        rows.append([button(await self._t(user_id, "listings_all_products"), cb.SEARCH_ALL_PRODUCTS.build())])
        return await self.with_back(user_id, rows)

    async def products(self, user_id: str, products: Iterable[Product]) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows: Rows = [[button(f"🛍️ {p.name}", cb.PRODUCT.build(p.id))] for p in products]
        rows.append([button(await self._t(user_id, "button_listings"), cb.LISTINGS.build())])
        return await self.with_back(user_id, rows)

    async def product_actions(self, user_id: str, product: Product) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows: Rows = []
        if product.in_stock:
            rows.append([button(await self._t(user_id, "button_add_to_cart"), cb.ADD_TO_CART.build(product.id))])
        rows.append([
            button(await self._t(user_id, "button_add_to_wishlist"), cb.WISHLIST_ADD.build(product.id)),
            button(await self._t(user_id, "button_rate_product"), cb.PRODUCT_RATING.build(product.id)),
        ])
        rows.append([button(await self._t(user_id, "button_listings"), cb.LISTINGS.build())])
        return await self.with_back(user_id, rows)

    async def quantity_picker(self, user_id: str, product: Product) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        choices = [q for q in self.const.UI.QUANTITY_CHOICES if q >= product.min_order_quantity]
        if product.max_order_quantity is not None:
            choices = [q for q in choices if q <= product.max_order_quantity]
        buttons = [button(str(q), cb.SELECT_QTY.build(product.id, q)) for q in choices]
        rows = grid(buttons, len(buttons) or 1)
        rows.append([button(await self._t(user_id, "action_back"), cb.PRODUCT.build(product.id))])
        return await self.with_back(user_id, rows)

    async def after_add_to_cart(self, user_id: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows = [[
            button(await self._t(user_id, "button_view_cart"), cb.CARTS.build()),
            button(await self._t(user_id, "button_listings"), cb.LISTINGS.build()),
        ]]
        return await self.with_back(user_id, rows)

    # ================================
    # 🛒 КОШИК
    # ================================
    async def cart(self, user_id: str, lines: Iterable[Tuple[str, str, int]]) -> InlineKeyboardMarkup:
        """`lines` — (product_id, назва, кількість)."""
        cb = self.const.CALLBACKS
        rows: Rows = []
        for product_id, name, quantity in lines:
            rows.append([
                button("➖", cb.CART_MINUS.build(product_id, quantity)),
                button(f"{name} × {quantity}", cb.PRODUCT.build(product_id)),
                button("➕", cb.CART_PLUS.build(product_id, quantity)),
                button("🗑️", cb.CART_REMOVE.build(product_id)),
            ])
        if rows:
            rows.append([button(await self._t(user_id, "cart_checkout"), cb.CHECKOUT.build())])
            rows.append([button(await self._t(user_id, "cart_clear"), cb.CLEAR_CART.build())])
        else:
            rows.append([button(await self._t(user_id, "button_listings"), cb.LISTINGS.build())])
        return await self.with_back(user_id, rows)

    # ================================
    # ❤️ БАЖАНЕ
    # ================================
    async def wishlist(self, user_id: str, products: Iterable[Product]) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows: Rows = [
            [
                button(f"🛍️ {p.name}", cb.PRODUCT.build(p.id)),
                button("❌", cb.WISHLIST_REMOVE.build(p.id)),
            ]
            for p in products
        ]
        rows.append([button(await self._t(user_id, "button_listings"), cb.LISTINGS.build())])
        return await self.with_back(user_id, rows)

    # ================================
    # ⭐ ОЦІНКИ
    # ================================
    async def shop_rating(self, user_id: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        stars = [button("⭐" * n, cb.RATE.build(n)) for n in self.const.UI.RATING_STARS]
        return await self.with_back(user_id, [[b] for b in stars])

    async def product_rating(self, user_id: str, product: Product) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        stars = [button("⭐" * n, cb.RATE_PRODUCT.build(product.id, n)) for n in self.const.UI.RATING_STARS]
        rows: Rows = [[b] for b in stars]
        rows.append([button(await self._t(user_id, "action_back"), cb.PRODUCT.build(product.id))])
        return await self.with_back(user_id, rows)

    # ================================
    # 👤 ПІДТРИМКА
    # ================================
    async def operator(self, user_id: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows = [
            [button(await self._t(user_id, "button_live_chat"), cb.LIVE_CHAT.build())],
            [button(await self._t(user_id, "button_email_support"), cb.SEND_EMAIL.build())],
            [button(await self._t(user_id, "button_faq"), cb.VIEW_FAQ.build())],
        ]
        return await self.with_back(user_id, rows)

    async def back_to_operator(self, user_id: str) -> InlineKeyboardMarkup:
        rows = [[button(await self._t(user_id, "action_back"), self.const.CALLBACKS.OPERATOR.build())]]
        return await self.with_back(user_id, rows)

    # ================================
    # ⚙️ НАЛАШТУВАННЯ
    # ================================
    async def settings(self, user_id: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows = [[
            button(await self._t(user_id, "settings_language"), cb.LANGUAGE_MENU.build()),
            button(await self._t(user_id, "settings_currency"), cb.CURRENCY_MENU.build()),
        ]]
        return await self.with_back(user_id, rows)

    async def languages(self, user_id: str, current: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        buttons = [
            button(f"{'✅ ' if code == current else ''}{label}", cb.SET_LANG.build(code))
            for code, label in self.const.LOGIC.LANGUAGES.items()
        ]
        rows = grid(buttons, self.const.UI.BUTTONS_PER_ROW)
        rows.append([button(await self._t(user_id, "action_back"), cb.SETTINGS.build())])
        return await self.with_back(user_id, rows)

    async def currencies(self, user_id: str, current: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        buttons = [
            button(f"{'✅ ' if code == current else ''}{symbol} {code}", cb.SET_CURRENCY.build(code))
            for code, symbol in self.const.LOGIC.CURRENCY_SYMBOLS.items()
        ]
        rows = grid(buttons, self.const.UI.BUTTONS_PER_ROW)
        rows.append([button(await self._t(user_id, "action_back"), cb.SETTINGS.build())])
        return await self.with_back(user_id, rows)

    # ================================
    # 🧾 ЧЕКАУТ
    # ================================
    async def delivery_options(
        self, user_id: str, order_number: str, options: Iterable[Tuple[DeliveryMethod, str]]
    ) -> InlineKeyboardMarkup:
        """`options` — (метод, відформатована сума з доставкою)."""
        cb = self.const.CALLBACKS
        rows: Rows = []
        for method, total in options:
            label = await self._t(user_id, "checkout_delivery_option", {"name": method.name, "total": total})
            rows.append([button(label, cb.SELECT_DELIVERY.build(method.id, order_number))])
        rows.append([button(await self._t(user_id, "button_view_cart"), cb.CARTS.build())])
        return await self.with_back(user_id, rows)

    async def confirm_info(self, user_id: str, method_id: str, order_number: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows = [
            [button(await self._t(user_id, "button_confirm"), cb.CONFIRM_INFO.build(method_id, order_number))],
            [button(await self._t(user_id, "button_reenter"), cb.CHECKOUT.build())],
        ]
        return await self.with_back(user_id, rows)

    async def payment_options(
        self, user_id: str, order_number: str, methods: Iterable[PaymentMethod]
    ) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows: Rows = [[button(f"💳 {m.name}", cb.SELECT_PAYMENT.build(m.id, order_number))] for m in methods]
        rows.append([button(await self._t(user_id, "action_back"), cb.CHECKOUT.build())])
        return await self.with_back(user_id, rows)

    async def payment_done(self, user_id: str, order_number: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows = [[button(await self._t(user_id, "button_payment_done"), cb.PAYMENT_DONE.build(order_number))]]
        return await self.with_back(user_id, rows)

    async def order_confirmed(self, user_id: str) -> InlineKeyboardMarkup:
        cb = self.const.CALLBACKS
        rows = [[button(await self._t(user_id, "button_view_orders"), cb.ORDERS.build())]]
        return await self.with_back(user_id, rows)


__all__ = ["Keyboard", "button", "grid"]
