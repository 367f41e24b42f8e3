# 📖 teleshop/config/setup/constants.py
"""
📖 Типобезпечні константи магазину.

🔹 Централізує UI- та LOGIC-набори значень для інших модулів
🔹 Гарантує імутабельність через `dataclass(slots=True, frozen=True)`
🔹 Лениво будує специфікації callback-токенів (`CONST.CALLBACKS.*`)
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                         # 🧾 Логування подій ініціалізації констант
from dataclasses import dataclass                                      # 🧱 Опис імутабельних структур
from functools import lru_cache                                        # ♻️ Кешування побудови callback-ів
from types import MappingProxyType                                     # 🧊 Імутабельні словники
from typing import TYPE_CHECKING, ClassVar, Final, FrozenSet, List, Mapping, Tuple

# 🧩 Внутрішні модулі проєкту
if TYPE_CHECKING:                                                      # 🧪 Імпорт лише для типізації (уникаємо циклів)
    from teleshop.bot.services.callback_data_factory import CallbackData

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger("teleshop.config.constants")


# ================================
# 🧰 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
@lru_cache(maxsize=None)
def _build_callback(action: str, params: Tuple[str, ...] = ()) -> "CallbackData":
    """
    Створює та кешує CallbackData для дії та позиційних параметрів.
    """
    from teleshop.bot.services.callback_data_factory import CallbackData  # 🧭 Локальний імпорт проти циклів

    return CallbackData(action=action, params=params)


# ================================
# 🏛️ СТРУКТУРА КОНСТАНТ (UI)
# ================================
@dataclass(frozen=True, slots=True)
class _UIConstants:
    """Константи UI (parse mode, ключові слова меню, розкладка клавіатур)."""

    DEFAULT_PARSE_MODE: Final[str] = "HTML"                              # 📝 Форматування повідомлень
    MENU_KEYWORDS: Final[FrozenSet[str]] = frozenset({"menu", "main menu"})  # 🏠 Текст, що відкриває меню
    QUANTITY_CHOICES: Final[Tuple[int, ...]] = (1, 2, 3, 5, 10)          # 🔢 Кнопки вибору кількості
    BUTTONS_PER_ROW: Final[int] = 2                                      # 🧱 Ширина сітки кнопок
    RATING_STARS: Final[Tuple[int, ...]] = (1, 2, 3, 4, 5)               # ⭐ Шкала оцінок


class _Callbacks:
    """Ліниві специфікації callback-токенів (кеш `_build_callback`)."""

    __slots__ = ()

    # ---------- навігація ----------
    @property
    def BACK_TO_MENU(self) -> "CallbackData":
        return _build_callback("back_to_menu")

    @property
    def LISTINGS(self) -> "CallbackData":
        return _build_callback("listings")

    @property
    def CATEGORY(self) -> "CallbackData":
        return _build_callback("category", ("category_id",))

    @property
    def SEARCH_ALL_PRODUCTS(self) -> "CallbackData":
        return _build_callback("search_all_products")

    @property
    def PRODUCT(self) -> "CallbackData":
        return _build_callback("product", ("product_id",))

    @property
    def ADD_TO_CART(self) -> "CallbackData":
        return _build_callback("add_to_cart", ("product_id",))

    @property
    def SELECT_QTY(self) -> "CallbackData":
        return _build_callback("select_qty", ("product_id", "quantity"))

    # ---------- кошик ----------
    @property
    def CARTS(self) -> "CallbackData":
        return _build_callback("carts")

    @property
    def CART_PLUS(self) -> "CallbackData":
        return _build_callback("cart_plus", ("product_id", "quantity"))

    @property
    def CART_MINUS(self) -> "CallbackData":
        return _build_callback("cart_minus", ("product_id", "quantity"))

    @property
    def CART_REMOVE(self) -> "CallbackData":
        return _build_callback("cart_remove", ("product_id",))

    @property
    def CLEAR_CART(self) -> "CallbackData":
        return _build_callback("clear_cart")

    # ---------- бажане ----------
    @property
    def WISHLIST(self) -> "CallbackData":
        return _build_callback("wishlist")

    @property
    def WISHLIST_ADD(self) -> "CallbackData":
        return _build_callback("wishlist_add", ("product_id",))

    @property
    def WISHLIST_REMOVE(self) -> "CallbackData":
        return _build_callback("wishlist_remove", ("product_id",))

    # ---------- замовлення / оцінки ----------
    @property
    def ORDERS(self) -> "CallbackData":
        return _build_callback("orders")

    @property
    def RATING(self) -> "CallbackData":
        return _build_callback("rating")

    @property
    def RATE(self) -> "CallbackData":
        return _build_callback("rate", ("stars",))

    @property
    def PRODUCT_RATING(self) -> "CallbackData":
        return _build_callback("product_rating", ("product_id",))

    @property
    def RATE_PRODUCT(self) -> "CallbackData":
        return _build_callback("rate_product", ("product_id", "stars"))

    # ---------- підтримка ----------
    @property
    def OPERATOR(self) -> "CallbackData":
        return _build_callback("operator")

    @property
    def LIVE_CHAT(self) -> "CallbackData":
        return _build_callback("live_chat")

    @property
    def SEND_EMAIL(self) -> "CallbackData":
        return _build_callback("send_email")

    @property
    def VIEW_FAQ(self) -> "CallbackData":
        return _build_callback("view_faq")

    # ---------- налаштування ----------
    @property
    def SETTINGS(self) -> "CallbackData":
        return _build_callback("settings")

    @property
    def LANGUAGE_MENU(self) -> "CallbackData":
        return _build_callback("language_menu")

    @property
    def CURRENCY_MENU(self) -> "CallbackData":
        return _build_callback("currency_menu")

    @property
    def SET_LANG(self) -> "CallbackData":
        return _build_callback("set_lang", ("code",))

    @property
    def SET_CURRENCY(self) -> "CallbackData":
        return _build_callback("set_currency", ("code",))

    # ---------- чекаут ----------
    @property
    def CHECKOUT(self) -> "CallbackData":
        return _build_callback("checkout")

    @property
    def SELECT_DELIVERY(self) -> "CallbackData":
        return _build_callback("select_delivery", ("method_id", "order_number"))

    @property
    def CONFIRM_INFO(self) -> "CallbackData":
        return _build_callback("confirm_info", ("method_id", "order_number"))

    @property
    def SELECT_PAYMENT(self) -> "CallbackData":
        return _build_callback("select_payment", ("method_id", "order_number"))

    @property
    def PAYMENT_DONE(self) -> "CallbackData":
        return _build_callback("payment_done", ("order_number",))

    def all(self) -> List["CallbackData"]:
        """Усі специфікації (для самоперевірок реєстру)."""
        names = [name for name in dir(type(self)) if name.isupper()]
        return [getattr(self, name) for name in names]


@dataclass(frozen=True, slots=True)
class _Commands:
    """Команди Telegram-бота (без префікса '/')."""

    START: Final[str] = "start"
    HELP: Final[str] = "help"
    CATALOG: Final[str] = "catalog"


@dataclass(frozen=True, slots=True)
class _Limits:
    """Ліміти."""

    CALLBACK_MAX_BYTES: Final[int] = 64                                  # 📏 Ліміт Telegram на callback_data
    RECENT_ORDERS: Final[int] = 5                                        # 📦 Скільки замовлень показувати
    CUSTOM_COMMAND_SLOTS: Final[int] = 3                                 # 🧩 custom_command_1..3
    DRAFTS_PER_USER: Final[int] = 5                                      # 📝 Чернетки чекауту на користувача


@dataclass(frozen=True, slots=True)
class _SessionDefaults:
    """Таймінги розмови (перекриваються `session.*` у config.yaml)."""

    HISTORY_RETENTION_SEC: Final[int] = 6 * 60 * 60                      # 🕕 Після цього історія чиститься
    CLEARED_NOTICE_TTL_SEC: Final[int] = 60 * 60                         # 🕐 Скільки живе повідомлення про очищення


@dataclass(frozen=True, slots=True)
class _LogicConstants:
    """Константи логіки: команди, ліміти, мови, валюти, статуси."""

    COMMANDS: Final[_Commands] = _Commands()
    LIMITS: Final[_Limits] = _Limits()
    SESSION: Final[_SessionDefaults] = _SessionDefaults()
    BASE_CURRENCY: Final[str] = "USD"

    LANGUAGES: ClassVar[Mapping[str, str]] = MappingProxyType(
        {
            "en": "🇬🇧 English",
            "es": "🇪🇸 Español",
            "fr": "🇫🇷 Français",
            "de": "🇩🇪 Deutsch",
            "uk": "🇺🇦 Українська",
        }
    )

    CURRENCY_SYMBOLS: ClassVar[Mapping[str, str]] = MappingProxyType(
        {
            "USD": "$",                                                  # 🇺🇸 Долар США
            "EUR": "€",                                                  # 🇪🇺 Євро
            "GBP": "£",                                                  # 🇬🇧 Фунт
            "JPY": "¥",                                                  # 🇯🇵 Єна
            "UAH": "₴",                                                  # 🇺🇦 Гривня
        }
    )

    ZERO_DECIMAL_CURRENCIES: ClassVar[FrozenSet[str]] = frozenset({"JPY"})

    ORDER_STATUS_EMOJI: ClassVar[Mapping[str, str]] = MappingProxyType(
        {
            "pending": "⏳",
            "confirmed": "✅",
            "shipped": "🚚",
            "delivered": "📦",
            "cancelled": "❌",
        }
    )


# ================================
# 🌍 ГОЛОВНИЙ ОБʼЄКТ КОНСТАНТ
# ================================
@dataclass(frozen=True, slots=True)
class AppConstants:
    """Єдина точка доступу до всіх констант проєкту (UI, LOGIC, CALLBACKS)."""

    UI: Final[_UIConstants] = _UIConstants()
    LOGIC: Final[_LogicConstants] = _LogicConstants()
    CALLBACKS: Final[_Callbacks] = _Callbacks()

    def custom_command_keys(self) -> List[Tuple[str, str]]:
        """Пари ключів налаштувань (команда, відповідь) для кожного слота."""
        slots = range(1, self.LOGIC.LIMITS.CUSTOM_COMMAND_SLOTS + 1)
        return [(f"custom_command_{n}", f"custom_response_{n}") for n in slots]


# ================================
# 🏁 ІНСТАНЦІЯ ТА ПУБЛІЧНИЙ API
# ================================
CONST = AppConstants()
logger.debug("📖 AppConstants initialised")


__all__ = ["AppConstants", "CONST"]
