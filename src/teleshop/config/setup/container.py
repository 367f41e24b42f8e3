# 📦 teleshop/config/setup/container.py
"""
📦 Контейнер залежностей Telegram-бота.

🔹 Створює сервіси в правильному порядку DI
🔹 Інкапсулює конфігурацію зовнішніх та внутрішніх клієнтів
🔹 Дає єдину точку доступу до обробників, фіч і менеджерів
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                            # 🌐 Спільний HTTP-клієнт курсів
from telegram import Bot, InlineKeyboardMarkup                           # 🤖 Транспорт Telegram

# 🔠 Системні імпорти
import logging                                                           # 🧾 Базові засоби логування
from typing import TYPE_CHECKING, Any, List                              # 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту

# 🤖 Bot-фічі та хендлери
from teleshop.bot.commands.base import BaseFeature, FeatureDeps          # 🏛️ Спільні залежності фіч
from teleshop.bot.commands.cart_feature import CartFeature               # 🛒 Кошик
from teleshop.bot.commands.catalog_feature import CatalogFeature         # 📋 Каталог
from teleshop.bot.commands.checkout_feature import CheckoutFeature       # 🧾 Чекаут
from teleshop.bot.commands.core_commands_feature import CoreCommandsFeature  # 🧱 Базові команди бота
from teleshop.bot.commands.orders_feature import OrdersFeature           # 📦 Замовлення
from teleshop.bot.commands.rating_feature import RatingFeature           # ⭐ Оцінки
from teleshop.bot.commands.settings_feature import SettingsFeature       # ⚙️ Мова / валюта
from teleshop.bot.commands.support_feature import SupportFeature         # 👤 Підтримка
from teleshop.bot.commands.wishlist_feature import WishlistFeature       # ❤️ Бажане
from teleshop.bot.handlers.callback_handler import CallbackHandler       # 🔄 Централізований callback-хендлер
from teleshop.bot.handlers.text_router import TextRouter                 # 💬 Маршрутизація тексту
from teleshop.bot.services.admin_gateway import AdminGateway             # 📣 Розсилка / готовність
from teleshop.bot.services.callback_registry import CallbackRegistry     # 📚 Реєстр callback-ів
from teleshop.bot.session import CaptureRegistry, ConversationManager, RenderedMessage  # 💬 Стан розмови
from teleshop.bot.ui.formatters.shop_formatter import ShopFormatter      # 🎨 Тексти екранів
from teleshop.bot.ui.keyboards.keyboards import Keyboard                 # ⌨️ Клавіатури

# ⚙️ Конфігурація
from teleshop.config.setup.constants import CONST, AppConstants          # ⚙️ Глобальні константи

# 🏭 Доменна логіка
from teleshop.domain.checkout import CheckoutDraftStore, CheckoutService  # 🧾 Правила чекауту
from teleshop.domain.pricing import TierPricingResolver                  # 💵 Тирові ціни

# 🚨 Обробка помилок
from teleshop.errors.error_handler import make_error_handler             # 🚨 Обгортка обробки помилок
from teleshop.errors.exception_handler_service import ExceptionHandlerService  # 🛡️ Менеджер винятків
from teleshop.errors.strategies import default_strategies                # 🧱 Набір стратегій помилок

# 📦 Інфраструктура
from teleshop.infrastructure.currency import CurrencyService             # 💱 Курси валют
from teleshop.infrastructure.i18n import LocalizationService             # 🌍 Каталоги перекладів
from teleshop.infrastructure.storage import JsonShopStorage              # 🗄️ Дані магазину
from teleshop.infrastructure.telegram import TelegramTransport           # 📡 Надсилання/видалення
from teleshop.shared.metrics import maybe_start_prometheus               # 📈 Bootstrap метрик
from teleshop.shared.utils.logger import LOG_NAME, init_logging_from_config  # 🧾 Конфіг логування

if TYPE_CHECKING:
    from teleshop.config.config_service import ConfigService             # 🗂️ Тип під час перевірки

logger = logging.getLogger(LOG_NAME)                                     # 🧾 Модульний логер контейнера


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _int_or_default(value: Any, default: int) -> int:
    """
    Повертає ціле число або запасне значення, якщо каст неможливий.
    """
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float_or_default(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def bootstrap_logging() -> logging.Logger:
    """
    Зчитує конфіг логування і запускає кореневий логер.
    """
    from teleshop.config.config_service import ConfigService             # 🧭 Локальний імпорт для уникнення циклів

    cfg = ConfigService()
    node = cfg.get("logging", {}) or {}
    return init_logging_from_config(node)


# ================================
# 🏛️ КОНТЕЙНЕР ЗАЛЕЖНОСТЕЙ
# ================================
class Container:
    """
    Координує ініціалізацію інфраструктурних, доменних та бот-сервісів.

    `bot` — PTB `Bot` застосунку; тести передають готовий `transport` замість нього.
    """

    # ================================
    # ⚙️ ІНІЦІАЛІЗАЦІЯ
    # ================================
    def __init__(
        self,
        config: ConfigService,
        bot: Bot | None = None,
        *,
        transport: Any = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config                                              # ⚙️ Джерело конфігурацій DI
        self.constants: AppConstants = CONST                              # 🧱 Глобальні константи застосунку
        logger.info("🚀 Стартуємо побудову контейнера залежностей")
        self._bootstrap_metrics_if_enabled()                              # 📈 Можливий запуск експорту метрик
        self._setup_error_handlers()                                      # 🛡️ Включаємо глобальні стратегії помилок
        self._setup_infrastructure(bot, transport, http_client)           # 🗄️ Сховище, валюти, i18n, транспорт
        self._setup_domain_services()                                     # 🏭 Ціни та чекаут
        self._setup_session()                                             # 💬 Розмови та захоплення
        self._setup_features_and_handlers()                               # 📚 Telegram-фічі та роутери
        logger.info("✅ Контейнер ініціалізовано успішно")

    # ================================
    # 📈 МЕТРИКИ
    # ================================
    def _bootstrap_metrics_if_enabled(self) -> None:
        """
        Стартує Prometheus-експортер, якщо це дозволено конфігурацією.
        """
        try:                                                             # 🧪 Ізолюємо збої метрик
            if not bool(self.config.get("metrics.enabled", False)):
                logger.debug("📉 Prometheus вимкнено конфігом")
                return
            exporter_name = (self.config.get("metrics.exporter", "prometheus") or "prometheus").lower()
            if exporter_name != "prometheus":
                logger.debug("📉 Експортер %s не підтримується", exporter_name)
                return
            port = _int_or_default(self.config.get("metrics.prometheus.port", 9108, cast=int), 9108)
            maybe_start_prometheus(port)
            logger.info("📈 Prometheus запущено на порті %s", port)
        except Exception:                                                # ⚠️ Будь-яка помилка експортера
            logger.exception("⚠️ Не вдалося стартувати експортер метрик")

    # ================================
    # 🛡️ ОБРОБКА ПОМИЛОК
    # ================================
    def _setup_error_handlers(self) -> None:
        strategies = default_strategies()
        self.exception_handler_service = ExceptionHandlerService(strategies=strategies)
        self.error_handler = make_error_handler(self.exception_handler_service)
        logger.debug("🛡️ ExceptionHandlerService активовано (%d стратегій)", len(strategies))

    # ================================
    # 🗄️ ІНФРАСТРУКТУРА
    # ================================
    def _setup_infrastructure(
        self, bot: Bot | None, transport: Any, http_client: httpx.AsyncClient | None = None
    ) -> None:
        self.storage = JsonShopStorage.from_config(self.config)
        self.currency_service = CurrencyService.from_config(self.config, client=http_client)
        default_lang = self.config.get("i18n.default_language", "en", str) or "en"
        self.localization = LocalizationService(
            repository=self.storage,
            currency=self.currency_service,
            default_language=default_lang,
        )
        if transport is None:
            if bot is None:
                raise ValueError("Container needs either a telegram Bot or a ready transport")
            transport = TelegramTransport(bot, parse_mode=self.constants.UI.DEFAULT_PARSE_MODE)
        self.transport = transport
        logger.debug("🗄️ Інфраструктура готова (lang=%s)", default_lang)

    # ================================
    # 🏭 ДОМЕННІ СЕРВІСИ
    # ================================
    def _setup_domain_services(self) -> None:
        self.pricing_resolver = TierPricingResolver(self.storage)
        drafts = CheckoutDraftStore(max_per_user=self.constants.LOGIC.LIMITS.DRAFTS_PER_USER)
        self.checkout_service = CheckoutService(
            repository=self.storage,
            resolver=self.pricing_resolver,
            drafts=drafts,
            currency=self.constants.LOGIC.BASE_CURRENCY,
        )
        logger.debug("🏭 Доменні сервіси готові")

    # ================================
    # 💬 СЕСІЯ
    # ================================
    def _setup_session(self) -> None:
        session = self.constants.LOGIC.SESSION
        self.conversations = ConversationManager(
            self.transport,
            self.localization,
            retention_sec=_float_or_default(
                self.config.get("session.history_retention_sec"), session.HISTORY_RETENTION_SEC
            ),
            notice_ttl_sec=_float_or_default(
                self.config.get("session.cleared_notice_ttl_sec"), session.CLEARED_NOTICE_TTL_SEC
            ),
        )
        self.captures = CaptureRegistry()
        self.admin_gateway = AdminGateway(
            self.transport,
            concurrency=_int_or_default(self.config.get("admin.broadcast_concurrency"), 10),
        )
        self.exception_handler_service.bind(localizer=self.localization, responder=self._respond_with_error)

    async def _respond_with_error(self, chat_id: int, text: str, keyboard: InlineKeyboardMarkup) -> None:
        """Помилка теж стає «єдиним видимим повідомленням» чату."""

        async def render() -> RenderedMessage:
            return RenderedMessage(text=text, keyboard=keyboard)

        await self.conversations.replace(chat_id, render)

    # ================================
    # 📚 ФІЧІ ТА РОУТЕРИ
    # ================================
    def _setup_features_and_handlers(self) -> None:
        """
        Реєструє Telegram-фічі, callback-и та роутери тексту.
        """
        self.callback_registry = CallbackRegistry()
        self.keyboard = Keyboard(self.localization, self.constants)
        self.formatter = ShopFormatter(self.localization)
        self.feature_deps = FeatureDeps(
            repository=self.storage,
            localizer=self.localization,
            conversations=self.conversations,
            captures=self.captures,
            keyboard=self.keyboard,
            formatter=self.formatter,
            resolver=self.pricing_resolver,
            constants=self.constants,
        )
        registry, deps = self.callback_registry, self.feature_deps
        self.core_feature = CoreCommandsFeature(registry, deps, guard=self.error_handler)
        self.support_feature = SupportFeature(registry, deps)
        self.checkout_feature = CheckoutFeature(registry, deps, self.checkout_service)
        self.features: List[BaseFeature] = [
            self.core_feature,
            CatalogFeature(registry, deps),
            CartFeature(registry, deps),
            WishlistFeature(registry, deps),
            OrdersFeature(registry, deps),
            RatingFeature(registry, deps),
            self.support_feature,
            SettingsFeature(registry, deps),
            self.checkout_feature,
        ]
        missing = self.callback_registry.missing_keys(self.constants.CALLBACKS.all())
        if missing:
            logger.warning("⚠️ Callback-и без обробника: %s", [spec.action for spec in missing])

        self.callback_handler = CallbackHandler(
            registry=self.callback_registry,
            transport=self.transport,
            exception_handler=self.exception_handler_service,
            fallback=self.core_feature.back_to_menu,
        )
        self.text_router = TextRouter(
            core=self.core_feature,
            support=self.support_feature,
            features=self.features,
            exception_handler=self.exception_handler_service,
        )
        logger.debug("📚 Фічі та роутери ініціалізовані (%d)", len(self.features))

    # ================================
    # 🔁 ЖИТТЄВИЙ ЦИКЛ
    # ================================
    async def startup(self) -> None:
        await self.currency_service.initialize()
        await self.currency_service.update_rates_if_needed()
        self.admin_gateway.mark_ready()

    async def shutdown(self) -> None:
        self.admin_gateway.mark_stopped()
        await self.conversations.shutdown()
        await self.storage.flush()
        await self.currency_service.close()


__all__ = ["Container", "bootstrap_logging"]
