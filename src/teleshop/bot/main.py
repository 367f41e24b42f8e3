# 🤖 teleshop/bot/main.py
"""
🤖 Entry-point Telegram-магазину.

🔹 Ініціалізує логування, DI-контейнер та Application PTB.
🔹 Реєструє всі обробники й глобальний error-handler, запускає `run_polling`.
🔹 `post_init` / `post_shutdown` підключають і відключають рушій (курси валют, таймери розмов, flush сховища).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from dotenv import load_dotenv											# 🌱 Завантаження змінних оточення з .env
from telegram import Update												# 📡 Типи апдейтів для polling
from telegram.ext import Application, ApplicationBuilder, ContextTypes		# 🤖 PTB v21 Application API

# 🔠 Системні імпорти
import logging															# 🧾 Логування подій запуску
import os																# 🌍 Робота з оточенням/ENV
from typing import Optional												# 🧮 Анотації Optional

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.services import CustomContext							# 🧠 Кастомний PTB-контекст
from teleshop.config.config_service import ConfigService					# ⚙️ Завантаження конфігів
from teleshop.config.setup.bot_registrar import BotRegistrar				# 📋 Реєстрація хендлерів
from teleshop.config.setup.container import Container, bootstrap_logging	# 🚀 Логування + DI-контейнер
from teleshop.shared.utils.logger import LOG_NAME							# 🏷️ Ім'я кореневого логера

bootstrap_logging()														# 🪵 Піднімаємо YAML-конфіг логування

# ================================
# 🪵 ГЛОБАЛЬНИЙ ЛОГЕР
# ================================
logger = logging.getLogger(LOG_NAME)


# ================================
# 🧩 DI / APPLICATION BUILDER
# ================================
def build_application(token: str) -> Application:
    """
    Створює та повертає PTB Application із зареєстрованими обробниками.
    """
    logger.info("🔧 Створюємо ConfigService для DI")
    config = ConfigService()

    async def _post_init(app: Application) -> None:
        await app.bot_data["container"].startup()
        logger.info("🟢 Engine attached")

    async def _post_shutdown(app: Application) -> None:
        await app.bot_data["container"].shutdown()
        logger.info("🔴 Engine detached")

    logger.debug("🤖 Будуємо Application через ApplicationBuilder")
    application = (
        ApplicationBuilder()
        .token(token)													# 🔑 Передаємо токен
        .context_types(ContextTypes(context=CustomContext))				# 🧠 Підключаємо CustomContext
        .concurrent_updates(True)										# 🔀 Чати не чекають один на одного (локи — пер-чатні)
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )

    logger.debug("🧱 Створюємо DI-контейнер")
    container = Container(config, application.bot)
    application.bot_data["container"] = container						# 📦 Зберігаємо контейнер для хуків/тестів

    registrar = BotRegistrar(application, container)
    logger.info("🧾 Реєструємо обробники Telegram")
    registrar.register_handlers()

    async def _on_error(update: object, context: CustomContext) -> None:
        """
        Глобальний error-handler PTB: відправляє винятки у централізований сервіс.
        """
        err: Optional[Exception] = getattr(context, "error", None)
        if err is None:
            logger.debug("ℹ️ _on_error викликано без context.error")
            return
        logger.error("🔥 Виняток у PTB: %s", err, exc_info=err)
        try:
            await container.exception_handler_service.handle(err, update if isinstance(update, Update) else None)
        except Exception as nested:  # noqa: BLE001
            logger.exception("💥 Global error handler failed: %s", nested)

    application.add_error_handler(_on_error)
    logger.info("✅ Application готовий до запуску")
    return application


def resolve_token() -> str:
    """ENV (`BOT_TOKEN` / `TELEGRAM_BOT_TOKEN` / `TELEGRAM_TOKEN`) → `telegram.bot.token` у конфігу."""
    token = (
        os.getenv("BOT_TOKEN")
        or os.getenv("TELEGRAM_BOT_TOKEN")
        or os.getenv("TELEGRAM_TOKEN")
    )
    if not token:
        logger.warning("⚠️ Токен в ENV не знайдено, читаємо з конфігів")
        token = ConfigService().get("telegram.bot.token")
    if not token:
        logger.critical("🚨 Не знайдено токен Telegram")
        raise RuntimeError("Set BOT_TOKEN (or TELEGRAM_BOT_TOKEN) in environment.")
    return str(token)


# ================================
# 🚀 ENTRYPOINT
# ================================
def run() -> None:
    """
    Основна точка входу: читає токен і запускає бота.
    """
    load_dotenv()
    logger.debug("🌱 .env завантажено")

    application = build_application(resolve_token())
    logger.info("🤖 Bot is starting…")
    application.run_polling(allowed_updates=Update.ALL_TYPES)
    logger.info("👋 Bot stopped")


if __name__ == "__main__":
    run()
