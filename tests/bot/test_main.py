"""
🧪 test_main.py — unit-тести для entry-point (teleshop.bot.main)

Перевіряє:
- Побудову Application з контейнером і зареєстрованими обробниками
- Пошук токена: ENV → config.yaml → RuntimeError
"""

import pytest
from telegram.ext import CallbackQueryHandler, CommandHandler, MessageHandler

from teleshop.config.setup.container import Container


@pytest.fixture
def main_module(shop_config):
    """🔧 Імпорт після того, як ConfigService дивиться на тимчасовий конфіг."""
    from teleshop.bot import main

    return main


def test_build_application_wires_container_and_handlers(main_module):
    """✅ Контейнер лежить у bot_data, /start, /help, /catalog, callback-и і текст зареєстровані."""
    app = main_module.build_application("123456:TEST-TOKEN")

    assert isinstance(app.bot_data["container"], Container)
    handlers = [h for group in app.handlers.values() for h in group]
    commands = set().union(*(h.commands for h in handlers if isinstance(h, CommandHandler)))
    assert {"start", "help", "catalog"} <= commands
    assert any(isinstance(h, CallbackQueryHandler) for h in handlers)
    assert any(isinstance(h, MessageHandler) for h in handlers)
    assert app.error_handlers


def test_resolve_token_prefers_environment(main_module, monkeypatch):
    """🔑 BOT_TOKEN з оточення має пріоритет."""
    monkeypatch.setenv("BOT_TOKEN", "env-token")
    assert main_module.resolve_token() == "env-token"


def test_resolve_token_missing_raises(main_module, monkeypatch):
    """🚨 Без токена ніде — зрозуміла помилка."""
    for env in ("BOT_TOKEN", "TELEGRAM_BOT_TOKEN", "TELEGRAM_TOKEN"):
        monkeypatch.delenv(env, raising=False)
    with pytest.raises(RuntimeError):
        main_module.resolve_token()
