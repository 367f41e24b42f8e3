"""
🧪 test_logger.py — unit-тести для схеми логування

Перевіряє:
- Створення логера `teleshop` з консольним і файловим хендлерами
- Уникнення дублювання хендлерів при повторній ініціалізації
- JSON-формат з extra-полями
- Префікс чату в ChatLoggerAdapter
"""

import json
import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from teleshop.shared.utils.logger import (
    LOG_NAME,
    JsonFormatter,
    chat_logger,
    init_logging,
    init_logging_from_config,
)


@pytest.fixture
def clean_logger():
    root = logging.getLogger(LOG_NAME)
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def test_logger_creation_and_handlers(tmp_path, clean_logger):
    """🪵 Консоль + файл із ротацією, файл створюється у вказаній теці."""
    log_file = tmp_path / "logs" / "bot.log"
    logger = init_logging(level="DEBUG", file=str(log_file))

    assert logger.name == LOG_NAME
    assert logger.level == logging.DEBUG
    assert any(isinstance(h, TimedRotatingFileHandler) for h in logger.handlers)
    assert log_file.parent.exists()


def test_logger_not_duplicated_handlers(tmp_path, clean_logger):
    """🔁 Повторний виклик замінює хендлери, а не додає нові."""
    init_logging(file=str(tmp_path / "a.log"))
    count_before = len(clean_logger.handlers)

    init_logging_from_config({"file": str(tmp_path / "a.log"), "console": True})
    assert len(clean_logger.handlers) == count_before


def test_console_can_be_disabled(tmp_path, clean_logger):
    """🔇 console=False — лише файловий хендлер."""
    init_logging_from_config({"file": str(tmp_path / "b.log"), "console": False})
    assert len(clean_logger.handlers) == 1
    assert isinstance(clean_logger.handlers[0], TimedRotatingFileHandler)


def test_json_formatter_keeps_extra_fields():
    """📦 extra-поля потрапляють у JSON, несеріалізовані — як repr."""
    record = logging.LogRecord(LOG_NAME, logging.INFO, __file__, 10, "order %s", ("ORD1",), None)
    record.chat_id = 100
    record.payload = object()

    data = json.loads(JsonFormatter().format(record))

    assert data["message"] == "order ORD1"
    assert data["chat_id"] == 100
    assert data["payload"].startswith("<object")


def test_chat_logger_prefixes_messages(caplog):
    """💬 Адаптер додає [chat=…] і chat_id в extra."""
    log = chat_logger(42, "text")
    with caplog.at_level(logging.INFO, logger=f"{LOG_NAME}.text"):
        log.info("hello")

    record = caplog.records[-1]
    assert record.getMessage() == "[chat=42] hello"
    assert record.chat_id == 42
