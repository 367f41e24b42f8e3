# 📜 teleshop/shared/utils/logger.py
"""
📜 Єдина схема логування TeleShop.

🔹 Налаштовує кореневий логер `teleshop`: консоль + файл із ротацією за часом.
🔹 Опційно пише файл у JSON (одна подія — один рядок), з extra-полями.
🔹 Приглушує балакучі сторонні бібліотеки (`telegram`, `httpx`).
🔹 `chat_logger()` додає `chat_id` до кожного запису розмови.
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json									# 📦 Серіалізація payload логів
import logging									# 🪵 Робота з логерами Python
import sys									# 🧵 Потік stdout
import threading								# 🧵 Захист ініціалізації
from dataclasses import dataclass, field					# 🧱 DTO-конфіг логування
from logging.handlers import TimedRotatingFileHandler			# 📁 Хендлер з ротацією файлів
from pathlib import Path								# 📂 Шляхи до файлів
from typing import Any, Dict, FrozenSet, MutableMapping, Optional, Tuple, Union

# ================================
# 🧾 КОНСТАНТИ МОДУЛЯ
# ================================
LOG_NAME: str = "teleshop"							# 🏷️ Базовий префікс логерів
PLAIN_FORMAT: str = "%(asctime)s [%(levelname)s] - (%(name)s).%(funcName)s(%(lineno)d) - %(message)s"
CONSOLE_FORMAT: str = "[%(levelname).1s] %(message)s"			# 🖥️ Мінімалістичний консольний формат
DEFAULT_SUPPRESS: Dict[str, str] = {"httpx": "WARNING", "telegram": "INFO", "apscheduler": "WARNING"}

# 🚫 Стандартні атрибути LogRecord, які не переносимо у JSON як extra
_RECORD_ATTRS: FrozenSet[str] = frozenset(
    {
        "args", "asctime", "created", "exc_info", "exc_text", "filename", "levelno",
        "lineno", "module", "msecs", "message", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread", "threadName",
        "levelname", "funcName", "taskName",
    }
)

_lock = threading.Lock()							# 🔒 Блокуємо одночасну ініціалізацію


# ================================
# 🧾 DTO КОНФІГУРАЦІЇ
# ================================
@dataclass
class LoggingConfig:
    """Налаштування логування з дефолтами для бота."""
    level: str = "INFO"
    console: bool = True
    json: bool = False
    file: str = "logs/teleshop.log"
    when: str = "midnight"
    interval: int = 1
    backup_count: int = 7
    encoding: str = "utf-8"
    suppress: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SUPPRESS))
    console_level: str = "INFO"
    file_level: str = "DEBUG"
    console_format: str = CONSOLE_FORMAT
    file_format: str = PLAIN_FORMAT


# ================================
# 🧰 ФОРМАТТЕРИ
# ================================
class JsonFormatter(logging.Formatter):
    """Форматує запис у плоский JSON; extra-поля переносяться як є."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "func": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RECORD_ATTRS or key in payload:
                continue
            try:
                json.dumps(value)					# ✅ Перевіряємо серіалізованість
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = repr(value)				# 🔄 Несеріалізоване → repr
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# ================================
# 💬 АДАПТЕР ДЛЯ РОЗМОВ
# ================================
class ChatLoggerAdapter(logging.LoggerAdapter):
    """Додає `chat_id` в extra і префікс `[chat=…]` у текст повідомлення."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        chat_id = (self.extra or {}).get("chat_id")
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("chat_id", chat_id)
        kwargs["extra"] = extra
        return f"[chat={chat_id}] {msg}", kwargs


def chat_logger(chat_id: Union[int, str], suffix: Optional[str] = None) -> ChatLoggerAdapter:
    """Повертає адаптер логера, привʼязаний до конкретного чату."""
    return ChatLoggerAdapter(get_logger(suffix), {"chat_id": chat_id})


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _to_level(value: Union[str, int, None], default: int) -> int:
    """Рядок/інт → числовий рівень логування."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    return getattr(logging, str(value).upper(), default)


def _make_console_handler(fmt: logging.Formatter, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(fmt)
    handler.setLevel(level)
    return handler


def _make_file_handler(cfg: LoggingConfig, fmt: logging.Formatter, level: int) -> logging.Handler:
    """Файловий хендлер із ротацією; директорія створюється за потреби."""
    Path(cfg.file).parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=cfg.file,
        when=cfg.when,
        interval=cfg.interval,
        backupCount=cfg.backup_count,
        encoding=cfg.encoding,
    )
    handler.setFormatter(fmt)
    handler.setLevel(level)
    return handler


def _suppress_third_party(suppress: Dict[str, str]) -> None:
    """Знижує рівні логування для сторонніх бібліотек."""
    for name, level in (suppress or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.WARNING))


# ================================
# 🚀 ПУБЛІЧНИЙ API
# ================================
def init_logging(
    *,
    level: Optional[str] = None,
    console: Optional[bool] = None,
    json_mode: Optional[bool] = None,
    file: Optional[str] = None,
    suppress: Optional[Dict[str, str]] = None,
    console_level: Optional[Union[str, int]] = None,
    file_level: Optional[Union[str, int]] = None,
    console_format: Optional[str] = None,
    file_format: Optional[str] = None,
    backup_count: Optional[int] = None,
) -> logging.Logger:
    """Ініціалізує логер `teleshop`. Повторний виклик замінює наші хендлери, а не дублює їх."""
    with _lock:
        cfg = LoggingConfig(
            level=level or "INFO",
            console=True if console is None else bool(console),
            json=bool(json_mode),
            file=file or LoggingConfig.file,
            suppress={**DEFAULT_SUPPRESS, **(suppress or {})},
            console_level=str(console_level or level or "INFO"),
            file_level=str(file_level or level or "INFO"),
            console_format=console_format or CONSOLE_FORMAT,
            file_format=file_format or PLAIN_FORMAT,
            backup_count=int(backup_count or LoggingConfig.backup_count),
        )

        root_logger = logging.getLogger(LOG_NAME)
        console_lvl = _to_level(cfg.console_level, logging.INFO)
        file_lvl = _to_level(cfg.file_level, logging.DEBUG)
        root_logger.setLevel(min(_to_level(cfg.level, logging.INFO), console_lvl, file_lvl))

        for handler in list(root_logger.handlers):			# 🧹 Прибираємо попередні хендлери
            if isinstance(handler, (logging.StreamHandler, TimedRotatingFileHandler)):
                root_logger.removeHandler(handler)
                handler.close()

        if cfg.console:
            root_logger.addHandler(_make_console_handler(logging.Formatter(cfg.console_format), console_lvl))

        fmt_file = JsonFormatter() if cfg.json else logging.Formatter(cfg.file_format)
        root_logger.addHandler(_make_file_handler(cfg, fmt_file, file_lvl))

        _suppress_third_party(cfg.suppress)

        root_logger.info(
            "✅ Logging initialized | level=%s console=%s json=%s file=%s",
            cfg.level.upper(),
            "ON" if cfg.console else "OFF",
            "ON" if cfg.json else "OFF",
            cfg.file,
        )
        return root_logger


def init_logging_from_config(config: Optional[Dict[str, Any]]) -> logging.Logger:
    """
    Ініціалізує логування з вузла `logging` конфігурації.

    Args:
        config: Словник із ConfigService (може бути None).
    """
    node = config or {}
    return init_logging(
        level=node.get("level"),
        console=node.get("console"),
        json_mode=node.get("json"),
        file=node.get("file"),
        suppress=node.get("suppress"),
        console_level=node.get("console_level"),
        file_level=node.get("file_level"),
        console_format=node.get("console_format"),
        file_format=node.get("file_format"),
        backup_count=node.get("backup_count"),
    )


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """Дочірній логер `teleshop.<suffix>` (або кореневий без суфікса)."""
    return logging.getLogger(LOG_NAME if not suffix else f"{LOG_NAME}.{suffix}")


__all__ = [
    "LOG_NAME",
    "LoggingConfig",
    "JsonFormatter",
    "ChatLoggerAdapter",
    "chat_logger",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
]
