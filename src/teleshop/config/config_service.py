# ⚙️ teleshop/config/config_service.py
"""
⚙️ config_service.py — сервіс доступу до статичної конфігурації.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з .env, config.json та config.yaml.
- Надає єдиний метод .get("a.b.c", default, cast=...) для будь-якого параметра.
- Працює як Singleton; `reset()` скидає екземпляр (для тестів).
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import os                                   # 📁 Доступ до змінних середовища
import json                                 # 📄 Робота з JSON-файлами
import logging                              # 🧾 Логування
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Callable, Dict, Optional


CONFIG_DIR = Path(__file__).parent          # 📂 Дефолтна тека з config.yaml/config.json

# 🔑 ENV-змінна → крапковий ключ конфігу
ENV_MAPPING: Dict[str, str] = {
    "TELEGRAM_TOKEN": "telegram.bot.token",
    "BOT_TOKEN": "telegram.bot.token",
    "TELESHOP_STORAGE_FILE": "storage.file",
    "TELESHOP_LOG_LEVEL": "logging.level",
    "TELESHOP_METRICS_PORT": "metrics.prometheus.port",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх статичних параметрів проєкту.
    Конфігурація зчитується один раз; шлях до теки можна перевизначити `TELESHOP_CONFIG_DIR`.
    """

    _instance: Optional["ConfigService"] = None  # 🧩 Singleton-екземпляр

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            cls._instance = instance
            logging.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """🧹 Скидає singleton — наступний виклик перечитає файли."""
        cls._instance = None

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела в один словник.
        Порядок накладання: config.yaml → config.json → .env (останнє має пріоритет).
        """
        config_dir = Path(os.getenv("TELESHOP_CONFIG_DIR") or CONFIG_DIR)

        # --- 1. YAML-файл ---
        yaml_path = config_dir / "config.yaml"
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                self._deep_update(self._config, yaml.safe_load(f) or {})
        except (FileNotFoundError, yaml.YAMLError) as e:
            logging.warning("⚠️ Не вдалося завантажити %s: %s", yaml_path, e)

        # --- 2. JSON-файл (необовʼязковий) ---
        json_path = config_dir / "config.json"
        if json_path.exists():
            try:
                with open(json_path, "r", encoding="utf-8") as f:
                    self._deep_update(self._config, json.load(f))
            except json.JSONDecodeError as e:
                logging.warning("⚠️ Не вдалося завантажити config.json: %s", e)

        # --- 3. .env змінні ---
        load_dotenv()
        env_vars = {key: os.getenv(env) for env, key in ENV_MAPPING.items() if os.getenv(env)}
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logging.info("✅ Конфігурацію успішно завантажено (%s).", config_dir)

    def get(self, key: str, default: Any = None, cast: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        🔑 Отримує значення за ключем (наприклад: 'session.history_retention_sec').

        Args:
            key: Ключ у форматі з крапкою.
            default: Значення, якщо ключ не знайдено або `cast` не вдався.
            cast: Необовʼязковий конвертер (int, float, str, bool...).
        """
        value: Any = self._config
        for part in key.split('.'):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        if cast is None or value is None:
            return value
        try:
            return cast(value)
        except (TypeError, ValueError):
            logging.warning("⚠️ Ключ '%s' має значення %r, яке не приводиться до %s", key, value, cast)
            return default

    def as_dict(self) -> Dict[str, Any]:
        """📤 Поверхнева копія обʼєднаної конфігурації."""
        return dict(self._config)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================
    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 'telegram.bot.token' → {'telegram': {'bot': {'token': ...}}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split('.')
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    @classmethod
    def _deep_update(cls, source: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """🔁 Рекурсивно обʼєднує словники (overrides перемагає)."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                cls._deep_update(source[key], value)
            else:
                source[key] = value
