"""
🧪 test_config_service.py — unit-тести для ConfigService

Перевіряє:
- Доступ за крапковим ключем і приведення типів
- Перевизначення з config.json та змінних середовища
- Singleton і reset()
"""

import json

import pytest
import yaml

from teleshop.config.config_service import ConfigService


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    node = {
        "session": {"history_retention_sec": "21600", "cleared_notice_ttl_sec": None},
        "storage": {"file": "data/shop.json"},
        "telegram": {"bot": {"token": "from-yaml"}},
    }
    (tmp_path / "config.yaml").write_text(yaml.safe_dump(node), encoding="utf-8")
    for env in ("TELEGRAM_TOKEN", "BOT_TOKEN", "TELESHOP_STORAGE_FILE", "TELESHOP_LOG_LEVEL", "TELESHOP_METRICS_PORT"):
        monkeypatch.delenv(env, raising=False)
    monkeypatch.setenv("TELESHOP_CONFIG_DIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    ConfigService.reset()
    yield tmp_path
    ConfigService.reset()


def test_dotted_get_and_cast(config_dir):
    """🔑 'a.b' + cast; відсутній ключ → default; невдалий cast → default."""
    config = ConfigService()
    assert config.get("session.history_retention_sec", cast=int) == 21600
    assert config.get("session.missing", 7) == 7
    assert config.get("storage.file", cast=int, default=-1) == -1
    assert config.get("session.cleared_notice_ttl_sec", 3600) is None


def test_singleton_and_reset(config_dir):
    """🧩 Один екземпляр до reset()."""
    first = ConfigService()
    assert ConfigService() is first
    ConfigService.reset()
    assert ConfigService() is not first


def test_json_overrides_yaml(config_dir):
    """📄 config.json накладається поверх YAML."""
    (config_dir / "config.json").write_text(json.dumps({"storage": {"file": "other.json"}}), encoding="utf-8")
    config = ConfigService()
    assert config.get("storage.file") == "other.json"
    assert config.get("session.history_retention_sec") == "21600"


def test_env_overrides_files(config_dir, monkeypatch):
    """🔐 Змінні середовища мають найвищий пріоритет."""
    monkeypatch.setenv("TELEGRAM_TOKEN", "from-env")
    monkeypatch.setenv("TELESHOP_STORAGE_FILE", "/tmp/shop.json")
    config = ConfigService()
    assert config.get("telegram.bot.token") == "from-env"
    assert config.get("storage.file") == "/tmp/shop.json"


def test_missing_yaml_is_tolerated(tmp_path, monkeypatch):
    """🩹 Без config.yaml — порожня конфігурація, без винятку."""
    monkeypatch.delenv("TELESHOP_STORAGE_FILE", raising=False)
    monkeypatch.setenv("TELESHOP_CONFIG_DIR", str(tmp_path / "nowhere"))
    monkeypatch.chdir(tmp_path)
    ConfigService.reset()
    try:
        assert ConfigService().get("storage.file", "fallback") == "fallback"
    finally:
        ConfigService.reset()
