# tests/conftest.py
"""
🧪 Спільні фікстури тестів TeleShop.

🔹 Додає `src` у `sys.path`, щоб тести працювали без встановлення пакета.
🔹 `FakeTransport` — записує надіслані/видалені повідомлення і відповіді на callback-и.
🔹 `ManualTimer` — віртуальний час для таймерів `ConversationManager`.
🔹 `container` — повний DI-контейнер на тимчасовому config.yaml і фейковому транспорті.
"""

import asyncio
import heapq
import itertools
import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest
import yaml
from telegram import CallbackQuery, Chat, Message, Update, User

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from teleshop.config.config_service import ConfigService  # noqa: E402
from teleshop.config.setup.container import Container  # noqa: E402

CHAT_ID = 100
USER_ID = 100
_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ================================
# 🛍️ ТЕСТОВИЙ КАТАЛОГ
# ================================
SHOP_CATALOG = {
    "settings": {
        "store_name": "Test Shop",
        "operator_contact": "@ops",
        "operator_email": "ops@example.com",
        "custom_command_1": "Hours",
        "custom_response_1": "We are open 9-18",
        "custom_command_2": "",
        "custom_response_2": "",
    },
    "categories": [{"id": "coffee", "name": "Coffee"}],
    "products": [
        {"id": "p1", "name": "Beans", "category_id": "coffee", "price": "12.00", "stock": 100},
        {"id": "p2", "name": "Mug", "category_id": "coffee", "price": "5.00", "stock": 3, "max_order_quantity": 4},
    ],
    "pricing_tiers": [
        {"product_id": "p1", "min_quantity": 1, "max_quantity": 9, "unit_price": "10.00"},
        {"product_id": "p1", "min_quantity": 10, "unit_price": "8.00"},
    ],
    "delivery_methods": [
        {"id": "courier", "name": "Courier", "price": "5.00", "sort_order": 1},
        {"id": "pickup", "name": "Pickup", "is_free": True, "requires_address": False, "sort_order": 2},
    ],
    "payment_methods": [
        {"id": "card", "name": "Card", "payment_info": "4242", "sort_order": 1},
    ],
}


# ================================
# 📡 ФЕЙКОВИЙ ТРАНСПОРТ
# ================================
class FakeTransport:
    """Записує все, що рушій надсилає в Telegram; id повідомлень зростають з 1."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.sent = []              # (chat_id, message_id, text, keyboard)
        self.photos = []            # (chat_id, message_id, photo, caption)
        self.deleted = []           # (chat_id, message_id)
        self.answered = []          # callback_id
        self.fail_answer = False
        self.fail_send_to = set()

    async def send_text(self, chat_id, text, keyboard=None):
        if chat_id in self.fail_send_to:
            raise RuntimeError(f"chat {chat_id} blocked the bot")
        message_id = next(self._ids)
        self.sent.append((chat_id, message_id, text, keyboard))
        return message_id

    async def send_photo(self, chat_id, photo, caption="", keyboard=None):
        message_id = next(self._ids)
        self.photos.append((chat_id, message_id, photo, caption))
        return message_id

    async def delete_message(self, chat_id, message_id):
        self.deleted.append((chat_id, message_id))

    async def answer_callback(self, callback_id, text=None):
        if self.fail_answer:
            raise RuntimeError("query is too old")
        self.answered.append(callback_id)

    # ---------- зручні геттери ----------
    def texts(self, chat_id=CHAT_ID):
        return [text for chat, _, text, _ in self.sent if chat == chat_id]

    @property
    def last_text(self):
        return self.sent[-1][2]

    @property
    def last_keyboard(self):
        return self.sent[-1][3]

    def last_callbacks(self):
        keyboard = self.last_keyboard
        if keyboard is None:
            return []
        return [btn.callback_data for row in keyboard.inline_keyboard for btn in row]


# ================================
# ⏲️ ВІРТУАЛЬНИЙ ЧАС
# ================================
async def _drain():
    for _ in range(50):
        await asyncio.sleep(0)


class ManualTimer:
    """`sleep` чекає, поки тест не «прокрутить» час через `advance`."""

    def __init__(self):
        self.now = 0.0
        self._seq = itertools.count()
        self._waiters = []

    def clock(self):
        return self.now

    async def sleep(self, seconds):
        future = asyncio.get_running_loop().create_future()
        heapq.heappush(self._waiters, (self.now + seconds, next(self._seq), future))
        await future

    @property
    def pending(self):
        return sum(1 for _, _, fut in self._waiters if not fut.done())

    async def advance(self, seconds):
        target = self.now + seconds
        await _drain()
        while self._waiters and self._waiters[0][0] <= target:
            deadline, _, future = heapq.heappop(self._waiters)
            if future.done():
                continue
            self.now = deadline
            future.set_result(None)
            await _drain()
        self.now = target


# ================================
# 🧷 ФІКСТУРИ
# ================================
@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def timer():
    return ManualTimer()


@pytest.fixture
def shop_config(tmp_path, monkeypatch):
    """Справжній ConfigService на тимчасовому config.yaml (без файлів даних)."""
    node = {
        "metrics": {"enabled": False},
        "session": {"history_retention_sec": 21600, "cleared_notice_ttl_sec": 3600},
        "i18n": {"default_language": "en"},
        "currency_api": {"cache_file": None, "retry_attempts": 1, "retry_delay_sec": 0},
        "storage": {"file": None},
        "admin": {"broadcast_concurrency": 2},
        "shop": SHOP_CATALOG,
    }
    (tmp_path / "config.yaml").write_text(yaml.safe_dump(node, allow_unicode=True), encoding="utf-8")
    for env in ("TELEGRAM_TOKEN", "BOT_TOKEN", "TELESHOP_STORAGE_FILE", "TELESHOP_LOG_LEVEL"):
        monkeypatch.delenv(env, raising=False)
    monkeypatch.setenv("TELESHOP_CONFIG_DIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    ConfigService.reset()
    yield ConfigService()
    ConfigService.reset()


def offline_http():
    """HTTP-клієнт, що завжди відповідає 503: сервіс валют падає на резервні курси."""
    return httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(503)))


@pytest.fixture
async def container(shop_config, transport):
    client = offline_http()
    built = Container(shop_config, transport=transport, http_client=client)
    yield built
    await built.conversations.shutdown()
    await client.aclose()


@pytest.fixture
def make_user():
    def _make(user_id=USER_ID, username="buyer", first_name="Bob"):
        return User(id=user_id, first_name=first_name, is_bot=False, username=username)

    return _make


@pytest.fixture
def callback_update(make_user):
    """Фабрика апдейтів з натисканням inline-кнопки."""
    counter = itertools.count(1)

    def _make(data, chat_id=CHAT_ID, user_id=None):
        user = make_user(user_id or chat_id)
        message = Message(message_id=1, date=_DATE, chat=Chat(id=chat_id, type=Chat.PRIVATE))
        query = CallbackQuery(
            id=f"q{next(counter)}",
            from_user=user,
            chat_instance="ci",
            data=data,
            message=message,
        )
        return Update(update_id=next(counter), callback_query=query)

    return _make


@pytest.fixture
def text_update(make_user):
    """Фабрика апдейтів з текстовим повідомленням."""
    counter = itertools.count(1)

    def _make(text, chat_id=CHAT_ID, user_id=None):
        user = make_user(user_id or chat_id)
        message = Message(
            message_id=next(counter),
            date=_DATE,
            chat=Chat(id=chat_id, type=Chat.PRIVATE),
            from_user=user,
            text=text,
        )
        return Update(update_id=next(counter), message=message)

    return _make


@pytest.fixture
def context():
    return SimpleNamespace(callback_params={})


@pytest.fixture
def press(container, callback_update, context):
    """Натискає кнопку через справжній CallbackHandler контейнера."""

    async def _press(data, chat_id=CHAT_ID):
        await container.callback_handler.handle(callback_update(data, chat_id=chat_id), context)

    return _press


@pytest.fixture
def say(container, text_update, context):
    """Надсилає текст через справжній TextRouter контейнера."""

    async def _say(text, chat_id=CHAT_ID):
        await container.text_router.handle(text_update(text, chat_id=chat_id), context)

    return _say
