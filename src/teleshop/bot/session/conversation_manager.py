# 💬 teleshop/bot/session/conversation_manager.py
"""
💬 Менеджер розмови: «миттєве зникнення» повідомлень і автоочищення історії.

🔹 Для кожного чату тримає список видимих повідомлень бота (у сталому стані — одне).
🔹 `replace` видаляє всі відстежені повідомлення, надсилає нове і перезапускає таймер.
🔹 Таймер: через `history_retention_sec` (6 год) видаляє історію, надсилає коротке сповіщення
   і через `cleared_notice_ttl_sec` (1 год) видаляє і його. Більше нічого не відбувається.
🔹 Кожен чат має власний `asyncio.Lock`; глобального блокування немає.
🔹 Після завершення каскаду запис розмови і її лок звільняються.
🔹 Видалення — best effort (помилки ковтаються і рахуються); помилки надсилання летять вище.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.ui import static_messages as msg
from teleshop.domain.shop.interfaces import ILocalizer, IMessageTransport
from teleshop.shared.metrics import CONVERSATIONS_EXPIRED, MESSAGE_DELETE_FAILURES
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.session")

Sleep = Callable[[float], Awaitable[Any]]
Clock = Callable[[], float]


# ================================
# 🧱 МОДЕЛІ
# ================================
@dataclass(frozen=True, slots=True)
class RenderedMessage:
    """Що показати: текст (або підпис до фото) і клавіатура."""
    text: str
    keyboard: Any = None
    photo: Optional[str] = None


Render = Callable[[], Awaitable[RenderedMessage]]


@dataclass(slots=True)
class Conversation:
    chat_id: int
    tracked: List[int] = field(default_factory=list)
    last_activity: float = 0.0
    expiry_task: Optional[asyncio.Task] = None
    notice_task: Optional[asyncio.Task] = None


# ================================
# 🏛️ МЕНЕДЖЕР
# ================================
class ConversationManager:
    """💬 Власник «активного набору повідомлень» кожного чату."""

    def __init__(
        self,
        transport: IMessageTransport,
        localizer: Optional[ILocalizer] = None,
        *,
        retention_sec: float = 6 * 60 * 60,
        notice_ttl_sec: float = 60 * 60,
        sleep: Sleep = asyncio.sleep,
        clock: Clock = time.monotonic,
    ) -> None:
        self._transport = transport
        self._localizer = localizer
        self._retention = retention_sec
        self._notice_ttl = notice_ttl_sec
        self._sleep = sleep
        self._clock = clock
        self._conversations: Dict[int, Conversation] = {}
        self._locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Dict[int, int] = {}

    # ================================
    # 🔑 ПУБЛІЧНИЙ API
    # ================================
    @property
    def transport(self) -> IMessageTransport:
        return self._transport

    @property
    def active_chats(self) -> int:
        return len(self._conversations)

    @property
    def held_locks(self) -> int:
        return len(self._locks)

    def open(self, chat_id: int) -> Conversation:
        """Гарантує наявність запису розмови."""
        conversation = self._conversations.get(chat_id)
        if conversation is None:
            conversation = Conversation(chat_id=chat_id, last_activity=self._clock())
            self._conversations[chat_id] = conversation
            logger.debug("💬 Conversation opened chat=%s", chat_id)
        return conversation

    async def replace(self, chat_id: int, render: Render, extra: Sequence[Render] = ()) -> int:
        """
        Видаляє всі відстежені повідомлення, рендерить і надсилає нове.

        Args:
            extra: допоміжні повідомлення (напр. деталі під фото товару), що надсилаються
                одразу після основного в межах того самого захоплення лока.

        Returns:
            message_id основного повідомлення. Після виклику відстежуються лише
            основне та допоміжні повідомлення.
        """
        async with self._guard(chat_id):
            conversation = self.open(chat_id)
            self._cancel_tasks(conversation)
            stale, conversation.tracked = conversation.tracked, []
            for message_id in stale:
                await self._delete(chat_id, message_id)

            message_id = await self._send(chat_id, await render())
            conversation.tracked = [message_id]
            for render_extra in extra:
                conversation.tracked.append(await self._send(chat_id, await render_extra()))

            conversation.last_activity = self._clock()
            conversation.expiry_task = asyncio.create_task(self._expire(chat_id))
            logger.debug("🔁 chat=%s replaced %d message(s) with %s", chat_id, len(stale), conversation.tracked)
            return message_id

    async def track(self, chat_id: int, message_id: int) -> None:
        """Додає допоміжне повідомлення до відстежених, не видаляючи основне."""
        async with self._guard(chat_id):
            conversation = self.open(chat_id)
            conversation.tracked.append(message_id)
            conversation.last_activity = self._clock()
            if conversation.expiry_task is None:
                conversation.expiry_task = asyncio.create_task(self._expire(chat_id))

    def cancel_timer(self, chat_id: int) -> None:
        conversation = self._conversations.get(chat_id)
        if conversation is not None:
            self._cancel_tasks(conversation)

    def tracked(self, chat_id: int) -> Tuple[int, ...]:
        conversation = self._conversations.get(chat_id)
        return tuple(conversation.tracked) if conversation else ()

    def get(self, chat_id: int) -> Optional[Conversation]:
        return self._conversations.get(chat_id)

    def forget(self, chat_id: int) -> None:
        """Скасовує таймери і забуває розмову (повідомлення в чаті не чіпає)."""
        conversation = self._conversations.pop(chat_id, None)
        if conversation is not None:
            self._cancel_tasks(conversation)
        if chat_id not in self._lock_users:
            self._locks.pop(chat_id, None)

    async def shutdown(self) -> None:
        """Скасовує всі таймери (зупинка застосунку)."""
        tasks = []
        for conversation in self._conversations.values():
            tasks.extend(t for t in (conversation.expiry_task, conversation.notice_task) if t is not None)
            self._cancel_tasks(conversation)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("🛑 ConversationManager stopped (%d timers cancelled)", len(tasks))

    # ================================
    # ⏲️ ТАЙМЕРИ
    # ================================
    async def _expire(self, chat_id: int) -> None:
        await self._sleep(self._retention)
        async with self._guard(chat_id):
            conversation = self._conversations.get(chat_id)
            if conversation is None:
                return
            conversation.expiry_task = None
            stale, conversation.tracked = conversation.tracked, []
            for message_id in stale:
                await self._delete(chat_id, message_id)
            CONVERSATIONS_EXPIRED.inc()

            try:
                text = await self._notice_text(chat_id)
                notice_id = await self._transport.send_text(chat_id, text)
            except Exception:
                logger.warning("🧹 chat=%s history cleared, notice not delivered", chat_id, exc_info=True)
                return
            conversation.tracked = [notice_id]
            conversation.notice_task = asyncio.create_task(self._drop_notice(chat_id, notice_id))
            logger.info("🧹 chat=%s history cleared (%d message(s))", chat_id, len(stale))

    async def _drop_notice(self, chat_id: int, notice_id: int) -> None:
        await self._sleep(self._notice_ttl)
        async with self._guard(chat_id):
            conversation = self._conversations.get(chat_id)
            if conversation is None or notice_id not in conversation.tracked:
                return
            conversation.notice_task = None
            conversation.tracked.remove(notice_id)
            await self._delete(chat_id, notice_id)

    # ================================
    # 🔒 ЛОКИ ТА ЗВІЛЬНЕННЯ
    # ================================
    @asynccontextmanager
    async def _guard(self, chat_id: int) -> AsyncIterator[None]:
        """
        Захоплює пер-чатний лок (створюється ліниво).

        Лічильник користувачів не дає видалити лок, поки на ньому хтось чекає;
        останній, хто виходить, прибирає лок і порожню розмову.
        """
        lock = self._locks.get(chat_id)
        if lock is None:
            lock = self._locks[chat_id] = asyncio.Lock()
        self._lock_users[chat_id] = self._lock_users.get(chat_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            users = self._lock_users[chat_id] - 1
            if users:
                self._lock_users[chat_id] = users
            else:
                del self._lock_users[chat_id]
                self._locks.pop(chat_id, None)
                self._release_if_idle(chat_id)

    def _release_if_idle(self, chat_id: int) -> None:
        conversation = self._conversations.get(chat_id)
        if conversation is None:
            return
        if conversation.tracked or conversation.expiry_task is not None or conversation.notice_task is not None:
            return
        del self._conversations[chat_id]
        logger.debug("💤 Conversation released chat=%s", chat_id)

    async def _send(self, chat_id: int, rendered: RenderedMessage) -> int:
        if rendered.photo:
            return await self._transport.send_photo(
                chat_id, rendered.photo, caption=rendered.text, keyboard=rendered.keyboard
            )
        return await self._transport.send_text(chat_id, rendered.text, keyboard=rendered.keyboard)

    async def _notice_text(self, chat_id: int) -> str:
        if self._localizer is None:
            return msg.HISTORY_CLEARED
        try:
            return await self._localizer.translate(str(chat_id), "history_cleared")
        except Exception:
            logger.debug("🌍 history_cleared translation failed for chat=%s", chat_id, exc_info=True)
            return msg.HISTORY_CLEARED

    @staticmethod
    def _cancel_tasks(conversation: Conversation) -> None:
        current = asyncio.current_task() if _loop_running() else None
        for name in ("expiry_task", "notice_task"):
            task = getattr(conversation, name)
            if task is not None and task is not current and not task.done():
                task.cancel()
            setattr(conversation, name, None)

    async def _delete(self, chat_id: int, message_id: int) -> None:
        try:
            await self._transport.delete_message(chat_id, message_id)
        except Exception as exc:
            MESSAGE_DELETE_FAILURES.inc()
            logger.debug("🗑️ delete chat=%s msg=%s failed: %s", chat_id, message_id, exc)


def _loop_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


__all__ = ["Conversation", "ConversationManager", "Render", "RenderedMessage"]
