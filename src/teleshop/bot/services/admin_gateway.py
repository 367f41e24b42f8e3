# 📣 teleshop/bot/services/admin_gateway.py
"""
📣 AdminGateway — дві вузькі операції для адмін-поверхні.

🔹 `broadcast(chat_ids, text)` — розсилка; збій одного чату не зупиняє інших і не піднімається вище.
🔹 `is_ready()` — чи підключений рушій до транспорту (між `mark_ready` і `mark_stopped`).

Розсилка не торкається «активного повідомлення» чатів: воно лишається на місці.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Union

# 🧩 Внутрішні модулі проєкту
from teleshop.domain.shop.interfaces import IMessageTransport
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.admin")

ChatId = Union[int, str]


@dataclass(slots=True)
class BroadcastReport:
    sent: List[int] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)            # 🧾 chat_id → причина

    @property
    def total(self) -> int:
        return len(self.sent) + len(self.failed)


class AdminGateway:
    """📣 Фасад для адмін-дашборду."""

    def __init__(self, transport: IMessageTransport, *, concurrency: int = 10) -> None:
        self._transport = transport
        self._semaphore = asyncio.Semaphore(max(1, concurrency))
        self._ready = False

    def mark_ready(self) -> None:
        self._ready = True
        logger.info("🟢 Engine attached to transport")

    def mark_stopped(self) -> None:
        self._ready = False
        logger.info("🔴 Engine detached from transport")

    def is_ready(self) -> bool:
        return self._ready

    async def broadcast(self, chat_ids: Iterable[ChatId], text: str) -> BroadcastReport:
        report = BroadcastReport()
        if not self._ready:
            logger.warning("📣 Broadcast requested while engine is not ready")
        targets = list(dict.fromkeys(str(c) for c in chat_ids))

        async def _send_one(raw_id: str) -> None:
            try:
                chat_id = int(raw_id)
            except ValueError:
                report.failed[raw_id] = "invalid chat id"
                return
            async with self._semaphore:
                try:
                    await self._transport.send_text(chat_id, text)
                except asyncio.CancelledError:
                    raise
                except Exception as exc:
                    report.failed[raw_id] = f"{type(exc).__name__}: {exc}"
                    logger.warning("📣 Broadcast to chat=%s failed: %s", chat_id, exc)
                    return
            report.sent.append(chat_id)

        await asyncio.gather(*(_send_one(chat_id) for chat_id in targets))
        logger.info("📣 Broadcast finished: %d sent, %d failed", len(report.sent), len(report.failed))
        return report


__all__ = ["AdminGateway", "BroadcastReport"]
