# 🧾 teleshop/bot/commands/checkout_feature.py
"""
🧾 Чекаут у п'ять етапів, стан яких живе в callback-токенах.

1️⃣ `checkout` — сума кошика, новий номер замовлення, кнопки способів доставки
2️⃣ `select_delivery_<methodId>_<orderNumber>` — самовивіз одразу веде на оплату,
   інакше просимо контакти (one-shot захоплення)
3️⃣ текст із контактами → екран підтвердження `confirm_info_<methodId>_<orderNumber>`
4️⃣ `confirm_info_…` → способи оплати `select_payment_<paymentId>_<orderNumber>`
5️⃣ `select_payment_…` → інструкції та `payment_done_<orderNumber>`; натискання створює замовлення

🔹 Видалений/вимкнений спосіб доставки чи оплати → знову етап 1
🔹 Повторне «оплачено» для того ж номера нічого не створює, а показує вже створене замовлення
🔹 Етапи 1 і 5 щоразу перечитують живий кошик
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging
from typing import Dict, List, Optional, Tuple, cast

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, FeatureDeps, chat_key, user_key
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.callback_registry import CallbackRegistry
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CallbackHandlerType, CaptureHandlerType
from teleshop.bot.session import CaptureKind, PendingCapture, RenderedMessage
from teleshop.bot.ui.formatters.shop_formatter import safe
from teleshop.bot.ui.keyboards.keyboards import button
from teleshop.domain.checkout import CheckoutService, parse_customer_info
from teleshop.domain.shop.entities import CustomerInfo, DeliveryMethod, Order
from teleshop.shared.errors import StaleReferenceError
from teleshop.shared.metrics import ORDERS_CREATED, ORDERS_DUPLICATE
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.checkout")


class CheckoutFeature(BaseFeature):
    """🧾 Оркестратор чекауту поверх `CheckoutService`."""

    def __init__(self, registry: CallbackRegistry, deps: FeatureDeps, checkout: CheckoutService) -> None:
        self.checkout = checkout
        super().__init__(registry, deps)

    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        cb = self.const.CALLBACKS
        mapping = {
            cb.CHECKOUT: self.start,
            cb.SELECT_DELIVERY: self.select_delivery,
            cb.CONFIRM_INFO: self.confirm_info,
            cb.SELECT_PAYMENT: self.select_payment,
            cb.PAYMENT_DONE: self.payment_done,
        }
        return cast(Dict[CallbackData, CallbackHandlerType], mapping)

    def get_capture_handlers(self) -> Dict[CaptureKind, CaptureHandlerType]:
        return {CaptureKind.CUSTOMER_INFO: self.on_customer_info}

    # ================================
    # 1️⃣ СТАРТ
    # ================================
    async def start(self, update: Update, context: Optional[CustomContext] = None) -> None:
        user_id = user_key(update)
        chat_id = chat_key(update)
        if chat_id is not None:
            self._drop_customer_capture(chat_id)
        await self.show(update, lambda: self.checkout_screen(user_id))

    async def checkout_screen(self, user_id: str) -> RenderedMessage:
        quote = await self.checkout.quote(user_id)
        if quote.is_empty:
            rows = [[button(await self.t(user_id, "button_listings"), self.const.CALLBACKS.LISTINGS.build())]]
            return RenderedMessage(
                text=await self.t(user_id, "checkout_cart_empty"),
                keyboard=await self.deps.keyboard.with_back(user_id, rows),
            )

        order_number = self.checkout.new_order_number()
        options: List[Tuple[DeliveryMethod, str]] = []
        for method in await self.checkout.delivery_options():
            options.append((method, await self.deps.localizer.format_price(user_id, quote.total_with(method))))
        logger.info("🧾 Checkout %s started user=%s subtotal=%s", order_number, user_id, quote.subtotal)

        text = await self.t(
            user_id,
            "checkout_title",
            {
                "order_number": order_number,
                "subtotal": await self.deps.localizer.format_price(user_id, quote.subtotal),
            },
        )
        return RenderedMessage(
            text=text,
            keyboard=await self.deps.keyboard.delivery_options(user_id, order_number, options),
        )

    # ================================
    # 2️⃣ ДОСТАВКА
    # ================================
    async def select_delivery(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        order_number = self.param(context, "order_number")
        method = await self._delivery_or_restart(update, self.param(context, "method_id"))
        if method is None:
            return

        self.checkout.drafts.update(user_id, order_number, delivery_method_id=method.id, payment_method_id=None)
        if not method.requires_address:
            logger.info("🏪 %s: pickup via %s, contacts skipped", order_number, method.id)
            self.checkout.drafts.update(user_id, order_number, customer=CustomerInfo.placeholder())
            await self.show(update, lambda: self.payment_screen(user_id, order_number))
            return

        chat_id = chat_key(update)
        if chat_id is not None:
            self.deps.captures.register(
                PendingCapture(
                    kind=CaptureKind.CUSTOMER_INFO,
                    chat_id=chat_id,
                    payload={"method_id": method.id, "order_number": order_number},
                )
            )

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.t(user_id, "checkout_info_prompt", {"method": safe(method.name)}),
                keyboard=await self.deps.keyboard.back_to_menu(user_id),
            )

        await self.show(update, render)

    # ================================
    # 3️⃣ КОНТАКТИ (захоплений текст)
    # ================================
    async def on_customer_info(self, update: Update, capture: PendingCapture, text: str) -> None:
        user_id = user_key(update)
        method_id = capture.payload.get("method_id", "")
        order_number = capture.payload.get("order_number", "")
        method = await self._delivery_or_restart(update, method_id)
        if method is None:
            return

        customer = parse_customer_info(text)
        self.checkout.drafts.update(user_id, order_number, delivery_method_id=method.id, customer=customer)
        logger.info("📇 %s: contact details captured for user=%s", order_number, user_id)

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.deps.formatter.customer_confirmation(user_id, customer, method.name),
                keyboard=await self.deps.keyboard.confirm_info(user_id, method.id, order_number),
            )

        await self.show(update, render)

    # ================================
    # 4️⃣ ПІДТВЕРДЖЕННЯ → ОПЛАТА
    # ================================
    async def confirm_info(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        order_number = self.param(context, "order_number")
        method = await self._delivery_or_restart(update, self.param(context, "method_id"))
        if method is None:
            return

        draft = self.checkout.drafts.get(user_id, order_number)
        if draft is None or draft.customer is None:
            logger.info("📝 %s: no captured contacts (draft lost) → checkout start", order_number)
            await self.start(update)
            return
        self.checkout.drafts.update(user_id, order_number, delivery_method_id=method.id)
        await self.show(update, lambda: self.payment_screen(user_id, order_number))

    async def payment_screen(self, user_id: str, order_number: str) -> RenderedMessage:
        methods = await self.checkout.payment_options()
        return RenderedMessage(
            text=await self.t(user_id, "checkout_payment_title", {"order_number": order_number}),
            keyboard=await self.deps.keyboard.payment_options(user_id, order_number, methods),
        )

    # ================================
    # 5️⃣ ІНСТРУКЦІЇ ТА ЗАВЕРШЕННЯ
    # ================================
    async def select_payment(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        order_number = self.param(context, "order_number")
        draft = self.checkout.drafts.get(user_id, order_number)
        if draft is None or draft.delivery_method_id is None:
            logger.info("📝 %s: draft missing at payment selection → checkout start", order_number)
            await self.start(update)
            return

        try:
            payment = await self.checkout.require_payment(self.param(context, "method_id"))
            delivery = await self.checkout.require_delivery(draft.delivery_method_id)
        except StaleReferenceError as exc:
            await self._restart(update, exc)
            return

        quote = await self.checkout.quote(user_id)
        if quote.is_empty:
            await self.start(update)
            return
        self.checkout.drafts.update(user_id, order_number, payment_method_id=payment.id)

        async def render() -> RenderedMessage:
            text = await self.t(
                user_id,
                "checkout_payment_instructions",
                {
                    "method": safe(payment.name),
                    "info": safe(payment.payment_info),
                    "instructions": safe(payment.instructions),
                    "total": await self.deps.localizer.format_price(user_id, quote.total_with(delivery)),
                    "order_number": order_number,
                },
            )
            return RenderedMessage(text=text, keyboard=await self.deps.keyboard.payment_done(user_id, order_number))

        await self.show(update, render)

    async def payment_done(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        order_number = self.param(context, "order_number")

        existing = await self.checkout.find_existing(user_id, order_number)
        if existing is not None:
            await self._confirmed(update, existing, created=False)
            return

        draft = self.checkout.drafts.get(user_id, order_number)
        if draft is None or draft.delivery_method_id is None or draft.payment_method_id is None:
            logger.info("📝 %s: draft missing at payment confirmation → checkout start", order_number)
            await self.start(update)
            return

        try:
            delivery = await self.checkout.require_delivery(draft.delivery_method_id)
            payment = await self.checkout.require_payment(draft.payment_method_id)
            result = await self.checkout.complete(
                user_id,
                order_number,
                customer=draft.customer or CustomerInfo.placeholder(),
                delivery=delivery,
                payment=payment,
            )
        except StaleReferenceError as exc:
            await self._restart(update, exc)
            return
        await self._confirmed(update, result.order, created=result.created)

    async def _confirmed(self, update: Update, order: Order, *, created: bool) -> None:
        user_id = user_key(update)
        if created:
            ORDERS_CREATED.inc()
        else:
            ORDERS_DUPLICATE.inc()
            logger.info("♻️ Repeated payment confirmation for %s user=%s", order.order_number, user_id)

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.deps.formatter.order_confirmed(user_id, order),
                keyboard=await self.deps.keyboard.order_confirmed(user_id),
            )

        await self.show(update, render)

    # ================================
    # 🧰 ДОПОМІЖНЕ
    # ================================
    async def _delivery_or_restart(self, update: Update, method_id: str) -> Optional[DeliveryMethod]:
        try:
            return await self.checkout.require_delivery(method_id)
        except StaleReferenceError as exc:
            await self._restart(update, exc)
            return None

    async def _restart(self, update: Update, exc: StaleReferenceError) -> None:
        logger.info("🕸️ Stale %s %r → checkout start", exc.kind, exc.reference)
        await self.start(update)

    def _drop_customer_capture(self, chat_id: int) -> None:
        pending = self.deps.captures.peek(chat_id)
        if pending is not None and pending.kind is CaptureKind.CUSTOMER_INFO:
            self.deps.captures.discard(chat_id)


__all__ = ["CheckoutFeature"]
