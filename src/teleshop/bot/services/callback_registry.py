# 🗂️ teleshop/bot/services/callback_registry.py
"""
🗂️ callback_registry.py — упорядкована таблиця маршрутів для inline-кнопок.

🎯 Призначення:
    • Зберігає пари (специфікація `CallbackData` → async-обробник)
    • `resolve(payload)` повертає перший маршрут, що приймає payload
    • Пише діагностичні логи (конфлікти, джерела реєстрації)

⚙️ Порядок перевірки:
    • спершу точні токени (без параметрів), у порядку реєстрації
    • далі префіксні — за спаданням довжини дії (найдовший префікс виграє), тайбрейк — порядок реєстрації
    • `ambiguous_matches` повертає всі маршрути, що приймають payload (самоперевірка таблиці)
"""

from __future__ import annotations

# 🔠 Системні імпорти
import inspect
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from teleshop.shared.utils.logger import LOG_NAME
from .callback_data_factory import CallbackData
from .types import CallbackHandlerType, Registrable

# ==========================
# 🧾 ЛОГЕР
# ==========================
logger = logging.getLogger(LOG_NAME)


@dataclass(frozen=True, slots=True)
class Route:
    spec: CallbackData
    handler: CallbackHandlerType
    origin: str
    order: int


# ==========================
# 🏛️ РЕЄСТР CALLBACK-ОБРОБНИКІВ
# ==========================
class CallbackRegistry:
    """
    🗂️ Реєстр callback'ів.

    Використання:
        1) Фіча реалізує `Registrable` і надає `get_callback_handlers()`
        2) `CallbackRegistry.register(feature)` додає всі маршрути
        3) `resolve(payload)` → (Route, params) або None
    """

    def __init__(self) -> None:
        self._routes: Dict[CallbackData, Route] = {}
        self._counter = 0
        self._ordered_cache: Optional[List[Route]] = None

    # ==========================
    # ➕ РЕЄСТРАЦІЯ
    # ==========================
    def register(self, feature_instance: Registrable) -> None:
        origin = feature_instance.__class__.__name__
        for key, handler in feature_instance.get_callback_handlers().items():
            self._register_pair(key, handler, origin_hint=origin)

    def register_map(self, mapping: Dict[CallbackData, CallbackHandlerType], *, origin: str = "manual") -> None:
        for key, handler in mapping.items():
            self._register_pair(key, handler, origin_hint=origin)

    # ==========================
    # 🔍 ПОШУК
    # ==========================
    def resolve(self, payload: str) -> Optional[Tuple[Route, Dict[str, str]]]:
        """Перший маршрут у таблиці, що приймає payload, і його параметри."""
        for route in self.ordered():
            params = route.spec.match(payload)
            if params is not None:
                return route, params
        return None

    def get_handler(self, key: CallbackData) -> Optional[CallbackHandlerType]:
        route = self._routes.get(key)
        return route.handler if route else None

    def ambiguous_matches(self, payload: str) -> List[CallbackData]:
        """Усі специфікації, що приймають payload (більше однієї — таблиця неоднозначна)."""
        return [route.spec for route in self.ordered() if route.spec.match(payload) is not None]

    def ordered(self) -> List[Route]:
        if self._ordered_cache is None:
            self._ordered_cache = sorted(self._routes.values(), key=self._sort_key)
        return self._ordered_cache

    @staticmethod
    def _sort_key(route: Route) -> Tuple[int, int, int]:
        if route.spec.is_exact:
            return 0, 0, route.order
        return 1, -len(route.spec.action), route.order

    # ==========================
    # ➖ СНЯТТЯ / СКИДАННЯ
    # ==========================
    def unregister(self, key: CallbackData) -> None:
        if self._routes.pop(key, None) is not None:
            self._ordered_cache = None
            logger.info("🗑️ Обробник для callback '%s' знятий з реєстрації.", key)

    def clear(self) -> None:
        count = len(self._routes)
        self._routes.clear()
        self._ordered_cache = None
        logger.info("🧹 Реєстр callback‑обробників очищено (видалено %d).", count)

    def keys(self) -> List[CallbackData]:
        return [route.spec for route in self.ordered()]

    def missing_keys(self, keys: Iterable[CallbackData]) -> List[CallbackData]:
        """Ключі з `keys`, яких немає у реєстрі (самотестування у рантаймі)."""
        return [k for k in keys if k not in self._routes]

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, key: object) -> bool:
        return key in self._routes

    # ==========================
    # 🔒 ВНУТРІШНЯ РЕЄСТРАЦІЯ ПАРИ
    # ==========================
    def _register_pair(self, key: CallbackData, handler: CallbackHandlerType, *, origin_hint: str) -> None:
        if not isinstance(key, CallbackData):
            raise TypeError(f"Ключ для callback‑обробника має бути типу CallbackData, а не {type(key)}")
        if not inspect.iscoroutinefunction(handler):
            raise TypeError(f"Обробник для '{key}' має бути async‑функцією (async def).")

        self._warn_if_signature_suspicious(key, handler)

        previous = self._routes.get(key)
        if previous is not None:
            logger.warning("⚠️ Обробник для '%s' перезаписано (джерело: %s).", key, origin_hint)
        order = previous.order if previous else self._counter
        self._counter += 1
        self._routes[key] = Route(spec=key, handler=handler, origin=origin_hint, order=order)
        self._ordered_cache = None
        logger.debug("✅ Обробник для callback '%s' зареєстровано (джерело: %s).", key, origin_hint)

    @staticmethod
    def _warn_if_signature_suspicious(key: CallbackData, handler: CallbackHandlerType) -> None:
        """Мʼяка перевірка: (Update, CustomContext) — попередження в лог, без винятків."""
        try:
            sig = inspect.signature(handler)
        except (TypeError, ValueError):  # pragma: no cover
            logger.warning("⚠️ Не вдалося прочитати сигнатуру обробника '%s'.", key)
            return
        if len(sig.parameters) != 2:
            logger.warning(
                "⚠️ Обробник '%s' має приймати рівно 2 параметри (Update, CustomContext). Зараз: %d.",
                key,
                len(sig.parameters),
            )


__all__ = ["CallbackRegistry", "Route"]
