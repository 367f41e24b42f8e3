# 💵 teleshop/infrastructure/currency/currency_service.py
"""
💵 CurrencyService — курси валют відносно USD для показу цін.

🎯 Призначення:
    • асинхронно отримує курси (одиниць валюти за 1 USD) з HTTP API і кешує їх за TTL (1 год);
    • зберігає копію курсів на диску (aiofiles), щоб перезапуск не залежав від API;
    • якщо API недоступне — працює на резервних курсах з конфігу (EUR 0.85, GBP 0.73, JPY 110, …).

⚙️ Нотатки:
    • усі курси — Decimal, квант 0.0001 (ROUND_HALF_EVEN);
    • `convert` ніколи не падає через мережу: у найгіршому разі повертає суму як є (USD).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                     # 💽 Асинхронна робота з файлами
import httpx                                                        # 🌐 HTTP-клієнт для API курсів

# 🔠 Системні імпорти
import asyncio                                                      # 🔁 Локи/паузи між спробами
import json                                                         # 📄 Серіалізація кешу курсів
import logging                                                      # 🧾 Логи сервісу
import time                                                         # ⏱️ TTL/мітки часу
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN      # 💰 Аритметика й округлення
from typing import Any, Callable, Dict, Mapping, Optional, Union

# 🧩 Внутрішні модулі проєкту
from teleshop.config.config_service import ConfigService             # ⚙️ Конфіги застосунку
from teleshop.shared.utils.logger import LOG_NAME                   # 🏷️ Ім'я централізованого логера

logger = logging.getLogger(f"{LOG_NAME}.currency")

BASE_CURRENCY = "USD"

# 🛟 Статичні курси (за 1 USD), якщо в конфігу нічого немає
DEFAULT_FALLBACK_RATES: Dict[str, str] = {
    "USD": "1.0",
    "EUR": "0.85",
    "GBP": "0.73",
    "JPY": "110.0",
    "CNY": "6.45",
    "CAD": "1.25",
    "AUD": "1.35",
    "CHF": "0.92",
    "UAH": "41.0",
    "BRL": "5.2",
}


class CurrencyService:
    """
    🏦 Тримає актуальні курси USD → X і конвертує суми.
    """

    _RATE_QUANTUM = Decimal("0.0001")  # квант збереження/порівняння курсів
    _ROUNDING = ROUND_HALF_EVEN

    def __init__(
        self,
        *,
        api_url: str = "https://api.exchangerate.host/latest?base=USD",
        cache_file: Optional[str] = None,
        ttl_sec: float = 3600,
        timeout_sec: float = 5,
        retry_attempts: int = 2,
        retry_delay_sec: float = 2,
        fallback_rates: Optional[Mapping[str, Any]] = None,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._api_url = api_url
        self._cache_file = cache_file
        self._ttl = ttl_sec
        self._timeout = timeout_sec
        self._retries = max(1, int(retry_attempts))
        self._retry_delay = retry_delay_sec
        self._fallback_raw: Mapping[str, Any] = fallback_rates or DEFAULT_FALLBACK_RATES
        self._clock = clock

        self._rates: Dict[str, Decimal] = {}                         # 💱 Поточні курси (за 1 USD)
        self._client = client
        self._owns_client = client is None
        self._last_update_ts: float = 0.0
        self._lock = asyncio.Lock()
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls, config: ConfigService, client: Optional[httpx.AsyncClient] = None
    ) -> "CurrencyService":
        return cls(
            api_url=config.get("currency_api.url", "https://api.exchangerate.host/latest?base=USD"),
            cache_file=config.get("currency_api.cache_file"),
            ttl_sec=config.get("currency_api.ttl_sec", 3600, cast=float),
            timeout_sec=config.get("currency_api.timeout_sec", 5, cast=float),
            retry_attempts=config.get("currency_api.retry_attempts", 2, cast=int),
            retry_delay_sec=config.get("currency_api.retry_delay_sec", 2, cast=float),
            fallback_rates=config.get("currency_api.fallback_rates"),
            client=client,
        )

    # ================================
    # 🔓 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    async def initialize(self) -> None:
        """Піднімає курси з кеш-файлу (або резервні) і створює HTTP-клієнт."""
        async with self._init_lock:
            if not self._rates:
                self._rates = await self._load_rates_from_file()
            if self._client is None:
                self._client = httpx.AsyncClient(timeout=self._timeout)
                logger.info("🔧 CurrencyService ініціалізовано з курсами: %s", self._rates)

    async def close(self) -> None:
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()
            logger.info("🔌 HTTP-клієнт сервісу валют закрито.")

    def get_all_rates(self) -> Dict[str, Decimal]:
        return self._rates.copy()

    @property
    def last_update_ts(self) -> float:
        return self._last_update_ts

    def is_cache_fresh(self) -> bool:
        return (self._clock() - self._last_update_ts) < max(0.0, float(self._ttl))

    async def update_rates_if_needed(self) -> None:
        """🔄 Оновлює курси тільки якщо минув TTL."""
        if not self._rates:
            await self.initialize()
        if self.is_cache_fresh():
            logger.debug("⏱️ Курси свіжі (TTL). Оновлення пропущено.")
            return
        await self.update_rates()

    async def update_rates(self) -> bool:
        """
        🔄 Примусово тягне курси з API.

        Returns:
            True — якщо курси оновлено з API; False — залишились попередні/резервні.
        """
        if not self._rates:
            await self.initialize()
        api_rates = await self._fetch_api_rates()

        async with self._lock:
            # ⏱️ Навіть невдала спроба зсуває TTL, щоб не бомбити API на кожен рендер
            self._last_update_ts = self._clock()
            if api_rates is None:
                logger.warning("⚠️ Не вдалося отримати курси від API, залишаються попередні значення.")
                return False
            self._rates.update(api_rates)
            self._rates[BASE_CURRENCY] = Decimal("1").quantize(self._RATE_QUANTUM)
            await self._save_rates_to_file()
            logger.info("🕒 Курси оновлено (%d валют).", len(api_rates))
            return True

    def rate_for(self, currency: str) -> Optional[Decimal]:
        code = (currency or "").upper().strip()
        if code == BASE_CURRENCY:
            return Decimal("1")
        rate = self._rates.get(code)
        if rate is None:
            rate = self._fallback_rates().get(code)
        return rate

    async def convert(self, amount: Union[Decimal, int, float, str], to_currency: str) -> Decimal:
        """
        💱 USD → `to_currency`. Невідома валюта → сума без змін (з попередженням у лог).
        """
        value = self._to_decimal(amount)
        code = (to_currency or BASE_CURRENCY).upper().strip()
        if code == BASE_CURRENCY:
            return value
        try:
            await self.update_rates_if_needed()
        except (OSError, httpx.HTTPError) as exc:
            logger.warning("⚠️ Оновлення курсів впало (%s), використовую наявні.", exc)
        rate = self.rate_for(code)
        if rate is None or rate <= 0:
            logger.warning("⚠️ Немає курсу для %s — показую суму в %s.", code, BASE_CURRENCY)
            return value
        return value * rate

    async def set_rate_manually(self, currency: str, rate: Union[Decimal, float, int, str]) -> None:
        """✍️ Ручне встановлення курсу (за 1 USD)."""
        safe_rate = self._to_decimal(rate)
        if safe_rate <= 0:
            raise ValueError("Невалідний курс (повинен бути > 0).")
        code = (currency or "").upper().strip()
        if not code:
            raise ValueError("Порожній код валюти.")
        async with self._lock:
            self._rates[code] = self._quantize_rate(safe_rate)
            await self._save_rates_to_file()
            logger.info("✍️ Курс для %s встановлено вручну: %s", code, self._rates[code])

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _fetch_api_rates(self) -> Optional[Dict[str, Decimal]]:
        if self._client is None:
            raise RuntimeError("HTTP-клієнт не ініціалізовано (initialize() не викликано).")

        for attempt in range(self._retries):
            try:
                response = await self._client.get(self._api_url)
                response.raise_for_status()
                return self._parse_payload(response.json())
            except (httpx.HTTPError, ValueError) as exc:
                logger.error("❌ Спроба %s/%s: помилка API валют — %s", attempt + 1, self._retries, exc)
                if attempt < self._retries - 1:
                    await asyncio.sleep(max(0.0, float(self._retry_delay)))
        return None

    def _parse_payload(self, payload: Any) -> Dict[str, Decimal]:
        """Очікує `{"success": true, "rates": {"EUR": 0.85, ...}}`."""
        if not isinstance(payload, dict) or not payload.get("success") or not isinstance(payload.get("rates"), dict):
            raise ValueError("Invalid exchange rate response")
        parsed: Dict[str, Decimal] = {}
        for code, raw in payload["rates"].items():
            try:
                rate = self._quantize_rate(self._to_decimal(raw))
            except (ValueError, InvalidOperation):
                logger.debug("🔍 Пропускаю некоректний курс %s=%r", code, raw)
                continue
            if rate > 0:
                parsed[str(code).upper()] = rate
        if not parsed:
            raise ValueError("Exchange rate response has no usable rates")
        return parsed

    def _fallback_rates(self) -> Dict[str, Decimal]:
        return {str(k).upper(): self._quantize_rate(self._to_decimal(v)) for k, v in self._fallback_raw.items()}

    async def _load_rates_from_file(self) -> Dict[str, Decimal]:
        rates: Dict[str, Decimal]
        try:
            if not self._cache_file:
                raise FileNotFoundError("cache file is not configured")
            async with aiofiles.open(self._cache_file, "r", encoding="utf-8") as f:
                content = await f.read()
            parsed = json.loads(content)
            if not isinstance(parsed, dict):
                raise ValueError("Очікувався об'єкт (dict) у кеш-файлі курсів.")
            rates = {k.upper(): self._quantize_rate(self._to_decimal(v)) for k, v in parsed.items()}
            # 🕒 Кеш з диску вважаємо свіжим на момент старту
            self._last_update_ts = self._clock()
            logger.info("📖 Завантажено кешовані курси: %s", rates)
        except (OSError, json.JSONDecodeError, ValueError, InvalidOperation) as e:
            logger.warning("⚠️ Не вдалося прочитати файл курсів (%s). Використовуються резервні значення.", e)
            rates = self._fallback_rates()

        if rates.get(BASE_CURRENCY, Decimal("0")) <= 0:
            rates[BASE_CURRENCY] = Decimal("1").quantize(self._RATE_QUANTUM)
        return rates

    async def _save_rates_to_file(self) -> None:
        if not self._cache_file:
            return
        payload = json.dumps({k: str(v) for k, v in self._rates.items()}, indent=2, ensure_ascii=False)
        try:
            async with aiofiles.open(self._cache_file, "w", encoding="utf-8") as f:
                await f.write(payload)
            logger.debug("💾 Кеш курсів збережено (%d валют).", len(self._rates))
        except OSError as e:
            logger.error("❌ Помилка під час збереження курсів: %s", e)

    # ================================
    # 🧰 ДОПОМІЖНІ
    # ================================
    @staticmethod
    def _to_decimal(value: Union[Decimal, float, int, str]) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, (int, float)):
            return Decimal(str(value))
        if isinstance(value, str):
            return Decimal(value.strip().replace(",", "."))
        raise ValueError(f"Непідтримуваний тип числа: {type(value).__name__}")

    def _quantize_rate(self, value: Decimal) -> Decimal:
        return value.quantize(self._RATE_QUANTUM, rounding=self._ROUNDING)


__all__ = ["BASE_CURRENCY", "CurrencyService", "DEFAULT_FALLBACK_RATES"]
