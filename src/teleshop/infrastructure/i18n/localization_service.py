# 🌍 teleshop/infrastructure/i18n/localization_service.py
"""
🌍 LocalizationService — YAML-каталоги повідомлень і форматування цін.

🔹 Каталоги лежать у пакеті `teleshop.infrastructure.i18n.locales` (`<lang>.yml`, плоскі ключі).
🔹 `translate`: мова користувача → мова за замовчуванням → сам ключ; `{param}` підставляються як є.
🔹 `format_price`: сума в USD → валюта користувача (курс із `CurrencyService`), символ і кількість знаків.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import yaml                                                             # 📄 Каталоги повідомлень

# 🔠 Системні імпорти
import logging
from decimal import Decimal, ROUND_HALF_UP
from importlib import resources as pkg_resources
from typing import Any, Dict, Iterable, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from teleshop.config.setup.constants import CONST
from teleshop.domain.shop.interfaces import ILocalizer, IShopRepository
from teleshop.infrastructure.currency import CurrencyService
from teleshop.shared.errors import StorageError
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.i18n")

LOCALES_PACKAGE = "teleshop.infrastructure.i18n.locales"


def render_template(template: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Підставляє `{name}`; невідомі плейсхолдери лишаються як є."""
    if not params:
        return template
    message = template
    for name, value in params.items():
        message = message.replace("{" + str(name) + "}", str(value))
    return message


class LocalizationService(ILocalizer):
    """🌍 Переклад рядків і цін з урахуванням налаштувань користувача."""

    def __init__(
        self,
        repository: IShopRepository,
        currency: Optional[CurrencyService] = None,
        *,
        default_language: str = "en",
        catalogs: Optional[Mapping[str, Mapping[str, str]]] = None,
        locales_package: str = LOCALES_PACKAGE,
    ) -> None:
        self._repository = repository
        self._currency = currency
        self._default_language = default_language
        self._locales_package = locales_package
        self._catalogs: Dict[str, Dict[str, str]] = {
            lang: dict(messages) for lang, messages in (catalogs or {}).items()
        }

    # ================================
    # 🔑 ILocalizer
    # ================================
    async def get_user_language(self, user_id: str) -> str:
        try:
            preferences = await self._repository.get_preferences(user_id)
        except StorageError as exc:
            logger.warning("🌍 Мова користувача %s недоступна (%s), беру %s", user_id, exc, self._default_language)
            return self._default_language
        return preferences.language or self._default_language

    async def translate(self, user_id: str, key: str, params: Optional[Mapping[str, Any]] = None) -> str:
        language = await self.get_user_language(user_id)
        return self.translate_for(language, key, params)

    async def format_price(self, user_id: str, amount: Decimal) -> str:
        try:
            preferences = await self._repository.get_preferences(user_id)
            code = (preferences.currency or CONST.LOGIC.BASE_CURRENCY).upper()
        except StorageError as exc:
            logger.warning("💱 Валюта користувача %s недоступна (%s)", user_id, exc)
            code = CONST.LOGIC.BASE_CURRENCY

        value = Decimal(amount)
        if self._currency is not None and code != CONST.LOGIC.BASE_CURRENCY:
            value = await self._currency.convert(value, code)
        return self.format_amount(value, code)

    # ================================
    # 🧰 СИНХРОННІ ХЕЛПЕРИ
    # ================================
    def translate_for(self, language: str, key: str, params: Optional[Mapping[str, Any]] = None) -> str:
        for candidate in (language, self._default_language):
            template = self.catalog(candidate).get(key)
            if template is not None:
                return render_template(template, params)
        logger.debug("🌍 Немає перекладу для ключа '%s' (%s)", key, language)
        return key

    @staticmethod
    def format_amount(value: Decimal, currency: str) -> str:
        code = currency.upper()
        places = 0 if code in CONST.LOGIC.ZERO_DECIMAL_CURRENCIES else 2
        quantum = Decimal(1).scaleb(-places)
        rounded = value.quantize(quantum, rounding=ROUND_HALF_UP)
        symbol = CONST.LOGIC.CURRENCY_SYMBOLS.get(code)
        if symbol is None:
            return f"{rounded:.{places}f} {code}"
        return f"{symbol}{rounded:.{places}f}"

    def catalog(self, language: str) -> Dict[str, str]:
        if language not in self._catalogs:
            self._catalogs[language] = self._load_catalog(language)
        return self._catalogs[language]

    def available_languages(self) -> Iterable[str]:
        return tuple(code for code in CONST.LOGIC.LANGUAGES if self.catalog(code))

    def _load_catalog(self, language: str) -> Dict[str, str]:
        try:
            with pkg_resources.files(self._locales_package).joinpath(f"{language}.yml").open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except (OSError, ModuleNotFoundError, yaml.YAMLError) as exc:
            logger.debug("🐛 Неможливо завантажити каталог %s: %s", language, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("⚠️ Каталог %s має бути словником, а не %s", language, type(data).__name__)
            return {}
        logger.debug("📖 Каталог %s завантажено (%d ключів)", language, len(data))
        return {str(k): str(v) for k, v in data.items()}


__all__ = ["LOCALES_PACKAGE", "LocalizationService", "render_template"]
