# ⚙️ teleshop/config/setup/__init__.py
"""
⚙️ Пакет для налаштування та 'збірки' всіх компонентів бота перед запуском.

Надає доступ до констант, контейнера залежностей та реєстратора обробників.
"""

from .constants import CONST, AppConstants

__all__ = ["AppConstants", "BotRegistrar", "CONST", "Container"]


def __getattr__(name: str):
    if name == "Container":
        from .container import Container  # локальний імпорт → немає циклу

        return Container
    if name == "BotRegistrar":
        from .bot_registrar import BotRegistrar

        return BotRegistrar
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
