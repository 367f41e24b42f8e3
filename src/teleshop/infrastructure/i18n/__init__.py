# 🌍 teleshop/infrastructure/i18n/__init__.py
from .localization_service import LOCALES_PACKAGE, LocalizationService, render_template

__all__ = ["LOCALES_PACKAGE", "LocalizationService", "render_template"]
