# 🌍 teleshop/infrastructure/i18n/locales/__init__.py
