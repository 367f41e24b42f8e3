# 🗄️ teleshop/infrastructure/storage/__init__.py
"""
🗄️ Реалізації сховища магазину.
"""

from .json_shop_storage import JsonShopStorage, parse_catalog

__all__ = ["JsonShopStorage", "parse_catalog"]
