# 🏭 teleshop/domain/__init__.py
"""
🏭 Доменний шар: сутності магазину, ціноутворення за тирами, правила чекауту.
"""
