# 🏗️ teleshop/infrastructure/__init__.py
"""
🏗️ Реалізації колабораторів: сховище, валюти, локалізація, транспорт Telegram.
"""
