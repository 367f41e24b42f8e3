# 🧰 teleshop/shared/__init__.py
"""
🧰 Спільні модулі: логування, метрики, базова ієрархія помилок.
"""
