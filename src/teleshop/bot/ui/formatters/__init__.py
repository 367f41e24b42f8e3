# 🎨 teleshop/bot/ui/formatters/__init__.py
