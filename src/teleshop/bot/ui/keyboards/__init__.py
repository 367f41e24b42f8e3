# ⌨️ teleshop/bot/ui/keyboards/__init__.py
