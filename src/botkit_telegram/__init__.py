"""Telegram Bot webhook 與 Activity 的轉換層"""

__version__ = "0.1.0"
