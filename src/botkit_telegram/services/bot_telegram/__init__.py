"""Telegram Bot 平台實作

將 Telegram Bot webhook 協定轉換為 Activity，並將出站 Activity 轉回 sendMessage。

子模組：
- client: 建立 Telegram Bot API 客戶端
- updates: Webhook Update 解碼
- translator: Update ↔ Activity 轉換
- media: 圖片下載
- middleware: 事件類型標記
- dispatcher: Webhook 事件分派
- adapter: TelegramAdapter（實作 BotAdapter）
"""

from .adapter import TelegramAdapter
from .middleware import TelegramEventTypeMiddleware

__all__ = ["TelegramAdapter", "TelegramEventTypeMiddleware"]
