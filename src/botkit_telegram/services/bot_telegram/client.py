"""Telegram Bot API 客戶端

以 python-telegram-bot 的 Bot 物件呼叫 Telegram Bot API。
API 主機可設定，bot 與 file 兩個命名空間共用同一個主機：
- https://{host}/bot{token}/{method}
- https://{host}/file/bot{token}/{file_path}
"""

import logging

from telegram import Bot
from telegram.request import HTTPXRequest

from ...config import DEFAULT_TELEGRAM_API_HOST

logger = logging.getLogger("bot_telegram.client")


def build_api_urls(api_host: str | None = None) -> tuple[str, str]:
    """組出 bot 與 file 命名空間的 base URL

    Args:
        api_host: API 主機，可含 scheme（如 http://localhost:8081），不含則使用 https

    Returns:
        (base_url, base_file_url)
    """
    host = (api_host or DEFAULT_TELEGRAM_API_HOST).rstrip("/")
    if "://" not in host:
        host = f"https://{host}"
    return f"{host}/bot", f"{host}/file/bot"


def create_bot(token: str, api_host: str | None = None) -> Bot:
    """建立 Telegram Bot 客戶端"""
    base_url, base_file_url = build_api_urls(api_host)
    logger.debug(f"建立 Telegram Bot 客戶端: {base_url}")
    # 不設 read/write timeout，逾時交給呼叫端的 HTTP 層處理
    return Bot(
        token=token,
        base_url=base_url,
        base_file_url=base_file_url,
        request=HTTPXRequest(read_timeout=None, write_timeout=None),
    )
