"""Telegram Bot API 路由

包含：
- Webhook 端點（接收 Telegram Update）
- 啟動時自動設定 Webhook URL
"""

import logging

from fastapi import APIRouter, Request, Response

from ..config import settings
from ..services.bot.adapter import BotLogic, TurnContext
from ..services.bot_telegram.adapter import TelegramAdapter
from ..services.bot_telegram.dispatcher import DispatchStatus

logger = logging.getLogger("telegram_router")

router = APIRouter(tags=["Bot-Telegram"])

# 延遲初始化 adapter（需要 token）
_adapter: TelegramAdapter | None = None
_bot_logic: BotLogic | None = None


def _get_adapter() -> TelegramAdapter | None:
    """取得或建立 TelegramAdapter，token 未設定時回傳 None"""
    global _adapter
    if _adapter is None:
        if not settings.telegram_bot_token:
            return None
        _adapter = TelegramAdapter(token=settings.telegram_bot_token)
    return _adapter


def register_bot_logic(logic: BotLogic) -> None:
    """註冊處理每個 turn 的 Bot 邏輯"""
    global _bot_logic
    _bot_logic = logic


async def _default_logic(context: TurnContext) -> None:
    logger.debug(f"未註冊 Bot 邏輯，略過 Activity: type={context.activity.type}")


@router.post("/webhook")
async def telegram_webhook(request: Request) -> Response:
    """Telegram Webhook 端點

    同步執行 Bot 邏輯（邏輯中的回覆屬於同一次交換），
    處理結果不影響回應：一律回 200，避免 Telegram 重送。
    """
    adapter = _get_adapter()
    if adapter is None:
        logger.error("Telegram Bot Token 未設定，已忽略 webhook Update")
        return Response(status_code=200)

    try:
        body = await request.json()
    except ValueError as e:
        logger.warning(f"解析 Telegram Update 失敗: {e}")
        return Response(status_code=200)

    result = await adapter.process_activity(body, _bot_logic or _default_logic)
    if result.status == DispatchStatus.FAILED:
        logger.warning(f"Telegram Update 處理失敗，已回覆 200: {result.error}")

    return Response(status_code=200)


async def setup_telegram_webhook() -> None:
    """設定 Telegram Webhook URL

    在應用程式啟動時呼叫，向 Telegram 註冊 webhook。
    """
    if not settings.telegram_bot_token:
        logger.info("Telegram Bot Token 未設定，跳過 webhook 設定")
        return
    if not settings.telegram_webhook_url_host_name:
        logger.info("Telegram webhook host 未設定，跳過 webhook 設定")
        return

    adapter = _get_adapter()
    try:
        url = await adapter.init(settings.telegram_webhook_path)
        logger.info(f"Telegram Webhook 已設定: {url}")
    except Exception as e:
        logger.error(f"設定 Telegram Webhook 時發生錯誤: {e}")


async def close_telegram_adapter() -> None:
    """關閉 adapter，應在應用程式關閉時呼叫"""
    global _adapter
    if _adapter is not None:
        try:
            await _adapter.close()
        except Exception as e:
            logger.warning(f"關閉 Telegram adapter 失敗: {e}")
        _adapter = None
