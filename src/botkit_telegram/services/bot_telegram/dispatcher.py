"""Telegram Webhook 事件分派

解碼 Update → 轉換為 Activity → 建立 TurnContext → 執行 middleware 與 Bot 邏輯。

任何錯誤都轉為 DispatchResult 回傳，不向外拋出；
webhook 端點無論結果如何都回 200，避免 Telegram 重送已處理的 Update。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..bot.activity import Activity
from ..bot.adapter import BotLogic, TurnContext
from .translator import update_to_activity
from .updates import UnrecognizedUpdate, decode_update

if TYPE_CHECKING:
    from .adapter import TelegramAdapter

logger = logging.getLogger("bot_telegram.dispatcher")


class DispatchStatus(str, Enum):
    """分派結果"""
    HANDLED = "handled"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    activity: Activity | None = None
    error: Exception | None = field(default=None, compare=False)


class WebhookDispatcher:
    """將單一 webhook Update 送進 Bot 邏輯"""

    def __init__(self, adapter: TelegramAdapter):
        self.adapter = adapter

    async def dispatch(self, body: Any, logic: BotLogic | None) -> DispatchResult:
        """處理一次 webhook 呼叫的 Update"""
        logger.debug(f"IN FROM TELEGRAM > {body}")

        update = decode_update(body)
        if isinstance(update, UnrecognizedUpdate):
            update_id = body.get("update_id") if isinstance(body, dict) else None
            logger.debug(f"跳過不支援的 Update: {update_id}")
            return DispatchResult(DispatchStatus.IGNORED)

        try:
            activity = await update_to_activity(update, self.adapter.get_api())
        except Exception as e:
            logger.error(f"轉換 Telegram Update 失敗: {e}", exc_info=True)
            return DispatchResult(DispatchStatus.FAILED, error=e)

        context = TurnContext(self.adapter, activity)
        try:
            await self.adapter.run_middleware(context, logic)
        except Exception as e:
            # Bot 邏輯錯誤只記錄，不影響 webhook 回應
            logger.error(f"執行 Bot 邏輯失敗: {e}", exc_info=True)
            return DispatchResult(DispatchStatus.FAILED, activity=context.activity, error=e)

        return DispatchResult(DispatchStatus.HANDLED, activity=context.activity)
