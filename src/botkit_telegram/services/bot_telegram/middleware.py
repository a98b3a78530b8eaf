"""Telegram 事件類型 middleware

在 Bot 邏輯執行前檢查 channel_data，標記 botkitEventType，
讓上層可依事件類型分派處理函式。

目前支援的事件類型：
- telegram_callback_query

規則為 (channel_data 欄位, 事件類型) 的有序列表，可在建立 middleware 時
加入新規則（如 postback、已讀回執、帳號連結），不需修改 dispatcher 或 translator。
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable

from ..bot.activity import Activity
from ..bot.adapter import NextHandler, TurnContext

logger = logging.getLogger("bot_telegram.middleware")

EVENT_TYPE_KEY = "botkitEventType"
CALLBACK_QUERY_EVENT = "telegram_callback_query"

EventTypeRule = tuple[str, str]

DEFAULT_EVENT_TYPE_RULES: tuple[EventTypeRule, ...] = (
    ("callback_query", CALLBACK_QUERY_EVENT),
)


def classify_event_type(
    channel_data: dict,
    rules: Iterable[EventTypeRule] = DEFAULT_EVENT_TYPE_RULES,
) -> str | None:
    """依規則判斷事件類型（欄位存在且非 None 即符合），第一個符合的規則優先，都不符合回傳 None"""
    for key, event_type in rules:
        if channel_data.get(key) is not None:
            return event_type
    return None


def with_event_type(
    activity: Activity,
    rules: Iterable[EventTypeRule] = DEFAULT_EVENT_TYPE_RULES,
) -> Activity:
    """回傳標記了 botkitEventType 的新 Activity，沒有 channel_data 時原樣回傳"""
    if activity.channel_data is None:
        return activity
    event_type = classify_event_type(activity.channel_data, rules)
    channel_data = {**activity.channel_data, EVENT_TYPE_KEY: event_type}
    return replace(activity, channel_data=channel_data)


class TelegramEventTypeMiddleware:
    """標記 Telegram 事件類型的 middleware

    用法：
        adapter.use(TelegramEventTypeMiddleware(extra_rules=[("poll_answer", "telegram_poll_answer")]))
    """

    def __init__(self, extra_rules: Iterable[EventTypeRule] = ()):
        self.rules: tuple[EventTypeRule, ...] = DEFAULT_EVENT_TYPE_RULES + tuple(extra_rules)

    async def on_turn(self, context: TurnContext, next_handler: NextHandler) -> None:
        if context.activity is not None:
            context.activity = with_event_type(context.activity, self.rules)
            if context.activity.channel_data is not None:
                logger.debug(f"事件類型: {context.activity.channel_data[EVENT_TYPE_KEY]}")
        await next_handler()
