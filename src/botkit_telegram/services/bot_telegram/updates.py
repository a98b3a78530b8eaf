"""Telegram Webhook Update 解碼

在邊界將原始 JSON 明確解碼為三種型別之一：
- MessageUpdate: 含 message（且有 message_id）
- CallbackQueryUpdate: 含 callback_query（inline keyboard 按鈕）
- UnrecognizedUpdate: 其他（不處理，但仍回 200）

每次 webhook 呼叫只會帶一個 Update。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class MessageUpdate:
    """一般訊息（文字或圖片）"""
    message: dict
    raw: dict


@dataclass(frozen=True)
class CallbackQueryUpdate:
    """按鈕回呼"""
    callback_query: dict
    raw: dict

    @property
    def quoted_message(self) -> dict:
        """按鈕所屬的原始訊息"""
        return self.callback_query.get("message") or {}


@dataclass(frozen=True)
class UnrecognizedUpdate:
    """不支援的 Update 形狀"""
    raw: Any


WebhookUpdate = Union[MessageUpdate, CallbackQueryUpdate, UnrecognizedUpdate]


def decode_update(body: Any) -> WebhookUpdate:
    """將 webhook body 解碼為 WebhookUpdate"""
    if not isinstance(body, dict):
        return UnrecognizedUpdate(raw=body)

    message = body.get("message")
    if isinstance(message, dict) and message.get("message_id"):
        return MessageUpdate(message=message, raw=body)

    callback_query = body.get("callback_query")
    if isinstance(callback_query, dict):
        return CallbackQueryUpdate(callback_query=callback_query, raw=body)

    return UnrecognizedUpdate(raw=body)
