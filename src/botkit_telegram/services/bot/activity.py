"""Activity 與對話參照資料模型

定義平台無關的 Activity 格式，入站 webhook 與出站訊息
都以此格式在 Bot 邏輯與平台 Adapter 之間傳遞。

Activity 為不可變物件，需要修改時以 dataclasses.replace 產生新值。
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any


class ActivityTypes:
    """Activity 類型"""
    MESSAGE = "message"
    EVENT = "event"


@dataclass(frozen=True)
class ChannelAccount:
    """頻道上的帳號（用戶或 Bot）"""
    id: str | int
    name: str | None = None


@dataclass(frozen=True)
class ConversationAccount:
    """對話（Telegram 的 chat）"""
    id: str | int
    name: str | None = None


@dataclass(frozen=True)
class Activity:
    """正規化 Activity

    channel_data 保留平台原生 payload，供 middleware 判斷事件類型，
    以及出站時讀取平台特定設定（replyKeyboard、parseMode 等）。
    """
    type: str
    channel_id: str | None = None
    conversation: ConversationAccount | None = None
    from_: ChannelAccount | None = None
    recipient: ChannelAccount | None = None
    text: str | None = None
    timestamp: datetime | None = None
    channel_data: dict | None = None
    # 出站附件設定（dict 或 dict 列表）
    attachments: Any = None
    name: str | None = None
    id: str | None = None
    reply_to_id: str | None = None
    service_url: str | None = None
    locale: str | None = None


@dataclass(frozen=True)
class ConversationReference:
    """對話參照

    由入站 Activity 取得並保存，之後可用於主動發送訊息
    （continue_conversation）。
    """
    channel_id: str | None = None
    conversation: ConversationAccount | None = None
    user: ChannelAccount | None = None
    bot: ChannelAccount | None = None
    activity_id: str | None = None
    service_url: str | None = None
    locale: str | None = None


@dataclass(frozen=True)
class ResourceResponse:
    """發送成功後的遠端資源 ID（Telegram 的 message_id）"""
    id: str


@dataclass(frozen=True)
class DeliveryResult:
    """單則出站訊息的發送結果"""
    ok: bool
    message_id: str | None = None
    error: Exception | None = field(default=None, compare=False)


def get_conversation_reference(activity: Activity) -> ConversationReference:
    """從入站 Activity 取得對話參照"""
    return ConversationReference(
        channel_id=activity.channel_id,
        conversation=activity.conversation,
        user=activity.from_,
        bot=activity.recipient,
        activity_id=activity.id,
        service_url=activity.service_url,
        locale=activity.locale,
    )


def apply_conversation_reference(
    activity: Activity,
    reference: ConversationReference,
    is_incoming: bool = False,
) -> Activity:
    """將對話參照套用到 Activity，回傳新的 Activity

    Args:
        activity: 原始 Activity
        reference: 對話參照
        is_incoming: True 時視為用戶送入（from=user），否則視為 Bot 送出（from=bot）
    """
    if is_incoming:
        sender, receiver = reference.user, reference.bot
        reply_to_id = activity.reply_to_id
        activity_id = reference.activity_id
    else:
        sender, receiver = reference.bot, reference.user
        reply_to_id = reference.activity_id or activity.reply_to_id
        activity_id = activity.id

    return replace(
        activity,
        channel_id=reference.channel_id,
        conversation=reference.conversation,
        from_=sender,
        recipient=receiver,
        service_url=reference.service_url,
        locale=activity.locale or reference.locale,
        reply_to_id=reply_to_id,
        id=activity_id,
    )
