"""Telegram Update 與 Activity 的雙向轉換

入站：
- message_update_to_activity: message Update → Activity
- callback_query_to_activity: callback_query Update → Activity
- update_to_activity: 依 Update 型別分派，並視需要下載圖片

出站：
- activity_to_telegram: message Activity → sendMessage payload

除了圖片下載之外都是純函式，不修改傳入的 payload。
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from telegram import Bot

from ..bot.activity import (
    Activity,
    ActivityTypes,
    ChannelAccount,
    ConversationAccount,
)
from ..errors import ValidationError
from .media import download_highest_resolution_photo
from .updates import CallbackQueryUpdate, MessageUpdate, WebhookUpdate

logger = logging.getLogger("bot_telegram.translator")

CHANNEL_ID = "telegram"

# 尚未對應到 sendMessage 的 channel_data 欄位。
# 需要支援時在 activity_to_telegram 中加入對應，目前只記錄不送出。
UNMAPPED_CHANNEL_DATA_KEYS = (
    "messaging_type",
    "tag",
    "sticker_id",
    "attachment",
    "persona_id",
    "notification_type",
    "sender_action",
    "quick_replies",
)


def _get(data: Any, *path: str, default: Any = None) -> Any:
    """依路徑取巢狀 dict 的值"""
    for key in path:
        if not isinstance(data, dict):
            return default
        data = data.get(key)
    return default if data is None else data


def _account(user: dict | None, name_key: str) -> ChannelAccount | None:
    if not user or user.get("id") is None:
        return None
    return ChannelAccount(id=user["id"], name=user.get(name_key))


def _conversation(chat_id: Any, source: str) -> ConversationAccount:
    if chat_id is None:
        raise ValidationError(f"{source} 缺少 chat.id")
    return ConversationAccount(id=chat_id)


def message_update_to_activity(
    update: MessageUpdate,
    photo: dict | None = None,
) -> Activity:
    """message Update → Activity

    Args:
        update: 已解碼的 message Update
        photo: 已下載的圖片（檔案資訊 + data），有圖片時由呼叫端提供
    """
    message = update.message
    sender = message.get("from")
    if not sender:
        # 頻道發文沒有 from
        logger.warning(f"訊息缺少發送者（頻道訊息）: message_id={message.get('message_id')}")

    channel_data = dict(message)
    if photo is not None:
        channel_data["photo"] = photo

    text = message.get("text")
    has_content = text is not None or photo is not None
    return Activity(
        type=ActivityTypes.MESSAGE if has_content else ActivityTypes.EVENT,
        channel_id=CHANNEL_ID,
        timestamp=datetime.now(timezone.utc),
        conversation=_conversation(_get(message, "chat", "id"), "message"),
        from_=_account(sender, "first_name"),
        # Telegram 的 recipient 沿用發送者（username），不另外帶 Bot 身分
        recipient=_account(sender, "username"),
        text=text,
        channel_data=channel_data,
    )


def callback_query_to_activity(
    update: CallbackQueryUpdate,
    photo: dict | None = None,
) -> Activity:
    """callback_query Update → Activity

    channel_data 為整個 Update，middleware 才看得到 callback_query。
    """
    callback_query = update.callback_query
    quoted = update.quoted_message
    if not quoted.get("from"):
        logger.warning(f"callback_query 的原始訊息缺少發送者: id={callback_query.get('id')}")

    channel_data = dict(update.raw)
    if photo is not None:
        channel_data["photo"] = photo

    # 與 message Update 相同：Update 本身帶有訊息內容時視為 message
    text = _get(update.raw, "message", "text")
    has_content = text is not None or photo is not None
    return Activity(
        type=ActivityTypes.MESSAGE if has_content else ActivityTypes.EVENT,
        channel_id=CHANNEL_ID,
        timestamp=datetime.now(timezone.utc),
        conversation=_conversation(_get(quoted, "chat", "id"), "callback_query.message"),
        from_=_account(callback_query.get("from"), "first_name"),
        recipient=_account(quoted.get("from"), "first_name"),
        text=text,
        channel_data=channel_data,
    )


async def update_to_activity(update: WebhookUpdate, bot: Bot) -> Activity | None:
    """依 Update 型別轉換為 Activity

    帶有圖片時先下載最高解析度圖片；下載失敗直接拋出，不產生 Activity。

    Returns:
        Activity，不支援的 Update 回傳 None
    """
    if isinstance(update, MessageUpdate):
        photos = update.message.get("photo")
        photo = await download_highest_resolution_photo(bot, photos) if photos else None
        return message_update_to_activity(update, photo)

    if isinstance(update, CallbackQueryUpdate):
        photos = _get(update.raw, "message", "photo")
        photo = await download_highest_resolution_photo(bot, photos) if photos else None
        return callback_query_to_activity(update, photo)

    return None


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, dict, list)) and not value)


def _from_attachments(attachments: Any, key: str) -> Any:
    """從 attachments 取設定值（dict，或 dict 列表中第一個有值的）"""
    if isinstance(attachments, dict):
        return attachments.get(key)
    if isinstance(attachments, list):
        for item in attachments:
            value = item.get(key) if isinstance(item, dict) else None
            if not _is_empty(value):
                return value
    return None


def _channel_option(activity: Activity, key: str, default: Any = None) -> Any:
    """取出站設定：channel_data 優先，其次 attachments"""
    value = _get(activity.channel_data, key)
    if _is_empty(value):
        value = _from_attachments(activity.attachments, key)
    return default if _is_empty(value) else value


def _no_web_preview(activity: Activity) -> bool:
    """noWebPreview 只接受 bool，其他型別記錄警告並使用預設值 False"""
    value = _channel_option(activity, "noWebPreview", False)
    if isinstance(value, bool):
        return value
    logger.warning(f"noWebPreview 必須為 bool，已忽略: {value!r}")
    return False


def activity_to_telegram(activity: Activity) -> dict:
    """message Activity → sendMessage payload

    @see https://core.telegram.org/bots/api#sendmessage

    Raises:
        ValidationError: 非 message 類型或缺少 conversation
    """
    if activity.type != ActivityTypes.MESSAGE:
        raise ValidationError(f"只能轉換 message Activity，收到: {activity.type}")
    if activity.conversation is None:
        raise ValidationError("Activity 缺少 conversation")

    message = {
        "chat_id": activity.conversation.id,
        "text": activity.text,
        "parse_mode": _channel_option(activity, "parseMode"),
        "disable_web_page_preview": _no_web_preview(activity),
        "reply_markup": _channel_option(activity, "replyKeyboard"),
    }

    unmapped = [key for key in UNMAPPED_CHANNEL_DATA_KEYS if _get(activity.channel_data, key) is not None]
    if unmapped:
        logger.debug(f"以下 channel_data 欄位尚未支援，不會送出: {unmapped}")

    message = {key: value for key, value in message.items() if value is not None}
    logger.debug(f"OUT TO TELEGRAM > {message}")
    return message
