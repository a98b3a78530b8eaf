"""Telegram Bot Adapter：實作 BotAdapter

使用 python-telegram-bot 庫與 Telegram Bot API 互動，
將 webhook Update 轉為 Activity 送進 Bot 邏輯，並將出站 Activity 轉為 sendMessage。
"""

import logging
from typing import Any

from telegram import Bot, LinkPreviewOptions

from ...config import settings
from ..bot.activity import (
    Activity,
    ActivityTypes,
    ConversationReference,
    DeliveryResult,
    ResourceResponse,
    apply_conversation_reference,
)
from ..bot.adapter import BotAdapter, BotLogic, TurnContext
from ..errors import ConfigurationError, ExternalServiceError, ValidationError
from .client import create_bot
from .dispatcher import DispatchResult, WebhookDispatcher
from .middleware import TelegramEventTypeMiddleware
from .translator import activity_to_telegram

logger = logging.getLogger("bot_telegram.adapter")


class TelegramAdapter(BotAdapter):
    """Telegram Bot 的 BotAdapter 實作

    預設已註冊 TelegramEventTypeMiddleware。

    用法：
        adapter = TelegramAdapter(
            token="BOT_TOKEN",
            webhook_url_host_name="https://bot.example.com",
        )
        await adapter.init("/api/bot/telegram/webhook")
        result = await adapter.process_activity(body, logic)
    """

    name: str = "Telegram Adapter"
    platform_type: str = "telegram"

    def __init__(
        self,
        token: str | None = None,
        *,
        api_host: str | None = None,
        webhook_url_host_name: str | None = None,
        bot: Bot | None = None,
    ):
        super().__init__()
        self.token = token or settings.telegram_bot_token
        if not self.token and bot is None:
            raise ConfigurationError("TELEGRAM_BOT_TOKEN")
        self.api_host = api_host or settings.telegram_api_host
        self.webhook_url_host_name = webhook_url_host_name or settings.telegram_webhook_url_host_name
        self.bot = bot or create_bot(self.token, self.api_host)
        self.dispatcher = WebhookDispatcher(self)
        self.use(TelegramEventTypeMiddleware())

    def get_api(self, activity: Activity | None = None) -> Bot:
        """取得 Telegram API 客戶端（所有 Activity 共用同一個 token）"""
        return self.bot

    async def init(self, webhook_path: str | None = None) -> str:
        """向 Telegram 註冊 webhook

        先刪除既有 webhook 再設定新的，確保同時只有一個 webhook。

        Returns:
            註冊的 webhook URL
        """
        if not self.webhook_url_host_name:
            raise ConfigurationError("TELEGRAM_WEBHOOK_URL_HOST_NAME")

        url = f"{self.webhook_url_host_name}{webhook_path or settings.telegram_webhook_path}"
        logger.debug(f"設定 Telegram webhook: {url}")

        info = await self.bot.get_webhook_info()
        logger.debug(f"目前的 webhook: {info}")
        deleted = await self.bot.delete_webhook()
        logger.debug(f"刪除目前的 webhook: {deleted}")
        result = await self.bot.set_webhook(url=url)
        logger.debug(f"設定新的 webhook: {result}")
        return url

    async def process_activity(self, body: Any, logic: BotLogic | None) -> DispatchResult:
        """處理 webhook 送來的 Update（不會拋出例外）"""
        return await self.dispatcher.dispatch(body, logic)

    async def deliver(self, activity: Activity) -> DeliveryResult:
        """發送單則 message Activity"""
        try:
            message = activity_to_telegram(activity)
        except ValidationError as e:
            return DeliveryResult(ok=False, error=e)

        kwargs: dict[str, Any] = {
            "chat_id": message["chat_id"],
            "text": message.get("text"),
            "link_preview_options": LinkPreviewOptions(
                is_disabled=message["disable_web_page_preview"],
            ),
        }
        if "parse_mode" in message:
            kwargs["parse_mode"] = message["parse_mode"]
        if "reply_markup" in message:
            kwargs["reply_markup"] = message["reply_markup"]

        try:
            msg = await self.get_api(activity).send_message(**kwargs)
        except Exception as e:
            return DeliveryResult(ok=False, error=ExternalServiceError("Telegram sendMessage", str(e)))

        logger.debug(f"RESPONSE FROM TELEGRAM > {msg}")
        return DeliveryResult(ok=True, message_id=str(msg.message_id))

    async def send_activities(
        self,
        context: TurnContext,
        activities: list[Activity],
    ) -> list[ResourceResponse]:
        """依序發送出站 Activity

        只發送 message 類型；單則失敗只記錄，不影響後續訊息。
        """
        responses = []
        for activity in activities:
            if activity.type != ActivityTypes.MESSAGE:
                logger.debug(f"略過非 message 類型的出站 Activity: {activity.type}")
                continue

            result = await self.deliver(activity)
            if not result.ok:
                logger.error(f"發送訊息到 Telegram 失敗: {result.error}")
                continue
            if result.message_id is not None:
                responses.append(ResourceResponse(id=result.message_id))
        return responses

    async def update_activity(self, context: TurnContext, activity: Activity) -> None:
        logger.warning("Telegram adapter 尚未支援 update_activity")

    async def delete_activity(
        self,
        context: TurnContext,
        reference: ConversationReference,
    ) -> None:
        logger.warning("Telegram adapter 尚未支援 delete_activity")

    async def continue_conversation(
        self,
        reference: ConversationReference,
        logic: BotLogic,
    ) -> None:
        """以保存的對話參照主動執行 Bot 邏輯（主動發送訊息用）"""
        request = apply_conversation_reference(
            Activity(type=ActivityTypes.EVENT, name="continueConversation"),
            reference,
            is_incoming=True,
        )
        context = TurnContext(self, request)
        await self.run_middleware(context, logic)

    async def close(self) -> None:
        """關閉 Telegram API 客戶端的 HTTP 連線"""
        await self.bot.shutdown()
