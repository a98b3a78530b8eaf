"""測試共用 fixtures

提供模擬的 Telegram Bot（python-telegram-bot 的 Bot 介面子集）與 webhook payload。
"""

from types import SimpleNamespace

import pytest
from telegram.error import NetworkError

from botkit_telegram.services.bot_telegram.adapter import TelegramAdapter


# ============================================================
# Mock 資料
# ============================================================

TEST_TOKEN = "123:abc"
TEST_CHAT_ID = 42
TEST_USER = {"id": 7, "first_name": "Alice", "username": "alice"}
TEST_BOT_USER = {"id": 99, "first_name": "CtosBot", "username": "ctos_bot", "is_bot": True}


class FakeTelegramBot:
    """模擬 telegram.Bot

    - webhook：set 會加入 active_webhooks，delete 會清空
    - sendMessage：依 send_errors 順序決定每次呼叫成功或拋出
    - getFile：failing_file_ids 中的 file_id 會拋出 NetworkError
    """

    base_file_url = f"https://api.telegram.org/file/bot{TEST_TOKEN}"

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.active_webhooks: list[str] = []
        self.sent: list[dict] = []
        self.send_errors: list[Exception | None] = []
        self.failing_file_ids: set[str] = set()
        self.closed = False
        self._next_message_id = 100

    async def get_webhook_info(self):
        self.calls.append(("getWebhookInfo",))
        url = self.active_webhooks[0] if self.active_webhooks else ""
        return SimpleNamespace(url=url)

    async def delete_webhook(self):
        self.calls.append(("deleteWebhook",))
        self.active_webhooks.clear()
        return True

    async def set_webhook(self, url: str):
        self.calls.append(("setWebhook", url))
        self.active_webhooks.append(url)
        return True

    async def send_message(
        self,
        chat_id,
        text,
        *,
        parse_mode=None,
        reply_markup=None,
        link_preview_options=None,
    ):
        # 以 Bot API 的欄位名稱記錄，方便與 activity_to_telegram 的輸出比對
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "disable_web_page_preview": (
                link_preview_options.is_disabled if link_preview_options is not None else None
            ),
            "reply_markup": reply_markup,
        }
        payload = {key: value for key, value in payload.items() if value is not None}
        self.calls.append(("sendMessage", payload))
        error = self.send_errors.pop(0) if self.send_errors else None
        if error is not None:
            raise error
        self.sent.append(payload)
        self._next_message_id += 1
        return SimpleNamespace(message_id=self._next_message_id, chat=SimpleNamespace(id=chat_id))

    async def get_file(self, file_id: str):
        self.calls.append(("getFile", file_id))
        if file_id in self.failing_file_ids:
            raise NetworkError(f"cannot fetch {file_id}")

        async def _download():
            return bytearray(f"bytes-of-{file_id}".encode())

        return SimpleNamespace(
            file_id=file_id,
            file_unique_id=f"unique-{file_id}",
            file_size=1024,
            file_path=f"{self.base_file_url}/photos/{file_id}.jpg",
            download_as_bytearray=_download,
        )

    async def shutdown(self):
        self.closed = True


@pytest.fixture
def fake_bot() -> FakeTelegramBot:
    return FakeTelegramBot()


@pytest.fixture
def adapter(fake_bot: FakeTelegramBot) -> TelegramAdapter:
    return TelegramAdapter(
        token=TEST_TOKEN,
        webhook_url_host_name="https://bot.example.com",
        bot=fake_bot,
    )


@pytest.fixture
def text_update() -> dict:
    return {
        "update_id": 1001,
        "message": {
            "message_id": 11,
            "chat": {"id": TEST_CHAT_ID, "type": "private"},
            "from": dict(TEST_USER),
            "text": "hello",
        },
    }


@pytest.fixture
def photo_update() -> dict:
    return {
        "update_id": 1002,
        "message": {
            "message_id": 12,
            "chat": {"id": TEST_CHAT_ID, "type": "private"},
            "from": dict(TEST_USER),
            "photo": [
                {"file_id": "small", "width": 90, "height": 90},
                {"file_id": "medium", "width": 320, "height": 320},
                {"file_id": "large", "width": 1280, "height": 1280},
            ],
        },
    }


@pytest.fixture
def callback_update() -> dict:
    return {
        "update_id": 1003,
        "callback_query": {
            "id": "cq-1",
            "from": dict(TEST_USER),
            "data": "option_a",
            "message": {
                "message_id": 13,
                "chat": {"id": TEST_CHAT_ID, "type": "private"},
                "from": dict(TEST_BOT_USER),
                "text": "請選擇",
            },
        },
    }
