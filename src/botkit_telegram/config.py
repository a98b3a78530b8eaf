"""應用程式設定

所有敏感設定從環境變數讀取，請確保 .env 檔案正確設定。
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# 載入專案根目錄的 .env（應用程式設定）
_project_root = Path(__file__).parent.parent.parent
load_dotenv(_project_root / ".env")

logger = logging.getLogger(__name__)

DEFAULT_TELEGRAM_API_HOST = "api.telegram.org"
DEFAULT_WEBHOOK_PATH = "/api/bot/telegram/webhook"


def _get_env(key: str, default: str = "", required: bool = False) -> str:
    """取得環境變數，可設定是否必要"""
    value = os.getenv(key, default)
    if required and not value:
        logger.warning(f"環境變數 {key} 未設定，相關功能可能無法正常運作")
    return value


def _get_env_bool(key: str, default: bool) -> bool:
    """取得布林環境變數"""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """應用程式設定"""

    # ===================
    # Telegram Bot 設定
    # ===================
    telegram_bot_token: str = _get_env("TELEGRAM_BOT_TOKEN", required=True)
    # API 主機（bot 與 file 兩個命名空間共用）
    telegram_api_host: str = _get_env("TELEGRAM_API_HOST", DEFAULT_TELEGRAM_API_HOST)

    # ===================
    # Webhook 設定
    # ===================
    # 對外可存取的主機位址（含 scheme），init 時必要
    telegram_webhook_url_host_name: str = _get_env("TELEGRAM_WEBHOOK_URL_HOST_NAME")
    telegram_webhook_path: str = _get_env("TELEGRAM_WEBHOOK_PATH", DEFAULT_WEBHOOK_PATH)
    telegram_setup_webhook_on_startup: bool = _get_env_bool("TELEGRAM_SETUP_WEBHOOK", True)


settings = Settings()
