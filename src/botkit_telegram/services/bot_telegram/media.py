"""Telegram Bot 媒體處理

下載 Telegram 圖片：先以 getFile 取得檔案資訊，
再從 file 命名空間下載原始位元組。
"""

import logging

import httpx
from telegram import Bot
from telegram.error import TelegramError

from ..errors import ExternalServiceError, ValidationError

logger = logging.getLogger("bot_telegram.media")


def _relative_file_path(bot: Bot, file_path: str | None) -> str | None:
    """去掉 file 命名空間前綴（含 token），只保留 Telegram 的相對路徑"""
    if not file_path:
        return file_path
    prefix = getattr(bot, "base_file_url", "")
    if prefix and file_path.startswith(prefix):
        return file_path[len(prefix):].lstrip("/")
    return file_path


async def download_highest_resolution_photo(bot: Bot, photos: list[dict]) -> dict:
    """下載最高解析度的圖片

    Telegram 的 photo 陣列依尺寸由小到大排列，只取最後一張。

    Args:
        bot: Telegram Bot 物件
        photos: message.photo（PhotoSize 陣列）

    Returns:
        getFile 的檔案資訊加上 data（bytes）

    Raises:
        ValidationError: photo 陣列為空或缺少 file_id
        ExternalServiceError: getFile 或下載失敗
    """
    if not photos:
        raise ValidationError("photo 陣列為空")

    photo = photos[-1]
    file_id = photo.get("file_id") if isinstance(photo, dict) else None
    if not file_id:
        raise ValidationError("photo 缺少 file_id")

    try:
        file = await bot.get_file(file_id)
        content = await file.download_as_bytearray()
    except (TelegramError, httpx.HTTPError) as e:
        logger.error(f"下載 Telegram 圖片失敗 (file_id={file_id}): {e}")
        raise ExternalServiceError("Telegram getFile", str(e)) from e

    logger.debug(f"已下載 Telegram 圖片: file_id={file_id}, size={len(content)}")
    return {
        "file_id": file.file_id,
        "file_unique_id": file.file_unique_id,
        "file_size": file.file_size,
        "file_path": _relative_file_path(bot, file.file_path),
        "data": bytes(content),
    }
