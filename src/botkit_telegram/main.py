"""FastAPI 應用程式入口"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .api import telegram_router
from .config import settings
from .services.bot.adapter import BotLogic
from .services.errors import ServiceError


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """將 ServiceError 轉為 JSON 錯誤回應"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """應用程式生命週期管理"""
    # 啟動時
    if settings.telegram_setup_webhook_on_startup:
        await telegram_router.setup_telegram_webhook()
    yield
    # 關閉時
    await telegram_router.close_telegram_adapter()


def create_app(logic: BotLogic | None = None) -> FastAPI:
    """建立 FastAPI 應用程式

    Args:
        logic: 處理每個 turn 的 Bot 邏輯
    """
    if logic is not None:
        telegram_router.register_bot_logic(logic)

    app = FastAPI(
        title="Botkit Telegram Adapter",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_exception_handler(ServiceError, service_error_handler)

    # 路徑需與 TELEGRAM_WEBHOOK_PATH 一致
    app.include_router(telegram_router.router, prefix="/api/bot/telegram")

    @app.get("/api/health")
    async def health():
        """API 健康檢查"""
        return {"status": "healthy"}

    return app


app = create_app()
