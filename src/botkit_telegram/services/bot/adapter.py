"""Bot Adapter 基底與回合（turn）處理管線

定義平台 Adapter 的標準介面，以及每次 turn 的執行情境：
- TurnContext: 單次 turn 的情境，攜帶目前的 Activity，可回覆訊息
- Middleware: 在 Bot 邏輯執行前處理 TurnContext 的 Protocol
- MiddlewareSet: 依序執行多個 middleware
- BotAdapter: 平台 Adapter 基底類別（middleware 管線 + 抽象的發送方法）
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable

from .activity import (
    Activity,
    ActivityTypes,
    ConversationReference,
    ResourceResponse,
    apply_conversation_reference,
    get_conversation_reference,
)

BotLogic = Callable[["TurnContext"], Awaitable[None]]
NextHandler = Callable[[], Awaitable[None]]


class TurnContext:
    """單次 turn 的執行情境

    用法：
        async def logic(context: TurnContext) -> None:
            await context.send_activity(f"你說了：{context.activity.text}")
    """

    def __init__(self, adapter: BotAdapter, activity: Activity):
        self.adapter = adapter
        self.activity = activity
        self.responded = False

    async def send_activity(self, activity_or_text: Activity | str) -> ResourceResponse | None:
        """回覆單則訊息"""
        responses = await self.send_activities([activity_or_text])
        return responses[0] if responses else None

    async def send_activities(
        self,
        activities: list[Activity | str],
    ) -> list[ResourceResponse]:
        """回覆多則訊息，自動套用目前對話的參照"""
        reference = get_conversation_reference(self.activity)
        outgoing = []
        for item in activities:
            if isinstance(item, str):
                item = Activity(type=ActivityTypes.MESSAGE, text=item)
            outgoing.append(apply_conversation_reference(item, reference))

        responses = await self.adapter.send_activities(self, outgoing)
        if responses:
            self.responded = True
        return responses

    async def update_activity(self, activity: Activity) -> None:
        """更新已發送的訊息"""
        await self.adapter.update_activity(self, activity)

    async def delete_activity(self, reference: ConversationReference) -> None:
        """刪除已發送的訊息"""
        await self.adapter.delete_activity(self, reference)


@runtime_checkable
class Middleware(Protocol):
    """Bot 邏輯執行前的處理步驟"""

    async def on_turn(self, context: TurnContext, next_handler: NextHandler) -> None:
        """處理 turn，完成後必須呼叫 next_handler() 以繼續管線"""
        ...


class MiddlewareSet:
    """依序執行的 middleware 集合"""

    def __init__(self) -> None:
        self._middleware: list[Middleware] = []

    def use(self, *middleware: Middleware) -> MiddlewareSet:
        self._middleware.extend(middleware)
        return self

    async def on_turn(self, context: TurnContext, next_handler: NextHandler) -> None:
        await self.receive_activity_with_status(context, lambda ctx: next_handler())

    async def receive_activity_with_status(
        self,
        context: TurnContext,
        logic: BotLogic | None,
    ) -> None:
        """執行全部 middleware，最後執行 Bot 邏輯"""

        async def run(index: int) -> None:
            if index < len(self._middleware):
                await self._middleware[index].on_turn(context, lambda: run(index + 1))
            elif logic is not None:
                await logic(context)

        await run(0)


class BotAdapter:
    """平台 Adapter 基底類別

    子類別必須實作 send_activities / update_activity / delete_activity /
    continue_conversation。
    """

    def __init__(self) -> None:
        self.middleware = MiddlewareSet()
        # turn 發生錯誤時的處理函式；未設定則直接拋出
        self.on_turn_error: Callable[[TurnContext, Exception], Awaitable[None]] | None = None

    def use(self, *middleware: Middleware) -> BotAdapter:
        """註冊 middleware"""
        self.middleware.use(*middleware)
        return self

    async def run_middleware(self, context: TurnContext, logic: BotLogic | None) -> None:
        """執行 middleware 管線與 Bot 邏輯"""
        try:
            await self.middleware.receive_activity_with_status(context, logic)
        except Exception as e:
            if self.on_turn_error is None:
                raise
            await self.on_turn_error(context, e)

    async def send_activities(
        self,
        context: TurnContext,
        activities: list[Activity],
    ) -> list[ResourceResponse]:
        raise NotImplementedError

    async def update_activity(self, context: TurnContext, activity: Activity) -> None:
        raise NotImplementedError

    async def delete_activity(
        self,
        context: TurnContext,
        reference: ConversationReference,
    ) -> None:
        raise NotImplementedError

    async def continue_conversation(
        self,
        reference: ConversationReference,
        logic: BotLogic,
    ) -> None:
        raise NotImplementedError
