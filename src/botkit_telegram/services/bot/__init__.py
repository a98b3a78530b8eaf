"""平台無關的 Bot 核心模組

提供 Bot 抽象層，包含：
- activity: Activity、ConversationReference 等資料模型
- adapter: BotAdapter 基底、TurnContext 與 middleware 管線
"""
