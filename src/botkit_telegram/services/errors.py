"""統一錯誤層級

所有服務層錯誤的基底類別。
Telegram API 呼叫失敗、設定缺漏、輸入驗證失敗都以此層級表達，
由呼叫端決定記錄後繼續或中止。
"""


class ServiceError(Exception):
    """服務層基底錯誤

    Attributes:
        message: 人類可讀的錯誤訊息
        code: 機器可讀的錯誤代碼（如 EXTERNAL_ERROR、CONFIGURATION_ERROR）
        status_code: HTTP 狀態碼（用於 API 層回應）
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(ServiceError):
    """驗證錯誤"""

    def __init__(self, message: str):
        super().__init__(message, "VALIDATION_ERROR", 422)


class ConfigurationError(ServiceError):
    """設定缺漏（如 token、webhook host 未設定）"""

    def __init__(self, setting: str):
        super().__init__(f"設定 {setting} 未提供", "CONFIGURATION_ERROR", 503)
        self.setting = setting


class ExternalServiceError(ServiceError):
    """外部服務錯誤"""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}", "EXTERNAL_ERROR", 502)
        self.service = service
