"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在服务层或 UI 层做统一捕获与用户提示。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "NETWORK_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 function、session_id 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(BusinessError):
    """Edge Function 返回非 2xx 或无法解析的响应时抛出。"""


class ConfigurationError(BusinessError):
    """远程模式所需配置缺失。"""


class ValidationError(BusinessError):
    """参数校验失败。"""


class StorageError(BusinessError):
    """本地键值存储读写失败。"""


class ConversationBusyError(BusinessError):
    """会话仍在等待回复时执行了不允许的操作（如重置）。"""
