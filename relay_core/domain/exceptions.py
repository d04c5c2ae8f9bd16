"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 API 层或 UI 层做统一捕获与用户提示。
"""

from typing import Optional


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "API_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、url 等）。
    """

    def __init__(self, code: Optional[str], message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """网络层错误，例如连接失败、读取中断等。"""


class ApiError(BusinessError):
    """第三方 API 返回非 200 且没有结构化错误体时抛出。"""


class ProviderError(ApiError):
    """上游返回结构化错误信封 {error: {message, type, param, code}} 时抛出。

    四个字段原样保留；code 为上游给出的错误码，可能为 None。
    """

    def __init__(
        self,
        message: str,
        type: Optional[str] = None,
        param: Optional[str] = None,
        code: Optional[str] = None,
        http_status: int = 400,
        **extra,
    ):
        super().__init__(code=code, message=message, http_status=http_status, **extra)
        self.type = type
        self.param = param


class StreamDecodeError(BusinessError):
    """流式响应中途出现无法解析的事件，或上游在 [DONE] 之前断开。"""


class ResponseParseError(BusinessError):
    """期望 JSON 的响应体为空或不是合法 JSON。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
