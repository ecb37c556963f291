"""统一业务异常模型。

所有跨模块抛出的业务级错误都继承自 BusinessError，
便于在 CLI / 会话服务层做统一捕获与用户提示。

错误分为三类：
- ConfigurationError: 凭据缺失、未知 Provider、代理模板非法，在发起任何网络请求前抛出。
- TransportError: 非 2xx 响应或网络失败，中止当前流。
- FrameParseError: 单个流式帧解析失败，由解码器就地记录并跳过，不会向上传播。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_API_KEY"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider、setting 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ValidationError(BusinessError):
    """调用方输入校验失败（例如空消息）。"""


class ConfigurationError(BusinessError):
    """配置错误，用户可在设置中修正。"""


class MissingCredentialError(ConfigurationError):
    """Provider 所需的 API Key 不存在。"""

    def __init__(self, provider: str, setting: str, message: str):
        super().__init__(code="MISSING_API_KEY", message=message, provider=provider, setting=setting)
        self.provider = provider
        self.setting = setting


class UnknownProviderError(ConfigurationError):
    """Provider 标识不在注册表中。"""

    def __init__(self, provider: str):
        super().__init__(code="UNKNOWN_PROVIDER", message=f"Unknown provider: {provider}", provider=provider)
        self.provider = provider


class InvalidProxyTemplateError(ConfigurationError):
    """代理 URL 模板缺少占位符或替换后不是合法 URL。"""

    def __init__(self, template: str, reason: str):
        super().__init__(
            code="INVALID_PROXY_TEMPLATE",
            message=f"Invalid proxy URL pattern {template!r}: {reason}",
            template=template,
        )
        self.template = template


class TransportError(BusinessError):
    """请求未能完成：HTTP 状态非 2xx 或网络层失败。"""


class NetworkError(TransportError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(TransportError):
    """第三方 API 返回非 2xx 状态时抛出。"""


class RateLimitError(ApiError):
    """Provider 限流错误（HTTP 429）。本层不做重试。"""


class FrameParseError(BusinessError):
    """单个流式帧无法解析。"""

    def __init__(self, frame: str, message: str = "Failed to parse stream frame"):
        super().__init__(code="FRAME_PARSE_ERROR", message=message, frame=frame)
        self.frame = frame
