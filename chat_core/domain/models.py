"""统一的对话数据模型。

本模块定义在不同 Provider 之间共享的标准数据结构：

- Turn: 一条对话消息（system/user/assistant）。
- ProviderConfig: 创建 Provider 实例时一次性解析好的配置，之后不可变。

所有 Provider 适配器只依赖这些模型，并负责在各自的 API JSON 与这些模型之间做转换。
"""

from dataclasses import dataclass
from typing import Literal, Optional


# 消息角色（Gemini 线上格式中的 "model" 即这里的 "assistant"）
Role = Literal["system", "user", "assistant"]

ProviderId = Literal["google", "google-rest", "openai", "deepseek", "echobot"]


@dataclass(frozen=True)
class Turn:
    """对话中的一轮消息，追加后不可修改。"""

    role: Role
    content: str


@dataclass(frozen=True)
class ProviderConfig:
    """单个 Provider 实例的配置。

    - provider_id: Provider 标识，如 "openai"。
    - model_id: 厂商模型 ID，如 "gpt-4o-mini"。
    - credential: API Key；echobot 为空。
    - proxy_template: 可选代理 URL 模板，包含 "{provider}" 占位符。
    """

    provider_id: ProviderId
    model_id: str
    credential: Optional[str] = None
    proxy_template: Optional[str] = None

    def __repr__(self) -> str:
        # 避免在日志或 traceback 中泄露密钥
        masked = "***" if self.credential else None
        return (
            f"ProviderConfig(provider_id={self.provider_id!r}, model_id={self.model_id!r}, "
            f"credential={masked!r}, proxy_template={self.proxy_template!r})"
        )
