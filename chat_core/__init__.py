"""Chat Core 顶层包。

该包让同一个调用方通过统一接口与多个可互换的文本生成后端进行多轮对话，
包括配置加载、领域模型、Provider 适配、流式响应解码与会话服务。
"""

from chat_core.api.service import ChatSession
from chat_core.providers import ProviderFactory, create_chat_provider

__all__ = ["ChatSession", "ProviderFactory", "create_chat_provider"]
