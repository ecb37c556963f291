"""对外会话服务模块。

封装调用方一侧的生命周期：
- 第一次发送消息时按当前模型选择懒创建 Provider；
- 切换模型时丢弃旧 Provider（会话历史随之重置，不跨模型保留）；
- 空回复时替换为固定的致歉文本，且不写入历史；
- 失败时记录日志并以 error 事件返回，已输出的增量保持不变。
"""

from dataclasses import dataclass
from typing import Iterator, Literal, Optional

from chat_core.domain.exceptions import BusinessError, ValidationError
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers import ChatProvider, ProviderFactory

EMPTY_RESPONSE_MESSAGE = "I'm sorry, I couldn't generate a response. Please try again."


@dataclass
class ChatEvent:
    """ChatSession 产生的流式事件。

    kind:
        - "delta": 回复的一个文本增量。
        - "final": 本轮回复结束，text 为完整回复（空回复时为致歉文本）。
        - "error": 本轮失败，text 为可展示的错误信息，error 为原始异常。
    """

    kind: Literal["delta", "final", "error"]
    text: str
    error: Optional[BusinessError] = None


class ChatSession:
    def __init__(self, factory: ProviderFactory, model_id: str, provider: str):
        self._factory = factory
        self.model_id = model_id
        self.provider_name = provider
        self._provider: Optional[ChatProvider] = None

    @property
    def provider(self) -> Optional[ChatProvider]:
        return self._provider

    def select_model(self, model_id: str, provider: str) -> None:
        """切换模型；选择变化时丢弃当前 Provider。"""

        if (model_id, provider) == (self.model_id, self.provider_name):
            return
        self.model_id = model_id
        self.provider_name = provider
        self._provider = None
        logger.info(
            "Model switched, conversation reset",
            extra={"extra": {"provider": provider, "model": model_id}},
        )

    def stream_reply(self, user_input: str) -> Iterator[ChatEvent]:
        if not user_input or not user_input.strip():
            raise ValidationError(code="INVALID_INPUT", message="Message must not be empty")

        full = ""
        try:
            if self._provider is None:
                self._provider = self._factory.create(self.model_id, self.provider_name)
            for fragment in self._provider.send_message_stream(user_input):
                full += fragment
                yield ChatEvent(kind="delta", text=fragment)
        except BusinessError as e:
            logger.error(
                f"Chat failed: {e.message}",
                extra={"extra": {
                    "provider": self.provider_name,
                    "model": self.model_id,
                    "code": e.code,
                }},
            )
            yield ChatEvent(kind="error", text=f"Oops! Something went wrong. {e.message}", error=e)
            return

        yield ChatEvent(kind="final", text=full or EMPTY_RESPONSE_MESSAGE)
