"""Provider 抽象接口。

上层（会话服务 / CLI）不直接依赖具体厂商的 SDK 或 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ChatProvider（如 OpenAICompatibleProvider、GeminiSdkProvider）。
- 负责：维护本实例的会话历史，发起请求，并把流式响应解析为文本增量。

这样可以在不改调用方代码的前提下切换或接入更多厂商。
"""

from typing import Iterator, Protocol, Sequence

from chat_core.domain.models import Turn


class ChatProvider(Protocol):
    """聊天 Provider 协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - turns: 当前会话历史的只读视图。
    - send_message_stream(message): 发送一条用户消息，逐步产出回复文本增量。
      产出顺序与到达顺序一致；流结束且回复非空时写回历史。
      调用方需串行调用，同一实例上不能同时存在两个进行中的流。
    """

    name: str

    @property
    def turns(self) -> Sequence[Turn]:
        ...

    def send_message_stream(self, message: str) -> Iterator[str]:
        ...
