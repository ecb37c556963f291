"""OpenAI 兼容 Provider（OpenAI / DeepSeek）。

两家接口风格一致，均使用 chat/completions 端点：
- 认证: Authorization: Bearer <api_key>
- 请求体: {model, messages, stream: true}
- 响应: SSE，文本增量位于 choices[0].delta.content

二者只在默认地址、路径与凭据上不同，这些差异由注入的 RestStreamClient 承担。
"""

from typing import Iterator, Sequence

from chat_core.domain.conversation import ConversationState
from chat_core.domain.models import ProviderConfig, Turn
from chat_core.prompts import load_system_prompt
from chat_core.providers.registry import ProviderProfile
from chat_core.providers.rest_stream import RestStreamClient
from chat_core.providers.stream_decoder import SseDeltaDecoder


class OpenAICompatibleProvider:
    """基于显式会话历史的 SSE 流式 Provider。"""

    def __init__(self, config: ProviderConfig, client: RestStreamClient, system_prompt: str):
        self.name = config.provider_id
        self._config = config
        self._client = client
        self._history = ConversationState(system_prompt)

    @classmethod
    def from_profile(cls, config: ProviderConfig, profile: ProviderProfile, timeout: float) -> "OpenAICompatibleProvider":
        client = RestStreamClient(
            provider=profile.proxy_name,
            api_path=profile.path_for(config.model_id),
            headers={"Authorization": f"Bearer {config.credential}"},
            proxy_template=config.proxy_template,
            timeout=timeout,
        )
        return cls(config, client, load_system_prompt())

    @property
    def turns(self) -> Sequence[Turn]:
        return self._history.turns

    def send_message_stream(self, message: str) -> Iterator[str]:
        url = self._client.endpoint()
        self._history.append_user(message)
        payload = {
            "model": self._config.model_id,
            "messages": self._history.to_openai_messages(),
            "stream": True,
        }
        decoder = SseDeltaDecoder()
        yield from decoder.decode(self._client.stream(url, payload))
        self._history.commit_assistant(decoder.text)
