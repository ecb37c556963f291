"""Gemini REST Provider。

直接调用 streamGenerateContent，不经过 SDK：
- URL: {base}/v1beta/models/{model}:streamGenerateContent
- 认证: x-goog-api-key 请求头（平台级凭据）
- 请求体: {systemInstruction, contents}
- 响应: 逐步输出的 JSON 数组，每行一个元素，行首可能带逗号
"""

from typing import Iterator, Sequence

from chat_core.domain.conversation import ConversationState
from chat_core.domain.models import ProviderConfig, Turn
from chat_core.prompts import load_system_prompt
from chat_core.providers.registry import ProviderProfile
from chat_core.providers.rest_stream import RestStreamClient
from chat_core.providers.stream_decoder import ArrayRecordDecoder


class GeminiRestProvider:
    name = "google-rest"

    def __init__(self, config: ProviderConfig, client: RestStreamClient, system_prompt: str):
        self._config = config
        self._client = client
        self._history = ConversationState(system_prompt)

    @classmethod
    def from_profile(cls, config: ProviderConfig, profile: ProviderProfile, timeout: float) -> "GeminiRestProvider":
        client = RestStreamClient(
            provider=profile.proxy_name,
            api_path=profile.path_for(config.model_id),
            headers={"x-goog-api-key": config.credential or ""},
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
        decoder = ArrayRecordDecoder()
        yield from decoder.decode(self._client.stream(url, self._history.to_gemini_payload()))
        self._history.commit_assistant(decoder.text)
