"""Provider 静态配置。

每个 Provider 的默认基础地址、请求路径、凭据来源集中在这里，
上层只需要 Provider 标识和模型 ID。"""

from dataclasses import dataclass
from typing import Literal, Mapping, Optional

from chat_core.config.secrets import DEEPSEEK_API_KEY, OPENAI_API_KEY
from chat_core.domain.exceptions import UnknownProviderError
from chat_core.domain.models import ProviderId

ProviderKind = Literal["gemini-sdk", "gemini-rest", "openai-compatible", "mock"]


@dataclass(frozen=True)
class ProviderProfile:
    """某个 Provider 的整体配置。

    - proxy_name: 代理模板中替换 "{provider}" 的规范名称。
    - api_path: 请求路径，可包含 "{model}" 占位符。
    - credential_key: 用户级 API Key 在 SecretStore 中的键；None 表示不需要。
    - platform_credential: 是否使用平台级 Google 凭据。
    """

    name: ProviderId
    display_name: str
    kind: ProviderKind
    proxy_name: str
    base_url: str = ""
    api_path: str = ""
    credential_key: Optional[str] = None
    platform_credential: bool = False

    def path_for(self, model_id: str) -> str:
        return self.api_path.format(model=model_id)


GOOGLE_SDK = ProviderProfile(
    name="google",
    display_name="Google",
    kind="gemini-sdk",
    proxy_name="google",
    platform_credential=True,
)

GOOGLE_REST = ProviderProfile(
    name="google-rest",
    display_name="Google",
    kind="gemini-rest",
    proxy_name="google",
    base_url="https://generativelanguage.googleapis.com",
    api_path="/v1beta/models/{model}:streamGenerateContent",
    platform_credential=True,
)

OPENAI = ProviderProfile(
    name="openai",
    display_name="OpenAI",
    kind="openai-compatible",
    proxy_name="openai",
    base_url="https://api.openai.com",
    api_path="/v1/chat/completions",
    credential_key=OPENAI_API_KEY,
)

DEEPSEEK = ProviderProfile(
    name="deepseek",
    display_name="DeepSeek",
    kind="openai-compatible",
    proxy_name="deepseek",
    base_url="https://api.deepseek.com",
    api_path="/chat/completions",
    credential_key=DEEPSEEK_API_KEY,
)

ECHOBOT = ProviderProfile(
    name="echobot",
    display_name="EchoBot",
    kind="mock",
    proxy_name="echobot",
)


PROVIDER_REGISTRY: Mapping[str, ProviderProfile] = {
    p.name: p for p in (GOOGLE_SDK, GOOGLE_REST, OPENAI, DEEPSEEK, ECHOBOT)
}


def get_provider_profile(name: str) -> ProviderProfile:
    """根据名称获取 ProviderProfile，名称不区分大小写。"""

    key = (name or "").strip().lower()
    profile = PROVIDER_REGISTRY.get(key)
    if profile is None:
        raise UnknownProviderError(name)
    return profile


def default_base_url(name: str) -> str:
    """按规范名称（代理名）返回默认基础地址。"""

    for profile in PROVIDER_REGISTRY.values():
        if profile.proxy_name == name and profile.base_url:
            return profile.base_url
    raise UnknownProviderError(name)
