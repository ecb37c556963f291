"""Chat Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护各 Provider 的默认地址与凭据来源 (registry)。
- 解析请求地址与代理模板 (endpoint)、解码流式响应 (stream_decoder)。
- 提供各厂商的具体实现 (gemini_sdk、gemini_rest、openai_compat、echo)。
"""

from typing import Optional

from chat_core.config.secrets import PROXY_URL_PATTERN, EnvFileSecretStore, SecretStore
from chat_core.config.settings import settings
from chat_core.domain.exceptions import MissingCredentialError
from chat_core.domain.models import ProviderConfig
from chat_core.providers.base import ChatProvider
from chat_core.providers.echo import EchoBotProvider
from chat_core.providers.gemini_rest import GeminiRestProvider
from chat_core.providers.openai_compat import OpenAICompatibleProvider
from chat_core.providers.registry import ProviderProfile, get_provider_profile


class ProviderFactory:
    """根据 Provider 标识与模型 ID 创建 Provider 实例。

    设置与密钥存储在构造时注入，每次 create 都返回全新的实例与会话历史。
    所有配置错误都在发起网络请求之前抛出。
    """

    def __init__(self, secrets: SecretStore, cfg=settings):
        self._secrets = secrets
        self._settings = cfg

    def create(self, model_id: str, provider: str) -> ChatProvider:
        profile = get_provider_profile(provider)
        if profile.kind == "mock":
            return EchoBotProvider(delay_scale=getattr(self._settings, "echo_delay", 1.0))

        config = ProviderConfig(
            provider_id=profile.name,
            model_id=model_id,
            credential=self._credential_for(profile),
            proxy_template=self._secrets.get(PROXY_URL_PATTERN),
        )
        timeout = getattr(self._settings, "http_timeout", 60.0)
        if profile.kind == "gemini-sdk":
            # SDK 只在选择托管 Gemini 时才导入
            from chat_core.providers.gemini_sdk import GeminiSdkProvider

            return GeminiSdkProvider(config)
        if profile.kind == "gemini-rest":
            return GeminiRestProvider.from_profile(config, profile, timeout)
        return OpenAICompatibleProvider.from_profile(config, profile, timeout)

    def _credential_for(self, profile: ProviderProfile) -> str:
        if profile.platform_credential:
            key = getattr(self._settings, "google_api_key", None)
            if not key:
                raise MissingCredentialError(
                    provider=profile.name,
                    setting="GOOGLE_API_KEY",
                    message=(
                        f"{profile.display_name} API key is not configured for provider '{profile.name}'. "
                        "This is a platform issue and cannot be set by the user."
                    ),
                )
            return key

        key = self._secrets.get(profile.credential_key) if profile.credential_key else None
        if not key:
            raise MissingCredentialError(
                provider=profile.name,
                setting=profile.credential_key or "",
                message=(
                    f"{profile.display_name} API key not found for provider '{profile.name}'. "
                    f"Please set '{profile.credential_key}' in the settings (chat-core configure)."
                ),
            )
        return key


def create_chat_provider(
    model_id: str,
    provider: Optional[str] = None,
    secrets: Optional[SecretStore] = None,
    cfg=None,
) -> ChatProvider:
    """根据名称创建 Provider 实例，默认取配置中的 provider 与 secrets 文件。"""

    cfg = cfg or settings
    store = secrets or EnvFileSecretStore(cfg.secrets_file)
    return ProviderFactory(store, cfg).create(model_id, provider or cfg.default_provider)


__all__ = [
    "ChatProvider",
    "ProviderFactory",
    "create_chat_provider",
]
