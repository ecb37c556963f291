"""请求地址解析。

未配置代理模板时使用厂商默认地址；配置后把模板中的 "{provider}"
替换为规范 Provider 名称，再拼接 API 路径。纯函数，无网络副作用。
"""

from typing import Optional
from urllib.parse import urlparse

from chat_core.domain.exceptions import InvalidProxyTemplateError
from chat_core.providers.registry import default_base_url

PROVIDER_PLACEHOLDER = "{provider}"


def resolve_endpoint(provider: str, api_path: str, proxy_template: Optional[str] = None) -> str:
    if not proxy_template or not proxy_template.strip():
        return default_base_url(provider) + api_path

    template = proxy_template.strip()
    if PROVIDER_PLACEHOLDER not in template:
        raise InvalidProxyTemplateError(template, f"missing {PROVIDER_PLACEHOLDER} placeholder")
    base = template.replace(PROVIDER_PLACEHOLDER, provider)
    if base.endswith("/"):
        base = base[:-1]
    _validate_base_url(template, base)
    return base + api_path


def _validate_base_url(template: str, url: str) -> None:
    if any(ch.isspace() for ch in url):
        raise InvalidProxyTemplateError(template, "URL must not contain whitespace")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidProxyTemplateError(template, f"URL must be http(s), got {parsed.scheme or 'no scheme'}")
    try:
        # 端口非法时 urlparse 延迟到访问 .port 才报错
        _ = parsed.port
    except ValueError as exc:
        raise InvalidProxyTemplateError(template, str(exc)) from exc
    if not parsed.hostname:
        raise InvalidProxyTemplateError(template, "URL has no host")
