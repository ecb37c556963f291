"""REST 流式请求的公共部分。

OpenAI、DeepSeek 与 Gemini REST 三个 Provider 共用本模块：
按 Provider 名称、路径、凭据与代理模板解析地址，发起一次流式 POST，
逐块产出原始字节，并把 HTTP / 网络错误统一包装为 TransportError。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional

import httpx

from chat_core.domain.exceptions import ApiError, NetworkError, RateLimitError
from chat_core.infrastructure.logging.logger import logger
from chat_core.providers.endpoint import resolve_endpoint


@dataclass(frozen=True)
class RestStreamClient:
    """按 Provider 参数化的流式 HTTP 客户端。"""

    provider: str
    api_path: str
    headers: Mapping[str, str] = field(default_factory=dict, repr=False)
    proxy_template: Optional[str] = None
    timeout: float = 60.0

    def endpoint(self) -> str:
        return resolve_endpoint(self.provider, self.api_path, self.proxy_template)

    def stream(self, url: str, payload: Dict[str, Any]) -> Iterator[bytes]:
        """POST payload 到 url，逐块产出响应体。"""

        headers = {"Content-Type": "application/json", **self.headers}
        logger.info(
            "Sending streaming request",
            extra={"extra": {"provider": self.provider, "url": url}},
        )
        try:
            with httpx.Client(timeout=self.timeout, trust_env=False) as client:
                with client.stream("POST", url, json=payload, headers=headers) as resp:
                    if not 200 <= resp.status_code < 300:
                        resp.read()
                        raise self._error_from_response(resp)
                    for chunk in resp.iter_bytes():
                        if chunk:
                            yield chunk
        except httpx.RequestError as e:
            raise NetworkError(
                code="NETWORK_ERROR", message=str(e) or type(e).__name__, provider=self.provider
            ) from e

    def _error_from_response(self, resp) -> ApiError:
        try:
            body = resp.json()
        except ValueError:
            body = None
        detail = _error_message(body) or "Unknown error"
        status = f"{resp.status_code} {getattr(resp, 'reason_phrase', '') or ''}".strip()
        message = f"API Error: {status} - {detail}"
        if resp.status_code == 429:
            return RateLimitError(code="RATE_LIMIT", message=message, http_status=429, provider=self.provider)
        return ApiError(code="API_ERROR", message=message, http_status=resp.status_code, provider=self.provider)


def _error_message(body: Any) -> Optional[str]:
    """取出错误信封中的 error.message。"""

    # Gemini 有时返回 [{"error": {...}}]
    if isinstance(body, list) and body:
        body = body[0]
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return None
