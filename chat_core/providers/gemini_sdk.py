"""Google Gemini Provider（托管 SDK 会话）。

会话历史完全交给 google-generativeai 的 ChatSession 维护：
首次发送时创建绑定了系统指令和模型的会话，之后复用该会话的内部状态。

流式回复没有完整结束时（中途出错、被安全策略拦截、调用方提前关闭迭代器），
会话历史恢复到本次发送之前的状态，下一次发送可以直接重试。
"""

from typing import Iterator, Optional, Sequence

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import generation_types

from chat_core.domain.exceptions import ApiError, RateLimitError
from chat_core.domain.models import ProviderConfig, Turn
from chat_core.infrastructure.logging.logger import logger
from chat_core.prompts import load_system_prompt

# SDK 自身在流式过程中抛出的异常
_SDK_ERRORS = (
    generation_types.BlockedPromptException,
    generation_types.StopCandidateException,
    generation_types.IncompleteIterationError,
    generation_types.BrokenResponseError,
)


class GeminiSdkProvider:
    name = "google"

    def __init__(self, config: ProviderConfig, system_prompt: Optional[str] = None):
        self._config = config
        self._system_prompt = system_prompt or load_system_prompt()
        self._chat = None

    def _session(self):
        if self._chat is None:
            genai.configure(api_key=self._config.credential)
            model = genai.GenerativeModel(
                self._config.model_id,
                system_instruction=self._system_prompt,
            )
            self._chat = model.start_chat()
        return self._chat

    @property
    def turns(self) -> Sequence[Turn]:
        if self._chat is None:
            return ()
        return tuple(_to_turn(content) for content in self._chat.history)

    def send_message_stream(self, message: str) -> Iterator[str]:
        chat = self._session()
        committed = list(chat.history)
        completed = False
        try:
            response = chat.send_message(message, stream=True)
            for chunk in response:
                text = _chunk_text(chunk)
                if text:
                    yield text
            # 读取 history 会把本轮并入会话；非正常结束原因在这里以 BrokenResponseError 暴露
            _ = chat.history
            completed = True
        except google_exceptions.GoogleAPIError as e:
            raise self._api_error(e) from e
        except _SDK_ERRORS as e:
            raise ApiError(
                code="API_ERROR",
                message=f"API Error: {type(e).__name__} - {e}",
                http_status=502,
                provider=self.name,
            ) from e
        finally:
            if not completed:
                chat.history = committed

    def _api_error(self, e: google_exceptions.GoogleAPIError) -> ApiError:
        cls = RateLimitError if isinstance(e, google_exceptions.ResourceExhausted) else ApiError
        code = "RATE_LIMIT" if cls is RateLimitError else "API_ERROR"
        return cls(
            code=code,
            message=f"API Error: {e}",
            http_status=int(getattr(e, "code", None) or 502),
            provider=self.name,
        )


def _chunk_text(chunk) -> str:
    # 被安全策略拦截等情况下 chunk 没有 parts，访问 .text 会抛 ValueError
    try:
        return chunk.text
    except ValueError:
        logger.warning("Gemini chunk without text skipped", extra={"extra": {"provider": "google"}})
        return ""


def _to_turn(content) -> Turn:
    role = "assistant" if content.role == "model" else "user"
    text = "".join(getattr(part, "text", "") or "" for part in content.parts)
    return Turn(role=role, content=text)
