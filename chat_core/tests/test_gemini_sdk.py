from types import SimpleNamespace

import google.generativeai as genai
import pytest
from google.api_core import exceptions as google_exceptions
from google.generativeai import protos
from google.generativeai.types import generation_types

from chat_core.domain.exceptions import ApiError, RateLimitError
from chat_core.domain.models import ProviderConfig
from chat_core.providers.gemini_sdk import GeminiSdkProvider


class FakeChunk:
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        if self._text is None:
            raise ValueError("no parts")
        return self._text


class FakeChat:
    def __init__(self, replies):
        self.history = []
        self._replies = list(replies)

    def send_message(self, message, stream=False):
        assert stream is True
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        self.history.append(SimpleNamespace(role="user", parts=[SimpleNamespace(text=message)]))
        text = "".join(t for t in reply if t)
        self.history.append(SimpleNamespace(role="model", parts=[SimpleNamespace(text=text)]))
        return [FakeChunk(t) for t in reply]


def install_genai(monkeypatch, replies):
    calls = {"configure": [], "models": []}
    chat = FakeChat(replies)

    class FakeModel:
        def __init__(self, model_name, system_instruction=None):
            calls["models"].append((model_name, system_instruction))

        def start_chat(self):
            return chat

    fake = SimpleNamespace(
        configure=lambda **kw: calls["configure"].append(kw),
        GenerativeModel=FakeModel,
    )
    monkeypatch.setattr("chat_core.providers.gemini_sdk.genai", fake)
    return calls


def make_provider():
    cfg = ProviderConfig(provider_id="google", model_id="gemini-2.5-flash", credential="AIza-platform-key")
    return GeminiSdkProvider(cfg, system_prompt="be helpful")


def test_session_created_once_and_reused(monkeypatch):
    calls = install_genai(monkeypatch, [["Hel", "lo"], ["Again"]])
    provider = make_provider()
    assert provider.turns == ()

    assert list(provider.send_message_stream("hi")) == ["Hel", "lo"]
    assert list(provider.send_message_stream("more")) == ["Again"]

    assert calls["configure"] == [{"api_key": "AIza-platform-key"}]
    assert calls["models"] == [("gemini-2.5-flash", "be helpful")]
    # system 指令走带外通道 -> 2N
    assert [t.role for t in provider.turns] == ["user", "assistant", "user", "assistant"]
    assert provider.turns[1].content == "Hello"


def test_chunk_without_text_is_skipped(monkeypatch):
    install_genai(monkeypatch, [["a", None, "b"]])
    provider = make_provider()
    assert list(provider.send_message_stream("hi")) == ["a", "b"]


def test_quota_error_maps_to_rate_limit(monkeypatch):
    install_genai(monkeypatch, [google_exceptions.ResourceExhausted("quota exceeded")])
    provider = make_provider()
    with pytest.raises(RateLimitError) as exc:
        list(provider.send_message_stream("hi"))
    assert "quota exceeded" in exc.value.message


def test_api_error_maps_to_transport_error(monkeypatch):
    install_genai(monkeypatch, [google_exceptions.InvalidArgument("API key not valid")])
    provider = make_provider()
    with pytest.raises(ApiError) as exc:
        list(provider.send_message_stream("hi"))
    assert not isinstance(exc.value, RateLimitError)
    assert exc.value.http_status == 400


def test_blocked_prompt_maps_to_api_error(monkeypatch):
    install_genai(monkeypatch, [generation_types.BlockedPromptException("blocked: SAFETY")])
    provider = make_provider()
    with pytest.raises(ApiError) as exc:
        list(provider.send_message_stream("hi"))
    assert "BlockedPromptException" in exc.value.message
    assert provider.turns == ()


# ---- 以下用 SDK 自带的 ChatSession，只替换 generate_content ----


def _chunk(text, finish_reason=protos.Candidate.FinishReason.FINISH_REASON_UNSPECIFIED):
    return protos.GenerateContentResponse(
        candidates=[
            protos.Candidate(
                content=protos.Content(role="model", parts=[protos.Part(text=text)]),
                finish_reason=finish_reason,
            )
        ]
    )


def _stream(texts, error=None, finish_reason=protos.Candidate.FinishReason.STOP):
    def gen():
        for i, text in enumerate(texts):
            last = i == len(texts) - 1
            yield _chunk(text, finish_reason if last and error is None else 0)
        if error is not None:
            raise error

    return generation_types.GenerateContentResponse.from_iterator(gen())


def install_generate_content(monkeypatch, responses):
    sent = []

    def fake_generate_content(self, contents, **kwargs):
        assert kwargs.get("stream") is True
        sent.append([c.role for c in contents])
        return responses.pop(0)

    monkeypatch.setattr(genai.GenerativeModel, "generate_content", fake_generate_content)
    return sent


def test_mid_stream_failure_leaves_session_usable(monkeypatch):
    sent = install_generate_content(
        monkeypatch,
        [
            _stream(["Hel", "lo"]),
            _stream(["Par"], error=google_exceptions.ServiceUnavailable("reset")),
            _stream(["Sure", "!"]),
        ],
    )
    provider = make_provider()

    assert list(provider.send_message_stream("hi")) == ["Hel", "lo"]

    received = []
    with pytest.raises(ApiError) as exc:
        for fragment in provider.send_message_stream("tell me more"):
            received.append(fragment)
    assert received == ["Par"]
    assert exc.value.http_status == 503
    # 失败的一轮不进入历史，之前的上下文保持不变
    assert [t.role for t in provider.turns] == ["user", "assistant"]

    assert list(provider.send_message_stream("tell me more")) == ["Sure", "!"]
    assert sent[-1] == ["user", "model", "user"]
    assert [t.content for t in provider.turns] == ["hi", "Hello", "tell me more", "Sure!"]


def test_safety_stop_mid_stream_is_reported_and_discarded(monkeypatch):
    install_generate_content(
        monkeypatch,
        [
            _stream(["Partial"], finish_reason=protos.Candidate.FinishReason.SAFETY),
            _stream(["ok"]),
        ],
    )
    provider = make_provider()

    with pytest.raises(ApiError):
        list(provider.send_message_stream("hi"))
    assert provider.turns == ()

    assert list(provider.send_message_stream("hi")) == ["ok"]
    assert len(provider.turns) == 2


def test_early_close_commits_nothing(monkeypatch):
    sent = install_generate_content(
        monkeypatch,
        [_stream(["one", "two", "three"]), _stream(["again"])],
    )
    provider = make_provider()

    stream = provider.send_message_stream("hi")
    assert next(stream) == "one"
    stream.close()
    assert provider.turns == ()

    assert list(provider.send_message_stream("hi")) == ["again"]
    assert sent[-1] == ["user"]
    assert [t.role for t in provider.turns] == ["user", "assistant"]
