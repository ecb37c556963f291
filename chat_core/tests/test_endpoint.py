import pytest

from chat_core.domain.exceptions import ConfigurationError, InvalidProxyTemplateError, UnknownProviderError
from chat_core.providers.endpoint import resolve_endpoint


def test_default_base_urls():
    assert resolve_endpoint("openai", "/v1/chat/completions") == "https://api.openai.com/v1/chat/completions"
    assert resolve_endpoint("deepseek", "/chat/completions", "") == "https://api.deepseek.com/chat/completions"
    assert (
        resolve_endpoint("google", "/v1beta/models/m:streamGenerateContent")
        == "https://generativelanguage.googleapis.com/v1beta/models/m:streamGenerateContent"
    )


def test_proxy_template_substitution():
    url = resolve_endpoint("openai", "/v1/chat/completions", "http://localhost:8080/{provider}")
    assert url == "http://localhost:8080/openai/v1/chat/completions"


def test_proxy_template_trailing_slash_stripped():
    url = resolve_endpoint("deepseek", "/chat/completions", "https://proxy.local/{provider}/")
    assert url == "https://proxy.local/deepseek/chat/completions"


@pytest.mark.parametrize(
    "template",
    [
        "http://localhost:8080/",
        "localhost:8080/{provider}",
        "ftp://host/{provider}",
        "http:///{provider}",
        "http://bad host/{provider}",
        "http://localhost:99999/{provider}",
    ],
)
def test_invalid_proxy_templates(template):
    with pytest.raises(InvalidProxyTemplateError) as exc:
        resolve_endpoint("openai", "/v1/chat/completions", template)
    assert isinstance(exc.value, ConfigurationError)
    assert exc.value.code == "INVALID_PROXY_TEMPLATE"


def test_unknown_provider_without_template():
    with pytest.raises(UnknownProviderError):
        resolve_endpoint("nope", "/x")
