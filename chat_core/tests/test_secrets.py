import tempfile
from pathlib import Path

from chat_core.config.secrets import EnvFileSecretStore, MappingSecretStore, read_env_file, write_env_file


def test_env_file_store_reads_and_rereads():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / ".chat_secrets"
        store = EnvFileSecretStore(path)
        assert store.get("openai_api_key") is None

        path.write_text(
            "# user settings\nopenai_api_key=sk-abc\ndeepseek_api_key=\nproxy_url_pattern=\"http://localhost:8080/{provider}\"\n",
            encoding="utf-8",
        )
        assert store.get("openai_api_key") == "sk-abc"
        assert store.get("deepseek_api_key") is None
        assert store.get("proxy_url_pattern") == "http://localhost:8080/{provider}"


def test_write_env_file_preserves_order():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d) / "nested" / ".chat_secrets"
        write_env_file(path, {"b": "2", "a": "1", "": "skipped"})
        assert list(read_env_file(path).items()) == [("b", "2"), ("a", "1")]


def test_mapping_store_treats_blank_as_absent():
    store = MappingSecretStore({"openai_api_key": " ", "deepseek_api_key": " sk-x "})
    assert store.get("openai_api_key") is None
    assert store.get("deepseek_api_key") == "sk-x"
    assert store.get("missing") is None
