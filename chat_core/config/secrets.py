"""User-level key/settings store.

The core only ever reads from a SecretStore. The ``configure`` command of the
terminal front end is the single writer (see ``write_env_file``).
"""

from __future__ import annotations

from collections import OrderedDict
from pathlib import Path
from typing import Mapping, MutableMapping, Optional, Protocol

OPENAI_API_KEY = "openai_api_key"
DEEPSEEK_API_KEY = "deepseek_api_key"
PROXY_URL_PATTERN = "proxy_url_pattern"


class SecretStore(Protocol):
    """Read-only key lookup; returns None when the key is absent."""

    def get(self, key: str) -> Optional[str]:
        ...


class MappingSecretStore:
    """In-memory store over a plain mapping."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        if value is None or not value.strip():
            return None
        return value.strip()


class EnvFileSecretStore:
    """Store backed by a ``KEY=value`` file, re-read on every lookup."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def get(self, key: str) -> Optional[str]:
        value = read_env_file(self.path).get(key)
        if not value:
            return None
        return value


def read_env_file(path: Path) -> MutableMapping[str, str]:
    """Return key/value pairs from the file (order preserved)."""

    pairs: MutableMapping[str, str] = OrderedDict()
    if not path.exists():
        return pairs
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        pairs[key.strip()] = value.strip().strip('"').strip("'")
    return pairs


def write_env_file(path: Path, data: Mapping[str, str]) -> None:
    """Persist the given key/value pairs back to the file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    lines = []
    for key, value in data.items():
        if not key:
            continue
        lines.append(f"{key}={value}")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
