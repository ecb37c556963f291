"""Terminal front end for chat-core."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TextIO, cast

from chat_core.api.service import ChatSession
from chat_core.config.secrets import (
    DEEPSEEK_API_KEY,
    OPENAI_API_KEY,
    PROXY_URL_PATTERN,
    EnvFileSecretStore,
    read_env_file,
    write_env_file,
)
from chat_core.config.settings import settings
from chat_core.domain.exceptions import BusinessError
from chat_core.providers import ProviderFactory
from chat_core.providers.registry import PROVIDER_REGISTRY

GREETING = "Hello! I'm your friendly AI assistant. How can I help you today?"


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser."""

    parser = argparse.ArgumentParser(prog="chat-core")
    parser.add_argument(
        "--secrets-file",
        type=Path,
        default=None,
        help="Key/settings file (defaults to the configured secrets_file).",
    )
    subparsers = parser.add_subparsers(dest="command")

    chat_parser = subparsers.add_parser("chat", help="Start an interactive conversation")
    chat_parser.add_argument("--provider", default=None, help="Provider id, e.g. openai or echobot.")
    chat_parser.add_argument("--model", default=None, help="Model id passed to the provider.")
    chat_parser.set_defaults(handler=_chat_command)

    configure_parser = subparsers.add_parser("configure", help="Store API keys and the proxy URL pattern")
    configure_parser.add_argument("--openai-key", default=None)
    configure_parser.add_argument("--deepseek-key", default=None)
    configure_parser.add_argument(
        "--proxy-pattern",
        default=None,
        help="Proxy URL pattern containing {provider}, e.g. http://localhost:8080/{provider}. Empty string clears it.",
    )
    configure_parser.set_defaults(handler=_configure_command)

    providers_parser = subparsers.add_parser("providers", help="List available providers")
    providers_parser.set_defaults(handler=_providers_command)
    return parser


def _secrets_path(args: argparse.Namespace) -> Path:
    return args.secrets_file or Path(settings.secrets_file)


def _chat_command(
    args: argparse.Namespace,
    input_fn: Callable[[str], str] = input,
    out: TextIO | None = None,
) -> int:
    out = out or sys.stdout
    factory = ProviderFactory(EnvFileSecretStore(_secrets_path(args)), settings)
    session = ChatSession(
        factory,
        model_id=args.model or settings.default_model,
        provider=args.provider or settings.default_provider,
    )
    print(GREETING, file=out)
    while True:
        try:
            line = input_fn("> ")
        except (EOFError, KeyboardInterrupt):
            print(file=out)
            return 0
        text = line.strip()
        if not text:
            continue
        if text in ("/quit", "/exit"):
            return 0
        if text.startswith("/model"):
            parts = text.split()
            if len(parts) != 3:
                print("Usage: /model <provider> <model>", file=out)
                continue
            session.select_model(model_id=parts[2], provider=parts[1])
            print(f"Switched to {parts[1]} / {parts[2]}", file=out)
            continue
        _render_reply(session, text, out)


def _render_reply(session: ChatSession, text: str, out: TextIO) -> None:
    streamed = False
    for event in session.stream_reply(text):
        if event.kind == "delta":
            out.write(event.text)
            out.flush()
            streamed = True
        elif event.kind == "final":
            if not streamed:
                out.write(event.text)
            out.write("\n")
        else:
            if streamed:
                out.write("\n")
            out.write(event.text + "\n")
    out.flush()


def _configure_command(args: argparse.Namespace) -> int:
    path = _secrets_path(args)
    data = read_env_file(path)
    updates = {
        OPENAI_API_KEY: args.openai_key,
        DEEPSEEK_API_KEY: args.deepseek_key,
        PROXY_URL_PATTERN: args.proxy_pattern,
    }
    for key, value in updates.items():
        if value is None:
            continue
        if value.strip():
            data[key] = value.strip()
        else:
            data.pop(key, None)
    write_env_file(path, data)
    print(f"Settings saved to {path}")
    return 0


def _providers_command(args: argparse.Namespace) -> int:
    for profile in PROVIDER_REGISTRY.values():
        if profile.platform_credential:
            source = "platform key (GOOGLE_API_KEY)"
        elif profile.credential_key:
            source = profile.credential_key
        else:
            source = "no key"
        print(f"{profile.name:<12} {profile.display_name:<10} {source}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 0
    command_handler = cast(Callable[[argparse.Namespace], int], handler)
    try:
        return command_handler(args)
    except BusinessError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
