"""Minimal demonstration of streaming a reply through a provider."""

import sys

from chat_core import create_chat_provider

if __name__ == "__main__":
    provider_name = sys.argv[1] if len(sys.argv) > 1 else "echobot"
    model = sys.argv[2] if len(sys.argv) > 2 else "gemini-2.5-flash"
    provider = create_chat_provider(model, provider_name)
    question = "Explain in two sentences what a streaming response is"
    print("User:", question)
    print("Assistant: ", end="", flush=True)
    for fragment in provider.send_message_stream(question):
        print(fragment, end="", flush=True)
    print()
