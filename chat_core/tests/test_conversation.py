import dataclasses

import pytest

from chat_core.domain.conversation import ConversationState
from chat_core.domain.models import ProviderConfig, Turn


def test_state_seeded_with_system_turn():
    state = ConversationState("be nice")
    assert state.turns == (Turn(role="system", content="be nice"),)
    assert len(state) == 1


def test_empty_assistant_reply_not_committed():
    state = ConversationState("sys")
    state.append_user("hi")
    assert state.commit_assistant("") is False
    assert [t.role for t in state.turns] == ["system", "user"]
    assert state.commit_assistant("hello") is True
    assert [t.role for t in state.turns] == ["system", "user", "assistant"]


def test_turn_is_immutable():
    turn = Turn(role="user", content="x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        turn.content = "y"


def test_gemini_payload_moves_system_out_of_band():
    state = ConversationState("sys")
    state.append_user("q")
    state.commit_assistant("a")
    payload = state.to_gemini_payload()
    assert payload["systemInstruction"] == {"parts": [{"text": "sys"}]}
    assert payload["contents"] == [
        {"role": "user", "parts": [{"text": "q"}]},
        {"role": "model", "parts": [{"text": "a"}]},
    ]


def test_provider_config_repr_masks_credential():
    cfg = ProviderConfig(provider_id="openai", model_id="gpt-4o-mini", credential="sk-secret-value")
    assert "sk-secret-value" not in repr(cfg)
