"""单个 Provider 实例私有的会话历史。

历史只追加不修改，顺序即对话顺序，每次请求都会原样回放。
"""

from typing import Any, Dict, List, Tuple

from .models import Turn


class ConversationState:
    """有序的 Turn 序列，初始化时只包含一条 system 指令。"""

    def __init__(self, system_prompt: str):
        self._turns: List[Turn] = [Turn(role="system", content=system_prompt)]

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def system_prompt(self) -> str:
        return self._turns[0].content

    def __len__(self) -> int:
        return len(self._turns)

    def append_user(self, content: str) -> Turn:
        turn = Turn(role="user", content=content)
        self._turns.append(turn)
        return turn

    def commit_assistant(self, content: str) -> bool:
        """把完整回复写回历史；空回复不写入，避免污染后续上下文。"""

        if not content:
            return False
        self._turns.append(Turn(role="assistant", content=content))
        return True

    def to_openai_messages(self) -> List[Dict[str, str]]:
        return [{"role": t.role, "content": t.content} for t in self._turns]

    def to_gemini_payload(self) -> Dict[str, Any]:
        """Gemini REST 格式：system 指令放到 systemInstruction，其余放到 contents。"""

        contents = []
        for t in self._turns[1:]:
            role = "model" if t.role == "assistant" else t.role
            contents.append({"role": role, "parts": [{"text": t.content}]})
        return {
            "systemInstruction": {"parts": [{"text": self.system_prompt}]},
            "contents": contents,
        }
