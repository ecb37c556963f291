"""EchoBot：不访问网络的确定性 Provider，用于验证增量消费流程。"""

import time
from typing import Callable, Iterator, Sequence

from chat_core.domain.models import Turn

RESPONSE_PREFIX = "Echo: "
PREFIX_DELAY = 0.1
WORD_DELAY = 0.15


class EchoBotProvider:
    """先输出固定前缀，再按单个空格切分逐词回显，每个词后带一个空格。"""

    name = "echobot"

    def __init__(self, delay_scale: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        self._delay_scale = delay_scale
        self._sleep = sleep

    @property
    def turns(self) -> Sequence[Turn]:
        return ()

    def send_message_stream(self, message: str) -> Iterator[str]:
        yield RESPONSE_PREFIX
        self._pause(PREFIX_DELAY)
        for word in message.split(" "):
            yield f"{word} "
            self._pause(WORD_DELAY)

    def _pause(self, seconds: float) -> None:
        if self._delay_scale > 0:
            self._sleep(seconds * self._delay_scale)
