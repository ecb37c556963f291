"""流式响应解码器。

把网络层按任意大小到达的字节块还原成完整的行，再按各厂商的帧格式
解析出文本增量：

- SseDeltaDecoder: OpenAI / DeepSeek 的 SSE 格式，"data: {...}"，以 "data: [DONE]" 结束。
- ArrayRecordDecoder: Gemini REST 的逐行 JSON 数组元素，行首可能带逗号。

关键点是跨块的行缓冲：当前块末尾不完整的一行必须保留并拼到下一块前面，
否则被切断的帧会被错误解析。单个帧解析失败只记录日志并跳过，不会中止整个流。
"""

import codecs
import json
from typing import Any, Iterable, Iterator, List, Optional

from chat_core.domain.exceptions import FrameParseError
from chat_core.infrastructure.logging.logger import logger


class LineBuffer:
    """增量 UTF-8 解码 + 跨块行缓冲。"""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, data: bytes) -> List[str]:
        text = self._pending + self._decoder.decode(data)
        lines = text.split("\n")
        self._pending = lines.pop()
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> List[str]:
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        tail = tail.rstrip("\r")
        return [tail] if tail else []


class StreamDecoder:
    """解码器基类。

    子类实现 parse_line(line)：返回文本增量或 None；无法解析时抛出
    FrameParseError；遇到结束标记时把 self.done 置为 True。
    所有产出的增量累积在 self.text 中，流结束后用于写回会话历史。
    """

    name = "stream"

    def __init__(self) -> None:
        self.text = ""
        self.done = False

    def decode(self, chunks: Iterable[bytes]) -> Iterator[str]:
        for line in self._iter_lines(chunks):
            try:
                fragment = self.parse_line(line)
            except FrameParseError as e:
                logger.warning(
                    "Failed to parse stream frame",
                    extra={"extra": {"decoder": self.name, "frame": e.frame[:200]}},
                )
                continue
            if self.done:
                return
            if fragment:
                self.text += fragment
                yield fragment

    def parse_line(self, line: str) -> Optional[str]:
        raise NotImplementedError

    @staticmethod
    def _iter_lines(chunks: Iterable[bytes]) -> Iterator[str]:
        buffer = LineBuffer()
        for chunk in chunks:
            yield from buffer.feed(chunk)
        yield from buffer.flush()


class SseDeltaDecoder(StreamDecoder):
    """OpenAI 兼容的 SSE 增量格式，文本位于 choices[0].delta.content。"""

    name = "sse-delta"
    DATA_PREFIX = "data:"
    DONE_SENTINEL = "[DONE]"

    def parse_line(self, line: str) -> Optional[str]:
        if not line.startswith(self.DATA_PREFIX):
            return None
        body = line[len(self.DATA_PREFIX):].strip()
        if body == self.DONE_SENTINEL:
            self.done = True
            return None
        if not body:
            return None
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise FrameParseError(body) from e
        return _text_at(payload, ("choices", 0, "delta", "content"))


class ArrayRecordDecoder(StreamDecoder):
    """Gemini 流式 JSON 数组的逐行记录，文本位于 candidates[0].content.parts[0].text。"""

    name = "array-record"
    MIN_RECORD_LENGTH = 3

    def parse_line(self, line: str) -> Optional[str]:
        record = line.strip()
        # "[", "]", "," 之类的数组边界
        if len(record) < self.MIN_RECORD_LENGTH:
            return None
        if record.startswith(","):
            record = record[1:]
        try:
            payload = json.loads(record)
        except json.JSONDecodeError as e:
            raise FrameParseError(record) from e
        return _text_at(payload, ("candidates", 0, "content", "parts", 0, "text"))


def _text_at(payload: Any, path: tuple) -> Optional[str]:
    node = payload
    for key in path:
        try:
            node = node[key]
        except (KeyError, IndexError, TypeError):
            return None
    return node if isinstance(node, str) else None
