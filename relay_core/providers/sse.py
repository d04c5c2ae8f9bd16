"""增量 event-stream 解析器。

上游按 text/event-stream 格式推送数据，但网络层的一次读取与逻辑事件并不对齐：
一个事件可能跨多次读取，一次读取也可能包含多个事件。EventStreamParser
负责把任意切分的文本块重新拼装成完整事件：

- 行结束符支持 CRLF / CR / LF，块末尾单独的 CR 会留到下一块再判断。
- 以 ":" 开头的行是注释，直接忽略。
- data 行累积、以 "\\n" 连接；遇到空行时派发事件（data 为空则不派发）。
- event / id / retry 字段按规范记录。

流结束时未以空行收尾的残余事件不会被派发。
"""

import re
from dataclasses import dataclass
from typing import List, Optional


_LINE_END = re.compile(r"\r\n|\r|\n")


@dataclass
class ServerSentEvent:
    """一条完整的事件。"""

    data: str
    event: Optional[str] = None
    id: Optional[str] = None
    retry: Optional[int] = None


class EventStreamParser:
    """可重复 feed 的增量解析器，每次 feed 返回本次凑齐的事件。"""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._buffer = ""
        self._started = False
        self._data: List[str] = []
        self._event_type: Optional[str] = None
        self._retry: Optional[int] = None
        # last event id 跨事件保留
        self.last_event_id: Optional[str] = None

    def feed(self, chunk: str) -> List[ServerSentEvent]:
        if not chunk:
            return []
        if not self._started:
            self._started = True
            if chunk.startswith("\ufeff"):
                chunk = chunk[1:]

        buf = self._buffer + chunk
        events: List[ServerSentEvent] = []
        pos = 0
        for m in _LINE_END.finditer(buf):
            if m.group() == "\r" and m.end() == len(buf):
                break
            self._process_line(buf[pos:m.start()], events)
            pos = m.end()
        self._buffer = buf[pos:]
        return events

    def _process_line(self, line: str, events: List[ServerSentEvent]) -> None:
        if not line:
            self._dispatch(events)
            return
        if line.startswith(":"):
            return

        field, sep, value = line.partition(":")
        if sep and value.startswith(" "):
            value = value[1:]

        if field == "data":
            self._data.append(value)
        elif field == "event":
            self._event_type = value
        elif field == "id":
            if "\0" not in value:
                self.last_event_id = value
        elif field == "retry":
            if value.isascii() and value.isdigit():
                self._retry = int(value)

    def _dispatch(self, events: List[ServerSentEvent]) -> None:
        if self._data:
            events.append(
                ServerSentEvent(
                    data="\n".join(self._data),
                    event=self._event_type or None,
                    id=self.last_event_id,
                    retry=self._retry,
                )
            )
        self._data = []
        self._event_type = None
        self._retry = None
