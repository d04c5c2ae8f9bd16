"""OpenAI 流式对话中继。

本模块负责：

1. 在调用方消息前插入一条 system 消息，按固定生成参数发起 stream=True 请求。
2. 非 200 响应：同步读取响应体并抛出 ProviderError / ApiError，不返回任何流。
3. 200 响应：返回 ChatStream，逐个产出助手回复的增量文本（UTF-8 字节）。

ChatStream 由上游网络数据驱动：每次 next() 只在需要时读取更多字节，
收到 [DONE] 即结束并释放连接；中途停止消费时调用 close() 或使用 with 即可释放连接。
"""

import codecs
import json
import weakref
from contextlib import ExitStack
from typing import Any, Dict, Iterator, List, Sequence

import httpx

from relay_core.config.settings import settings
from relay_core.domain.exceptions import NetworkError, StreamDecodeError
from relay_core.domain.models import MessageLike, ModelDescriptor, message_to_payload
from relay_core.infrastructure.logging.logger import logger
from relay_core.providers.openai_http import (
    api_host,
    build_headers,
    raise_for_openai_error,
    resolve_api_key,
)
from relay_core.providers.registry import CHAT_MAX_TOKENS, CHAT_TEMPERATURE, DONE_MARKER
from relay_core.providers.sse import EventStreamParser


def extract_delta(data: str) -> str:
    """从单条事件的 JSON 中取出 choices[0].delta.content。

    content 缺失或为 null 时返回空串；结构不符或 JSON 非法时抛出 StreamDecodeError。
    """

    try:
        payload = json.loads(data)
        content = payload["choices"][0]["delta"].get("content")
    except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
        raise StreamDecodeError(
            code="STREAM_DECODE_ERROR",
            message=f"Malformed stream event: {data[:200]}",
        ) from e
    if content is None:
        return ""
    if not isinstance(content, str):
        raise StreamDecodeError(
            code="STREAM_DECODE_ERROR",
            message=f"Unexpected delta content type: {type(content).__name__}",
        )
    return content


def _release(resources: ExitStack, state: Dict[str, bool]) -> None:
    state["closed"] = True
    resources.close()


def _relay_chunks(response, resources: ExitStack, model_id: str, state: Dict[str, bool]) -> Iterator[bytes]:
    """把上游 event-stream 转换为增量字节序列。

    不持有 ChatStream 本身，调用方丢弃 ChatStream 时可按引用计数及时回收。
    """

    parser = EventStreamParser()
    decoder = codecs.getincrementaldecoder("utf-8")()
    count = 0
    try:
        for raw in response.iter_bytes():
            try:
                text = decoder.decode(raw)
            except UnicodeDecodeError as e:
                raise StreamDecodeError(
                    code="STREAM_DECODE_ERROR",
                    message=f"Stream is not valid UTF-8: {e}",
                ) from e
            for event in parser.feed(text):
                if event.data == DONE_MARKER:
                    logger.info(
                        "chat_stream.done",
                        extra={"extra": {"model": model_id, "chunks": count}},
                    )
                    return
                try:
                    piece = extract_delta(event.data)
                except StreamDecodeError:
                    logger.warning(
                        "chat_stream.decode_error",
                        extra={"extra": {"model": model_id, "chunks": count}},
                    )
                    raise
                if piece:
                    count += 1
                    yield piece.encode("utf-8")
    except (httpx.RequestError, httpx.StreamError) as e:
        raise NetworkError(code="NETWORK_ERROR", message=str(e)) from e
    finally:
        _release(resources, state)

    # 上游在 [DONE] 之前关闭连接
    logger.warning(
        "chat_stream.incomplete",
        extra={"extra": {"model": model_id, "chunks": count}},
    )
    raise StreamDecodeError(
        code="STREAM_INCOMPLETE",
        message="Stream closed before [DONE] was received",
    )


class ChatStream:
    """单消费者、只进不退的字节流。

    既是迭代器也是上下文管理器；迭代结束、出错、close() 或对象被回收时
    都会释放底层连接。
    """

    def __init__(self, response, resources: ExitStack, model_id: str = ""):
        self._state = {"closed": False}
        self._chunks = _relay_chunks(response, resources, model_id, self._state)
        # 未开始迭代就被丢弃时，生成器的 finally 不会执行，由 finalizer 兜底释放
        self._finalizer = weakref.finalize(self, _release, resources, self._state)

    @property
    def closed(self) -> bool:
        return self._state["closed"]

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        return next(self._chunks)

    def __enter__(self) -> "ChatStream":
        return self

    def __exit__(self, *exc) -> bool:
        self.close()
        return False

    def close(self) -> None:
        self._chunks.close()
        self._finalizer()

    def iter_text(self) -> Iterator[str]:
        """按增量产出解码后的文本。"""

        for chunk in self:
            yield chunk.decode("utf-8")


class ChatStreamRelay:
    """OpenAI chat/completions 流式中继。"""

    name = "openai"

    def __init__(self, cfg=settings):
        self._settings = cfg

    def stream(
        self,
        model: ModelDescriptor,
        system_prompt: str,
        key: str,
        messages: Sequence[MessageLike],
    ) -> ChatStream:
        """发起流式请求并返回 ChatStream。

        非 200 响应在这里就会抛出异常，调用方拿到的 ChatStream 一定对应成功响应。
        """

        api_key = resolve_api_key(key, self._settings)
        payload = self._build_payload(model, system_prompt, messages)
        url = f"{api_host(self._settings)}/v1/chat/completions"
        logger.info(
            "chat_stream.start",
            extra={"extra": {"model": model.id, "messages": len(payload["messages"])}},
        )

        # 任何异常都会关闭已打开的连接；成功时把资源转交给 ChatStream
        with ExitStack() as resources:
            try:
                client = resources.enter_context(
                    httpx.Client(timeout=getattr(self._settings, "http_timeout", None), trust_env=False)
                )
                resp = resources.enter_context(
                    client.stream(
                        "POST",
                        url,
                        json=payload,
                        headers=build_headers(api_key, self._settings),
                    )
                )
            except httpx.RequestError as e:
                raise NetworkError(code="NETWORK_ERROR", message=str(e)) from e

            if resp.status_code != 200:
                try:
                    resp.read()
                except (httpx.RequestError, httpx.StreamError) as e:
                    raise NetworkError(code="NETWORK_ERROR", message=str(e)) from e
                raise_for_openai_error(resp)

            return ChatStream(resp, resources.pop_all(), model.id)

    def _build_payload(
        self,
        model: ModelDescriptor,
        system_prompt: str,
        messages: Sequence[MessageLike],
    ) -> Dict[str, Any]:
        msgs: List[Dict[str, Any]] = [{"role": "system", "content": system_prompt}]
        msgs.extend(message_to_payload(m) for m in messages)
        return {
            "model": model.id,
            "messages": msgs,
            "max_tokens": CHAT_MAX_TOKENS,
            "temperature": CHAT_TEMPERATURE,
            "stream": True,
        }
