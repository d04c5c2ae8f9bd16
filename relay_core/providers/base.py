"""适配器抽象接口。

上层（路由、UI）不直接依赖具体实现，而是依赖以下协议，
测试或替换厂商时只需提供满足协议的对象即可。
"""

from typing import Any, Iterator, Optional, Protocol, Sequence

from relay_core.domain.models import MessageLike, ModelDescriptor, VectorQueryParams


class ByteStream(Protocol):
    """流式对话返回的字节流，迭代结束或 close() 后释放连接。"""

    def __iter__(self) -> Iterator[bytes]:
        ...

    def close(self) -> None:
        ...


class ChatStreamProvider(Protocol):
    name: str

    def stream(
        self,
        model: ModelDescriptor,
        system_prompt: str,
        key: str,
        messages: Sequence[MessageLike],
    ) -> ByteStream:
        ...


class EmbeddingProvider(Protocol):
    name: str

    def create(self, key: Optional[str], message: MessageLike) -> Any:
        ...


class VectorQueryProvider(Protocol):
    name: str

    def query(self, params: VectorQueryParams, query: str) -> Any:
        ...
