"""上游 API 集成层。

该包下的模块负责：
- 定义适配器抽象接口 (base)。
- 维护模型与固定请求参数 (registry)。
- 增量解析 event-stream (sse)。
- 各上游的具体实现 (chat_stream、embeddings、pinecone_client)。
"""

from relay_core.config.settings import settings
from relay_core.providers.base import ChatStreamProvider, EmbeddingProvider, VectorQueryProvider
from relay_core.providers.chat_stream import ChatStream, ChatStreamRelay
from relay_core.providers.embeddings import EmbeddingClient
from relay_core.providers.pinecone_client import VectorQueryClient


def create_chat_relay() -> ChatStreamProvider:
    return ChatStreamRelay(settings)


def create_embedding_client() -> EmbeddingProvider:
    return EmbeddingClient(settings)


def create_vector_client() -> VectorQueryProvider:
    return VectorQueryClient(settings)


__all__ = [
    "ChatStream",
    "ChatStreamRelay",
    "EmbeddingClient",
    "VectorQueryClient",
    "create_chat_relay",
    "create_embedding_client",
    "create_vector_client",
]
