"""对外 API 服务模块。

提供简化的函数接口供上层应用（HTTP 路由、UI）调用，
每次调用都按当前配置构造一个新的适配器实例。
"""

from typing import Any, Optional, Sequence, Union

from relay_core.config.settings import settings
from relay_core.domain.exceptions import BusinessError
from relay_core.domain.models import MessageLike, ModelDescriptor, VectorQueryParams
from relay_core.infrastructure.logging.logger import logger
from relay_core.prompts import create_system_prompt
from relay_core.providers.chat_stream import ChatStream, ChatStreamRelay
from relay_core.providers.embeddings import EmbeddingClient
from relay_core.providers.pinecone_client import VectorQueryClient
from relay_core.providers.registry import get_model


def _log_failure(op: str, e: Exception) -> None:
    payload = {"op": op, "error_type": type(e).__name__}
    if isinstance(e, BusinessError):
        payload["code"] = e.code
        payload["http_status"] = e.http_status
    logger.error(f"{op} failed: {e}", extra={"extra": payload})


def openai_stream(
    model: Union[ModelDescriptor, str, None],
    system_prompt: str,
    key: Optional[str],
    messages: Sequence[MessageLike],
) -> ChatStream:
    """发起流式对话，返回逐段产出字节的 ChatStream。

    Args:
        model: 模型描述或模型 ID，为空时使用配置中的 default_model
        system_prompt: 插在消息最前面的 system 提示词
        key: OpenAI API 密钥，为空时使用配置中的 OPENAI_API_KEY
        messages: 之前的对话消息（按时间顺序）

    Raises:
        各种 domain.exceptions 中定义的异常
    """
    if isinstance(model, ModelDescriptor):
        descriptor = model
    else:
        descriptor = get_model(model or settings.default_model)
    try:
        return ChatStreamRelay(settings).stream(descriptor, system_prompt, key, messages)
    except Exception as e:
        _log_failure("openai_stream", e)
        raise


def openai_embeddings(key: Optional[str], message: MessageLike) -> Any:
    """获取单条消息内容的 embedding，返回上游原始 JSON。"""
    try:
        return EmbeddingClient(settings).create(key, message)
    except Exception as e:
        _log_failure("openai_embeddings", e)
        raise


def pinecone_query(query: str, params: Optional[VectorQueryParams] = None) -> Any:
    """查询 Pinecone，params 缺省时从配置构造。"""
    try:
        target = params or VectorQueryParams.from_settings(settings)
        return VectorQueryClient(settings).query(target, query)
    except Exception as e:
        _log_failure("pinecone_query", e)
        raise


__all__ = [
    "openai_stream",
    "openai_embeddings",
    "pinecone_query",
    "create_system_prompt",
]
