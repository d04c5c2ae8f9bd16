"""对话、模型与向量检索参数的数据模型。

本模块定义了各适配器之间共享的标准数据结构：

- ChatMessage: 一条对话消息（system/user/assistant），原样转发给上游。
- ModelDescriptor: 上游模型描述，本层只关心其 id。
- VectorQueryParams: 指定 Pinecone 部署（index/environment）与鉴权密钥。

所有结构都是按次构造、用完即弃的，不做持久化。
"""

from dataclasses import dataclass
from typing import Any, Dict, Literal, Mapping, Optional, Union


# 与 OpenAI chat/completions 的 role 字段一一对应
Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    """一条对话消息。

    - role: 消息角色。
    - content: 纯文本内容。
    """

    role: Role
    content: str

    def to_payload(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}


# 调用方也可以直接传 {"role": ..., "content": ...} 形式的字典
MessageLike = Union[ChatMessage, Mapping[str, Any]]


def message_to_payload(message: MessageLike) -> Dict[str, Any]:
    """把 ChatMessage 或等价字典转换成请求体中的 message。

    字典按原样转发（浅拷贝），不裁剪额外字段。
    """

    if isinstance(message, ChatMessage):
        return message.to_payload()
    return dict(message)


def message_content(message: MessageLike) -> str:
    if isinstance(message, ChatMessage):
        return message.content
    return message["content"]


@dataclass(frozen=True)
class ModelDescriptor:
    """上游模型描述。

    - id: 发送给上游的模型 ID，例如 "gpt-3.5-turbo"。
    - name: 展示名称。
    - max_length: 建议的最大输入字符数。
    - token_limit: 模型上下文 token 上限。
    """

    id: str
    name: str = ""
    max_length: int = 12000
    token_limit: int = 4000


@dataclass(frozen=True)
class VectorQueryParams:
    """Pinecone 查询的目标部署。

    index 与 environment 用于拼接请求 URL，api_key 放入 Api-Key 请求头。
    """

    index: str
    environment: str
    api_key: str

    @classmethod
    def from_settings(cls, cfg: Optional[Any] = None) -> "VectorQueryParams":
        """从配置构造查询参数，缺失任一字段时抛出 ValidationError。"""

        from relay_core.config.settings import settings
        from relay_core.domain.exceptions import ValidationError

        cfg = cfg or settings
        index = getattr(cfg, "pinecone_index", None)
        environment = getattr(cfg, "pinecone_environment", None)
        api_key = getattr(cfg, "pinecone_api_key", None)
        if not (index and environment and api_key):
            raise ValidationError(
                code="MISSING_PINECONE_CONFIG",
                message="PINECONE_INDEX, PINECONE_ENVIRONMENT and PINECONE_API_KEY must be set",
            )
        return cls(index=index, environment=environment, api_key=api_key)
