"""模型与请求常量配置。

本模块集中维护：

- 已知的 OpenAI 对话模型（id -> ModelDescriptor）。
- chat/completions 与 embeddings 请求中固定不变的生成参数。
- Pinecone 查询请求体中的固定字段。

上层只传模型 id，具体描述由这里统一给出，便于后续新增模型。"""

from typing import Mapping

from relay_core.domain.models import ModelDescriptor


OPENAI_MODELS: Mapping[str, ModelDescriptor] = {
    "gpt-3.5-turbo": ModelDescriptor(
        id="gpt-3.5-turbo",
        name="GPT-3.5",
        max_length=12000,
        token_limit=4000,
    ),
    "gpt-4": ModelDescriptor(
        id="gpt-4",
        name="GPT-4",
        max_length=24000,
        token_limit=8000,
    ),
    "gpt-4-32k": ModelDescriptor(
        id="gpt-4-32k",
        name="GPT-4-32K",
        max_length=96000,
        token_limit=32000,
    ),
}

# chat/completions 固定参数
CHAT_MAX_TOKENS = 2000
CHAT_TEMPERATURE = 0
DONE_MARKER = "[DONE]"

# embeddings 固定模型
EMBEDDING_MODEL = "text-embedding-ada-002"

# Pinecone 查询固定请求体
PINECONE_NAMESPACE = "pdf-test"
PINECONE_TOP_K = 5


def get_model(model_id: str) -> ModelDescriptor:
    """根据 id 获取模型描述。

    本层把模型 id 视为不透明字符串：未登记的 id 也允许使用，
    此时返回一个以 id 作为名称、使用默认上限的描述。
    """

    known = OPENAI_MODELS.get(model_id)
    if known is not None:
        return known
    return ModelDescriptor(id=model_id, name=model_id)

