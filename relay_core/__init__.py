"""Relay Core 顶层包。

该包提供对接 OpenAI 与 Pinecone 的客户端集成层，
包括配置加载、领域模型、流式对话中继、embeddings、
向量检索与系统提示词组装等能力。
"""

from relay_core.api.service import (
    create_system_prompt,
    openai_embeddings,
    openai_stream,
    pinecone_query,
)

__all__ = ["openai_stream", "openai_embeddings", "pinecone_query", "create_system_prompt"]
