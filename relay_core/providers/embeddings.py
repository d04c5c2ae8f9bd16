"""OpenAI embeddings 适配器。

非流式：整个响应体读取完毕后再判断成败，成功时原样返回解析后的 JSON。
错误处理与流式对话保持一致（见 openai_http.raise_for_openai_error）。
"""

from typing import Any, Optional

import httpx

from relay_core.config.settings import settings
from relay_core.domain.exceptions import NetworkError, ResponseParseError
from relay_core.domain.models import MessageLike, message_content
from relay_core.infrastructure.logging.logger import logger
from relay_core.providers.openai_http import (
    api_host,
    build_headers,
    raise_for_openai_error,
    resolve_api_key,
)
from relay_core.providers.registry import EMBEDDING_MODEL


class EmbeddingClient:
    """OpenAI embeddings 客户端。"""

    name = "openai"

    def __init__(self, cfg=settings):
        self._settings = cfg

    def create(self, key: Optional[str], message: MessageLike) -> Any:
        api_key = resolve_api_key(key, self._settings)
        content = message_content(message)
        payload = {"model": EMBEDDING_MODEL, "input": content}
        logger.info(
            "embeddings.request",
            extra={"extra": {"model": EMBEDDING_MODEL, "chars": len(content or "")}},
        )
        try:
            with httpx.Client(timeout=getattr(self._settings, "http_timeout", None), trust_env=False) as client:
                resp = client.post(
                    f"{api_host(self._settings)}/v1/embeddings",
                    json=payload,
                    headers=build_headers(api_key, self._settings),
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e)) from e
        if resp.status_code != 200:
            raise_for_openai_error(resp)
        try:
            return resp.json()
        except ValueError as e:
            raise ResponseParseError(
                code="RESPONSE_PARSE_ERROR",
                message=f"Failed to parse response as JSON: {resp.text}",
                http_status=resp.status_code,
            ) from e
