"""Pinecone 向量检索适配器。

请求 URL 由 index / environment 拼接而成，query 作为路径片段附加在末尾；
请求体固定为 topK=5、返回向量值、不返回 metadata、命名空间 pdf-test。

响应处理区分两种解析失败：
- 空响应体："Failed to parse response as JSON: response is empty"
- 非 JSON 响应体：消息中附带原始文本，便于排查
"""

import json
from typing import Any, Dict

import httpx

from relay_core.config.settings import settings
from relay_core.domain.exceptions import ApiError, NetworkError, ResponseParseError
from relay_core.domain.models import VectorQueryParams
from relay_core.infrastructure.logging.logger import logger
from relay_core.providers.registry import PINECONE_NAMESPACE, PINECONE_TOP_K


class VectorQueryClient:
    """Pinecone 查询客户端。"""

    name = "pinecone"

    def __init__(self, cfg=settings):
        self._settings = cfg

    def build_url(self, params: VectorQueryParams, query: str) -> str:
        project = getattr(self._settings, "pinecone_project_id", None) or "2c91f9c"
        return f"https://{params.index}-{project}.svc.{params.environment}.pinecone.io/{query}"

    @staticmethod
    def build_payload() -> Dict[str, Any]:
        return {
            "includeValues": True,
            # Pinecone 接受字符串形式的布尔值
            "includeMetadata": "false",
            "namespace": PINECONE_NAMESPACE,
            "topK": PINECONE_TOP_K,
        }

    def query(self, params: VectorQueryParams, query: str) -> Any:
        url = self.build_url(params, query)
        logger.info(
            "pinecone.query",
            extra={"extra": {"index": params.index, "environment": params.environment, "path": query}},
        )
        try:
            with httpx.Client(timeout=getattr(self._settings, "http_timeout", None), trust_env=False) as client:
                resp = client.post(
                    url,
                    json=self.build_payload(),
                    headers={
                        "accept": "application/json",
                        "content-type": "application/json",
                        "Api-Key": params.api_key,
                    },
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e)) from e

        if resp.status_code != 200:
            raise ApiError(
                code="API_ERROR",
                message=f"Pinecone API returned an error: {resp.text or resp.reason_phrase}",
                http_status=resp.status_code,
            )

        response_text = resp.text
        # 只记录长度，向量值与检索结果不进日志
        logger.info(
            "pinecone.response",
            extra={"extra": {"status": resp.status_code, "chars": len(response_text)}},
        )
        if not response_text:
            raise ResponseParseError(
                code="RESPONSE_PARSE_ERROR",
                message="Failed to parse response as JSON: response is empty",
            )
        try:
            return json.loads(response_text)
        except ValueError as e:
            raise ResponseParseError(
                code="RESPONSE_PARSE_ERROR",
                message=f"Failed to parse response as JSON: {response_text}",
            ) from e
