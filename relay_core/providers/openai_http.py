"""OpenAI 请求的公共部分：鉴权请求头与错误响应解析。

ChatStreamRelay 与 EmbeddingClient 共用这里的逻辑，保证两者对
非 200 响应的处理完全一致：

- 响应体是带 error 对象的 JSON：抛出 ProviderError，四个字段原样保留。
- 其他情况：抛出 ApiError，消息里带上原始响应体或状态描述。
"""

import json
from typing import Any, Dict, Optional

from relay_core.domain.exceptions import ApiError, ProviderError, ValidationError


def resolve_api_key(key: Optional[str], cfg: Any) -> str:
    """优先使用调用方传入的 key，否则回退到配置中的 OPENAI_API_KEY。"""

    api_key = key or getattr(cfg, "openai_api_key", None)
    if not api_key:
        raise ValidationError(code="MISSING_API_KEY", message="OPENAI_API_KEY not set")
    return api_key


def build_headers(api_key: str, cfg: Any) -> Dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }
    organization = getattr(cfg, "openai_organization", None)
    if organization:
        headers["OpenAI-Organization"] = organization
    return headers


def api_host(cfg: Any) -> str:
    return (getattr(cfg, "openai_api_host", None) or "https://api.openai.com").rstrip("/")


def raise_for_openai_error(resp) -> None:
    """把非 200 响应转换为异常。调用前响应体必须已经读取完毕。"""

    body = resp.text
    try:
        result = json.loads(body) if body else None
    except ValueError:
        result = None

    error = result.get("error") if isinstance(result, dict) else None
    if isinstance(error, dict):
        raise ProviderError(
            message=error.get("message"),
            type=error.get("type"),
            param=error.get("param"),
            code=error.get("code"),
            http_status=resp.status_code,
        )
    raise ApiError(
        code="API_ERROR",
        message=f"OpenAI API returned an error: {body or resp.reason_phrase}",
        http_status=resp.status_code,
    )
