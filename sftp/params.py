"""请求参数解析: JSON body > 查询字符串 > 默认值"""

import json
from typing import Any, Mapping, Optional

from config import Settings
from models import SftpRequestParams


def parse_body(raw: bytes) -> Optional[dict[str, Any]]:
    """解析请求体；空请求体返回 None"""
    if not raw or not raw.strip():
        return None
    data = json.loads(raw)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def get_parameter_value(
    body: Optional[Mapping[str, Any]], query: Mapping[str, str], name: str
) -> Optional[str]:
    if body is not None and body.get(name) is not None:
        return _to_text(body[name])
    return query.get(name)


def resolve_params(
    body: Optional[Mapping[str, Any]],
    query: Mapping[str, str],
    settings: Settings,
) -> SftpRequestParams:
    """
    每个字段独立解析，端口格式错误时抛出 pydantic.ValidationError
    """
    defaults = {
        "host": settings.default_host,
        "port": str(settings.default_port),
        "username": settings.default_username,
        "password": settings.default_password,
        "operation": settings.default_operation,
        "path": settings.default_path,
        "uploadPath": settings.default_upload_path,
        "content": settings.default_upload_content,
        "downloadPath": None,
    }
    values = {}
    for name, default in defaults.items():
        value = get_parameter_value(body, query, name)
        values[name] = value if value is not None else default
    return SftpRequestParams.model_validate(values)
