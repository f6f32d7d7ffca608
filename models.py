"""Pydantic 请求/响应模型"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SftpRequestParams(CamelModel):
    """一次请求解析后的参数 (键名与请求中的 camelCase 一致)"""

    host: str = "localhost"
    port: int = 22
    username: str = "sftpuser"
    password: str = "password"
    operation: str = "listFiles"
    path: str = "."
    upload_path: str = "uploaded_file.txt"
    content: str = "This is a test file uploaded from Azure Function!"
    download_path: Optional[str] = None


class RemoteFileEntry(CamelModel):
    name: str
    full_name: str
    size: int
    last_modified: datetime
    is_directory: bool


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    TRANSPORT_ERROR = "transport_error"


class OperationOutcome(BaseModel):
    """操作结果，由 HTTP 层按 kind 映射为状态码"""

    kind: OutcomeKind
    payload: dict[str, Any] = Field(default_factory=dict)
    message: str = ""
    stack_trace: Optional[str] = None

    @classmethod
    def success(cls, payload: dict[str, Any]) -> "OperationOutcome":
        return cls(kind=OutcomeKind.SUCCESS, payload=payload)

    @classmethod
    def validation_error(cls, message: str) -> "OperationOutcome":
        return cls(kind=OutcomeKind.VALIDATION_ERROR, message=message)

    @classmethod
    def not_found(cls, message: str) -> "OperationOutcome":
        return cls(kind=OutcomeKind.NOT_FOUND, message=message)

    @classmethod
    def transport_error(cls, message: str, stack_trace: Optional[str] = None) -> "OperationOutcome":
        return cls(kind=OutcomeKind.TRANSPORT_ERROR, message=message, stack_trace=stack_trace)

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS


class ErrorResponse(CamelModel):
    status: str = "error"
    message: str
    stack_trace: Optional[str] = None
