"""SFTP 请求处理: 参数解析、连接、分派 list / upload / download"""

import codecs
import logging
import traceback
from typing import Callable, Mapping, Optional

from config import Settings
from models import OperationOutcome, SftpRequestParams

from .params import parse_body, resolve_params
from .session import SftpSession

# 按顺序检测 BOM，UTF-32 LE 的 BOM 以 UTF-16 LE 的 BOM 开头
_BOMS = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def decode_text(data: bytes) -> str:
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return data[len(bom):].decode(encoding, errors="replace")
    return data.decode("utf-8", errors="replace")


def text_length(text: str) -> int:
    """按 UTF-16 代码单元计数 (BMP 之外的字符计为 2)"""
    return len(text.encode("utf-16-le")) // 2


def list_files(session: SftpSession, params: SftpRequestParams, logger: logging.Logger) -> OperationOutcome:
    logger.info("列出目录: %s", params.path)
    entries = session.list_directory(params.path)
    return OperationOutcome.success({
        "files": [entry.model_dump(mode="json", by_alias=True) for entry in entries],
        "path": params.path,
    })


def upload(session: SftpSession, params: SftpRequestParams, logger: logging.Logger) -> OperationOutcome:
    content_bytes = params.content.encode("utf-8")
    logger.info("上传文件到 %s, 共 %d 字节", params.upload_path, len(content_bytes))
    session.upload_file(content_bytes, params.upload_path, overwrite=True)
    logger.info("上传完成")
    return OperationOutcome.success({
        "uploadedFile": params.upload_path,
        "contentLength": len(content_bytes),
    })


def download(session: SftpSession, params: SftpRequestParams, logger: logging.Logger) -> OperationOutcome:
    download_path = params.download_path
    logger.info("检查文件是否存在: %s", download_path)
    if not session.exists(download_path):
        return OperationOutcome.not_found(f"File not found: {download_path}")

    logger.info("开始下载 %s", download_path)
    data = session.download_file(download_path)
    content = decode_text(data)
    content_length = text_length(content)
    logger.info("下载完成: %d 字节, %d 个字符", len(data), content_length)
    # contentLength 为字符数 (与上传的字节数单位不同)，byteLength 为原始字节数
    return OperationOutcome.success({
        "fileName": download_path,
        "content": content,
        "contentLength": content_length,
        "byteLength": len(data),
    })


OPERATIONS: dict[str, Callable[[SftpSession, SftpRequestParams, logging.Logger], OperationOutcome]] = {
    "listfiles": list_files,
    "upload": upload,
    "download": download,
}


class SftpRequestHandler:
    """
    处理单个请求: 一个请求独占一个 SFTP 会话，返回前总是断开
    logger 与 session_factory 由调用方注入
    """

    def __init__(
        self,
        settings: Settings,
        logger: Optional[logging.Logger] = None,
        session_factory: Callable[..., SftpSession] = SftpSession,
    ):
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)
        self.session_factory = session_factory

    def handle(self, raw_body: bytes, query: Mapping[str, str]) -> OperationOutcome:
        try:
            params = resolve_params(parse_body(raw_body), query, self.settings)
            return self.run(params)
        except Exception as e:
            self.logger.error("SFTP 操作失败: %s", e, exc_info=True)
            return OperationOutcome.transport_error(
                str(e),
                traceback.format_exc() if self.settings.expose_stack_trace else None,
            )

    def validate(self, params: SftpRequestParams) -> Optional[OperationOutcome]:
        operation = params.operation.lower()
        if operation not in OPERATIONS:
            return OperationOutcome.validation_error(f"Unknown operation: {params.operation}")
        if operation == "download" and not params.download_path:
            return OperationOutcome.validation_error(
                "downloadPath parameter is required for download operation"
            )
        return None

    def run(self, params: SftpRequestParams) -> OperationOutcome:
        rejected = self.validate(params)
        if rejected is not None:
            return rejected

        operation = OPERATIONS[params.operation.lower()]
        session = self.session_factory(
            host=params.host,
            port=params.port,
            username=params.username,
            password=params.password,
            connect_timeout=self.settings.connect_timeout,
            logger=self.logger,
        )
        with session:
            session.set_timeout(self.settings.operation_timeout)
            outcome = operation(session, params, self.logger)

        if outcome.ok:
            outcome.payload["status"] = "success"
        return outcome
