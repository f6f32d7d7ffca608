"""SFTP 文件操作"""

from .exceptions import SftpConnectionError, SftpError, SftpSessionError
from .operations import OPERATIONS, SftpRequestHandler
from .session import SftpSession

__all__ = [
    "OPERATIONS",
    "SftpConnectionError",
    "SftpError",
    "SftpRequestHandler",
    "SftpSession",
    "SftpSessionError",
]
