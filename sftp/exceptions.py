"""SFTP 相关异常"""


class SftpError(Exception):
    """所有 SFTP 错误的基类"""


class SftpConnectionError(SftpError):
    """连接或认证失败"""


class SftpSessionError(SftpError):
    """会话状态不正确 (例如尚未连接)"""
