"""SFTP 会话: 单个请求独占的一条 paramiko 连接"""

import io
import logging
import posixpath
import stat
from datetime import datetime, timezone
from typing import Optional

import paramiko

from models import RemoteFileEntry

from .exceptions import SftpConnectionError, SftpSessionError


class SftpSession:
    """
    封装 paramiko SSHClient + SFTPClient
    只使用密码认证，不读取本地密钥或 ssh-agent
    """

    def __init__(
        self,
        host: str,
        port: int = 22,
        username: str = None,
        password: str = None,
        connect_timeout: float = 10,
        logger: Optional[logging.Logger] = None,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.connect_timeout = connect_timeout
        self.logger = logger or logging.getLogger(__name__)
        self._client: Optional[paramiko.SSHClient] = None
        self._sftp: Optional[paramiko.SFTPClient] = None

    @property
    def connected(self) -> bool:
        return self._sftp is not None

    def connect(self):
        if self._sftp is not None:
            return

        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        self.logger.info("正在连接 SFTP 服务器 %s:%s ...", self.host, self.port)
        try:
            client.connect(
                self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                timeout=self.connect_timeout,
                allow_agent=False,
                look_for_keys=False,
            )
            sftp = client.open_sftp()
        except Exception as e:
            client.close()
            raise SftpConnectionError(
                f"Failed to connect to {self.host}:{self.port}: {e}"
            ) from e

        self._client = client
        self._sftp = sftp
        self.logger.info("已连接到 %s (用户 %s)", self.host, self.username)

    def _require_sftp(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            raise SftpSessionError("SFTP session is not connected")
        return self._sftp

    def set_timeout(self, seconds: float):
        self._require_sftp().get_channel().settimeout(seconds)

    def list_directory(self, path: str) -> list[RemoteFileEntry]:
        sftp = self._require_sftp()
        base = sftp.normalize(path)
        entries = []
        for attr in sftp.listdir_attr(path):
            entries.append(
                RemoteFileEntry(
                    name=attr.filename,
                    full_name=posixpath.join(base, attr.filename),
                    size=attr.st_size or 0,
                    last_modified=datetime.fromtimestamp(attr.st_mtime or 0, tz=timezone.utc),
                    is_directory=stat.S_ISDIR(attr.st_mode or 0),
                )
            )
        return entries

    def exists(self, remote_path: str) -> bool:
        try:
            self._require_sftp().stat(remote_path)
            return True
        except FileNotFoundError:
            return False

    def upload_file(self, data: bytes, remote_path: str, overwrite: bool = True):
        sftp = self._require_sftp()
        if not overwrite and self.exists(remote_path):
            raise FileExistsError(f"Remote file already exists: {remote_path}")
        sftp.putfo(io.BytesIO(data), remote_path, file_size=len(data))

    def download_file(self, remote_path: str) -> bytes:
        buffer = io.BytesIO()
        self._require_sftp().getfo(remote_path, buffer)
        return buffer.getvalue()

    def disconnect(self):
        """断开连接，可重复调用"""
        sftp, client = self._sftp, self._client
        self._sftp = None
        self._client = None
        if sftp is None and client is None:
            return
        try:
            if sftp is not None:
                sftp.close()
        except Exception as e:
            self.logger.warning("关闭 SFTP 通道失败: %s", e)
        finally:
            if client is not None:
                client.close()
        self.logger.info("已断开与 SFTP 服务器 %s 的连接", self.host)

    def __enter__(self) -> "SftpSession":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()
