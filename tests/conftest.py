"""Shared fixtures: an in-memory SFTP server and an app client wired to it."""

import logging
import posixpath
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app import app, get_handler
from config import Settings, get_settings
from models import RemoteFileEntry
from sftp import SftpConnectionError, SftpRequestHandler


class FakeSftpServer:
    """Holds remote files and records every session opened against it."""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.directories: set[str] = set()
        self.sessions: list["FakeSftpSession"] = []
        self.refuse_connections = False

    def session_factory(self, **kwargs) -> "FakeSftpSession":
        session = FakeSftpSession(self, **kwargs)
        self.sessions.append(session)
        return session


class FakeSftpSession:
    def __init__(self, server, host, port, username, password, connect_timeout, logger):
        self.server = server
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.connect_timeout = connect_timeout
        self.timeout = None
        self.connected = False
        self.disconnected = False

    def connect(self):
        if self.server.refuse_connections:
            raise SftpConnectionError(f"Failed to connect to {self.host}:{self.port}: refused")
        self.connected = True

    def set_timeout(self, seconds):
        self.timeout = seconds

    def _in_dir(self, name, path):
        parent = posixpath.dirname(name)
        return parent == ("" if path in (".", "") else path.rstrip("/"))

    def list_directory(self, path):
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        entries = []
        for name in sorted(self.server.directories):
            if self._in_dir(name, path):
                entries.append(RemoteFileEntry(
                    name=posixpath.basename(name), full_name="/home/sftpuser/" + name,
                    size=4096, last_modified=stamp, is_directory=True,
                ))
        for name, data in sorted(self.server.files.items()):
            if self._in_dir(name, path):
                entries.append(RemoteFileEntry(
                    name=posixpath.basename(name), full_name="/home/sftpuser/" + name,
                    size=len(data), last_modified=stamp, is_directory=False,
                ))
        return entries

    def exists(self, remote_path):
        return remote_path in self.server.files or remote_path in self.server.directories

    def upload_file(self, data, remote_path, overwrite=True):
        if not overwrite and remote_path in self.server.files:
            raise FileExistsError(remote_path)
        self.server.files[remote_path] = bytes(data)

    def download_file(self, remote_path):
        return self.server.files[remote_path]

    def disconnect(self):
        self.disconnected = True

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disconnect()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def server():
    return FakeSftpServer()


@pytest.fixture
def handler(settings, server):
    return SftpRequestHandler(
        settings,
        logger=logging.getLogger("tests"),
        session_factory=server.session_factory,
    )


@pytest.fixture
def client(settings, handler):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_handler] = lambda: handler
    yield TestClient(app)
    app.dependency_overrides.clear()
