"""运行配置 (环境变量 / .env)"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """请求参数的默认值以及连接相关设置"""

    default_host: str = "localhost"
    default_port: int = 22
    default_username: str = "sftpuser"
    default_password: str = "password"
    default_operation: str = "listFiles"
    default_path: str = "."
    default_upload_path: str = "uploaded_file.txt"
    default_upload_content: str = "This is a test file uploaded from Azure Function!"

    connect_timeout: float = 10
    # 连接建立后对所有操作生效
    operation_timeout: float = 300

    expose_stack_trace: bool = True
    function_key: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        values = {
            "default_host": os.getenv("SFTP_DEFAULT_HOST"),
            "default_port": os.getenv("SFTP_DEFAULT_PORT"),
            "default_username": os.getenv("SFTP_DEFAULT_USERNAME"),
            "default_password": os.getenv("SFTP_DEFAULT_PASSWORD"),
            "default_upload_path": os.getenv("SFTP_DEFAULT_UPLOAD_PATH"),
            "default_upload_content": os.getenv("SFTP_DEFAULT_UPLOAD_CONTENT"),
            "connect_timeout": os.getenv("SFTP_CONNECT_TIMEOUT"),
            "operation_timeout": os.getenv("SFTP_OPERATION_TIMEOUT"),
            "function_key": os.getenv("SFTP_FUNCTION_KEY") or None,
            "log_level": os.getenv("SFTP_LOG_LEVEL"),
        }
        # 空值 (KEY=) 视为未设置
        values = {k: v for k, v in values.items() if v is not None and v.strip() != ""}
        values["expose_stack_trace"] = _env_bool("SFTP_EXPOSE_STACK_TRACE", True)
        return cls(**values)


def get_settings() -> Settings:
    return Settings.from_env()
