"""Serverless 入口: 用 Mangum 包装 FastAPI 应用"""

from mangum import Mangum

from app import app, configure_logging
from config import get_settings

# lifespan 关闭，日志需要在这里配置
configure_logging(get_settings().log_level)

handler = Mangum(app, lifespan="off")

lambda_handler = handler
