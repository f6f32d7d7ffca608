#!/usr/bin/env python3
"""
SFTP HTTP Trigger - 通过 HTTP 请求代理 SFTP 文件操作
每个请求建立一条独立的 SFTP 连接，执行 list / upload / download 后断开
"""

import asyncio
import hmac
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from config import Settings, get_settings
from models import ErrorResponse, OperationOutcome, OutcomeKind
from sftp import SftpRequestHandler

logger = logging.getLogger("sftp_trigger")


def configure_logging(level: str):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("paramiko").setLevel(logging.WARNING)


# ============ FastAPI 应用 ============

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    logger.info("SFTP HTTP Trigger 已启动")
    yield


app = FastAPI(title="SFTP HTTP Trigger", lifespan=lifespan)


def get_handler(settings: Settings = Depends(get_settings)) -> SftpRequestHandler:
    return SftpRequestHandler(settings, logger=logger)


def is_authorized(request: Request, settings: Settings) -> bool:
    """配置了 function key 时，要求 ?code= 或 x-functions-key 头"""
    if not settings.function_key:
        return True
    supplied: Optional[str] = request.headers.get("x-functions-key") or request.query_params.get("code")
    if not supplied:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), settings.function_key.encode("utf-8"))


def first_query_values(request: Request) -> dict[str, str]:
    """重复的查询参数只取第一个值"""
    return {key: request.query_params.getlist(key)[0] for key in request.query_params.keys()}


def to_response(outcome: OperationOutcome):
    if outcome.kind == OutcomeKind.SUCCESS:
        return JSONResponse(status_code=200, content=outcome.payload)
    if outcome.kind == OutcomeKind.VALIDATION_ERROR:
        return PlainTextResponse(outcome.message, status_code=400)
    if outcome.kind == OutcomeKind.NOT_FOUND:
        return PlainTextResponse(outcome.message, status_code=404)
    error = ErrorResponse(message=outcome.message, stack_trace=outcome.stack_trace)
    return JSONResponse(status_code=500, content=error.model_dump(by_alias=True, exclude_none=True))


# ============ API 路由 ============

@app.get("/api/health")
async def api_health():
    return {"status": "ok"}


@app.api_route("/api/SftpHttpTrigger", methods=["GET", "POST"])
async def api_sftp_trigger(
    request: Request,
    settings: Settings = Depends(get_settings),
    handler: SftpRequestHandler = Depends(get_handler),
):
    """处理一次 SFTP 请求 (参数来自 JSON body 或查询字符串)"""
    logger.info("收到 SFTP 请求: %s %s", request.method, request.url.path)
    if not is_authorized(request, settings):
        return PlainTextResponse("Unauthorized", status_code=401)

    raw_body = await request.body()
    query = first_query_values(request)
    # paramiko 是阻塞调用，放到线程中执行
    outcome = await asyncio.to_thread(handler.handle, raw_body, query)
    return to_response(outcome)


# ============ 启动入口 ============
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=7071)
