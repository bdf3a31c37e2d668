"""
File: app/core/logging.py
Description: 全局日志配置模块 (Loguru)

1. 接管标准库 logging (uvicorn / fastapi / sqlalchemy)，统一由 Loguru 输出
2. 控制台 Sink：开发环境彩色文本，LOG_JSON_FORMAT=true 时输出 JSON
3. 文件 Sink：按 LOG_ROTATION 轮转、LOG_RETENTION 保留 (LOG_FILE_ENABLED 控制)
4. 文本格式在行尾追加上下文字段 (request_id / user_id / post_id / comment_id)，
   request_id 由中间件 contextualize 注入，其余字段由各 Service bind

Created: 2026-10-17
"""

import logging
import sys
from pathlib import Path
from typing import Any

from loguru import logger

from app.core.config import settings

# 接管的标准库 logger 前缀
INTERCEPTED_PREFIXES = ("uvicorn", "fastapi", "sqlalchemy")

# 文本格式中追加到行尾的上下文字段 (按顺序)
CONTEXT_FIELDS = ("request_id", "user_id", "post_id", "comment_id")

_BASE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """
    标准库 LogRecord -> Loguru
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # 跳过 logging 模块自身的栈帧，定位到真正的调用位置
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def format_record(record: dict[str, Any]) -> str:
    """
    文本日志格式函数。
    示例: ... - Post created | request_id=0192... | user_id=0192... | post_id=0192...
    """
    extra = record["extra"]
    suffix = "".join(
        f" | <magenta>{field}={{extra[{field}]}}</magenta>"
        for field in CONTEXT_FIELDS
        if extra.get(field)
    )
    return _BASE_FORMAT + suffix + "\n{exception}"


def _intercept_stdlib() -> None:
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(settings.LOG_LEVEL)

    for name in list(logging.root.manager.loggerDict):
        if name.startswith(INTERCEPTED_PREFIXES):
            std_logger = logging.getLogger(name)
            std_logger.handlers = []
            std_logger.propagate = True

    # SQL 语句只在 DEBUG 模式下输出
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )


def _sink_options(**overrides: Any) -> dict[str, Any]:
    options: dict[str, Any] = {
        "level": settings.LOG_LEVEL,
        "enqueue": True,
        "backtrace": True,
        "diagnose": settings.LOG_DIAGNOSE,
    }
    if settings.LOG_JSON_FORMAT:
        options["serialize"] = True
    else:
        options["format"] = format_record
    options.update(overrides)
    return options


def setup_logging() -> None:
    """
    初始化日志配置，在应用 lifespan 启动阶段调用。
    """
    _intercept_stdlib()
    logger.remove()

    logger.add(sys.stdout, **_sink_options(colorize=not settings.LOG_JSON_FORMAT))

    if settings.LOG_FILE_ENABLED:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_dir / "blog_{time:YYYY-MM-DD}.log"),
            **_sink_options(
                rotation=settings.LOG_ROTATION,
                retention=settings.LOG_RETENTION,
                compression=settings.LOG_COMPRESSION,
            ),
        )

    logger.bind(
        environment=settings.ENVIRONMENT,
        json=settings.LOG_JSON_FORMAT,
        file_sink=settings.LOG_FILE_ENABLED,
    ).info("Logging configured")
