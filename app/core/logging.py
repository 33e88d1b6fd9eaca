import sys
import json
import logging
from loguru import logger as loguru_logger

from app.core.config import settings


class CloudLoggingSink:
    """
    Sink that writes Loguru records as Cloud Logging compatible JSON lines
    """
    def __init__(self):
        self.env = settings.ENVIRONMENT
        self.service_name = settings.PROJECT_NAME

    def write(self, message):
        record = message.record

        # Basic structure required by Cloud Logging
        cloud_log = {
            "severity": record["level"].name,
            "time": record["time"].isoformat(),
            "message": record["message"],
            "logger": record["name"],
            "logging.googleapis.com/labels": {
                "environment": self.env,
                "service": self.service_name
            }
        }

        # Fields attached with logger.bind(...)
        for k, v in record["extra"].items():
            cloud_log[k] = v

        if record["exception"] is not None:
            exc_type, exc_value, _ = record["exception"]
            cloud_log["exception"] = f"{exc_type.__name__}: {exc_value}" if exc_type else None

        print(json.dumps(cloud_log, default=str), file=sys.stderr)


class InterceptHandler(logging.Handler):
    """Route records from the standard logging module into Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller that originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging() -> None:
    """Configure Loguru sinks and take over the standard logging handlers."""
    loguru_logger.remove()

    if settings.LOG_JSON:
        loguru_logger.add(CloudLoggingSink().write, level=settings.LOG_LEVEL)
    else:
        loguru_logger.add(
            sys.stderr,
            level=settings.LOG_LEVEL,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> - {name} - <level>{level}</level> - {message}",
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = [InterceptHandler()]
        logging.getLogger(name).propagate = False


# Export the logger
logger = loguru_logger
