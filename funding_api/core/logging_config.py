import logging
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from .config import get_settings


class UTCFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record.setdefault("app", settings.app_name)
        log_record.setdefault("service", settings.service_name)
        log_record.setdefault("module", record.name)
        log_record["level"] = record.levelname.lower()
        if "details" not in log_record:
            log_record["details"] = {}


settings = get_settings()
_configured = False


def _level() -> int:
    return getattr(logging, settings.log_level.upper(), logging.INFO)


def configure_logging() -> logging.Logger:
    global _configured
    root_logger = logging.getLogger()
    if _configured:
        # Uvicorn may have reattached its own handlers since the last call
        root_logger.setLevel(_level())
        _tune_library_loggers()
        return root_logger

    root_logger.setLevel(_level())
    root_logger.handlers.clear()

    formatter = UTCFormatter("%(timestamp)s %(level)s %(message)s")

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(_level())
    root_logger.addHandler(stream_handler)

    _tune_library_loggers()
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True
    return root_logger


def get_logger(module_name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(module_name)


def _tune_library_loggers() -> None:
    """Ensure third-party loggers forward to our root handler.

    Uvicorn config can override logger handlers/propagation during startup.
    We clear their handlers and enable propagation so our root stream handler
    formats everything (including access logs) as JSON. Safe to call multiple times.
    """
    level = _level()
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "uvicorn.asgi"):
        lib_logger = logging.getLogger(name)
        lib_logger.disabled = False
        lib_logger.setLevel(level if name != "uvicorn.access" else logging.INFO)
        lib_logger.handlers.clear()
        lib_logger.propagate = True

    # Outbound wallet lookups log every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
