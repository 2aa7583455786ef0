"""
Centralized structured logging for the orders backend.

Loggers accept keyword context on every call:

    logger.info("Order created", order_id=123, total_cents=3257)

Production emits one JSON object per line; development prints a short
human-readable line. Request correlation IDs are attached by CorrelationIdFilter.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings
from shared.infrastructure.correlation import CorrelationIdFilter


SERVICE_NAME = "orders-api"


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


def _request_id(record: logging.LogRecord) -> str | None:
    request_id = getattr(record, "request_id", None)
    return request_id if request_id and request_id != "-" else None


class JsonFormatter(logging.Formatter):
    """One JSON document per record, for log aggregation in production."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "env": settings.environment,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        request_id = _request_id(record)
        if request_id:
            payload["request_id"] = request_id

        context = _context(record)
        if context:
            payload["context"] = context

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Compact single-line output for local development."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<8}"
        if self.use_color:
            level = f"{self.LEVEL_COLORS.get(record.levelname, '')}{level}{self.RESET}"

        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        parts = [clock, level]

        request_id = _request_id(record)
        if request_id:
            parts.append(f"[{request_id[:8]}]")
        parts.append(f"{record.name}: {record.getMessage()}")

        line = " ".join(parts)
        context = _context(record)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.Logger):
    """
    Logger whose level methods take keyword context.

    Standard keywords (exc_info, extra, stack_info, stacklevel) keep their
    usual meaning; everything else lands in record.context.
    """

    def _log(
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **context: Any,
    ) -> None:
        merged = dict(extra or {})
        merged["context"] = context
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=merged,
            stack_info=stack_info,
            stacklevel=stacklevel,
        )


logging.setLoggerClass(ContextLogger)


def setup_logging() -> None:
    """Configure the root logger. Call once at application startup."""
    level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    if settings.environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(use_color=sys.stdout.isatty()))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )


def get_logger(name: str) -> ContextLogger:
    """
    Get a context-aware logger.

    Usage:
        logger = get_logger(__name__)
        logger.warning("Stock clamped at zero", dish_id=9, requested=5)
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def mask_user_id(user_id: int | str | None) -> str:
    """Keep the first 2 characters of a user id for logs, mask the rest."""
    if user_id is None:
        return "<no-user>"
    user_str = str(user_id)
    return f"{user_str[:2] if len(user_str) > 2 else user_str[0]}***"


# Named loggers per area
api_logger = get_logger("orders_api")
orders_logger = get_logger("orders_api.orders")
inventory_logger = get_logger("orders_api.inventory")
tables_logger = get_logger("orders_api.tables")
security_audit_logger = get_logger("security.audit")


def audit_auth_event(
    event_type: str,
    user_id: int | str | None = None,
    success: bool = True,
    reason: str | None = None,
    **extra: Any,
) -> None:
    """
    Record a token or role check outcome on the security audit logger.

    Args:
        event_type: TOKEN_INVALID, TOKEN_EXPIRED, ROLE_DENIED, ...
        user_id: Acting user, masked before logging
        success: Failures are logged at WARNING
        reason: Failure detail, if any
    """
    security_audit_logger.log(
        logging.INFO if success else logging.WARNING,
        f"AUTH_AUDIT: {event_type}",
        event_type=event_type,
        user_id=mask_user_id(user_id) if user_id is not None else None,
        success=success,
        reason=reason,
        **extra,
    )
