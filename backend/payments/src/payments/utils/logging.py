"""Logging setup and structured log helpers.

Every log line is prefixed with the correlation ID of the request that
produced it. The ID lives in a ContextVar, so it follows the request across
`await` points and into `run_in_threadpool` workers.

Usage:
    from payments.utils.logging import get_logger, log_webhook_event

    logger = get_logger(__name__)
    log_webhook_event(logger, "charge.succeeded", "evt_1", result="published")
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
NO_CORRELATION_ID = "no-correlation-id"

_request_id: ContextVar[str | None] = ContextVar("payments_correlation_id", default=None)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation ID to the current context, generating one if needed."""
    value = correlation_id or uuid.uuid4().hex
    _request_id.set(value)
    return value


def get_correlation_id() -> str | None:
    return _request_id.get()


def clear_correlation_id() -> None:
    _request_id.set(None)


def _current_id() -> str:
    return _request_id.get() or NO_CORRELATION_ID


class CorrelationIdFilter(logging.Filter):
    """Stamps each record with the active correlation ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _current_id()
        return True


class StructuredFormatter(logging.Formatter):
    """Prefixes formatted records with `[correlation-id]`."""

    def format(self, record: logging.LogRecord) -> str:
        cid = getattr(record, "correlation_id", None) or _current_id()
        return f"[{cid}] {super().format(record)}"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging for the service process.

    Installs a single stdout handler (Docker/Kubernetes compatible) using
    the structured formatter, replacing any previously configured handlers.

    Args:
        level: Log level name or number (e.g. "INFO", logging.DEBUG)
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())

    logging.basicConfig(level=level, handlers=[handler], force=True)

    for noisy in ("pika", "stripe"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the named logger with a CorrelationIdFilter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def _emit(
    logger: logging.Logger,
    level: int,
    headline: str,
    fields: dict[str, Any],
    shown: dict[str, str],
) -> None:
    """Log `headline | label=value | ...`; all non-empty fields go in `extra`."""
    context = {key: value for key, value in fields.items() if value is not None and value != ""}
    parts = [headline]
    parts.extend(f"{label}={context[key]}" for key, label in shown.items() if key in context)
    logger.log(level, " | ".join(parts), extra=context)


def log_payment_operation(
    logger: logging.Logger,
    operation: str,
    *,
    order_id: str | None = None,
    session_id: str | None = None,
    amount_cents: int | None = None,
    currency: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a checkout operation.

    Logged at ERROR when `error` is given, INFO otherwise. Keyword fields are
    attached to the record and echoed in the message.

    Args:
        logger: Logger to write to
        operation: Operation name (e.g., "create_checkout_session")
        order_id: Order the operation is for
        session_id: Stripe checkout session ID
        amount_cents: Order total in minor units
        currency: ISO currency code
        error: Failure description
        **extra: Further fields, echoed after the named ones
    """
    fields: dict[str, Any] = {
        "operation": operation,
        "order_id": order_id,
        "session_id": session_id,
        "amount_cents": amount_cents,
        "currency": currency,
        "error": error,
        **extra,
    }
    shown = {key: key for key in fields if key != "operation"}
    level = logging.ERROR if error else logging.INFO
    _emit(logger, level, f"Payment operation: {operation}", fields, shown)


def log_webhook_event(
    logger: logging.Logger,
    event_type: str | None,
    event_id: str | None,
    *,
    order_id: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log one step of webhook handling.

    `result` is one of received, published, publish_failed, ignored or
    rejected. Failures log at ERROR, rejections at WARNING, the rest at INFO.
    """
    fields: dict[str, Any] = {
        "event_type": event_type,
        "event_id": event_id,
        "result": result,
        "order_id": order_id,
        "error": error,
        **extra,
    }
    if error:
        level = logging.ERROR
    elif result == "rejected":
        level = logging.WARNING
    else:
        level = logging.INFO
    _emit(
        logger,
        level,
        f"Webhook event: {event_type} ({event_id})",
        fields,
        {"result": "result", "order_id": "order", "error": "error"},
    )
