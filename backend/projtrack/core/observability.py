"""
Observability Infrastructure

Structured logging and in-process decision counters for the authorization
and progress engines. Nothing here performs network I/O: counters live in
the default Prometheus registry and are exported by whatever process embeds
the core.
"""

import contextvars
import logging
import sys
import uuid
from typing import Any

import structlog
from prometheus_client import Counter

from .config import settings

# Context variables for correlation tracking
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
actor_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "actor_id", default=""
)

# Prometheus metrics
PERMISSION_DECISIONS = Counter(
    "projtrack_permission_decisions_total",
    "Permission decisions taken by the permission engine",
    ["resource", "action", "outcome"],
)

PROGRESS_UPDATES = Counter(
    "projtrack_progress_updates_total",
    "Progress update attempts handled by the ledger",
    ["outcome"],
)

HISTORY_DELETIONS = Counter(
    "projtrack_history_deletions_total",
    "Progress history entries deleted",
    ["outcome"],
)


class CorrelationIdProcessor:
    """Structlog processor to add correlation ID to all log entries."""

    def __call__(
        self, logger: Any, name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        correlation_id = correlation_id_var.get("")
        actor_id = actor_id_var.get("")

        if correlation_id:
            event_dict["correlation_id"] = correlation_id
        if actor_id:
            event_dict["actor_id"] = actor_id

        return event_dict


def setup_structured_logging() -> None:
    """Configure structured logging with JSON or console output."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        CorrelationIdProcessor(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if settings.LOG_FORMAT == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=settings.ENVIRONMENT == "local"
        )

    structlog.configure(
        processors=[
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route stdlib loggers (logging.getLogger(__name__)) through the same chain
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set correlation ID for request tracking."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str:
    """Get current correlation ID."""
    return correlation_id_var.get("")


def set_actor_id(actor_id: Any) -> None:
    """Bind the acting user's id to subsequent log lines."""
    actor_id_var.set(str(actor_id))


def record_permission_decision(resource: str, action: str, allowed: bool) -> None:
    if settings.ENABLE_METRICS:
        PERMISSION_DECISIONS.labels(
            resource=resource, action=action, outcome="allow" if allowed else "deny"
        ).inc()


def record_progress_update(outcome: str) -> None:
    if settings.ENABLE_METRICS:
        PROGRESS_UPDATES.labels(outcome=outcome).inc()


def record_history_deletion(outcome: str) -> None:
    if settings.ENABLE_METRICS:
        HISTORY_DELETIONS.labels(outcome=outcome).inc()


def bind_actor(actor_id: Any) -> str:
    """
    Bind ``actor_id`` for the current operation.

    Keeps the caller's correlation ID, minting one when none is set, and
    returns it.
    """
    set_actor_id(actor_id)
    return get_correlation_id() or set_correlation_id()
