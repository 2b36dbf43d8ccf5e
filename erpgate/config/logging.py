"""Structured logging configuration using structlog."""

import logging
import sys

import structlog

SERVICE_NAME = "erpgate"

# Events from these loggers form the audit trail and are tagged as such
_AUDIT_LOGGERS = frozenset({"erpgate.audit"})


def add_service_context(service: str) -> structlog.types.Processor:
    """Processor stamping every event with the service name and log stream.

    Gate decisions land in the same sink as the proxied app's logs, so each
    event carries ``service`` and ``stream`` (``audit`` or ``app``).
    """

    def processor(
        logger: object, method_name: str, event_dict: structlog.types.EventDict
    ) -> structlog.types.EventDict:
        event_dict.setdefault("service", service)
        stream = "audit" if event_dict.get("logger") in _AUDIT_LOGGERS else "app"
        event_dict.setdefault("stream", stream)
        return event_dict

    return processor


def setup_logging(log_level: str = "INFO", json_output: bool = False, service: str = SERVICE_NAME) -> None:
    """Configure structlog for the gate service."""
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_service_context(service),
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if json_output or not sys.stderr.isatty():
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # forward-auth checks hit on every proxied request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
