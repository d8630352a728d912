"""
Structured logging for the trigger handler.

Every line is rendered as JSON to stdout and carries the service name plus
whatever is bound through ``structlog.contextvars``: the Lambda request ID
as ``correlation_id`` for the whole invocation, and ``event_id`` /
``event_name`` while a stream record is being handled.
"""

import logging
import sys
import time

import structlog


def configure_logging(service_name: str, level: str = "INFO") -> None:
    """Route structlog through stdlib logging at ``level``."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _service_name(service_name),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def _service_name(service_name: str):
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


class Timer:
    """Wall-clock timer for the invocation summary line."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args) -> None:
        self._end = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        return round((self._end - self._start) * 1000, 2)
