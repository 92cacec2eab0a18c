"""OpenTelemetry and structlog integration for speaker token lifecycle.

Spans carry ``speaker_tokens.*`` attributes describing the token domain:
which store backend ran, how a verification ended, how many records a
cleanup purged or a migration imported. Token values and secrets never
become attributes or log fields.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, ParamSpec, TypeVar

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from .errors import TokenLifecycleError

if TYPE_CHECKING:
    from collections.abc import Generator

    from .config import TelemetryConfig

P = ParamSpec("P")
T = TypeVar("T")

LOGGER_NAME = "speaker-tokens"
TRACER_VERSION = "0.1.0"

# Span attribute keys
ATTR_BACKEND = "speaker_tokens.store.backend"
ATTR_OUTCOME = "speaker_tokens.outcome"
ATTR_PURGED = "speaker_tokens.purged"
ATTR_MIGRATED = "speaker_tokens.migrated"
ATTR_VERSION = "speaker_tokens.version"
ATTR_ERROR_CODE = "speaker_tokens.error.code"

AttributeValue = str | bool | int | float

_tracer: trace.Tracer | None = None


def get_tracer() -> trace.Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(LOGGER_NAME, TRACER_VERSION)
    return _tracer


def get_logger(component: str | None = None) -> structlog.BoundLogger:
    """Structured logger for one component (``"sqlite_store"``, ...)."""
    if component:
        return structlog.get_logger(LOGGER_NAME, component=component)
    return structlog.get_logger(LOGGER_NAME)


def configure_telemetry(config: TelemetryConfig) -> None:
    """Set up JSON logging at the configured level and the tracer.

    Every log line is stamped with ``service``. With tracing disabled the
    tracer becomes a no-op, so instrumented calls cost nothing.
    """
    global _tracer

    service_name = config.service_name

    def add_service(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[config.log_level]
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if config.enabled:
        _tracer = trace.get_tracer(service_name, TRACER_VERSION)
    else:
        _tracer = trace.NoOpTracer()


def attribute_value(value: Any) -> AttributeValue:
    """Span-safe form of ``value``.

    Primitives pass through; anything else (a verification outcome, say)
    is recorded by its type name.
    """
    if isinstance(value, (str, bool, int, float)):
        return value
    return type(value).__name__


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run a block inside a span.

    Package errors additionally tag the span with their stable error code.
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            span.set_attribute(key, attribute_value(value))
        try:
            yield span
        except Exception as e:
            if isinstance(e, TokenLifecycleError):
                span.set_attribute(ATTR_ERROR_CODE, e.code)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise


def traced(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
    result_attribute: str | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Trace every call of the decorated function.

    Args:
        name: Span name, e.g. ``"session_store.cleanup_expired"``.
        attributes: Fixed attributes set on every span, such as the store
            backend.
        result_attribute: If given, the return value is recorded under this
            key (a purge count, an outcome kind).
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with trace_operation(name, attributes=attributes) as span:
                result = func(*args, **kwargs)
                if result_attribute:
                    span.set_attribute(result_attribute, attribute_value(result))
                return result

        return wrapper

    return decorator
