"""Span helpers for the policy facade.

traced() wraps the async PolicyService methods. Only allowlisted call
arguments become span attributes, whether passed by position or keyword.
"""

import inspect
from collections.abc import Awaitable, Callable
from enum import Enum
from functools import wraps
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

T = TypeVar("T")

# Argument names recorded as "policy.<name>". Change sets, entity
# snapshots and credentials are never recorded.
RECORDED_ARGUMENTS = frozenset(
    {
        "kind",
        "operation",
        "new_status",
        "conseiller_id",
        "site_id",
        "site_ids",
        "target_region_id",
    }
)


def _attribute_value(value: Any) -> Any:
    match value:
        case Enum():
            return str(value.value)
        case bool() | int() | float() | str():
            return value
        case set() | frozenset() | list() | tuple():
            return sorted(str(v) for v in value)
    return None


def _record_arguments(span: trace.Span, signature: inspect.Signature, args, kwargs) -> None:
    try:
        bound = signature.bind(*args, **kwargs)
    except TypeError:
        # The call itself raises the same error.
        return
    for name, value in bound.arguments.items():
        if name == "principal":
            span.set_attribute("policy.principal_id", value.id)
            span.set_attribute("policy.principal_role", str(value.role.value))
        elif name in RECORDED_ARGUMENTS:
            attribute = _attribute_value(value)
            if attribute is not None:
                span.set_attribute(f"policy.{name}", attribute)


def traced(
    operation_name: str | None = None,
    attributes: dict | None = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator that runs a coroutine function inside its own span.

    Args:
        operation_name: Span name (defaults to module.funcname).
        attributes: Fixed attributes set on every span.

    Raises:
        TypeError: The decorated function is not a coroutine function.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced() wraps coroutine functions only, got {func!r}")
        span_name = operation_name or f"{func.__module__}.{func.__name__}"
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            tracer = trace.get_tracer(__name__)
            with tracer.start_as_current_span(
                span_name, record_exception=False, set_status_on_exception=False
            ) as span:
                for key, value in (attributes or {}).items():
                    span.set_attribute(key, value)
                _record_arguments(span, signature, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Add attributes to the current span."""
    span = trace.get_current_span()
    if span and span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(key, value)


def add_span_event(name: str, attributes: dict | None = None) -> None:
    """Add an event to the current span."""
    span = trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name, attributes=attributes or {})
