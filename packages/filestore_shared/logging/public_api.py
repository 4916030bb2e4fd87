"""Logging instrumentation for public API methods.

``public_api_logged`` wraps one public method so every call emits a
structured invocation record and a completion record carrying outcome,
duration, and error summaries. Exceptions are re-raised unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping

from . import fields
from .context import log_context


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str
    principal: str | None
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed public API invocation."""

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str]
    error_categories: list[str]


class PublicApiLoggingConcern:
    """Emit invocation and completion log records for public API calls."""

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        """Emit standardized structured invocation-start log."""
        with log_context(_invocation_log_context(context)):
            self._logger.info("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        """Emit standardized structured completion log."""
        payload = _invocation_log_context(context.invocation)
        payload.update(
            {
                fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                fields.SUCCESS: context.success,
                fields.DURATION_MS: context.duration_ms,
                fields.ERRORS: context.errors,
            }
        )
        if context.error_categories:
            payload[fields.ERROR_CATEGORY] = context.error_categories[0]
        with log_context(payload):
            if context.success:
                self._logger.info("Public API completion")
            else:
                self._logger.warning("Public API completion")


def public_api_logged(
    *,
    logger: Any,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    principal_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one keyword-only public API method with structured logging."""
    concern = PublicApiLoggingConcern(logger=logger)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            references = {
                name: str(kwargs[name])
                for name in id_fields
                if kwargs.get(name) not in (None, "")
            }
            invocation = InvocationContext(
                component_id=component_id,
                api_name=method_name,
                principal=_first_present(kwargs, principal_fields),
                references=references,
            )
            concern.on_invocation(invocation)

            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                concern.on_completion(
                    CompletionContext(
                        invocation=invocation,
                        success=False,
                        duration_ms=_elapsed_ms(started),
                        errors=_exception_errors(exc),
                        error_categories=_exception_categories(exc),
                    )
                )
                raise

            concern.on_completion(
                CompletionContext(
                    invocation=invocation,
                    success=True,
                    duration_ms=_elapsed_ms(started),
                    errors=[],
                    error_categories=[],
                )
            )
            return result

        return wrapper

    return decorator


def _elapsed_ms(started: float) -> float:
    """Return elapsed wall time in milliseconds since ``started``."""
    return round((perf_counter() - started) * 1000.0, 3)


def _first_present(kwargs: Mapping[str, Any], names: tuple[str, ...]) -> str | None:
    """Return the first non-empty keyword value among ``names``."""
    for name in names:
        value = kwargs.get(name)
        if value not in (None, ""):
            return str(value)
    return None


def _exception_errors(exc: Exception) -> list[str]:
    """Return safe one-line error summaries for one raised exception."""
    details = getattr(exc, "details", None)
    if isinstance(details, tuple) and details:
        summaries: list[str] = []
        for item in details:
            code = getattr(item, "code", None)
            message = getattr(item, "message", None)
            if message in (None, ""):
                continue
            summaries.append(str(message) if code in (None, "") else f"{code}: {message}")
        if summaries:
            return summaries
    return [f"{type(exc).__name__}: {exc}"]


def _exception_categories(exc: Exception) -> list[str]:
    """Infer normalized error categories from one raised exception."""
    details = getattr(exc, "details", None)
    if not isinstance(details, tuple) or not details:
        return ["internal"]
    categories: list[str] = []
    for item in details:
        raw = getattr(item, "category", None)
        category = getattr(raw, "value", raw)
        if category in (None, ""):
            continue
        categories.append(str(category))
    return categories or ["internal"]


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    """Build common structured fields for one invocation event."""
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        fields.PRINCIPAL: context.principal,
        **context.references,
    }
