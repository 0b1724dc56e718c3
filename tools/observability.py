"""Observability helpers for instrumenting collaborator calls."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from wardrobe_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
F = TypeVar("F", bound=Callable[..., Any])


def _preview_kwargs(kwargs: dict, max_keys: int = 6) -> dict:
    preview: dict = {}
    for idx, (key, value) in enumerate(kwargs.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        if isinstance(value, (bytes, bytearray)):
            value = f"<{len(value)} bytes>"
        preview[key] = value
    return redact_for_log(preview)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def instrument_call(call_name: str) -> Callable[[F], F]:
    """Wrap a sync or async callable to emit started/completed/failed events."""

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                correlation_id = ensure_correlation_id()
                start = time.perf_counter()
                log_event(
                    LOGGER,
                    logging.INFO,
                    "call_started",
                    call=call_name,
                    correlation_id=correlation_id,
                    kwargs=_preview_kwargs(kwargs),
                )
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    log_event(
                        LOGGER,
                        logging.ERROR,
                        "call_failed",
                        call=call_name,
                        correlation_id=correlation_id,
                        duration_ms=_elapsed_ms(start),
                        exc_info=True,
                    )
                    raise
                log_event(
                    LOGGER,
                    logging.INFO,
                    "call_completed",
                    call=call_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                )
                return result

            return async_wrapper  # type: ignore[return-value]

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.INFO,
                "call_started",
                call=call_name,
                correlation_id=correlation_id,
                kwargs=_preview_kwargs(kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "call_failed",
                    call=call_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "call_completed",
                call=call_name,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["instrument_call"]
