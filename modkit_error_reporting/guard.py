# SPDX-License-Identifier: MIT
# Copyright (c) 2025 modkit contributors

"""Run feature event handlers so one failing handler cannot break the others."""

from collections.abc import Callable, Iterable
from functools import wraps
from typing import Any, TypeVar

from .error_manager import ErrorManager

T = TypeVar("T")


def post_and_catch(
    manager: ErrorManager,
    event_name: str,
    handler: Callable[..., T],
    *args: Any,
    default: Any = False,
    **kwargs: Any,
) -> T | Any:
    """Call ``handler`` and report any exception it raises.

    Args:
        manager: Error manager that receives failures
        event_name: Name of the event being handled, used in the report
        handler: Feature callback
        *args: Positional arguments for the handler
        default: Value returned when the handler fails
        **kwargs: Keyword arguments for the handler

    Returns:
        The handler's result, or ``default`` if it raised
    """
    try:
        return handler(*args, **kwargs)
    except Exception as e:
        manager.log_error_with_data(
            e,
            f"Caught an {type(e).__name__} in {event_name}",
            {"event": event_name},
        )
        return default


def dispatch(
    manager: ErrorManager,
    event_name: str,
    handlers: Iterable[Callable[..., Any]],
    *args: Any,
    default: Any = False,
) -> list[Any]:
    """Run each handler through ``post_and_catch``.

    Returns:
        One result per handler, ``default`` for handlers that failed
    """
    return [post_and_catch(manager, event_name, handler, *args, default=default) for handler in handlers]


def guarded_handler(manager: ErrorManager, event_name: str, default: Any = False):
    """Decorator form of ``post_and_catch``.

    Example:
        @guarded_handler(manager, "ChatEvent")
        def on_chat(message):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T | Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T | Any:
            return post_and_catch(manager, event_name, func, *args, default=default, **kwargs)

        return wrapper

    return decorator
