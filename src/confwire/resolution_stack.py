from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from confwire.exceptions import CyclicDependencyError

# Keys currently being resolved in this execution context, outermost first
_resolution_stack: ContextVar[list[Any] | None] = ContextVar(
    "confwire_resolution_stack",
    default=None,
)


def _get_resolution_stack() -> list[Any]:
    stack = _resolution_stack.get()
    if stack is None:
        stack = []
        _resolution_stack.set(stack)
    return stack


@contextmanager
def resolution_frame(key: Any) -> Iterator[None]:
    """Track ``key`` for the duration of its resolution.

    Raises:
        CyclicDependencyError: If ``key`` is already being resolved further up
            the current chain.

    """
    stack = _get_resolution_stack()
    if key in stack:
        raise CyclicDependencyError(key, list(stack))
    stack.append(key)
    try:
        yield
    finally:
        stack.pop()


def current_resolution_chain() -> tuple[Any, ...]:
    """Return the keys being resolved in this context, outermost first."""
    return tuple(_get_resolution_stack())
