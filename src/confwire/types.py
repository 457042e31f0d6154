from __future__ import annotations

import itertools
from enum import Enum
from typing import Any, ClassVar, TypeAlias

RegistrationKey: TypeAlias = Any
"""A hashable identity used to look up a resolver: a class, a string, or a ``Symbol``."""


class Lifetime(str, Enum):
    """Defines how long a resolved value lives in the container."""

    TRANSIENT = "transient"
    """A new value is computed every time the key is requested."""

    SINGLETON = "singleton"
    """The value is computed once and shared for the lifetime of the registering scope."""


class Symbol:
    """A unique registration key with a human readable description.

    Two symbols are never equal, even when their descriptions match, so a symbol
    can name a dependency without colliding with any class or string key.

    Examples:
        .. code-block:: python

            LOGGER = Symbol("logger")


            class Config:
                @singleton(LOGGER)
                def make_logger(self) -> Logger:
                    return Logger()

    """

    _counter: ClassVar[itertools.count[int]] = itertools.count()

    __slots__ = ("_id", "description")

    def __init__(self, description: str = "") -> None:
        self.description = description
        self._id = next(self._counter)

    def __repr__(self) -> str:
        return f"Symbol({self.description!r})"


def describe_key(key: RegistrationKey) -> str:
    """Return a short human readable name for a registration key."""
    if isinstance(key, type):
        return key.__name__
    return repr(key)
