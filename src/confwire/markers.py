from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from confwire.defaults import INJECT_ATTRIBUTE
from confwire.types import RegistrationKey

T = TypeVar("T")


def inject(*keys: RegistrationKey) -> Callable[[T], T]:
    """Declare the dependency keys of a class or factory method explicitly.

    The keys are resolved in order and passed positionally, replacing the
    types read from annotations. Apply it below ``@singleton``/``@transient``
    or directly on a class.

    Examples:
        .. code-block:: python

            @inject(CONNECTION, LOGGER)
            class App:
                def __init__(self, connection, logger) -> None: ...

    """

    def decorator(target: T) -> T:
        setattr(_underlying(target), INJECT_ATTRIBUTE, tuple(keys))
        return target

    return decorator


def inject_deferred(provider: Callable[[], Sequence[RegistrationKey]]) -> Callable[[T], T]:
    """Declare dependency keys through a zero-argument callable evaluated on resolution.

    Use it when the keys are not importable yet at decoration time, for example
    when a configuration method depends on a class defined further down.
    """

    def decorator(target: T) -> T:
        setattr(_underlying(target), INJECT_ATTRIBUTE, provider)
        return target

    return decorator


def explicit_dependencies(target: Any) -> tuple[RegistrationKey, ...] | None:
    """Return the explicit dependency keys declared on ``target`` or ``None``."""
    if isinstance(target, type):
        # subclasses of an @inject class declare their own constructor dependencies
        declared = vars(target).get(INJECT_ATTRIBUTE)
    else:
        declared = getattr(target, INJECT_ATTRIBUTE, None)
    if declared is None:
        return None
    if callable(declared) and not isinstance(declared, (list, tuple)):
        declared = declared()
    return tuple(declared)


def _underlying(target: Any) -> Any:
    # staticmethod/classmethod objects and pending factory declarations expose
    # the plain function as ``__func__``
    if isinstance(target, type):
        return target
    return getattr(target, "__func__", target)
