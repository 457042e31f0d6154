from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MethodType
from typing import TYPE_CHECKING, Any, Final, Protocol

from confwire.exceptions import ConfwireError, FactoryInvocationError
from confwire.markers import explicit_dependencies
from confwire.types import Lifetime, RegistrationKey, describe_key

if TYPE_CHECKING:
    from collections.abc import Callable

    from confwire.container import Container
    from confwire.registry import FactoryDescriptor

logger = logging.getLogger(__name__)


class Resolver(Protocol):
    """Produce a value for a key on demand."""

    def get(self, container: Container, key: RegistrationKey) -> Any:
        """Return the value for ``key``, resolving dependencies through ``container``."""
        ...


class _Uncomputed:
    """Cache state before the first successful singleton resolution."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "Uncomputed"


UNCOMPUTED: Final = _Uncomputed()


@dataclass(frozen=True, slots=True)
class Computed:
    """Cache state holding the value of a successful singleton resolution."""

    value: Any


class InstanceResolver:
    """Return a pre-built instance."""

    __slots__ = ("instance",)

    def __init__(self, instance: Any) -> None:
        self.instance = instance

    def get(self, container: Container, key: RegistrationKey) -> Any:  # noqa: ARG002
        return self.instance


class ConstructorResolver:
    """Build a class through constructor injection, once or on every request."""

    __slots__ = ("_state", "constructor", "lifetime")

    def __init__(self, constructor: Callable[..., Any], lifetime: Lifetime) -> None:
        self.constructor = constructor
        self.lifetime = lifetime
        self._state: _Uncomputed | Computed = UNCOMPUTED

    def get(self, container: Container, key: RegistrationKey) -> Any:  # noqa: ARG002
        state = self._state
        if isinstance(state, Computed):
            return state.value

        value = container.invoke(self.constructor)
        if self.lifetime is Lifetime.SINGLETON:
            self._state = Computed(value)
        return value


class FactoryResolver:
    """Resolve a key by calling a factory method of a configuration class.

    Dependencies of the factory come from its ``@inject`` declaration when
    present, otherwise from the container's metadata provider, looked up on the
    class that declares the factory (not on the key it is exposed under). They
    are resolved strictly left to right on every computation.

    With ``Lifetime.SINGLETON`` the first successful value is cached and later
    calls return it without resolving anything. A factory that raises leaves
    the cache empty, so the next request calls it again.
    """

    __slots__ = ("_state", "descriptor", "lifetime")

    def __init__(self, descriptor: FactoryDescriptor, lifetime: Lifetime | None = None) -> None:
        self.descriptor = descriptor
        self.lifetime = lifetime if lifetime is not None else descriptor.lifetime
        self._state: _Uncomputed | Computed = UNCOMPUTED

    @property
    def is_computed(self) -> bool:
        return isinstance(self._state, Computed)

    def get(self, container: Container, key: RegistrationKey) -> Any:
        state = self._state
        if isinstance(state, Computed):
            return state.value

        # receiver before dependencies: a configuration constructor may register
        # keys the factory asks for
        factory = self._bind(container)
        arguments = [container.get(dependency) for dependency in self._dependencies(container)]

        logger.debug(
            "Calling factory %s for %s with %d argument(s)",
            self.descriptor.qualname,
            describe_key(key),
            len(arguments),
        )
        try:
            value = factory(*arguments) if arguments else factory()
        except ConfwireError:
            raise
        except Exception as e:
            if not container.wrap_factory_errors:
                raise
            raise FactoryInvocationError(key, self.descriptor) from e

        if self.lifetime is Lifetime.SINGLETON:
            self._state = Computed(value)
        return value

    def _dependencies(self, container: Container) -> tuple[RegistrationKey, ...]:
        declared = explicit_dependencies(self.descriptor.factory)
        if declared is not None:
            return declared
        return container.metadata_provider.parameter_types_of(
            self.descriptor.owner,
            self.descriptor.name,
        )

    def _bind(self, container: Container) -> Callable[..., Any]:
        descriptor = self.descriptor
        if descriptor.kind == "static":
            return descriptor.factory
        if descriptor.kind == "class":
            return MethodType(descriptor.factory, descriptor.owner)
        configuration = container.get(descriptor.owner)
        return MethodType(descriptor.factory, configuration)

    def __repr__(self) -> str:
        return f"FactoryResolver({self.descriptor.qualname}, {self.lifetime.value}, {self._state!r})"
