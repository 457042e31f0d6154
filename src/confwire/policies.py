from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from confwire.resolvers import FactoryResolver, Resolver
from confwire.types import Lifetime, RegistrationKey, describe_key

if TYPE_CHECKING:
    from confwire.container import Container

logger = logging.getLogger(__name__)


class RegistrationPolicy(ABC):
    """Customize how a key is turned into a resolver the first time it is requested.

    Subclass it to implement custom lifetime strategies and attach instances
    with ``register_factory_method`` or ``register_class``. Subclasses
    implement ``bind`` and ``_register_constructor``; ``_bind_in`` combines
    them with factory-method lookup.
    """

    key: RegistrationKey | None
    lifetime: ClassVar[Lifetime]

    @abstractmethod
    def bind(self, container: Container, key: RegistrationKey, fallback: Any) -> Resolver:
        """Register and return the resolver for ``key``.

        Args:
            container: The container that requested the key.
            key: The requested key.
            fallback: The class to construct when no factory method is attached
                to the key.

        Returns:
            The resolver now registered for the key.

        """

    def registration_key(self, key: RegistrationKey) -> RegistrationKey:
        return self.key if self.key is not None else key

    def _bind_in(
        self,
        target: Container,
        requester: Container,
        key: RegistrationKey,
        fallback: Any,
    ) -> Resolver:
        registration_key = self.registration_key(key)
        existing = target.get_resolver(registration_key)
        if existing is not None:
            return existing

        descriptor = requester.registry.descriptor_for(registration_key)
        if descriptor is None:
            return self._register_constructor(target, registration_key, fallback)

        logger.debug(
            "Binding %s to factory %s (%s)",
            describe_key(registration_key),
            descriptor.qualname,
            self.lifetime.value,
        )
        return target.register_resolver(
            registration_key,
            FactoryResolver(descriptor, lifetime=self.lifetime),
        )

    @abstractmethod
    def _register_constructor(
        self,
        target: Container,
        key: RegistrationKey,
        fallback: Any,
    ) -> Resolver:
        """Register ``fallback`` in ``target`` when no factory method is attached to ``key``."""


@dataclass(frozen=True)
class TransientPolicy(RegistrationPolicy):
    """Compute a new value on every request, in the requesting container."""

    key: RegistrationKey | None = None
    lifetime: ClassVar[Lifetime] = Lifetime.TRANSIENT

    def bind(self, container: Container, key: RegistrationKey, fallback: Any) -> Resolver:
        return self._bind_in(container, container, key, fallback)

    def _register_constructor(
        self,
        target: Container,
        key: RegistrationKey,
        fallback: Any,
    ) -> Resolver:
        return target.register_transient(key, fallback)


@dataclass(frozen=True)
class SingletonPolicy(RegistrationPolicy):
    """Compute a value once and share it.

    By default the resolver is registered in the root container, so every
    descendant scope sees the same resolver and the same cached value. With
    ``register_in_child=True`` it is registered in the requesting container
    instead and each such scope computes its own value.
    """

    key: RegistrationKey | None = None
    register_in_child: bool = False
    lifetime: ClassVar[Lifetime] = Lifetime.SINGLETON

    @classmethod
    def from_arguments(
        cls,
        key_or_register_in_child: Any = None,
        register_in_child: bool = False,  # noqa: FBT001, FBT002
    ) -> SingletonPolicy:
        """Build a policy from the positional ``singleton(...)`` argument forms.

        A ``bool`` first argument is the ``register_in_child`` flag and means
        "no key override"; anything else is the key override, with the second
        argument as the flag.
        """
        if type(key_or_register_in_child) is bool:
            return cls(key=None, register_in_child=key_or_register_in_child)
        return cls(key=key_or_register_in_child, register_in_child=register_in_child)

    def bind(self, container: Container, key: RegistrationKey, fallback: Any) -> Resolver:
        target = container if self.register_in_child else container.root
        return self._bind_in(target, container, key, fallback)

    def _register_constructor(
        self,
        target: Container,
        key: RegistrationKey,
        fallback: Any,
    ) -> Resolver:
        return target.register_singleton(key, fallback)
