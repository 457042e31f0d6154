from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from confwire.exceptions import ConfigurationError
from confwire.metadata import AnnotationMetadataProvider, TypeMetadataProvider
from confwire.types import Lifetime, RegistrationKey, describe_key

if TYPE_CHECKING:
    from confwire.policies import RegistrationPolicy

logger = logging.getLogger(__name__)

FactoryKind: TypeAlias = Literal["method", "static", "class"]
"""How a factory is bound when invoked: on a configuration instance, on nothing, or on the class."""


@dataclass(frozen=True, slots=True)
class FactoryDescriptor:
    """An annotated factory method and the configuration class that declares it."""

    factory: Callable[..., Any]
    """The plain function behind the declared member."""
    owner: type[Any]
    """The configuration class whose member produces the value."""
    name: str
    """The member name on ``owner``; used for parameter type lookups."""
    lifetime: Lifetime
    kind: FactoryKind = "method"

    @classmethod
    def from_member(cls, owner: type[Any], name: str, lifetime: Lifetime) -> FactoryDescriptor:
        """Build a descriptor for ``owner.name`` as currently declared on the class."""
        try:
            member = inspect.getattr_static(owner, name)
        except AttributeError as e:
            msg = f"'{owner.__qualname__}' has no member '{name}' to register as a factory."
            raise ConfigurationError(msg) from e

        if isinstance(member, staticmethod):
            return cls(member.__func__, owner, name, lifetime, "static")
        if isinstance(member, classmethod):
            return cls(member.__func__, owner, name, lifetime, "class")
        if not inspect.isfunction(member):
            msg = f"'{owner.__qualname__}.{name}' is not a function and cannot be a factory method."
            raise ConfigurationError(msg)
        return cls(member, owner, name, lifetime, "method")

    @property
    def qualname(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}"


@dataclass(frozen=True, slots=True)
class Registration:
    """A registration policy attached to a key, with the factory or class it applies to."""

    policy: RegistrationPolicy
    descriptor: FactoryDescriptor | None = None
    target: Any = None
    """The decorated class for class-level registrations."""


class RegistrationRegistry:
    """Out-of-band map from registration keys to declared registrations.

    Annotations write into a registry when a configuration class is defined;
    containers read from it the first time a key is requested and no resolver
    exists yet.
    """

    def __init__(self, metadata_provider: TypeMetadataProvider | None = None) -> None:
        self.metadata_provider: TypeMetadataProvider = (
            metadata_provider if metadata_provider is not None else AnnotationMetadataProvider()
        )
        self._registrations: dict[RegistrationKey, Registration] = {}

    def attach(self, key: RegistrationKey, registration: Registration) -> None:
        """Attach ``registration`` under ``key``; the latest registration wins."""
        existing = self._registrations.get(key)
        if existing is not None and not _same_origin(existing, registration):
            logger.warning(
                "Registration for %s replaced: %s -> %s",
                describe_key(key),
                _origin(existing),
                _origin(registration),
            )
        self._registrations[key] = registration
        logger.debug(
            "Attached %s registration for %s",
            type(registration.policy).__name__,
            describe_key(key),
        )

    def detach(self, key: RegistrationKey) -> Registration | None:
        return self._registrations.pop(key, None)

    def find(self, key: RegistrationKey) -> Registration | None:
        return self._registrations.get(key)

    def descriptor_for(self, key: RegistrationKey) -> FactoryDescriptor | None:
        """Return the factory descriptor attached to ``key``, if any."""
        registration = self._registrations.get(key)
        if registration is None:
            return None
        return registration.descriptor

    def snapshot(self) -> dict[RegistrationKey, Registration]:
        return dict(self._registrations)

    def restore(self, snapshot: dict[RegistrationKey, Registration]) -> None:
        self._registrations = dict(snapshot)

    def clear(self) -> None:
        self._registrations.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)


def _origin(registration: Registration) -> str:
    if registration.descriptor is not None:
        descriptor = registration.descriptor
        return f"{descriptor.owner.__module__}.{descriptor.qualname}"
    target = registration.target
    return f"{getattr(target, '__module__', '?')}.{getattr(target, '__qualname__', target)!s}"


def _same_origin(first: Registration, second: Registration) -> bool:
    # re-evaluating a module yields new class objects with the same qualified names
    return _origin(first) == _origin(second)


default_registry = RegistrationRegistry()
"""The registry used by ``singleton``/``transient`` and by containers unless another one is passed."""
