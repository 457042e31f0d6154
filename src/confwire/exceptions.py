from __future__ import annotations

from typing import TYPE_CHECKING, Any

from confwire.types import describe_key

if TYPE_CHECKING:
    from confwire.registry import FactoryDescriptor


class ConfwireError(Exception):
    """Represent a base class for all confwire-specific failures.

    Catch this type when you want to handle any confwire error path without
    matching each concrete exception class individually.
    """


class ConfigurationError(ConfwireError):
    """Signal an invalid factory-method declaration.

    Raised at class-definition time by ``singleton``/``transient`` and by
    ``register_factory_method`` when no registration key can be resolved:
    the annotation carries no explicit key and the method declares no return
    type.

    Typical fixes include adding a return annotation to the factory method or
    passing an explicit key, for example ``@singleton(Logger)``.
    """


class InvalidRegistrationError(ConfwireError):
    """Signal invalid container registration calls.

    Raised by ``Container.register_resolver`` when the scope already holds a
    resolver for the key and ``replace=True`` was not passed, and by the native
    registration helpers when the supplied constructor is not callable.
    """


class DependencyNotRegisteredError(ConfwireError):
    """Signal that a key has no resolver and cannot be auto-registered.

    Raised by ``Container.get`` when the key is not a class, is listed in
    ``autoregister_ignores``, or when the container was created with
    ``register_if_missing=False``.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Dependency {describe_key(key)} is not registered.")


class DependencyInferenceError(ConfwireError):
    """Signal that parameter dependencies cannot be inferred from annotations.

    Common triggers are required parameters without a type annotation.

    Typical fixes include annotating the parameter or declaring the dependency
    list explicitly with ``@inject(...)``.
    """


class CyclicDependencyError(ConfwireError):
    """Signal a resolution chain that requests a key it is already resolving.

    The ``chain`` attribute lists the keys in resolution order, ending with the
    key that closed the cycle.
    """

    def __init__(self, key: Any, chain: list[Any]) -> None:
        self.key = key
        self.chain = [*chain, key]
        path = " -> ".join(describe_key(item) for item in self.chain)
        super().__init__(f"Cyclic dependency detected while resolving {describe_key(key)}: {path}")


class FactoryInvocationError(ConfwireError):
    """Signal that a factory method raised while producing a value.

    Only raised by containers created with ``wrap_factory_errors=True``; by
    default the factory's own exception propagates unchanged. The original
    exception is always available as ``__cause__``.
    """

    def __init__(self, key: Any, descriptor: FactoryDescriptor) -> None:
        self.key = key
        self.descriptor = descriptor
        super().__init__(
            f"Factory {descriptor.owner.__qualname__}.{descriptor.name} failed "
            f"while resolving {describe_key(key)}.",
        )
