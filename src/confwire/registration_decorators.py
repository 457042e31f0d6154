from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from confwire.exceptions import ConfigurationError
from confwire.metadata import AnnotationMetadataProvider, TypeMetadataProvider
from confwire.policies import RegistrationPolicy, SingletonPolicy, TransientPolicy
from confwire.registry import FactoryDescriptor, Registration, RegistrationRegistry, default_registry
from confwire.types import RegistrationKey

T = TypeVar("T")


def resolve_registration_key(
    policy: RegistrationPolicy,
    owner: type[Any],
    name: str,
    metadata_provider: TypeMetadataProvider,
) -> RegistrationKey:
    """Pick the key a factory method is registered under.

    The policy's explicit key wins; otherwise the declared return type of
    ``owner.name`` is used.

    Raises:
        ConfigurationError: If there is neither an explicit key nor a declared
            return type.

    """
    if policy.key is not None:
        return policy.key

    return_type = metadata_provider.return_type_of(owner, name)
    if return_type is None:
        raise ConfigurationError(_no_key_message(f"{owner.__qualname__}.{name}"))
    return return_type


def _no_key_message(qualname: str) -> str:
    return (
        f"No resolvable key for factory method '{qualname}': "
        "add a return annotation or pass an explicit key."
    )


def register_factory_method(
    owner: type[Any],
    name: str,
    policy: RegistrationPolicy,
    *,
    registry: RegistrationRegistry | None = None,
) -> RegistrationKey:
    """Declare ``owner.name`` as the factory for a key under ``policy``.

    This is what ``@singleton``/``@transient`` run when the configuration class
    is created. Calling it again for the same member refreshes the
    registration.

    Returns:
        The key the factory was registered under.

    """
    registry = registry if registry is not None else default_registry
    descriptor = FactoryDescriptor.from_member(owner, name, policy.lifetime)
    key = resolve_registration_key(policy, owner, name, registry.metadata_provider)
    registry.attach(key, Registration(policy=policy, descriptor=descriptor))
    return key


def register_class(
    target: type[Any],
    policy: RegistrationPolicy,
    *,
    registry: RegistrationRegistry | None = None,
) -> RegistrationKey:
    """Declare that ``target`` is constructed under ``policy`` when its key is requested."""
    registry = registry if registry is not None else default_registry
    key = policy.registration_key(target)
    registry.attach(key, Registration(policy=policy, target=target))
    return key


class _FactoryMethodDeclaration:
    """Placeholder left in a class body until the class exists.

    ``__set_name__`` puts the original member back on the class and registers
    it, so the configuration class keeps ordinary, callable methods.
    """

    def __init__(
        self,
        member: Any,
        policy: RegistrationPolicy,
        registry: RegistrationRegistry | None,
    ) -> None:
        self.member = member
        self.policy = policy
        self.registry = registry
        self.__func__ = getattr(member, "__func__", member)

    def __set_name__(self, owner: type[Any], name: str) -> None:
        setattr(owner, name, self.member)
        register_factory_method(owner, name, self.policy, registry=self.registry)

    def __repr__(self) -> str:
        return f"<pending {type(self.policy).__name__} factory {self.__func__.__qualname__}>"


def _decorator(
    policy: RegistrationPolicy,
    registry: RegistrationRegistry | None,
) -> Callable[[T], T]:
    def decorator(target: T) -> T:
        if inspect.isclass(target):
            register_class(target, policy, registry=registry)
            return target
        if isinstance(target, (staticmethod, classmethod)) or inspect.isfunction(target):
            _check_declared_key(target, policy, registry)
            return _FactoryMethodDeclaration(target, policy, registry)  # type: ignore[return-value]
        msg = f"Registration annotations apply to classes and methods, got {target!r}."
        raise ConfigurationError(msg)

    return decorator


def _check_declared_key(
    member: Any,
    policy: RegistrationPolicy,
    registry: RegistrationRegistry | None,
) -> None:
    # runs while the class body executes; before Python 3.12 errors raised from
    # __set_name__ reach the caller wrapped in RuntimeError
    if policy.key is not None:
        return
    provider = (registry if registry is not None else default_registry).metadata_provider
    if not isinstance(provider, AnnotationMetadataProvider):
        return
    function = getattr(member, "__func__", member)
    if not provider.declares_return_type(function):
        raise ConfigurationError(_no_key_message(function.__qualname__))


def _reject_bare_usage(argument: Any, annotation: str) -> None:
    if inspect.isfunction(argument) or isinstance(argument, (staticmethod, classmethod)):
        msg = f"Use @{annotation}() with parentheses; @{annotation} received {argument!r}."
        raise ConfigurationError(msg)


def transient(
    key: RegistrationKey | None = None,
    *,
    registry: RegistrationRegistry | None = None,
) -> Callable[[T], T]:
    """Register the decorated factory method or class with a transient lifetime.

    Every request calls the factory again and resolves its dependencies again.

    Args:
        key: Key to expose the value under instead of the declared return type.
        registry: Registry to write into; defaults to the global one.

    Examples:
        .. code-block:: python

            class Config:
                @transient()
                def make_request(self, session: Session) -> Request:
                    return Request(session)

    """
    _reject_bare_usage(key, "transient")
    return _decorator(TransientPolicy(key=key), registry)


def singleton(
    key_or_register_in_child: Any = None,
    register_in_child: bool = False,  # noqa: FBT001, FBT002
    *,
    registry: RegistrationRegistry | None = None,
) -> Callable[[T], T]:
    """Register the decorated factory method or class with a singleton lifetime.

    The first argument is either a key override or, when it is a ``bool``, the
    ``register_in_child`` flag. Without the flag the resolver lives in the root
    container and the value is shared by every scope.

    Args:
        key_or_register_in_child: Key override, or the ``register_in_child`` flag.
        register_in_child: Register in the requesting container instead of the
            root; only read when the first argument is a key.
        registry: Registry to write into; defaults to the global one.

    Examples:
        .. code-block:: python

            class Config:
                @singleton()
                def make_logger(self) -> Logger:
                    return Logger()

                @singleton(Connection, True)
                def make_connection(self, logger: Logger) -> PostgresConnection:
                    return PostgresConnection(logger)

    """
    _reject_bare_usage(key_or_register_in_child, "singleton")
    return _decorator(
        SingletonPolicy.from_arguments(key_or_register_in_child, register_in_child),
        registry,
    )
