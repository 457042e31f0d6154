from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, TypeVar, overload

from typing_extensions import Self

from confwire.defaults import DEFAULT_AUTOREGISTER_IGNORES, DEFAULT_AUTOREGISTER_LIFETIME
from confwire.exceptions import DependencyNotRegisteredError, InvalidRegistrationError
from confwire.markers import explicit_dependencies
from confwire.metadata import TypeMetadataProvider
from confwire.registry import RegistrationRegistry, default_registry
from confwire.resolution_stack import resolution_frame
from confwire.resolvers import ConstructorResolver, InstanceResolver, Resolver
from confwire.types import Lifetime, RegistrationKey, describe_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Container:
    """Hierarchical dependency injection container.

    Each container owns a map of keys to resolvers. A key the container does
    not hold is bound through the registration declared for it with
    ``@singleton``/``@transient``, whose policy picks the scope the resolver
    lives in. Keys without a declared registration fall back to the
    ancestors; failing that, concrete classes are auto-registered in the root
    container.

    Args:
        parent: Parent container; ``None`` creates a root container.
        register_if_missing: Auto-register concrete classes on first request.
        autoregister_ignores: Classes that are never auto-registered.
        autoregister_default_lifetime: Lifetime used for auto-registered classes.
        metadata_provider: Source of parameter types for constructors and
            factory methods. Defaults to the registry's provider.
        registry: Declared registrations to consult. Defaults to the global
            registry used by the annotations.
        wrap_factory_errors: Wrap exceptions raised by factory methods in
            ``FactoryInvocationError`` instead of letting them propagate as-is.

    Examples:
        .. code-block:: python

            class Config:
                @singleton()
                def make_logger(self) -> Logger:
                    return Logger()


            container = Container()
            logger = container.get(Logger)

    """

    __slots__ = (
        "_autoregister_default_lifetime",
        "_autoregister_ignores",
        "_metadata_provider",
        "_parent",
        "_register_if_missing",
        "_registry",
        "_resolvers",
        "_root",
        "_wrap_factory_errors",
    )

    def __init__(
        self,
        *,
        parent: Container | None = None,
        register_if_missing: bool = True,
        autoregister_ignores: set[type[Any]] | None = None,
        autoregister_default_lifetime: Lifetime = DEFAULT_AUTOREGISTER_LIFETIME,
        metadata_provider: TypeMetadataProvider | None = None,
        registry: RegistrationRegistry | None = None,
        wrap_factory_errors: bool = False,
    ) -> None:
        self._parent = parent
        self._root: Container = parent.root if parent is not None else self
        self._register_if_missing = register_if_missing
        self._autoregister_ignores = (
            autoregister_ignores
            if autoregister_ignores is not None
            else DEFAULT_AUTOREGISTER_IGNORES
        )
        self._autoregister_default_lifetime = autoregister_default_lifetime
        self._registry = registry if registry is not None else default_registry
        self._metadata_provider = (
            metadata_provider if metadata_provider is not None else self._registry.metadata_provider
        )
        self._wrap_factory_errors = wrap_factory_errors

        self._resolvers: dict[RegistrationKey, Resolver] = {}

        self.register_instance(Container, self)
        if type(self) is not Container:
            self.register_instance(type(self), self)

    @property
    def parent(self) -> Container | None:
        return self._parent

    @property
    def root(self) -> Container:
        """The top-most ancestor of this container (itself for a root container)."""
        return self._root

    @property
    def registry(self) -> RegistrationRegistry:
        return self._registry

    @property
    def metadata_provider(self) -> TypeMetadataProvider:
        return self._metadata_provider

    @property
    def wrap_factory_errors(self) -> bool:
        return self._wrap_factory_errors

    def create_child(self) -> Self:
        """Create a child scope that inherits this container's configuration."""
        return type(self)(
            parent=self,
            register_if_missing=self._register_if_missing,
            autoregister_ignores=self._autoregister_ignores,
            autoregister_default_lifetime=self._autoregister_default_lifetime,
            metadata_provider=self._metadata_provider,
            registry=self._registry,
            wrap_factory_errors=self._wrap_factory_errors,
        )

    @overload
    def get(self, key: type[T]) -> T: ...

    @overload
    def get(self, key: Any) -> Any: ...

    def get(self, key: Any) -> Any:
        """Resolve ``key`` to a value.

        Raises:
            CyclicDependencyError: If resolving ``key`` requires ``key`` itself.
            DependencyNotRegisteredError: If ``key`` has no resolver, no declared
                registration and cannot be auto-registered.

        """
        with resolution_frame(key):
            resolver = self._resolvers.get(key)
            if resolver is None:
                resolver = self._bind(key)
            return resolver.get(self, key)

    def invoke(self, constructor: Callable[..., T]) -> T:
        """Call ``constructor`` with its dependencies resolved positionally.

        Dependencies come from ``@inject`` when declared, otherwise from the
        metadata provider's view of ``constructor.__init__``.
        """
        dependencies = explicit_dependencies(constructor)
        if dependencies is None:
            dependencies = self._metadata_provider.parameter_types_of(constructor, "__init__")
        arguments = [self.get(dependency) for dependency in dependencies]
        return constructor(*arguments) if arguments else constructor()

    def register_resolver(
        self,
        key: RegistrationKey,
        resolver: Resolver,
        *,
        replace: bool = False,
    ) -> Resolver:
        """Register ``resolver`` for ``key`` in this scope.

        Raises:
            InvalidRegistrationError: If this scope already holds a resolver for
                ``key`` and ``replace`` is false.

        """
        if not replace and key in self._resolvers:
            msg = (
                f"Key {describe_key(key)} already has a resolver in this container. "
                "Pass replace=True to overwrite."
            )
            raise InvalidRegistrationError(msg)
        self._resolvers[key] = resolver
        return resolver

    def register_singleton(
        self,
        key: RegistrationKey,
        constructor: Callable[..., Any] | None = None,
    ) -> Resolver:
        """Construct ``constructor`` (or ``key``) once, on first request."""
        return self.register_resolver(
            key,
            ConstructorResolver(self._constructor_for(key, constructor), Lifetime.SINGLETON),
        )

    def register_transient(
        self,
        key: RegistrationKey,
        constructor: Callable[..., Any] | None = None,
    ) -> Resolver:
        """Construct ``constructor`` (or ``key``) anew on every request."""
        return self.register_resolver(
            key,
            ConstructorResolver(self._constructor_for(key, constructor), Lifetime.TRANSIENT),
        )

    def register_instance(
        self,
        key: RegistrationKey,
        instance: Any,
        *,
        replace: bool = False,
    ) -> Resolver:
        return self.register_resolver(key, InstanceResolver(instance), replace=replace)

    def get_resolver(
        self,
        key: RegistrationKey,
        *,
        check_parent: bool = False,
    ) -> Resolver | None:
        """Return the resolver for ``key`` in this scope, or in ancestors with ``check_parent``."""
        if check_parent:
            return self._find_resolver(key)
        return self._resolvers.get(key)

    def has_resolver(self, key: RegistrationKey, *, check_parent: bool = False) -> bool:
        return self.get_resolver(key, check_parent=check_parent) is not None

    def _find_resolver(self, key: RegistrationKey) -> Resolver | None:
        container: Container | None = self
        while container is not None:
            resolver = container._resolvers.get(key)
            if resolver is not None:
                return resolver
            container = container._parent
        return None

    def _bind(self, key: RegistrationKey) -> Resolver:
        # a declared registration is bound through its policy from the
        # requesting scope before any ancestor resolver is considered
        registration = self._registry.find(key)
        if registration is not None:
            fallback = registration.target if registration.target is not None else key
            return registration.policy.bind(self, key, fallback)

        inherited = self._parent._find_resolver(key) if self._parent is not None else None
        if inherited is not None:
            return inherited
        return self._auto_register(key)

    def _auto_register(self, key: RegistrationKey) -> Resolver:
        if (
            not self._register_if_missing
            or not inspect.isclass(key)
            or key in self._autoregister_ignores
            or inspect.isabstract(key)
            or getattr(key, "_is_protocol", False)
        ):
            raise DependencyNotRegisteredError(key)

        logger.debug(
            "Auto-registering %s as %s in the root container",
            describe_key(key),
            self._autoregister_default_lifetime.value,
        )
        if self._autoregister_default_lifetime is Lifetime.TRANSIENT:
            return self._root.register_transient(key)
        return self._root.register_singleton(key)

    def _constructor_for(
        self,
        key: RegistrationKey,
        constructor: Callable[..., Any] | None,
    ) -> Callable[..., Any]:
        constructor = constructor if constructor is not None else key
        if not inspect.isclass(constructor):
            msg = f"Cannot construct {describe_key(key)}: {constructor!r} is not a class."
            raise InvalidRegistrationError(msg)
        return constructor
