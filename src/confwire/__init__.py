from confwire.container import Container
from confwire.exceptions import (
    ConfigurationError,
    ConfwireError,
    CyclicDependencyError,
    DependencyInferenceError,
    DependencyNotRegisteredError,
    FactoryInvocationError,
    InvalidRegistrationError,
)
from confwire.markers import inject, inject_deferred
from confwire.metadata import AnnotationMetadataProvider, StaticMetadataProvider, TypeMetadataProvider
from confwire.policies import RegistrationPolicy, SingletonPolicy, TransientPolicy
from confwire.registration_decorators import (
    register_class,
    register_factory_method,
    singleton,
    transient,
)
from confwire.registry import FactoryDescriptor, Registration, RegistrationRegistry, default_registry
from confwire.resolvers import FactoryResolver, Resolver
from confwire.types import Lifetime, Symbol

__all__ = [
    "AnnotationMetadataProvider",
    "ConfigurationError",
    "ConfwireError",
    "Container",
    "CyclicDependencyError",
    "DependencyInferenceError",
    "DependencyNotRegisteredError",
    "FactoryDescriptor",
    "FactoryInvocationError",
    "FactoryResolver",
    "InvalidRegistrationError",
    "Lifetime",
    "Registration",
    "RegistrationPolicy",
    "RegistrationRegistry",
    "Resolver",
    "SingletonPolicy",
    "StaticMetadataProvider",
    "Symbol",
    "TransientPolicy",
    "TypeMetadataProvider",
    "default_registry",
    "inject",
    "inject_deferred",
    "register_class",
    "register_factory_method",
    "singleton",
    "transient",
]
