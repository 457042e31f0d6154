import logging
from typing import Any

import pytest

from confwire import (
    ConfigurationError,
    Container,
    FactoryDescriptor,
    Registration,
    RegistrationRegistry,
    SingletonPolicy,
    StaticMetadataProvider,
    TransientPolicy,
    default_registry,
    register_class,
    register_factory_method,
    singleton,
    transient,
)
from confwire.registration_decorators import resolve_registration_key
from confwire.types import Lifetime


class Logger:
    pass


class TestFactoryDescriptor:
    def test_kinds(self) -> None:
        class Config:
            def method(self) -> Logger:
                return Logger()

            @staticmethod
            def static() -> Logger:
                return Logger()

            @classmethod
            def klass(cls) -> Logger:
                return Logger()

        method = FactoryDescriptor.from_member(Config, "method", Lifetime.SINGLETON)
        static = FactoryDescriptor.from_member(Config, "static", Lifetime.SINGLETON)
        klass = FactoryDescriptor.from_member(Config, "klass", Lifetime.TRANSIENT)

        assert (method.kind, static.kind, klass.kind) == ("method", "static", "class")
        assert method.factory is Config.__dict__["method"]
        assert static.factory is Config.__dict__["static"].__func__
        assert klass.lifetime is Lifetime.TRANSIENT
        assert method.qualname.endswith("Config.method")

    def test_missing_member(self) -> None:
        class Config:
            pass

        with pytest.raises(ConfigurationError, match="has no member 'make'"):
            FactoryDescriptor.from_member(Config, "make", Lifetime.SINGLETON)

    def test_non_function_member(self) -> None:
        class Config:
            make = "not callable"

        with pytest.raises(ConfigurationError, match="is not a function"):
            FactoryDescriptor.from_member(Config, "make", Lifetime.SINGLETON)


class TestRegistrationRegistry:
    def test_attach_and_find(self) -> None:
        registry = RegistrationRegistry()
        registration = Registration(policy=TransientPolicy(), target=Logger)

        registry.attach(Logger, registration)

        assert registry.find(Logger) is registration
        assert Logger in registry
        assert len(registry) == 1
        assert registry.descriptor_for(Logger) is None
        assert registry.descriptor_for("missing") is None

    def test_detach_and_clear(self) -> None:
        registry = RegistrationRegistry()
        registration = Registration(policy=TransientPolicy(), target=Logger)
        registry.attach(Logger, registration)
        registry.attach("other", registration)

        assert registry.detach(Logger) is registration
        assert registry.detach(Logger) is None

        registry.clear()
        assert len(registry) == 0

    def test_snapshot_and_restore(self) -> None:
        registry = RegistrationRegistry()
        registry.attach(Logger, Registration(policy=SingletonPolicy(), target=Logger))
        snapshot = registry.snapshot()

        registry.attach("extra", Registration(policy=TransientPolicy(), target=Logger))
        registry.detach(Logger)
        registry.restore(snapshot)

        assert Logger in registry
        assert "extra" not in registry

    def test_replacing_from_another_origin_logs_warning(
        self,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        registry = RegistrationRegistry()

        class First:
            def make(self) -> Logger:
                return Logger()

        class Second:
            def make(self) -> Logger:
                return Logger()

        register_factory_method(First, "make", SingletonPolicy(), registry=registry)
        with caplog.at_level(logging.WARNING, logger="confwire.registry"):
            register_factory_method(Second, "make", TransientPolicy(), registry=registry)

        descriptor = registry.descriptor_for(Logger)
        assert descriptor is not None
        assert descriptor.owner is Second
        assert "Registration for Logger replaced" in caplog.text

    def test_refreshing_the_same_member_does_not_warn(
        self,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        registry = RegistrationRegistry()

        class Config:
            def make(self) -> Logger:
                return Logger()

        with caplog.at_level(logging.WARNING, logger="confwire.registry"):
            register_factory_method(Config, "make", SingletonPolicy(), registry=registry)
            register_factory_method(Config, "make", SingletonPolicy(), registry=registry)

        assert caplog.records == []

    def test_default_metadata_provider(self) -> None:
        provider = StaticMetadataProvider()

        assert RegistrationRegistry(provider).metadata_provider is provider


class TestRegisterFactoryMethod:
    def test_key_from_return_type(self) -> None:
        registry = RegistrationRegistry()

        class Config:
            def make_logger(self) -> Logger:
                return Logger()

        key = register_factory_method(Config, "make_logger", SingletonPolicy(), registry=registry)

        assert key is Logger
        registration = registry.find(Logger)
        assert registration is not None
        assert registration.policy == SingletonPolicy()
        assert registration.descriptor == FactoryDescriptor.from_member(
            Config,
            "make_logger",
            Lifetime.SINGLETON,
        )

    def test_explicit_key_wins(self) -> None:
        registry = RegistrationRegistry()

        class Config:
            def make_logger(self) -> Logger:
                return Logger()

        key = register_factory_method(
            Config,
            "make_logger",
            TransientPolicy(key="logger"),
            registry=registry,
        )

        assert key == "logger"
        assert Logger not in registry

    def test_untyped_method_without_key(self) -> None:
        class Config:
            def make_logger(self):  # noqa: ANN202
                return Logger()

        with pytest.raises(ConfigurationError, match="No resolvable key"):
            register_factory_method(Config, "make_logger", SingletonPolicy())

    def test_key_is_read_through_the_registry_provider(self) -> None:
        class Config:
            def make(self):  # noqa: ANN202
                return object()

        provider = StaticMetadataProvider(return_types={(Config, "make"): "thing"})

        assert resolve_registration_key(SingletonPolicy(), Config, "make", provider) == "thing"

    def test_defaults_to_the_global_registry(self) -> None:
        class Config:
            def make_logger(self) -> Logger:
                return Logger()

        register_factory_method(Config, "make_logger", SingletonPolicy())

        assert default_registry.descriptor_for(Logger) is not None


class TestDecorators:
    def test_members_stay_callable_on_the_class(self) -> None:
        class Config:
            @singleton()
            def make_logger(self) -> Logger:
                return Logger()

            @transient()
            @staticmethod
            def make_static() -> Logger:
                return Logger()

        assert isinstance(Config().make_logger(), Logger)
        assert isinstance(Config.make_static(), Logger)
        assert isinstance(Config.__dict__["make_static"], staticmethod)

    def test_missing_return_type_fails_at_class_definition(self) -> None:
        with pytest.raises(ConfigurationError, match="make_logger"):

            class Config:
                @singleton()
                def make_logger(self):  # noqa: ANN202
                    return Logger()

    @pytest.mark.parametrize("annotation", [None, "None"])
    def test_none_return_type_is_rejected(self, annotation: object) -> None:
        def make_nothing(self: Any) -> None:
            pass

        make_nothing.__annotations__["return"] = annotation

        with pytest.raises(ConfigurationError, match="No resolvable key"):
            transient()(make_nothing)

    def test_missing_return_type_fails_for_static_and_class_methods(self) -> None:
        with pytest.raises(ConfigurationError, match="make_static"):

            class Statics:
                @singleton()
                @staticmethod
                def make_static():  # noqa: ANN205
                    return Logger()

        with pytest.raises(ConfigurationError, match="make_class"):

            class Classes:
                @transient()
                @classmethod
                def make_class(cls):  # noqa: ANN206
                    return Logger()

    def test_explicit_key_needs_no_return_type(self) -> None:
        class Config:
            @singleton("logger")
            def make_logger(self):  # noqa: ANN202
                return Logger()

        assert "logger" in default_registry

    def test_string_return_type_is_accepted_before_the_class_exists(self) -> None:
        class Config:
            @singleton()
            def make_logger(self) -> "Logger":
                return Logger()

        assert default_registry.descriptor_for(Logger) is not None

    def test_bare_decorator_is_rejected(self) -> None:
        def make_logger(self: Any) -> Logger:
            return Logger()

        with pytest.raises(ConfigurationError, match=r"@singleton\(\)"):
            singleton(make_logger)

        with pytest.raises(ConfigurationError, match=r"@transient\(\)"):
            transient(make_logger)

    def test_non_callable_target_is_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="classes and methods"):
            singleton()(42)

    def test_decorators_write_to_a_given_registry(self) -> None:
        registry = RegistrationRegistry()

        class Config:
            @singleton(registry=registry)
            def make_logger(self) -> Logger:
                return Logger()

        assert Logger in registry
        assert Logger not in default_registry
        assert isinstance(Container(registry=registry).get(Logger), Logger)

    def test_register_class_under_policy_key(self) -> None:
        registry = RegistrationRegistry()

        class FileLogger(Logger):
            pass

        key = register_class(FileLogger, SingletonPolicy(key=Logger), registry=registry)

        assert key is Logger
        registration = registry.find(Logger)
        assert registration is not None
        assert registration.target is FileLogger
        assert registration.descriptor is None
