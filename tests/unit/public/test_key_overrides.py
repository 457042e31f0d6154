from confwire import Container, Symbol, inject, singleton, transient


def test_key_overrides_return_type(container: Container) -> None:
    class Logger:
        name = "Logger"

    class AnotherLogger(Logger):
        name = "AnotherLogger"

    class Connection:
        name = "Connection"

    class AnotherConnection(Connection):
        name = "AnotherConnection"

    class App:
        def __init__(self, connection: AnotherConnection, logger: AnotherLogger) -> None:
            self.connection = connection
            self.logger = logger

    class Config:
        @singleton(AnotherLogger)
        def get_logger(self) -> Logger:
            return AnotherLogger()

        @singleton(AnotherConnection)
        def get_connection(self) -> Connection:
            return AnotherConnection()

    app = container.get(App)

    assert isinstance(app.logger, AnotherLogger)
    assert isinstance(app.connection, AnotherConnection)


def test_override_does_not_register_the_natural_return_type(container: Container) -> None:
    calls: list[int] = []

    class Logger:
        pass

    class FileLogger(Logger):
        pass

    class Config:
        @singleton(FileLogger)
        def make_logger(self) -> Logger:
            calls.append(1)
            return FileLogger()

    logger = container.get(FileLogger)

    assert container.registry.find(Logger) is None
    assert not container.has_resolver(Logger, check_parent=True)

    natural = container.get(Logger)
    assert type(natural) is Logger
    assert natural is not logger
    assert len(calls) == 1


def test_string_keys(container: Container) -> None:
    class Config:
        @singleton("dsn")
        def make_dsn(self) -> str:
            return "postgresql://localhost/app"

        @transient("request_id")
        def make_request_id(self) -> int:
            return id(object())

    @inject("dsn")
    class Repository:
        def __init__(self, dsn: str) -> None:
            self.dsn = dsn

    assert container.get(Repository).dsn == "postgresql://localhost/app"
    assert container.registry.find(str) is None
    assert container.registry.find(int) is None


def test_symbol_keys_with_transient_lifetime(container: Container) -> None:
    counter = Symbol("counter")
    calls: list[int] = []

    class Config:
        @transient(counter)
        def next_value(self) -> int:
            calls.append(1)
            return len(calls)

    assert [container.get(counter) for _ in range(3)] == [1, 2, 3]


def test_equal_descriptions_are_distinct_symbols(container: Container) -> None:
    first = Symbol("service")
    second = Symbol("service")

    class Config:
        @singleton(first)
        def make_first(self) -> str:
            return "first"

        @singleton(second)
        def make_second(self) -> str:
            return "second"

    assert first != second
    assert container.get(first) == "first"
    assert container.get(second) == "second"
    assert repr(first) == "Symbol('service')"
