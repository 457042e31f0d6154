"""Factory dependencies: parameters of factory methods are injected too.

Parameter types are read from annotations, or declared with ``@inject`` /
``@inject_deferred``. The configuration class itself is built by the
container, so it can take dependencies such as the container handle.
"""

from __future__ import annotations

from confwire import Container, inject_deferred, singleton


class Logger:
    def __init__(self, prefix: str) -> None:
        self.prefix = prefix


class Database:
    def __init__(self, logger: Logger) -> None:
        self.logger = logger


class Config:
    def __init__(self, container: Container) -> None:
        container.register_instance("log_prefix", "[app]")

    @singleton()
    @inject_deferred(lambda: ["log_prefix"])
    def make_logger(self, prefix: str) -> Logger:
        return Logger(prefix)

    @singleton()
    def make_database(self, logger: Logger) -> Database:
        return Database(logger)


def main() -> None:
    container = Container()
    database = container.get(Database)

    print(f"prefix={database.logger.prefix}")  # => prefix=[app]
    print(f"logger_shared={database.logger is container.get(Logger)}")  # => logger_shared=True


if __name__ == "__main__":
    main()
