"""Key overrides: expose a factory under a key other than its return type.

The key can be a class, a string or a ``Symbol``. Dependents that need a
non-class key declare it with ``@inject``.
"""

from __future__ import annotations

from confwire import Container, Symbol, inject, singleton


class Connection:
    name = "connection"


class ReplicaConnection(Connection):
    name = "replica"


CACHE_URL = Symbol("cache_url")


class Config:
    @singleton(ReplicaConnection)
    def make_replica(self) -> Connection:
        return ReplicaConnection()

    @singleton(CACHE_URL)
    def make_cache_url(self) -> str:
        return "redis://localhost:6379/0"

    @singleton("region")
    def make_region(self) -> str:
        return "eu-west-1"


@inject(ReplicaConnection, CACHE_URL, "region")
class Reporter:
    def __init__(self, connection: Connection, cache_url: str, region: str) -> None:
        self.connection = connection
        self.cache_url = cache_url
        self.region = region


def main() -> None:
    container = Container()
    reporter = container.get(Reporter)

    print(f"connection={reporter.connection.name}")  # => connection=replica
    print(f"cache_url={reporter.cache_url}")  # => cache_url=redis://localhost:6379/0
    print(f"region={reporter.region}")  # => region=eu-west-1

    natural_key_built = isinstance(container.get(Connection), ReplicaConnection)
    print(f"natural_key_uses_factory={natural_key_built}")  # => natural_key_uses_factory=False


if __name__ == "__main__":
    main()
