"""Errors: missing keys, cycles, and failing singleton factories.

A failing singleton factory does not poison its key: the next request calls
the factory again.
"""

from __future__ import annotations

from confwire import (
    ConfigurationError,
    Container,
    CyclicDependencyError,
    SingletonPolicy,
    register_factory_method,
    singleton,
)


class Egg:
    pass


class Chicken:
    pass


class Flaky:
    pass


attempts = {"flaky": 0}


class Config:
    def untyped(self):  # noqa: ANN201
        return object()

    @singleton()
    def make_egg(self, chicken: Chicken) -> Egg:
        return Egg()

    @singleton()
    def make_chicken(self, egg: Egg) -> Chicken:
        return Chicken()

    @singleton()
    def make_flaky(self) -> Flaky:
        attempts["flaky"] += 1
        if attempts["flaky"] == 1:
            msg = "warming up"
            raise RuntimeError(msg)
        return Flaky()


def main() -> None:
    try:
        register_factory_method(Config, "untyped", SingletonPolicy())
    except ConfigurationError:
        print("missing_key=ConfigurationError")  # => missing_key=ConfigurationError

    container = Container()
    try:
        container.get(Egg)
    except CyclicDependencyError as error:
        chain = " -> ".join(key.__name__ for key in error.chain)
        print(f"cycle={chain}")  # => cycle=Egg -> Chicken -> Egg

    try:
        container.get(Flaky)
    except RuntimeError as error:
        print(f"first_attempt={error}")  # => first_attempt=warming up

    flaky = container.get(Flaky)
    print(f"second_attempt={type(flaky).__name__}")  # => second_attempt=Flaky
    print(f"attempts={attempts['flaky']}")  # => attempts=2


if __name__ == "__main__":
    main()
