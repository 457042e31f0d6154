"""Factory methods: a configuration class builds what the container injects.

``App`` asks for a ``Logger`` in its constructor. Nothing registers ``Logger``
directly; the ``@singleton()`` method on ``Config`` is found through its return
annotation and called on a ``Config`` instance the container builds itself.
"""

from __future__ import annotations

from confwire import Container, singleton


class Logger:
    def __str__(self) -> str:
        return "Logger"


class Config:
    @singleton()
    def make_logger(self) -> Logger:
        return Logger()


class App:
    def __init__(self, logger: Logger) -> None:
        self.logger = logger


def main() -> None:
    container = Container()
    app = container.get(App)

    print(f"logger_type={app.logger}")  # => logger_type=Logger
    print(f"logger_shared={app.logger is container.get(Logger)}")  # => logger_shared=True


if __name__ == "__main__":
    main()
