"""Lifetimes: ``@singleton()`` vs ``@transient()`` factory methods.

Singletons are registered in the root container by default, so child scopes
share one value. ``@singleton(True)`` registers in the requesting scope and
gives every scope its own value. Transients are rebuilt on each request.
"""

from __future__ import annotations

from confwire import Container, singleton, transient


class Settings:
    pass


class Session:
    pass


class Request:
    pass


calls = {"settings": 0, "request": 0}


class Config:
    @singleton()
    def make_settings(self) -> Settings:
        calls["settings"] += 1
        return Settings()

    @singleton(True)
    def make_session(self) -> Session:
        return Session()

    @transient()
    def make_request(self) -> Request:
        calls["request"] += 1
        return Request()


def main() -> None:
    root = Container()
    first_scope = root.create_child()
    second_scope = root.create_child()

    shared = first_scope.get(Settings) is second_scope.get(Settings) is root.get(Settings)
    print(f"settings_shared={shared}")  # => settings_shared=True
    print(f"settings_calls={calls['settings']}")  # => settings_calls=1

    per_scope = first_scope.get(Session) is not second_scope.get(Session)
    print(f"session_per_scope={per_scope}")  # => session_per_scope=True
    print(f"session_stable={first_scope.get(Session) is first_scope.get(Session)}")  # => session_stable=True

    fresh = root.get(Request) is not root.get(Request)
    print(f"request_fresh={fresh}")  # => request_fresh=True
    print(f"request_calls={calls['request']}")  # => request_calls=2


if __name__ == "__main__":
    main()
