from typing import Any

from confwire.types import Lifetime

DEFAULT_AUTOREGISTER_IGNORES: set[type[Any]] = {
    int,
    str,
    float,
    bool,
    bytes,
    list,
    dict,
    set,
    tuple,
    object,
}

DEFAULT_AUTOREGISTER_LIFETIME = Lifetime.SINGLETON

INJECT_ATTRIBUTE = "__inject__"
