"""Pytest fixtures for code that declares factory methods with confwire.

The plugin needs pytest, installed with the ``pytest`` extra
(``pip install confwire[pytest]``). Enable it from a ``conftest.py``:

.. code-block:: python

    pytest_plugins = ["confwire.integrations.pytest_plugin"]

"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from confwire.container import Container
from confwire.registry import RegistrationRegistry, default_registry


@pytest.fixture()
def confwire_registry() -> Iterator[RegistrationRegistry]:
    """Yield the global registry and undo registrations made during the test.

    Configuration classes defined inside a test register into the global
    registry at class-definition time; the fixture restores the previous
    state afterwards so keys do not leak between tests.
    """
    snapshot = default_registry.snapshot()
    try:
        yield default_registry
    finally:
        default_registry.restore(snapshot)


@pytest.fixture()
def confwire_container(confwire_registry: RegistrationRegistry) -> Container:
    """Create a per-test root container bound to the isolated global registry.

    Returns:
        A new ``Container`` instance.

    """
    return Container(registry=confwire_registry)
