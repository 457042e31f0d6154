"""Shared pytest fixtures for confwire tests."""

import pytest

from confwire.container import Container
from confwire.integrations.pytest_plugin import confwire_container, confwire_registry
from confwire.registry import RegistrationRegistry
from confwire.types import Lifetime

__all__ = ["confwire_container", "confwire_registry"]


@pytest.fixture(autouse=True)
def _isolated_registry(confwire_registry: RegistrationRegistry) -> None:
    """Undo registrations made by configuration classes declared in a test."""


@pytest.fixture()
def container() -> Container:
    """Root container with auto-registration enabled."""
    return Container()


@pytest.fixture()
def container_no_autoregister() -> Container:
    """Root container with register_if_missing=False."""
    return Container(register_if_missing=False)


@pytest.fixture()
def container_transient() -> Container:
    """Root container that auto-registers classes as transients."""
    return Container(autoregister_default_lifetime=Lifetime.TRANSIENT)
