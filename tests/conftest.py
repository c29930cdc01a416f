"""Shared fixtures for tinyhooks tests."""

import pytest

from tinyhooks import Hookable
from tinyhooks.config import TinyHooksConfig, clear_config_instance, set_config_instance


@pytest.fixture(autouse=True)
def default_config():
    """Use default configuration regardless of ~/.tinyhooks or TINYHOOKS_* variables."""
    config = TinyHooksConfig.model_construct()
    set_config_instance(config)
    yield config
    clear_config_instance()


@pytest.fixture
def unit():
    """Fresh hookable class with one public and one private operation."""

    class C(Hookable):
        def a(self):
            print("a")
            return "a"

        def _b(self):
            print("b")

    return C
