"""Shared test fixtures for all tests.

This file imports and re-exports fixtures from the fixtures/ module so they
are discovered by pytest for every test directory.
"""

# Import all fixtures from organized modules
from tests.fixtures.settings import (  # noqa: F401
    clean_env,
    host_settings,
    sample_files,
    workspace,
)
