"""Shared test fixtures for all tests.

This file imports and re-exports fixtures from the fixtures/ module so they
are discovered by pytest through this conftest.py file.
"""

from tests.fixtures.config import (  # noqa: F401
    settings,
    settings_file,
    strict_settings,
)
from tests.fixtures.workspace import (  # noqa: F401
    engine,
    project_context,
    sample_files,
    temp_workspace,
)
