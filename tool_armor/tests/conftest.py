"""
Shared test fixtures.
"""

import pytest

from tool_armor.security.config import set_analyzer_config

CONFIG_ENV_VARS = [
    'TOOL_ARMOR_RULES_PATH', 'TOOL_ARMOR_HIGH_THRESHOLD', 'TOOL_ARMOR_MEDIUM_THRESHOLD',
    'TOOL_ARMOR_MAX_TEXT_LENGTH', 'TOOL_ARMOR_LOG_LEVEL', 'TOOL_ARMOR_REPORT_FORMAT',
]


@pytest.fixture(autouse=True)
def default_analyzer_config(monkeypatch):
    """Run every test against the built-in configuration."""
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    set_analyzer_config(None)
    yield
    set_analyzer_config(None)
