"""
Tool Armor Security Layer
=========================
Configuration and input validation for the MCP tool analyzer.

Author: MCP Security Team
"""

from .config import AnalyzerConfig, get_analyzer_config, set_analyzer_config
from .validators import (
    ValidationError,
    validate_json_input,
    sanitize_for_logging
)

__all__ = [
    'AnalyzerConfig',
    'get_analyzer_config',
    'set_analyzer_config',
    'ValidationError',
    'validate_json_input',
    'sanitize_for_logging'
]
