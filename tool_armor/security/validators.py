"""
Input Validation Module
========================
Parsing and sanitization helpers for untrusted tool descriptors.

Covers:
- JSON input schema parsing with size limits
- Log-safe rendering of tool names and descriptions

Author: MCP Security Team
"""

import json
import re
from typing import Any
import logging

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Custom exception for validation failures."""
    pass


# ================================================================================
# JSON VALIDATION
# ================================================================================

def validate_json_input(json_str: str, max_size: int = 1048576) -> Any:
    """
    Validate and parse JSON input.

    Args:
        json_str: JSON string to validate
        max_size: Maximum allowed size in characters (default 1MB)

    Returns:
        Parsed JSON value

    Raises:
        ValidationError: If JSON is empty, invalid or too large
    """
    if not json_str or not json_str.strip():
        raise ValidationError("JSON input cannot be empty")

    # Size check
    if len(json_str) > max_size:
        raise ValidationError(f"JSON exceeds maximum size: {max_size} bytes")

    try:
        data = json.loads(json_str)
    except (json.JSONDecodeError, RecursionError) as e:
        raise ValidationError(f"Invalid JSON: {e}")

    return data


# ================================================================================
# GENERAL SANITIZATION
# ================================================================================

def sanitize_for_logging(value: str, max_length: int = 500) -> str:
    """
    Sanitize value for safe logging.

    Args:
        value: Value to sanitize
        max_length: Maximum length for output

    Returns:
        Sanitized string safe for logging
    """
    if not value:
        return ""

    # Convert to string
    value = str(value)

    # Truncate if too long
    if len(value) > max_length:
        value = value[:max_length] + "...[truncated]"

    # Remove control characters
    value = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', value)

    # Redact potential secrets
    secret_patterns = [
        (r'\b[A-Za-z0-9+/]{40}\b', '[REDACTED-KEY]'),  # Base64 keys
        (r'\b[a-f0-9]{64}\b', '[REDACTED-SHA256]'),
        (r'(password|token|key|secret|api)["\']?\s*[:=]\s*["\']?[\w\-]+',
         '[REDACTED-CREDENTIAL]'),
    ]

    for pattern, replacement in secret_patterns:
        value = re.sub(pattern, replacement, value, flags=re.IGNORECASE)

    return value
