"""
Analyzer Configuration Module
=============================
Centralized configuration for the heuristic tool analyzer.

Provides configuration loading from the environment or from a JSON/YAML
file, validation of the classification thresholds, and a process-wide
accessor.

Author: MCP Security Team
"""

import os
import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any, Optional
import logging

import yaml

logger = logging.getLogger(__name__)

REPORT_FORMATS = ('text', 'markdown', 'json')


@dataclass
class AnalyzerConfig:
    """
    Analyzer configuration container.

    Holds the classification thresholds and runtime settings of the
    heuristic analyzer. Rule weights live in the rule table, not here.
    """

    # Rule table
    rules_path: Optional[str] = None

    # Risk classification
    high_threshold: int = 60
    medium_threshold: int = 30
    high_confidence_score: int = 80
    low_confidence_ceiling: int = 10

    # Input limits
    max_schema_length: int = 1048576  # 1MB
    max_text_length: int = 65536

    # Logging & Reporting
    log_level: str = "INFO"
    report_format: str = "text"

    @classmethod
    def from_environment(cls) -> 'AnalyzerConfig':
        """
        Load configuration from environment variables.

        Returns:
            AnalyzerConfig instance with environment-based settings
        """
        config = cls()

        config.rules_path = os.getenv('TOOL_ARMOR_RULES_PATH') or None

        # Thresholds
        config.high_threshold = int(os.getenv('TOOL_ARMOR_HIGH_THRESHOLD', '60'))
        config.medium_threshold = int(os.getenv('TOOL_ARMOR_MEDIUM_THRESHOLD', '30'))

        # Input limits
        config.max_text_length = int(os.getenv('TOOL_ARMOR_MAX_TEXT_LENGTH', '65536'))

        # Logging & Reporting
        config.log_level = os.getenv('TOOL_ARMOR_LOG_LEVEL', 'INFO').upper()
        config.report_format = os.getenv('TOOL_ARMOR_REPORT_FORMAT', 'text').lower()

        return config

    @classmethod
    def from_file(cls, config_path: str) -> 'AnalyzerConfig':
        """
        Load configuration from a JSON or YAML file.

        Args:
            config_path: Path to configuration file

        Returns:
            AnalyzerConfig instance
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r') as f:
            if config_path.suffix.lower() in ('.yaml', '.yml'):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {sorted(unknown)}")

        return cls(**{k: v for k, v in data.items() if k in known})

    def validate(self) -> bool:
        """
        Validate configuration settings.

        Returns:
            True if configuration is valid

        Raises:
            ValueError: If configuration is invalid
        """
        if self.medium_threshold < 1:
            raise ValueError("MEDIUM threshold must be at least 1")

        if self.high_threshold <= self.medium_threshold:
            raise ValueError("HIGH threshold must be greater than MEDIUM threshold")

        if self.high_confidence_score < self.high_threshold:
            raise ValueError("High-confidence score cannot be below the HIGH threshold")

        if not 0 <= self.low_confidence_ceiling < self.medium_threshold:
            raise ValueError("Low-confidence ceiling must lie below the MEDIUM threshold")

        if self.max_schema_length < 1:
            raise ValueError("Maximum schema length must be positive")

        if self.max_text_length < 1:
            raise ValueError("Maximum analyzed text length must be positive")

        if self.report_format not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {self.report_format}")

        if self.rules_path and not Path(self.rules_path).exists():
            raise ValueError(f"Rule file not found: {self.rules_path}")

        return True

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to dictionary (for serialization).

        Returns:
            Dictionary representation
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Global configuration instance
_config: Optional[AnalyzerConfig] = None


def get_analyzer_config() -> AnalyzerConfig:
    """
    Get the global analyzer configuration instance.

    Returns:
        AnalyzerConfig instance
    """
    global _config

    if _config is None:
        _config = AnalyzerConfig.from_environment()
        _config.validate()

        logger.info(
            f"Analyzer configuration loaded: high>={_config.high_threshold}, "
            f"medium>={_config.medium_threshold}"
        )

    return _config


def set_analyzer_config(config: Optional[AnalyzerConfig]) -> None:
    """
    Set the global analyzer configuration.

    Args:
        config: AnalyzerConfig instance to use, or None to reload from the
            environment on next access
    """
    global _config

    if config is not None:
        config.validate()
        logger.info(f"Analyzer configuration updated: high>={config.high_threshold}")

    _config = config
