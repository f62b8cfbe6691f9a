#!/usr/bin/env python3
"""
Risk Scoring Module - MCP Tool Analysis
=======================================

Scores MCP tool descriptors for malicious intent using a declarative
heuristic rule table.

Key Features:
- Name, capability, parameter, behavioral and context rule groups
- Benign-name and safety-keyword mitigation to reduce false positives
- LOW/MEDIUM/HIGH classification with confidence
- Rule table kept in reviewable YAML

Author: Risk Armor
License: Proprietary - All Rights Reserved
"""

from .heuristic_scorer import HeuristicScorer, analyze, classify_score
from .models import (
    AnalysisResult,
    ConfidenceLevel,
    RiskLevel,
    RuleCategory,
    RuleMatch,
    ToolDescriptor,
    ToolValidationError,
)
from .rules import HeuristicRule, RuleTable, RuleTableError, load_rule_table

__all__ = [
    'HeuristicScorer', 'analyze', 'classify_score',
    'AnalysisResult', 'ConfidenceLevel', 'RiskLevel', 'RuleCategory', 'RuleMatch',
    'ToolDescriptor', 'ToolValidationError',
    'HeuristicRule', 'RuleTable', 'RuleTableError', 'load_rule_table'
]
