#!/usr/bin/env python3
"""
Tool Armor - MCP Tool Security Analysis
=======================================

Heuristic risk scoring for MCP tool descriptors. Inspects a tool's declared
name, description and JSON input schema for signs of malicious intent:

1. Risk Scoring: rule-table driven heuristic analyzer (score, level, confidence)
2. Batch Analysis: per-level aggregation of many tools
3. Reporting: text, Markdown and JSON reports

Author: Risk Armor
License: Proprietary - All Rights Reserved
"""

__version__ = "2.0.0"
__author__ = "Risk Armor"

from tool_armor.scoring.aggregator import BatchAggregator, BatchResult, analyze_batch
from tool_armor.scoring.risk.heuristic_scorer import HeuristicScorer, analyze
from tool_armor.scoring.risk.models import AnalysisResult, ConfidenceLevel, RiskLevel, ToolDescriptor

__all__ = [
    'HeuristicScorer',
    'BatchAggregator',
    'AnalysisResult',
    'BatchResult',
    'ConfidenceLevel',
    'RiskLevel',
    'ToolDescriptor',
    'analyze',
    'analyze_batch'
]
