#!/usr/bin/env python3
"""
Tool Armor Scoring Modules
==========================

Heuristic risk scoring of MCP tool descriptors:

1. Risk: rule-table driven analyzer producing a 0-100 style risk score
2. Aggregation: batch analysis with per-level buckets

Author: Risk Armor
License: Proprietary - All Rights Reserved
"""

from .aggregator import BatchAggregator, BatchEntry, BatchResult, EmptyBatchError
from .risk.heuristic_scorer import HeuristicScorer

__all__ = ['HeuristicScorer', 'BatchAggregator', 'BatchEntry', 'BatchResult', 'EmptyBatchError']
