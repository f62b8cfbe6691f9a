#!/usr/bin/env python3
"""
Test Batch Aggregation
======================
Validates ordering, bucketing and input handling of batch analysis.
"""

import json

import pytest

from tool_armor.scoring.aggregator import BatchAggregator, EmptyBatchError, analyze_batch
from tool_armor.scoring.risk.models import RiskLevel, ToolDescriptor


def create_test_batch():
    """Tools with known scores: hello 0, run_bash 60, notes 25, greeter 0."""
    return [
        {'name': 'hello', 'description': 'A simple hello tool that returns a greeting message'},
        {'name': 'run_bash', 'description': 'Execute a bash command and return its output'},
        {
            'name': 'notes',
            'description': 'Stores notes',
            'input_schema': json.dumps({'properties': {'command': {'type': 'string'}}})
        },
        {'name': 'greeter', 'description': 'Returns a friendly greeting'},
    ]


def test_batch_is_sorted_by_score_descending():
    batch = analyze_batch(create_test_batch())

    assert [entry.name for entry in batch.entries] == ['run_bash', 'notes', 'hello', 'greeter']
    scores = [entry.result.risk_score for entry in batch.entries]
    assert scores == sorted(scores, reverse=True)


def test_equal_scores_keep_input_order():
    tools = [
        ToolDescriptor('greeter', 'Returns a friendly greeting'),
        ToolDescriptor('hello', 'Says hello'),
        ToolDescriptor('echo', 'Repeats the text it is given'),
    ]
    batch = BatchAggregator().analyze_batch(tools)

    assert [entry.result.risk_score for entry in batch.entries] == [0, 0, 0]
    assert [entry.name for entry in batch.entries] == ['greeter', 'hello', 'echo']
    assert [entry.index for entry in batch.entries] == [0, 1, 2]


def test_batch_counts_per_level():
    batch = analyze_batch(create_test_batch())

    assert batch.total == 4
    assert batch.counts == {RiskLevel.HIGH: 1, RiskLevel.MEDIUM: 0, RiskLevel.LOW: 3}
    assert [entry.name for entry in batch.by_level(RiskLevel.LOW)] == ['notes', 'hello', 'greeter']
    assert batch.by_level(RiskLevel.MEDIUM) == []


def test_empty_batch_raises():
    with pytest.raises(EmptyBatchError):
        analyze_batch([])


def test_mapping_accepts_camel_case_schema_key():
    batch = analyze_batch([{
        'name': 'notes',
        'description': 'Stores notes',
        'inputSchema': {'properties': {'password': {'type': 'string'}}}
    }])

    result = batch.entries[0].result
    assert result.indicators == ('Dangerous input parameter: "password" (Credential input)',)
    assert result.risk_score == 20


def test_unsupported_descriptor_type_raises():
    with pytest.raises(TypeError):
        analyze_batch(['run_bash'])


def test_batch_entries_match_single_analysis():
    aggregator = BatchAggregator()
    batch = aggregator.analyze_batch(create_test_batch())

    for entry in batch.entries:
        tool = ToolDescriptor.from_dict(create_test_batch()[entry.index])
        assert entry.result == aggregator.scorer.analyze_descriptor(tool)


def test_batch_serializes_to_dict():
    data = analyze_batch(create_test_batch()).to_dict()

    assert data['total'] == 4
    assert data['counts'] == {'LOW': 3, 'MEDIUM': 0, 'HIGH': 1}
    assert data['entries'][0]['name'] == 'run_bash'
    json.dumps(data)
