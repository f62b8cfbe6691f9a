#!/usr/bin/env python3
"""
Test Report Generation
======================
Validates text, Markdown and JSON rendering of single and batch analyses.
"""

import json

import pytest

from tool_armor.reports.generator import ReportGenerator
from tool_armor.scoring.aggregator import analyze_batch
from tool_armor.scoring.risk.heuristic_scorer import analyze

RUN_BASH = ('run_bash', 'Execute a bash command and return its output')
HELLO = ('hello', 'A simple hello tool that returns a greeting message')


@pytest.fixture
def generator():
    return ReportGenerator()


def test_text_report_for_high_risk_tool(generator):
    report = generator.generate_report(*RUN_BASH, analyze(*RUN_BASH))

    assert "- Name: run_bash" in report
    assert "- Risk Level: HIGH" in report
    assert "- Risk Score: 60/100" in report
    assert "- Confidence: MEDIUM" in report
    assert "Malicious Indicators Detected:" in report
    assert '- Dangerous capability: "Command execution"' in report
    assert "HIGH RISK: Avoid using this tool" in report
    assert "Advanced Mitigation Strategies:" in report
    assert "Context Analysis:" not in report


def test_text_report_without_indicators(generator):
    report = generator.generate_report(*HELLO, analyze(*HELLO))

    assert "No obvious malicious indicators detected." in report
    assert "Malicious Indicators Detected:" not in report
    assert "LOW RISK: Tool appears safe" in report


def test_text_report_lists_context_notes(generator):
    result = analyze('file_validator', 'Validates and checks file paths safely')
    report = generator.generate_report('file_validator', 'Validates and checks file paths safely', result)

    assert "Context Analysis:" in report
    assert "but in benign context" in report


def test_text_batch_report(generator):
    batch = analyze_batch([
        {'name': HELLO[0], 'description': HELLO[1]},
        {'name': RUN_BASH[0], 'description': RUN_BASH[1]},
    ])
    report = generator.generate_batch_report(batch)

    assert "Analyzing 2 tools..." in report
    assert "- High risk tools: 1" in report
    assert "- Medium risk tools: 0" in report
    assert "- Low risk tools: 1" in report
    assert "- run_bash (Score: 60/100)" in report
    assert "- hello (Score: 0/100)" in report

    medium_section = report.split("Medium Risk Tools:")[1].split("Low Risk Tools:")[0]
    assert "- None detected" in medium_section

    assert "Review and potentially remove high-risk tools" in report
    assert "Monitor medium-risk tools closely" not in report
    assert "Implement comprehensive audit logging" in report


def test_batch_listing_is_in_descending_score_order(generator):
    batch = analyze_batch([
        {'name': 'task_launcher', 'description': 'Starts tasks'},
        {'name': 'notes', 'description': 'Stores notes',
         'input_schema': '{"properties": {"command": {"type": "string"}}}'},
    ])
    report = generator.generate_batch_report(batch)

    assert report.index("- notes (Score: 25/100)") < report.index("- task_launcher (Score: 15/100)")


def test_markdown_report(generator):
    report = generator.generate_report(*RUN_BASH, analyze(*RUN_BASH), format="markdown")

    assert report.startswith("# MCP Tool Security Report")
    assert "| Risk Level | HIGH |" in report
    assert "| Risk Score | 60 / 100 |" in report


def test_markdown_batch_report(generator):
    batch = analyze_batch([{'name': HELLO[0], 'description': HELLO[1]}])
    report = generator.generate_batch_report(batch, format="markdown")

    assert "| **Total** | **1** |" in report
    assert "| `hello` | 0 | HIGH |" in report
    assert "None detected" in report


def test_json_report(generator):
    data = json.loads(generator.generate_report(*RUN_BASH, analyze(*RUN_BASH), format="json"))

    assert data["metadata"]["scoring_model"] == "heuristic"
    assert data["tool"]["name"] == "run_bash"
    assert data["analysis"]["risk_score"] == 60


def test_json_batch_report():
    generator = ReportGenerator(default_format="json")
    batch = analyze_batch([{'name': RUN_BASH[0], 'description': RUN_BASH[1]}])
    data = json.loads(generator.generate_batch_report(batch))

    assert data["batch"]["counts"]["HIGH"] == 1


def test_unsupported_format_raises(generator):
    with pytest.raises(ValueError):
        generator.generate_report(*HELLO, analyze(*HELLO), format="pdf")

    with pytest.raises(ValueError):
        ReportGenerator(default_format="html")
