#!/usr/bin/env python3
"""
Test Command Line Entry Point
=============================
Runs the analyze, batch and rules actions end to end.
"""

import json

import pytest

from tool_armor.main import load_tools_file, main
from tool_armor.security.config import set_analyzer_config


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for var in ['TOOL_ARMOR_RULES_PATH', 'TOOL_ARMOR_HIGH_THRESHOLD', 'TOOL_ARMOR_MEDIUM_THRESHOLD',
                'TOOL_ARMOR_LOG_LEVEL', 'TOOL_ARMOR_REPORT_FORMAT']:
        monkeypatch.delenv(var, raising=False)
    set_analyzer_config(None)
    yield
    set_analyzer_config(None)


def write_tools(path, tools):
    path.write_text(json.dumps(tools))
    return str(path)


def test_analyze_action(capsys):
    code = main(['analyze', '--name', 'run_bash', '--description', 'Execute a bash command and return its output'])

    assert code == 0
    assert "- Risk Level: HIGH" in capsys.readouterr().out


def test_analyze_requires_name(capsys):
    assert main(['analyze', '--description', 'Says hello']) == 1
    assert "Tool name and description are required" in capsys.readouterr().err


def test_analyze_with_schema_file(tmp_path, capsys):
    schema = tmp_path / 'schema.json'
    schema.write_text(json.dumps({'properties': {'script': {'type': 'string'}}}))

    code = main(['analyze', '--name', 'notes', '--description', 'Stores notes',
                 '--schema-file', str(schema), '--format', 'json'])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data['analysis']['indicators'] == ['Dangerous input parameter: "script" (Code execution)']


def test_batch_action_writes_output(tmp_path):
    tools_file = write_tools(tmp_path / 'tools.json', {'tools': [
        {'name': 'hello', 'description': 'Says hello'},
        {'name': 'run_bash', 'description': 'Execute a bash command and return its output'},
    ]})
    output = tmp_path / 'report.md'

    code = main(['batch', '--tools-file', tools_file, '--format', 'markdown', '--output', str(output)])

    assert code == 0
    assert "| `run_bash` | 60 | MEDIUM |" in output.read_text(encoding='utf-8')


def test_batch_with_empty_file(tmp_path, capsys):
    tools_file = write_tools(tmp_path / 'tools.json', [])

    assert main(['batch', '--tools-file', tools_file]) == 1
    assert "No tools provided for batch analysis" in capsys.readouterr().err


def test_batch_requires_tools_file(capsys):
    assert main(['batch']) == 1


def test_yaml_tools_file(tmp_path):
    path = tmp_path / 'tools.yaml'
    path.write_text("- name: hello\n  description: Says hello\n")

    assert load_tools_file(str(path)) == [{'name': 'hello', 'description': 'Says hello'}]


def test_rules_action(capsys):
    assert main(['rules']) == 0

    out = capsys.readouterr().out
    assert "name-command-execution" in out
    assert "context-legitimate" in out


def test_bad_rules_path(capsys, tmp_path):
    assert main(['rules', '--rules', str(tmp_path / 'missing.yaml')]) == 2


def test_missing_schema_file(tmp_path, capsys):
    code = main(['analyze', '--name', 'notes', '--description', 'Stores notes',
                 '--schema-file', str(tmp_path / 'missing.json')])

    assert code == 1
    assert "could not read schema file" in capsys.readouterr().err


def test_malformed_yaml_config(tmp_path, capsys):
    config = tmp_path / 'config.yaml'
    config.write_text("high_threshold: [unclosed\n")

    assert main(['rules', '--config', str(config)]) == 2
    assert capsys.readouterr().err.startswith("Error:")
