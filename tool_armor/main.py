#!/usr/bin/env python3
"""
MCP Tool Analyzer - Command Line Entry Point
============================================
Scores MCP tool descriptors for signs of malicious intent.

Actions:
- analyze: score a single tool given on the command line
- batch: score every tool in a JSON/YAML file (a list of tools, or an MCP
  ``tools/list`` response with a top-level ``tools`` key)
- rules: print the active heuristic rule table

Author: MCP Security Team
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from .reports.generator import ReportGenerator
from .scoring.aggregator import BatchAggregator, EmptyBatchError
from .scoring.risk.heuristic_scorer import HeuristicScorer
from .scoring.risk.models import ToolDescriptor, ToolValidationError
from .scoring.risk.rules import RuleTable, RuleTableError
from .security.config import AnalyzerConfig, get_analyzer_config

logger = logging.getLogger(__name__)


def load_tools_file(path: str) -> List[Dict[str, Any]]:
    """
    Load tool descriptors from a JSON or YAML file.

    Args:
        path: File holding a list of tools or a mapping with a 'tools' key

    Returns:
        List of tool mappings
    """
    tools_path = Path(path)
    text = tools_path.read_text(encoding='utf-8')

    if tools_path.suffix.lower() in ('.yaml', '.yml'):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)

    if isinstance(data, dict):
        data = data.get('tools', [])

    if not isinstance(data, list):
        raise ValueError(f"Expected a list of tools in {tools_path}")

    return data


def format_rule_table(rules: RuleTable) -> str:
    """Render the rule table as aligned text."""
    lines = [f"{'Rule':<32} {'Category':<20} {'Weight':>6}  Label"]
    lines.append("-" * 90)
    for rule in rules.rules:
        sign = '-' if rule.effect == 'reduce' else '+'
        lines.append(f"{rule.rule_id:<32} {rule.category.value:<20} {sign}{rule.weight:>5}  {rule.label}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='MCP Tool Heuristic Security Analyzer'
    )
    parser.add_argument(
        'action',
        choices=['analyze', 'batch', 'rules'],
        help='Action to perform'
    )
    parser.add_argument(
        '--name',
        help='Tool name for single analysis'
    )
    parser.add_argument(
        '--description',
        help='Tool description for single analysis'
    )
    parser.add_argument(
        '--schema',
        help='Tool input schema (JSON string) for single analysis'
    )
    parser.add_argument(
        '--schema-file',
        help='File containing the tool input schema'
    )
    parser.add_argument(
        '--tools-file',
        help='JSON/YAML file containing tools for batch analysis'
    )
    parser.add_argument(
        '--config',
        help='Configuration file path (JSON or YAML)'
    )
    parser.add_argument(
        '--rules',
        help='Alternative heuristic rule table (YAML)'
    )
    parser.add_argument(
        '--format',
        choices=ReportGenerator.FORMATS,
        help='Report format'
    )
    parser.add_argument(
        '--output',
        help='Output file for the report'
    )
    parser.add_argument(
        '--log-level',
        help='Logging level (DEBUG, INFO, WARNING, ...)'
    )
    return parser


def _load_config(args: argparse.Namespace) -> AnalyzerConfig:
    if args.config:
        config = AnalyzerConfig.from_file(args.config)
    else:
        config = replace(get_analyzer_config())

    if args.rules:
        config.rules_path = args.rules
    if args.format:
        config.report_format = args.format
    if args.log_level:
        config.log_level = args.log_level.upper()

    config.validate()
    return config


def _write_output(report: str, output: Optional[str]) -> None:
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(report)
        logger.info(f"Report written to {output}")
    else:
        print(report)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        scorer = HeuristicScorer(config=config)
    except RuleTableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    reporter = ReportGenerator(default_format=config.report_format)

    if args.action == 'rules':
        _write_output(format_rule_table(scorer.rules), args.output)
        return 0

    if args.action == 'analyze':
        schema = args.schema
        if args.schema_file:
            try:
                schema = Path(args.schema_file).read_text(encoding='utf-8')
            except OSError as e:
                print(f"Error: could not read schema file: {e}", file=sys.stderr)
                return 1

        descriptor = ToolDescriptor(
            name=args.name or '',
            description=args.description or '',
            input_schema=schema
        )
        try:
            descriptor.validate()
        except ToolValidationError as e:
            print(f"Error: {e} (use --name and --description)", file=sys.stderr)
            return 1

        result = scorer.analyze_descriptor(descriptor)
        _write_output(reporter.generate_report(descriptor.name, descriptor.description, result), args.output)
        return 0

    if not args.tools_file:
        print("Error: --tools-file required for batch action", file=sys.stderr)
        return 1

    try:
        tools = load_tools_file(args.tools_file)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: could not load tools: {e}", file=sys.stderr)
        return 1

    logger.info(f"Analyzing {len(tools)} tools from {args.tools_file}")

    try:
        batch = BatchAggregator(scorer).analyze_batch(tools)
    except (EmptyBatchError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _write_output(reporter.generate_batch_report(batch), args.output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
