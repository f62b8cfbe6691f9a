#!/usr/bin/env python3
"""
MCP Tool Analyzer Front-End
===========================
Request handlers exposed to MCP clients.

Advertises two tools, ``analyze_mcp_tool`` and ``batch_analyze_tools``, and
turns every failure into a plain-text error result so that no bad request can
abort the hosting process. Transport wiring (stdio, HTTP) is left to the host.

Author: MCP Security Team
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .reports.generator import ReportGenerator
from .scoring.aggregator import BatchAggregator, EmptyBatchError
from .scoring.risk.heuristic_scorer import HeuristicScorer
from .scoring.risk.models import ToolDescriptor, ToolValidationError
from .security.config import get_analyzer_config
from .security.validators import sanitize_for_logging

logger = logging.getLogger(__name__)

TOOL_DEFINITIONS = [
    {
        'name': 'analyze_mcp_tool',
        'description': 'Analyze MCP tool descriptions and identify potentially malicious tools '
                       'using context-aware detection',
        'inputSchema': {
            'type': 'object',
            'properties': {
                'tool_name': {
                    'type': 'string',
                    'description': 'Name of the MCP tool to analyze'
                },
                'tool_description': {
                    'type': 'string',
                    'description': 'Description of the MCP tool'
                },
                'tool_input_schema': {
                    'type': 'string',
                    'description': 'Input schema of the MCP tool (JSON string)'
                }
            },
            'required': ['tool_name', 'tool_description']
        }
    },
    {
        'name': 'batch_analyze_tools',
        'description': 'Analyze multiple MCP tools at once for comprehensive security assessment',
        'inputSchema': {
            'type': 'object',
            'properties': {
                'tools': {
                    'type': 'array',
                    'description': 'Array of tools to analyze',
                    'items': {
                        'type': 'object',
                        'properties': {
                            'name': {'type': 'string'},
                            'description': {'type': 'string'},
                            'input_schema': {'type': 'string'}
                        },
                        'required': ['name', 'description']
                    }
                }
            },
            'required': ['tools']
        }
    }
]


class UnknownToolError(Exception):
    """Raised when a client calls a tool this server does not provide."""
    pass


class ToolAnalyzerServer:
    """
    Handles MCP tool-call requests against the heuristic analyzer.
    """

    def __init__(self, scorer: Optional[HeuristicScorer] = None,
                 reporter: Optional[ReportGenerator] = None):
        """
        Initialize the front-end.

        Args:
            scorer: Heuristic scorer shared by single and batch analyses, defaults to
                one built from the process-wide configuration
            reporter: Report renderer, defaults to text output
        """
        self.scorer = scorer or HeuristicScorer()
        self.aggregator = BatchAggregator(self.scorer)
        self.reporter = reporter or ReportGenerator()

    def list_tools(self) -> List[Dict[str, Any]]:
        """Return the tool definitions advertised to clients."""
        return TOOL_DEFINITIONS

    def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> str:
        """
        Dispatch a tool call by name.

        Args:
            name: Tool name from the request
            arguments: Tool arguments from the request

        Returns:
            Text result

        Raises:
            UnknownToolError: If the tool name is not served here
        """
        arguments = arguments or {}

        if name == 'analyze_mcp_tool':
            return self.analyze_one(
                arguments.get('tool_name') or '',
                arguments.get('tool_description') or '',
                arguments.get('tool_input_schema') or ''
            )

        if name == 'batch_analyze_tools':
            return self.analyze_batch(arguments.get('tools') or [])

        raise UnknownToolError(f"Unknown tool: {name}")

    def analyze_one(self, tool_name: str, tool_description: str,
                    tool_input_schema: Optional[str] = None) -> str:
        """
        Analyze a single tool and render its text report.

        Args:
            tool_name: Name of the tool to analyze
            tool_description: Description of the tool
            tool_input_schema: Input schema as JSON text (optional)

        Returns:
            Text report, or a plain-text error message
        """
        try:
            descriptor = ToolDescriptor.from_dict({
                'name': tool_name,
                'description': tool_description,
                'input_schema': tool_input_schema
            })
            descriptor.validate()
        except ToolValidationError as e:
            logger.warning(f"Rejected analysis request: {e}")
            return f"Error: {e}"

        try:
            result = self.scorer.analyze_descriptor(descriptor)
            return self.reporter.generate_report(descriptor.name, descriptor.description, result)
        except Exception as e:
            logger.error(f"Failed to analyze {sanitize_for_logging(tool_name, 100)!r}: {e}")
            return f"Error analyzing MCP tool: {e}"

    def analyze_batch(self, tools: Sequence[Mapping[str, Any]]) -> str:
        """
        Analyze a batch of tools and render the batch text report.

        Args:
            tools: Sequence of mappings with name, description and optional input_schema

        Returns:
            Text report, or a plain-text error message
        """
        try:
            batch = self.aggregator.analyze_batch(tools or [])
            return self.reporter.generate_batch_report(batch)
        except EmptyBatchError as e:
            logger.warning(f"Rejected batch request: {e}")
            return f"Error: {e}"
        except Exception as e:
            logger.error(f"Batch analysis failed: {e}")
            return f"Error in batch analysis: {e}"


_server: Optional[ToolAnalyzerServer] = None


def _get_server() -> ToolAnalyzerServer:
    global _server

    config = get_analyzer_config()
    if _server is None or _server.scorer.config is not config:
        _server = ToolAnalyzerServer(HeuristicScorer(config=config))

    return _server


def analyze_one(tool_name: str, tool_description: str, tool_input_schema: Optional[str] = None) -> str:
    """Analyze one tool with the default front-end."""
    return _get_server().analyze_one(tool_name, tool_description, tool_input_schema)


def analyze_batch(tools: Sequence[Mapping[str, Any]]) -> str:
    """Analyze a batch of tools with the default front-end."""
    return _get_server().analyze_batch(tools)
