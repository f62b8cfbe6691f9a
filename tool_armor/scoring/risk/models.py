"""
Risk Scoring Data Model
=======================
Containers shared by the heuristic scorer, the rule table loader and the
batch aggregator.

Author: Risk Armor
License: Proprietary - All Rights Reserved
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ToolValidationError(ValueError):
    """Raised when a tool descriptor is missing its name or description."""
    pass


class RiskLevel(Enum):
    """Risk buckets derived from the final score."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ConfidenceLevel(Enum):
    """How far a score sits from the nearest bucket boundary."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RuleCategory(Enum):
    """Heuristic rule groups, in evaluation order."""
    NAME_PATTERN = "name-pattern"
    CAPABILITY_KEYWORD = "capability-keyword"
    PARAMETER_PATTERN = "parameter-pattern"
    BEHAVIORAL_PATTERN = "behavioral-pattern"
    CONTEXT_ADJUSTMENT = "context-adjustment"


@dataclass(frozen=True)
class ToolDescriptor:
    """The name/description/input-schema triple of an MCP tool.

    Attributes:
        name: Declared tool name
        description: Natural-language description of the tool
        input_schema: Raw JSON text of the tool's input schema (optional,
            may be empty or malformed)
    """
    name: str
    description: str
    input_schema: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ToolDescriptor':
        """Build a descriptor from a request payload.

        Accepts both ``input_schema`` and ``inputSchema`` keys. A schema given
        as an already-decoded object is kept as its JSON text.
        """
        schema = data.get('input_schema', data.get('inputSchema'))
        if schema is not None and not isinstance(schema, str):
            schema = json.dumps(schema)

        return cls(
            name=data.get('name') or '',
            description=data.get('description') or '',
            input_schema=schema
        )

    def validate(self) -> None:
        """Ensure both required fields are present.

        Raises:
            ToolValidationError: If name or description is empty
        """
        if not self.name or not self.description:
            raise ToolValidationError("Tool name and description are required")


@dataclass(frozen=True)
class RuleMatch:
    """One evaluated heuristic rule.

    Only fired rules are recorded in AnalysisResult.matches, so ``triggered``
    is True there. A False value describes a rule that was evaluated without
    matching, and such a match contributes no points.

    Attributes:
        rule_id: Identifier of the rule in the rule table
        category: Rule group the rule belongs to
        weight: Point value of the rule
        label: Human label of the rule
        subject: What matched (tool name, parameter name, ...)
        triggered: Whether the rule's matcher fired
        mitigating_context: Whether a benign/safety signal suppressed it
    """
    rule_id: str
    category: RuleCategory
    weight: int
    label: str
    subject: str = ''
    triggered: bool = True
    mitigating_context: bool = False

    @property
    def points(self) -> int:
        """Points this match contributes before the reduction step."""
        if not self.triggered or self.mitigating_context:
            return 0
        return self.weight


@dataclass(frozen=True)
class AnalysisResult:
    """Container for the verdict of a single tool analysis.

    Attributes:
        risk_score: Accumulated score, never negative
        risk_level: LOW/MEDIUM/HIGH bucket
        confidence: Distance of the score to a bucket boundary
        indicators: Triggered, non-mitigated rule descriptions in evaluation order
        context_notes: Mitigating or informational notes in evaluation order
        matches: Every rule that fired, mitigated or not
    """
    risk_score: int
    risk_level: RiskLevel
    confidence: ConfidenceLevel
    indicators: Tuple[str, ...] = ()
    context_notes: Tuple[str, ...] = ()
    matches: Tuple[RuleMatch, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'risk_score': self.risk_score,
            'risk_level': self.risk_level.value,
            'confidence': self.confidence.value,
            'indicators': list(self.indicators),
            'context_notes': list(self.context_notes),
            'matches': [
                {
                    'rule_id': m.rule_id,
                    'category': m.category.value,
                    'weight': m.weight,
                    'label': m.label,
                    'subject': m.subject,
                    'mitigating_context': m.mitigating_context
                }
                for m in self.matches
            ]
        }
