#!/usr/bin/env python3
"""
MCP Tool Heuristic Risk Scoring
===============================
Estimates whether an MCP tool shows signs of malicious intent from its
declared name, description and JSON input schema.

Five rule groups are evaluated from the declarative rule table by one generic
loop, each adding points and indicators:

1. Name patterns: execution, filesystem, network, auth and privileged verbs
2. Capability keywords in the description
3. Dangerous parameter names in the input schema
4. Behavioral patterns (tool poisoning, covert operation, safety bypass)
5. Context adjustment (suspicious bonus, legitimate reduction)

Benign-name and safety keywords downgrade matches to context notes, which
keeps common safe tools such as formatters and validators out of the
MEDIUM/HIGH buckets. Scores are 0-100 style integers (floor 0).

Author: Risk Armor
License: Proprietary - All Rights Reserved
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ...security.config import AnalyzerConfig, get_analyzer_config
from ...security.validators import ValidationError, sanitize_for_logging, validate_json_input
from .models import (
    AnalysisResult,
    ConfidenceLevel,
    RiskLevel,
    RuleCategory,
    RuleMatch,
    ToolDescriptor,
)
from .rules import EFFECT_REDUCE, HeuristicRule, RuleTable, get_default_rule_table, load_rule_table

logger = logging.getLogger(__name__)

# Indicator / context-note wording per rule group
INDICATOR_TEMPLATES = {
    RuleCategory.NAME_PATTERN: 'Suspicious tool name: "{subject}" - {label}',
    RuleCategory.CAPABILITY_KEYWORD: 'Dangerous capability: "{label}"',
    RuleCategory.PARAMETER_PATTERN: 'Dangerous input parameter: "{subject}" ({label})',
    RuleCategory.BEHAVIORAL_PATTERN: 'Behavioral pattern: "{label}"',
    RuleCategory.CONTEXT_ADJUSTMENT: '{label}',
}

MITIGATION_TEMPLATES = {
    RuleCategory.NAME_PATTERN: 'Tool name "{subject}" matches "{label}" but in benign context',
    RuleCategory.CAPABILITY_KEYWORD: 'Capability "{label}" detected but with safety context',
    RuleCategory.PARAMETER_PATTERN: 'Parameter "{subject}" has safety context ({label})',
}


def classify_score(score: int, config: AnalyzerConfig) -> Tuple[RiskLevel, ConfidenceLevel]:
    """
    Map a final score to its risk level and confidence.

    Args:
        score: Final, floor-0 risk score
        config: Thresholds to apply

    Returns:
        Tuple of (risk_level, confidence)
    """
    if score >= config.high_threshold:
        confidence = ConfidenceLevel.HIGH if score >= config.high_confidence_score else ConfidenceLevel.MEDIUM
        return RiskLevel.HIGH, confidence
    elif score >= config.medium_threshold:
        return RiskLevel.MEDIUM, ConfidenceLevel.MEDIUM
    else:
        confidence = ConfidenceLevel.HIGH if score <= config.low_confidence_ceiling else ConfidenceLevel.MEDIUM
        return RiskLevel.LOW, confidence


@dataclass
class _ScoreState:
    """Running totals of a single analysis."""
    score: int = 0
    indicators: List[str] = field(default_factory=list)
    context_notes: List[str] = field(default_factory=list)
    matches: List[RuleMatch] = field(default_factory=list)


class HeuristicScorer:
    """
    Scores MCP tool descriptors against the heuristic rule table.

    The scorer holds only the immutable rule table and configuration, so a
    single instance can be shared and every call is deterministic.
    """

    def __init__(self, rules: Optional[RuleTable] = None, config: Optional[AnalyzerConfig] = None):
        """
        Initialize the heuristic scorer.

        Args:
            rules: Rule table to evaluate, defaults to the configured or bundled table
            config: Thresholds and limits, defaults to the process-wide configuration
        """
        self.config = config or get_analyzer_config()
        if rules is not None:
            self.rules = rules
        elif self.config.rules_path:
            self.rules = load_rule_table(self.config.rules_path)
        else:
            self.rules = get_default_rule_table()

    def analyze(self, name: str, description: str, input_schema: Optional[str] = None) -> AnalysisResult:
        """
        Analyze a tool for malicious indicators.

        Args:
            name: Declared tool name
            description: Tool description
            input_schema: Raw JSON text of the input schema (optional)

        Returns:
            AnalysisResult with score, level, confidence, indicators and notes
        """
        name = name or ''
        description = description or ''
        state = _ScoreState()

        properties = self._parse_schema_properties(input_schema, state)
        full_text = self._full_text(name, description, input_schema, state)

        deferred = []
        for rule in self.rules.rules:
            if rule.effect == EFFECT_REDUCE:
                deferred.append(rule)
                continue

            for subject, text, mitigation_text in self._targets(rule, name, description, full_text, properties):
                if rule.matches(text):
                    self._record(rule, subject, self.rules.is_mitigated(rule, mitigation_text), state)

        # Reductions run once every additive rule has been counted
        for rule in deferred:
            if rule.matches(f"{name}\n{description}") and state.score < self.config.medium_threshold:
                state.score = max(0, state.score - rule.weight)
                state.context_notes.append(f"{rule.label} - risk reduced")
                state.matches.append(RuleMatch(
                    rule_id=rule.rule_id,
                    category=rule.category,
                    weight=rule.weight,
                    label=rule.label,
                    subject=name,
                    mitigating_context=True
                ))

        risk_level, confidence = classify_score(state.score, self.config)

        logger.debug(
            f"Analyzed tool {sanitize_for_logging(name, 100)!r}: "
            f"score={state.score} level={risk_level.value} indicators={len(state.indicators)}"
        )

        return AnalysisResult(
            risk_score=state.score,
            risk_level=risk_level,
            confidence=confidence,
            indicators=tuple(state.indicators),
            context_notes=tuple(state.context_notes),
            matches=tuple(state.matches)
        )

    def analyze_descriptor(self, descriptor: ToolDescriptor) -> AnalysisResult:
        """Analyze a ToolDescriptor."""
        return self.analyze(descriptor.name, descriptor.description, descriptor.input_schema)

    def _parse_schema_properties(self, input_schema: Optional[str],
                                 state: _ScoreState) -> Dict[str, Any]:
        """
        Extract the 'properties' map of the input schema.

        Parse failures are recorded as a context note and yield no
        properties, so schema-derived rules are skipped.

        Args:
            input_schema: Raw schema text
            state: Running analysis state

        Returns:
            Mapping of property name to property definition
        """
        if not input_schema or not input_schema.strip():
            return {}

        try:
            schema = validate_json_input(input_schema, max_size=self.config.max_schema_length)
        except ValidationError as e:
            logger.warning(f"Could not parse input schema: {e}")
            state.context_notes.append(f"Could not parse input schema: {e}")
            return {}

        if not isinstance(schema, dict):
            state.context_notes.append("Could not parse input schema: expected a JSON object")
            return {}

        properties = schema.get('properties')
        if not isinstance(properties, dict):
            return {}

        return properties

    def _full_text(self, name: str, description: str, input_schema: Optional[str],
                   state: _ScoreState) -> str:
        """Build the lower-cased text searched by behavioral rules, capped at max_text_length."""
        text = f"{name} {description} {input_schema or ''}"
        limit = self.config.max_text_length
        if len(text) > limit:
            logger.warning(f"Analyzed text of {len(text)} characters truncated to {limit}")
            state.context_notes.append(f"Analyzed text truncated to {limit} characters")
            text = text[:limit]
        return text.lower()

    def _targets(self, rule: HeuristicRule, name: str, description: str,
                 full_text: str,
                 properties: Dict[str, Any]) -> Iterator[Tuple[str, str, str]]:
        """
        Yield what a rule is tested against.

        Each item is (subject, text to match, text searched for mitigation
        keywords).
        """
        if rule.category == RuleCategory.NAME_PATTERN:
            yield name, name, name
        elif rule.category == RuleCategory.CAPABILITY_KEYWORD:
            yield name, description, description
        elif rule.category == RuleCategory.PARAMETER_PATTERN:
            for param_name, details in properties.items():
                param_desc = ''
                if isinstance(details, dict):
                    param_desc = str(details.get('description') or '')
                yield str(param_name), str(param_name).lower(), param_desc
        elif rule.category == RuleCategory.BEHAVIORAL_PATTERN:
            yield name, full_text, ''
        elif rule.category == RuleCategory.CONTEXT_ADJUSTMENT:
            yield name, f"{name}\n{description}", ''

    def _record(self, rule: HeuristicRule, subject: str, mitigated: bool, state: _ScoreState) -> None:
        """Add a fired rule to the running state."""
        state.matches.append(RuleMatch(
            rule_id=rule.rule_id,
            category=rule.category,
            weight=rule.weight,
            label=rule.label,
            subject=subject,
            mitigating_context=mitigated
        ))

        if mitigated:
            template = MITIGATION_TEMPLATES.get(rule.category, '{label} (mitigated)')
            state.context_notes.append(template.format(subject=subject, label=rule.label))
            return

        state.score += rule.weight
        state.indicators.append(INDICATOR_TEMPLATES[rule.category].format(subject=subject, label=rule.label))


_default_scorer: Optional[HeuristicScorer] = None


def analyze(name: str, description: str, input_schema: Optional[str] = None) -> AnalysisResult:
    """
    Analyze a tool with the process-wide configuration.

    Args:
        name: Declared tool name
        description: Tool description
        input_schema: Raw JSON text of the input schema (optional)

    Returns:
        AnalysisResult
    """
    global _default_scorer

    config = get_analyzer_config()
    if _default_scorer is None or _default_scorer.config is not config:
        _default_scorer = HeuristicScorer(config=config)

    return _default_scorer.analyze(name, description, input_schema)
