#!/usr/bin/env python3
"""
Heuristic Rule Table
====================
Loads the declarative rule table consumed by the heuristic scorer.

The table is a YAML document holding named keyword sets and an ordered list
of rules. Every rule names its category, a matcher (regular expression or
keyword list), a point weight, a human label and, optionally, the keyword set
that downgrades a match to a context note.

Author: Risk Armor
License: Proprietary - All Rights Reserved
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml

from .models import RuleCategory

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent / 'rules' / 'default_rules.yaml'

EFFECT_ADD = 'add'
EFFECT_REDUCE = 'reduce'


class RuleTableError(ValueError):
    """Raised when a rule table cannot be loaded or is inconsistent."""
    pass


@dataclass(frozen=True)
class HeuristicRule:
    """A single row of the rule table.

    Attributes:
        rule_id: Unique identifier
        category: Rule group, decides which text the matcher is applied to
        label: Human label used in indicators and context notes
        weight: Positive point value
        pattern: Compiled case-insensitive regex (pattern rules)
        keywords: Lower-case substrings (keyword rules)
        mitigation: Name of the keyword set that suppresses a match
        effect: 'add' or 'reduce'
    """
    rule_id: str
    category: RuleCategory
    label: str
    weight: int
    pattern: Optional[re.Pattern] = None
    keywords: Tuple[str, ...] = ()
    mitigation: Optional[str] = None
    effect: str = EFFECT_ADD

    @property
    def matcher_source(self) -> str:
        """Printable form of the matcher."""
        if self.pattern is not None:
            return self.pattern.pattern
        return ', '.join(self.keywords)

    def matches(self, text: str) -> bool:
        """Test the rule's matcher against text."""
        if self.pattern is not None:
            return self.pattern.search(text) is not None
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.keywords)


@dataclass(frozen=True)
class RuleTable:
    """Ordered heuristic rules plus the keyword sets they reference."""
    rules: Tuple[HeuristicRule, ...]
    keyword_sets: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    version: int = 1

    def by_category(self, category: RuleCategory) -> List[HeuristicRule]:
        return [rule for rule in self.rules if rule.category == category]

    def is_mitigated(self, rule: HeuristicRule, text: str) -> bool:
        """Check whether text carries one of the rule's mitigation keywords."""
        if not rule.mitigation:
            return False
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.keyword_sets.get(rule.mitigation, ()))


def _parse_rule(raw: Dict, keyword_sets: Dict[str, Tuple[str, ...]]) -> HeuristicRule:
    """Convert one YAML rule mapping into a HeuristicRule."""
    rule_id = str(raw.get('id', '')).strip()
    if not rule_id:
        raise RuleTableError(f"Rule without id: {raw}")

    try:
        category = RuleCategory(str(raw.get('category', '')))
    except ValueError:
        raise RuleTableError(f"Rule {rule_id}: unknown category {raw.get('category')!r}")

    weight = raw.get('weight')
    if not isinstance(weight, int) or isinstance(weight, bool) or weight <= 0:
        raise RuleTableError(f"Rule {rule_id}: weight must be a positive integer")

    pattern = None
    keywords: Tuple[str, ...] = ()
    if raw.get('pattern'):
        try:
            pattern = re.compile(str(raw['pattern']), re.IGNORECASE)
        except re.error as e:
            raise RuleTableError(f"Rule {rule_id}: invalid pattern: {e}")
    elif raw.get('keywords'):
        keywords = tuple(str(k).lower() for k in raw['keywords'])
    else:
        raise RuleTableError(f"Rule {rule_id}: needs either 'pattern' or 'keywords'")

    mitigation = raw.get('mitigation')
    if mitigation is not None and mitigation not in keyword_sets:
        raise RuleTableError(f"Rule {rule_id}: unknown keyword set {mitigation!r}")
    if mitigation is not None and category == RuleCategory.BEHAVIORAL_PATTERN:
        raise RuleTableError(f"Rule {rule_id}: behavioral-pattern rules cannot be mitigated")

    effect = raw.get('effect', EFFECT_ADD)
    if effect not in (EFFECT_ADD, EFFECT_REDUCE):
        raise RuleTableError(f"Rule {rule_id}: effect must be 'add' or 'reduce'")
    if effect == EFFECT_REDUCE and category != RuleCategory.CONTEXT_ADJUSTMENT:
        raise RuleTableError(f"Rule {rule_id}: only context-adjustment rules may reduce the score")

    return HeuristicRule(
        rule_id=rule_id,
        category=category,
        label=str(raw.get('label', rule_id)),
        weight=weight,
        pattern=pattern,
        keywords=keywords,
        mitigation=mitigation,
        effect=effect
    )


def parse_rule_table(payload: Dict) -> RuleTable:
    """
    Build a RuleTable from an already-decoded YAML/JSON document.

    Args:
        payload: Mapping with 'keyword_sets' and 'rules' keys

    Returns:
        RuleTable instance

    Raises:
        RuleTableError: If the document is malformed
    """
    if not isinstance(payload, dict):
        raise RuleTableError("Rule table must be a mapping")

    keyword_sets = {}
    for name, words in (payload.get('keyword_sets') or {}).items():
        if not isinstance(words, list):
            raise RuleTableError(f"Keyword set {name!r} must be a list")
        keyword_sets[str(name)] = tuple(str(w).lower() for w in words)

    raw_rules = payload.get('rules')
    if not isinstance(raw_rules, list) or not raw_rules:
        raise RuleTableError("Rule table has no rules")

    rules = []
    seen = set()
    for raw in raw_rules:
        if not isinstance(raw, dict):
            raise RuleTableError(f"Rule entry must be a mapping: {raw!r}")
        rule = _parse_rule(raw, keyword_sets)
        if rule.rule_id in seen:
            raise RuleTableError(f"Duplicate rule id: {rule.rule_id}")
        seen.add(rule.rule_id)
        rules.append(rule)

    return RuleTable(
        rules=tuple(rules),
        keyword_sets=keyword_sets,
        version=int(payload.get('version', 1))
    )


def load_rule_table(path: Optional[Union[str, Path]] = None) -> RuleTable:
    """
    Load a rule table from a YAML file.

    Args:
        path: Rule file to load, defaults to the bundled default_rules.yaml

    Returns:
        RuleTable instance

    Raises:
        RuleTableError: If the file is missing or malformed
    """
    rules_path = Path(path) if path else DEFAULT_RULES_PATH
    if not rules_path.exists():
        raise RuleTableError(f"Rule file not found: {rules_path}")

    try:
        payload = yaml.safe_load(rules_path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise RuleTableError(f"Invalid YAML in {rules_path}: {e}")

    table = parse_rule_table(payload)
    logger.debug(f"Loaded {len(table.rules)} heuristic rules from {rules_path}")
    return table


_default_table: Optional[RuleTable] = None


def get_default_rule_table() -> RuleTable:
    """Return the bundled rule table, loading it on first use."""
    global _default_table

    if _default_table is None:
        _default_table = load_rule_table()

    return _default_table
