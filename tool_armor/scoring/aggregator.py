"""
Batch Aggregator
================
Applies the heuristic scorer to a list of tool descriptors and aggregates
the results into per-level buckets.

Author: MCP Security Team
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass
import logging

from .risk.heuristic_scorer import HeuristicScorer
from .risk.models import AnalysisResult, RiskLevel, ToolDescriptor

logger = logging.getLogger(__name__)

DescriptorInput = Union[ToolDescriptor, Mapping[str, Any]]


class EmptyBatchError(ValueError):
    """Raised when a batch analysis is requested without any tools."""
    pass


@dataclass(frozen=True)
class BatchEntry:
    """One analyzed tool of a batch, tagged with its input position."""
    name: str
    index: int
    result: AnalysisResult

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'index': self.index, **self.result.to_dict()}


@dataclass(frozen=True)
class BatchResult:
    """Container for batch analysis results.

    Attributes:
        entries: Analyzed tools sorted by score descending, ties in input order
        counts: Number of tools per risk level
    """
    entries: Tuple[BatchEntry, ...]
    counts: Dict[RiskLevel, int]

    @property
    def total(self) -> int:
        return len(self.entries)

    def by_level(self, level: RiskLevel) -> List[BatchEntry]:
        """Entries of one risk level, keeping the descending score order."""
        return [entry for entry in self.entries if entry.result.risk_level == level]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'counts': {level.value: self.counts.get(level, 0) for level in RiskLevel},
            'entries': [entry.to_dict() for entry in self.entries]
        }


class BatchAggregator:
    """
    Analyzes many tool descriptors and aggregates their verdicts.

    Each descriptor is scored independently; the original index is kept on
    every entry so the stable ordering does not depend on execution order.
    """

    def __init__(self, scorer: Optional[HeuristicScorer] = None):
        """Initialize aggregator with a custom or default scorer."""
        self.scorer = scorer or HeuristicScorer()

    def analyze_batch(self, descriptors: Iterable[DescriptorInput]) -> BatchResult:
        """
        Analyze a batch of tool descriptors.

        Args:
            descriptors: ToolDescriptor objects or mappings with 'name',
                'description' and optional 'input_schema' keys

        Returns:
            BatchResult sorted by risk score, highest first

        Raises:
            EmptyBatchError: If no descriptors are given
        """
        tools = [self._to_descriptor(d) for d in descriptors]
        if not tools:
            raise EmptyBatchError("No tools provided for batch analysis")

        logger.info(f"Analyzing batch of {len(tools)} tools")

        entries = [
            BatchEntry(name=tool.name, index=index, result=self.scorer.analyze_descriptor(tool))
            for index, tool in enumerate(tools)
        ]

        # Highest score first; equal scores keep input order
        entries.sort(key=lambda entry: (-entry.result.risk_score, entry.index))

        counts = {level: 0 for level in RiskLevel}
        for entry in entries:
            counts[entry.result.risk_level] += 1

        logger.debug(
            "Batch summary: " + ", ".join(f"{level.value}={counts[level]}" for level in RiskLevel)
        )

        return BatchResult(entries=tuple(entries), counts=counts)

    def _to_descriptor(self, descriptor: DescriptorInput) -> ToolDescriptor:
        if isinstance(descriptor, ToolDescriptor):
            return descriptor
        if isinstance(descriptor, Mapping):
            return ToolDescriptor.from_dict(dict(descriptor))
        raise TypeError(f"Unsupported tool descriptor: {type(descriptor).__name__}")


def analyze_batch(descriptors: Iterable[DescriptorInput]) -> BatchResult:
    """Analyze a batch of descriptors with the default scorer."""
    return BatchAggregator().analyze_batch(descriptors)
