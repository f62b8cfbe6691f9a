#!/usr/bin/env python3
"""
MCP Tool Security Report Generator
==================================
Renders heuristic analysis verdicts as human-readable reports.
Supports text (the default, used by the MCP front-end), Markdown and JSON.

Author: MCP Security Scanner
Version: 2.0
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..scoring.aggregator import BatchEntry, BatchResult
from ..scoring.risk.models import AnalysisResult, RiskLevel

REPORT_VERSION = "2.0"

# Recommendation bullets per risk level
RECOMMENDATIONS = {
    RiskLevel.HIGH: [
        "⚠️ HIGH RISK: Avoid using this tool",
        "🔒 Review tool implementation thoroughly",
        "🛡️ Consider sandboxing or isolation",
        "🔍 Perform dynamic analysis if possible",
    ],
    RiskLevel.MEDIUM: [
        "⚠️ MEDIUM RISK: Use with caution",
        "🔍 Review tool permissions and capabilities",
        "📝 Monitor tool usage and outputs",
        "🧪 Test in isolated environment first",
    ],
    RiskLevel.LOW: [
        "✅ LOW RISK: Tool appears safe",
        "🔍 Still review tool implementation",
        "📝 Monitor for unexpected behavior",
        "🔄 Regular security reviews recommended",
    ],
}

MITIGATION_STRATEGIES = [
    "Implement input validation and sanitization",
    "Use principle of least privilege",
    "Enable audit logging for tool usage",
    "Implement rate limiting and access controls",
    "Regular security reviews of MCP tools",
    "Use sandboxing for untrusted tools",
    "Implement behavioral monitoring",
    "Consider static code analysis",
]

BATCH_SECTIONS = [
    (RiskLevel.HIGH, "🚨 High Risk Tools"),
    (RiskLevel.MEDIUM, "⚠️ Medium Risk Tools"),
    (RiskLevel.LOW, "✅ Low Risk Tools"),
]


class ReportGenerator:
    """
    Generates security reports from heuristic analysis results.

    Features:
    - Single-tool reports with indicators, context notes and recommendations
    - Batch reports with per-level counts and listings
    - Text, Markdown and JSON output
    """

    FORMATS = ('text', 'markdown', 'json')

    def __init__(self, default_format: str = "text"):
        """
        Initialize the report generator.

        Args:
            default_format: Format used when none is passed explicitly
        """
        if default_format not in self.FORMATS:
            raise ValueError(f"Unsupported format: {default_format}")
        self.default_format = default_format

    def generate_report(self, name: str, description: str, result: AnalysisResult,
                        format: str = None) -> str:
        """
        Render the report of a single tool analysis.

        Args:
            name: Analyzed tool name
            description: Analyzed tool description
            result: Verdict returned by the heuristic scorer
            format: Output format (text/markdown/json)

        Returns:
            Rendered report
        """
        format = format or self.default_format

        if format == "text":
            return self._generate_text_report(name, description, result)
        elif format == "markdown":
            return self._generate_markdown_report(name, description, result)
        elif format == "json":
            return self._generate_json_report({
                "tool": {"name": name, "description": description},
                "analysis": result.to_dict()
            })
        else:
            raise ValueError(f"Unsupported format: {format}")

    def generate_batch_report(self, batch: BatchResult, format: str = None) -> str:
        """
        Render the report of a batch analysis.

        Args:
            batch: Aggregated batch result
            format: Output format (text/markdown/json)

        Returns:
            Rendered report
        """
        format = format or self.default_format

        if format == "text":
            return self._generate_text_batch_report(batch)
        elif format == "markdown":
            return self._generate_markdown_batch_report(batch)
        elif format == "json":
            return self._generate_json_report({"batch": batch.to_dict()})
        else:
            raise ValueError(f"Unsupported format: {format}")

    # ================================================================================
    # TEXT
    # ================================================================================

    def _generate_text_report(self, name: str, description: str, result: AnalysisResult) -> str:
        lines = [
            "🔍 Enhanced MCP Tool Security Analysis",
            "",
            "📋 Tool Information:",
            f"- Name: {name}",
            f"- Description: {description}",
            f"- Risk Level: {result.risk_level.value}",
            f"- Risk Score: {result.risk_score}/100",
            f"- Confidence: {result.confidence.value}",
            "",
        ]

        if result.indicators:
            lines.append("🚨 Malicious Indicators Detected:")
            lines.extend(f"- {indicator}" for indicator in result.indicators)
        else:
            lines.append("✅ No obvious malicious indicators detected.")
        lines.append("")

        if result.context_notes:
            lines.append("ℹ️ Context Analysis:")
            lines.extend(f"- {note}" for note in result.context_notes)
            lines.append("")

        lines.append("💡 Security Recommendations:")
        lines.extend(f"- {item}" for item in RECOMMENDATIONS[result.risk_level])
        lines.append("")

        lines.append("🔧 Advanced Mitigation Strategies:")
        lines.extend(f"- {item}" for item in MITIGATION_STRATEGIES)
        lines.append("")

        lines.append(f"📊 Analysis Confidence: {result.confidence.value}")
        lines.append("This analysis uses context-aware detection to reduce false positives and negatives.")

        return "\n".join(lines) + "\n"

    def _generate_text_batch_report(self, batch: BatchResult) -> str:
        lines = [
            "🔍 Batch MCP Tool Security Analysis",
            "",
            f"📊 Analyzing {batch.total} tools...",
            "",
            "📋 Summary:",
            f"- Total tools analyzed: {batch.total}",
            f"- High risk tools: {batch.counts.get(RiskLevel.HIGH, 0)}",
            f"- Medium risk tools: {batch.counts.get(RiskLevel.MEDIUM, 0)}",
            f"- Low risk tools: {batch.counts.get(RiskLevel.LOW, 0)}",
        ]

        for level, title in BATCH_SECTIONS:
            lines.append("")
            lines.append(f"{title}:")
            lines.extend(self._format_batch_listing(batch.by_level(level)))

        lines.append("")
        lines.append("💡 Recommendations:")
        lines.extend(f"- {item}" for item in self._batch_recommendations(batch))

        return "\n".join(lines) + "\n"

    def _format_batch_listing(self, entries: List[BatchEntry]) -> List[str]:
        if not entries:
            return ["- None detected"]
        return [f"- {entry.name} (Score: {entry.result.risk_score}/100)" for entry in entries]

    def _batch_recommendations(self, batch: BatchResult) -> List[str]:
        recommendations = []

        if batch.counts.get(RiskLevel.HIGH, 0):
            recommendations.append("⚠️ Review and potentially remove high-risk tools")
            recommendations.append("🔒 Implement additional security controls")

        if batch.counts.get(RiskLevel.MEDIUM, 0):
            recommendations.append("🔍 Monitor medium-risk tools closely")
            recommendations.append("🧪 Test in isolated environments")

        recommendations.append("📝 Implement comprehensive audit logging")
        recommendations.append("🔄 Regular security reviews recommended")
        return recommendations

    # ================================================================================
    # MARKDOWN
    # ================================================================================

    def _generate_markdown_report(self, name: str, description: str, result: AnalysisResult) -> str:
        """
        Generate a Markdown report for documentation and version control.
        """
        md_content = f"""# MCP Tool Security Report

## Tool: `{name}`

**Description:** {description}

---

## 📊 Risk Assessment

| Metric | Value |
|--------|-------|
| Risk Level | {result.risk_level.value} |
| Risk Score | {result.risk_score} / 100 |
| Confidence | {result.confidence.value} |
| Indicators | {len(result.indicators)} |
| Context Notes | {len(result.context_notes)} |

---

## 🚨 Indicators

"""
        if result.indicators:
            md_content += "\n".join(f"- {indicator}" for indicator in result.indicators) + "\n"
        else:
            md_content += "No obvious malicious indicators detected.\n"

        if result.context_notes:
            md_content += "\n## ℹ️ Context Analysis\n\n"
            md_content += "\n".join(f"- {note}" for note in result.context_notes) + "\n"

        md_content += "\n## 💡 Recommendations\n\n"
        md_content += "\n".join(f"- {item}" for item in RECOMMENDATIONS[result.risk_level]) + "\n"

        md_content += f"""
---

*Report generated by MCP Tool Security Analyzer v{REPORT_VERSION}*
"""
        return md_content

    def _generate_markdown_batch_report(self, batch: BatchResult) -> str:
        md_content = f"""# MCP Tool Batch Security Report

## 📈 Summary Statistics

| Risk Level | Tools |
|------------|-------|
| High | {batch.counts.get(RiskLevel.HIGH, 0)} |
| Medium | {batch.counts.get(RiskLevel.MEDIUM, 0)} |
| Low | {batch.counts.get(RiskLevel.LOW, 0)} |
| **Total** | **{batch.total}** |

"""
        for level, title in BATCH_SECTIONS:
            md_content += f"## {title}\n\n"
            entries = batch.by_level(level)
            if entries:
                md_content += "| Tool | Score | Confidence |\n|------|-------|------------|\n"
                for entry in entries:
                    md_content += (
                        f"| `{entry.name}` | {entry.result.risk_score} | "
                        f"{entry.result.confidence.value} |\n"
                    )
            else:
                md_content += "None detected\n"
            md_content += "\n"

        md_content += "## 💡 Recommendations\n\n"
        md_content += "\n".join(f"- {item}" for item in self._batch_recommendations(batch)) + "\n"
        return md_content

    # ================================================================================
    # JSON
    # ================================================================================

    def _generate_json_report(self, body: Dict[str, Any]) -> str:
        """
        Generate a JSON report for programmatic processing.
        """
        report_data = {
            "metadata": {
                "report_version": REPORT_VERSION,
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "scoring_model": "heuristic",
                "score_range": {"min": 0, "max": 100}
            },
            **body
        }

        return json.dumps(report_data, indent=2, default=str)
