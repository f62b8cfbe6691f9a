"""
Report Generation
=================
Renders heuristic analysis results as text, Markdown or JSON.
"""

from .generator import ReportGenerator

__all__ = ['ReportGenerator']
