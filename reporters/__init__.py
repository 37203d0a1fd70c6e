"""
Reporters package: KPI report assembly and text rendering.
"""

from .report_assembler import assemble, describe_selection
from .text_reporter import TextReporter

__all__ = ['assemble', 'describe_selection', 'TextReporter']
