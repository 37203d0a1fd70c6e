"""
Analyzers package: detection KPI aggregation.
"""

from .kpi_aggregator import aggregate, range_label

__all__ = ['aggregate', 'range_label']
