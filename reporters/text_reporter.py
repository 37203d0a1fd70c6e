"""
Text Reporter

Renders KPI reports and asset listings as plain text.
"""

import os
import logging
from typing import List, Optional

from models import SCORE_RANGE_LABELS, KpiGroup, PhotoAsset, Report

logger = logging.getLogger(__name__)

BAR_WIDTH = 40


class TextReporter:
    """
    Generates text-format KPI reports.

    Attributes:
        output_directory: Base directory for text reports

    Example:
        >>> reporter = TextReporter('kpi_reports/')
        >>> report_path = reporter.generate_report(report)
    """

    def __init__(self, output_directory: str = 'kpi_reports'):
        """
        Initialize text reporter.

        Args:
            output_directory: Base directory for saving reports
        """
        self.output_directory = output_directory

    @classmethod
    def from_config(cls, config_path: str = 'config.yaml') -> 'TextReporter':
        """Create TextReporter from configuration file."""
        import yaml

        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        output_dir = config.get('reporting', {}).get('text_reports_path', 'kpi_reports')
        return cls(output_directory=output_dir)

    @staticmethod
    def default_filename(report: Report) -> str:
        """KPI_Report_<timestamp>.txt, filesystem safe."""
        timestamp = report.generated_at.strftime('%Y-%m-%dT%H-%M-%S')
        return f"KPI_Report_{timestamp}.txt"

    def generate_report(self, report: Report, filename: Optional[str] = None) -> str:
        """
        Write a KPI report to disk.

        Args:
            report: Assembled report
            filename: Optional custom filename (defaults to KPI_Report_<timestamp>.txt)

        Returns:
            Path to generated report file
        """
        report_text = self.format_report(report)

        os.makedirs(self.output_directory, exist_ok=True)
        output_path = os.path.join(self.output_directory, filename or self.default_filename(report))

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(report_text)

        logger.info(f"Generated text report: {output_path}")
        return output_path

    def format_report(self, report: Report) -> str:
        """
        Format a report as text.

        Args:
            report: Report instance

        Returns:
            Formatted text report
        """
        lines = []

        # Header
        lines.append("Detection KPI Report")
        lines.append("=" * 80)
        lines.append(f"Report Date: {report.generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
        lines.append(f"Source: {report.provenance}")
        lines.append("-" * 80)
        lines.append("Object Type vs. Confidence Score Distribution")

        if report.is_empty:
            lines.append("\nNo detection data.")
            return "\n".join(lines)

        lines.append(f"Total detections: {report.total_detections}")

        for group in report.groups:
            lines.extend(self._format_group(group))

        return "\n".join(lines)

    @staticmethod
    def _format_group(group: KpiGroup) -> List[str]:
        lines = [
            "",
            "-" * 80,
            f"Object Type: {group.class_name:50} Total Detections: {group.total()}",
            "-" * 80,
        ]
        for label in SCORE_RANGE_LABELS:
            count = group.score_ranges[label]
            fraction = group.fraction(label)
            bar = "#" * round(fraction * BAR_WIDTH)
            lines.append(
                f"  {count:6} detections in range {label:8} {fraction * 100:5.1f}%  |{bar:<{BAR_WIDTH}}|"
            )
        return lines

    @staticmethod
    def format_assets(assets: List[PhotoAsset]) -> str:
        """
        Format assets as a fixed-width table.

        Missing coordinates and altitude print as "-".
        """
        def number(value: Optional[float], digits: int) -> str:
            return f"{value:.{digits}f}" if value is not None else "-"

        header = (f"{'File Name':30} {'Kind':5} {'Date Taken':19} {'Camera Model':20} "
                  f"{'Focal':10} {'Latitude':>11} {'Longitude':>11} {'Alt (m)':>8}")
        lines = [header, "-" * len(header)]
        for asset in assets:
            exif = asset.exif
            lines.append(
                f"{asset.file_name[:30]:30} {asset.file_kind[:5]:5} {exif.date_taken[:19]:19} "
                f"{exif.camera_model[:20]:20} {exif.focal_length[:10]:10} "
                f"{number(exif.latitude, 6):>11} {number(exif.longitude, 6):>11} "
                f"{number(exif.altitude, 1):>8}"
            )
        return "\n".join(lines)
