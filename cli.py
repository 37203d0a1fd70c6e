"""
Command-Line Interface for the Photo Metadata & Detection KPI system

Provides commands for extracting photo metadata, computing detection KPIs
and scanning the mock cloud bucket.
"""

import json
import sys
import argparse
import logging

from extractors import ExifExtractor
from parsers import DetectionParser
from analyzers import aggregate
from reporters import TextReporter, assemble, describe_selection
from storage import MockCloudStorageProvider, create_storage_provider

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def cmd_extract(args):
    """Extract metadata from photos in a folder."""
    logger.info(f"Extracting metadata from: {args.folder}")

    extractor = ExifExtractor.from_config(args.config)
    assets = extractor.extract_folder(args.folder, folder_label=args.label)

    if not assets:
        logger.warning("No photos extracted")
        return

    logger.info("\n" + TextReporter.format_assets(assets))

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump([asset.to_dict() for asset in assets], f, indent=2)
        logger.info(f"✓ Metadata saved to: {args.output}")


def cmd_kpi(args):
    """Parse detection files and report per-class confidence KPIs."""
    parser = DetectionParser.from_config(args.config)
    reporter = TextReporter.from_config(args.config)

    detections = parser.parse_files(args.files)
    groups = aggregate(detections)
    report = assemble(groups, describe_selection(len(args.files)))

    if report.is_empty:
        logger.warning("Scan complete. No valid detection data found in the selected files.")
    else:
        logger.info(f"✓ KPI analysis complete:")
        logger.info(f"  Total Detections: {report.total_detections}")
        logger.info(f"  Object Types: {len(report.groups)}")
        for group in report.groups:
            ranges = ", ".join(f"{label}: {count}" for label, count in group.score_ranges.items())
            logger.info(f"  {group.class_name:30} | {group.total():5} | {ranges}")

    if args.report:
        report_path = reporter.generate_report(report, filename=args.output)
        logger.info(f"✓ Report saved to: {report_path}")


def cmd_sync(args):
    """Scan the mock cloud bucket for photo assets."""
    storage = create_storage_provider(args.config)
    if not isinstance(storage, MockCloudStorageProvider):
        storage = MockCloudStorageProvider()

    folder = args.folder or storage.scan_folder
    logger.info(f"Connecting to bucket: {storage.bucket}")
    logger.info(f"Scanning folder {folder}...")

    assets = storage.scan_assets(folder)
    if not assets:
        logger.info(f"Sync complete. No new files found in {folder}.")
        return

    logger.info(f"{len(assets)} files found:")
    logger.info("\n" + TextReporter.format_assets(assets))


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='Photo Metadata & Detection KPI Analysis',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Extract metadata from a folder of images and save it as JSON
  photo-kpi extract /surveys/2024-06-01 --output assets.json

  # Compute detection KPIs and write a text report
  photo-kpi kpi run1/detections.json run2/detections.xml --report

  # Scan the mock cloud bucket
  photo-kpi sync --folder /output/images
        '''
    )

    parser.add_argument('--config', default='config.yaml', help='Path to config file')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Extract command
    extract_parser = subparsers.add_parser('extract', help='Extract metadata from photos')
    extract_parser.add_argument('folder', help='Folder containing photos')
    extract_parser.add_argument('--label', help='Folder label stored on each asset (default: folder path)')
    extract_parser.add_argument('--output', help='Write extracted assets to this JSON file')
    extract_parser.set_defaults(func=cmd_extract)

    # KPI command
    kpi_parser = subparsers.add_parser('kpi', help='Compute detection confidence KPIs')
    kpi_parser.add_argument('files', nargs='+', help='Detection files (.json or .xml)')
    kpi_parser.add_argument('--report', action='store_true', help='Generate text report')
    kpi_parser.add_argument('--output', help='Report filename')
    kpi_parser.set_defaults(func=cmd_kpi)

    # Sync command
    sync_parser = subparsers.add_parser('sync', help='Scan the mock cloud bucket')
    sync_parser.add_argument('--folder', help='Bucket folder to scan (default: configured scan folder)')
    sync_parser.set_defaults(func=cmd_sync)

    args = parser.parse_args()
    setup_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
