#!/usr/bin/env python3
"""
Equipment Prioritization Script
Loads a work order export, ranks the equipment and writes the priority report
"""

import os
import sys
import argparse
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import Settings
from src.data_ingestion.data_loader import MaintenanceWorkbookLoader, MissingSourceError, WorkbookLoadError
from src.maintenance.prioritization_pipeline import EquipmentPrioritizer
from src.maintenance.priority_calculator import CriticalityLevel
from src.maintenance.priority_report import (
    EXPORT_SUFFIXES,
    FilterState,
    default_export_path,
    export_ranking,
    filter_equipment,
    summarize,
    to_export_frame,
)
from src.preprocessing.data_preprocessor import RecordSanitizer
from src.utils.helpers import resolve_evaluation_instant
from src.utils.logger import get_logger, set_level


def build_parser() -> argparse.ArgumentParser:
    """Command line definition"""
    parser = argparse.ArgumentParser(description='Rank equipment for maintenance from a work order export')
    parser.add_argument('--input', '-i', type=str, required=True,
                        help='Workbook (.xlsx) or directory of CSV files with open and closed orders')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Export file (.xlsx or .csv); defaults to a dated file in the output directory')
    parser.add_argument('--no-export', action='store_true',
                        help='Only print the summary, do not write a report')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to configuration file')
    parser.add_argument('--now', type=str, default=None,
                        help='Evaluation date (e.g. 2024-06-30); defaults to the current time')
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    parser.add_argument('--search', type=str, default='',
                        help='Keep equipment whose name, type or location contains this text')
    parser.add_argument('--category', action='append', default=[],
                        choices=[level.value for level in CriticalityLevel],
                        help='Keep only this tier (repeatable)')
    parser.add_argument('--min-score', type=float, default=0.0,
                        help='Keep equipment with at least this priority score')
    parser.add_argument('--top', type=int, default=20,
                        help='Number of rows to print')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function"""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings(args.config)
    logger = get_logger(__name__)
    if args.log_level:
        set_level(args.log_level)

    if args.output and Path(args.output).suffix.lower() not in EXPORT_SUFFIXES:
        parser.error(f"--output must end with one of {', '.join(EXPORT_SUFFIXES)}")

    try:
        now = resolve_evaluation_instant(args.now)
    except ValueError as e:
        parser.error(str(e))

    ingestion_config = settings.get_ingestion_config()
    loader = MaintenanceWorkbookLoader(ingestion_config)
    prioritizer = EquipmentPrioritizer(
        sanitizer=RecordSanitizer(default_location=ingestion_config.default_location)
    )

    try:
        sources = loader.load(args.input)
        result = prioritizer.run(sources, now)
    except (MissingSourceError, WorkbookLoadError) as e:
        logger.error(f"Cannot run prioritization: {e}")
        return 1

    filters = FilterState(
        categories=[CriticalityLevel(value) for value in args.category],
        search=args.search,
        min_score=args.min_score,
    )
    equipment = filter_equipment(result.equipment, filters)

    summary = summarize(equipment)
    print(f"\nEvaluated at {result.evaluated_at:%Y-%m-%d %H:%M} (run {result.run_id})")
    print(f"Records: {result.sanitization.total_records} read, {result.sanitization.accepted} used, "
          f"{result.sanitization.dropped_total} discarded")
    print("Equipment: " + ", ".join(f"{key}={value}" for key, value in summary.items()))

    if equipment:
        print()
        print(to_export_frame(equipment[:args.top]).to_string(index=False))

    if not args.no_export:
        output = args.output or default_export_path(settings.get_export_config(), now.to_pydatetime())
        path = export_ranking(equipment, output, settings.get_export_config())
        print(f"\nReport written to {path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
