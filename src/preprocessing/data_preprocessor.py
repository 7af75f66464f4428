"""
Data Preprocessor Module for Maintenance Work Orders
Validates raw closed-order records and discards the ones unusable for scoring
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
import logging

import pandas as pd

from src.utils.helpers import (
    clean_identifier,
    clean_text,
    parse_order_date,
    whole_days_between,
)

# Setup logging
logger = logging.getLogger(__name__)

# Longest accepted entry-to-close span (three years)
MAX_RESOLUTION_DAYS = 1095

DEFAULT_LOCATION = "Not informed"

RecordSource = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


class DropReason(Enum):
    """Why a raw record was discarded"""
    MISSING_EQUIPMENT_NAME = "missing_equipment_name"
    INVALID_ENTRY_DATE = "invalid_entry_date"
    INVALID_CLOSE_DATE = "invalid_close_date"
    CLOSED_BEFORE_ENTRY = "closed_before_entry"
    RESOLUTION_OUTLIER = "resolution_outlier"


@dataclass(frozen=True)
class MaintenanceOrder:
    """A closed work order that passed validation"""
    equipment_id: Optional[Union[int, float]]
    equipment_name: str
    location: str
    entry_date: pd.Timestamp
    close_date: pd.Timestamp
    resolution_days: int
    note: str = ""


@dataclass
class SanitizationReport:
    """Counts of accepted and discarded records for one run"""
    total_records: int = 0
    accepted: int = 0
    dropped: Dict[DropReason, int] = field(default_factory=dict)

    @property
    def dropped_total(self) -> int:
        return sum(self.dropped.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'total_records': self.total_records,
            'accepted': self.accepted,
            'dropped_total': self.dropped_total,
            'dropped': {reason.value: count for reason, count in self.dropped.items()},
        }


def iter_records(source: RecordSource) -> Iterator[Mapping[str, Any]]:
    """Yield records from a DataFrame or any iterable of mappings"""
    if isinstance(source, pd.DataFrame):
        yield from source.to_dict(orient='records')
    else:
        yield from source


class RecordSanitizer:
    """
    Gatekeeper for work order data quality
    Resolves dates, computes resolution time and filters invalid records
    """

    def __init__(self,
                 max_resolution_days: int = MAX_RESOLUTION_DAYS,
                 default_location: str = DEFAULT_LOCATION):
        """
        Initialize sanitizer

        Args:
            max_resolution_days: Longest accepted entry-to-close span in days
            default_location: Location used when a record has none
        """
        self.max_resolution_days = max_resolution_days
        self.default_location = default_location

    def check_record(self, record: Mapping[str, Any]) -> Tuple[Optional[MaintenanceOrder], Optional[DropReason]]:
        """
        Validate a single raw record

        Args:
            record: Mapping with canonical field names

        Returns:
            (order, None) when valid, (None, reason) otherwise
        """
        name = clean_text(record.get('equipment_name'))
        if name is None:
            return None, DropReason.MISSING_EQUIPMENT_NAME

        entry_date = parse_order_date(record.get('entry_date'))
        if entry_date is None:
            return None, DropReason.INVALID_ENTRY_DATE

        close_date = parse_order_date(record.get('close_date'))
        if close_date is None:
            return None, DropReason.INVALID_CLOSE_DATE

        resolution_days = whole_days_between(close_date, entry_date)
        if resolution_days < 0:
            return None, DropReason.CLOSED_BEFORE_ENTRY
        if resolution_days > self.max_resolution_days:
            return None, DropReason.RESOLUTION_OUTLIER

        order = MaintenanceOrder(
            equipment_id=clean_identifier(record.get('equipment_id')),
            equipment_name=name,
            location=clean_text(record.get('location')) or self.default_location,
            entry_date=entry_date,
            close_date=close_date,
            resolution_days=resolution_days,
            note=clean_text(record.get('note')) or "",
        )
        return order, None

    def sanitize_record(self, record: Mapping[str, Any]) -> Optional[MaintenanceOrder]:
        """Return the validated order, or None if the record is dropped"""
        order, _ = self.check_record(record)
        return order

    def sanitize(self, records: RecordSource) -> Tuple[List[MaintenanceOrder], SanitizationReport]:
        """
        Validate a stream of raw records

        Record-level defects never raise; the record is skipped and counted.

        Args:
            records: DataFrame or iterable of mappings with canonical fields

        Returns:
            Accepted orders in input order, and the run's report
        """
        orders = []
        drops = Counter()
        total = 0

        for index, record in enumerate(iter_records(records)):
            total += 1
            order, reason = self.check_record(record)
            if order is None:
                drops[reason] += 1
                logger.debug(f"Dropped record {index}: {reason.value}")
                continue
            orders.append(order)

        report = SanitizationReport(
            total_records=total,
            accepted=len(orders),
            dropped=dict(drops),
        )

        if report.dropped_total:
            logger.info(
                f"Sanitized {total} records: {report.accepted} accepted, "
                f"{report.dropped_total} dropped ({report.to_dict()['dropped']})"
            )
        else:
            logger.info(f"Sanitized {total} records: all accepted")

        return orders, report
