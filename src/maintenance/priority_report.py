"""
Priority Report Module
Export, summary statistics and filtering of the ranked equipment list
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union
import logging

import pandas as pd

from config.settings import settings, ExportConfig
from src.forecasting.failure_probability import PredictionStatus
from src.maintenance.prioritization_pipeline import ScoredEquipment
from src.maintenance.priority_calculator import CriticalityLevel
from src.utils.helpers import ensure_directory

# Setup logging
logger = logging.getLogger(__name__)

EXPORT_SUFFIXES = ('.xlsx', '.csv')

# Export column -> (attribute, decimals or None)
EXPORT_COLUMNS = {
    'ID': ('equipment_id', None),
    'Equipment': ('name', None),
    'Type': ('equipment_type', None),
    'Location': ('location', None),
    'Priority Score': ('score_final', 2),
    'Category': ('category', None),
    'Frequency (per year)': ('frequency_annual', 2),
    'Mean Repair Time (days)': ('avg_downtime_days', 1),
    'Days Since Last Order': ('days_since_last_order', None),
    'Prediction Status': ('prediction_status', None),
    'Days to Failure (est.)': ('predicted_failure_days', None),
    'Statistical Confidence': ('confidence', None),
    'Justification': ('justification', None),
}


@dataclass
class FilterState:
    """Filters applied to the ranked list"""
    categories: List[CriticalityLevel] = field(default_factory=list)
    search: str = ""
    min_score: float = 0.0


def _export_value(item: ScoredEquipment, attribute: str, decimals: Optional[int]):
    value = getattr(item, attribute)
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if decimals is not None:
        return round(float(value), decimals)
    return value


def to_export_frame(equipment: Sequence[ScoredEquipment]) -> pd.DataFrame:
    """
    Build the export table, one row per equipment in ranking order

    Args:
        equipment: Ranked equipment

    Returns:
        DataFrame with the export columns
    """
    rows = [
        {column: _export_value(item, attribute, decimals)
         for column, (attribute, decimals) in EXPORT_COLUMNS.items()}
        for item in equipment
    ]
    # Object columns keep integer ids and empty forecasts as they are
    return pd.DataFrame(rows, columns=list(EXPORT_COLUMNS), dtype=object)


def default_export_path(config: Optional[ExportConfig] = None,
                        when: Optional[datetime] = None,
                        suffix: str = '.xlsx') -> Path:
    """Dated export file name inside the configured output directory"""
    config = config or settings.get_export_config()
    when = when or datetime.now()
    return Path(config.output_dir) / f"{config.file_prefix}_{when:%Y-%m-%d}{suffix}"


def export_ranking(equipment: Sequence[ScoredEquipment],
                   path: Union[str, Path],
                   config: Optional[ExportConfig] = None) -> Path:
    """
    Write the ranking to a spreadsheet or CSV file

    Args:
        equipment: Ranked equipment
        path: Destination, '.xlsx' or '.csv'
        config: Export configuration, defaults to the global settings

    Returns:
        Path written
    """
    config = config or settings.get_export_config()
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in EXPORT_SUFFIXES:
        raise ValueError(f"Unsupported export format '{path.suffix}', use .xlsx or .csv")

    ensure_directory(path.parent)
    frame = to_export_frame(equipment)

    if suffix == '.xlsx':
        frame.to_excel(path, sheet_name=config.sheet_name, index=False, engine='openpyxl')
    else:
        frame.to_csv(path, index=False, encoding='utf-8')

    logger.info(f"Exported {len(frame)} equipment to {path}")
    return path


def summarize(equipment: Sequence[ScoredEquipment]) -> Dict[str, int]:
    """
    Headline counts of a ranking

    Args:
        equipment: Ranked (optionally filtered) equipment

    Returns:
        Total, overdue forecasts and per-tier counts
    """
    summary = {
        'total': len(equipment),
        'delayed': sum(1 for item in equipment if item.prediction_status is PredictionStatus.DELAYED),
    }
    for level in CriticalityLevel:
        summary[level.value.lower()] = sum(1 for item in equipment if item.category is level)
    return summary


def filter_equipment(equipment: Sequence[ScoredEquipment], filters: FilterState) -> List[ScoredEquipment]:
    """
    Apply search, tier and minimum-score filters, keeping ranking order

    The search is a case-insensitive substring match on name, type or location.
    An empty category list means every tier.
    """
    needle = filters.search.strip().lower()

    def matches(item: ScoredEquipment) -> bool:
        if needle and not any(needle in text.lower() for text in (item.name, item.equipment_type, item.location)):
            return False
        if filters.categories and item.category not in filters.categories:
            return False
        return item.score_final >= filters.min_score

    return [item for item in equipment if matches(item)]
