"""
Data Loader Module for Maintenance Work Order Exports
Handles loading of workbook/CSV exports into the open and closed order sources
"""

import zipfile
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Union, Any
import logging

import numpy as np
import pandas as pd

from config.settings import settings, IngestionConfig

# Setup logging
logger = logging.getLogger(__name__)

OPEN_ORDERS = 'open_orders'
CLOSED_ORDERS = 'closed_orders'
REQUIRED_SOURCES = (OPEN_ORDERS, CLOSED_ORDERS)

WORKBOOK_SUFFIXES = ('.xlsx', '.xlsm')

# Canonical field -> accepted column spellings, first non-empty wins per row
COLUMN_ALIASES: Dict[str, List[str]] = {
    'equipment_id': ['equipment_id', 'Equipamento'],
    'equipment_name': [
        'equipment_name',
        'Denominação Equipamento',
        'Denominacao Equipamento',
        'Denominação do Equipamento',
    ],
    'location': ['location', 'Denominação Local', 'Denominacao Local', 'Local'],
    'entry_date': ['entry_date', 'Data de entrada'],
    'close_date': ['close_date', 'Data Encerramento', 'Data Encerrramento'],
    'note': ['note', 'Texto Longo da Ordem', 'Texto Longo'],
}


class MissingSourceError(ValueError):
    """Raised when a required order source is absent from the input bundle"""

    def __init__(self, missing: Sequence[str], message: Optional[str] = None):
        self.missing = list(missing)
        if message is None:
            message = (
                "Input must contain the sources "
                + " and ".join(f"'{name}'" for name in REQUIRED_SOURCES)
                + f"; missing: {', '.join(self.missing)}"
            )
        super().__init__(message)


class WorkbookLoadError(IOError):
    """Raised when a work order export cannot be read"""


def validate_sources(sources: Mapping[str, Any],
                     required: Sequence[str] = REQUIRED_SOURCES) -> None:
    """Check that every required logical source is present

    Only presence is checked; open orders are not consumed by scoring.

    Args:
        sources: Logical source name -> records
        required: Source names that must be present

    Raises:
        MissingSourceError: If any required source is absent
    """
    missing = [name for name in required if sources.get(name) is None]
    if missing:
        raise MissingSourceError(missing)


def normalize_columns(frame: pd.DataFrame,
                      aliases: Optional[Dict[str, List[str]]] = None) -> pd.DataFrame:
    """Map historical column spellings onto canonical field names

    Args:
        frame: Raw sheet as read from the export
        aliases: Canonical field -> accepted spellings

    Returns:
        DataFrame with exactly the canonical columns, in alias-table order
    """
    aliases = aliases or COLUMN_ALIASES
    frame = frame.rename(columns=lambda c: str(c).strip())
    normalized = pd.DataFrame(index=frame.index)

    for canonical, spellings in aliases.items():
        present = [name for name in spellings if name in frame.columns]
        if not present:
            normalized[canonical] = pd.Series([None] * len(frame), index=frame.index, dtype=object)
            continue

        candidates = frame[present].astype(object)
        candidates = candidates.mask(candidates.map(lambda v: isinstance(v, str) and not v.strip()))
        candidates = candidates.where(candidates.notna(), None)
        normalized[canonical] = candidates.bfill(axis=1).iloc[:, 0]

    return normalized.replace({np.nan: None})


class MaintenanceWorkbookLoader:
    """
    Loader for work order exports
    Reads a workbook (one sheet per source) or a directory of CSV files
    """

    def __init__(self, config: Optional[IngestionConfig] = None):
        """
        Initialize loader

        Args:
            config: Ingestion configuration, defaults to the global settings
        """
        self.config = config or settings.get_ingestion_config()

    def load(self, path: Union[str, Path]) -> Dict[str, pd.DataFrame]:
        """
        Load the open and closed order sources

        Args:
            path: Workbook file or directory of CSV files

        Returns:
            Logical source name -> DataFrame with canonical columns

        Raises:
            WorkbookLoadError: If the export cannot be read
            MissingSourceError: If a required sheet is absent
        """
        path = Path(path)
        if not path.exists():
            raise WorkbookLoadError(f"Input not found: {path}")

        if path.is_dir():
            sheets = self._read_csv_directory(path)
        elif path.suffix.lower() in WORKBOOK_SUFFIXES:
            sheets = self._read_workbook(path)
        else:
            raise WorkbookLoadError(
                f"Unsupported input type '{path.suffix}'; expected one of {', '.join(WORKBOOK_SUFFIXES)} or a directory"
            )

        sheet_names = self.config.sheet_names
        missing = [sheet_names[source] for source in REQUIRED_SOURCES if sheet_names[source] not in sheets]
        if missing:
            raise MissingSourceError(
                missing,
                "The file must contain the sheets "
                + " and ".join(f"'{sheet_names[source]}'" for source in REQUIRED_SOURCES)
                + f"; missing: {', '.join(missing)}"
            )

        sources = {}
        for source in REQUIRED_SOURCES:
            frame = normalize_columns(sheets[sheet_names[source]])
            frame['location'] = frame['location'].where(frame['location'].notna(), self.config.default_location)
            sources[source] = frame
            logger.info(f"Loaded {len(frame)} rows for '{source}' from sheet '{sheet_names[source]}'")

        return sources

    def _read_workbook(self, path: Path) -> Dict[str, pd.DataFrame]:
        """Read every sheet of a workbook"""
        try:
            return pd.read_excel(path, sheet_name=None, engine='openpyxl')
        except (zipfile.BadZipFile, ValueError, OSError, KeyError) as e:
            raise WorkbookLoadError(f"Could not read workbook {path}: {e}") from e

    def _read_csv_directory(self, path: Path) -> Dict[str, pd.DataFrame]:
        """Read CSV files named after the sheets or the logical sources"""
        sheets = {}
        for source, sheet in self.config.sheet_names.items():
            for candidate in (path / f"{sheet}.csv", path / f"{source}.csv"):
                if candidate.exists():
                    try:
                        sheets[sheet] = pd.read_csv(candidate)
                    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
                        raise WorkbookLoadError(f"Could not read {candidate}: {e}") from e
                    break
        return sheets
