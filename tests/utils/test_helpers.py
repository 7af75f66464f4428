"""
Test utilities and helper functions for Equipment Maintenance Prioritization tests
"""

import numpy as np
import pandas as pd
from typing import Dict, List, Any, Optional, Sequence
import tempfile
import shutil
from pathlib import Path

from src.maintenance.work_order_analytics import EquipmentRawMetrics

# Column headers as exported by the maintenance system
EXPORT_HEADERS = {
    'equipment_id': 'Equipamento',
    'equipment_name': 'Denominação Equipamento',
    'location': 'Denominação Local',
    'entry_date': 'Data de entrada',
    'close_date': 'Data Encerramento',
    'note': 'Texto Longo da Ordem',
}


class OrderDataGenerator:
    """Generate work order records for the pipeline components"""

    EVALUATION_TIME = pd.Timestamp('2024-06-30')

    @staticmethod
    def closed_order(
        name: Optional[str],
        entry_date: Any,
        close_date: Any,
        equipment_id: Any = None,
        location: Optional[str] = 'Plant A',
        note: str = ''
    ) -> Dict[str, Any]:
        """Single closed order record with canonical field names"""
        return {
            'equipment_id': equipment_id,
            'equipment_name': name,
            'location': location,
            'entry_date': entry_date,
            'close_date': close_date,
            'note': note,
        }

    @staticmethod
    def periodic_history(
        name: str,
        now: pd.Timestamp,
        interval_days: int,
        count: int,
        duration_days: int = 1,
        last_close_days_ago: int = 0,
        equipment_id: Any = None,
        location: str = 'Plant A'
    ) -> List[Dict[str, Any]]:
        """Orders closing every ``interval_days``, the latest ``last_close_days_ago`` before ``now``"""
        records = []
        for k in range(count):
            close = now - pd.Timedelta(days=last_close_days_ago + k * interval_days)
            entry = close - pd.Timedelta(days=duration_days)
            records.append(OrderDataGenerator.closed_order(
                name, entry, close, equipment_id=equipment_id, location=location,
                note=f'Order {count - k} for {name}'
            ))
        # Oldest first, as exports list them
        return list(reversed(records))

    @staticmethod
    def random_population(
        n_equipment: int = 12,
        max_orders: int = 15,
        now: Optional[pd.Timestamp] = None,
        seed: int = 42
    ) -> List[Dict[str, Any]]:
        """Reproducible mixed population of closed orders"""
        rng = np.random.RandomState(seed)
        now = now if now is not None else OrderDataGenerator.EVALUATION_TIME
        kinds = ['PUMP', 'VALVE', 'MOTOR', 'COMPRESSOR', 'FAN']

        records = []
        for i in range(n_equipment):
            name = f'{kinds[i % len(kinds)]} EQ-{i:03d}'
            for _ in range(rng.randint(1, max_orders + 1)):
                entry = now - pd.Timedelta(days=int(rng.randint(5, 1200)))
                close = entry + pd.Timedelta(days=int(rng.randint(0, 60)))
                records.append(OrderDataGenerator.closed_order(
                    name, entry, close, equipment_id=2000 + i, location=f'Area {i % 3}'
                ))
        return records

    @staticmethod
    def sources(closed: Any, open_orders: Any = None) -> Dict[str, Any]:
        """Input bundle with both logical sources"""
        return {
            'open_orders': open_orders if open_orders is not None else [],
            'closed_orders': closed,
        }

    @staticmethod
    def to_export_frame(records: Sequence[Dict[str, Any]]) -> pd.DataFrame:
        """Records as a sheet with the export's original headers"""
        return pd.DataFrame(list(records)).rename(columns=EXPORT_HEADERS)


def make_metrics(**overrides) -> EquipmentRawMetrics:
    """Raw metrics for one equipment with neutral defaults"""
    values = {
        'equipment_id': 1,
        'name': 'PUMP P-1',
        'equipment_type': 'PUMP',
        'location': 'Plant A',
        'total_orders': 4,
        'frequency_annual': 4.0,
        'avg_downtime_days': 5.0,
        'days_since_last_order': 30,
        'last_maintenance_date': pd.Timestamp('2024-05-31'),
        'trend_6m': 0,
        'variability': 0.2,
        'interval_mean_days': 60.0,
        'last_work_order_text': '',
    }
    values.update(overrides)
    return EquipmentRawMetrics(**values)


class TempWorkspace:
    """Temporary directory for exports written by tests"""

    def __init__(self):
        self.path = Path(tempfile.mkdtemp(prefix='prioritization_test_'))

    def write_csv_sources(self, closed: pd.DataFrame, open_orders: Optional[pd.DataFrame] = None,
                          closed_name: str = 'Ordens Encerradas',
                          open_name: Optional[str] = 'Ordens Abertas') -> Path:
        """Write one CSV per sheet; ``open_name=None`` leaves the open orders out"""
        closed.to_csv(self.path / f'{closed_name}.csv', index=False)
        if open_name is not None:
            frame = open_orders if open_orders is not None else pd.DataFrame(columns=list(EXPORT_HEADERS.values()))
            frame.to_csv(self.path / f'{open_name}.csv', index=False)
        return self.path

    def write_workbook(self, sheets: Dict[str, pd.DataFrame], name: str = 'export.xlsx') -> Path:
        """Write a workbook with the given sheets"""
        path = self.path / name
        with pd.ExcelWriter(path, engine='openpyxl') as writer:
            for sheet_name, frame in sheets.items():
                frame.to_excel(writer, sheet_name=sheet_name, index=False)
        return path

    def cleanup(self):
        shutil.rmtree(self.path, ignore_errors=True)


def assert_dataframe_structure(df: pd.DataFrame, expected_columns: List[str], min_rows: int = 0):
    """Assert DataFrame has expected structure"""
    assert isinstance(df, pd.DataFrame), "Expected pandas DataFrame"
    assert list(df.columns) == list(expected_columns), \
        f"Columns {list(df.columns)} differ from {list(expected_columns)}"
    assert len(df) >= min_rows, f"DataFrame has {len(df)} rows, expected at least {min_rows}"
