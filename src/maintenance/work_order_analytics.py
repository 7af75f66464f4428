"""
Work Order Analytics Module
Groups validated work orders per equipment and derives the raw history metrics
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Union
import logging

import numpy as np
import pandas as pd
from scipy import stats

from src.preprocessing.data_preprocessor import MaintenanceOrder
from src.utils.helpers import whole_days_between

# Setup logging
logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365
TREND_WINDOW_DAYS = 180


@dataclass(frozen=True)
class EquipmentRawMetrics:
    """History metrics for one equipment, before population normalization"""
    equipment_id: Optional[Union[int, float]]
    name: str
    equipment_type: str
    location: str
    total_orders: int
    frequency_annual: float
    avg_downtime_days: float
    days_since_last_order: int
    last_maintenance_date: pd.Timestamp
    trend_6m: int
    variability: float
    interval_mean_days: Optional[float]
    last_work_order_text: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = asdict(self)
        data['last_maintenance_date'] = self.last_maintenance_date.isoformat()
        return data


def group_orders(orders: Iterable[MaintenanceOrder]) -> Dict[str, List[MaintenanceOrder]]:
    """
    Group orders by equipment name

    Identifiers can repeat or be missing across differently named rows, so
    the name is the grouping key. Groups keep first-appearance order and each
    group is sorted ascending by close date (stable for equal dates).

    Args:
        orders: Validated work orders

    Returns:
        Equipment name -> orders sorted by close date
    """
    groups: Dict[str, List[MaintenanceOrder]] = {}
    for order in orders:
        groups.setdefault(order.equipment_name, []).append(order)

    for name in groups:
        groups[name].sort(key=lambda order: order.close_date)

    return groups


class EquipmentAggregator:
    """
    First pass of the prioritization pipeline
    Computes per-equipment raw metrics against a fixed evaluation instant
    """

    def __init__(self, trend_window_days: int = TREND_WINDOW_DAYS):
        """
        Initialize aggregator

        Args:
            trend_window_days: Length of each of the two trend windows
        """
        self.trend_window_days = trend_window_days

    def aggregate(self, orders: Iterable[MaintenanceOrder], now: pd.Timestamp) -> List[EquipmentRawMetrics]:
        """
        Compute raw metrics for every equipment group

        Args:
            orders: Validated work orders
            now: Evaluation instant shared by the whole run

        Returns:
            One metrics record per equipment, in first-appearance order
        """
        groups = group_orders(orders)
        metrics = [self.compute_metrics(name, group, now) for name, group in groups.items()]
        logger.info(f"Aggregated {sum(m.total_orders for m in metrics)} orders into {len(metrics)} equipment")
        return metrics

    def compute_metrics(self, name: str, orders: List[MaintenanceOrder], now: pd.Timestamp) -> EquipmentRawMetrics:
        """
        Compute the raw metrics of one equipment group

        Args:
            name: Equipment name (grouping key)
            orders: The group's orders, sorted ascending by close date
            now: Evaluation instant

        Returns:
            Raw metrics for the equipment
        """
        if not orders:
            raise ValueError(f"Equipment group '{name}' has no orders")

        last_order = orders[-1]
        total_orders = len(orders)
        durations = np.array([order.resolution_days for order in orders], dtype=float)

        first_entry = min(order.entry_date for order in orders)
        last_close = last_order.close_date

        # Histories shorter than a year count as one year
        history_days = whole_days_between(last_close, first_entry) + 1
        years = max(1.0, history_days / DAYS_PER_YEAR)
        frequency_annual = total_orders / years

        avg_downtime = float(durations.mean())

        return EquipmentRawMetrics(
            equipment_id=last_order.equipment_id,
            name=name,
            equipment_type=name.split()[0],
            location=last_order.location,
            total_orders=total_orders,
            frequency_annual=frequency_annual,
            avg_downtime_days=avg_downtime,
            days_since_last_order=whole_days_between(now, last_close),
            last_maintenance_date=last_close,
            trend_6m=self._trend(orders, now),
            variability=self._variability(durations, avg_downtime),
            interval_mean_days=self._interval_mean(orders),
            last_work_order_text=last_order.note,
        )

    def _trend(self, orders: List[MaintenanceOrder], now: pd.Timestamp) -> int:
        """Orders entered in the last window minus orders entered in the window before"""
        window = pd.Timedelta(days=self.trend_window_days)
        recent_cutoff = now - window
        previous_cutoff = now - 2 * window

        recent = sum(1 for order in orders if order.entry_date >= recent_cutoff)
        previous = sum(1 for order in orders if previous_cutoff <= order.entry_date < recent_cutoff)
        return recent - previous

    @staticmethod
    def _variability(durations: np.ndarray, avg_downtime: float) -> float:
        """Coefficient of variation of resolution times (sample std / mean)"""
        if len(durations) <= 1 or avg_downtime == 0:
            return 0.0
        return float(stats.variation(durations, ddof=1))

    @staticmethod
    def _interval_mean(orders: List[MaintenanceOrder]) -> Optional[float]:
        """Mean gap in days between consecutive closures, ignoring same-day closures"""
        if len(orders) <= 1:
            return None

        intervals = [
            whole_days_between(current.close_date, previous.close_date)
            for previous, current in zip(orders, orders[1:])
        ]
        positive = [interval for interval in intervals if interval > 0]
        if not positive:
            return None
        return float(np.mean(positive))
