"""
Normalizer Module for Equipment Metrics
Population-relative min-max scaling of the scored metric dimensions
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple
import logging

import pandas as pd

# Setup logging
logger = logging.getLogger(__name__)

# Scored dimension -> raw metrics attribute
DIMENSIONS: Dict[str, str] = {
    'frequency': 'frequency_annual',
    'downtime': 'avg_downtime_days',
    'trend': 'trend_6m',
    'negligence': 'days_since_last_order',
}

SCALE_MAX = 100.0


def normalize_value(value: float, minimum: float, maximum: float) -> float:
    """
    Map a value onto 0-100 relative to the population bounds

    A degenerate dimension (every equipment has the same value) maps to 0.

    Args:
        value: Raw metric value
        minimum: Population minimum
        maximum: Population maximum

    Returns:
        Normalized value
    """
    if maximum == minimum:
        return 0.0
    return (value - minimum) / (maximum - minimum) * SCALE_MAX


@dataclass(frozen=True)
class NormalizationStats:
    """Population bounds for one run"""
    frequency: Tuple[float, float]
    downtime: Tuple[float, float]
    trend: Tuple[float, float]
    negligence: Tuple[float, float]

    def normalize(self, dimension: str, value: float) -> float:
        """Normalize a raw value on the named dimension"""
        minimum, maximum = getattr(self, dimension)
        return normalize_value(value, minimum, maximum)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            dimension: {'min': getattr(self, dimension)[0], 'max': getattr(self, dimension)[1]}
            for dimension in DIMENSIONS
        }


class PopulationNormalizer:
    """
    Second pass of the prioritization pipeline
    Collects global bounds over the complete equipment population
    """

    def __init__(self):
        self.stats_ = None

    def fit(self, population: Sequence[Any]) -> 'PopulationNormalizer':
        """
        Compute min/max per dimension over the whole population

        Args:
            population: Raw metrics of every equipment in the run

        Returns:
            self
        """
        if len(population) == 0:
            raise ValueError("Cannot normalize an empty equipment population")

        frame = pd.DataFrame(
            {dimension: [getattr(item, attribute) for item in population]
             for dimension, attribute in DIMENSIONS.items()},
            dtype=float,
        )
        bounds = frame.agg(['min', 'max'])

        self.stats_ = NormalizationStats(**{
            dimension: (float(bounds.at['min', dimension]), float(bounds.at['max', dimension]))
            for dimension in DIMENSIONS
        })

        logger.debug(f"Population bounds over {len(frame)} equipment: {self.stats_.to_dict()}")
        return self

    @property
    def stats(self) -> NormalizationStats:
        if self.stats_ is None:
            raise ValueError("Normalizer not fitted")
        return self.stats_

    def fit_stats(self, population: Sequence[Any]) -> NormalizationStats:
        """Fit and return the population bounds"""
        return self.fit(population).stats
