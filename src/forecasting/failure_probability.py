"""
Failure Prediction Engine
Extrapolates the next failure window from the mean interval between past closures
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

WORRISOME_HORIZON_DAYS = 30
HIGH_CONFIDENCE_MAX_CV = 0.3
MEDIUM_CONFIDENCE_MAX_CV = 0.7


class PredictionStatus(Enum):
    """Proximity to the forecast failure"""
    DELAYED = "DELAYED"          # Forecast date already passed
    WORRISOME = "WORRISOME"      # Within the next 30 days
    OK = "OK"
    NO_HISTORY = "NO_HISTORY"    # Not enough closures to forecast


class ConfidenceLevel(Enum):
    """Confidence in the forecast, from resolution-time variability"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass(frozen=True)
class FailurePrediction:
    """Container for a next-failure forecast"""
    status: PredictionStatus
    predicted_failure_days: Optional[int] = None
    confidence: Optional[ConfidenceLevel] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'status': self.status.value,
            'predicted_failure_days': self.predicted_failure_days,
            'confidence': self.confidence.value if self.confidence else None,
        }


def confidence_from_variability(variability: float) -> ConfidenceLevel:
    """Map a coefficient of variation to a confidence label"""
    if variability < HIGH_CONFIDENCE_MAX_CV:
        return ConfidenceLevel.HIGH
    if variability < MEDIUM_CONFIDENCE_MAX_CV:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


class FailureIntervalPredictor:
    """Linear extrapolation of the mean time between closures"""

    def __init__(self, worrisome_horizon_days: int = WORRISOME_HORIZON_DAYS):
        self.worrisome_horizon_days = worrisome_horizon_days

    def predict(self,
                interval_mean_days: Optional[float],
                days_since_last_order: int,
                variability: float) -> FailurePrediction:
        """
        Forecast days until the next expected failure

        Args:
            interval_mean_days: Mean positive gap between closures, None if unknown
            days_since_last_order: Days since the latest closure
            variability: Coefficient of variation of resolution times

        Returns:
            Prediction with status, days to failure and confidence
        """
        if interval_mean_days is None or interval_mean_days <= 0:
            return FailurePrediction(status=PredictionStatus.NO_HISTORY)

        predicted_days = math.floor(interval_mean_days - days_since_last_order)

        if predicted_days <= 0:
            status = PredictionStatus.DELAYED
        elif predicted_days <= self.worrisome_horizon_days:
            status = PredictionStatus.WORRISOME
        else:
            status = PredictionStatus.OK

        return FailurePrediction(
            status=status,
            predicted_failure_days=predicted_days,
            confidence=confidence_from_variability(variability),
        )
