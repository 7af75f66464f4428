"""
Priority Calculator Module
Weighted priority score and criticality tier for each equipment
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict
import logging

from src.maintenance.work_order_analytics import EquipmentRawMetrics
from src.preprocessing.normalizer import NormalizationStats

# Setup logging
logger = logging.getLogger(__name__)

# Fixed weights; obsolescence is a penalty
PRIORITY_WEIGHTS: Dict[str, float] = {
    'frequency': 0.35,
    'downtime': 0.30,
    'trend': 0.20,
    'negligence': 0.10,
    'obsolescence': -0.05,
}

# Lower bound of each tier, highest first
CATEGORY_THRESHOLDS = {
    'CRITICAL': 75,
    'HIGH': 50,
    'MEDIUM': 25,
}

OBSOLESCENCE_DAYS = 540

SCORE_MIN = 0.0
SCORE_MAX = 100.0


class CriticalityLevel(Enum):
    """Criticality tiers, from the final score"""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class PriorityScore:
    """Priority calculation result"""
    score_freq: float
    score_downtime: float
    score_trend: float
    score_negligence: float
    score_obsolescence: float
    score_final: float
    category: CriticalityLevel

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'score_freq': self.score_freq,
            'score_downtime': self.score_downtime,
            'score_trend': self.score_trend,
            'score_negligence': self.score_negligence,
            'score_obsolescence': self.score_obsolescence,
            'score_final': self.score_final,
            'category': self.category.value,
        }


def classify_score(score: float) -> CriticalityLevel:
    """Map a final score to its tier, evaluating thresholds top-down"""
    if score >= CATEGORY_THRESHOLDS['CRITICAL']:
        return CriticalityLevel.CRITICAL
    elif score >= CATEGORY_THRESHOLDS['HIGH']:
        return CriticalityLevel.HIGH
    elif score >= CATEGORY_THRESHOLDS['MEDIUM']:
        return CriticalityLevel.MEDIUM
    else:
        return CriticalityLevel.LOW


class PriorityCalculator:
    """Main priority calculation engine"""

    def calculate_priority(self, metrics: EquipmentRawMetrics, stats: NormalizationStats) -> PriorityScore:
        """Calculate priority score for one equipment

        Args:
            metrics: Raw metrics of the equipment
            stats: Population bounds of the current run

        Returns:
            Sub-scores, clamped final score and tier
        """
        component_scores = {
            'frequency': stats.normalize('frequency', metrics.frequency_annual),
            'downtime': stats.normalize('downtime', metrics.avg_downtime_days),
            # A rising order count (worsening) pushes the score up
            'trend': stats.normalize('trend', metrics.trend_6m),
            'negligence': stats.normalize('negligence', metrics.days_since_last_order),
            'obsolescence': SCORE_MAX if metrics.days_since_last_order > OBSOLESCENCE_DAYS else 0.0,
        }

        weighted = sum(PRIORITY_WEIGHTS[name] * value for name, value in component_scores.items())
        final_score = min(SCORE_MAX, max(SCORE_MIN, weighted))
        category = classify_score(final_score)

        logger.debug(f"Priority for '{metrics.name}': {category.value} (score: {final_score:.2f})")

        return PriorityScore(
            score_freq=component_scores['frequency'],
            score_downtime=component_scores['downtime'],
            score_trend=component_scores['trend'],
            score_negligence=component_scores['negligence'],
            score_obsolescence=component_scores['obsolescence'],
            score_final=final_score,
            category=category,
        )
