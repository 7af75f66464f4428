"""
Prioritization Pipeline Module
Turns a snapshot of closed work orders into the ranked equipment priority list
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import logging

import pandas as pd

from src.business_logic.business_rules_engine import JustificationEngine
from src.data_ingestion.data_loader import CLOSED_ORDERS, validate_sources
from src.forecasting.failure_probability import (
    ConfidenceLevel,
    FailureIntervalPredictor,
    FailurePrediction,
    PredictionStatus,
)
from src.maintenance.priority_calculator import CriticalityLevel, PriorityCalculator, PriorityScore
from src.maintenance.work_order_analytics import EquipmentAggregator, EquipmentRawMetrics
from src.preprocessing.data_preprocessor import RecordSanitizer, RecordSource, SanitizationReport
from src.preprocessing.normalizer import NormalizationStats, PopulationNormalizer
from src.utils.helpers import DateLike, generate_id, resolve_evaluation_instant
from src.utils.logger import LogContext, log_execution_time

# Setup logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredEquipment:
    """Ranked equipment: raw metrics, scores, forecast and justification"""
    # Raw metrics
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

    # Normalized scores (0-100)
    score_freq: float
    score_downtime: float
    score_trend: float
    score_negligence: float
    score_obsolescence: float
    score_final: float

    # Classification and forecast
    category: CriticalityLevel
    prediction_status: PredictionStatus
    predicted_failure_days: Optional[int]
    confidence: Optional[ConfidenceLevel]
    justification: str

    @classmethod
    def from_parts(cls,
                   metrics: EquipmentRawMetrics,
                   priority: PriorityScore,
                   prediction: FailurePrediction,
                   justification: str) -> 'ScoredEquipment':
        """Assemble the terminal record from the per-pass results"""
        raw = {f.name: getattr(metrics, f.name) for f in fields(metrics)}
        return cls(
            **raw,
            score_freq=priority.score_freq,
            score_downtime=priority.score_downtime,
            score_trend=priority.score_trend,
            score_negligence=priority.score_negligence,
            score_obsolescence=priority.score_obsolescence,
            score_final=priority.score_final,
            category=priority.category,
            prediction_status=prediction.status,
            predicted_failure_days=prediction.predicted_failure_days,
            confidence=prediction.confidence,
            justification=justification,
        )

    @property
    def reasons(self) -> List[str]:
        """Justification split back into individual reasons"""
        return [reason.strip() for reason in self.justification.split('|')]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['last_maintenance_date'] = self.last_maintenance_date.isoformat()
        data['category'] = self.category.value
        data['prediction_status'] = self.prediction_status.value
        data['confidence'] = self.confidence.value if self.confidence else None
        return data


@dataclass
class PrioritizationResult:
    """Outcome of one pipeline run"""
    run_id: str
    evaluated_at: pd.Timestamp
    equipment: List[ScoredEquipment]
    sanitization: SanitizationReport
    stats: Optional[NormalizationStats] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.equipment)


def rank_equipment(equipment: Sequence[ScoredEquipment]) -> List[ScoredEquipment]:
    """Sort by final score, highest first; ties keep their incoming order"""
    return sorted(equipment, key=lambda item: item.score_final, reverse=True)


class EquipmentPrioritizer:
    """
    Orchestrates the scoring pipeline
    sanitize -> aggregate -> normalize (population) -> score, forecast, justify -> rank
    """

    def __init__(self,
                 sanitizer: Optional[RecordSanitizer] = None,
                 aggregator: Optional[EquipmentAggregator] = None,
                 calculator: Optional[PriorityCalculator] = None,
                 predictor: Optional[FailureIntervalPredictor] = None,
                 justifier: Optional[JustificationEngine] = None):
        """Initialize the pipeline stages, defaults for any not given"""
        self.sanitizer = sanitizer or RecordSanitizer()
        self.aggregator = aggregator or EquipmentAggregator()
        self.calculator = calculator or PriorityCalculator()
        self.predictor = predictor or FailureIntervalPredictor()
        self.justifier = justifier or JustificationEngine()

    @log_execution_time
    def run(self, sources: Mapping[str, RecordSource], now: Optional[DateLike] = None) -> PrioritizationResult:
        """
        Run the full pipeline on one input snapshot

        Args:
            sources: Logical source name -> records; must hold both
                'open_orders' and 'closed_orders' (only closed orders are scored)
            now: Evaluation instant, current time when None

        Returns:
            Ranked equipment plus run diagnostics

        Raises:
            MissingSourceError: If a required source is absent
        """
        validate_sources(sources)
        evaluated_at = resolve_evaluation_instant(now)
        run_id = generate_id('run-')

        with LogContext(run_id=run_id):
            logger.info(f"Prioritization run evaluated at {evaluated_at.isoformat()}")

            orders, report = self.sanitizer.sanitize(sources[CLOSED_ORDERS])
            metrics = self.aggregator.aggregate(orders, evaluated_at)

            if not metrics:
                logger.warning("No equipment survived sanitization; returning an empty ranking")
                return PrioritizationResult(
                    run_id=run_id,
                    evaluated_at=evaluated_at,
                    equipment=[],
                    sanitization=report,
                )

            stats = PopulationNormalizer().fit_stats(metrics)
            ranked = rank_equipment([self.score_equipment(item, stats) for item in metrics])

            counts = pd.Series([item.category.value for item in ranked]).value_counts().to_dict()
            logger.info(f"Ranked {len(ranked)} equipment: {counts}")

        return PrioritizationResult(
            run_id=run_id,
            evaluated_at=evaluated_at,
            equipment=ranked,
            sanitization=report,
            stats=stats,
            metadata={'category_counts': counts},
        )

    def score_equipment(self, metrics: EquipmentRawMetrics, stats: NormalizationStats) -> ScoredEquipment:
        """Third pass for one equipment: score, forecast and justify"""
        priority = self.calculator.calculate_priority(metrics, stats)
        prediction = self.predictor.predict(
            metrics.interval_mean_days,
            metrics.days_since_last_order,
            metrics.variability,
        )
        return ScoredEquipment.from_parts(metrics, priority, prediction, self.justifier.justify(metrics))

    def prioritize(self, sources: Mapping[str, RecordSource], now: Optional[DateLike] = None) -> List[ScoredEquipment]:
        """Ranked equipment list for one input snapshot"""
        return self.run(sources, now).equipment


def prioritize_equipment(sources: Mapping[str, RecordSource], now: Optional[DateLike] = None) -> List[ScoredEquipment]:
    """
    Convenience wrapper around EquipmentPrioritizer with default stages

    Args:
        sources: Logical source name -> records
        now: Evaluation instant, current time when None

    Returns:
        Equipment ranked by descending priority score
    """
    return EquipmentPrioritizer().prioritize(sources, now)
