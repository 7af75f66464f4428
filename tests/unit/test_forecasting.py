"""
Unit Tests for Forecasting Module
Tests for the closure-interval failure predictor
"""

import unittest
import pytest

from src.forecasting.failure_probability import (
    ConfidenceLevel,
    FailureIntervalPredictor,
    FailurePrediction,
    PredictionStatus,
    confidence_from_variability,
)


@pytest.mark.unit
class TestFailureIntervalPredictor(unittest.TestCase):
    """Test cases for the failure predictor"""

    def setUp(self):
        """Set up test fixtures"""
        self.predictor = FailureIntervalPredictor()

    def test_no_history(self):
        """Test missing interval yields an empty forecast"""
        prediction = self.predictor.predict(None, 12, 0.1)

        self.assertIsInstance(prediction, FailurePrediction)
        self.assertEqual(prediction.status, PredictionStatus.NO_HISTORY)
        self.assertIsNone(prediction.predicted_failure_days)
        self.assertIsNone(prediction.confidence)

    def test_worrisome_window(self):
        """Test a forecast inside the next 30 days"""
        prediction = self.predictor.predict(10.0, 5, 0.0)

        self.assertEqual(prediction.predicted_failure_days, 5)
        self.assertEqual(prediction.status, PredictionStatus.WORRISOME)
        self.assertEqual(prediction.confidence, ConfidenceLevel.HIGH)

    def test_status_boundaries(self):
        """Test the DELAYED, WORRISOME and OK limits"""
        self.assertEqual(self.predictor.predict(10.0, 10, 0.0).status, PredictionStatus.DELAYED)
        self.assertEqual(self.predictor.predict(10.0, 9, 0.0).status, PredictionStatus.WORRISOME)
        self.assertEqual(self.predictor.predict(35.0, 5, 0.0).status, PredictionStatus.WORRISOME)
        self.assertEqual(self.predictor.predict(36.0, 5, 0.0).status, PredictionStatus.OK)

    def test_overdue_forecast_is_negative(self):
        """Test an overdue forecast keeps the number of days late"""
        prediction = self.predictor.predict(20.0, 50, 0.5)

        self.assertEqual(prediction.status, PredictionStatus.DELAYED)
        self.assertEqual(prediction.predicted_failure_days, -30)
        self.assertEqual(prediction.confidence, ConfidenceLevel.MEDIUM)

    def test_fractional_interval_rounds_down(self):
        """Test days to failure are floored"""
        self.assertEqual(self.predictor.predict(10.5, 5, 0.0).predicted_failure_days, 5)
        self.assertEqual(self.predictor.predict(10.5, 11, 0.0).predicted_failure_days, -1)

    def test_custom_horizon(self):
        """Test the worrisome horizon can be narrowed"""
        predictor = FailureIntervalPredictor(worrisome_horizon_days=7)
        self.assertEqual(predictor.predict(20.0, 5, 0.0).status, PredictionStatus.OK)

    def test_confidence_levels(self):
        """Test variability thresholds"""
        self.assertEqual(confidence_from_variability(0.0), ConfidenceLevel.HIGH)
        self.assertEqual(confidence_from_variability(0.29), ConfidenceLevel.HIGH)
        self.assertEqual(confidence_from_variability(0.3), ConfidenceLevel.MEDIUM)
        self.assertEqual(confidence_from_variability(0.69), ConfidenceLevel.MEDIUM)
        self.assertEqual(confidence_from_variability(0.7), ConfidenceLevel.LOW)
        self.assertEqual(confidence_from_variability(2.5), ConfidenceLevel.LOW)

    def test_to_dict(self):
        """Test serialization of a prediction"""
        self.assertEqual(
            self.predictor.predict(40.0, 5, 0.9).to_dict(),
            {'status': 'OK', 'predicted_failure_days': 35, 'confidence': 'Low'},
        )
        self.assertEqual(
            self.predictor.predict(None, 5, 0.9).to_dict(),
            {'status': 'NO_HISTORY', 'predicted_failure_days': None, 'confidence': None},
        )


if __name__ == '__main__':
    unittest.main()
