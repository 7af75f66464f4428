"""
Unit Tests for Utility Module
Tests for value/date helpers and log context handling
"""

import logging
import unittest
from datetime import date, datetime
import pytest
import numpy as np
import pandas as pd

from src.utils.helpers import (
    clean_identifier,
    clean_text,
    generate_id,
    is_missing,
    parse_order_date,
    resolve_evaluation_instant,
    whole_days_between,
)
from src.utils.logger import ContextFilter, LogContext, clear_context, log_execution_time, set_run_id


@pytest.mark.unit
class TestValueHelpers(unittest.TestCase):
    """Test cases for cell value cleaning"""

    def test_is_missing(self):
        """Test absent cell values"""
        for value in (None, '', '  ', np.nan, pd.NaT):
            self.assertTrue(is_missing(value))
        for value in ('x', 0, 0.0, False):
            self.assertFalse(is_missing(value))

    def test_clean_text(self):
        """Test text conversion"""
        self.assertEqual(clean_text('  PUMP  '), 'PUMP')
        self.assertEqual(clean_text(1001.0), '1001')
        self.assertIsNone(clean_text(np.nan))

    def test_clean_identifier(self):
        """Test numeric identifiers"""
        self.assertEqual(clean_identifier(' 42 '), 42)
        self.assertEqual(clean_identifier(np.int64(7)), 7)
        self.assertEqual(clean_identifier(1.5), 1.5)
        self.assertIsNone(clean_identifier('P-1'))
        self.assertIsNone(clean_identifier(True))
        self.assertIsNone(clean_identifier(float('inf')))


@pytest.mark.unit
class TestDateHelpers(unittest.TestCase):
    """Test cases for date resolution"""

    def test_serial_dates(self):
        """Test spreadsheet serial numbers"""
        self.assertEqual(parse_order_date(45000), pd.Timestamp('2023-03-15'))
        self.assertEqual(parse_order_date(45000.99), pd.Timestamp('2023-03-15'))
        self.assertEqual(parse_order_date(np.float64(1)), pd.Timestamp('1899-12-31'))

    def test_serial_dates_as_text(self):
        """Test serial numbers stored as text resolve like numbers"""
        self.assertEqual(parse_order_date('45000'), pd.Timestamp('2023-03-15'))
        self.assertEqual(parse_order_date(' 45000.75 '), pd.Timestamp('2023-03-15'))
        self.assertEqual(parse_order_date('20240115'), pd.Timestamp('2024-01-15'))

    def test_datetime_objects(self):
        """Test native date types"""
        self.assertEqual(parse_order_date(datetime(2024, 1, 2, 8, 30)), pd.Timestamp('2024-01-02 08:30'))
        self.assertEqual(parse_order_date(date(2024, 1, 2)), pd.Timestamp('2024-01-02'))
        self.assertEqual(parse_order_date(np.datetime64('2024-01-02')), pd.Timestamp('2024-01-02'))

    def test_timezone_aware_converted_to_utc(self):
        """Test aware timestamps become naive UTC"""
        value = pd.Timestamp('2024-01-02 03:00', tz='Etc/GMT-3')
        self.assertEqual(parse_order_date(value), pd.Timestamp('2024-01-02 00:00'))

    def test_text_dates(self):
        """Test text parsing"""
        self.assertEqual(parse_order_date('2024-03-05'), pd.Timestamp('2024-03-05'))
        self.assertEqual(parse_order_date(' 2024-03-05 10:00 '), pd.Timestamp('2024-03-05 10:00'))

    def test_unresolvable(self):
        """Test values that are not dates"""
        for value in (None, '', 'soon', True, pd.NaT, float('nan'), 10 ** 9):
            self.assertIsNone(parse_order_date(value))

    def test_whole_days_between(self):
        """Test day differences round down"""
        later = pd.Timestamp('2024-01-10 06:00')
        self.assertEqual(whole_days_between(later, pd.Timestamp('2024-01-08 12:00')), 1)
        self.assertEqual(whole_days_between(later, pd.Timestamp('2024-01-10 06:00')), 0)
        self.assertEqual(whole_days_between(pd.Timestamp('2024-01-08'), pd.Timestamp('2024-01-10')), -2)

    def test_resolve_evaluation_instant(self):
        """Test explicit and default evaluation instants"""
        self.assertEqual(resolve_evaluation_instant('2024-06-30'), pd.Timestamp('2024-06-30'))
        self.assertIsInstance(resolve_evaluation_instant(), pd.Timestamp)
        with self.assertRaises(ValueError):
            resolve_evaluation_instant('whenever')

    def test_generate_id(self):
        """Test prefixed unique ids"""
        first, second = generate_id('run-'), generate_id('run-')
        self.assertTrue(first.startswith('run-'))
        self.assertNotEqual(first, second)


@pytest.mark.unit
class TestLogContext(unittest.TestCase):
    """Test cases for run id propagation"""

    def make_record(self):
        return logging.LogRecord('test', logging.INFO, __file__, 1, 'message', None, None)

    def tearDown(self):
        clear_context()

    def test_filter_default(self):
        """Test records outside a run are tagged N/A"""
        record = self.make_record()
        ContextFilter().filter(record)
        self.assertEqual(record.run_id, 'N/A')

    def test_context_manager(self):
        """Test the run id is set inside the block and restored after"""
        set_run_id('outer')
        with LogContext(run_id='run-1234', stage='scoring'):
            record = self.make_record()
            ContextFilter().filter(record)
            self.assertEqual(record.run_id, 'run-1234')
            self.assertEqual(record.stage, 'scoring')

        record = self.make_record()
        ContextFilter().filter(record)
        self.assertEqual(record.run_id, 'outer')
        self.assertFalse(hasattr(record, 'stage'))

    def test_log_execution_time(self):
        """Test the decorator logs and re-raises"""
        @log_execution_time
        def fail():
            raise RuntimeError('boom')

        with self.assertLogs(__name__, level='ERROR'):
            with self.assertRaises(RuntimeError):
                fail()


if __name__ == '__main__':
    unittest.main()
