"""
Pytest configuration and shared fixtures for Equipment Maintenance Prioritization tests
"""

import pytest
import sys
from pathlib import Path
import pandas as pd

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "src"))

from tests.utils.test_helpers import OrderDataGenerator


def pytest_configure(config):
    """Register the suite markers used by run_tests.py"""
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: end-to-end pipeline tests")
    config.addinivalue_line("markers", "slow: tests with larger generated populations")


@pytest.fixture(scope="session")
def project_root_path():
    """Provide project root path for tests"""
    return Path(__file__).parent.parent


@pytest.fixture
def evaluation_time():
    """Fixed evaluation instant shared by a test run"""
    return OrderDataGenerator.EVALUATION_TIME


@pytest.fixture
def closed_order_records(evaluation_time):
    """Closed orders for three equipment with different histories"""
    records = []
    records += OrderDataGenerator.periodic_history(
        'PUMP P-101', evaluation_time, interval_days=30, count=8,
        duration_days=3, last_close_days_ago=4, equipment_id=1001, location='Plant A'
    )
    records += OrderDataGenerator.periodic_history(
        'VALVE V-220', evaluation_time, interval_days=90, count=3,
        duration_days=40, last_close_days_ago=60, equipment_id=1002, location='Plant B'
    )
    records.append(OrderDataGenerator.closed_order(
        'MOTOR M-7', evaluation_time - pd.Timedelta(days=705), evaluation_time - pd.Timedelta(days=700),
        equipment_id=1003, location='Plant A'
    ))
    return records


@pytest.fixture
def order_sources(closed_order_records):
    """Input bundle with both required sources"""
    return OrderDataGenerator.sources(closed_order_records)


@pytest.fixture(autouse=True)
def reset_log_context():
    """Keep run ids from leaking between tests"""
    from src.utils.logger import clear_context
    yield
    clear_context()
