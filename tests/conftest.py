"""
Pytest configuration and shared fixtures for Technician Assignment Engine tests
"""

import pytest
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "src"))

from assignment.models import Technician, WorkOrder  # noqa: E402
from assignment.repository import InMemoryRepository  # noqa: E402
from tests.utils.test_helpers import TestDataGenerator, make_technician, make_work_order  # noqa: E402


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated tests")
    config.addinivalue_line("markers", "integration: end-to-end batch scenarios")


@pytest.fixture(scope="session")
def project_root_path():
    """Provide project root path for tests"""
    return Path(__file__).parent.parent


@pytest.fixture
def tech_a() -> Technician:
    """Junior technician, idle, strong on DriveUnit"""
    return make_technician(
        name='Tech A', employee_id='TECH-A', level=2,
        skill_ratings={'DriveUnit': 9}, current_workload_hours=0, max_daily_hours=8,
    )


@pytest.fixture
def tech_b() -> Technician:
    """Senior technician, mostly booked, weak on DriveUnit"""
    return make_technician(
        name='Tech B', employee_id='TECH-B', level=3,
        skill_ratings={'DriveUnit': 4}, current_workload_hours=6, max_daily_hours=8,
    )


@pytest.fixture
def mentor() -> Technician:
    return make_technician(
        name='Mentor', employee_id='TECH-M', level=5,
        skill_ratings={'DriveUnit': 10}, current_workload_hours=0, max_daily_hours=8,
    )


@pytest.fixture
def drive_unit_replacement() -> WorkOrder:
    return make_work_order(
        order_number='WO-1001', repair_type='Drive Unit Replacement',
        repair_category='remove_replace', required_skills=['DriveUnit'],
        required_level=2, estimated_hours=2, priority='High',
    )


@pytest.fixture
def drive_unit_diagnosis() -> WorkOrder:
    return make_work_order(
        order_number='WO-1002', repair_type='Drive Unit Diagnosis',
        repair_category='diagnostic', required_skills=[],
        required_level=3, estimated_hours=2, priority='High',
    )


@pytest.fixture
def generated_roster():
    """Fifteen technicians across levels 1, 2, 3 and 5"""
    return TestDataGenerator.generate_roster(seed=7)


@pytest.fixture
def generated_work_orders():
    return TestDataGenerator.generate_work_orders(count=25, seed=11)


@pytest.fixture
def repository(generated_roster, generated_work_orders):
    return InMemoryRepository(generated_roster, generated_work_orders)
