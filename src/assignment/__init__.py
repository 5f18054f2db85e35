"""
Technician Assignment Engine
Scores, filters and greedily allocates pending repair work orders to technicians
"""

from assignment.allocator import BatchResult, allocate_batch, run_batch_assignment, sort_work_orders
from assignment.eligibility import filter_eligible
from assignment.exceptions import (
    BatchInProgressError,
    CapacityExceededError,
    InputValidationError,
    WorkOrderNotFoundError,
)
from assignment.mentor import has_available_mentor
from assignment.models import (
    Assignment,
    Priority,
    RepairCategory,
    ScoreBreakdown,
    Technician,
    WorkOrder,
    WorkOrderStatus,
    get_with_default,
)
from assignment.scoring import score_candidate
from assignment.selector import generate_assignment_reason, select_best_technician

__version__ = "1.0.0"
