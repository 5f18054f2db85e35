"""
Batch Allocator: greedy, order-dependent assignment of pending work orders

Orders are processed one at a time in priority order. Each assignment's
hours are folded into the roster before the next order is evaluated, so
capacity, workload balance and mentor availability always see earlier
decisions from the same batch. Earlier assignments are never revisited.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

from assignment.eligibility import filter_eligible
from assignment.exceptions import CapacityExceededError, InputValidationError
from assignment.models import Assignment, Technician, WorkOrder
from assignment.selector import select_best_technician

logger = logging.getLogger(__name__)

Roster = Dict[str, Technician]


@dataclass
class BatchResult:
    """Outcome of one batch run"""
    assignments: List[Assignment] = field(default_factory=list)
    unassigned: List[str] = field(default_factory=list)  # order numbers with no eligible technician
    roster: Roster = field(default_factory=dict)  # technicians with end-of-batch workload

    @property
    def total_assigned(self) -> int:
        return len(self.assignments)


def sort_work_orders(work_orders: Sequence[WorkOrder]) -> List[WorkOrder]:
    """Processing order: priority descending, then required level descending

    The sort is stable, so equal keys keep their input order.
    """
    return sorted(work_orders, key=lambda wo: (-wo.priority.rank, -wo.required_level))


def build_roster(technicians: Sequence[Technician]) -> Roster:
    """Key technicians by employee id, preserving input order"""
    if technicians is None:
        raise InputValidationError("Technician roster is required")
    roster: Roster = {}
    for tech in technicians:
        if tech.employee_id in roster:
            raise InputValidationError(f"Duplicate technician id in roster: {tech.employee_id}")
        roster[tech.employee_id] = tech
    return roster


def commit_workload(roster: Roster, employee_id: str, hours: float) -> Roster:
    """Return a new roster with ``hours`` added to one technician's workload

    The capacity invariant is checked before the delta is applied.
    """
    technician = roster[employee_id]
    if not technician.can_take(hours):
        raise CapacityExceededError(
            employee_id, technician.current_workload_hours + hours, technician.max_daily_hours
        )
    updated = dict(roster)
    updated[employee_id] = replace(
        technician, current_workload_hours=technician.current_workload_hours + hours
    )
    return updated


def allocate_order(work_order: WorkOrder, roster: Roster) -> Tuple[Optional[Assignment], Roster]:
    """One allocation step: assign ``work_order`` and thread the updated roster

    Args:
        work_order: Order to assign
        roster: Roster state after all earlier assignments in the batch

    Returns:
        The assignment (or None when nobody is eligible) and the next roster state
    """
    technicians = list(roster.values())
    eligible = filter_eligible(work_order, technicians)
    selection = select_best_technician(work_order, eligible, technicians)
    if selection is None:
        return None, roster

    assignment = selection.to_assignment(work_order)
    roster = commit_workload(roster, assignment.technician_id, work_order.estimated_hours)
    return assignment, roster


def allocate_batch(work_orders: Sequence[WorkOrder], technicians: Sequence[Technician]) -> BatchResult:
    """Assign every pending work order that has an eligible technician

    The supplied technicians are not modified; end-of-batch workloads are
    returned on the result for the caller to persist.

    Args:
        work_orders: Pending work orders, in any order
        technicians: Full roster snapshot; its order decides score ties

    Returns:
        Batch result with assignments in processing order
    """
    if work_orders is None:
        raise InputValidationError("Work order list is required")
    roster = build_roster(technicians)
    result = BatchResult()

    for work_order in sort_work_orders(work_orders):
        assignment, roster = allocate_order(work_order, roster)
        if assignment is None:
            logger.debug(f"Work order {work_order.order_number} left unassigned")
            result.unassigned.append(work_order.order_number)
            continue
        result.assignments.append(assignment)

    result.roster = roster
    logger.info(
        f"Batch assigned {result.total_assigned} of {len(work_orders)} work orders "
        f"across {len(roster)} technicians"
    )
    return result


def run_batch_assignment(work_orders: Sequence[WorkOrder],
                         technicians: Sequence[Technician]) -> List[Assignment]:
    """Run a full batch and return only the assignment records"""
    return allocate_batch(work_orders, technicians).assignments
