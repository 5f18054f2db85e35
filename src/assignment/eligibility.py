"""
Eligibility filter: which technicians may legally take a work order
"""

import logging
from typing import Iterable, List

from assignment.models import Technician, WorkOrder

logger = logging.getLogger(__name__)

# Diagnostic work is gated to experienced technicians
DIAGNOSTIC_MIN_LEVEL = 3


def is_eligible(technician: Technician, work_order: WorkOrder) -> bool:
    """Check capacity and diagnostic gating for one technician"""
    if not technician.can_take(work_order.estimated_hours):
        return False
    if work_order.is_diagnostic and technician.level < DIAGNOSTIC_MIN_LEVEL:
        return False
    return True


def filter_eligible(work_order: WorkOrder, roster: Iterable[Technician]) -> List[Technician]:
    """Narrow the roster to technicians who may be assigned ``work_order``

    Roster order is preserved. An empty result means no assignment is
    possible this round; it is not an error.
    """
    eligible = [tech for tech in roster if is_eligible(tech, work_order)]
    if not eligible:
        logger.debug(f"No eligible technicians for work order {work_order.order_number}")
    return eligible
