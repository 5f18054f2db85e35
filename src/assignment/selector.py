"""
Assignment Selector: best eligible technician for one work order, with a reason
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from assignment.models import Assignment, ScoreBreakdown, Technician, WorkOrder
from assignment.scoring import SENIOR_LEVEL, score_candidate

logger = logging.getLogger(__name__)

# Weighted-component thresholds that trigger reason clauses
STRONG_SKILL_THRESHOLD = 25.0
BALANCED_WORKLOAD_THRESHOLD = 12.0


@dataclass
class Selection:
    """Winning candidate for a work order"""
    technician: Technician
    breakdown: ScoreBreakdown
    reason: str

    @property
    def match_score(self) -> int:
        return round_score(self.breakdown.total)

    def to_assignment(self, work_order: WorkOrder) -> Assignment:
        return Assignment(
            work_order_id=work_order.order_number,
            technician_id=self.technician.employee_id,
            match_score=self.match_score,
            assignment_reason=self.reason,
            breakdown=self.breakdown,
        )


def round_score(total: float) -> int:
    """Round half up, so 82.5 becomes 83"""
    return int(math.floor(total + 0.5))


def generate_assignment_reason(technician: Technician,
                               work_order: WorkOrder,
                               breakdown: ScoreBreakdown) -> str:
    """Build the human-readable explanation for a match

    Display only; it never influences which technician wins.
    """
    reasons: List[str] = []

    if breakdown.skill_match > STRONG_SKILL_THRESHOLD:
        reasons.append(f"Strong skill match for {work_order.repair_type}")

    if work_order.is_diagnostic and technician.level >= SENIOR_LEVEL:
        reasons.append("Diagnostic expertise required")

    if breakdown.workload_balance > BALANCED_WORKLOAD_THRESHOLD:
        reasons.append("Optimal workload distribution")

    if breakdown.growth_bonus > 0:
        reasons.append("Growth opportunity with mentorship")

    if technician.is_mentor:
        reasons.append("Senior technician for complex repair")

    return ", ".join(reasons)


def select_best_technician(work_order: WorkOrder,
                           eligible: Sequence[Technician],
                           roster: Optional[Iterable[Technician]] = None) -> Optional[Selection]:
    """Pick the highest-scoring eligible technician

    Ties keep the first technician seen, so results are deterministic for a
    fixed roster order.

    Args:
        work_order: Work order to assign
        eligible: Technicians that passed the eligibility filter, in roster order
        roster: Full current roster for mentor availability (defaults to ``eligible``)

    Returns:
        Winning selection, or None when ``eligible`` is empty
    """
    if not eligible:
        return None

    roster = list(roster) if roster is not None else list(eligible)
    best: Optional[Selection] = None

    for technician in eligible:
        breakdown = score_candidate(technician, work_order, roster)
        if best is None or breakdown.total > best.breakdown.total:
            best = Selection(
                technician=technician,
                breakdown=breakdown,
                reason=generate_assignment_reason(technician, work_order, breakdown),
            )

    logger.debug(
        f"Selected {best.technician.employee_id} for {work_order.order_number} "
        f"(score {best.breakdown.total:.2f})"
    )
    return best
