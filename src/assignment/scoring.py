"""
Scoring Function for technician/work order matching
Weighted composite of skill fit, level appropriateness, history, workload and growth
"""

import logging
from typing import Iterable, Optional

from assignment.mentor import has_available_mentor
from assignment.models import ScoreBreakdown, Technician, WorkOrder

logger = logging.getLogger(__name__)

# Component weights (fixed; they sum to 1.0)
SKILL_WEIGHT = 0.30
LEVEL_WEIGHT = 0.25
SUCCESS_WEIGHT = 0.20
WORKLOAD_WEIGHT = 0.15
GROWTH_WEIGHT = 0.10

# Defaults for missing technician history
DEFAULT_SKILL_RATING = 5.0
DEFAULT_SUCCESS_RATE = 0.8
NO_SKILL_REQUIRED_SCORE = 70.0
SKILL_RATING_SCALE = 10.0

# Level appropriateness
SENIOR_LEVEL = 3
JUNIOR_MAX_LEVEL = 2
APPROPRIATE_LEVEL_SCORE = 100.0
UNDERQUALIFIED_DIAGNOSTIC_SCORE = 60.0
OVERQUALIFIED_SCORE = 85.0

GROWTH_BONUS = 20.0


def skill_match_score(technician: Technician, work_order: WorkOrder) -> float:
    """Average rating across required skills, on a 0-100 scale"""
    if not work_order.required_skills:
        return NO_SKILL_REQUIRED_SCORE
    ratings = [
        technician.skill_rating(skill, DEFAULT_SKILL_RATING)
        for skill in work_order.required_skills
    ]
    return sum(ratings) / len(ratings) / SKILL_RATING_SCALE * 100


def level_match_score(technician: Technician, work_order: WorkOrder) -> float:
    if work_order.is_diagnostic:
        if technician.level >= SENIOR_LEVEL:
            return APPROPRIATE_LEVEL_SCORE
        return UNDERQUALIFIED_DIAGNOSTIC_SCORE
    # Remove/replace work suits junior technicians best
    if technician.level <= JUNIOR_MAX_LEVEL:
        return APPROPRIATE_LEVEL_SCORE
    return OVERQUALIFIED_SCORE


def success_rate_score(technician: Technician, work_order: WorkOrder) -> float:
    return technician.success_rate(work_order.primary_skill, DEFAULT_SUCCESS_RATE) * 100


def workload_balance_score(technician: Technician) -> float:
    return max(0.0, 100 - technician.utilization_percent)


def growth_bonus_score(technician: Technician,
                       work_order: WorkOrder,
                       roster: Iterable[Technician] = (),
                       mentor_available: Optional[bool] = None) -> float:
    """Bonus for junior technicians on diagnostic work when a mentor is free"""
    if not work_order.is_diagnostic or technician.level >= SENIOR_LEVEL:
        return 0.0
    if mentor_available is None:
        mentor_available = has_available_mentor(roster)
    return GROWTH_BONUS if mentor_available else 0.0


def score_candidate(technician: Technician,
                    work_order: WorkOrder,
                    roster: Iterable[Technician] = (),
                    mentor_available: Optional[bool] = None) -> ScoreBreakdown:
    """Score one technician for one work order

    The total is the plain sum of the five weighted components. It is not
    clamped, so edge combinations may land slightly above 100.

    Args:
        technician: Candidate technician
        work_order: Work order being assigned
        roster: Current roster state, consulted for mentor availability
        mentor_available: Precomputed mentor availability; overrides ``roster``

    Returns:
        Weighted score components
    """
    breakdown = ScoreBreakdown(
        skill_match=skill_match_score(technician, work_order) * SKILL_WEIGHT,
        level_match=level_match_score(technician, work_order) * LEVEL_WEIGHT,
        success_rate=success_rate_score(technician, work_order) * SUCCESS_WEIGHT,
        workload_balance=workload_balance_score(technician) * WORKLOAD_WEIGHT,
        growth_bonus=growth_bonus_score(technician, work_order, roster, mentor_available) * GROWTH_WEIGHT,
    )
    logger.debug(
        f"Scored {technician.employee_id} for {work_order.order_number}: {breakdown.total:.2f}"
    )
    return breakdown
