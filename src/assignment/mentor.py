"""
Mentor availability check used to gate growth-opportunity bonuses
"""

from typing import Iterable

from assignment.models import MENTOR_LEVEL, Technician

# Free capacity a mentor needs to support a junior technician
MENTOR_MIN_FREE_HOURS = 1.0


def has_available_mentor(roster: Iterable[Technician]) -> bool:
    """Check whether any top-tier technician still has at least an hour free

    Args:
        roster: Technicians in their current, in-batch workload state

    Returns:
        True if a level-5 technician has ``MENTOR_MIN_FREE_HOURS`` or more left
    """
    return any(
        tech.level == MENTOR_LEVEL and tech.remaining_hours >= MENTOR_MIN_FREE_HOURS
        for tech in roster
    )
