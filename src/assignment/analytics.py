"""
Assignment Analytics
Tabular reporting over batch assignments, work orders and technician utilization
"""

import logging
from typing import Any, Dict, Iterable, List

import numpy as np
import pandas as pd

from assignment.models import Assignment, Technician, WorkOrder, WorkOrderStatus
from assignment.selector import round_score

logger = logging.getLogger(__name__)

ASSIGNMENT_COLUMNS = [
    'work_order_id', 'technician_id', 'match_score', 'assignment_reason',
    'skill_match', 'level_match', 'success_rate', 'workload_balance', 'growth_bonus',
]

UTILIZATION_COLUMNS = [
    'employee_id', 'name', 'level', 'current_workload_hours', 'max_daily_hours',
    'remaining_hours', 'utilization_percent',
]


def assignments_to_frame(assignments: Iterable[Assignment]) -> pd.DataFrame:
    """One row per assignment, with score components when available"""
    rows = []
    for assignment in assignments:
        row = {
            'work_order_id': assignment.work_order_id,
            'technician_id': assignment.technician_id,
            'match_score': assignment.match_score,
            'assignment_reason': assignment.assignment_reason,
        }
        if assignment.breakdown is not None:
            row.update({
                'skill_match': assignment.breakdown.skill_match,
                'level_match': assignment.breakdown.level_match,
                'success_rate': assignment.breakdown.success_rate,
                'workload_balance': assignment.breakdown.workload_balance,
                'growth_bonus': assignment.breakdown.growth_bonus,
            })
        rows.append(row)

    return pd.DataFrame(rows, columns=ASSIGNMENT_COLUMNS)


def assignment_quality(work_orders: Iterable[WorkOrder], threshold: float = 85.0) -> Dict[str, Any]:
    """Share of assigned orders whose match score exceeds ``threshold``

    Args:
        work_orders: Orders from the store; only status ``assigned`` counts
        threshold: Score above which an assignment is high quality

    Returns:
        Totals and the high-quality percentage (0 when nothing is assigned)
    """
    scores = np.array([
        wo.match_score for wo in work_orders
        if wo.status is WorkOrderStatus.ASSIGNED and wo.match_score is not None
    ], dtype=float)

    total = int(scores.size)
    high_quality = int(np.sum(scores > threshold)) if total else 0

    return {
        'total_assignments': total,
        'high_quality_assignments': high_quality,
        'high_quality_percent': round_score(high_quality / total * 100) if total else 0,
        'avg_match_score': round_score(float(np.mean(scores))) if total else 0,
    }


def technician_utilization(technicians: Iterable[Technician], optimal_percent: float = 85.0) -> Dict[str, Any]:
    """Per-technician utilization and the shop-wide average

    Returns:
        Dictionary with a ``frame`` of per-technician rows, the rounded
        ``avg_utilization`` and a ``status`` label ('Optimal' or 'Good')
    """
    frame = pd.DataFrame(
        [{
            'employee_id': tech.employee_id,
            'name': tech.name,
            'level': tech.level,
            'current_workload_hours': tech.current_workload_hours,
            'max_daily_hours': tech.max_daily_hours,
            'remaining_hours': tech.remaining_hours,
            'utilization_percent': tech.utilization_percent,
        } for tech in technicians],
        columns=UTILIZATION_COLUMNS,
    )

    avg_utilization = float(frame['utilization_percent'].mean()) if not frame.empty else 0.0
    avg_utilization = round(avg_utilization, 1)
    avg_workload = float(frame['current_workload_hours'].mean()) if not frame.empty else 0.0

    return {
        'frame': frame,
        'avg_utilization': avg_utilization,
        'avg_workload_hours': round(avg_workload, 1),
        'status': 'Optimal' if avg_utilization > optimal_percent else 'Good',
    }


def level_distribution(technicians: Iterable[Technician]) -> List[Dict[str, Any]]:
    """Technician count and average workload hours per level, lowest level first"""
    frame = pd.DataFrame(
        [{'level': tech.level, 'current_workload_hours': tech.current_workload_hours} for tech in technicians],
        columns=['level', 'current_workload_hours'],
    )
    if frame.empty:
        return []

    grouped = frame.groupby('level').agg(
        count=('current_workload_hours', 'size'),
        avg_workload_hours=('current_workload_hours', 'mean'),
    )
    return [
        {
            'level': int(level),
            'count': int(row['count']),
            'avg_workload_hours': round(float(row['avg_workload_hours']), 1),
        }
        for level, row in grouped.iterrows()
    ]


def workload_by_technician(assignments: Iterable[Assignment], work_orders: Iterable[WorkOrder]) -> Dict[str, float]:
    """Hours assigned to each technician by a set of assignments"""
    hours = {wo.order_number: wo.estimated_hours for wo in work_orders}
    frame = assignments_to_frame(assignments)
    if frame.empty:
        return {}

    frame['estimated_hours'] = frame['work_order_id'].map(hours)
    missing = frame['estimated_hours'].isna()
    if missing.any():
        logger.warning(f"No estimate for work orders {frame.loc[missing, 'work_order_id'].tolist()}")

    totals = frame.groupby('technician_id', sort=False)['estimated_hours'].sum()
    return {tech_id: float(total) for tech_id, total in totals.items()}


def score_summary(assignments: List[Assignment]) -> Dict[str, float]:
    """Descriptive statistics of match scores for one batch"""
    scores = np.array([a.match_score for a in assignments], dtype=float)
    if scores.size == 0:
        return {'count': 0, 'mean': 0.0, 'min': 0.0, 'max': 0.0, 'std': 0.0}
    return {
        'count': int(scores.size),
        'mean': float(np.mean(scores)),
        'min': float(np.min(scores)),
        'max': float(np.max(scores)),
        'std': float(np.std(scores)),
    }
