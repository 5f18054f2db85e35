"""
Integration Tests for end-to-end batch assignment scenarios
Exercises the engine through the service against a full generated shop
"""

import pytest

from config.settings import AnalyticsConfig, AssignmentConfig
from assignment import run_batch_assignment, score_candidate
from assignment.analytics import workload_by_technician
from assignment.models import WorkOrderStatus
from assignment.repository import InMemoryRepository
from assignment.service import AssignmentService
from tests.utils.test_helpers import make_technician, make_work_order

pytestmark = pytest.mark.integration


def test_skill_match_dominates_remove_replace(tech_a, tech_b, drive_unit_replacement):
    assignments = run_batch_assignment([drive_unit_replacement], [tech_a, tech_b])

    assert len(assignments) == 1
    assert assignments[0].technician_id == 'TECH-A'
    assert assignments[0].match_score == 83
    assert 'skill match' in assignments[0].assignment_reason


def test_diagnostic_filters_out_junior(tech_a, tech_b, drive_unit_diagnosis):
    assignments = run_batch_assignment([drive_unit_diagnosis], [tech_a, tech_b])

    assert [a.technician_id for a in assignments] == ['TECH-B']
    assert assignments[0].match_score == 66
    assert assignments[0].assignment_reason == 'Diagnostic expertise required'


def test_diagnostic_without_capacity_is_unassigned(tech_a, drive_unit_diagnosis):
    busy_senior = make_technician(employee_id='TECH-B', level=3, current_workload_hours=6.5)
    assert run_batch_assignment([drive_unit_diagnosis], [tech_a, busy_senior]) == []


def test_higher_priority_processed_first_regardless_of_input_order():
    senior = make_technician(employee_id='TECH-S', level=3, max_daily_hours=3)
    high = make_work_order(order_number='WO-H', priority='High', required_level=2, estimated_hours=2)
    medium = make_work_order(order_number='WO-M', priority='Medium', required_level=3,
                             repair_category='diagnostic', estimated_hours=2)

    for orders in ([high, medium], [medium, high]):
        assignments = run_batch_assignment(orders, [senior])
        assert [a.work_order_id for a in assignments] == ['WO-H']


def test_repeated_runs_are_deterministic(generated_roster, generated_work_orders):
    first = run_batch_assignment(generated_work_orders, generated_roster)
    for _ in range(3):
        assert run_batch_assignment(generated_work_orders, generated_roster) == first


def test_growth_bonus_zero_when_mentors_are_booked():
    mentors = [make_technician(employee_id=f'TECH-M{i}', level=5, current_workload_hours=7.5) for i in range(2)]
    juniors = [make_technician(employee_id=f'TECH-J{i}', level=level) for i, level in enumerate((1, 2))]
    diagnostic = make_work_order(repair_category='diagnostic', required_level=3)
    roster = mentors + juniors

    for junior in juniors:
        assert score_candidate(junior, diagnostic, roster).growth_bonus == 0


def test_full_shop_optimization(repository, generated_roster, generated_work_orders):
    service = AssignmentService(repository, AssignmentConfig(), AnalyticsConfig())
    report = service.optimize_assignments()

    assert report.total_assigned + len(report.unassigned) == len(generated_work_orders)
    assert report.total_assigned > 0

    levels = {tech.employee_id: tech.level for tech in generated_roster}
    orders = {wo.order_number: wo for wo in generated_work_orders}

    # Processing order: priorities never increase along the assignment list
    ranks = [orders[a.work_order_id].priority.rank for a in report.assignments]
    assert ranks == sorted(ranks, reverse=True)

    for assignment in report.assignments:
        if orders[assignment.work_order_id].is_diagnostic:
            assert levels[assignment.technician_id] >= 3
        stored = repository.get_work_order(assignment.work_order_id)
        assert stored.status is WorkOrderStatus.ASSIGNED
        assert stored.match_score == assignment.match_score
        assert stored.assignment_reason == assignment.assignment_reason

    totals = workload_by_technician(report.assignments, generated_work_orders)
    for tech in generated_roster:
        expected = tech.current_workload_hours + totals.get(tech.employee_id, 0.0)
        persisted = repository.get_technician(tech.employee_id)
        assert persisted.current_workload_hours == pytest.approx(expected)
        assert persisted.current_workload_hours <= persisted.max_daily_hours


def test_reassignment_round_trip(repository):
    service = AssignmentService(repository, AssignmentConfig(), AnalyticsConfig())
    report = service.optimize_assignments()
    target = report.assignments[0]

    service.reassign(target.work_order_id, 'Technician called out sick')
    reopened = repository.get_work_order(target.work_order_id)
    assert reopened.status is WorkOrderStatus.PENDING
    assert reopened.match_score is None and reopened.assignment_reason is None

    rerun = service.optimize_assignments()
    assert target.work_order_id in [a.work_order_id for a in rerun.assignments]
