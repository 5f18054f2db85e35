"""
Unit Tests for domain models
Enumerations, typed defaults, validation and work order lifecycle
"""

import unittest
from datetime import datetime

import pytest

from assignment.exceptions import InputValidationError
from assignment.models import (
    Assignment, Priority, RepairCategory, WorkOrderStatus, get_with_default
)
from tests.utils.test_helpers import make_technician, make_work_order


class TestEnumerations(unittest.TestCase):
    """Test cases for closed enumerations"""

    def test_priority_parsing(self):
        self.assertIs(Priority.from_value('High'), Priority.HIGH)
        self.assertIs(Priority.from_value(' medium '), Priority.MEDIUM)
        self.assertIs(Priority.from_value(Priority.LOW), Priority.LOW)

    def test_priority_rank(self):
        self.assertEqual(
            [p.rank for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)],
            [3, 2, 1]
        )

    def test_unknown_priority_rejected(self):
        with self.assertRaises(InputValidationError):
            Priority.from_value('Urgent')
        # Input validation errors are value errors
        with self.assertRaises(ValueError):
            Priority.from_value(3)

    def test_repair_category_spellings(self):
        for value in ('remove_replace', 'remove/replace', 'Remove Replace', 'remove-replace'):
            self.assertIs(RepairCategory.from_value(value), RepairCategory.REMOVE_REPLACE)
        self.assertIs(RepairCategory.from_value('Diagnostic'), RepairCategory.DIAGNOSTIC)

    def test_unknown_category_rejected(self):
        with self.assertRaises(InputValidationError):
            RepairCategory.from_value('inspection')

    def test_status_parsing(self):
        self.assertIs(WorkOrderStatus.from_value('in_progress'), WorkOrderStatus.IN_PROGRESS)
        with self.assertRaises(InputValidationError):
            WorkOrderStatus.from_value('cancelled')


class TestGetWithDefault(unittest.TestCase):

    def test_missing_key_uses_default(self):
        self.assertEqual(get_with_default({}, 'ADAS', 5), 5)

    def test_zero_is_not_missing(self):
        self.assertEqual(get_with_default({'ADAS': 0}, 'ADAS', 5), 0)

    def test_none_value_and_mapping(self):
        self.assertEqual(get_with_default({'ADAS': None}, 'ADAS', 0.8), 0.8)
        self.assertEqual(get_with_default(None, 'ADAS', 0.8), 0.8)


class TestTechnician(unittest.TestCase):

    def test_mentor_flag_derived_from_level(self):
        self.assertTrue(make_technician(level=5).is_mentor)
        self.assertFalse(make_technician(level=4).is_mentor)

    def test_capacity_helpers(self):
        tech = make_technician(current_workload_hours=6, max_daily_hours=8)
        self.assertEqual(tech.remaining_hours, 2)
        self.assertEqual(tech.utilization_percent, 75)
        self.assertTrue(tech.can_take(2))
        self.assertFalse(tech.can_take(2.01))

    def test_specialties_derived_from_ratings(self):
        tech = make_technician(skill_ratings={'ADAS': 8.5, 'Chassis': 6})
        self.assertEqual(tech.specialties, ['ADAS'])

    def test_invalid_inputs_rejected(self):
        with self.assertRaises(InputValidationError):
            make_technician(current_workload_hours=-1)
        with self.assertRaises(InputValidationError):
            make_technician(max_daily_hours=0)
        with self.assertRaises(InputValidationError):
            make_technician(level=6)
        with self.assertRaises(InputValidationError):
            make_technician(level=True)
        with self.assertRaises(InputValidationError):
            make_technician(employee_id='')
        with self.assertRaises(InputValidationError):
            make_technician(skill_ratings={'ADAS': 'high'})


class TestWorkOrder(unittest.TestCase):

    def test_string_fields_become_enums(self):
        wo = make_work_order(priority='low', repair_category='diagnostic', status='pending')
        self.assertIs(wo.priority, Priority.LOW)
        self.assertTrue(wo.is_diagnostic)
        self.assertIs(wo.status, WorkOrderStatus.PENDING)

    def test_primary_skill(self):
        self.assertEqual(make_work_order(required_skills=['ADAS', 'Chassis']).primary_skill, 'ADAS')
        self.assertEqual(
            make_work_order(repair_type='Battery Diagnostic', required_skills=[]).primary_skill,
            'Battery'
        )

    def test_negative_hours_rejected(self):
        with self.assertRaises(InputValidationError):
            make_work_order(estimated_hours=-0.5)

    def test_non_finite_hours_rejected(self):
        for value in (float('nan'), float('inf')):
            with self.assertRaises(InputValidationError):
                make_work_order(estimated_hours=value)
            with self.assertRaises(InputValidationError):
                make_technician(max_daily_hours=value)
            with self.assertRaises(InputValidationError):
                make_technician(current_workload_hours=value)

    def test_required_skills_must_be_a_list_of_strings(self):
        with self.assertRaises(InputValidationError):
            make_work_order(required_skills='ADAS')
        with self.assertRaises(InputValidationError):
            make_work_order(required_skills=['ADAS', 7])
        with self.assertRaises(InputValidationError):
            make_work_order(required_certifications='High Voltage')

        self.assertEqual(make_work_order(required_skills=('ADAS', 'Chassis')).required_skills,
                         ['ADAS', 'Chassis'])
        self.assertEqual(make_work_order(required_skills=None).required_skills, [])

    def test_assignment_lifecycle(self):
        wo = make_work_order(order_number='WO-1')
        at = datetime(2025, 3, 1, 9, 30)
        wo.mark_assigned(Assignment('WO-1', 'TECH-9', 88, 'Optimal workload distribution'), at)

        self.assertIs(wo.status, WorkOrderStatus.ASSIGNED)
        self.assertEqual(wo.assigned_technician_id, 'TECH-9')
        self.assertEqual(wo.match_score, 88)
        self.assertEqual(wo.assigned_at, at)

        wo.start()
        wo.complete()
        self.assertIs(wo.status, WorkOrderStatus.COMPLETED)

    def test_clear_assignment_reverts_to_pending(self):
        wo = make_work_order(order_number='WO-1')
        wo.mark_assigned(Assignment('WO-1', 'TECH-9', 70, 'Strong skill match'))
        wo.clear_assignment()

        self.assertIs(wo.status, WorkOrderStatus.PENDING)
        self.assertIsNone(wo.match_score)
        self.assertIsNone(wo.assignment_reason)
        self.assertIsNone(wo.assigned_technician_id)

    def test_illegal_transitions(self):
        wo = make_work_order(order_number='WO-1')
        with self.assertRaises(InputValidationError):
            wo.start()
        with self.assertRaises(InputValidationError):
            wo.mark_assigned(Assignment('WO-2', 'TECH-9', 70, ''))


@pytest.mark.unit
def test_to_dict_round_trips_enum_values():
    data = make_work_order(priority='High').to_dict()
    assert data['priority'] == 'High'
    assert data['repair_category'] == 'remove_replace'
    assert data['status'] == 'pending'
