"""
Domain Models for the Technician Assignment Engine
Technicians, repair work orders and the assignment records produced for them
"""

import math
import numbers
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional

from assignment.exceptions import InputValidationError

MIN_LEVEL = 1
MAX_LEVEL = 5
MENTOR_LEVEL = MAX_LEVEL


class Priority(Enum):
    """Work order priority tiers, ordered by rank"""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def from_value(cls, value: Any) -> "Priority":
        """Parse a priority from an enum member or its label (case-insensitive)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise InputValidationError(f"Unknown priority: {value!r}")


_PRIORITY_RANK = {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}


class RepairCategory(Enum):
    """Kinds of repair work; the distinction drives eligibility and scoring"""
    DIAGNOSTIC = "diagnostic"
    REMOVE_REPLACE = "remove_replace"

    @classmethod
    def from_value(cls, value: Any) -> "RepairCategory":
        """Parse a category, accepting 'remove/replace' and 'remove replace' spellings"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower().replace("/", "_").replace(" ", "_").replace("-", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        raise InputValidationError(f"Unknown repair category: {value!r}")


class WorkOrderStatus(Enum):
    """Work order lifecycle states"""
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def from_value(cls, value: Any) -> "WorkOrderStatus":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InputValidationError(f"Unknown work order status: {value!r}")


def get_with_default(mapping: Optional[Mapping[str, Any]], key: str, default: Any) -> Any:
    """Look up ``key`` in ``mapping``, returning ``default`` only when it is absent.

    Falsy values such as ``0`` are real data and are returned as-is; only a
    missing key, a ``None`` value or a missing mapping fall back to the default.
    """
    if mapping is None or key not in mapping:
        return default
    value = mapping[key]
    return default if value is None else value


def _require_hours(name: str, value: Any, allow_zero: bool = True) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InputValidationError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InputValidationError(f"{name} must be finite, got {value}")
    if value < 0 or (value == 0 and not allow_zero):
        qualifier = "non-negative" if allow_zero else "positive"
        raise InputValidationError(f"{name} must be {qualifier}, got {value}")
    return value


def _require_level(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InputValidationError(f"{name} must be an integer, got {value!r}")
    if not MIN_LEVEL <= value <= MAX_LEVEL:
        raise InputValidationError(f"{name} must be between {MIN_LEVEL} and {MAX_LEVEL}, got {value}")
    return int(value)


def _string_list(name: str, values: Any) -> List[str]:
    if values is None:
        return []
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
        raise InputValidationError(f"{name} must be a list of strings, got {values!r}")
    values = list(values)
    for value in values:
        if not isinstance(value, str):
            raise InputValidationError(f"{name} must contain only strings, got {value!r}")
    return values


def _float_map(name: str, values: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    if values is None:
        return {}
    if not isinstance(values, Mapping):
        raise InputValidationError(f"{name} must be a mapping, got {type(values).__name__}")
    result = {}
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InputValidationError(f"{name}[{key!r}] must be a number, got {value!r}")
        result[str(key)] = float(value)
    return result


@dataclass
class Technician:
    """Technician profile with per-skill history and today's workload"""
    name: str
    employee_id: str
    level: int
    skill_ratings: Dict[str, float] = field(default_factory=dict)  # skill -> 1-10 rating
    success_rates: Dict[str, float] = field(default_factory=dict)  # skill -> 0-1 fraction
    completion_time_ratios: Dict[str, float] = field(default_factory=dict)  # skill -> actual/estimated
    current_workload_hours: float = 0.0
    max_daily_hours: float = 8.0
    certifications: List[str] = field(default_factory=list)
    specialties: List[str] = field(default_factory=list)
    hire_date: Optional[date] = None

    def __post_init__(self):
        if not self.employee_id:
            raise InputValidationError("Technician employee_id is required")
        self.level = _require_level("level", self.level)
        self.current_workload_hours = _require_hours(
            f"current_workload_hours for {self.employee_id}", self.current_workload_hours
        )
        self.max_daily_hours = _require_hours(
            f"max_daily_hours for {self.employee_id}", self.max_daily_hours, allow_zero=False
        )
        self.skill_ratings = _float_map("skill_ratings", self.skill_ratings)
        self.success_rates = _float_map("success_rates", self.success_rates)
        self.completion_time_ratios = _float_map("completion_time_ratios", self.completion_time_ratios)
        if not self.specialties:
            self.specialties = [skill for skill, rating in self.skill_ratings.items() if rating >= 8]

    @property
    def is_mentor(self) -> bool:
        """Top-tier technicians are eligible to mentor"""
        return self.level == MENTOR_LEVEL

    @property
    def remaining_hours(self) -> float:
        return self.max_daily_hours - self.current_workload_hours

    @property
    def utilization_percent(self) -> float:
        return self.current_workload_hours / self.max_daily_hours * 100

    def can_take(self, hours: float) -> bool:
        """Check whether ``hours`` more work fits in today's capacity"""
        return self.current_workload_hours + hours <= self.max_daily_hours

    def skill_rating(self, skill: str, default: float) -> float:
        return get_with_default(self.skill_ratings, skill, default)

    def success_rate(self, skill: str, default: float) -> float:
        return get_with_default(self.success_rates, skill, default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'employee_id': self.employee_id,
            'level': self.level,
            'is_mentor': self.is_mentor,
            'skill_ratings': dict(self.skill_ratings),
            'success_rates': dict(self.success_rates),
            'completion_time_ratios': dict(self.completion_time_ratios),
            'current_workload_hours': self.current_workload_hours,
            'max_daily_hours': self.max_daily_hours,
            'certifications': list(self.certifications),
            'specialties': list(self.specialties),
            'hire_date': self.hire_date.isoformat() if self.hire_date else None,
        }


@dataclass
class ScoreBreakdown:
    """Weighted components of one technician/work order match score"""
    skill_match: float
    level_match: float
    success_rate: float
    workload_balance: float
    growth_bonus: float

    @property
    def total(self) -> float:
        return (
            self.skill_match +
            self.level_match +
            self.success_rate +
            self.workload_balance +
            self.growth_bonus
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            'skill_match': self.skill_match,
            'level_match': self.level_match,
            'success_rate': self.success_rate,
            'workload_balance': self.workload_balance,
            'growth_bonus': self.growth_bonus,
            'total': self.total,
        }


@dataclass
class Assignment:
    """Engine output: one work order matched to one technician"""
    work_order_id: str
    technician_id: str
    match_score: int
    assignment_reason: str
    breakdown: Optional[ScoreBreakdown] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'work_order_id': self.work_order_id,
            'technician_id': self.technician_id,
            'match_score': self.match_score,
            'assignment_reason': self.assignment_reason,
        }
        if self.breakdown is not None:
            data['breakdown'] = self.breakdown.to_dict()
        return data


@dataclass
class WorkOrder:
    """Repair work order awaiting or carrying a technician assignment"""
    order_number: str
    repair_type: str
    repair_category: RepairCategory
    estimated_hours: float
    priority: Priority
    required_level: int = MIN_LEVEL
    required_skills: List[str] = field(default_factory=list)
    vehicle_vin: str = ""
    vehicle_model: str = ""
    vehicle_year: Optional[int] = None
    required_certifications: List[str] = field(default_factory=list)
    parts_ready: bool = True
    customer_wait_days: int = 0
    status: WorkOrderStatus = WorkOrderStatus.PENDING
    assigned_technician_id: Optional[str] = None
    assignment_reason: Optional[str] = None
    match_score: Optional[int] = None
    assigned_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.order_number:
            raise InputValidationError("Work order order_number is required")
        self.repair_category = RepairCategory.from_value(self.repair_category)
        self.priority = Priority.from_value(self.priority)
        self.status = WorkOrderStatus.from_value(self.status)
        self.required_level = _require_level(f"required_level for {self.order_number}", self.required_level)
        self.estimated_hours = _require_hours(f"estimated_hours for {self.order_number}", self.estimated_hours)
        self.required_skills = _string_list(f"required_skills for {self.order_number}", self.required_skills)
        self.required_certifications = _string_list(
            f"required_certifications for {self.order_number}", self.required_certifications
        )

    @property
    def is_diagnostic(self) -> bool:
        return self.repair_category is RepairCategory.DIAGNOSTIC

    @property
    def primary_skill(self) -> str:
        """First required skill, or the first word of the repair type label"""
        if self.required_skills:
            return self.required_skills[0]
        return self.repair_type.split(" ")[0]

    def mark_assigned(self, assignment: Assignment, assigned_at: Optional[datetime] = None):
        """Record an engine assignment on this order"""
        if assignment.work_order_id != self.order_number:
            raise InputValidationError(
                f"Assignment for {assignment.work_order_id} applied to {self.order_number}"
            )
        if self.status is not WorkOrderStatus.PENDING:
            raise InputValidationError(
                f"Work order {self.order_number} is {self.status.value}, expected pending"
            )
        self.status = WorkOrderStatus.ASSIGNED
        self.assigned_technician_id = assignment.technician_id
        self.match_score = assignment.match_score
        self.assignment_reason = assignment.assignment_reason
        self.assigned_at = assigned_at or datetime.now()

    def clear_assignment(self):
        """Revert to pending so the order can be reassigned"""
        self.status = WorkOrderStatus.PENDING
        self.assigned_technician_id = None
        self.match_score = None
        self.assignment_reason = None
        self.assigned_at = None

    def start(self):
        if self.status is not WorkOrderStatus.ASSIGNED:
            raise InputValidationError(f"Cannot start work order {self.order_number} from {self.status.value}")
        self.status = WorkOrderStatus.IN_PROGRESS

    def complete(self):
        if self.status is not WorkOrderStatus.IN_PROGRESS:
            raise InputValidationError(f"Cannot complete work order {self.order_number} from {self.status.value}")
        self.status = WorkOrderStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'order_number': self.order_number,
            'repair_type': self.repair_type,
            'repair_category': self.repair_category.value,
            'estimated_hours': self.estimated_hours,
            'priority': self.priority.value,
            'required_level': self.required_level,
            'required_skills': list(self.required_skills),
            'vehicle_vin': self.vehicle_vin,
            'vehicle_model': self.vehicle_model,
            'vehicle_year': self.vehicle_year,
            'required_certifications': list(self.required_certifications),
            'parts_ready': self.parts_ready,
            'customer_wait_days': self.customer_wait_days,
            'status': self.status.value,
            'assigned_technician_id': self.assigned_technician_id,
            'assignment_reason': self.assignment_reason,
            'match_score': self.match_score,
            'assigned_at': self.assigned_at.isoformat() if self.assigned_at else None,
        }
