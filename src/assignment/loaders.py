"""
Snapshot loaders
Build technicians and work orders from store records, DataFrames or snapshot files
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import pandas as pd
import yaml

from assignment.exceptions import InputValidationError
from assignment.models import Technician, WorkOrder

logger = logging.getLogger(__name__)

# Store column name -> model field name
TECHNICIAN_ALIASES = {
    'riv_level': 'level',
    'efficiency_scores': 'skill_ratings',
    'avg_completion_times': 'completion_time_ratios',
}

WORK_ORDER_ALIASES = {
    'priority_level': 'priority',
    'required_riv_level': 'required_level',
}

TECHNICIAN_FIELDS = {
    'name', 'employee_id', 'level', 'skill_ratings', 'success_rates', 'completion_time_ratios',
    'current_workload_hours', 'max_daily_hours', 'certifications', 'specialties', 'hire_date',
}

WORK_ORDER_FIELDS = {
    'order_number', 'repair_type', 'repair_category', 'estimated_hours', 'priority',
    'required_level', 'required_skills', 'vehicle_vin', 'vehicle_model', 'vehicle_year',
    'required_certifications', 'parts_ready', 'customer_wait_days', 'status',
    'assigned_technician_id', 'assignment_reason', 'match_score', 'assigned_at',
}

JSON_FIELDS = {
    'skill_ratings', 'success_rates', 'completion_time_ratios', 'certifications',
    'specialties', 'required_skills', 'required_certifications',
}

TRUE_STRINGS = {'true', 't', 'yes', 'y', '1'}
FALSE_STRINGS = {'false', 'f', 'no', 'n', '0'}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict, set)):
        return False
    return bool(pd.isna(value))


def _normalize(record: Mapping[str, Any], aliases: Dict[str, str], fields: set) -> Dict[str, Any]:
    normalized = {}
    for key, value in record.items():
        name = aliases.get(key, key)
        if name not in fields or _is_missing(value):
            continue
        if name in JSON_FIELDS and isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else None
            except json.JSONDecodeError as e:
                raise InputValidationError(f"Field {key} is not valid JSON: {e}") from e
            if value is None:
                continue
        normalized[name] = value
    return normalized


def _as_int(value: Any) -> Any:
    # DataFrames hand back numpy integers and whole floats
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if hasattr(value, 'item'):
        return _as_int(value.item())
    return value


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
        raise InputValidationError(f"Field {name} is not a boolean: {value!r}")
    if hasattr(value, 'item'):
        value = value.item()
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    raise InputValidationError(f"Field {name} is not a boolean: {value!r}")


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def technician_from_record(record: Mapping[str, Any]) -> Technician:
    """Build a technician from a store row or plain dictionary"""
    data = _normalize(record, TECHNICIAN_ALIASES, TECHNICIAN_FIELDS)
    data['employee_id'] = str(data.get('employee_id', ''))
    data['name'] = str(data.get('name', data['employee_id']))
    if 'level' in data:
        data['level'] = _as_int(data['level'])
    for key in ('current_workload_hours', 'max_daily_hours'):
        if key in data and hasattr(data[key], 'item'):
            data[key] = data[key].item()
    if 'hire_date' in data:
        data['hire_date'] = _as_date(data['hire_date'])
    return Technician(**data)


def work_order_from_record(record: Mapping[str, Any]) -> WorkOrder:
    """Build a work order from a store row or plain dictionary"""
    data = _normalize(record, WORK_ORDER_ALIASES, WORK_ORDER_FIELDS)
    data['order_number'] = str(data.get('order_number', ''))
    data.setdefault('repair_type', '')
    for key in ('required_level', 'vehicle_year', 'customer_wait_days', 'match_score'):
        if key in data:
            data[key] = _as_int(data[key])
    if 'estimated_hours' in data and hasattr(data['estimated_hours'], 'item'):
        data['estimated_hours'] = data['estimated_hours'].item()
    if 'parts_ready' in data:
        data['parts_ready'] = _as_bool('parts_ready', data['parts_ready'])
    if 'assigned_at' in data:
        data['assigned_at'] = pd.Timestamp(data['assigned_at']).to_pydatetime()
    return WorkOrder(**data)


def technicians_from_frame(frame: pd.DataFrame) -> List[Technician]:
    """Convert a roster DataFrame, keeping row order"""
    return [technician_from_record(row) for row in frame.to_dict(orient='records')]


def work_orders_from_frame(frame: pd.DataFrame) -> List[WorkOrder]:
    """Convert a work order DataFrame, keeping row order"""
    return [work_order_from_record(row) for row in frame.to_dict(orient='records')]


def load_snapshot(path: Union[str, Path]) -> Tuple[List[WorkOrder], List[Technician]]:
    """Load work orders and technicians from a YAML or JSON snapshot file

    Args:
        path: File with top-level ``technicians`` and ``work_orders`` lists

    Returns:
        Tuple of (work_orders, technicians)
    """
    path = Path(path)
    with open(path, 'r') as f:
        if path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise InputValidationError(f"Snapshot {path} must contain a mapping")

    technicians = [technician_from_record(r) for r in data.get('technicians') or []]
    work_orders = [work_order_from_record(r) for r in data.get('work_orders') or []]
    logger.info(f"Loaded {len(work_orders)} work orders and {len(technicians)} technicians from {path}")
    return work_orders, technicians
