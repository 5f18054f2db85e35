"""
Assignment Service
Caller layer around the engine: serializes batch runs, materializes the store
snapshot, applies the returned assignments and handles reassignment requests
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from config.settings import AnalyticsConfig, AssignmentConfig, settings
from assignment.allocator import BatchResult, allocate_batch
from assignment.analytics import assignment_quality, level_distribution, technician_utilization
from assignment.exceptions import BatchInProgressError, InputValidationError
from assignment.models import Assignment, Technician, WorkOrder, WorkOrderStatus
from assignment.repository import AssignmentRepository
from assignment.selector import round_score

logger = logging.getLogger(__name__)


@dataclass
class OptimizationReport:
    """Summary returned to callers of an optimize run"""
    assignments: List[Assignment] = field(default_factory=list)
    unassigned: List[str] = field(default_factory=list)
    total_assigned: int = 0
    avg_match_score: int = 0
    high_match_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'assignments': [a.to_dict() for a in self.assignments],
            'unassigned': list(self.unassigned),
            'summary': {
                'total_assigned': self.total_assigned,
                'avg_match_score': self.avg_match_score,
                'high_match_count': self.high_match_count,
            },
        }


class AssignmentService:
    """Runs batch assignment against a repository, one batch at a time"""

    def __init__(self,
                 repository: AssignmentRepository,
                 config: Optional[AssignmentConfig] = None,
                 analytics_config: Optional[AnalyticsConfig] = None):
        """Initialize Assignment Service

        Args:
            repository: Store holding technicians and work orders
            config: Assignment settings (defaults to the global settings)
            analytics_config: Reporting thresholds (defaults to the global settings)
        """
        self.repository = repository
        self.config = config or settings.get_assignment_config()
        self.analytics_config = analytics_config or settings.get_analytics_config()
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def optimize_assignments(self) -> OptimizationReport:
        """Assign all pending work orders and persist the results

        Raises:
            BatchInProgressError: a batch is already running and concurrent
                runs are configured to be rejected
        """
        if not self._lock.acquire(blocking=not self.config.reject_concurrent_runs):
            logger.warning("Rejected optimize request: a batch is already running")
            raise BatchInProgressError("An assignment batch is already running")

        try:
            work_orders = self.repository.get_pending_work_orders()
            technicians = self._order_roster(self.repository.get_all_technicians())

            result = allocate_batch(work_orders, technicians)
            self._apply_result(result, work_orders, technicians)

            report = self._build_report(result)
            logger.info(
                f"Optimized {report.total_assigned} assignments "
                f"(avg score {report.avg_match_score}, {len(report.unassigned)} unassigned)"
            )
            return report
        finally:
            self._lock.release()

    def reassign(self, order_number: str, reason: str, details: Optional[str] = None) -> Dict[str, Any]:
        """Send an assigned work order back to the pending pool

        The order's score and reason are cleared and its hours are released
        from the previously assigned technician.
        """
        with self._lock:
            work_order = self.repository.get_work_order(order_number)
            if work_order.status not in (WorkOrderStatus.ASSIGNED, WorkOrderStatus.IN_PROGRESS):
                raise InputValidationError(
                    f"Work order {order_number} is {work_order.status.value} and cannot be reassigned"
                )

            previous_technician = work_order.assigned_technician_id
            technician = self.repository.get_technician(previous_technician) if previous_technician else None
            if technician is not None:
                technician.current_workload_hours = max(
                    0.0, technician.current_workload_hours - work_order.estimated_hours
                )
                self.repository.save_technician(technician)

            work_order.clear_assignment()
            self.repository.save_work_order(work_order)

        logger.info(
            f"Reassignment requested for {order_number} (was {previous_technician}): {reason}"
            + (f" - {details}" if details else "")
        )
        return {
            'order_number': order_number,
            'previous_technician_id': previous_technician,
            'reason': reason,
            'details': details,
            'work_order_status': work_order.status.value,
        }

    def technician_dashboard(self, employee_id: str) -> Optional[Dict[str, Any]]:
        """Technician profile with their assigned and in-progress orders"""
        technician = self.repository.get_technician(employee_id)
        if technician is None:
            return None

        active = [
            wo for wo in self.repository.get_work_orders()
            if wo.assigned_technician_id == employee_id
            and wo.status in (WorkOrderStatus.ASSIGNED, WorkOrderStatus.IN_PROGRESS)
        ]
        active.sort(key=lambda wo: -wo.priority.rank)

        return {
            'technician': technician.to_dict(),
            'assigned_work_orders': [wo.to_dict() for wo in active],
        }

    def system_stats(self) -> Dict[str, Any]:
        """Assignment quality and shop utilization"""
        quality = assignment_quality(
            self.repository.get_work_orders(), self.analytics_config.high_quality_threshold
        )
        technicians = self.repository.get_all_technicians()
        utilization = technician_utilization(technicians, self.analytics_config.optimal_utilization_percent)
        return {
            'assignment_quality': quality,
            'utilization': {
                'avg_utilization': utilization['avg_utilization'],
                'avg_workload_hours': utilization['avg_workload_hours'],
                'status': utilization['status'],
            },
            'level_distribution': level_distribution(technicians),
        }

    def _order_roster(self, technicians: List[Technician]) -> List[Technician]:
        if self.config.roster_order == 'employee_id':
            return sorted(technicians, key=lambda tech: tech.employee_id)
        return technicians

    def _apply_result(self, result: BatchResult, work_orders: List[WorkOrder], technicians: List[Technician]):
        orders = {wo.order_number: wo for wo in work_orders}
        assigned_at = datetime.now()

        for assignment in result.assignments:
            work_order = orders[assignment.work_order_id]
            work_order.mark_assigned(assignment, assigned_at)
            self.repository.save_work_order(work_order)

        for technician in technicians:
            updated = result.roster[technician.employee_id]
            if updated.current_workload_hours != technician.current_workload_hours:
                self.repository.save_technician(updated)

    def _build_report(self, result: BatchResult) -> OptimizationReport:
        scores = [a.match_score for a in result.assignments]
        threshold = self.analytics_config.high_quality_threshold
        return OptimizationReport(
            assignments=list(result.assignments),
            unassigned=list(result.unassigned),
            total_assigned=len(scores),
            avg_match_score=round_score(sum(scores) / len(scores)) if scores else 0,
            high_match_count=sum(1 for score in scores if score > threshold),
        )
