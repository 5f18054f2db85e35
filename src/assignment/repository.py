"""
Store boundary for the assignment service
The engine never touches storage; the service reads snapshots and writes results here
"""

import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from assignment.exceptions import InputValidationError, WorkOrderNotFoundError
from assignment.models import Technician, WorkOrder, WorkOrderStatus

logger = logging.getLogger(__name__)


class AssignmentRepository(ABC):
    """Persistence operations the service relies on"""

    @abstractmethod
    def get_pending_work_orders(self) -> List[WorkOrder]:
        """Snapshot of work orders with status pending"""

    @abstractmethod
    def get_all_technicians(self) -> List[Technician]:
        """Snapshot of the full roster including current workload"""

    @abstractmethod
    def get_work_orders(self) -> List[WorkOrder]:
        """Every work order regardless of status"""

    @abstractmethod
    def get_work_order(self, order_number: str) -> WorkOrder:
        """Fetch one work order, raising WorkOrderNotFoundError if unknown"""

    @abstractmethod
    def get_technician(self, employee_id: str) -> Optional[Technician]:
        """Fetch one technician, or None if unknown"""

    @abstractmethod
    def save_work_order(self, work_order: WorkOrder):
        """Persist a work order"""

    @abstractmethod
    def save_technician(self, technician: Technician):
        """Persist a technician"""


class InMemoryRepository(AssignmentRepository):
    """Dictionary-backed repository; snapshots are deep copies

    Insertion order is preserved, so unsorted fetches are stable.
    """

    def __init__(self,
                 technicians: Optional[Iterable[Technician]] = None,
                 work_orders: Optional[Iterable[WorkOrder]] = None):
        self._technicians: Dict[str, Technician] = {}
        self._work_orders: Dict[str, WorkOrder] = {}

        for technician in technicians or []:
            self.add_technician(technician)
        for work_order in work_orders or []:
            self.add_work_order(work_order)

    def add_technician(self, technician: Technician):
        if technician.employee_id in self._technicians:
            raise InputValidationError(f"Duplicate technician id: {technician.employee_id}")
        self._technicians[technician.employee_id] = copy.deepcopy(technician)

    def add_work_order(self, work_order: WorkOrder):
        if work_order.order_number in self._work_orders:
            raise InputValidationError(f"Duplicate work order number: {work_order.order_number}")
        self._work_orders[work_order.order_number] = copy.deepcopy(work_order)

    def get_pending_work_orders(self) -> List[WorkOrder]:
        return [
            copy.deepcopy(wo) for wo in self._work_orders.values()
            if wo.status is WorkOrderStatus.PENDING
        ]

    def get_all_technicians(self) -> List[Technician]:
        return [copy.deepcopy(tech) for tech in self._technicians.values()]

    def get_work_orders(self) -> List[WorkOrder]:
        return [copy.deepcopy(wo) for wo in self._work_orders.values()]

    def get_work_order(self, order_number: str) -> WorkOrder:
        if order_number not in self._work_orders:
            raise WorkOrderNotFoundError(order_number)
        return copy.deepcopy(self._work_orders[order_number])

    def get_technician(self, employee_id: str) -> Optional[Technician]:
        technician = self._technicians.get(employee_id)
        return copy.deepcopy(technician) if technician else None

    def save_work_order(self, work_order: WorkOrder):
        self._work_orders[work_order.order_number] = copy.deepcopy(work_order)

    def save_technician(self, technician: Technician):
        self._technicians[technician.employee_id] = copy.deepcopy(technician)
