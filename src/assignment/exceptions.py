"""
Exceptions raised by the assignment engine and its service layer
"""


class InputValidationError(ValueError):
    """Raised when a roster or work order violates the input contract"""


class CapacityExceededError(RuntimeError):
    """Raised when committing a workload delta would exceed daily capacity"""

    def __init__(self, employee_id: str, workload: float, max_hours: float):
        self.employee_id = employee_id
        self.workload = workload
        self.max_hours = max_hours
        super().__init__(
            f"Technician {employee_id} would reach {workload:.2f}h "
            f"of {max_hours:.2f}h daily capacity"
        )


class BatchInProgressError(RuntimeError):
    """Raised when an optimize request arrives while a batch is running"""


class WorkOrderNotFoundError(KeyError):
    """Raised when an order number is not known to the repository"""
