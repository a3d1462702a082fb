"""Services layer - Business logic"""

from .task_gate import TaskGate, TaskStatus
from .admission import AdmissionValidator, AdmissionDecision
from .aggregator import DailyAggregator, validate_month
from .coordinator import DateLocks, LedgerCoordinator
from .project_service import ProjectService
from .task_service import TaskService
from .time_entry_service import TimeEntryService

__all__ = [
    "TaskGate", "TaskStatus", "AdmissionValidator", "AdmissionDecision",
    "DailyAggregator", "validate_month", "DateLocks", "LedgerCoordinator",
    "ProjectService", "TaskService", "TimeEntryService",
]
