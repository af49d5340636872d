"""Scheduler package - greedy placement of print jobs onto printers.

This package provides:
- AvailabilityCalendar: recurring daily windows in which jobs may finish
- ResourceTimeline: per-printer busy intervals and gap enumeration
- PlacementEngine: longest-job-first, earliest-finish placement
- Lock / Shuffle strategies and the PlanReconciler that applies a plan
- SchedulingService: one call from snapshot to reconciled plan
"""

from .availability import AvailabilityCalendar, AvailabilityWindow
from .config import SchedulingConfig, Strategy
from .core import BusyInterval, EngineResult, PlanResult, PlanStats, ProposedPlacement
from .eligibility import eligible_printers, is_eligible
from .engine import PlacementEngine
from .reconciler import PlanReconciler, ReconciliationResult
from .service import SchedulingService
from .strategies import StrategyFunctions, get_strategy
from .timeline import ResourceTimeline
from .validator import find_committed_conflicts, validate_plan

__all__ = [
    # Core dataclasses
    "BusyInterval",
    "ProposedPlacement",
    "EngineResult",
    "PlanStats",
    "PlanResult",
    # Configuration
    "SchedulingConfig",
    "Strategy",
    # Building blocks
    "AvailabilityCalendar",
    "AvailabilityWindow",
    "ResourceTimeline",
    "is_eligible",
    "eligible_printers",
    # Engine and reconciliation
    "PlacementEngine",
    "PlanReconciler",
    "ReconciliationResult",
    "StrategyFunctions",
    "get_strategy",
    # High-level service
    "SchedulingService",
    # Validation
    "validate_plan",
    "find_committed_conflicts",
]
