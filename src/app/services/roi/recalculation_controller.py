"""
ROI Recalculation Controller

Single entry point for full portfolio recomputes. The controller:
- gates on data readiness and a loaded cost classification
- captures each trigger as an immutable snapshot (dataset, classification,
  horizon) with a generation number
- answers a repeated identical snapshot with the last results
- drops results whose generation was superseded while computing
- rejects re-entrant and concurrent triggers while a computation runs

Controllers are owned by their caller (one per workspace); there is no
module-level instance.
"""

import hashlib
import json
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .engine.core.roi_aggregator import calculate_roi
from .engine.models.classification import CostClassification
from .engine.models.process import NormalizedDataset
from .engine.models.results import ROIResults

logger = logging.getLogger(__name__)


class ControllerPhase(Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMPUTING = "computing"


@dataclass
class ControllerState:
    """Readiness inputs of one recalculation trigger"""
    org_id: Optional[str] = None
    process_count: int = 0
    selected_count: int = 0
    cost_classification_loaded: bool = False
    data_ready_for_roi: bool = False
    cost_classification: Optional[CostClassification] = None

    def to_dict(self):
        return {
            "orgId": self.org_id,
            "processCount": self.process_count,
            "selectedCount": self.selected_count,
            "costClassificationLoaded": self.cost_classification_loaded,
            "dataReadyForRoi": self.data_ready_for_roi,
        }


@dataclass(frozen=True)
class ROISnapshot:
    """Immutable capture of everything a recompute depends on"""
    dataset: NormalizedDataset
    cost_classification: CostClassification
    time_horizon_months: int
    fingerprint: str

    @classmethod
    def capture(
        cls,
        dataset: NormalizedDataset,
        cost_classification: CostClassification,
        time_horizon_months: int
    ) -> "ROISnapshot":
        payload = {
            "dataset": dataset.to_dict(),
            "costClassification": {
                "hardCosts": sorted(cost_classification.hard_costs),
                "softCosts": sorted(cost_classification.soft_costs),
            },
            "timeHorizonMonths": time_horizon_months,
        }
        canonical = json.dumps(payload, sort_keys=True, default=str)
        fingerprint = hashlib.sha1(canonical.encode("utf-8")).hexdigest()
        return cls(dataset, cost_classification, time_horizon_months, fingerprint)


# ============================================================================
# DEFERRED SCHEDULER
# ============================================================================

class DeferredScheduler:
    """
    Cancellable zero-delay task.

    ``defer`` replaces whatever is pending; ``run_pending`` is the next
    tick and runs the task only when no later ``defer`` or ``cancel``
    superseded it.
    """

    def __init__(self):
        self._generation = 0
        self._task: Optional[Callable[[], Any]] = None
        self._task_generation: Optional[int] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_pending(self) -> bool:
        return self._task is not None

    def defer(self, task: Callable[[], Any]) -> int:
        self._generation += 1
        self._task = task
        self._task_generation = self._generation
        return self._generation

    def cancel(self) -> None:
        if self._task is not None:
            logger.debug("Deferred task cancelled (generation %s)", self._task_generation)
        self._generation += 1
        self._task = None
        self._task_generation = None

    def run_pending(self) -> Any:
        """Run the pending task, if still current. Returns its result or None."""
        task, task_generation = self._task, self._task_generation
        self._task = None
        self._task_generation = None

        if task is None:
            return None
        if task_generation != self._generation:
            logger.debug("Stale deferred task dropped (generation %s)", task_generation)
            return None
        return task()


# ============================================================================
# CONTROLLER
# ============================================================================

class ROIController:
    """Gates, deduplicates and sequences portfolio ROI recomputes"""

    def __init__(self, calculate: Callable[..., ROIResults] = calculate_roi):
        self._calculate = calculate
        self.phase = ControllerPhase.IDLE
        self.generation = 0
        self.last_snapshot: Optional[ROISnapshot] = None
        self.last_results: Optional[ROIResults] = None
        self.last_blocked_reason: Optional[str] = None
        self.compute_count = 0
        self._compute_lock = threading.Lock()

    @staticmethod
    def is_roi_ready(state: ControllerState) -> bool:
        return bool(
            state.data_ready_for_roi
            and state.cost_classification_loaded
            and state.cost_classification is not None
        )

    @staticmethod
    def _blocked_reason(state: ControllerState) -> str:
        if not state.data_ready_for_roi:
            return "data not ready for ROI"
        if not state.cost_classification_loaded:
            return "cost classification not loaded"
        return "cost classification missing"

    def schedule_roi(
        self,
        reason: str,
        state: ControllerState,
        filtered_data: NormalizedDataset,
        time_horizon_months: int
    ) -> Optional[ROIResults]:
        """
        Request a full recompute.

        Args:
            reason: Free-form trigger label, logged only
            state: Readiness state of the caller
            filtered_data: Dataset to compute on (already group filtered)
            time_horizon_months: Horizon of the NPV/IRR flows

        Returns:
            ROIResults, or None when gated, re-entrant or superseded
        """
        if self.phase == ControllerPhase.COMPUTING or not self._compute_lock.acquire(blocking=False):
            logger.warning("ROI trigger ignored while computing", extra={"reason": reason})
            return None

        try:
            return self._run(reason, state, filtered_data, time_horizon_months)
        finally:
            self._compute_lock.release()

    def _run(
        self,
        reason: str,
        state: ControllerState,
        filtered_data: NormalizedDataset,
        time_horizon_months: int
    ) -> Optional[ROIResults]:
        if not self.is_roi_ready(state):
            self.last_blocked_reason = self._blocked_reason(state)
            logger.info("ROI calculation blocked", extra={
                "reason": reason,
                "blocked_reason": self.last_blocked_reason,
                **state.to_dict(),
            })
            return None
        self.last_blocked_reason = None

        self.phase = ControllerPhase.PENDING
        try:
            snapshot = ROISnapshot.capture(filtered_data, state.cost_classification, time_horizon_months)

            if (self.last_snapshot is not None and self.last_results is not None
                    and snapshot.fingerprint == self.last_snapshot.fingerprint):
                logger.debug("ROI snapshot unchanged, reusing last results", extra={"reason": reason})
                return self.last_results

            self.generation += 1
            generation = self.generation

            logger.info("ROI calculation started", extra={
                "reason": reason,
                "generation": generation,
                "time_horizon_months": time_horizon_months,
                **state.to_dict(),
            })

            self.phase = ControllerPhase.COMPUTING
            results = self._calculate(
                snapshot.dataset,
                snapshot.time_horizon_months,
                snapshot.cost_classification,
            )
            self.compute_count += 1

            if generation != self.generation:
                logger.info("Superseded ROI result dropped", extra={
                    "generation": generation,
                    "current_generation": self.generation,
                })
                return None

            self.last_snapshot = snapshot
            self.last_results = results
            return results
        finally:
            self.phase = ControllerPhase.IDLE

    def reset(self) -> None:
        """Forget the last snapshot so the next trigger recomputes"""
        self.generation += 1
        self.last_snapshot = None
        self.last_results = None
        self.last_blocked_reason = None
        self.phase = ControllerPhase.IDLE
        logger.debug("ROI controller reset (generation %s)", self.generation)


# ============================================================================
# MODULE-LEVEL HELPERS
# ============================================================================

def schedule_roi(
    controller: ROIController,
    reason: str,
    state: ControllerState,
    filtered_data: NormalizedDataset,
    time_horizon_months: int
) -> Optional[ROIResults]:
    return controller.schedule_roi(reason, state, filtered_data, time_horizon_months)


def is_roi_ready(state: ControllerState) -> bool:
    return ROIController.is_roi_ready(state)


def reset_roi_controller(controller: ROIController) -> None:
    controller.reset()
