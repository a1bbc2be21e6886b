"""
Organization workspace.

Owns the state of one client session: the active organization, its
normalized dataset and cost classification, the readiness gates and the
last-known-good ROI results together with the snapshot they were computed
from. Every recompute goes through the session's ROIController.

Loads are stamped with a context id. A response carrying a context id
other than the current one belongs to an organization the session has
already switched away from and is dropped.

Callers serialize operations on one workspace through ``workspace.lock``.
"""

import logging
import threading
import time
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional

from src.common.exceptions import ClassificationUnavailableError, LoadError, ShapeError
from .engine.core.normalizer import normalize_dataset
from .engine.models.classification import CostClassification
from .engine.models.process import NormalizedDataset
from .engine.models.results import ROIResults
from .recalculation_controller import (
    ControllerState,
    DeferredScheduler,
    ROIController,
    ROISnapshot,
    reset_roi_controller,
    schedule_roi,
)

logger = logging.getLogger(__name__)


DEFAULT_TIME_HORIZON_MONTHS = 36


class ROIWorkspace:
    """State owner of one session"""

    def __init__(
        self,
        storage_client,
        controller: Optional[ROIController] = None,
        scheduler: Optional[DeferredScheduler] = None,
        default_time_horizon_months: int = DEFAULT_TIME_HORIZON_MONTHS
    ):
        self.storage_client = storage_client
        self.controller = controller or ROIController()
        self.scheduler = scheduler or DeferredScheduler()
        self.default_time_horizon_months = default_time_horizon_months

        self.org_id: Optional[str] = None
        self.context_id = 0
        self.dataset: Optional[NormalizedDataset] = None
        self.cost_classification: Optional[CostClassification] = None
        self.cost_classification_loaded = False
        self.data_ready_for_roi = False
        self.results: Optional[ROIResults] = None
        self.snapshot: Optional[ROISnapshot] = None
        self.last_error: Optional[str] = None
        self.warnings: List[str] = []
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Organization context
    # ------------------------------------------------------------------

    def begin_context(self, org_id: str) -> int:
        """
        Start a new organization context: reset the controller, cancel the
        deferred auto-selection and clear both gates.
        """
        with self.lock:
            reset_roi_controller(self.controller)
            self.scheduler.cancel()

            if org_id != self.org_id:
                self.results = None
                self.snapshot = None

            self.context_id += 1
            self.org_id = org_id
            self.dataset = None
            self.cost_classification = None
            self.cost_classification_loaded = False
            self.data_ready_for_roi = False
            self.last_error = None
            self.warnings = []

            logger.info("Workspace context started", extra={"org_id": org_id, "context_id": self.context_id})
            return self.context_id

    def _is_current(self, context_id: int, what: str) -> bool:
        if context_id != self.context_id:
            logger.info("Stale %s response dropped", what, extra={
                "context_id": context_id,
                "current_context_id": self.context_id,
            })
            return False
        return True

    def receive_dataset(self, context_id: int, raw: Any) -> bool:
        """
        Accept a loaded dataset for ``context_id``.

        Raises:
            ShapeError: the dataset is malformed; the gates stay closed
        """
        with self.lock:
            if not self._is_current(context_id, "dataset"):
                return False

            try:
                self.dataset = normalize_dataset(raw)
            except ShapeError as e:
                self.last_error = e.message
                logger.error(f"Dataset rejected for org {self.org_id}: {e.message}")
                raise

            self.scheduler.defer(lambda: self._auto_select(context_id))
            return True

    def receive_cost_classification(self, context_id: int, classification: CostClassification) -> bool:
        with self.lock:
            if not self._is_current(context_id, "cost classification"):
                return False
            self.cost_classification = classification
            self.cost_classification_loaded = True
            return True

    def _auto_select(self, context_id: int) -> None:
        with self.lock:
            if not self._is_current(context_id, "auto-selection") or self.dataset is None:
                return
            self.dataset = self.dataset.with_processes(
                [replace(p, selected=True) for p in self.dataset.processes]
            )
            self.data_ready_for_roi = True
            logger.debug("Processes auto-selected", extra={"count": len(self.dataset.processes)})

    def switch_organization(self, org_id: str, time_horizon_months: Optional[int] = None) -> Optional[ROIResults]:
        """
        Switch to ``org_id``: load its dataset and classification, then
        run the first recompute.

        Raises:
            LoadError: the dataset could not be fetched
            ShapeError: the dataset is malformed
        """
        with self.lock:
            context_id = self.begin_context(org_id)

            try:
                raw = self.storage_client.load_dataset(org_id)
            except LoadError as e:
                self.last_error = e.message
                raise
            self.receive_dataset(context_id, raw)

            try:
                classification = self.storage_client.load_cost_classification(org_id)
            except ClassificationUnavailableError as e:
                logger.warning(
                    f"Cost classification unavailable for org {org_id}, using empty classification: {e.message}"
                )
                self.warnings.append("Cost classification unavailable; hard/soft split uses an empty classification")
                classification = CostClassification.empty(org_id)
            self.receive_cost_classification(context_id, classification)

            self.tick()
            return self.recalculate("organization loaded", time_horizon_months)

    def tick(self) -> None:
        """Run the deferred task, if any"""
        self.scheduler.run_pending()

    # ------------------------------------------------------------------
    # Recalculation
    # ------------------------------------------------------------------

    def state(self) -> ControllerState:
        processes = self.dataset.processes if self.dataset else []
        return ControllerState(
            org_id=self.org_id,
            process_count=len(processes),
            selected_count=sum(1 for p in processes if p.selected),
            cost_classification_loaded=self.cost_classification_loaded,
            data_ready_for_roi=self.data_ready_for_roi,
            cost_classification=self.cost_classification,
        )

    def filtered_dataset(self, group: Optional[str] = None) -> NormalizedDataset:
        if self.dataset is None:
            return NormalizedDataset()
        return self.dataset.filter_by_group(group)

    def recalculate(
        self,
        reason: str,
        time_horizon_months: Optional[int] = None,
        group: Optional[str] = None
    ) -> Optional[ROIResults]:
        """
        Trigger a recompute. Successful results become the last-known-good
        results and ``snapshot`` the inputs they were computed from.
        """
        with self.lock:
            horizon = time_horizon_months or self.default_time_horizon_months
            results = schedule_roi(self.controller, reason, self.state(), self.filtered_dataset(group), horizon)
            if results is not None:
                self.results = results
                self.snapshot = self.controller.last_snapshot
            return results

    def set_selection(self, process_ids: Iterable[str], selected: bool = True) -> int:
        """Select or deselect processes by id. Returns the number changed."""
        with self.lock:
            if self.dataset is None:
                return 0
            ids = {str(i) for i in process_ids}
            changed = 0
            processes = []
            for process in self.dataset.processes:
                if process.id in ids and process.selected != selected:
                    process = replace(process, selected=selected)
                    changed += 1
                processes.append(process)
            self.dataset = self.dataset.with_processes(processes)
            return changed

    def reset_controller(self) -> None:
        with self.lock:
            reset_roi_controller(self.controller)
            self.scheduler.cancel()

    def status(self) -> Dict[str, Any]:
        with self.lock:
            state = self.state()
            return {
                **state.to_dict(),
                "contextId": self.context_id,
                "phase": self.controller.phase.value,
                "roiReady": self.controller.is_roi_ready(state),
                "blockedReason": self.controller.last_blocked_reason,
                "hasResults": self.results is not None,
                "lastError": self.last_error,
                "warnings": list(self.warnings),
            }


class WorkspaceRegistry:
    """
    One workspace per session id.

    Every lookup records the access time so that ``evict_idle`` can drop
    workspaces of sessions that went away.
    """

    def __init__(self, factory: Callable[[], ROIWorkspace], clock: Callable[[], float] = time.monotonic):
        self._factory = factory
        self._clock = clock
        self._workspaces: Dict[str, ROIWorkspace] = {}
        self._last_seen: Dict[str, float] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[ROIWorkspace]:
        with self._lock:
            workspace = self._workspaces.get(session_id)
            if workspace is not None:
                self._last_seen[session_id] = self._clock()
            return workspace

    def get_or_create(self, session_id: str) -> ROIWorkspace:
        with self._lock:
            workspace = self._workspaces.get(session_id)
            if workspace is None:
                workspace = self._factory()
                self._workspaces[session_id] = workspace
            self._last_seen[session_id] = self._clock()
            return workspace

    def remove(self, session_id: str) -> bool:
        with self._lock:
            self._last_seen.pop(session_id, None)
            return self._workspaces.pop(session_id, None) is not None

    def evict_idle(self, max_idle_seconds: float) -> int:
        """Drop workspaces not accessed for more than ``max_idle_seconds``. Returns the number dropped."""
        with self._lock:
            now = self._clock()
            idle = [sid for sid, seen in self._last_seen.items() if now - seen > max_idle_seconds]
            for session_id in idle:
                self._workspaces.pop(session_id, None)
                del self._last_seen[session_id]

        if idle:
            logger.info("Idle workspaces evicted", extra={"count": len(idle), "max_idle_seconds": max_idle_seconds})
        return len(idle)

    def clear(self) -> None:
        with self._lock:
            self._workspaces.clear()
            self._last_seen.clear()

    def __len__(self):
        return len(self._workspaces)
