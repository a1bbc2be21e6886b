"""
ROI Service
Orchestrates the ROI engine within the Flask application context.
"""

import logging
from typing import Any, Dict, Optional

from flask import current_app

from src.extensions import get_cache_instance
from .engine.core.cashflow_projector import break_even_month, project_cashflow
from .engine.core.cfo_score import calculate_cfo_score
from .engine.core.complexity import build_complexity_metrics
from .engine.core.normalizer import normalize_dataset
from .engine.core.opportunity_matrix import build_opportunity_matrix, quadrant_summary
from .engine.core.roi_aggregator import calculate_roi, calculate_scenario_roi
from .engine.models.classification import CostClassification
from .engine.models.process import Metric, NormalizedDataset
from .engine.models.results import ROIResults
from .engine.models.schemas import ComplexityMetricsSchema
from .engine.models.scoring import CFOScoreInput
from .roi_workspace import ROIWorkspace, WorkspaceRegistry
from .storage_client import StorageClient

logger = logging.getLogger(__name__)


def _create_workspace() -> ROIWorkspace:
    return ROIWorkspace(
        StorageClient.from_app_config(),
        default_time_horizon_months=current_app.config.get('ROI_DEFAULT_TIME_HORIZON_MONTHS', 36),
    )


workspace_registry = WorkspaceRegistry(_create_workspace)


class ROIService:
    """
    Service running ROI calculations.

    Stateless what-if calculations take the whole dataset in the request;
    workspace operations keep per-session state and go through the
    recalculation controller.
    """

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _classification(data: Optional[Dict[str, Any]]) -> Optional[CostClassification]:
        if data is None:
            return None
        return CostClassification.from_dict(data)

    @staticmethod
    def _outputs(
        dataset: NormalizedDataset,
        results: ROIResults,
        classification: CostClassification,
        cashflow_months: int
    ) -> Dict[str, Any]:
        """Portfolio results plus cashflow and opportunity matrix"""
        cashflow = project_cashflow(dataset, cashflow_months, classification, results.process_results)
        matrix = build_opportunity_matrix(dataset, results)
        return {
            "results": results.to_dict(),
            "cashflow": [point.to_dict() for point in cashflow],
            "breakEvenMonth": break_even_month(cashflow),
            "opportunityMatrix": matrix.to_dict(),
            "quadrantSummary": quadrant_summary(matrix),
        }

    @staticmethod
    def _results_cache_key(org_id: str) -> str:
        return f"roi_results:{org_id}"

    @staticmethod
    def _remember_results(org_id: str, outputs: Dict[str, Any]) -> None:
        timeout = current_app.config.get('ROI_RESULTS_CACHE_TIMEOUT', 3600)
        get_cache_instance().set(ROIService._results_cache_key(org_id), outputs, timeout=timeout)

    @staticmethod
    def last_known_results(org_id: str) -> Optional[Dict[str, Any]]:
        if not org_id:
            return None
        return get_cache_instance().get(ROIService._results_cache_key(org_id))

    # ------------------------------------------------------------------
    # Stateless calculations
    # ------------------------------------------------------------------

    @staticmethod
    def normalize(raw_dataset: Any) -> Dict[str, Any]:
        """
        Normalize a raw dataset.

        Raises:
            ShapeError: the dataset is malformed
        """
        dataset = normalize_dataset(raw_dataset)
        return {"status": "success", "data": dataset.to_dict()}

    @staticmethod
    def calculate(params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Calculate portfolio ROI, cashflow and the opportunity matrix for a
        dataset given in full.

        Args:
            params: Loaded CalculateRequestSchema data

        Returns:
            {"status": "success", "data": {...}} or {"status": "blocked", ...}
            when no cost classification was supplied

        Raises:
            ShapeError: the dataset is malformed
        """
        classification = ROIService._classification(params.get("cost_classification"))
        dataset = normalize_dataset(params["dataset"]).filter_by_group(params.get("group"))

        if classification is None:
            logger.info("ROI calculation blocked: no cost classification supplied")
            return {
                "status": "blocked",
                "message": "Cost classification is required before ROI can be calculated",
            }

        horizon = params.get("time_horizon_months", 36)
        results = calculate_roi(
            dataset,
            horizon,
            classification,
            current_app.config.get('ROI_SENSITIVITY_SWING', 0.2),
        )
        outputs = ROIService._outputs(dataset, results, classification, params.get("cashflow_months", 24))
        return {"status": "success", "data": outputs}

    @staticmethod
    def scenario(params: Dict[str, Any]) -> Dict[str, Any]:
        """Recalculate with one automation coverage for every process"""
        classification = ROIService._classification(params.get("cost_classification"))
        dataset = normalize_dataset(params["dataset"]).filter_by_group(params.get("group"))

        if classification is None:
            return {
                "status": "blocked",
                "message": "Cost classification is required before ROI can be calculated",
            }

        coverage = params["coverage_percentage"]
        results = calculate_scenario_roi(dataset, coverage, classification, params.get("time_horizon_months", 36))
        return {
            "status": "success",
            "data": {
                "coveragePercentage": coverage,
                "results": results.to_dict(),
            },
        }

    @staticmethod
    def cfo_score(params: Dict[str, Any]) -> Dict[str, Any]:
        result = calculate_cfo_score(CFOScoreInput.from_dict(params))
        return {"status": "success", "data": result.to_dict()}

    @staticmethod
    def complexity(params: Dict[str, Any]) -> Dict[str, Any]:
        """Complexity scores, index and risk category from raw counts"""
        def metric(key):
            value = params.get(key)
            return Metric.manual(value) if value is not None else None

        metrics = build_complexity_metrics(
            inputs=metric("inputs_count"),
            steps=metric("steps_count"),
            dependencies=metric("dependencies_count"),
        )
        return {"status": "success", "data": ComplexityMetricsSchema().dump(metrics)}

    # ------------------------------------------------------------------
    # Workspaces
    # ------------------------------------------------------------------

    @staticmethod
    def _workspace_outputs(workspace: ROIWorkspace, results: ROIResults) -> Dict[str, Any]:
        """Outputs of ``results``, built from the snapshot they were computed from"""
        snapshot = workspace.snapshot
        outputs = ROIService._outputs(
            snapshot.dataset,
            results,
            snapshot.cost_classification,
            current_app.config.get('ROI_CASHFLOW_MONTHS', 24),
        )
        outputs["status"] = workspace.status()
        ROIService._remember_results(workspace.org_id, outputs)
        return outputs

    @staticmethod
    def open_organization(session_id: str, org_id: str, time_horizon_months: Optional[int] = None) -> Dict[str, Any]:
        """
        Switch a session to an organization and run the first recompute.
        Workspaces idle longer than ROI_WORKSPACE_IDLE_SECONDS are evicted first.

        Raises:
            LoadError: the dataset could not be fetched
            ShapeError: the dataset or the cost classification is malformed
        """
        workspace_registry.evict_idle(current_app.config.get('ROI_WORKSPACE_IDLE_SECONDS', 3600))
        workspace = workspace_registry.get_or_create(session_id)

        with workspace.lock:
            results = workspace.switch_organization(org_id, time_horizon_months)

            if results is None:
                return {"status": "blocked", "data": workspace.status()}
            return {"status": "success", "data": ROIService._workspace_outputs(workspace, results)}

    @staticmethod
    def workspace_status(session_id: str) -> Dict[str, Any]:
        workspace = workspace_registry.get(session_id)
        if workspace is None:
            return {"status": "error", "message": f"Workspace {session_id} not found"}
        return {"status": "success", "data": workspace.status()}

    @staticmethod
    def recalculate(session_id: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply selection changes and trigger a recompute.

        A gated trigger answers with the last-known-good results of the
        organization, when there are any.
        """
        workspace = workspace_registry.get(session_id)
        if workspace is None:
            return {"status": "error", "message": f"Workspace {session_id} not found"}

        with workspace.lock:
            if params.get("select_process_ids"):
                workspace.set_selection(params["select_process_ids"], selected=True)
            if params.get("deselect_process_ids"):
                workspace.set_selection(params["deselect_process_ids"], selected=False)

            results = workspace.recalculate(
                params.get("reason", "manual"),
                params.get("time_horizon_months"),
                params.get("group"),
            )

            if results is None:
                return {
                    "status": "blocked",
                    "data": {
                        **workspace.status(),
                        "lastKnownResults": ROIService.last_known_results(workspace.org_id),
                    },
                }
            return {"status": "success", "data": ROIService._workspace_outputs(workspace, results)}

    @staticmethod
    def reset_controller(session_id: str) -> Dict[str, Any]:
        workspace = workspace_registry.get(session_id)
        if workspace is None:
            return {"status": "error", "message": f"Workspace {session_id} not found"}
        workspace.reset_controller()
        return {"status": "success", "data": workspace.status()}

    @staticmethod
    def close_workspace(session_id: str) -> Dict[str, Any]:
        """Forget a session's workspace; cached last-known-good results stay"""
        if not workspace_registry.remove(session_id):
            return {"status": "error", "message": f"Workspace {session_id} not found"}
        logger.info("Workspace closed", extra={"session_id": session_id})
        return {"status": "success", "data": {"sessionId": session_id}}
