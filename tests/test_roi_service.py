"""
Tests for the ROI service layer (stateless calculations and workspaces)
"""
import threading
from unittest.mock import MagicMock, patch

import pytest

from src.common.exceptions import LoadError, ShapeError
from src.app.services.roi.engine.core.roi_aggregator import calculate_roi
from src.app.services.roi.recalculation_controller import ROIController
from src.app.services.roi.roi_service import ROIService, workspace_registry


@pytest.fixture
def calculate_params(raw_dataset, classification_payload):
    return {
        "dataset": raw_dataset,
        "cost_classification": classification_payload,
        "time_horizon_months": 36,
        "cashflow_months": 24,
        "group": None,
    }


@pytest.fixture
def storage(raw_dataset, cost_classification):
    storage = MagicMock()
    storage.load_dataset.return_value = raw_dataset
    storage.load_cost_classification.return_value = cost_classification
    return storage


@pytest.fixture
def patched_storage(storage):
    with patch('src.app.services.roi.roi_service.StorageClient') as storage_cls:
        storage_cls.from_app_config.return_value = storage
        yield storage


class TestStatelessCalculations:
    """Whole dataset in, results out"""

    def test_calculate(self, app, calculate_params):
        result = ROIService.calculate(calculate_params)

        assert result["status"] == "success"
        data = result["data"]
        assert data["results"]["annualNetSavings"] == pytest.approx(18960.0)
        assert len(data["cashflow"]) == 24
        assert data["breakEvenMonth"] == 5
        assert data["opportunityMatrix"]["startingProcessId"] == "invoice-entry"
        assert data["quadrantSummary"]["Quick Win"]["count"] == 1

    def test_calculate_blocked_without_classification(self, app, calculate_params):
        calculate_params["cost_classification"] = None
        result = ROIService.calculate(calculate_params)
        assert result["status"] == "blocked"
        assert "Cost classification" in result["message"]

    def test_calculate_shape_error(self, app, calculate_params):
        calculate_params["dataset"] = {"groups": [], "processes": "none"}
        with pytest.raises(ShapeError):
            ROIService.calculate(calculate_params)

    def test_calculate_group_filter(self, app, calculate_params):
        calculate_params["group"] = "Finance"
        data = ROIService.calculate(calculate_params)["data"]
        assert [r["processId"] for r in data["results"]["processResults"]] == ["vendor-onboarding"]
        assert data["opportunityMatrix"]["processes"] == []

    def test_scenario(self, app, calculate_params):
        calculate_params["coverage_percentage"] = 100
        result = ROIService.scenario(calculate_params)
        assert result["status"] == "success"
        assert result["data"]["coveragePercentage"] == 100
        assert result["data"]["results"]["processResults"][0]["automationCoverage"] == 100

    def test_normalize(self, app, raw_dataset):
        result = ROIService.normalize(raw_dataset)
        process = result["data"]["processes"][0]
        assert process["averageHourlyWage"] == 30
        assert process["complexityMetrics"]["riskCategory"] == "Simple"

    def test_cfo_score(self, app):
        result = ROIService.cfo_score({
            "initial_cost": 50000,
            "savings_years": [40000, 40000, 40000],
            "complexity_index": 4.5,
        })
        assert result["data"]["quadrant"] == "Quick Win"
        assert result["data"]["cfoScoreNorm"] == 6.57

    def test_complexity(self, app):
        result = ROIService.complexity({"inputs_count": 4, "steps_count": 10, "dependencies_count": 2})
        data = result["data"]
        assert data["complexityIndex"] == 4.8
        assert data["riskCategory"] == "Moderate"
        assert data["riskValue"] == 5
        assert data["inputs"] == {"value": 4.0, "source": "manual"}


class TestWorkspaceOperations:
    """Session workspaces behind the recalculation controller"""

    def test_open_organization(self, app, patched_storage):
        """Loading selects every process, vendor onboarding and its large upfront cost included"""
        result = ROIService.open_organization("session-1", "org-1")

        assert result["status"] == "success"
        data = result["data"]
        assert data["breakEvenMonth"] == 19
        assert data["status"]["orgId"] == "org-1"
        assert data["status"]["roiReady"] is True
        assert ROIService.last_known_results("org-1")["breakEvenMonth"] == 19

    def test_open_organization_load_error(self, app, patched_storage):
        patched_storage.load_dataset.side_effect = LoadError("down", organization_id="org-1")
        with pytest.raises(LoadError):
            ROIService.open_organization("session-1", "org-1")
        assert workspace_registry.get("session-1").last_error == "down"

    def test_workspace_status(self, app, patched_storage):
        assert ROIService.workspace_status("missing")["status"] == "error"

        ROIService.open_organization("session-1", "org-1")
        status = ROIService.workspace_status("session-1")
        assert status["status"] == "success"
        assert status["data"]["hasResults"] is True

    def test_recalculate_with_selection(self, app, patched_storage):
        ROIService.open_organization("session-1", "org-1")
        result = ROIService.recalculate("session-1", {
            "reason": "deselect",
            "deselect_process_ids": ["vendor-onboarding"],
            "select_process_ids": [],
        })

        assert result["status"] == "success"
        assert result["data"]["status"]["selectedCount"] == 1

    def test_recalculate_blocked_returns_last_known_results(self, app, patched_storage):
        ROIService.open_organization("session-1", "org-1")
        workspace_registry.get("session-1").cost_classification_loaded = False

        result = ROIService.recalculate("session-1", {"reason": "horizon", "time_horizon_months": 48})

        assert result["status"] == "blocked"
        assert result["data"]["blockedReason"] == "cost classification not loaded"
        assert result["data"]["lastKnownResults"]["breakEvenMonth"] == 19

    def test_recalculate_unknown_workspace(self, app):
        assert ROIService.recalculate("missing", {})["status"] == "error"

    def test_outputs_follow_computed_snapshot(self, app, patched_storage):
        """A selection change made while computing does not leak into the outputs"""
        ROIService.open_organization("session-1", "org-1")
        workspace = workspace_registry.get("session-1")

        def calculate(dataset, horizon, classification):
            workspace.set_selection(["invoice-entry"], selected=False)
            return calculate_roi(dataset, horizon, classification)

        workspace.controller = ROIController(calculate=calculate)
        result = ROIService.recalculate("session-1", {"reason": "horizon", "time_horizon_months": 48})

        assert result["status"] == "success"
        data = result["data"]
        assert [p["processId"] for p in data["opportunityMatrix"]["processes"]] == \
            ["invoice-entry", "vendor-onboarding"]
        assert data["breakEvenMonth"] == 19
        assert data["status"]["selectedCount"] == 1

    def test_recalculate_waits_for_workspace_lock(self, app, patched_storage):
        ROIService.open_organization("session-1", "org-1")
        workspace = workspace_registry.get("session-1")
        outcome = {}

        def recalculate():
            with app.app_context():
                outcome["result"] = ROIService.recalculate("session-1", {"reason": "horizon"})

        with workspace.lock:
            worker = threading.Thread(target=recalculate)
            worker.start()
            worker.join(0.2)
            assert worker.is_alive()
            assert "result" not in outcome

        worker.join(5)
        assert outcome["result"]["status"] == "success"

    def test_open_organization_evicts_idle_workspaces(self, app, patched_storage, monkeypatch):
        now = [0.0]
        monkeypatch.setattr(workspace_registry, "_clock", lambda: now[0])
        ROIService.open_organization("session-1", "org-1")

        now[0] = app.config["ROI_WORKSPACE_IDLE_SECONDS"] + 1.0
        ROIService.open_organization("session-2", "org-1")

        assert workspace_registry.get("session-1") is None
        assert workspace_registry.get("session-2") is not None

    def test_close_workspace(self, app, patched_storage):
        ROIService.open_organization("session-1", "org-1")

        result = ROIService.close_workspace("session-1")

        assert result == {"status": "success", "data": {"sessionId": "session-1"}}
        assert workspace_registry.get("session-1") is None
        assert ROIService.close_workspace("session-1")["status"] == "error"
        assert ROIService.last_known_results("org-1") is not None

    def test_reset_controller(self, app, patched_storage):
        assert ROIService.reset_controller("missing")["status"] == "error"

        ROIService.open_organization("session-1", "org-1")
        result = ROIService.reset_controller("session-1")
        assert result["status"] == "success"
        assert workspace_registry.get("session-1").controller.last_results is None
