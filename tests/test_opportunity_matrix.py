"""
Tests for the opportunity matrix: per-process scoring, bubble sizes and
starting process selection.
"""
from dataclasses import replace

import pytest

from src.app.services.roi.engine.core.opportunity_matrix import (
    build_opportunity_matrix,
    quadrant_summary,
    select_starting_process,
)
from src.app.services.roi.engine.core.roi_aggregator import calculate_roi
from src.app.services.roi.engine.models.scoring import MatrixProcess, OpportunityMatrix, Quadrant


def make_bubble(process_id, roi, effort, quadrant=Quadrant.QUICK_WIN, npv=1000.0):
    return MatrixProcess(
        process_id=process_id,
        process_name=process_id,
        group="",
        engine=None,
        roi=roi,
        implementation_effort=effort,
        execution_health=1.0,
        risk_factor=1.0,
        npv=npv,
        r_adj=0.1,
        complexity_index=1.0,
        implementation_weeks=1,
        initial_cost=1000,
        budget=1000,
        eac=1000,
        emv=0,
        quadrant=quadrant,
    )


class TestBuildOpportunityMatrix:
    """Matrix over the selected processes of the sample dataset"""

    def test_selected_processes_only(self, dataset, cost_classification):
        results = calculate_roi(dataset, 36, cost_classification)
        matrix = build_opportunity_matrix(dataset, results)
        assert [p.process_id for p in matrix.processes] == ["invoice-entry"]

    def test_process_scoring(self, dataset, cost_classification):
        """Initial cost is one-time plus a year of software"""
        results = calculate_roi(dataset, 36, cost_classification)
        bubble = build_opportunity_matrix(dataset, results).processes[0]

        assert bubble.initial_cost == pytest.approx(6200.0)
        assert bubble.budget == pytest.approx(6200.0)
        assert bubble.eac == pytest.approx(6200.0)
        assert bubble.emv == 0.0
        assert bubble.execution_health == 1.0
        assert bubble.complexity_index == pytest.approx(1.0)
        assert bubble.r_adj == pytest.approx(0.103)
        assert bubble.implementation_effort == pytest.approx(0.031 + 0.05 + 0.02)
        assert bubble.quadrant == Quadrant.QUICK_WIN
        assert bubble.engine == "Value Delivery"
        assert bubble.is_starting_process is True
        assert bubble.bubble_size == pytest.approx(48.0)

    def test_horizon_sets_savings_years(self, dataset, cost_classification):
        results = calculate_roi(dataset, 36, cost_classification)
        one_year = build_opportunity_matrix(dataset, results, horizon_months=12).processes[0]
        three_years = build_opportunity_matrix(dataset, results).processes[0]
        assert three_years.npv > one_year.npv

    def test_global_risk_factor_overrides_complexity(self, dataset, cost_classification):
        financial = replace(dataset.global_defaults.financial_assumptions, global_risk_factor=9)
        risky = replace(dataset, global_defaults=replace(dataset.global_defaults, financial_assumptions=financial))
        results = calculate_roi(risky, 36, cost_classification)
        bubble = build_opportunity_matrix(risky, results).processes[0]
        assert bubble.complexity_index == 9
        assert bubble.r_adj == pytest.approx(0.127)

    def test_process_without_result_is_skipped(self, dataset, cost_classification):
        results = calculate_roi(dataset, 36, cost_classification)
        results.process_results = []
        assert build_opportunity_matrix(dataset, results).processes == []

    def test_zero_budget_falls_back_to_initial_cost(self, dataset, cost_classification):
        process = dataset.processes[0]
        costs = replace(process.implementation_costs, budget=0, eac=0)
        unbudgeted = replace(dataset, processes=[replace(process, implementation_costs=costs)])
        results = calculate_roi(unbudgeted, 36, cost_classification)

        bubble = build_opportunity_matrix(unbudgeted, results).processes[0]

        assert bubble.budget == pytest.approx(6200.0)
        assert bubble.eac == pytest.approx(6200.0)
        assert bubble.execution_health == 1.0

    def test_quadrant_independent_of_other_processes(self, dataset, cost_classification):
        """Quadrants use fixed thresholds, not the spread of the portfolio"""
        results = calculate_roi(dataset, 36, cost_classification)
        alone = build_opportunity_matrix(dataset, results).processes[0]

        invoice, vendor = dataset.processes
        expensive = replace(
            vendor,
            id="vendor-expensive",
            selected=True,
            implementation_costs=replace(vendor.implementation_costs, upfront_costs=500000),
        )
        crowded = replace(dataset, processes=[invoice, replace(vendor, selected=True), expensive])
        crowded_results = calculate_roi(crowded, 36, cost_classification)
        crowded_matrix = build_opportunity_matrix(crowded, crowded_results)
        bubbles = {b.process_id: b for b in crowded_matrix.processes}

        assert len(bubbles) == 3
        assert bubbles["invoice-entry"].quadrant == alone.quadrant
        assert bubbles["invoice-entry"].roi == pytest.approx(alone.roi)
        assert bubbles["invoice-entry"].implementation_effort == pytest.approx(alone.implementation_effort)

        trimmed = replace(crowded, processes=[invoice, expensive])
        trimmed_matrix = build_opportunity_matrix(trimmed, calculate_roi(trimmed, 36, cost_classification))
        assert {b.process_id: b.quadrant for b in trimmed_matrix.processes}["invoice-entry"] == alone.quadrant

    def test_serialized_matrix(self, dataset, cost_classification):
        results = calculate_roi(dataset, 36, cost_classification)
        data = build_opportunity_matrix(dataset, results).to_dict()
        assert data["startingProcessId"] == "invoice-entry"
        assert data["quadrantCounts"]["Quick Win"] == 1
        assert data["quadrantCounts"]["Deprioritize"] == 0


class TestStartingProcess:
    """Best Quick Win; near-equal ROI prefers lower effort"""

    def test_highest_roi_wins(self):
        bubbles = [make_bubble("a", 1.0, 0.3), make_bubble("b", 2.0, 0.39)]
        assert select_starting_process(bubbles).process_id == "b"

    def test_tie_prefers_lower_effort(self):
        bubbles = [make_bubble("a", 1.0, 0.3), make_bubble("b", 1.05, 0.2)]
        assert select_starting_process(bubbles).process_id == "b"

    def test_roi_difference_at_tolerance_is_a_tie(self):
        bubbles = [make_bubble("a", 0.2, 0.3), make_bubble("b", 0.1, 0.2)]
        assert select_starting_process(bubbles).process_id == "b"

    def test_tie_with_equal_effort_keeps_order(self):
        bubbles = [make_bubble("a", 1.0, 0.3), make_bubble("b", 1.0, 0.3)]
        assert select_starting_process(bubbles).process_id == "a"

    def test_only_quick_wins_qualify(self):
        bubbles = [
            make_bubble("bet", 5.0, 0.8, Quadrant.STRATEGIC_BET),
            make_bubble("nice", 0.1, 0.1, Quadrant.NICE_TO_HAVE),
        ]
        assert select_starting_process(bubbles) is None

    def test_empty(self):
        assert select_starting_process([]) is None


class TestQuadrantSummary:
    def test_summary_per_quadrant(self):
        matrix = OpportunityMatrix(processes=[
            make_bubble("a", 1.0, 0.2, npv=1000),
            make_bubble("b", 1.0, 0.4, npv=3000),
            make_bubble("c", 0.1, 0.9, Quadrant.DEPRIORITIZE, npv=-500),
        ])
        summary = quadrant_summary(matrix)

        assert summary["Quick Win"] == {"count": 2, "totalNpv": 4000.0, "averageEffort": 0.3}
        assert summary["Deprioritize"]["count"] == 1
        assert summary["Strategic Bet"] == {"count": 0, "totalNpv": 0, "averageEffort": 0.0}
