"""
Opportunity Matrix Aggregator

Runs the CFO score for every selected process and lays the results out as
bubbles on the ROI / effort matrix. Bubble size follows the absolute NPV,
relative to the largest one in the matrix. Quadrants are not relative:
they come from the per-process score only.
"""

import functools
import logging
import math
from typing import Dict, List, Optional

from ..models.process import NormalizedDataset, Process
from ..models.results import ProcessROIResult, ROIResults
from ..models.scoring import CFOScoreInput, MatrixProcess, OpportunityMatrix, Quadrant
from . import formula_library as fl
from .cfo_score import calculate_cfo_score

logger = logging.getLogger(__name__)


MIN_BUBBLE_SIZE = 16.0
BUBBLE_SIZE_RANGE = 32.0
ROI_TIE_TOLERANCE = 0.1
DEFAULT_RISK_PREMIUM_FACTOR = 0.03


def build_opportunity_matrix(
    dataset: NormalizedDataset,
    roi_results: ROIResults,
    horizon_months: Optional[int] = None
) -> OpportunityMatrix:
    """
    Build the opportunity matrix of the selected processes.

    Args:
        dataset: Normalized dataset
        roi_results: Portfolio results holding one result per process
        horizon_months: Horizon for the yearly savings; defaults to the
            horizon the results were calculated with

    Returns:
        OpportunityMatrix with at most one starting process flagged
    """
    horizon = horizon_months if horizon_months is not None else roi_results.time_horizon_months
    years = max(1, math.ceil(horizon / 12))

    bubbles: List[MatrixProcess] = []
    for process in dataset.selected_processes:
        result = roi_results.result_for(process.id)
        if result is None:
            logger.warning("No ROI result for process %s, left out of the matrix", process.id)
            continue
        bubbles.append(_score_process(dataset, process, result, years))

    _assign_bubble_sizes(bubbles)

    starting = select_starting_process(bubbles)
    if starting is not None:
        starting.is_starting_process = True

    logger.debug("Opportunity matrix built", extra={
        "processes": len(bubbles),
        "starting_process_id": starting.process_id if starting else None,
    })
    return OpportunityMatrix(processes=bubbles)


def _score_process(
    dataset: NormalizedDataset,
    process: Process,
    result: ProcessROIResult,
    years: int
) -> MatrixProcess:
    global_defaults = dataset.global_defaults
    financial = global_defaults.financial_assumptions
    anchors = global_defaults.effort_anchors
    costs = process.implementation_costs

    initial_cost = costs.one_time_costs + costs.software_cost * 12
    budget = costs.budget or initial_cost
    eac = costs.eac or initial_cost
    emv = fl.first_or_default([costs.emv], 0.0)
    weeks = costs.implementation_weeks or 1.0

    score = calculate_cfo_score(CFOScoreInput(
        initial_cost=initial_cost,
        savings_years=[result.annual_net_savings] * years,
        discount_rate=fl.first_or_default([financial.discount_rate], 10.0) / 100,
        complexity_index=process.complexity_metrics.complexity_index,
        budget=budget,
        eac=eac,
        emv=emv,
        risk_premium_factor=fl.first_or_default([financial.risk_premium_factor], DEFAULT_RISK_PREMIUM_FACTOR),
        estimated_cost=initial_cost,
        estimated_time=weeks,
        cost_target=anchors.cost_target,
        time_target=anchors.time_target,
        global_risk_factor=financial.global_risk_factor,
    ))

    group = dataset.find_group(process.group) if process.group else None

    return MatrixProcess(
        process_id=process.id,
        process_name=process.name,
        group=process.group,
        engine=group.engine if group else None,
        roi=score.roi_a,
        implementation_effort=score.implementation_effort,
        execution_health=score.execution_health,
        risk_factor=score.risk_factor,
        npv=score.npv_final,
        r_adj=score.r_adj,
        complexity_index=score.effective_risk,
        implementation_weeks=weeks,
        initial_cost=initial_cost,
        budget=budget,
        eac=eac,
        emv=emv,
        quadrant=score.quadrant,
        cfo_score_norm=score.cfo_score_norm,
    )


def _assign_bubble_sizes(bubbles: List[MatrixProcess]) -> None:
    """
    Formula:
        size = 16 + 32 * |npv| / max(max |npv|, 1)
    """
    if not bubbles:
        return
    largest = max(max(abs(b.npv) for b in bubbles), 1.0)
    for bubble in bubbles:
        bubble.bubble_size = MIN_BUBBLE_SIZE + BUBBLE_SIZE_RANGE * abs(bubble.npv) / largest


def _compare_quick_wins(a: MatrixProcess, b: MatrixProcess) -> int:
    # ROI within the tolerance: lower effort first
    if abs(a.roi - b.roi) <= ROI_TIE_TOLERANCE:
        if a.implementation_effort < b.implementation_effort:
            return -1
        if a.implementation_effort > b.implementation_effort:
            return 1
        return 0
    return -1 if a.roi > b.roi else 1


def select_starting_process(bubbles: List[MatrixProcess]) -> Optional[MatrixProcess]:
    """Recommended first process: the best Quick Win, None without one"""
    quick_wins = [b for b in bubbles if b.quadrant == Quadrant.QUICK_WIN]
    if not quick_wins:
        return None
    return sorted(quick_wins, key=functools.cmp_to_key(_compare_quick_wins))[0]


def quadrant_summary(matrix: OpportunityMatrix) -> Dict[str, Dict[str, float]]:
    """Count, total NPV and average effort per quadrant"""
    summary = {}
    for name, items in matrix.by_quadrant().items():
        summary[name] = {
            "count": len(items),
            "totalNpv": round(sum(b.npv for b in items), 2),
            "averageEffort": round(fl.safe_ratio(sum(b.implementation_effort for b in items), len(items)), 4),
        }
    return summary
