"""
NPV / Risk Scoring Engine (CFO Score)

Discounts projected savings at a risk-adjusted rate, scores implementation
effort against absolute anchors and places the process in a quadrant.

Effort is measured against fixed anchors (cost target, time target), never
against the current portfolio, so a process keeps its quadrant when other
processes are added or removed.
"""

import logging
from typing import List

from ..models.scoring import CFOScoreInput, CFOScoreResult, Quadrant
from . import formula_library as fl

logger = logging.getLogger(__name__)


ROI_THRESHOLD = 0.5  # roi_a >= 50% is high ROI
EFFORT_THRESHOLD = 0.4  # effort <= 40% is low effort

EFFORT_COST_WEIGHT = 0.5
EFFORT_TIME_WEIGHT = 0.3
EFFORT_RISK_WEIGHT = 0.2


# ============================================================================
# COMPONENTS
# ============================================================================

def effective_risk(complexity_index: float, global_risk_factor=None) -> float:
    """Global risk factor when set (hard override), else the complexity index"""
    if global_risk_factor is not None:
        return global_risk_factor
    return complexity_index


def risk_adjusted_rate(discount_rate: float, risk_premium_factor: float, risk: float) -> float:
    """
    Formula:
        r_adj = discount rate + risk premium factor * risk / 10
    """
    return discount_rate + risk_premium_factor * risk / 10


def risk_adjusted_npv(initial_cost: float, savings_years: List[float], r_adj: float, start_year: int = 1) -> float:
    """
    Formula:
        NPV = -C0 + sum(savings_y / (1 + r_adj) ** y), y = 1..n

    Savings of years before ``start_year`` are ignored.
    """
    npv = -initial_cost
    for index, savings in enumerate(savings_years):
        year = index + 1
        if year >= start_year:
            npv += fl.discounted_value(savings, r_adj, year)
    return npv


def implementation_effort(
    estimated_cost: float,
    estimated_time_weeks: float,
    risk: float,
    cost_target: float,
    time_target_months: float
) -> float:
    """
    Absolute-anchor implementation effort in [0, 1].

    Formula:
        effort = 0.5 * min(cost / cost target, 1)
               + 0.3 * min(weeks / (time target * 4.33), 1)
               + 0.2 * risk / 10

    A zero target yields a 0 ratio for its term.
    """
    cost_ratio = max(0.0, min(fl.safe_ratio(estimated_cost, cost_target), 1.0))
    time_ratio = max(0.0, min(fl.safe_ratio(estimated_time_weeks, time_target_months * fl.WEEKS_PER_MONTH), 1.0))
    risk_ratio = max(0.0, min(risk / 10, 1.0))

    return (EFFORT_COST_WEIGHT * cost_ratio
            + EFFORT_TIME_WEIGHT * time_ratio
            + EFFORT_RISK_WEIGHT * risk_ratio)


def execution_health(budget: float, eac: float) -> float:
    """
    Budget control health in [0, 1].

    Formula:
        health = 1 - min(|EAC - budget| / budget, 1), 1 when no budget is set
    """
    if budget is None or budget <= 0:
        return 1.0
    return 1 - min(abs((eac or 0.0) - budget) / budget, 1.0)


def exposure_risk_factor(emv: float, initial_cost: float) -> float:
    """
    Formula:
        risk factor = clamp(1 - EMV / C0, 0, 1), 1 without initial cost
    """
    if initial_cost <= 0:
        return 1.0
    return fl.clamp(1 - (emv or 0.0) / initial_cost, 0.0, 1.0)


def classify_quadrant(roi_a: float, effort: float) -> Quadrant:
    """Fixed thresholds: roi_a >= 0.5 and effort <= 0.4"""
    high_roi = roi_a >= ROI_THRESHOLD
    low_effort = effort <= EFFORT_THRESHOLD

    if high_roi and low_effort:
        return Quadrant.QUICK_WIN
    if high_roi:
        return Quadrant.STRATEGIC_BET
    if low_effort:
        return Quadrant.NICE_TO_HAVE
    return Quadrant.DEPRIORITIZE


# ============================================================================
# CFO SCORE
# ============================================================================

def calculate_cfo_score(params: CFOScoreInput) -> CFOScoreResult:
    """
    Calculate the CFO score of one process.

    Args:
        params: CFO score inputs (rates as decimals, estimated time in weeks)

    Returns:
        CFOScoreResult
    """
    risk = effective_risk(params.complexity_index, params.global_risk_factor)
    r_adj = risk_adjusted_rate(params.discount_rate, params.risk_premium_factor, risk)
    npv = risk_adjusted_npv(params.initial_cost, params.savings_years, r_adj, params.start_year)

    roi_a = npv / params.initial_cost if params.initial_cost > 0 else 0.0

    estimated_cost = params.estimated_cost if params.estimated_cost is not None else params.initial_cost
    estimated_time = params.estimated_time if params.estimated_time is not None else 1.0
    effort = implementation_effort(
        estimated_cost, estimated_time, risk, params.cost_target, params.time_target
    )

    health = execution_health(params.budget, params.eac)
    risk_factor = exposure_risk_factor(params.emv, params.initial_cost)

    cfo_score_raw = 0.5 * roi_a + 0.3 * health + 0.2 * risk_factor
    cfo_score_norm = 10 * (0.5 * min(roi_a, 3.0) / 3.0 + 0.3 * health + 0.2 * risk_factor)

    return CFOScoreResult(
        roi_a=roi_a,
        implementation_effort=effort,
        execution_health=health,
        risk_factor=risk_factor,
        npv_final=npv,
        r_adj=r_adj,
        quadrant=classify_quadrant(roi_a, effort),
        effective_risk=risk,
        roi_risk_weighted=roi_a * fl.risk_multiplier(risk),
        cfo_score_raw=cfo_score_raw,
        cfo_score_norm=cfo_score_norm,
    )
