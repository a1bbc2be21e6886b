"""
Cashflow Projector

Month-by-month cost, savings and cumulative net position of the selected
processes over a horizon.

Per process:
- one-time costs (upfront + training + consulting) post in the start month
- software cost posts every month from the start month on
- savings post from the month after the implementation completes
"""

import logging
from typing import Dict, List, Optional

from ..models.classification import CostClassification
from ..models.process import NormalizedDataset
from ..models.results import CashflowPoint, ProcessROIResult
from . import formula_library as fl
from .savings_calculator import SavingsCalculator

logger = logging.getLogger(__name__)


DEFAULT_CASHFLOW_MONTHS = 24


def project_cashflow(
    dataset: NormalizedDataset,
    horizon_months: int = DEFAULT_CASHFLOW_MONTHS,
    cost_classification: Optional[CostClassification] = None,
    process_results: Optional[List[ProcessROIResult]] = None
) -> List[CashflowPoint]:
    """
    Project the monthly cashflow.

    Args:
        dataset: Normalized dataset
        horizon_months: Number of months to project (months 1..horizon)
        cost_classification: Organization cost classification
        process_results: Precomputed per-process results; calculated when omitted

    Returns:
        One CashflowPoint per month, or an empty list when no cost
        classification is available
    """
    if cost_classification is None:
        logger.info("Cashflow projection blocked: cost classification not loaded")
        return []

    if process_results is None:
        calculator = SavingsCalculator(dataset.global_defaults, cost_classification)
        process_results = calculator.calculate_all(dataset.processes)

    results_by_id: Dict[str, ProcessROIResult] = {r.process_id: r for r in process_results}

    schedules = []
    for process in dataset.selected_processes:
        result = results_by_id.get(process.id)
        if result is None:
            logger.warning("No result for selected process %s, skipping in cashflow", process.id)
            continue

        costs = process.implementation_costs
        start_month = costs.start_month
        schedules.append({
            "start_month": start_month,
            "savings_start_month": start_month + fl.implementation_months(costs.implementation_weeks),
            "one_time_costs": costs.one_time_costs,
            "software_cost": costs.software_cost,
            "monthly_savings": result.monthly_savings,
        })

    points: List[CashflowPoint] = []
    cumulative = 0.0
    cumulative_cost = 0.0
    cumulative_savings = 0.0

    for month in range(1, horizon_months + 1):
        cost = 0.0
        savings = 0.0

        for schedule in schedules:
            if month == schedule["start_month"]:
                cost += schedule["one_time_costs"]
            if month >= schedule["start_month"]:
                cost += schedule["software_cost"]
            if month >= schedule["savings_start_month"]:
                savings += schedule["monthly_savings"]

        net = savings - cost
        cumulative += net
        cumulative_cost += cost
        cumulative_savings += savings

        points.append(CashflowPoint(
            month=month,
            cost=cost,
            savings=savings,
            net=net,
            cumulative=cumulative,
            cumulative_cost=cumulative_cost,
            cumulative_savings=cumulative_savings,
        ))

    return points


def break_even_month(points: List[CashflowPoint]) -> Optional[int]:
    """First month whose cumulative position is no longer negative after a dip"""
    went_negative = False
    for point in points:
        if point.cumulative < 0:
            went_negative = True
        elif went_negative:
            return point.month
    return None
