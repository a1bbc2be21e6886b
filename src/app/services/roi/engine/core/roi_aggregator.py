"""
Portfolio ROI Aggregator

Aggregates the per-process savings of the selected processes into the
portfolio ROI: annual net savings, ROI, payback, NPV/IRR on monthly flows,
EBITDA impact, FTE and attrition effects and a coverage sensitivity.
"""

import logging
import math
from typing import List, Optional

from ..models.classification import CostClassification
from ..models.process import NormalizedDataset, TaskType, UtilizationType
from ..models.results import ProcessROIResult, ROIResults, SensitivityAnalysis
from . import formula_library as fl
from .savings_calculator import SavingsCalculator

logger = logging.getLogger(__name__)


DEFAULT_TIME_HORIZON_MONTHS = 36
SENSITIVITY_SWING = 0.2


# ============================================================================
# PUBLIC API
# ============================================================================

def calculate_roi(
    dataset: NormalizedDataset,
    time_horizon_months: int = DEFAULT_TIME_HORIZON_MONTHS,
    cost_classification: Optional[CostClassification] = None,
    sensitivity_swing: float = SENSITIVITY_SWING
) -> ROIResults:
    """
    Calculate the portfolio ROI over the selected processes.

    Args:
        dataset: Normalized dataset
        time_horizon_months: Months of monthly cashflows for NPV/IRR
        cost_classification: Organization cost classification
        sensitivity_swing: Coverage swing of the sensitivity analysis (0.2 = +/-20%)

    Returns:
        ROIResults with one process result per input process, in input order
    """
    results = _aggregate(dataset, time_horizon_months, cost_classification)

    results.sensitivity_analysis = SensitivityAnalysis(
        conservative=_scaled_coverage_roi(dataset, time_horizon_months, cost_classification, 1 - sensitivity_swing),
        likely=results.roi,
        optimistic=_scaled_coverage_roi(dataset, time_horizon_months, cost_classification, 1 + sensitivity_swing),
    )

    logger.info("Portfolio ROI calculated", extra={
        "selected_processes": sum(1 for p in dataset.processes if p.selected),
        "time_horizon_months": time_horizon_months,
        "annual_net_savings": round(results.annual_net_savings, 2),
        "roi": round(results.roi, 2),
    })
    return results


def calculate_scenario_roi(
    dataset: NormalizedDataset,
    coverage_percentage: float,
    cost_classification: Optional[CostClassification] = None,
    time_horizon_months: int = DEFAULT_TIME_HORIZON_MONTHS
) -> ROIResults:
    """Recalculate the portfolio with one automation coverage for every process"""
    coverage = fl.clamp(coverage_percentage, 0.0, 100.0)
    scenario = dataset.with_processes([p.with_coverage(coverage) for p in dataset.processes])
    return calculate_roi(scenario, time_horizon_months, cost_classification)


# ============================================================================
# AGGREGATION
# ============================================================================

def _scaled_coverage_roi(
    dataset: NormalizedDataset,
    time_horizon_months: int,
    cost_classification: Optional[CostClassification],
    factor: float
) -> float:
    """Portfolio ROI with every process coverage scaled, capped at 100%"""
    scaled = dataset.with_processes([
        p.with_coverage(min(100.0, p.implementation_costs.automation_coverage * factor))
        for p in dataset.processes
    ])
    return _aggregate(scaled, time_horizon_months, cost_classification).roi


def _aggregate(
    dataset: NormalizedDataset,
    time_horizon_months: int,
    cost_classification: Optional[CostClassification]
) -> ROIResults:
    global_defaults = dataset.global_defaults
    financial = global_defaults.financial_assumptions

    calculator = SavingsCalculator(global_defaults, cost_classification)
    process_results = calculator.calculate_all(dataset.processes)

    selected_pairs = [
        (process, result)
        for process, result in zip(dataset.processes, process_results)
        if process.selected
    ]
    selected = [result for _, result in selected_pairs]

    def total(attr: str) -> float:
        return sum(getattr(r, attr) for r in selected)

    annual_cost = sum(r.software_cost_monthly * 12 for r in selected)
    total_investment = total("total_investment")
    total_cost = total_investment + annual_cost

    annual_net_savings = total("annual_net_savings") - annual_cost
    roi = fl.safe_ratio(annual_net_savings, total_cost) * 100
    payback = fl.payback_months(total_investment, annual_net_savings / 12)

    attrition = total("attrition_savings")
    integration = total("system_integration_costs")

    # NPV / IRR on monthly flows, month 0 carries the investment
    cashflows = _monthly_cashflows(
        total_investment,
        annual_net_savings + attrition - integration,
        financial.inflation_rate,
        time_horizon_months,
    )
    npv = fl.npv(financial.discount_rate / 12, cashflows)
    irr = fl.irr(cashflows) * 12 * 100

    # EBITDA
    tax = financial.tax_rate / 100
    base_ebitda = annual_net_savings + attrition - integration
    years = max(1, math.ceil(time_horizon_months / 12))
    ebitda_by_year = {
        year: fl.grown_value(base_ebitda, financial.inflation_rate, year - 1) * (1 - tax)
        for year in range(1, years + 1)
    }

    results = ROIResults(
        time_horizon_months=time_horizon_months,
        annual_net_savings=annual_net_savings,
        annual_cost=annual_cost,
        total_investment=total_investment,
        total_cost=total_cost,
        roi=roi,
        payback_period_months=payback,
        npv=npv,
        irr=irr,
        monthly_savings=total("monthly_savings"),
        monthly_time_saved=total("monthly_time_saved"),
        annual_time_savings=total("annual_time_savings"),
        total_ftes_freed=total("ftes_freed"),
        peak_season_savings=total("peak_season_savings"),
        overtime_savings=total("overtime_savings"),
        temp_staff_savings=_temp_staff_savings(selected_pairs, global_defaults.temp_staff_cost_per_hour),
        sla_compliance_value=total("sla_compliance_value"),
        total_hard_savings=total("hard_savings"),
        total_soft_savings=total("soft_savings"),
        total_error_reduction_savings=total("error_reduction_savings"),
        total_compliance_risk_reduction=total("compliance_risk_reduction"),
        total_revenue_uplift=total("revenue_uplift"),
        total_prompt_payment_benefit=total("prompt_payment_benefit"),
        total_attrition_savings=attrition,
        total_system_integration_costs=integration,
        total_internal_cost_savings=sum(r.internal_cost_savings.total for r in selected),
        total_internal_hard_dollar_savings=sum(r.internal_cost_savings.hard_dollar_total for r in selected),
        total_internal_soft_dollar_savings=sum(r.internal_cost_savings.soft_dollar_total for r in selected),
        fte_productivity_uplift=_fte_productivity_uplift(selected_pairs),
        ebitda_impact=base_ebitda * (1 - tax),
        ebitda_by_year=ebitda_by_year,
        implementation_roi=_implementation_ramp(selected),
        total_ongoing_training_costs=total("ongoing_training_costs"),
        total_ongoing_overtime_costs=total("ongoing_overtime_costs"),
        total_ongoing_shadow_systems_costs=total("ongoing_shadow_systems_costs"),
        total_ongoing_it_support_costs=total("ongoing_it_support_costs"),
        process_results=process_results,
    )
    return results


def _monthly_cashflows(
    investment: float,
    annual_net_benefit: float,
    inflation_rate: float,
    time_horizon_months: int
) -> List[float]:
    """
    Monthly flows for NPV/IRR.

    Formula:
        cf_0 = -investment
        cf_m = annual net benefit / 12 * (1 + inflation) ** (m / 12)
    """
    cashflows = [-investment]
    monthly = annual_net_benefit / 12
    for month in range(1, time_horizon_months + 1):
        cashflows.append(fl.grown_value(monthly, inflation_rate, month / 12))
    return cashflows


def _temp_staff_savings(selected_pairs, temp_staff_rate: float) -> float:
    """
    Temporary staff avoided during peak months of seasonal processes.

    Formula:
        peak months * hours saved per month * (temp rate - wage)
    """
    savings = 0.0
    for process, result in selected_pairs:
        if process.task_type != TaskType.SEASONAL:
            continue
        peak_months = len(process.seasonal_pattern.peak_months)
        savings += peak_months * result.monthly_time_saved * (temp_staff_rate - process.effective_hourly_wage)
    return savings


def _fte_productivity_uplift(selected_pairs) -> float:
    """Value of redeployed capacity; eliminated roles add nothing"""
    uplift = 0.0
    for process, result in selected_pairs:
        utilization = process.utilization_impact
        if utilization.utilization_type == UtilizationType.ELIMINATED:
            continue
        uplift += (result.ftes_freed * process.annual_compensation
                   * utilization.redeployment_value_percentage / 100)
    return uplift


def _implementation_ramp(selected: List[ProcessROIResult]) -> List[float]:
    """
    Portfolio monthly savings while implementations ramp up.

    Each process ramps linearly from its start month to the end of its
    implementation, then contributes its full monthly savings.
    """
    if not selected:
        return []

    last_month = max(r.start_month + r.implementation_months for r in selected)
    ramp = []
    for month in range(1, last_month + 1):
        partial = 0.0
        for r in selected:
            end_month = r.start_month + r.implementation_months
            if month > end_month or (month >= r.start_month and end_month == r.start_month):
                partial += r.monthly_savings
            elif month >= r.start_month:
                progress = (month - r.start_month) / (end_month - r.start_month)
                partial += r.monthly_savings * progress
        ramp.append(partial)
    return ramp
