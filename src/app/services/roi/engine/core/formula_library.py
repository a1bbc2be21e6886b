"""
Formula Library - Deterministic ROI Formulas

All formulas are deterministic and traceable.
Each formula is documented with its financial logic.
"""

import math
from typing import List, Optional

from ..models.process import (
    ComplianceRisk,
    FineType,
    OverheadCosts,
    SLACostUnit,
    TaskVolumeUnit,
    TimeUnit,
)


WORKING_DAYS_PER_MONTH = 21.7
WEEKS_PER_MONTH = 4.33
PAYBACK_NEVER = 999  # sentinel for "no payback within any horizon"

TASK_VOLUME_FACTORS = {
    TaskVolumeUnit.DAY: WORKING_DAYS_PER_MONTH,
    TaskVolumeUnit.WEEK: WEEKS_PER_MONTH,
    TaskVolumeUnit.MONTH: 1.0,
    TaskVolumeUnit.QUARTER: 1.0 / 3.0,
    TaskVolumeUnit.YEAR: 1.0 / 12.0,
}

SLA_ANNUALIZATION_FACTORS = {
    SLACostUnit.PER_MINUTE: 8760,
    SLACostUnit.PER_HOUR: 365,
    SLACostUnit.PER_DAY: 52,
    SLACostUnit.PER_WEEK: 12,
    SLACostUnit.PER_MONTH: 1,
    SLACostUnit.PER_YEAR: 1,
}


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Division guard: returns ``default`` for a zero or missing denominator"""
    if not denominator:
        return default
    return numerator / denominator


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def coverage_fraction(automation_coverage: float) -> float:
    """Coverage percentage as a 0-1 fraction"""
    return clamp(automation_coverage, 0.0, 100.0) / 100.0


# ============================================================================
# VOLUME / TIME CONVERSIONS
# ============================================================================

def monthly_task_volume(task_volume: float, unit: TaskVolumeUnit) -> float:
    """
    Convert a task volume to tasks per month.

    Formula:
        monthly = volume * factor(unit)
        day = 21.7, week = 4.33, month = 1, quarter = 1/3, year = 1/12
    """
    return task_volume * TASK_VOLUME_FACTORS.get(unit, 1.0)


def minutes_per_task(time_per_task: float, unit: TimeUnit) -> float:
    if unit == TimeUnit.HOURS:
        return time_per_task * 60
    return time_per_task


def implementation_months(implementation_weeks: float) -> int:
    """
    Calendar months occupied by an implementation.

    Formula:
        months = ceil(weeks / 4.33)

    The ratio is rounded before the ceiling so 4.33 weeks is exactly one month.
    """
    if implementation_weeks <= 0:
        return 0
    return math.ceil(round(implementation_weeks / WEEKS_PER_MONTH, 6))


# ============================================================================
# LABOR COST FORMULAS
# ============================================================================

def overhead_rate(overhead: OverheadCosts) -> float:
    """
    Overhead on top of wages as a fraction.

    Formula:
        rate = (benefits + payroll taxes + PTO + training + G&A) / 100
    """
    return overhead.total_percentage / 100


def fully_loaded_rate(hourly_wage: float, overhead: OverheadCosts) -> float:
    """
    Fully loaded hourly labor rate.

    Formula:
        FLR = wage * (1 + overhead rate)
    """
    return hourly_wage * (1 + overhead_rate(overhead))


# ============================================================================
# RISK / PENALTY FORMULAS
# ============================================================================

def annualize_sla_cost(cost_of_missing: float, misses_per_month: float, unit: SLACostUnit) -> float:
    """
    Annual value of avoiding SLA misses.

    Formula:
        value = cost of missing * misses * factor(unit)
        per-minute 8760, per-hour 365, per-day 52, per-week 12,
        per-month 1, per-year 1
    """
    return cost_of_missing * misses_per_month * SLA_ANNUALIZATION_FACTORS.get(unit, 12)


def compliance_fine_magnitude(risk: ComplianceRisk) -> float:
    """
    Annual fine exposure for the active fine type.

    Formula:
        daily:           amount per day * expected duration (days)
        per-incident:    amount per incident * expected incidents per year
        per-record:      amount per record * records at risk
        percent-revenue: revenue at risk * percentage rate / 100
    """
    if risk.fine_type == FineType.DAILY:
        return risk.amount_per_day * risk.expected_duration_days
    if risk.fine_type == FineType.PER_INCIDENT:
        return risk.amount_per_incident * risk.expected_incidents_per_year
    if risk.fine_type == FineType.PER_RECORD:
        return risk.amount_per_record * risk.records_at_risk
    if risk.fine_type == FineType.PERCENT_REVENUE:
        return risk.revenue_at_risk * risk.percentage_rate / 100
    return 0.0


def risk_multiplier(risk: float) -> float:
    """
    Weight applied to ROI for a 0-10 risk score.

    Formula:
        multiplier = 1 - 0.5 * risk / 10

    Risk 0 keeps the full ROI, risk 10 halves it.
    """
    return 1 - 0.5 * clamp(risk, 0.0, 10.0) / 10


# ============================================================================
# DISCOUNTING FORMULAS
# ============================================================================

def npv(rate_percent: float, cashflows: List[float]) -> float:
    """
    Net present value of a cashflow series.

    Formula:
        NPV = sum(cf_t / (1 + r/100) ** t), t = 0..n-1

    Args:
        rate_percent: Discount rate per period, in percent
        cashflows: Cashflows, the first one at t = 0

    Returns:
        Net present value
    """
    rate = rate_percent / 100
    return sum(cf / (1 + rate) ** t for t, cf in enumerate(cashflows))


def irr(
    cashflows: List[float],
    guess: float = 0.1,
    max_iterations: int = 100,
    tolerance: float = 1e-4
) -> float:
    """
    Internal rate of return per period (Newton-Raphson).

    Args:
        cashflows: Cashflows, the first one at t = 0
        guess: Starting rate (decimal)
        max_iterations: Newton iterations before giving up
        tolerance: Convergence threshold on the rate step

    Returns:
        IRR as a decimal, 0.0 when the iteration does not converge
    """
    if not cashflows or all(cf >= 0 for cf in cashflows) or all(cf <= 0 for cf in cashflows):
        return 0.0

    rate = guess
    for _ in range(max_iterations):
        value = 0.0
        derivative = 0.0
        for t, cf in enumerate(cashflows):
            discount = (1 + rate) ** t
            value += cf / discount
            derivative -= t * cf / (discount * (1 + rate))

        if derivative == 0:
            return 0.0

        new_rate = rate - value / derivative
        if new_rate <= -1 or math.isnan(new_rate) or math.isinf(new_rate):
            return 0.0
        if abs(new_rate - rate) < tolerance:
            return new_rate
        rate = new_rate

    return 0.0


def discounted_value(amount: float, rate: float, year: int) -> float:
    """
    Present value of one amount.

    Formula:
        PV = amount / (1 + rate) ** year
    """
    return amount / (1 + rate) ** year


def grown_value(amount: float, growth_rate_percent: float, periods: float) -> float:
    """Value grown by a percentage rate over a number of periods"""
    return amount * (1 + growth_rate_percent / 100) ** periods


def payback_months(investment: float, monthly_net_savings: float) -> float:
    """
    Months to recover an investment.

    Returns 0 without investment and the 999 sentinel when savings never
    cover it.
    """
    if investment <= 0:
        return 0.0
    if monthly_net_savings <= 0:
        return float(PAYBACK_NEVER)
    return investment / monthly_net_savings


def first_or_default(values: List[Optional[float]], default: float) -> float:
    """First non-None value, else ``default``"""
    for value in values:
        if value is not None:
            return value
    return default
