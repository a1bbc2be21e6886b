"""
ROI Result Models

Derived records produced by the savings calculator, the portfolio
aggregator and the cashflow projector. They are recomputed wholesale on
every accepted recalculation and never mutated afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _r(value: float, digits: int = 2) -> float:
    return round(value, digits)


# ============================================================================
# PER-PROCESS RESULTS
# ============================================================================

@dataclass
class InternalCostSavings:
    """Annual savings on hidden process costs, by category"""
    # Labor & Workforce
    training_onboarding: float = 0.0
    overtime_premiums: float = 0.0
    shadow_systems: float = 0.0

    # IT & Operations
    software_licensing: float = 0.0
    infrastructure: float = 0.0
    it_support: float = 0.0

    # Compliance & Risk
    error_remediation: float = 0.0
    audit_compliance: float = 0.0
    downtime: float = 0.0

    # Opportunity Costs
    decision_delays: float = 0.0
    staff_capacity_drag: float = 0.0
    customer_impact: float = 0.0

    hard_dollar_total: float = 0.0
    soft_dollar_total: float = 0.0

    @property
    def labor_workforce_total(self) -> float:
        return self.training_onboarding + self.overtime_premiums + self.shadow_systems

    @property
    def it_operations_total(self) -> float:
        return self.software_licensing + self.infrastructure + self.it_support

    @property
    def compliance_risk_total(self) -> float:
        return self.error_remediation + self.audit_compliance + self.downtime

    @property
    def opportunity_total(self) -> float:
        return self.decision_delays + self.staff_capacity_drag + self.customer_impact

    @property
    def total(self) -> float:
        return (self.labor_workforce_total + self.it_operations_total
                + self.compliance_risk_total + self.opportunity_total)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trainingOnboarding": _r(self.training_onboarding),
            "overtimePremiums": _r(self.overtime_premiums),
            "shadowSystems": _r(self.shadow_systems),
            "softwareLicensing": _r(self.software_licensing),
            "infrastructure": _r(self.infrastructure),
            "itSupport": _r(self.it_support),
            "errorRemediation": _r(self.error_remediation),
            "auditCompliance": _r(self.audit_compliance),
            "downtime": _r(self.downtime),
            "decisionDelays": _r(self.decision_delays),
            "staffCapacityDrag": _r(self.staff_capacity_drag),
            "customerImpact": _r(self.customer_impact),
            "laborWorkforceTotal": _r(self.labor_workforce_total),
            "itOperationsTotal": _r(self.it_operations_total),
            "complianceRiskTotal": _r(self.compliance_risk_total),
            "opportunityTotal": _r(self.opportunity_total),
            "total": _r(self.total),
            "hardDollarTotal": _r(self.hard_dollar_total),
            "softDollarTotal": _r(self.soft_dollar_total),
        }


@dataclass
class ProcessROIResult:
    """Savings and economics of one process"""
    process_id: str
    process_name: str
    group: str = ""
    selected: bool = True

    # Time
    monthly_time_saved: float = 0.0  # hours
    annual_time_savings: float = 0.0  # hours
    fully_loaded_hourly_rate: float = 0.0

    # Annual savings components
    labor_savings: float = 0.0  # includes the peak season uplift
    peak_season_savings: float = 0.0
    overtime_savings: float = 0.0
    sla_compliance_value: float = 0.0
    error_reduction_savings: float = 0.0
    compliance_risk_reduction: float = 0.0
    revenue_uplift: float = 0.0
    prompt_payment_benefit: float = 0.0
    internal_cost_savings: InternalCostSavings = field(default_factory=InternalCostSavings)
    attrition_savings: float = 0.0  # reported, not part of net savings
    system_integration_costs: float = 0.0
    ftes_freed: float = 0.0

    hard_savings: float = 0.0
    soft_savings: float = 0.0

    # Baseline vs automated cost, annual
    current_process_cost: float = 0.0
    new_process_cost: float = 0.0
    net_cost_reduction: float = 0.0

    annual_net_savings: float = 0.0
    monthly_savings: float = 0.0

    # Investment
    total_investment: float = 0.0  # one-time costs
    software_cost_monthly: float = 0.0
    total_cost: float = 0.0  # one-time + first year of software
    roi_percentage: float = 0.0
    payback_period_months: float = 0.0
    break_even_month: int = 0

    # Timeline
    start_month: int = 1
    implementation_months: int = 0
    savings_start_month: int = 1

    # Costs that remain after automation, annual
    ongoing_training_costs: float = 0.0
    ongoing_overtime_costs: float = 0.0
    ongoing_shadow_systems_costs: float = 0.0
    ongoing_it_support_costs: float = 0.0

    automation_coverage: float = 0.0

    @property
    def total_ongoing_costs(self) -> float:
        return (self.ongoing_training_costs + self.ongoing_overtime_costs
                + self.ongoing_shadow_systems_costs + self.ongoing_it_support_costs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processId": self.process_id,
            "processName": self.process_name,
            "group": self.group,
            "selected": self.selected,
            "monthlyTimeSaved": _r(self.monthly_time_saved),
            "annualTimeSavings": _r(self.annual_time_savings),
            "fullyLoadedHourlyRate": _r(self.fully_loaded_hourly_rate),
            "laborSavings": _r(self.labor_savings),
            "peakSeasonSavings": _r(self.peak_season_savings),
            "overtimeSavings": _r(self.overtime_savings),
            "slaComplianceValue": _r(self.sla_compliance_value),
            "errorReductionSavings": _r(self.error_reduction_savings),
            "complianceRiskReduction": _r(self.compliance_risk_reduction),
            "revenueUplift": _r(self.revenue_uplift),
            "promptPaymentBenefit": _r(self.prompt_payment_benefit),
            "internalCostSavings": self.internal_cost_savings.to_dict(),
            "attritionSavings": _r(self.attrition_savings),
            "systemIntegrationCosts": _r(self.system_integration_costs),
            "ftesFreed": _r(self.ftes_freed),
            "hardSavings": _r(self.hard_savings),
            "softSavings": _r(self.soft_savings),
            "currentProcessCost": _r(self.current_process_cost),
            "newProcessCost": _r(self.new_process_cost),
            "netCostReduction": _r(self.net_cost_reduction),
            "annualNetSavings": _r(self.annual_net_savings),
            "monthlySavings": _r(self.monthly_savings),
            "totalInvestment": _r(self.total_investment),
            "softwareCostMonthly": _r(self.software_cost_monthly),
            "totalCost": _r(self.total_cost),
            "roiPercentage": _r(self.roi_percentage),
            "paybackPeriodMonths": _r(self.payback_period_months),
            "breakEvenMonth": self.break_even_month,
            "startMonth": self.start_month,
            "implementationMonths": self.implementation_months,
            "savingsStartMonth": self.savings_start_month,
            "ongoingCosts": {
                "training": _r(self.ongoing_training_costs),
                "overtime": _r(self.ongoing_overtime_costs),
                "shadowSystems": _r(self.ongoing_shadow_systems_costs),
                "itSupport": _r(self.ongoing_it_support_costs),
                "total": _r(self.total_ongoing_costs),
            },
            "automationCoverage": _r(self.automation_coverage),
        }


# ============================================================================
# CASHFLOW
# ============================================================================

@dataclass
class CashflowPoint:
    """One month of the projected cashflow"""
    month: int
    cost: float = 0.0
    savings: float = 0.0
    net: float = 0.0
    cumulative: float = 0.0
    cumulative_cost: float = 0.0
    cumulative_savings: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "cost": _r(self.cost),
            "savings": _r(self.savings),
            "net": _r(self.net),
            "cumulative": _r(self.cumulative),
            "cumulativeCost": _r(self.cumulative_cost),
            "cumulativeSavings": _r(self.cumulative_savings),
        }


# ============================================================================
# PORTFOLIO RESULTS
# ============================================================================

@dataclass
class SensitivityAnalysis:
    """Portfolio ROI (%) at 80 / 100 / 120 % of each process coverage"""
    conservative: float = 0.0
    likely: float = 0.0
    optimistic: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "conservative": _r(self.conservative),
            "likely": _r(self.likely),
            "optimistic": _r(self.optimistic),
        }


@dataclass
class ROIResults:
    """Aggregate ROI over the selected processes"""
    time_horizon_months: int = 36

    annual_net_savings: float = 0.0
    annual_cost: float = 0.0  # recurring software, annual
    total_investment: float = 0.0  # one-time costs
    total_cost: float = 0.0
    roi: float = 0.0  # %
    payback_period_months: float = 0.0
    npv: float = 0.0
    irr: float = 0.0  # %, annualized

    monthly_savings: float = 0.0
    monthly_time_saved: float = 0.0
    annual_time_savings: float = 0.0
    total_ftes_freed: float = 0.0

    peak_season_savings: float = 0.0
    overtime_savings: float = 0.0
    temp_staff_savings: float = 0.0
    sla_compliance_value: float = 0.0

    total_hard_savings: float = 0.0
    total_soft_savings: float = 0.0
    total_error_reduction_savings: float = 0.0
    total_compliance_risk_reduction: float = 0.0
    total_revenue_uplift: float = 0.0
    total_prompt_payment_benefit: float = 0.0
    total_attrition_savings: float = 0.0
    total_system_integration_costs: float = 0.0
    total_internal_cost_savings: float = 0.0
    total_internal_hard_dollar_savings: float = 0.0
    total_internal_soft_dollar_savings: float = 0.0
    fte_productivity_uplift: float = 0.0

    ebitda_impact: float = 0.0
    ebitda_by_year: Dict[int, float] = field(default_factory=dict)
    implementation_roi: List[float] = field(default_factory=list)  # monthly savings during the ramp

    total_ongoing_training_costs: float = 0.0
    total_ongoing_overtime_costs: float = 0.0
    total_ongoing_shadow_systems_costs: float = 0.0
    total_ongoing_it_support_costs: float = 0.0

    sensitivity_analysis: SensitivityAnalysis = field(default_factory=SensitivityAnalysis)
    process_results: List[ProcessROIResult] = field(default_factory=list)

    @property
    def total_ongoing_costs(self) -> float:
        return (self.total_ongoing_training_costs + self.total_ongoing_overtime_costs
                + self.total_ongoing_shadow_systems_costs + self.total_ongoing_it_support_costs)

    def result_for(self, process_id: str) -> Optional[ProcessROIResult]:
        for result in self.process_results:
            if result.process_id == process_id:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timeHorizonMonths": self.time_horizon_months,
            "annualNetSavings": _r(self.annual_net_savings),
            "annualCost": _r(self.annual_cost),
            "totalInvestment": _r(self.total_investment),
            "totalCost": _r(self.total_cost),
            "roi": _r(self.roi),
            "paybackPeriodMonths": _r(self.payback_period_months),
            "npv": _r(self.npv),
            "irr": _r(self.irr),
            "monthlySavings": _r(self.monthly_savings),
            "monthlyTimeSaved": _r(self.monthly_time_saved),
            "annualTimeSavings": _r(self.annual_time_savings),
            "totalFtesFreed": _r(self.total_ftes_freed),
            "peakSeasonSavings": _r(self.peak_season_savings),
            "overtimeSavings": _r(self.overtime_savings),
            "tempStaffSavings": _r(self.temp_staff_savings),
            "slaComplianceValue": _r(self.sla_compliance_value),
            "totalHardSavings": _r(self.total_hard_savings),
            "totalSoftSavings": _r(self.total_soft_savings),
            "totalErrorReductionSavings": _r(self.total_error_reduction_savings),
            "totalComplianceRiskReduction": _r(self.total_compliance_risk_reduction),
            "totalRevenueUplift": _r(self.total_revenue_uplift),
            "totalPromptPaymentBenefit": _r(self.total_prompt_payment_benefit),
            "totalAttritionSavings": _r(self.total_attrition_savings),
            "totalSystemIntegrationCosts": _r(self.total_system_integration_costs),
            "totalInternalCostSavings": _r(self.total_internal_cost_savings),
            "totalInternalHardDollarSavings": _r(self.total_internal_hard_dollar_savings),
            "totalInternalSoftDollarSavings": _r(self.total_internal_soft_dollar_savings),
            "fteProductivityUplift": _r(self.fte_productivity_uplift),
            "ebitdaImpact": _r(self.ebitda_impact),
            "ebitdaByYear": {str(year): _r(value) for year, value in self.ebitda_by_year.items()},
            "implementationROI": [_r(value) for value in self.implementation_roi],
            "ongoingCosts": {
                "training": _r(self.total_ongoing_training_costs),
                "overtime": _r(self.total_ongoing_overtime_costs),
                "shadowSystems": _r(self.total_ongoing_shadow_systems_costs),
                "itSupport": _r(self.total_ongoing_it_support_costs),
                "total": _r(self.total_ongoing_costs),
            },
            "sensitivityAnalysis": self.sensitivity_analysis.to_dict(),
            "processResults": [result.to_dict() for result in self.process_results],
        }
