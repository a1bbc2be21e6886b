"""
Per-Process Savings Calculator

Computes the annual savings of automating one process:
- Labor time saved (with off-hours, cyclical and seasonal multipliers)
- Overtime premium avoided
- SLA, error/rework and compliance penalties avoided
- Revenue uplift and prompt payment discounts captured
- Hidden internal costs avoided
- Hard/soft split driven by the organization's cost classification
"""

import logging
import math
from typing import Dict, List, Optional

from ..models.classification import CostClassification
from ..models.process import (
    HOURS_PER_YEAR,
    CyclicalType,
    GlobalDefaults,
    Process,
    TaskType,
    TimeOfDay,
)
from ..models.results import InternalCostSavings, ProcessROIResult
from . import formula_library as fl

logger = logging.getLogger(__name__)


class SavingsCalculator:
    """
    Calculator for the savings of a single process.
    All calculations are deterministic and traceable.

    Without a cost classification the calculator refuses to classify and
    returns zero results.
    """

    def __init__(
        self,
        global_defaults: GlobalDefaults,
        cost_classification: Optional[CostClassification]
    ):
        self.global_defaults = global_defaults
        self.cost_classification = cost_classification
        self._warnings: List[str] = []

    @property
    def warnings(self) -> List[str]:
        return self._warnings

    # ========================================================================
    # ENTRY POINT
    # ========================================================================

    def calculate(self, process: Process) -> ProcessROIResult:
        """
        Calculate the savings of one process.

        Args:
            process: Normalized process

        Returns:
            ProcessROIResult, zeroed for unselected processes or when no
            cost classification is available
        """
        if self.cost_classification is None:
            logger.error("Savings calculation blocked: no cost classification", extra={
                "process_id": process.id,
            })
            self._warnings.append(f"{process.name}: no cost classification, savings not calculated")
            return self._zero_result(process)

        if not process.selected:
            return self._zero_result(process)

        costs = process.implementation_costs
        coverage = fl.coverage_fraction(costs.automation_coverage)

        # Standardized units
        monthly_tasks = fl.monthly_task_volume(process.task_volume, process.task_volume_unit)
        task_minutes = fl.minutes_per_task(process.time_per_task, process.time_unit)
        loaded_rate = fl.fully_loaded_rate(process.effective_hourly_wage, self.global_defaults.overhead_costs)

        monthly_time_saved = monthly_tasks * task_minutes * coverage / 60

        # Baseline vs automated cost
        current_monthly_cost = monthly_tasks * task_minutes / 60 * loaded_rate
        current_process_cost = current_monthly_cost * 12
        new_process_cost = current_monthly_cost * (1 - coverage) * 12 + costs.annual_software_cost

        labor_savings, annual_time_savings, peak_season_savings = self._labor_savings(
            process, monthly_time_saved, loaded_rate
        )
        overtime_savings = self._overtime_savings(process, monthly_time_saved, loaded_rate)
        sla_value = self._sla_value(process)
        error_savings = self._error_savings(process, monthly_tasks, current_process_cost, coverage)
        compliance_savings = self._compliance_savings(process, coverage)
        revenue_uplift = self._revenue_uplift(process, coverage)
        prompt_payment = self._prompt_payment_benefit(process, coverage)
        internal = self._internal_cost_savings(process, current_process_cost, coverage)

        remaining_it_hours = costs.it_support_hours_per_month * (1 - coverage)
        ongoing_it_support = remaining_it_hours * 12 * costs.it_hourly_rate
        integration_costs = costs.api_licensing + ongoing_it_support

        ftes_freed = process.fte_count or (annual_time_savings / HOURS_PER_YEAR)
        attrition = self._attrition_savings(process, ftes_freed)

        hard_savings, soft_savings = self._split_hard_soft(
            labor_savings=labor_savings,
            overtime_savings=overtime_savings,
            sla_value=sla_value,
            error_savings=error_savings,
            prompt_payment=prompt_payment,
            revenue_uplift=revenue_uplift,
            compliance_savings=compliance_savings,
            internal=internal,
            integration_costs=integration_costs,
        )

        annual_net_savings = (labor_savings + overtime_savings + sla_value + error_savings
                              + compliance_savings + revenue_uplift + prompt_payment + internal.total)

        # Investment economics
        investment = costs.one_time_costs
        total_cost = investment + costs.annual_software_cost
        monthly_after_software = annual_net_savings / 12 - costs.software_cost
        if monthly_after_software > 0:
            payback = investment / monthly_after_software
        else:
            payback = float(fl.PAYBACK_NEVER)

        impl_months = fl.implementation_months(costs.implementation_weeks)
        roi_percentage = fl.safe_ratio(annual_net_savings - costs.annual_software_cost, total_cost) * 100

        internal_pct = process.internal_costs
        return ProcessROIResult(
            process_id=process.id,
            process_name=process.name,
            group=process.group,
            selected=True,
            monthly_time_saved=monthly_time_saved,
            annual_time_savings=annual_time_savings,
            fully_loaded_hourly_rate=loaded_rate,
            labor_savings=labor_savings,
            peak_season_savings=peak_season_savings,
            overtime_savings=overtime_savings,
            sla_compliance_value=sla_value,
            error_reduction_savings=error_savings,
            compliance_risk_reduction=compliance_savings,
            revenue_uplift=revenue_uplift,
            prompt_payment_benefit=prompt_payment,
            internal_cost_savings=internal,
            attrition_savings=attrition,
            system_integration_costs=integration_costs,
            ftes_freed=ftes_freed,
            hard_savings=hard_savings,
            soft_savings=soft_savings,
            current_process_cost=current_process_cost,
            new_process_cost=new_process_cost,
            net_cost_reduction=current_process_cost - new_process_cost,
            annual_net_savings=annual_net_savings,
            monthly_savings=annual_net_savings / 12,
            total_investment=investment,
            software_cost_monthly=costs.software_cost,
            total_cost=total_cost,
            roi_percentage=roi_percentage,
            payback_period_months=payback,
            break_even_month=costs.start_month + math.ceil(payback),
            start_month=costs.start_month,
            implementation_months=impl_months,
            savings_start_month=costs.start_month + impl_months,
            ongoing_training_costs=current_process_cost * internal_pct.training_onboarding_costs / 100 * (1 - coverage),
            ongoing_overtime_costs=current_process_cost * internal_pct.overtime_premiums / 100 * (1 - coverage),
            ongoing_shadow_systems_costs=current_process_cost * internal_pct.shadow_systems_costs / 100 * (1 - coverage),
            ongoing_it_support_costs=ongoing_it_support,
            automation_coverage=costs.automation_coverage,
        )

    def calculate_all(self, processes: List[Process]) -> List[ProcessROIResult]:
        """Results in input order, one per process"""
        return [self.calculate(p) for p in processes]

    # ========================================================================
    # SAVINGS COMPONENTS
    # ========================================================================

    def _labor_savings(self, process: Process, monthly_time_saved: float, loaded_rate: float):
        """
        Annual labor savings, annual hours saved and the peak season uplift.

        Formula:
            monthly = hours saved * FLR * overtime multiplier * cyclical multiplier
            seasonal: regular months at 1x, peak months at peak multiplier
        """
        overtime_multiplier = process.overtime_multiplier if process.time_of_day == TimeOfDay.OFF_HOURS else 1.0

        cyclical_multiplier = 1.0
        if process.cyclical_pattern.type != CyclicalType.NONE:
            cyclical_multiplier = process.cyclical_pattern.multiplier or 1.5

        base_monthly = monthly_time_saved * loaded_rate * overtime_multiplier * cyclical_multiplier

        if process.task_type != TaskType.SEASONAL:
            return base_monthly * 12, monthly_time_saved * 12, 0.0

        peak_months = min(len(set(process.seasonal_pattern.peak_months)), 12)
        regular_months = 12 - peak_months
        peak_multiplier = process.seasonal_pattern.peak_multiplier

        peak_monthly = base_monthly * peak_multiplier
        annual = regular_months * base_monthly + peak_months * peak_monthly
        annual_hours = (regular_months * monthly_time_saved
                        + peak_months * monthly_time_saved * peak_multiplier)
        peak_uplift = (peak_monthly - base_monthly) * peak_months
        return annual, annual_hours, peak_uplift

    def _overtime_savings(self, process: Process, monthly_time_saved: float, loaded_rate: float) -> float:
        """
        Overtime premium avoided.

        Formula:
            off-hours: hours saved * (overtime rate - FLR) * 12
            hourly peaks outside business hours add the same premium for
            their share of peak hours
        """
        premium = self.global_defaults.overtime_rate - loaded_rate
        savings = 0.0

        if process.time_of_day == TimeOfDay.OFF_HOURS:
            savings = monthly_time_saved * premium * 12

        pattern = process.cyclical_pattern
        if pattern.type == CyclicalType.HOURLY and pattern.peak_hours:
            business_hours = self.global_defaults.business_hours
            after_hours = [
                hour for hour in pattern.peak_hours
                if hour < business_hours.start_hour or hour >= business_hours.end_hour
            ]
            if after_hours:
                ratio = len(after_hours) / len(pattern.peak_hours)
                savings += monthly_time_saved * ratio * premium * 12

        return savings

    def _sla_value(self, process: Process) -> float:
        sla = process.sla_requirements
        if not sla.has_sla:
            return 0.0
        return fl.annualize_sla_cost(sla.cost_of_missing, sla.average_misses_per_month, sla.cost_unit)

    def _error_savings(
        self,
        process: Process,
        monthly_tasks: float,
        current_process_cost: float,
        coverage: float
    ) -> float:
        """
        Error/rework cost avoided.

        Formula:
            annual errors = tasks/month * 12 * error rate
            cost per error = per-task cost * rework % (else legacy fixed cost)
            savings = annual errors * cost per error * coverage
        """
        rework = process.error_rework_costs
        annual_tasks = monthly_tasks * 12
        annual_errors = annual_tasks * rework.error_rate / 100

        if rework.rework_cost_percentage > 0:
            cost_per_error = fl.safe_ratio(current_process_cost, annual_tasks) * rework.rework_cost_percentage / 100
        else:
            cost_per_error = rework.rework_cost_per_error

        return annual_errors * cost_per_error * coverage

    def _compliance_savings(self, process: Process, coverage: float) -> float:
        risk = process.compliance_risk
        if not risk.has_compliance_risk:
            return 0.0

        if risk.fine_type is None:
            return risk.annual_penalty_risk * coverage

        probability = risk.probability_of_occurrence / 100
        return fl.compliance_fine_magnitude(risk) * probability * coverage

    def _revenue_uplift(self, process: Process, coverage: float) -> float:
        revenue = process.revenue_impact
        if not revenue.has_revenue_impact:
            return 0.0
        return revenue.annual_process_revenue * revenue.uplift_percentage_if_100_automated / 100 * coverage

    def _prompt_payment_benefit(self, process: Process, coverage: float) -> float:
        """Early-payment discount captured; needs volume, discount and window all positive"""
        revenue = process.revenue_impact
        if (revenue.prompt_payment_discount_percentage > 0
                and revenue.prompt_payment_window_days > 0
                and revenue.annual_invoice_processing_volume > 0):
            return (revenue.annual_invoice_processing_volume
                    * revenue.prompt_payment_discount_percentage / 100 * coverage)
        return 0.0

    def _internal_cost_savings(
        self,
        process: Process,
        current_process_cost: float,
        coverage: float
    ) -> InternalCostSavings:
        """Each internal cost is a % of the baseline cost, saved in proportion to coverage"""
        pct = process.internal_costs

        def saved(percentage: float) -> float:
            return current_process_cost * percentage / 100 * coverage

        internal = InternalCostSavings(
            training_onboarding=saved(pct.training_onboarding_costs),
            overtime_premiums=saved(pct.overtime_premiums),
            shadow_systems=saved(pct.shadow_systems_costs),
            software_licensing=saved(pct.software_licensing),
            infrastructure=saved(pct.infrastructure_costs),
            it_support=saved(pct.it_support_maintenance),
            error_remediation=saved(pct.error_remediation_costs),
            audit_compliance=saved(pct.audit_compliance_costs),
            downtime=saved(pct.downtime_costs),
            decision_delays=saved(pct.decision_delays),
            staff_capacity_drag=saved(pct.staff_capacity_drag),
            customer_impact=saved(pct.customer_impact_costs),
        )

        savings_map = self._savings_map(internal)
        classification = self.cost_classification
        internal.hard_dollar_total = sum(
            savings_map.get(key, 0.0) for key in classification.hard_costs if savings_map.get(key, 0.0) > 0
        )
        internal.soft_dollar_total = sum(
            savings_map.get(key, 0.0) for key in classification.soft_costs if savings_map.get(key, 0.0) > 0
        )
        return internal

    @staticmethod
    def _savings_map(internal: InternalCostSavings) -> Dict[str, float]:
        """
        Savings per cost attribute. laborCosts, turnoverCosts, apiLicensing
        and slaPenalties are not internal cost categories and map to 0.
        """
        return {
            "laborCosts": 0.0,
            "trainingOnboardingCosts": internal.training_onboarding,
            "overtimePremiums": internal.overtime_premiums,
            "shadowSystemsCosts": internal.shadow_systems,
            "turnoverCosts": 0.0,
            "softwareLicensing": internal.software_licensing,
            "infrastructureCosts": internal.infrastructure,
            "itSupportMaintenance": internal.it_support,
            "apiLicensing": 0.0,
            "errorRemediationCosts": internal.error_remediation,
            "auditComplianceCosts": internal.audit_compliance,
            "downtimeCosts": internal.downtime,
            "decisionDelays": internal.decision_delays,
            "staffCapacityDrag": internal.staff_capacity_drag,
            "customerImpactCosts": internal.customer_impact,
            "slaPenalties": 0.0,
        }

    def _attrition_savings(self, process: Process, ftes_freed: float) -> float:
        """
        Replacement cost avoided for the freed FTEs.

        Formula:
            FTEs freed * turnover % * annual compensation * replacement %
        """
        attrition = self.global_defaults.attrition_costs
        return (ftes_freed * attrition.annual_turnover_rate / 100
                * process.annual_compensation * attrition.cost_to_replace_percentage / 100)

    # ========================================================================
    # HARD / SOFT SPLIT
    # ========================================================================

    def _split_hard_soft(
        self,
        labor_savings: float,
        overtime_savings: float,
        sla_value: float,
        error_savings: float,
        prompt_payment: float,
        revenue_uplift: float,
        compliance_savings: float,
        internal: InternalCostSavings,
        integration_costs: float
    ):
        """
        Split process benefits into hard and soft dollars.

        Revenue uplift and compliance avoidance are always soft; integration
        costs are deducted from hard savings.
        """
        classification = self.cost_classification
        hard = 0.0
        soft = 0.0

        def assign(value: float, is_hard: bool):
            nonlocal hard, soft
            if is_hard:
                hard += value
            else:
                soft += value

        assign(labor_savings, classification.is_hard("laborCosts"))
        assign(overtime_savings, classification.is_hard("overtimePremiums"))
        assign(error_savings, classification.is_hard("errorRemediationCosts"))
        assign(sla_value, classification.is_hard("slaPenalties") or classification.is_hard("customerImpactCosts"))
        assign(prompt_payment, classification.has_hard_costs)

        hard += internal.hard_dollar_total - integration_costs
        soft += revenue_uplift + compliance_savings + internal.soft_dollar_total
        return hard, soft

    # ========================================================================
    # ZERO RESULT
    # ========================================================================

    @staticmethod
    def _zero_result(process: Process) -> ProcessROIResult:
        """Zero savings, identity and timeline kept"""
        costs = process.implementation_costs
        impl_months = fl.implementation_months(costs.implementation_weeks)
        return ProcessROIResult(
            process_id=process.id,
            process_name=process.name,
            group=process.group,
            selected=process.selected,
            start_month=costs.start_month,
            implementation_months=impl_months,
            savings_start_month=costs.start_month + impl_months,
            automation_coverage=costs.automation_coverage,
        )
