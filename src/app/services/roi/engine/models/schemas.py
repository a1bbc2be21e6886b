"""
Marshmallow schemas for the ROI engine input records.

The schemas are the single definition of the camelCase wire format: they
parse storage and API payloads into the dataclasses of ``process.py`` and
dump those dataclasses back. Absent sub-records load as fully populated
defaults.
"""

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, pre_load, validate, validates_schema

from .process import (
    AttritionCosts,
    BusinessHours,
    ComplexityMetrics,
    ComplianceRisk,
    CyclicalPattern,
    CyclicalType,
    EffortAnchors,
    ErrorReworkCosts,
    FinancialAssumptions,
    FineType,
    GlobalDefaults,
    ImplementationCosts,
    InternalCosts,
    Metric,
    MetricSource,
    NormalizedDataset,
    OverheadCosts,
    Process,
    ProcessGroup,
    RevenueImpact,
    RiskCategory,
    SLACostUnit,
    SLARequirements,
    SeasonalPattern,
    TaskType,
    TaskVolumeUnit,
    TimeOfDay,
    TimeUnit,
    UtilizationImpact,
    UtilizationType,
)


PERCENT = validate.Range(min=0, max=100, error="Must be between 0 and 100")


class Identifier(fields.Field):
    """Identifier given either as a string or a number, always loaded as str"""

    default_error_messages = {"invalid": "Not a valid identifier."}

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise self.make_error("invalid")
        return str(value)

    def _serialize(self, value, attr, obj, **kwargs):
        return value


class EngineSchema(Schema):
    """
    Base schema for engine records.

    Unknown keys are ignored and explicit nulls on non-nullable fields fall
    back to the field default.
    """

    __model__ = None

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def drop_nulls(self, data, **kwargs):
        if not isinstance(data, dict):
            return data

        cleaned = dict(data)
        for name, field_obj in self.load_fields.items():
            key = field_obj.data_key or name
            if key in cleaned and cleaned[key] is None and not field_obj.allow_none:
                del cleaned[key]
        return cleaned

    @post_load
    def make_model(self, data, **kwargs):
        if self.__model__ is None:
            return data
        return self.__model__(**data)


# --------------------------------------------------------------------------
# Process Sub-Record Schemas
# --------------------------------------------------------------------------

class MetricSchema(EngineSchema):
    __model__ = Metric

    value = fields.Float(load_default=0.0)
    source = fields.Enum(MetricSource, by_value=True, load_default=MetricSource.AUTO)


class ComplexityMetricsSchema(EngineSchema):
    """Complexity counts and derived scores"""
    __model__ = ComplexityMetrics

    inputs = fields.Nested(MetricSchema, allow_none=True, load_default=None)
    steps = fields.Nested(MetricSchema, allow_none=True, load_default=None)
    dependencies = fields.Nested(MetricSchema, allow_none=True, load_default=None)

    inputs_score = fields.Float(data_key="inputsScore", load_default=1.0)
    steps_score = fields.Float(data_key="stepsScore", load_default=1.0)
    dependencies_score = fields.Float(data_key="dependenciesScore", load_default=1.0)

    complexity_index = fields.Float(data_key="complexityIndex", load_default=1.0)
    risk_category = fields.Enum(RiskCategory, by_value=True, data_key="riskCategory",
                                load_default=RiskCategory.SIMPLE)
    risk_value = fields.Int(data_key="riskValue", load_default=2)

    @pre_load
    def upgrade_count_fields(self, data, **kwargs):
        """Accept the flat ``inputsCount`` + ``manualInputsOverride`` layout"""
        if not isinstance(data, dict):
            return data

        upgraded = dict(data)
        for name, override_flag in (("inputs", "manualInputsOverride"),
                                    ("steps", "manualStepsOverride"),
                                    ("dependencies", "manualDependenciesOverride")):
            count = upgraded.pop(f"{name}Count", None)
            manual = upgraded.pop(override_flag, False)
            if name not in upgraded and count is not None:
                upgraded[name] = {
                    "value": count,
                    "source": MetricSource.MANUAL.value if manual else MetricSource.AUTO.value,
                }
        return upgraded


class SeasonalPatternSchema(EngineSchema):
    __model__ = SeasonalPattern

    peak_months = fields.List(fields.Int(validate=validate.Range(min=1, max=12)),
                              data_key="peakMonths", load_default=list,
                              validate=validate.Length(max=12))
    peak_multiplier = fields.Float(data_key="peakMultiplier", load_default=2.0)

    @validates_schema
    def validate_unique_peak_months(self, data, **kwargs):
        """A month can be a peak month only once"""
        months = data.get("peak_months") or []
        if len(set(months)) != len(months):
            raise ValidationError("Peak months must not repeat", field_name="peakMonths")


class CyclicalPatternSchema(EngineSchema):
    __model__ = CyclicalPattern

    type = fields.Enum(CyclicalType, by_value=True, load_default=CyclicalType.NONE)
    peak_hours = fields.List(fields.Int(validate=validate.Range(min=0, max=23)),
                             data_key="peakHours", load_default=list)
    peak_days = fields.List(fields.Int(validate=validate.Range(min=0, max=6)),
                            data_key="peakDays", load_default=list)
    peak_dates_of_month = fields.List(fields.Int(validate=validate.Range(min=1, max=31)),
                                      data_key="peakDatesOfMonth", load_default=list)
    multiplier = fields.Float(load_default=1.5)


class SLARequirementsSchema(EngineSchema):
    __model__ = SLARequirements

    has_sla = fields.Bool(data_key="hasSLA", load_default=False)
    sla_target = fields.Str(data_key="slaTarget", load_default="")
    cost_of_missing = fields.Float(data_key="costOfMissing", load_default=0.0)
    cost_unit = fields.Enum(SLACostUnit, by_value=True, data_key="costUnit",
                            load_default=SLACostUnit.PER_MONTH)
    average_misses_per_month = fields.Float(data_key="averageMissesPerMonth", load_default=0.0)


class ErrorReworkCostsSchema(EngineSchema):
    __model__ = ErrorReworkCosts

    error_rate = fields.Float(data_key="errorRate", validate=PERCENT, load_default=0.0)
    rework_cost_per_error = fields.Float(data_key="reworkCostPerError", load_default=0.0)
    rework_cost_percentage = fields.Float(data_key="reworkCostPercentage", load_default=0.0)


class ComplianceRiskSchema(EngineSchema):
    __model__ = ComplianceRisk

    has_compliance_risk = fields.Bool(data_key="hasComplianceRisk", load_default=False)
    annual_penalty_risk = fields.Float(data_key="annualPenaltyRisk", load_default=0.0)
    fine_type = fields.Enum(FineType, by_value=True, data_key="fineType",
                            allow_none=True, load_default=None)
    amount_per_day = fields.Float(data_key="amountPerDay", load_default=0.0)
    expected_duration_days = fields.Float(data_key="expectedDurationDays", load_default=0.0)
    amount_per_incident = fields.Float(data_key="amountPerIncident", load_default=0.0)
    expected_incidents_per_year = fields.Float(data_key="expectedIncidentsPerYear", load_default=0.0)
    amount_per_record = fields.Float(data_key="amountPerRecord", load_default=0.0)
    records_at_risk = fields.Float(data_key="recordsAtRisk", load_default=0.0)
    percentage_rate = fields.Float(data_key="percentageRate", load_default=0.0)
    revenue_at_risk = fields.Float(data_key="revenueAtRisk", load_default=0.0)
    probability_of_occurrence = fields.Float(data_key="probabilityOfOccurrence",
                                             validate=PERCENT, load_default=100.0)


class RevenueImpactSchema(EngineSchema):
    __model__ = RevenueImpact

    has_revenue_impact = fields.Bool(data_key="hasRevenueImpact", load_default=False)
    revenue_types = fields.List(fields.Str(), data_key="revenueTypes", load_default=list)
    annual_process_revenue = fields.Float(data_key="annualProcessRevenue", load_default=0.0)
    uplift_percentage_if_100_automated = fields.Float(data_key="upliftPercentageIf100Automated",
                                                      load_default=0.0)
    annual_invoice_processing_volume = fields.Float(data_key="annualInvoiceProcessingVolume",
                                                    load_default=0.0)
    prompt_payment_discount_percentage = fields.Float(data_key="promptPaymentDiscountPercentage",
                                                      load_default=0.0)
    prompt_payment_window_days = fields.Float(data_key="promptPaymentWindowDays", load_default=0.0)


class InternalCostsSchema(EngineSchema):
    __model__ = InternalCosts

    training_onboarding_costs = fields.Float(data_key="trainingOnboardingCosts", load_default=0.0)
    overtime_premiums = fields.Float(data_key="overtimePremiums", load_default=0.0)
    shadow_systems_costs = fields.Float(data_key="shadowSystemsCosts", load_default=0.0)
    software_licensing = fields.Float(data_key="softwareLicensing", load_default=0.0)
    infrastructure_costs = fields.Float(data_key="infrastructureCosts", load_default=0.0)
    it_support_maintenance = fields.Float(data_key="itSupportMaintenance", load_default=0.0)
    error_remediation_costs = fields.Float(data_key="errorRemediationCosts", load_default=0.0)
    audit_compliance_costs = fields.Float(data_key="auditComplianceCosts", load_default=0.0)
    downtime_costs = fields.Float(data_key="downtimeCosts", load_default=0.0)
    decision_delays = fields.Float(data_key="decisionDelays", load_default=0.0)
    staff_capacity_drag = fields.Float(data_key="staffCapacityDrag", load_default=0.0)
    customer_impact_costs = fields.Float(data_key="customerImpactCosts", load_default=0.0)


class UtilizationImpactSchema(EngineSchema):
    __model__ = UtilizationImpact

    utilization_type = fields.Enum(UtilizationType, by_value=True, data_key="utilizationType",
                                   load_default=UtilizationType.REDEPLOYED)
    redeployment_value_percentage = fields.Float(data_key="redeploymentValuePercentage",
                                                 validate=PERCENT, load_default=100.0)


class ImplementationCostsSchema(EngineSchema):
    __model__ = ImplementationCosts

    software_cost = fields.Float(data_key="softwareCost", load_default=0.0)
    automation_coverage = fields.Float(data_key="automationCoverage", validate=PERCENT,
                                       load_default=80.0)
    implementation_weeks = fields.Float(data_key="implementationTimelineMonths",
                                        validate=validate.Range(min=0), load_default=3.0)
    upfront_costs = fields.Float(data_key="upfrontCosts", load_default=0.0)
    training_costs = fields.Float(data_key="trainingCosts", load_default=0.0)
    consulting_costs = fields.Float(data_key="consultingCosts", load_default=0.0)
    start_month = fields.Int(data_key="startMonth", validate=validate.Range(min=1), load_default=1)
    api_licensing = fields.Float(data_key="apiLicensing", load_default=0.0)
    it_support_hours_per_month = fields.Float(data_key="itSupportHoursPerMonth", load_default=0.0)
    it_hourly_rate = fields.Float(data_key="itHourlyRate", load_default=0.0)
    budget = fields.Float(allow_none=True, load_default=None)
    eac = fields.Float(allow_none=True, load_default=None)
    emv = fields.Float(allow_none=True, load_default=None)

    @pre_load
    def accept_weeks_alias(self, data, **kwargs):
        if isinstance(data, dict) and data.get("implementationWeeks") is not None \
                and "implementationTimelineMonths" not in data:
            data = dict(data)
            data["implementationTimelineMonths"] = data.pop("implementationWeeks")
        return data


# --------------------------------------------------------------------------
# Process / Group Schemas
# --------------------------------------------------------------------------

class ProcessSchema(EngineSchema):
    """Schema for one automatable process"""
    __model__ = Process

    id = Identifier(required=True)
    name = fields.Str(load_default="")
    group = fields.Str(load_default="")
    selected = fields.Bool(load_default=True)

    average_hourly_wage = fields.Float(data_key="averageHourlyWage", allow_none=True, load_default=None)
    salary_mode = fields.Bool(data_key="salaryMode", load_default=False)
    annual_salary = fields.Float(data_key="annualSalary", allow_none=True, load_default=None)
    fte_count = fields.Float(data_key="fteCount", load_default=1.0)

    task_volume = fields.Float(data_key="taskVolume", validate=validate.Range(min=0), load_default=0.0)
    task_volume_unit = fields.Enum(TaskVolumeUnit, by_value=True, data_key="taskVolumeUnit",
                                   load_default=TaskVolumeUnit.MONTH)
    time_per_task = fields.Float(data_key="timePerTask", validate=validate.Range(min=0), load_default=0.0)
    time_unit = fields.Enum(TimeUnit, by_value=True, data_key="timeUnit", load_default=TimeUnit.MINUTES)

    task_type = fields.Enum(TaskType, by_value=True, data_key="taskType", load_default=TaskType.REAL_TIME)
    time_of_day = fields.Enum(TimeOfDay, by_value=True, data_key="timeOfDay",
                              load_default=TimeOfDay.BUSINESS_HOURS)
    overtime_multiplier = fields.Float(data_key="overtimeMultiplier", load_default=1.5)

    seasonal_pattern = fields.Nested(SeasonalPatternSchema, data_key="seasonalPattern",
                                     load_default=SeasonalPattern)
    cyclical_pattern = fields.Nested(CyclicalPatternSchema, data_key="cyclicalPattern",
                                     load_default=CyclicalPattern)
    sla_requirements = fields.Nested(SLARequirementsSchema, data_key="slaRequirements",
                                     load_default=SLARequirements)
    implementation_costs = fields.Nested(ImplementationCostsSchema, data_key="implementationCosts",
                                         load_default=ImplementationCosts)
    error_rework_costs = fields.Nested(ErrorReworkCostsSchema, data_key="errorReworkCosts",
                                       load_default=ErrorReworkCosts)
    compliance_risk = fields.Nested(ComplianceRiskSchema, data_key="complianceRisk",
                                    load_default=ComplianceRisk)
    revenue_impact = fields.Nested(RevenueImpactSchema, data_key="revenueImpact",
                                   load_default=RevenueImpact)
    internal_costs = fields.Nested(InternalCostsSchema, data_key="internalCosts",
                                   load_default=InternalCosts)
    utilization_impact = fields.Nested(UtilizationImpactSchema, data_key="utilizationImpact",
                                       load_default=UtilizationImpact)
    complexity_metrics = fields.Nested(ComplexityMetricsSchema, data_key="complexityMetrics",
                                       load_default=ComplexityMetrics)

    workflow_id = fields.Str(data_key="workflowId", allow_none=True, load_default=None)


class ProcessGroupSchema(EngineSchema):
    __model__ = ProcessGroup

    id = Identifier(required=True)
    name = fields.Str(load_default="")
    description = fields.Str(allow_none=True, load_default=None)
    average_hourly_wage = fields.Float(data_key="averageHourlyWage", allow_none=True, load_default=None)
    annual_salary = fields.Float(data_key="annualSalary", allow_none=True, load_default=None)
    engine = fields.Str(allow_none=True, load_default=None)


# --------------------------------------------------------------------------
# Global Defaults Schemas
# --------------------------------------------------------------------------

class OverheadCostsSchema(EngineSchema):
    __model__ = OverheadCosts

    benefits = fields.Float(load_default=20.0)
    payroll_taxes = fields.Float(data_key="payrollTaxes", load_default=8.0)
    paid_time_off = fields.Float(data_key="paidTimeOff", load_default=5.0)
    training_onboarding = fields.Float(data_key="trainingOnboarding", load_default=2.0)
    overhead_ga = fields.Float(data_key="overheadGA", load_default=5.0)


class BusinessHoursSchema(EngineSchema):
    __model__ = BusinessHours

    start = fields.Str(validate=validate.Regexp(r"^\d{1,2}:\d{2}$"), load_default="09:00")
    end = fields.Str(validate=validate.Regexp(r"^\d{1,2}:\d{2}$"), load_default="17:00")
    timezone = fields.Str(load_default="America/New_York")


class AttritionCostsSchema(EngineSchema):
    __model__ = AttritionCosts

    annual_turnover_rate = fields.Float(data_key="annualTurnoverRate", load_default=15.0)
    cost_to_replace_percentage = fields.Float(data_key="costToReplacePercentage", load_default=60.0)


class FinancialAssumptionsSchema(EngineSchema):
    __model__ = FinancialAssumptions

    discount_rate = fields.Float(data_key="discountRate", load_default=10.0)
    inflation_rate = fields.Float(data_key="inflationRate", load_default=3.0)
    years_to_project = fields.Int(data_key="yearsToProject", validate=validate.Range(min=1),
                                  load_default=5)
    tax_rate = fields.Float(data_key="taxRate", validate=PERCENT, load_default=25.0)
    risk_premium_factor = fields.Float(data_key="riskPremiumFactor", allow_none=True, load_default=0.03)
    global_risk_factor = fields.Float(data_key="globalRiskFactor", allow_none=True, load_default=None,
                                      validate=validate.Range(min=0, max=10))


class EffortAnchorsSchema(EngineSchema):
    __model__ = EffortAnchors

    cost_target = fields.Float(data_key="costTarget", load_default=100000.0)
    time_target = fields.Float(data_key="timeTarget", load_default=6.0)


class GlobalDefaultsSchema(EngineSchema):
    __model__ = GlobalDefaults

    average_hourly_wage = fields.Float(data_key="averageHourlyWage", load_default=20.0)
    salary_mode = fields.Bool(data_key="salaryMode", load_default=False)
    annual_salary = fields.Float(data_key="annualSalary", load_default=41600.0)
    overhead_costs = fields.Nested(OverheadCostsSchema, data_key="overheadCosts",
                                   load_default=OverheadCosts)
    overtime_rate = fields.Float(data_key="overtimeRate", load_default=60.0)
    temp_staff_cost_per_hour = fields.Float(data_key="tempStaffCostPerHour", load_default=60.0)
    business_hours = fields.Nested(BusinessHoursSchema, data_key="businessHours",
                                   load_default=BusinessHours)
    attrition_costs = fields.Nested(AttritionCostsSchema, data_key="attritionCosts",
                                    load_default=AttritionCosts)
    financial_assumptions = fields.Nested(FinancialAssumptionsSchema, data_key="financialAssumptions",
                                          load_default=FinancialAssumptions)
    effort_anchors = fields.Nested(EffortAnchorsSchema, data_key="effortAnchors",
                                   load_default=EffortAnchors)


# --------------------------------------------------------------------------
# Dataset Schema
# --------------------------------------------------------------------------

class DatasetSchema(EngineSchema):
    """Whole engine input; the normalizer checks the collection shapes first"""
    __model__ = NormalizedDataset

    groups = fields.List(fields.Nested(ProcessGroupSchema), required=True)
    processes = fields.List(fields.Nested(ProcessSchema), required=True)
    global_defaults = fields.Nested(GlobalDefaultsSchema, data_key="globalDefaults",
                                    load_default=GlobalDefaults)


# --------------------------------------------------------------------------
# Schema Instances
# --------------------------------------------------------------------------

dataset_schema = DatasetSchema()
process_schema = ProcessSchema()
global_defaults_schema = GlobalDefaultsSchema()
