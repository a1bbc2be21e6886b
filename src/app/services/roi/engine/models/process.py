"""
Process Data Models

Dataclasses for the automatable processes, their groups and the
organization-wide defaults the ROI engine reads.

All records are parsed from camelCase payloads by the schemas in
``schemas.py``; ``to_dict`` dumps them back through the same schemas so
the wire format has a single definition.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


HOURS_PER_YEAR = 2080  # 52 weeks x 40 hours


# ============================================================================
# ENUMS
# ============================================================================

class TaskVolumeUnit(Enum):
    """Period the task volume is expressed in"""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class TimeUnit(Enum):
    """Unit of the time spent on one task"""
    MINUTES = "minutes"
    HOURS = "hours"


class TaskType(Enum):
    BATCH = "batch"
    REAL_TIME = "real-time"
    SEASONAL = "seasonal"


class TimeOfDay(Enum):
    BUSINESS_HOURS = "business-hours"
    OFF_HOURS = "off-hours"
    ANY = "any"


class CyclicalType(Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    MONTHLY = "monthly"
    NONE = "none"


class SLACostUnit(Enum):
    """Unit the cost of a missed SLA is quoted in"""
    PER_MINUTE = "per-minute"
    PER_HOUR = "per-hour"
    PER_DAY = "per-day"
    PER_WEEK = "per-week"
    PER_MONTH = "per-month"
    PER_YEAR = "per-year"


class FineType(Enum):
    """Compliance fine structure, exactly one is active per process"""
    DAILY = "daily"
    PER_INCIDENT = "per-incident"
    PER_RECORD = "per-record"
    PERCENT_REVENUE = "percent-revenue"


class UtilizationType(Enum):
    """What happens to the FTE capacity freed by automation"""
    REDEPLOYED = "redeployed"
    ELIMINATED = "eliminated"
    MIXED = "mixed"


class RiskCategory(Enum):
    SIMPLE = "Simple"
    MODERATE = "Moderate"
    COMPLEX = "Complex"


class MetricSource(Enum):
    """Whether a complexity count was gathered from the workflow or typed in"""
    AUTO = "auto"
    MANUAL = "manual"


# ============================================================================
# PROCESS SUB-RECORDS
# ============================================================================

@dataclass(frozen=True)
class Metric:
    """
    A complexity count tagged with its origin.

    ``AUTO`` values are replaced whenever the workflow editor reports new
    counts, ``MANUAL`` values are never overwritten.
    """
    value: float = 0.0
    source: MetricSource = MetricSource.AUTO

    @classmethod
    def auto(cls, value: float) -> "Metric":
        return cls(value=value, source=MetricSource.AUTO)

    @classmethod
    def manual(cls, value: float) -> "Metric":
        return cls(value=value, source=MetricSource.MANUAL)

    @property
    def is_manual(self) -> bool:
        return self.source is MetricSource.MANUAL


@dataclass
class ComplexityMetrics:
    """
    Workflow complexity used as a risk proxy.

    Counts are optional: when a count is absent the supplied score is kept.
    Sub-scores live on a 1-10 scale and the index is re-derived by the
    normalizer (see ``core.complexity``).
    """
    inputs: Optional[Metric] = None  # systems, APIs or data sources
    steps: Optional[Metric] = None  # tasks or nodes in the workflow
    dependencies: Optional[Metric] = None  # teams or roles involved

    inputs_score: float = 1.0
    steps_score: float = 1.0
    dependencies_score: float = 1.0

    complexity_index: float = 1.0
    risk_category: RiskCategory = RiskCategory.SIMPLE
    risk_value: int = 2


@dataclass
class SeasonalPattern:
    peak_months: List[int] = field(default_factory=list)  # 1-12
    peak_multiplier: float = 2.0


@dataclass
class CyclicalPattern:
    type: CyclicalType = CyclicalType.NONE
    peak_hours: List[int] = field(default_factory=list)  # 0-23
    peak_days: List[int] = field(default_factory=list)  # 0-6, 0 = Sunday
    peak_dates_of_month: List[int] = field(default_factory=list)  # 1-31
    multiplier: float = 1.5


@dataclass
class SLARequirements:
    has_sla: bool = False
    sla_target: str = ""
    cost_of_missing: float = 0.0
    cost_unit: SLACostUnit = SLACostUnit.PER_MONTH
    average_misses_per_month: float = 0.0


@dataclass
class ErrorReworkCosts:
    error_rate: float = 0.0  # % of tasks needing rework
    rework_cost_per_error: float = 0.0  # legacy fixed cost per error
    rework_cost_percentage: float = 0.0  # % of the per-task labor cost


@dataclass
class ComplianceRisk:
    has_compliance_risk: bool = False
    annual_penalty_risk: float = 0.0  # legacy flat annual exposure
    fine_type: Optional[FineType] = None

    amount_per_day: float = 0.0
    expected_duration_days: float = 0.0
    amount_per_incident: float = 0.0
    expected_incidents_per_year: float = 0.0
    amount_per_record: float = 0.0
    records_at_risk: float = 0.0
    percentage_rate: float = 0.0
    revenue_at_risk: float = 0.0

    probability_of_occurrence: float = 100.0  # %


@dataclass
class RevenueImpact:
    has_revenue_impact: bool = False
    revenue_types: List[str] = field(default_factory=list)
    annual_process_revenue: float = 0.0
    uplift_percentage_if_100_automated: float = 0.0

    # Early-payment discount capture (accounts payable)
    annual_invoice_processing_volume: float = 0.0
    prompt_payment_discount_percentage: float = 0.0
    prompt_payment_window_days: float = 0.0


@dataclass
class InternalCosts:
    """Hidden process costs, each a % of the baseline process cost"""
    # Labor & Workforce
    training_onboarding_costs: float = 0.0
    overtime_premiums: float = 0.0
    shadow_systems_costs: float = 0.0

    # IT & Operations
    software_licensing: float = 0.0
    infrastructure_costs: float = 0.0
    it_support_maintenance: float = 0.0

    # Compliance & Risk
    error_remediation_costs: float = 0.0
    audit_compliance_costs: float = 0.0
    downtime_costs: float = 0.0

    # Opportunity Costs
    decision_delays: float = 0.0
    staff_capacity_drag: float = 0.0
    customer_impact_costs: float = 0.0


@dataclass
class UtilizationImpact:
    utilization_type: UtilizationType = UtilizationType.REDEPLOYED
    redeployment_value_percentage: float = 100.0


@dataclass
class ImplementationCosts:
    """
    Implementation economics of one process.

    ``implementation_weeks`` is carried on the wire as
    ``implementationTimelineMonths`` even though it holds weeks.
    """
    software_cost: float = 0.0  # per month
    automation_coverage: float = 80.0  # % of tasks automated
    implementation_weeks: float = 3.0
    upfront_costs: float = 0.0
    training_costs: float = 0.0
    consulting_costs: float = 0.0
    start_month: int = 1

    # System integration
    api_licensing: float = 0.0  # per year
    it_support_hours_per_month: float = 0.0
    it_hourly_rate: float = 0.0

    # Project control inputs for the CFO score
    budget: Optional[float] = None
    eac: Optional[float] = None  # estimate at completion
    emv: Optional[float] = None  # expected monetary value of risk

    @property
    def one_time_costs(self) -> float:
        """Upfront + training + consulting"""
        return self.upfront_costs + self.training_costs + self.consulting_costs

    @property
    def annual_software_cost(self) -> float:
        return self.software_cost * 12


# ============================================================================
# PROCESS / GROUP
# ============================================================================

@dataclass
class Process:
    """One automatable unit of work"""
    id: str
    name: str
    group: str = ""
    selected: bool = True

    # Staffing
    average_hourly_wage: Optional[float] = None
    salary_mode: bool = False
    annual_salary: Optional[float] = None
    fte_count: float = 1.0

    # Volume and duration
    task_volume: float = 0.0
    task_volume_unit: TaskVolumeUnit = TaskVolumeUnit.MONTH
    time_per_task: float = 0.0
    time_unit: TimeUnit = TimeUnit.MINUTES

    # Behaviour
    task_type: TaskType = TaskType.REAL_TIME
    time_of_day: TimeOfDay = TimeOfDay.BUSINESS_HOURS
    overtime_multiplier: float = 1.5

    seasonal_pattern: SeasonalPattern = field(default_factory=SeasonalPattern)
    cyclical_pattern: CyclicalPattern = field(default_factory=CyclicalPattern)
    sla_requirements: SLARequirements = field(default_factory=SLARequirements)
    implementation_costs: ImplementationCosts = field(default_factory=ImplementationCosts)
    error_rework_costs: ErrorReworkCosts = field(default_factory=ErrorReworkCosts)
    compliance_risk: ComplianceRisk = field(default_factory=ComplianceRisk)
    revenue_impact: RevenueImpact = field(default_factory=RevenueImpact)
    internal_costs: InternalCosts = field(default_factory=InternalCosts)
    utilization_impact: UtilizationImpact = field(default_factory=UtilizationImpact)
    complexity_metrics: ComplexityMetrics = field(default_factory=ComplexityMetrics)

    workflow_id: Optional[str] = None

    @property
    def effective_hourly_wage(self) -> float:
        """Hourly wage, derived from the annual salary in salary mode"""
        if self.salary_mode:
            return (self.annual_salary or 0.0) / HOURS_PER_YEAR
        return self.average_hourly_wage or 0.0

    @property
    def annual_compensation(self) -> float:
        if self.salary_mode:
            return self.annual_salary or 0.0
        return (self.average_hourly_wage or 0.0) * HOURS_PER_YEAR

    def with_coverage(self, coverage: float) -> "Process":
        """Copy of this process with a different automation coverage"""
        return replace(
            self,
            implementation_costs=replace(self.implementation_costs, automation_coverage=coverage),
        )

    def to_dict(self) -> Dict[str, Any]:
        from .schemas import ProcessSchema
        return ProcessSchema().dump(self)


@dataclass
class ProcessGroup:
    """
    Group of processes. Its wage is only a fallback applied at
    normalization time; there is no live inheritance.
    """
    id: str
    name: str
    description: Optional[str] = None
    average_hourly_wage: Optional[float] = None
    annual_salary: Optional[float] = None
    engine: Optional[str] = None  # Value Creation, Marketing and Sales, Value Delivery, Finance

    def to_dict(self) -> Dict[str, Any]:
        from .schemas import ProcessGroupSchema
        return ProcessGroupSchema().dump(self)


# ============================================================================
# GLOBAL DEFAULTS
# ============================================================================

@dataclass
class OverheadCosts:
    """Overhead on top of wages, all % of salary"""
    benefits: float = 20.0
    payroll_taxes: float = 8.0
    paid_time_off: float = 5.0
    training_onboarding: float = 2.0
    overhead_ga: float = 5.0

    @property
    def total_percentage(self) -> float:
        return (self.benefits + self.payroll_taxes + self.paid_time_off
                + self.training_onboarding + self.overhead_ga)


@dataclass
class BusinessHours:
    start: str = "09:00"
    end: str = "17:00"
    timezone: str = "America/New_York"

    @property
    def start_hour(self) -> int:
        return int(self.start.split(":")[0])

    @property
    def end_hour(self) -> int:
        return int(self.end.split(":")[0])


@dataclass
class AttritionCosts:
    annual_turnover_rate: float = 15.0  # %
    cost_to_replace_percentage: float = 60.0  # % of annual compensation


@dataclass
class FinancialAssumptions:
    """Rates are percentages except ``risk_premium_factor`` (decimal)"""
    discount_rate: float = 10.0
    inflation_rate: float = 3.0
    years_to_project: int = 5
    tax_rate: float = 25.0
    risk_premium_factor: Optional[float] = 0.03
    global_risk_factor: Optional[float] = None  # 0-10, overrides complexity when set


@dataclass
class EffortAnchors:
    """Absolute effort benchmarks, independent of the portfolio"""
    cost_target: float = 100000.0  # USD
    time_target: float = 6.0  # months


@dataclass
class GlobalDefaults:
    average_hourly_wage: float = 20.0
    salary_mode: bool = False
    annual_salary: float = 41600.0
    overhead_costs: OverheadCosts = field(default_factory=OverheadCosts)
    overtime_rate: float = 60.0
    temp_staff_cost_per_hour: float = 60.0
    business_hours: BusinessHours = field(default_factory=BusinessHours)
    attrition_costs: AttritionCosts = field(default_factory=AttritionCosts)
    financial_assumptions: FinancialAssumptions = field(default_factory=FinancialAssumptions)
    effort_anchors: EffortAnchors = field(default_factory=EffortAnchors)

    def to_dict(self) -> Dict[str, Any]:
        from .schemas import GlobalDefaultsSchema
        return GlobalDefaultsSchema().dump(self)


# ============================================================================
# DATASET
# ============================================================================

@dataclass
class NormalizedDataset:
    """Canonical engine input: groups, processes and global defaults"""
    groups: List[ProcessGroup] = field(default_factory=list)
    processes: List[Process] = field(default_factory=list)
    global_defaults: GlobalDefaults = field(default_factory=GlobalDefaults)

    @property
    def selected_processes(self) -> List[Process]:
        return [p for p in self.processes if p.selected]

    def find_group(self, name_or_id: str) -> Optional[ProcessGroup]:
        """Look a group up by name, falling back to id"""
        if not name_or_id:
            return None
        for group in self.groups:
            if group.name == name_or_id:
                return group
        for group in self.groups:
            if group.id == name_or_id:
                return group
        return None

    def with_processes(self, processes: List[Process]) -> "NormalizedDataset":
        return replace(self, processes=list(processes))

    def filter_by_group(self, group: Optional[str]) -> "NormalizedDataset":
        """Dataset restricted to one group; ``None`` or "all" keeps every process"""
        if not group or group == "all":
            return self
        return self.with_processes([p for p in self.processes if p.group == group])

    def to_dict(self) -> Dict[str, Any]:
        from .schemas import DatasetSchema
        return DatasetSchema().dump(self)
