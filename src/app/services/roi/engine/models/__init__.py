"""
Models package for the automation ROI engine.

Contains dataclasses for:
- Process: Processes, groups, global defaults and the normalized dataset
- Classification: Hard/soft cost classification per organization
- Results: Per-process and portfolio ROI results, cashflow points
- Scoring: CFO score inputs/results and the opportunity matrix
"""

from .process import (
    HOURS_PER_YEAR,
    TaskVolumeUnit,
    TimeUnit,
    TaskType,
    TimeOfDay,
    CyclicalType,
    SLACostUnit,
    FineType,
    UtilizationType,
    RiskCategory,
    MetricSource,
    Metric,
    ComplexityMetrics,
    SeasonalPattern,
    CyclicalPattern,
    SLARequirements,
    ErrorReworkCosts,
    ComplianceRisk,
    RevenueImpact,
    InternalCosts,
    UtilizationImpact,
    ImplementationCosts,
    Process,
    ProcessGroup,
    OverheadCosts,
    BusinessHours,
    AttritionCosts,
    FinancialAssumptions,
    EffortAnchors,
    GlobalDefaults,
    NormalizedDataset,
)
from .classification import (
    COST_ATTRIBUTES,
    CostClassification,
)
from .results import (
    InternalCostSavings,
    ProcessROIResult,
    CashflowPoint,
    SensitivityAnalysis,
    ROIResults,
)
from .scoring import (
    Quadrant,
    CFOScoreInput,
    CFOScoreResult,
    MatrixProcess,
    OpportunityMatrix,
)

__all__ = [
    # Process
    "HOURS_PER_YEAR",
    "TaskVolumeUnit",
    "TimeUnit",
    "TaskType",
    "TimeOfDay",
    "CyclicalType",
    "SLACostUnit",
    "FineType",
    "UtilizationType",
    "RiskCategory",
    "MetricSource",
    "Metric",
    "ComplexityMetrics",
    "SeasonalPattern",
    "CyclicalPattern",
    "SLARequirements",
    "ErrorReworkCosts",
    "ComplianceRisk",
    "RevenueImpact",
    "InternalCosts",
    "UtilizationImpact",
    "ImplementationCosts",
    "Process",
    "ProcessGroup",
    "OverheadCosts",
    "BusinessHours",
    "AttritionCosts",
    "FinancialAssumptions",
    "EffortAnchors",
    "GlobalDefaults",
    "NormalizedDataset",
    # Classification
    "COST_ATTRIBUTES",
    "CostClassification",
    # Results
    "InternalCostSavings",
    "ProcessROIResult",
    "CashflowPoint",
    "SensitivityAnalysis",
    "ROIResults",
    # Scoring
    "Quadrant",
    "CFOScoreInput",
    "CFOScoreResult",
    "MatrixProcess",
    "OpportunityMatrix",
]
