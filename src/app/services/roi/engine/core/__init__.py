"""
Core package for the automation ROI engine.

Contains:
- formula_library: Deterministic conversion and financial formulas
- complexity: Complexity scores, index and risk category
- normalizer: Dataset shape validation and defaults merge
- savings_calculator: Per-process savings and ROI
- roi_aggregator: Portfolio ROI, NPV/IRR, EBITDA and sensitivity
- cashflow_projector: Monthly cost/savings/cumulative series
- cfo_score: Risk-adjusted NPV, effort and quadrant per process
- opportunity_matrix: Matrix bubbles and the starting process
"""

from .formula_library import (
    safe_ratio,
    clamp,
    implementation_months,
    fully_loaded_rate,
    annualize_sla_cost,
    compliance_fine_magnitude,
    risk_multiplier,
    npv,
    irr,
    payback_months,
)
from .complexity import (
    normalize_inputs_score,
    normalize_steps_score,
    normalize_dependencies_score,
    calculate_complexity_index,
    map_complexity_to_risk,
    build_complexity_metrics,
    apply_workflow_counts,
)
from .normalizer import (
    validate_shape,
    normalize_dataset,
    merge_with_defaults,
    merge_process_with_defaults,
    create_default_process,
    default_groups,
)
from .savings_calculator import SavingsCalculator
from .roi_aggregator import calculate_roi, calculate_scenario_roi
from .cashflow_projector import project_cashflow, break_even_month
from .cfo_score import calculate_cfo_score, classify_quadrant
from .opportunity_matrix import build_opportunity_matrix, select_starting_process

__all__ = [
    # Formula library
    "safe_ratio",
    "clamp",
    "implementation_months",
    "fully_loaded_rate",
    "annualize_sla_cost",
    "compliance_fine_magnitude",
    "risk_multiplier",
    "npv",
    "irr",
    "payback_months",
    # Complexity
    "normalize_inputs_score",
    "normalize_steps_score",
    "normalize_dependencies_score",
    "calculate_complexity_index",
    "map_complexity_to_risk",
    "build_complexity_metrics",
    "apply_workflow_counts",
    # Normalizer
    "validate_shape",
    "normalize_dataset",
    "merge_with_defaults",
    "merge_process_with_defaults",
    "create_default_process",
    "default_groups",
    # Calculators
    "SavingsCalculator",
    "calculate_roi",
    "calculate_scenario_roi",
    "project_cashflow",
    "break_even_month",
    "calculate_cfo_score",
    "classify_quadrant",
    "build_opportunity_matrix",
    "select_starting_process",
]
