"""
Input Normalizer

Validates the shape of a raw organization dataset and fills every process
with fully populated defaults so the calculators never see a missing
sub-record.

A collection that is not a list is a hard ``ShapeError``; it is never
coerced into an empty list.
"""

import logging
from dataclasses import replace
from typing import Any, List, Mapping, Optional

from marshmallow import ValidationError

from src.common.exceptions import ShapeError
from ..models.process import (
    ComplexityMetrics,
    ComplianceRisk,
    CyclicalPattern,
    ErrorReworkCosts,
    GlobalDefaults,
    ImplementationCosts,
    InternalCosts,
    NormalizedDataset,
    Process,
    ProcessGroup,
    RevenueImpact,
    SLARequirements,
    SeasonalPattern,
    UtilizationImpact,
)
from ..models.schemas import dataset_schema
from .complexity import derive_complexity

logger = logging.getLogger(__name__)


COLLECTION_FIELDS = ("groups", "processes")


# ============================================================================
# SHAPE VALIDATION
# ============================================================================

def _type_label(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def validate_shape(raw: Any) -> None:
    """
    Check that ``raw`` is a mapping whose ``groups`` and ``processes`` are lists.

    Raises:
        ShapeError: naming the offending field
    """
    if not isinstance(raw, Mapping):
        raise ShapeError(
            f"Dataset must be an object, got {_type_label(raw)}",
            field="dataset"
        )

    for field_name in COLLECTION_FIELDS:
        if field_name not in raw:
            raise ShapeError(f"Dataset is missing '{field_name}'", field=field_name)

        value = raw[field_name]
        if not isinstance(value, list):
            raise ShapeError(
                f"'{field_name}' must be a list, got {_type_label(value)}",
                field=field_name
            )


def normalize_dataset(raw: Any) -> NormalizedDataset:
    """
    Parse and normalize a raw dataset.

    Args:
        raw: Mapping with ``groups``, ``processes`` and optional ``globalDefaults``

    Returns:
        NormalizedDataset with every process fully populated

    Raises:
        ShapeError: when a collection is missing or not a list, or when a
            record inside it is malformed
    """
    if isinstance(raw, NormalizedDataset):
        return merge_with_defaults(raw)

    validate_shape(raw)

    try:
        dataset = dataset_schema.load(raw)
    except ValidationError as e:
        messages = e.messages
        field_name = next(iter(messages), None) if isinstance(messages, dict) else None
        logger.warning("Dataset records failed validation", extra={"validation_errors": messages})
        raise ShapeError("Dataset records are malformed", field=field_name, details=messages) from e

    normalized = merge_with_defaults(dataset)
    logger.debug(
        "Normalized dataset: %d groups, %d processes",
        len(normalized.groups), len(normalized.processes)
    )
    return normalized


# ============================================================================
# DEFAULTS MERGE
# ============================================================================

def _resolve_wage(process: Process, group: Optional[ProcessGroup], global_defaults: GlobalDefaults) -> Process:
    """Fill wage and salary through process -> group -> global"""
    hourly_wage = process.average_hourly_wage
    if hourly_wage is None and group is not None:
        hourly_wage = group.average_hourly_wage
    if hourly_wage is None:
        hourly_wage = global_defaults.average_hourly_wage

    annual_salary = process.annual_salary
    if annual_salary is None and group is not None:
        annual_salary = group.annual_salary
    if annual_salary is None:
        annual_salary = global_defaults.annual_salary

    return replace(process, average_hourly_wage=hourly_wage, annual_salary=annual_salary)


def merge_process_with_defaults(
    process: Process,
    group: Optional[ProcessGroup],
    global_defaults: GlobalDefaults
) -> Process:
    merged = replace(
        process,
        selected=True if process.selected is None else process.selected,
        fte_count=process.fte_count or 1.0,
        seasonal_pattern=process.seasonal_pattern or SeasonalPattern(),
        cyclical_pattern=process.cyclical_pattern or CyclicalPattern(),
        sla_requirements=process.sla_requirements or SLARequirements(),
        implementation_costs=process.implementation_costs or ImplementationCosts(),
        error_rework_costs=process.error_rework_costs or ErrorReworkCosts(),
        compliance_risk=process.compliance_risk or ComplianceRisk(),
        revenue_impact=process.revenue_impact or RevenueImpact(),
        internal_costs=process.internal_costs or InternalCosts(),
        utilization_impact=process.utilization_impact or UtilizationImpact(),
        complexity_metrics=derive_complexity(process.complexity_metrics or ComplexityMetrics()),
    )
    return _resolve_wage(merged, group, global_defaults)


def merge_with_defaults(dataset: NormalizedDataset) -> NormalizedDataset:
    """
    Fill every process with defaults.

    Applying it twice yields an identical dataset.
    """
    global_defaults = dataset.global_defaults or GlobalDefaults()
    processes = [
        merge_process_with_defaults(p, dataset.find_group(p.group), global_defaults)
        for p in dataset.processes
    ]
    return NormalizedDataset(
        groups=list(dataset.groups),
        processes=processes,
        global_defaults=global_defaults,
    )


# ============================================================================
# FACTORIES
# ============================================================================

def create_default_process(
    id: str,
    name: str = "New Process",
    start_month: int = 1,
    group: str = "",
    global_defaults: Optional[GlobalDefaults] = None
) -> Process:
    """
    New, unselected process with zero volume.

    Wages come from the global defaults when given; there is no automatic
    group assignment.
    """
    return Process(
        id=id,
        name=name,
        group=group,
        selected=False,
        average_hourly_wage=global_defaults.average_hourly_wage if global_defaults else 0.0,
        salary_mode=global_defaults.salary_mode if global_defaults else False,
        annual_salary=global_defaults.annual_salary if global_defaults else 0.0,
        fte_count=0.0,
        implementation_costs=ImplementationCosts(start_month=start_month),
    )


def default_groups() -> List[ProcessGroup]:
    return [
        ProcessGroup(id="operations", name="Operations", description="Operational processes and workflows"),
        ProcessGroup(id="finance", name="Finance", description="Financial and accounting processes"),
        ProcessGroup(id="support", name="Support", description="Customer support and service processes"),
        ProcessGroup(id="marketing", name="Marketing", description="Marketing and sales processes"),
        ProcessGroup(id="hr", name="HR", description="Human resources processes"),
    ]
