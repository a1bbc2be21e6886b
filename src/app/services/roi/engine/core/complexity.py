"""
Complexity Scoring

Turns workflow counts (inputs, steps, dependencies) into 1-10 sub-scores,
a weighted complexity index and a risk category. The index is the risk
proxy of the CFO score unless a global risk factor overrides it.
"""

import logging
from dataclasses import replace
from typing import Dict, Optional, Tuple

from ..models.process import ComplexityMetrics, Metric, RiskCategory

logger = logging.getLogger(__name__)


INPUTS_WEIGHT = 0.4
STEPS_WEIGHT = 0.4
DEPENDENCIES_WEIGHT = 0.2

RISK_VALUES = {
    RiskCategory.SIMPLE: 2,
    RiskCategory.MODERATE: 5,
    RiskCategory.COMPLEX: 8,
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ============================================================================
# SUB-SCORES
# ============================================================================

def normalize_inputs_score(count: float) -> float:
    """
    Score for the number of systems/APIs/data sources.

    0-2 -> 1-3, 3-5 -> 4-6, 6+ -> 7-10
    """
    if count <= 2:
        return _clamp(1 + count, 1, 3)
    if count <= 5:
        return 4 + (count - 3) / 2 * 2
    return min(10, 7 + (count - 6) / 4 * 3)


def normalize_steps_score(count: float) -> float:
    """
    Score for the number of workflow steps.

    1-5 -> 1-3, 6-15 -> 4-6, 16+ -> 7-10
    """
    if count <= 5:
        return _clamp(1 + (count - 1) / 4 * 2, 1, 3)
    if count <= 15:
        return 4 + (count - 6) / 9 * 2
    return min(10, 7 + (count - 16) / 10 * 3)


def normalize_dependencies_score(count: float) -> float:
    """
    Score for the number of teams/roles involved.

    0-1 -> 1-3, 2-3 -> 4-6, 4+ -> 7-10
    """
    if count <= 1:
        return _clamp(1 + count * 2, 1, 3)
    if count <= 3:
        return 4 + (count - 2) * 2
    return min(10, 7 + (count - 4) / 3 * 3)


# ============================================================================
# INDEX / RISK
# ============================================================================

def calculate_complexity_index(inputs_score: float, steps_score: float, dependencies_score: float) -> float:
    """
    Weighted complexity index.

    Formula:
        index = 0.4 * inputs + 0.4 * steps + 0.2 * dependencies
    rounded to one decimal.
    """
    index = (INPUTS_WEIGHT * inputs_score
             + STEPS_WEIGHT * steps_score
             + DEPENDENCIES_WEIGHT * dependencies_score)
    return round(index, 1)


def map_complexity_to_risk(complexity_index: float) -> Tuple[RiskCategory, int]:
    """< 4 Simple, < 7 Moderate, otherwise Complex"""
    if complexity_index < 4:
        category = RiskCategory.SIMPLE
    elif complexity_index < 7:
        category = RiskCategory.MODERATE
    else:
        category = RiskCategory.COMPLEX
    return category, RISK_VALUES[category]


def build_complexity_metrics(
    inputs: Optional[Metric] = None,
    steps: Optional[Metric] = None,
    dependencies: Optional[Metric] = None,
    inputs_score: float = 1.0,
    steps_score: float = 1.0,
    dependencies_score: float = 1.0,
) -> ComplexityMetrics:
    """
    Build fully derived metrics.

    A sub-score is recomputed from its count when the count is present;
    otherwise the supplied score is kept.
    """
    if inputs is not None:
        inputs_score = normalize_inputs_score(inputs.value)
    if steps is not None:
        steps_score = normalize_steps_score(steps.value)
    if dependencies is not None:
        dependencies_score = normalize_dependencies_score(dependencies.value)

    index = calculate_complexity_index(inputs_score, steps_score, dependencies_score)
    category, risk_value = map_complexity_to_risk(index)

    return ComplexityMetrics(
        inputs=inputs,
        steps=steps,
        dependencies=dependencies,
        inputs_score=inputs_score,
        steps_score=steps_score,
        dependencies_score=dependencies_score,
        complexity_index=index,
        risk_category=category,
        risk_value=risk_value,
    )


def derive_complexity(metrics: ComplexityMetrics) -> ComplexityMetrics:
    """Re-derive scores, index and category of existing metrics"""
    return build_complexity_metrics(
        inputs=metrics.inputs,
        steps=metrics.steps,
        dependencies=metrics.dependencies,
        inputs_score=metrics.inputs_score,
        steps_score=metrics.steps_score,
        dependencies_score=metrics.dependencies_score,
    )


def apply_workflow_counts(metrics: ComplexityMetrics, counts: Dict[str, float]) -> ComplexityMetrics:
    """
    Apply counts gathered from the workflow editor.

    Only ``auto`` metrics are replaced; a ``manual`` metric keeps its value.

    Args:
        metrics: Current complexity metrics
        counts: Mapping with any of ``inputs``, ``steps``, ``dependencies``

    Returns:
        New, fully derived metrics
    """
    updated = {}
    for name in ("inputs", "steps", "dependencies"):
        if name not in counts or counts[name] is None:
            continue
        current: Optional[Metric] = getattr(metrics, name)
        if current is not None and current.is_manual:
            logger.debug("Keeping manual %s count %s", name, current.value)
            continue
        updated[name] = Metric.auto(float(counts[name]))

    return derive_complexity(replace(metrics, **updated))
