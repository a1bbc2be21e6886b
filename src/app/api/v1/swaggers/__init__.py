"""
Swagger Documentation Package - Tab-based Organization

This package contains Swagger documentation organized by tabs:
1. ROI Tab - Normalization, calculation, scoring and workspaces
2. Health Tab - Health check operations

Author: Flask Enterprise Template
License: MIT
"""

from .roi.roi_tab import (
    roi_ns,
    calculate_request_model,
    scenario_request_model,
    normalize_request_model,
    cfo_score_request_model,
    complexity_request_model,
    workspace_organization_model,
    workspace_recalculate_model,
    cfo_score_model,
    cashflow_point_model,
    roi_response_model,
    workspace_status_model,
    error_response_model,
    EXAMPLE_CFO_SCORE,
    EXAMPLE_SHAPE_ERROR,
)

from .common.health_tab import (
    health_ns,
    basic_health_response_model,
    detailed_health_response_model,
    health_summary_response_model,
    EXAMPLE_BASIC_HEALTH,
    EXAMPLE_HEALTH_SUMMARY,
)

__all__ = [
    # ROI
    'roi_ns',
    'calculate_request_model',
    'scenario_request_model',
    'normalize_request_model',
    'cfo_score_request_model',
    'complexity_request_model',
    'workspace_organization_model',
    'workspace_recalculate_model',
    'cfo_score_model',
    'cashflow_point_model',
    'roi_response_model',
    'workspace_status_model',
    'error_response_model',
    'EXAMPLE_CFO_SCORE',
    'EXAMPLE_SHAPE_ERROR',

    # Health
    'health_ns',
    'basic_health_response_model',
    'detailed_health_response_model',
    'health_summary_response_model',
    'EXAMPLE_BASIC_HEALTH',
    'EXAMPLE_HEALTH_SUMMARY',
]
