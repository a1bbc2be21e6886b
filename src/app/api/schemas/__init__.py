"""
API Schemas Package

This package contains the Marshmallow schemas for API request validation.

Author: Flask Enterprise Template
License: MIT
"""

from .roi.roi_schemas import *

# Export all schemas
__all__ = [
    # ROI SCHEMAS
    'CalculateRequestSchema',
    'ScenarioRequestSchema',
    'CFOScoreRequestSchema',
    'ComplexityRequestSchema',
    'WorkspaceOrganizationSchema',
    'WorkspaceRecalculateSchema',
    'calculate_request_schema',
    'scenario_request_schema',
    'cfo_score_request_schema',
    'complexity_request_schema',
    'workspace_organization_schema',
    'workspace_recalculate_schema',
]
