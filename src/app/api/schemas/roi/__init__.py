"""
ROI Schemas Package

Contains Marshmallow schemas for ROI engine requests:
- Calculation and scenario requests
- CFO score and complexity requests
- Workspace requests
"""

from .roi_schemas import (
    CalculateRequestSchema,
    ScenarioRequestSchema,
    CFOScoreRequestSchema,
    ComplexityRequestSchema,
    WorkspaceOrganizationSchema,
    WorkspaceRecalculateSchema,
)

__all__ = [
    'CalculateRequestSchema',
    'ScenarioRequestSchema',
    'CFOScoreRequestSchema',
    'ComplexityRequestSchema',
    'WorkspaceOrganizationSchema',
    'WorkspaceRecalculateSchema',
]
