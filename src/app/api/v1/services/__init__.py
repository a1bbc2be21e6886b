"""
API V1 Services Package

This package contains the API-level services for API v1:
- Common Services (health)

ROI calculation services live in ``src.app.services.roi``.

Author: Flask Enterprise Template
License: MIT
"""

# Common services
from .common.health_service import HealthService

__all__ = [
    'HealthService',
]
