"""
API v1 Package - Main entry point for API version 1

This package contains all API v1 components including:
- Routes (ROI engine, health)
- Services (health monitoring)
- Swaggers (documentation)

Author: Flask Enterprise Template
License: MIT
"""

from .routes.roi.roi_routes import roi_ns
from .routes.common.health_routes import health_ns


def register_all_namespaces(restx_api):
    """Register all RESTX namespaces with the shared Api instance."""
    # Mount /roi namespace under v1 prefix in swagger
    restx_api.add_namespace(roi_ns, path='/api/v1/roi')
    # Mount /health namespace under v1 prefix in swagger
    restx_api.add_namespace(health_ns, path='/api/v1/health')


__all__ = [
    'register_all_namespaces',
    'roi_ns',
    'health_ns',
]
