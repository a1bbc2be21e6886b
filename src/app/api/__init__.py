"""
API package for the Automation ROI Service

This package contains API-related modules including:
- v1 API implementation with namespaces, routes, and services
- Flask-RESTX namespaces for Swagger documentation
- Marshmallow request schemas

Author: Flask Enterprise Template
License: MIT
"""

from .v1 import register_all_namespaces

__all__ = ['register_all_namespaces']
