"""
Routes Package - Main entry point for all API routes

This package contains the Flask-RESTX resources for API v1:
- ROI engine routes
- Health routes

Author: Flask Enterprise Template
License: MIT
"""

# Routes are registered via Flask-RESTX namespaces in register_all_namespaces
