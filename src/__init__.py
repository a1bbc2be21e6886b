"""
Automation ROI Service - Main Package

This package provides the automation ROI engine (savings, cashflow,
CFO score, opportunity matrix) behind a Flask REST API.

Author: Flask Enterprise Template
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Flask Enterprise Template"

# Package metadata
__title__ = "Automation ROI Service"
__description__ = "Automation ROI engine with cashflow projection, CFO scoring and opportunity matrix"
__license__ = "MIT"

# Import main application factory
from src.app import create_app

# Export public API
__all__ = [
    'create_app',
    '__version__',
    '__author__',
    '__title__',
    '__description__',
]
