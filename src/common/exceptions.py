"""
Custom Exception Classes for the Automation ROI Service

This module defines custom exception classes for better error handling
and standardized error responses across the application.

Features:
- API-specific exceptions with status codes
- Dataset shape exceptions raised at the normalization boundary
- Storage load exceptions for organization data fetches
- Configuration exceptions
- Global error handlers

Author: Flask Enterprise Template
License: MIT
"""

from flask import jsonify
from marshmallow import ValidationError


class APIError(Exception):
    """Base API exception class with status code"""

    def __init__(self, message, status_code=400, error_code=None, details=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details


class ShapeError(APIError):
    """Exception raised when a collection field of a dataset is not a list"""

    def __init__(self, message="Dataset has an invalid shape", field=None, details=None):
        super().__init__(message, status_code=422, error_code="SHAPE_ERROR", details=details)
        self.field = field


class ExternalServiceError(APIError):
    """Exception raised when external service fails"""

    def __init__(self, message="External service error", service_name=None, details=None):
        super().__init__(message, status_code=502, error_code="EXTERNAL_SERVICE_ERROR", details=details)
        self.service_name = service_name


class LoadError(ExternalServiceError):
    """Exception raised when the organization dataset cannot be loaded"""

    def __init__(self, message="Failed to load organization data", organization_id=None, details=None):
        super().__init__(message, service_name="storage", details=details)
        self.error_code = "LOAD_ERROR"
        self.organization_id = organization_id


class ClassificationUnavailableError(ExternalServiceError):
    """Exception raised when no cost classification could be fetched.

    Callers recover from it by substituting an empty classification.
    """

    def __init__(self, message="Cost classification unavailable", organization_id=None, details=None):
        super().__init__(message, service_name="storage", details=details)
        self.error_code = "CLASSIFICATION_UNAVAILABLE"
        self.organization_id = organization_id


class ConfigurationError(APIError):
    """Exception raised when configuration is invalid"""

    def __init__(self, message="Configuration error", details=None):
        super().__init__(message, status_code=500, error_code="CONFIGURATION_ERROR", details=details)


def register_error_handlers(app):
    """
    Register global error handlers for the Flask application.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(APIError)
    def handle_api_error(error):
        """Handle custom API errors"""
        response = {
            'success': False,
            'message': error.message,
            'error_code': error.error_code,
            'status_code': error.status_code
        }

        if error.details:
            response['details'] = error.details

        return jsonify(response), error.status_code

    @app.errorhandler(ShapeError)
    def handle_shape_error(error):
        """Handle malformed dataset errors"""
        return jsonify({
            'success': False,
            'message': error.message,
            'error_code': error.error_code,
            'status_code': 422,
            'field': getattr(error, 'field', None),
            'details': error.details
        }), 422

    @app.errorhandler(LoadError)
    def handle_load_error(error):
        """Handle organization data load errors"""
        return jsonify({
            'success': False,
            'message': error.message,
            'error_code': error.error_code,
            'status_code': 502,
            'organization_id': getattr(error, 'organization_id', None)
        }), 502

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        """Handle marshmallow validation errors"""
        return jsonify({
            'success': False,
            'message': 'Validation failed',
            'error_code': 'VALIDATION_ERROR',
            'status_code': 400,
            'details': error.messages
        }), 400

    @app.errorhandler(404)
    def not_found(e):
        """Handle 404 Not Found errors"""
        return jsonify({
            'success': False,
            'message': 'Resource not found',
            'error_code': 'NOT_FOUND',
            'status_code': 404
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        """Handle 405 Method Not Allowed errors"""
        return jsonify({
            'success': False,
            'message': 'Method not allowed',
            'error_code': 'METHOD_NOT_ALLOWED',
            'status_code': 405
        }), 405

    @app.errorhandler(500)
    def server_error(e):
        """Handle 500 Internal Server Error"""
        return jsonify({
            'success': False,
            'message': 'Internal server error',
            'error_code': 'INTERNAL_SERVER_ERROR',
            'status_code': 500
        }), 500

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle unexpected exceptions"""
        app.logger.error(f"Unhandled exception: {str(error)}", exc_info=True)

        # Return generic error in production, detailed in development
        if app.config.get('DEBUG'):
            return jsonify({
                'success': False,
                'message': str(error),
                'error_code': 'UNHANDLED_EXCEPTION',
                'status_code': 500
            }), 500
        else:
            return jsonify({
                'success': False,
                'message': 'An unexpected error occurred',
                'error_code': 'INTERNAL_SERVER_ERROR',
                'status_code': 500
            }), 500
