"""
Health Check Routes

Provides health check endpoints for monitoring system status
"""

from flask_restx import Resource
from src.common.response_utils import success_response, error_response
from src.app.api.v1.services import HealthService
from src.app.api.v1.swaggers.common.health_tab import (
    health_ns,
    basic_health_response_model,
    detailed_health_response_model,
    health_summary_response_model,
)


@health_ns.route('/')
class HealthCheck(Resource):
    """Basic health check endpoint"""

    @health_ns.doc('health_check')
    @health_ns.response(200, 'Service operational', basic_health_response_model)
    def get(self):
        """Get basic system health status (service and storage reachability)"""
        try:
            health_service = HealthService()
            health_data = health_service.get_system_health()
            status_code = health_service.get_health_status_code(health_data)

            if status_code == 200:
                return success_response(
                    message='System is operational',
                    data=health_data
                )
            else:
                return error_response(
                    message='Health check failed',
                    data=health_data,
                    status_code=status_code
                )
        except Exception as e:
            return error_response(
                message='Health check failed',
                data={"error": str(e)},
                status_code=500
            )


@health_ns.route('/detailed')
class DetailedHealthCheck(Resource):
    """Detailed health check endpoint"""

    @health_ns.doc('detailed_health_check')
    @health_ns.response(200, 'Detailed health', detailed_health_response_model)
    def get(self):
        """Get detailed system health status"""
        try:
            health_service = HealthService()
            health_data = health_service.get_detailed_health()
            status_code = health_service.get_health_status_code(health_data)

            if status_code == 200:
                return success_response(
                    message='Detailed health retrieved',
                    data=health_data
                )
            else:
                return error_response(
                    message='Detailed health check failed',
                    data=health_data,
                    status_code=status_code
                )
        except Exception as e:
            return error_response(
                message='Detailed health check failed',
                data={"error": str(e)},
                status_code=500
            )


@health_ns.route('/summary')
class HealthSummary(Resource):
    """Health summary endpoint"""

    @health_ns.doc('health_summary')
    @health_ns.response(200, 'Health summary', health_summary_response_model)
    def get(self):
        """Get health summary"""
        try:
            health_service = HealthService()
            summary_data = health_service.get_health_summary()
            return success_response(
                message='Health summary retrieved',
                data=summary_data
            )
        except Exception as e:
            return error_response(
                message='Health summary failed',
                data={"error": str(e)},
                status_code=500
            )
