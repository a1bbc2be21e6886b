"""
Health Tab Swagger Documentation

Contains all health check related API documentation including:
- Basic health check
- Detailed health check
- Health summary
"""

from flask_restx import Namespace, fields

# Create Health Namespace
health_ns = Namespace('health', description='Health check operations')

# Health Check Response Models
basic_health_response_model = health_ns.model('BasicHealthResponse', {
    'status': fields.String(description='Overall system status', enum=['healthy', 'degraded', 'unhealthy']),
    'timestamp': fields.DateTime(description='Health check timestamp'),
    'version': fields.String(description='API version'),
    'uptime': fields.String(description='Service uptime'),
    'checks': fields.Raw(description='Storage and system checks')
})

detailed_health_response_model = health_ns.model('DetailedHealthResponse', {
    'status': fields.String(description='Overall system status'),
    'timestamp': fields.DateTime(description='Health check timestamp'),
    'version': fields.String(description='API version'),
    'uptime': fields.String(description='Service uptime'),
    'checks': fields.Raw(description='Storage, system, cache and configuration checks'),
    'performance': fields.Raw(description='Process performance metrics')
})

health_summary_response_model = health_ns.model('HealthSummaryResponse', {
    'overall_status': fields.String(description='Overall system health status'),
    'healthy_checks': fields.Integer(description='Number of healthy checks'),
    'total_checks': fields.Integer(description='Total number of checks'),
    'health_percentage': fields.Float(description='Share of healthy checks'),
    'timestamp': fields.DateTime(description='Health check timestamp')
})

# Example Responses
EXAMPLE_BASIC_HEALTH = {
    "status": "healthy",
    "timestamp": "2024-03-01T15:30:00Z",
    "version": "v1",
    "uptime": "2 days, 5:30:00",
    "checks": {
        "storage": {"status": "healthy", "message": "Storage API reachable"},
        "system": {"status": "healthy", "cpu_percent": 12.5}
    }
}

EXAMPLE_HEALTH_SUMMARY = {
    "overall_status": "healthy",
    "healthy_checks": 2,
    "total_checks": 2,
    "health_percentage": 100.0,
    "timestamp": "2024-03-01T15:30:00Z"
}
