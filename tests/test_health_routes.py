"""
Tests for health routes covering success and failure branches (class-based).
"""

from unittest.mock import patch


HEALTH_SERVICE = 'src.app.api.v1.routes.common.health_routes.HealthService'


class TestHealthRoutes:
    def test_health_route_basic_success(self, app, client):
        """Covers HealthCheck.get success path with 200 code."""
        with patch(HEALTH_SERVICE) as HS:
            instance = HS.return_value
            instance.get_system_health.return_value = {'status': 'healthy'}
            instance.get_health_status_code.return_value = 200

            resp = client.get('/api/v1/health/')

            assert resp.status_code == 200
            data = resp.get_json()
            assert data['success'] is True
            assert data['message'] == 'System is operational'
            assert data['data'] == {'status': 'healthy'}

    def test_health_route_basic_failure(self, app, client):
        """Covers HealthCheck.get error branch with non-200 status code."""
        with patch(HEALTH_SERVICE) as HS:
            instance = HS.return_value
            instance.get_system_health.return_value = {'status': 'unhealthy'}
            instance.get_health_status_code.return_value = 503

            resp = client.get('/api/v1/health/')

            assert resp.status_code == 503
            data = resp.get_json()
            assert data['success'] is False
            assert data['message'] == 'Health check failed'

    def test_health_route_basic_exception(self, app, client):
        """Covers HealthCheck.get exception branch."""
        with patch(HEALTH_SERVICE) as HS:
            HS.return_value.get_system_health.side_effect = RuntimeError('psutil gone')

            resp = client.get('/api/v1/health/')

            assert resp.status_code == 500
            assert resp.get_json()['data'] == {'error': 'psutil gone'}

    def test_health_route_detailed_success(self, app, client):
        """Covers DetailedHealthCheck.get success path."""
        with patch(HEALTH_SERVICE) as HS:
            instance = HS.return_value
            instance.get_detailed_health.return_value = {'checks': {}, 'status': 'healthy'}
            instance.get_health_status_code.return_value = 200

            resp = client.get('/api/v1/health/detailed')

            assert resp.status_code == 200
            data = resp.get_json()
            assert data['success'] is True
            assert data['message'] == 'Detailed health retrieved'

    def test_health_route_detailed_failure(self, app, client):
        """Covers DetailedHealthCheck.get non-200 path."""
        with patch(HEALTH_SERVICE) as HS:
            instance = HS.return_value
            instance.get_detailed_health.return_value = {'checks': {}, 'status': 'unhealthy'}
            instance.get_health_status_code.return_value = 503

            resp = client.get('/api/v1/health/detailed')

            assert resp.status_code == 503
            data = resp.get_json()
            assert data['success'] is False
            assert data['message'] == 'Detailed health check failed'

    def test_health_route_summary_success(self, app, client):
        """Covers HealthSummary.get normal success path."""
        with patch(HEALTH_SERVICE) as HS:
            HS.return_value.get_health_summary.return_value = {
                'overall_status': 'healthy',
                'healthy_checks': 2,
                'total_checks': 2,
                'health_percentage': 100.0,
            }

            resp = client.get('/api/v1/health/summary')

            assert resp.status_code == 200
            data = resp.get_json()
            assert data['message'] == 'Health summary retrieved'
            assert data['data']['health_percentage'] == 100.0

    def test_health_route_summary_exception(self, app, client):
        """Covers HealthSummary.get exception path."""
        with patch(HEALTH_SERVICE) as HS:
            HS.return_value.get_health_summary.side_effect = Exception('boom')

            resp = client.get('/api/v1/health/summary')

            assert resp.status_code == 500
            data = resp.get_json()
            assert data['success'] is False
            assert data['message'] == 'Health summary failed'
