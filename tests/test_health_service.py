"""
Tests for HealthService: storage reachability, system resources, cache,
configuration and the summary.
"""

from unittest.mock import MagicMock, patch

import psutil
import pytest

from src.app.api.v1.services.common.health_service import HealthService


STORAGE_PING = 'src.app.services.roi.storage_client.StorageClient.ping'


def resources(cpu=10.0, memory=20.0, disk=30.0):
    """Patch psutil with the given usage percentages"""
    return (
        patch('psutil.cpu_percent', return_value=cpu),
        patch('psutil.virtual_memory', return_value=MagicMock(percent=memory, total=1, available=1, used=1)),
        patch('psutil.disk_usage', return_value=MagicMock(percent=disk, total=1, free=1, used=1)),
    )


class TestSystemResources:
    @pytest.mark.parametrize('cpu,memory,disk,expected', [
        (10.0, 20.0, 30.0, 'healthy'),
        (85.0, 20.0, 30.0, 'degraded'),
        (10.0, 20.0, 92.0, 'degraded'),
        (10.0, 97.0, 30.0, 'critical'),
    ])
    def test_status_thresholds(self, app, cpu, memory, disk, expected):
        cpu_patch, memory_patch, disk_patch = resources(cpu, memory, disk)
        with cpu_patch, memory_patch, disk_patch:
            result = HealthService()._check_system_resources()

        assert result['status'] == expected
        assert result['cpu_percent'] == cpu
        assert result['memory']['percent'] == memory

    def test_psutil_failure(self, app):
        with patch('psutil.cpu_percent', side_effect=psutil.Error('no access')):
            result = HealthService()._check_system_resources()

        assert result['status'] == 'unhealthy'
        assert 'error' in result


class TestSystemHealth:
    """Overall status combines storage reachability and resources"""

    def test_healthy(self, app):
        cpu_patch, memory_patch, disk_patch = resources()
        with cpu_patch, memory_patch, disk_patch, patch(STORAGE_PING, return_value=True):
            health = HealthService().get_system_health()

        assert health['status'] == 'healthy'
        assert health['checks']['storage'] == {'status': 'healthy', 'message': 'Storage API reachable'}
        assert health['version'] == 'v1'

    def test_storage_down_is_degraded(self, app):
        cpu_patch, memory_patch, disk_patch = resources()
        with cpu_patch, memory_patch, disk_patch, patch(STORAGE_PING, return_value=False):
            health = HealthService().get_system_health()

        assert health['status'] == 'degraded'
        assert health['checks']['storage']['status'] == 'unhealthy'
        assert app.config['STORAGE_API_URL'] in health['checks']['storage']['message']

    def test_critical_resources_are_unhealthy(self, app):
        cpu_patch, memory_patch, disk_patch = resources(cpu=99.0)
        with cpu_patch, memory_patch, disk_patch, patch(STORAGE_PING, return_value=True):
            health = HealthService().get_system_health()

        assert health['status'] == 'unhealthy'

    def test_missing_storage_url(self, app, monkeypatch):
        monkeypatch.setitem(app.config, 'STORAGE_API_URL', None)
        healthy, message = HealthService()._check_storage_health()
        assert healthy is False
        assert message == 'Storage API URL is not configured'


class TestDetailedHealth:
    def test_includes_cache_configuration_and_performance(self, app):
        cpu_patch, memory_patch, disk_patch = resources()
        with cpu_patch, memory_patch, disk_patch, patch(STORAGE_PING, return_value=True):
            health = HealthService().get_detailed_health()

        assert health['checks']['cache']['status'] == 'healthy'
        assert health['checks']['cache']['type'] == app.config['CACHE_TYPE']
        assert 'configuration' in health['checks']
        assert 'process' in health['performance']

    def test_configuration_issues(self, app, monkeypatch):
        monkeypatch.setitem(app.config, 'SECRET_KEY', 'dev-key-change-in-production')
        monkeypatch.setitem(app.config, 'STORAGE_API_URL', '')

        result = HealthService()._check_configuration()

        assert result['status'] == 'unhealthy'
        assert result['issues'] == ['SECRET_KEY is not configured', 'STORAGE_API_URL is not configured']

    def test_performance_metrics_failure(self, app):
        with patch('psutil.Process', side_effect=psutil.Error('gone')):
            metrics = HealthService()._get_performance_metrics()
        assert 'error' in metrics
        assert 'timestamp' in metrics


class TestHealthSummary:
    def test_counts_and_percentage(self, app):
        service = HealthService()
        with patch.object(service, 'get_system_health', return_value={
            'status': 'degraded',
            'timestamp': 'now',
            'checks': {
                'storage': {'status': 'unhealthy'},
                'system': {'status': 'healthy'},
            },
        }):
            summary = service.get_health_summary()

        assert summary == {
            'overall_status': 'degraded',
            'healthy_checks': 1,
            'total_checks': 2,
            'health_percentage': 50.0,
            'timestamp': 'now',
        }

    def test_no_checks(self, app):
        service = HealthService()
        with patch.object(service, 'get_system_health', return_value={'status': 'healthy', 'timestamp': 'now'}):
            summary = service.get_health_summary()
        assert summary['health_percentage'] == 0

    @pytest.mark.parametrize('status,code', [
        ('healthy', 200),
        ('degraded', 200),
        ('unhealthy', 503),
    ])
    def test_status_codes(self, status, code):
        assert HealthService.get_health_status_code({'status': status}) == code
