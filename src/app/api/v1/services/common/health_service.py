"""
Health Monitoring Service for the Automation ROI Service

This module provides health monitoring capabilities including:
- System resource monitoring
- Storage API reachability
- Results cache health
- Configuration checks
- Performance metrics

Author: Flask Enterprise Template
License: MIT
"""

import psutil
from datetime import datetime
from typing import Dict, Any
from flask import current_app

from src.common.exceptions import ConfigurationError
from src.extensions import get_cache_instance
from src.app.services.roi.storage_client import StorageClient


class HealthService:
    """Service for health monitoring"""

    def __init__(self):
        self.start_time = datetime.utcnow()

    def get_system_health(self) -> Dict[str, Any]:
        """
        Get basic system health status.

        Returns:
            dict: System health information
        """
        storage_healthy, storage_message = self._check_storage_health()
        system_health = self._check_system_resources()

        overall_status = 'healthy'
        if not storage_healthy or system_health['status'] != 'healthy':
            overall_status = 'degraded'
        if system_health['status'] in ('critical', 'unhealthy'):
            overall_status = 'unhealthy'

        return {
            'status': overall_status,
            'timestamp': datetime.utcnow().isoformat(),
            'version': 'v1',
            'uptime': str(datetime.utcnow() - self.start_time),
            'checks': {
                'storage': {
                    'status': 'healthy' if storage_healthy else 'unhealthy',
                    'message': storage_message
                },
                'system': system_health
            }
        }

    def get_detailed_health(self) -> Dict[str, Any]:
        """
        Get detailed system health information.

        Returns:
            dict: Detailed health information
        """
        health = self.get_system_health()
        health['checks']['cache'] = self._check_cache_health()
        health['checks']['configuration'] = self._check_configuration()
        health['performance'] = self._get_performance_metrics()
        return health

    def _check_storage_health(self) -> tuple:
        """
        Check that the storage API answers.

        Returns:
            tuple: (is_healthy, message)
        """
        try:
            client = StorageClient.from_app_config()
        except ConfigurationError as e:
            return False, e.message

        if client.ping():
            return True, 'Storage API reachable'
        return False, f'Storage API unreachable at {client.base_url}'

    def _check_system_resources(self) -> Dict[str, Any]:
        """
        Check system resource usage.

        Returns:
            dict: System resource information
        """
        try:
            cpu_percent = psutil.cpu_percent(interval=0.1)
            memory = psutil.virtual_memory()
            disk = psutil.disk_usage('/')
        except (psutil.Error, OSError) as e:
            return {
                'status': 'unhealthy',
                'error': str(e)
            }

        status = 'healthy'
        if cpu_percent > 80 or memory.percent > 80 or disk.percent > 90:
            status = 'degraded'
        if cpu_percent > 95 or memory.percent > 95 or disk.percent > 95:
            status = 'critical'

        return {
            'status': status,
            'cpu_percent': cpu_percent,
            'memory': {
                'total': memory.total,
                'available': memory.available,
                'percent': memory.percent,
                'used': memory.used
            },
            'disk': {
                'total': disk.total,
                'free': disk.free,
                'percent': disk.percent,
                'used': disk.used
            }
        }

    def _check_cache_health(self) -> Dict[str, Any]:
        """Round-trip a marker value through the results cache"""
        cache = get_cache_instance()
        marker_key = 'health_check_marker'
        cache.set(marker_key, 'ok', timeout=5)
        healthy = cache.get(marker_key) == 'ok'
        return {
            'status': 'healthy' if healthy else 'unhealthy',
            'type': current_app.config.get('CACHE_TYPE')
        }

    def _check_configuration(self) -> Dict[str, Any]:
        """
        Check application configuration.

        Returns:
            dict: Configuration health information
        """
        config_issues = []

        if not current_app.config.get('SECRET_KEY') or current_app.config.get('SECRET_KEY') == 'dev-key-change-in-production':
            config_issues.append('SECRET_KEY is not configured')

        if not current_app.config.get('STORAGE_API_URL'):
            config_issues.append('STORAGE_API_URL is not configured')

        return {
            'status': 'healthy' if not config_issues else 'unhealthy',
            'issues': config_issues
        }

    def _get_performance_metrics(self) -> Dict[str, Any]:
        """
        Get performance metrics.

        Returns:
            dict: Performance metrics
        """
        try:
            process = psutil.Process()
            return {
                'process': {
                    'pid': process.pid,
                    'memory_percent': process.memory_percent(),
                    'cpu_percent': process.cpu_percent(),
                    'num_threads': process.num_threads(),
                    'create_time': datetime.fromtimestamp(process.create_time()).isoformat()
                },
                'uptime': str(datetime.utcnow() - self.start_time),
                'timestamp': datetime.utcnow().isoformat()
            }
        except psutil.Error as e:
            current_app.logger.warning(f"Performance metrics collection failed: {str(e)}")
            return {
                'error': str(e),
                'timestamp': datetime.utcnow().isoformat()
            }

    def get_health_summary(self) -> Dict[str, Any]:
        """
        Get a summary of health status.

        Returns:
            dict: Health summary
        """
        health = self.get_system_health()

        healthy_checks = 0
        total_checks = 0

        for check_data in health.get('checks', {}).values():
            if isinstance(check_data, dict) and 'status' in check_data:
                total_checks += 1
                if check_data['status'] == 'healthy':
                    healthy_checks += 1

        return {
            'overall_status': health['status'],
            'healthy_checks': healthy_checks,
            'total_checks': total_checks,
            'health_percentage': (healthy_checks / total_checks * 100) if total_checks > 0 else 0,
            'timestamp': health['timestamp']
        }

    @staticmethod
    def get_health_status_code(health: Dict[str, Any]) -> int:
        """
        Get appropriate HTTP status code for a health status.

        Returns:
            int: HTTP status code
        """
        if health['status'] in ('healthy', 'degraded'):
            return 200  # Still operational
        return 503  # Service unavailable
