"""
Automation ROI Service - Configuration Management

This module handles environment-based configuration for development,
testing, staging and production environments including:
- Storage API connection settings
- ROI engine defaults (time horizon, cashflow window, sensitivity swing)
- Logging and performance monitoring
- Rate limiting
- Caching of last-known-good results

Author: Flask Enterprise Template
License: MIT
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Base configuration class"""

    # Flask Core Settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-change-in-production'

    # Storage API (organization data and cost classification)
    STORAGE_API_URL = os.environ.get('STORAGE_API_URL')
    STORAGE_API_KEY = os.environ.get('STORAGE_API_KEY')
    STORAGE_API_TIMEOUT = float(os.environ.get('STORAGE_API_TIMEOUT', 10))

    # ROI Engine Settings
    ROI_DEFAULT_TIME_HORIZON_MONTHS = int(os.environ.get('ROI_DEFAULT_TIME_HORIZON_MONTHS', 36))
    ROI_MAX_TIME_HORIZON_MONTHS = int(os.environ.get('ROI_MAX_TIME_HORIZON_MONTHS', 120))
    ROI_CASHFLOW_MONTHS = int(os.environ.get('ROI_CASHFLOW_MONTHS', 24))
    ROI_SENSITIVITY_SWING = float(os.environ.get('ROI_SENSITIVITY_SWING', 0.2))
    ROI_RESULTS_CACHE_TIMEOUT = int(os.environ.get('ROI_RESULTS_CACHE_TIMEOUT', 3600))  # 1 hour
    ROI_WORKSPACE_IDLE_SECONDS = int(os.environ.get('ROI_WORKSPACE_IDLE_SECONDS', 3600))  # 1 hour

    # Advanced CORS Configuration
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',') if os.environ.get('CORS_ORIGINS', '*') != '*' else '*'
    CORS_METHODS = ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS']
    CORS_ALLOW_HEADERS = ['Content-Type', 'Authorization', 'X-Requested-With', 'X-Organization-Id', 'X-Session-Id']
    CORS_EXPOSE_HEADERS = ['X-Request-Id']
    CORS_SUPPORTS_CREDENTIALS = True

    # Advanced Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE', 'logs/app.log')
    LOG_TO_FILE = os.environ.get('LOG_TO_FILE', 'True').lower() == 'true'
    LOG_MAX_BYTES = int(os.environ.get('LOG_MAX_BYTES', 10485760))  # 10MB
    LOG_BACKUP_COUNT = int(os.environ.get('LOG_BACKUP_COUNT', 5))

    # Advanced Rate Limiting
    RATE_LIMIT_ENABLED = os.environ.get('RATE_LIMIT_ENABLED', 'True').lower() == 'true'
    RATE_LIMIT_DEFAULT = os.environ.get('RATE_LIMIT_DEFAULT', '100 per hour')
    RATE_LIMIT_CALCULATION = os.environ.get('RATE_LIMIT_CALCULATION', '60 per minute')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')
    RATELIMIT_HEADERS_ENABLED = True

    # Performance Monitoring
    ENABLE_PERFORMANCE_MONITORING = os.environ.get('ENABLE_PERFORMANCE_MONITORING', 'True').lower() == 'true'
    PERFORMANCE_LOG_THRESHOLD = float(os.environ.get('PERFORMANCE_LOG_THRESHOLD', 1.0))  # seconds

    # Cache Configuration
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', 300))  # 5 minutes
    CACHE_KEY_PREFIX = os.environ.get('CACHE_KEY_PREFIX', 'roi_engine_')

    # API Configuration
    API_TITLE = 'Automation ROI Engine API'
    API_VERSION = 'v1'
    API_DESCRIPTION = 'Automation ROI, cashflow and CFO score calculations'
    API_DOC_URL = '/docs/'

    # Request size limit for dataset uploads
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 4 * 1024 * 1024))  # 4MB

    @staticmethod
    def validate_required_config():
        """Validate that all required configuration is present"""
        required_vars = ['SECRET_KEY']
        missing_vars = []

        for var in required_vars:
            if not os.environ.get(var):
                missing_vars.append(var)

        if missing_vars:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )
        return True


class DevelopmentConfig(Config):
    """Development environment configuration"""

    DEBUG = True
    TESTING = False

    # Relaxed CORS for development
    CORS_ORIGINS = ['http://localhost:3000', 'http://127.0.0.1:3000', 'http://localhost:5000', 'http://127.0.0.1:5000']

    # Development logging
    LOG_LEVEL = 'DEBUG'

    # Development performance monitoring
    ENABLE_PERFORMANCE_MONITORING = True
    PERFORMANCE_LOG_THRESHOLD = 0.5  # Log requests taking more than 0.5 seconds

    # Development cache settings
    CACHE_TYPE = 'SimpleCache'
    CACHE_DEFAULT_TIMEOUT = 60  # 1 minute


class TestingConfig(Config):
    """Testing environment configuration"""

    DEBUG = False
    TESTING = True

    # Tests never reach a real storage backend
    STORAGE_API_URL = 'http://storage.test'
    STORAGE_API_KEY = None

    # Keep test runs off the filesystem
    LOG_TO_FILE = False

    # Disable performance monitoring for tests
    ENABLE_PERFORMANCE_MONITORING = False

    # Test-specific rate limiting
    RATE_LIMIT_ENABLED = False
    RATELIMIT_ENABLED = False
    RATE_LIMIT_DEFAULT = '1000 per hour'

    # Test cache settings
    CACHE_TYPE = 'SimpleCache'
    CACHE_DEFAULT_TIMEOUT = 1  # 1 second for tests


class ProductionConfig(Config):
    """Production environment configuration"""

    DEBUG = False
    TESTING = False

    # Production CORS (should be restricted to actual domains)
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'https://yourdomain.com').split(',')

    # Production logging
    LOG_LEVEL = 'WARNING'

    # Production performance monitoring
    ENABLE_PERFORMANCE_MONITORING = True
    PERFORMANCE_LOG_THRESHOLD = 2.0  # Log requests taking more than 2 seconds

    # Production cache settings
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'RedisCache')
    CACHE_DEFAULT_TIMEOUT = 600  # 10 minutes

    @staticmethod
    def validate_production_config():
        """Additional validation for production environment"""
        # Ensure secure secret key
        if Config.SECRET_KEY == 'dev-key-change-in-production':
            raise ValueError("You must set a secure SECRET_KEY for production!")

        # Workspaces cannot load organization data without storage
        if not Config.STORAGE_API_URL:
            raise ValueError("Production requires STORAGE_API_URL to be set!")

        return True


class StagingConfig(ProductionConfig):
    """Staging environment configuration (inherits from Production)"""

    DEBUG = False
    TESTING = False

    # Slightly more verbose logging for staging
    LOG_LEVEL = 'INFO'


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'staging': StagingConfig,
    'default': DevelopmentConfig
}


def get_config(env_name=None):
    """Get configuration class for specified environment"""
    if env_name is None:
        env_name = os.getenv('FLASK_ENV', 'development')

    return config.get(env_name, config['default'])


def validate_config(env_name=None):
    """Validate configuration for specified environment"""
    if env_name is None:
        env_name = os.getenv('FLASK_ENV', 'development')

    try:
        # Only deployed environments must supply secrets and storage
        if env_name in ('production', 'staging'):
            Config.validate_required_config()
            ProductionConfig.validate_production_config()

        return True, "Configuration valid"

    except ValueError as e:
        return False, str(e)

