"""
Flask Extensions Configuration

This module initializes all Flask extensions used by the ROI service.

Features:
- CORS configuration
- Rate limiting for calculation endpoints
- Caching of last-known-good ROI results
- API documentation with Flask-RESTX
- Marshmallow for request parsing and serialization

Author: Flask Enterprise Template
License: MIT
"""

from flask_marshmallow import Marshmallow
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_restx import Api
from flask_caching import Cache

# Marshmallow for serialization
ma = Marshmallow()

# CORS for cross-origin requests
cors = CORS()

# Rate limiting
limiter = Limiter(key_func=get_remote_address)

# Cache for last-known-good results
cache = Cache()

# Flask-RESTX API with Swagger documentation
api = Api(
    title='Automation ROI Engine API',
    version='1.0',
    description='Automation ROI, cashflow projection, CFO score and opportunity matrix',
    doc='/docs/',
    default_mediatype='application/json',
    catch_all_404s=True
)


def init_extensions(app):
    """
    Initialize all Flask extensions with the application.

    Args:
        app: Flask application instance
    """
    # Initialize Marshmallow
    ma.init_app(app)

    # Initialize CORS
    cors.init_app(
        app,
        origins=app.config.get('CORS_ORIGINS', '*'),
        methods=app.config.get('CORS_METHODS', ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS']),
        allow_headers=app.config.get('CORS_ALLOW_HEADERS', ['Content-Type', 'Authorization']),
        expose_headers=app.config.get('CORS_EXPOSE_HEADERS', []),
        supports_credentials=app.config.get('CORS_SUPPORTS_CREDENTIALS', True)
    )

    # Initialize rate limiting
    app.config.setdefault('RATELIMIT_ENABLED', app.config.get('RATE_LIMIT_ENABLED', True))
    app.config.setdefault('RATELIMIT_DEFAULT', app.config.get('RATE_LIMIT_DEFAULT', '100 per hour'))
    limiter.init_app(app)

    # Initialize cache
    cache.init_app(app, config={
        'CACHE_TYPE': app.config.get('CACHE_TYPE', 'SimpleCache'),
        'CACHE_DEFAULT_TIMEOUT': app.config.get('CACHE_DEFAULT_TIMEOUT', 300),
        'CACHE_KEY_PREFIX': app.config.get('CACHE_KEY_PREFIX', 'roi_engine_')
    })

    # Initialize API
    api.init_app(app)


def get_cache_instance():
    """
    Get the cache instance for caching operations.

    Returns:
        Cache instance
    """
    return cache
