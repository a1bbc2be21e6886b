#!/usr/bin/env python3
"""
Automation ROI Service - Production WSGI Entry Point

This file is used by production WSGI servers like gunicorn.

Usage with gunicorn:
    gunicorn --bind 0.0.0.0:5000 wsgi:application
    gunicorn --bind 0.0.0.0:5000 --workers 4 --worker-class sync wsgi:application

Workspaces are held in process memory, so sticky sessions are required
when running more than one worker.

Environment Variables Required:
    - FLASK_ENV=production
    - SECRET_KEY (secure random key)
    - STORAGE_API_URL (storage backend for organization data)
    - All other production configurations in .env

Author: Flask Enterprise Template
License: MIT
"""

import os
from src.app import create_app
from dotenv import load_dotenv, find_dotenv

# Load environment variables
load_dotenv(find_dotenv())


def configure_production_settings(app):
    """Configure production-specific settings"""
    app.config['SESSION_COOKIE_SECURE'] = os.getenv('SESSION_COOKIE_SECURE', 'True').lower() == 'true'
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Strict'


# Create application instance
env_name = os.getenv('FLASK_ENV', 'production')
application = create_app(env_name)

if env_name in ('production', 'staging'):
    configure_production_settings(application)

# For compatibility with some WSGI servers
app = application

if __name__ == "__main__":
    # Use gunicorn instead: gunicorn wsgi:application
    application.run(host='0.0.0.0', port=5000)
