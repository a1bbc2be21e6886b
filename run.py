#!/usr/bin/env python3
"""
Automation ROI Service - Development Entry Point

This file is used to run the service in development mode.
For production deployment, use wsgi.py with gunicorn.

Usage:
    python run.py

Author: Flask Enterprise Template
License: MIT
"""

import os
from src.app import create_app
from dotenv import load_dotenv, find_dotenv

# Load environment variables
load_dotenv(find_dotenv())


if __name__ == '__main__':
    env_name = os.getenv('FLASK_ENV', 'development')
    debug = os.getenv('FLASK_DEBUG', '1') == '1'
    port = int(os.getenv('FLASK_PORT', 5000))
    host = os.getenv('FLASK_HOST', '0.0.0.0')

    app = create_app(env_name)

    app.logger.info("Starting Automation ROI Service")
    app.logger.info(f"Environment: {env_name}")
    app.logger.info(f"Storage API: {app.config.get('STORAGE_API_URL')}")
    app.logger.info(f"Swagger UI: http://{host}:{port}/docs/")

    try:
        app.run(
            host=host,
            port=port,
            debug=debug,
            threaded=True
        )
    except KeyboardInterrupt:
        app.logger.info("Application stopped by user")
