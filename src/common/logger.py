"""
Logging Configuration for the Automation ROI Service

This module provides logging configuration with:
- Environment-based log levels
- Rotating file handlers
- Structured logging with JSON format
- Performance monitoring
- Request/response logging with request ids
- Organization and workspace context tracking
- API-specific logging decorators

Author: Flask Enterprise Template
License: MIT
"""

import os
import json
import logging
import logging.handlers
import traceback
import uuid
from datetime import datetime
from functools import wraps
from flask import request, g, current_app


_RESERVED_RECORD_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'exc_info', 'exc_text', 'stack_info',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage',
    'taskName'
}


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.utcnow().isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'message': record.getMessage(),
            'thread': record.thread,
            'process': record.process
        }

        # Add exception info if present
        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': traceback.format_exception(*record.exc_info)
            }

        # Add extra fields from record
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(app):
    """
    Setup logging for the Flask application.

    Args:
        app: Flask application instance
    """
    log_file = app.config.get('LOG_FILE', 'logs/app.log')
    log_level_name = app.config.get('LOG_LEVEL', 'INFO')
    max_bytes = app.config.get('LOG_MAX_BYTES', 10485760)
    backup_count = app.config.get('LOG_BACKUP_COUNT', 5)

    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    app.logger.setLevel(log_level)

    # Remove default handlers
    for handler in app.logger.handlers[:]:
        app.logger.removeHandler(handler)

    detailed_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s.%(funcName)s:%(lineno)d: %(message)s'
    )
    json_formatter = JSONFormatter()

    # Console handler for development
    if app.config.get('DEBUG'):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(detailed_formatter)
        app.logger.addHandler(console_handler)

    if app.config.get('LOG_TO_FILE', True):
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        # Main application log file
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(json_formatter)
        app.logger.addHandler(file_handler)

        # Error file handler
        error_handler = logging.handlers.RotatingFileHandler(
            log_file.replace('.log', '_error.log'), maxBytes=max_bytes, backupCount=backup_count
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(json_formatter)
        app.logger.addHandler(error_handler)

        # API requests log handler
        api_handler = logging.handlers.RotatingFileHandler(
            log_file.replace('.log', '_api.log'), maxBytes=max_bytes, backupCount=backup_count
        )
        api_handler.setLevel(logging.INFO)
        api_handler.setFormatter(json_formatter)
        app.logger.addHandler(api_handler)

        # Engine loggers (src.app.services.*) share the main file
        engine_logger = logging.getLogger('src.app.services')
        engine_logger.setLevel(log_level)
        if not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in engine_logger.handlers):
            engine_logger.addHandler(file_handler)

    # Set logging level for other loggers
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    app.logger.info("Logging configured", extra={
        'environment': os.getenv('FLASK_ENV', 'development'),
        'log_level': log_level_name,
        'file_logging': app.config.get('LOG_TO_FILE', True)
    })


def get_request_context():
    """Get organization and workspace context from request headers"""
    try:
        return {
            'organization_id': request.headers.get('X-Organization-Id'),
            'session_id': request.headers.get('X-Session-Id')
                or (request.view_args or {}).get('session_id'),
            'client_ip': (request.headers.get('X-Forwarded-For', '').split(',')[0].strip()
                          or request.remote_addr),
            'user_agent': request.headers.get('User-Agent', 'Unknown')
        }
    except RuntimeError as e:
        # Outside of a request context
        return {'error': str(e)}


def log_request_start(app):
    """Log request start with context information"""

    @app.before_request
    def log_request_info():
        g.start_time = datetime.utcnow()
        g.request_id = request.headers.get('X-Request-Id') or str(uuid.uuid4())

        # Skip logging for health checks, docs and static files
        if _is_quiet_path(request.path):
            return

        app.logger.info("API Request Started", extra={
            'request_id': g.request_id,
            'method': request.method,
            'path': request.path,
            'endpoint': request.endpoint,
            'query_params': dict(request.args),
            'request_payload': get_request_payload(),
            'request_context': get_request_context(),
            'timestamp': g.start_time.isoformat()
        })


def get_request_payload():
    """Safely extract request payload, filtering sensitive information"""
    try:
        if request.is_json:
            payload = request.get_json(silent=True)
            if payload:
                return summarize_payload(filter_sensitive_data(payload))
        return None
    except Exception as e:
        return {'error': str(e)}


def summarize_payload(payload):
    """Replace large process lists with their size so dataset uploads stay readable"""
    if not isinstance(payload, dict):
        return payload

    summary = {}
    for key, value in payload.items():
        if isinstance(value, list) and len(value) > 5:
            summary[key] = f'[{len(value)} items]'
        elif isinstance(value, dict):
            summary[key] = summarize_payload(value)
        else:
            summary[key] = value
    return summary


def filter_sensitive_data(data):
    """Filter sensitive information from data"""
    sensitive_fields = {
        'password', 'passwd', 'pwd', 'secret', 'token', 'api_key', 'apikey',
        'access_token', 'refresh_token', 'authorization', 'auth',
        'credit_card', 'card_number', 'cvv', 'ssn', 'email', 'phone'
    }

    if isinstance(data, dict):
        filtered = {}
        for key, value in data.items():
            if any(sensitive in key.lower() for sensitive in sensitive_fields):
                filtered[key] = '[FILTERED]'
            elif isinstance(value, (dict, list)):
                filtered[key] = filter_sensitive_data(value)
            else:
                filtered[key] = value
        return filtered
    elif isinstance(data, list):
        return [filter_sensitive_data(item) for item in data]
    else:
        return data


def log_request_end(app):
    """Log request end with response information"""

    @app.after_request
    def log_response_info(response):
        if hasattr(g, 'request_id'):
            response.headers['X-Request-Id'] = g.request_id

        if _is_quiet_path(request.path):
            return response

        if hasattr(g, 'start_time'):
            duration = datetime.utcnow() - g.start_time
            duration_ms = duration.total_seconds() * 1000

            app.logger.info("API Request Completed", extra={
                'request_id': getattr(g, 'request_id', 'unknown'),
                'method': request.method,
                'path': request.path,
                'endpoint': request.endpoint,
                'status_code': response.status_code,
                'duration_ms': round(duration_ms, 2),
                'response_info': get_response_info(response),
                'timestamp': datetime.utcnow().isoformat()
            })

            # Log slow requests
            if (app.config.get('ENABLE_PERFORMANCE_MONITORING') and
                    duration.total_seconds() > app.config.get('PERFORMANCE_LOG_THRESHOLD', 1.0)):
                app.logger.warning("Slow Request Detected", extra={
                    'request_id': getattr(g, 'request_id', 'unknown'),
                    'method': request.method,
                    'path': request.path,
                    'duration_ms': round(duration_ms, 2),
                    'threshold_seconds': app.config.get('PERFORMANCE_LOG_THRESHOLD'),
                    'performance_issue': True
                })

        return response


def log_exception_handler(app):
    """Log exceptions that escape a request before the error handlers render them"""

    @app.teardown_request
    def log_unhandled_exception(exc):
        if exc is not None:
            app.logger.error("Request failed with unhandled exception", extra={
                'request_id': getattr(g, 'request_id', 'unknown'),
                'path': request.path,
                'error_type': type(exc).__name__,
                'error_message': str(exc)
            }, exc_info=(type(exc), exc, exc.__traceback__))


def get_response_info(response):
    """Extract response information for logging"""
    try:
        response_info = {
            'status_code': response.status_code,
            'content_type': response.content_type,
            'content_length': response.content_length,
            'is_json': response.is_json,
            'is_streamed': response.is_streamed
        }

        # Only log small responses
        if not response.is_streamed and response.data and len(response.data) < 2000:
            if response.is_json:
                response_info['data'] = response.get_json(silent=True)
            else:
                response_info['data'] = response.data.decode('utf-8', errors='ignore')[:1000]

        return response_info
    except Exception as e:
        return {'error': str(e), 'status_code': getattr(response, 'status_code', 'unknown')}


def _is_quiet_path(path):
    return path.startswith('/api/v1/health') or path.startswith('/static') \
        or path.startswith('/docs') or path.startswith('/swagger')


def api_logger(include_payload=True, include_response=True):
    """
    Flask API call logger.
    Logs details for each API call:
      - Organization / workspace context, IP
      - Request method, path
      - Payload summary, response preview, duration
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            app = current_app._get_current_object()
            start_time = datetime.utcnow()
            request_id = getattr(g, "request_id", str(uuid.uuid4()))
            context = get_request_context()

            payload = None
            if include_payload:
                payload = get_request_payload()

            app.logger.info("API call start", extra={
                "event": "API_CALL_START",
                "request_id": request_id,
                "method": request.method,
                "path": request.path,
                "request_context": context,
                "payload": payload,
            })

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = round((datetime.utcnow() - start_time).total_seconds() * 1000, 2)
                app.logger.error("API call error", extra={
                    "event": "API_CALL_ERROR",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.path,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "duration_ms": duration_ms,
                }, exc_info=True)
                raise

            duration_ms = round((datetime.utcnow() - start_time).total_seconds() * 1000, 2)

            response_preview = None
            if include_response:
                response_preview = str(result)[:800]

            app.logger.info("API call success", extra={
                "event": "API_CALL_SUCCESS",
                "request_id": request_id,
                "method": request.method,
                "path": request.path,
                "duration_ms": duration_ms,
                "response_preview": response_preview,
            })

            return result

        return wrapper
    return decorator
