"""
Request/response logging middleware.
"""

import time
import uuid
import logging
from datetime import datetime
from pyramid.settings import asbool

log = logging.getLogger(__name__)

SENSITIVE_HEADERS = {'authorization', 'cookie', 'x-api-key', 'x-auth-token'}


class LoggingMiddleware:
    """WSGI middleware logging each request with a short request id"""

    def __init__(self, app, config=None):
        self.app = app
        config = config or {}
        self.log_requests = asbool(config.get('log_requests', True))
        self.log_responses = asbool(config.get('log_responses', True))
        self.slow_request_seconds = float(config.get('slow_request_seconds', 2.0))

    def __call__(self, environ, start_response):
        started = time.time()
        request_id = str(uuid.uuid4())[:8]
        environ['REQUEST_ID'] = request_id

        method = environ.get('REQUEST_METHOD', 'UNKNOWN')
        path = environ.get('PATH_INFO', '/')

        if self.log_requests:
            log.info(f"REQUEST [{request_id}] {method} {path}",
                     extra={'request_data': self._request_data(environ, request_id)})

        status_holder = {}

        def new_start_response(status, response_headers, exc_info=None):
            status_holder['status'] = status
            return start_response(status, response_headers, exc_info)

        try:
            body_parts = list(self.app(environ, new_start_response))
        except Exception as e:
            duration = time.time() - started
            log.error(f"ERROR [{request_id}] {method} {path} - {type(e).__name__}: {str(e)}",
                      extra={'duration_ms': round(duration * 1000, 2)}, exc_info=True)
            raise

        duration = time.time() - started
        status_code = status_holder.get('status', '000').split()[0]

        if self.log_responses:
            log.info(f"RESPONSE [{request_id}] {status_code} ({duration * 1000:.2f}ms)",
                     extra={'body_size': sum(len(part) for part in body_parts)})

        if duration > self.slow_request_seconds:
            log.warning(f"SLOW REQUEST [{request_id}] {method} {path} took {duration:.2f}s")

        return iter(body_parts)

    def _request_data(self, environ, request_id):
        headers = {}
        for key, value in environ.items():
            if key.startswith('HTTP_'):
                name = key[5:].lower().replace('_', '-')
                headers[name] = '[REDACTED]' if name in SENSITIVE_HEADERS else value

        return {
            'request_id': request_id,
            'query_string': environ.get('QUERY_STRING', ''),
            'remote_addr': environ.get('REMOTE_ADDR', 'unknown'),
            'headers': headers,
            'timestamp': datetime.now().isoformat()
        }


def create_logging_middleware(app, global_config=None, **local_config):
    """PasteDeploy filter factory"""
    config = {}
    if global_config:
        config.update(global_config)
    config.update(local_config)

    return LoggingMiddleware(app, config)
