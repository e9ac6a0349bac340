"""
Tests for the request logging middleware and the server bootstrap
"""

import logging
import pytest
from webtest import TestApp

from booking_api.middleware.logging_middleware import LoggingMiddleware, create_logging_middleware
from waitress_server import create_app


def hello_app(environ, start_response):
    start_response('200 OK', [('Content-Type', 'text/plain')])
    return [b'hello']


def broken_app(environ, start_response):
    raise RuntimeError('boom')


class TestLoggingMiddleware:

    def test_logs_request_and_response(self, caplog):
        app = TestApp(LoggingMiddleware(hello_app))

        with caplog.at_level(logging.INFO, logger='booking_api.middleware.logging_middleware'):
            response = app.get('/ping', headers={'Authorization': 'Bearer secret'})

        assert response.text == 'hello'
        messages = [record.getMessage() for record in caplog.records]
        assert any(m.startswith('REQUEST') and 'GET /ping' in m for m in messages)
        assert any(m.startswith('RESPONSE') and ' 200 ' in m for m in messages)
        request_record = next(r for r in caplog.records if r.getMessage().startswith('REQUEST'))
        assert request_record.request_data['headers']['authorization'] == '[REDACTED]'

    def test_flags_from_strings(self, caplog):
        app = TestApp(create_logging_middleware(hello_app, {}, log_requests='false', log_responses='false'))

        with caplog.at_level(logging.INFO, logger='booking_api.middleware.logging_middleware'):
            app.get('/ping')

        assert not caplog.records

    def test_slow_request_warning(self, caplog):
        app = TestApp(LoggingMiddleware(hello_app, {'slow_request_seconds': -1}))

        with caplog.at_level(logging.WARNING, logger='booking_api.middleware.logging_middleware'):
            app.get('/ping')

        assert any(r.getMessage().startswith('SLOW REQUEST') for r in caplog.records)

    def test_errors_are_logged_and_reraised(self, caplog):
        app = TestApp(LoggingMiddleware(broken_app))

        with caplog.at_level(logging.ERROR, logger='booking_api.middleware.logging_middleware'):
            with pytest.raises(RuntimeError):
                app.get('/ping')

        assert any('RuntimeError: boom' in r.getMessage() for r in caplog.records)


def test_create_app_missing_config(tmp_path):
    with pytest.raises(FileNotFoundError):
        create_app(str(tmp_path / 'missing.ini'))
