from pyramid.config import Configurator
from pyramid.events import NewRequest
from pyramid.httpexceptions import HTTPException
from sqlalchemy import engine_from_config
from .exceptions import ConfigurationError
from .models import DBSession, initialize_sql
from .middleware.logging_middleware import LoggingMiddleware
import logging
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

log = logging.getLogger(__name__)

DEFAULT_CORS_METHODS = 'POST,GET,DELETE,PUT,OPTIONS'
DEFAULT_CORS_HEADERS = 'Origin, Content-Type, Accept, Authorization'


def _cors_origin(request_origin):
    allowed_origins = os.getenv('CORS_ALLOW_ORIGIN', 'http://localhost:1234').split(',')
    return request_origin if request_origin in allowed_origins else allowed_origins[0]


def _cors_headers(request_origin):
    return {
        'Access-Control-Allow-Origin': _cors_origin(request_origin),
        'Access-Control-Allow-Methods': os.getenv('CORS_ALLOW_METHODS', DEFAULT_CORS_METHODS),
        'Access-Control-Allow-Headers': os.getenv('CORS_ALLOW_HEADERS', DEFAULT_CORS_HEADERS),
        'Access-Control-Allow-Credentials': os.getenv('CORS_ALLOW_CREDENTIALS', 'true'),
        'Access-Control-Max-Age': os.getenv('CORS_MAX_AGE', '1728000'),
    }


def add_cors_headers_response_callback(event):
    def cors_headers(request, response):
        response.headers.update(_cors_headers(request.headers.get('Origin', '')))
    event.request.add_response_callback(cors_headers)


def global_options_view(request):
    """Answer CORS preflight requests for every route"""
    response = request.response
    response.status = 200
    response.headers.update(_cors_headers(request.headers.get('Origin', '')))
    return response


def error_view(request):
    """Global error handler for unhandled exceptions"""
    from .exceptions import ErrorHandler

    exc = getattr(request, 'exception', None)
    # A failed flush leaves the session unusable for the next request
    DBSession.rollback()
    if exc:
        return ErrorHandler.create_error_response(request, exc)
    request.response.status = 404
    return {'error': True, 'message': 'Not found'}


def main(global_config, **settings):
    """This function returns a Pyramid WSGI application."""
    config = Configurator(settings=settings)
    config.include('pyramid_jinja2')

    config.add_subscriber(add_cors_headers_response_callback, NewRequest)
    config.add_notfound_view(global_options_view, request_method='OPTIONS')

    # HTTP errors raised by views, e.g. 401 from require_auth
    config.add_view(error_view, context=HTTPException, renderer='json')
    config.add_view(error_view, context=Exception, renderer='json')
    config.add_notfound_view(error_view, renderer='json')
    config.add_forbidden_view(error_view, renderer='json')

    # Database setup
    if not settings.get('sqlalchemy.url'):
        raise ConfigurationError('No database configured', config_key='sqlalchemy.url')
    engine = engine_from_config(settings, 'sqlalchemy.')
    initialize_sql(engine)

    config.add_route('health', '/health')
    config.add_route('login', '/auth/login')

    # Webservices
    config.add_route('ws_categories', '/webservice/categories')
    config.add_route('ws_optionformconfig_status', '/webservice/optionformconfig/status')
    config.add_route('ws_optionformconfig', '/webservice/optionformconfig')

    # Manager table
    config.add_route('manageusers', '/manageusers/{optionid}')
    config.add_route('manageusers_action', '/manageusers/{optionid}/action/{action}')

    # Pages
    config.add_route('optionformconfig_page', '/optionformconfig')
    config.add_route('edit_optiontemplate', '/booking/{id}/optiontemplates/{optionid}/edit')

    config.scan('.views')

    app = config.make_wsgi_app()
    log.info("Booking API configured")
    return LoggingMiddleware(app, {
        'log_requests': settings.get('booking.log_requests', True),
        'log_responses': settings.get('booking.log_responses', True),
        'slow_request_seconds': settings.get('booking.slow_request_seconds', 2.0),
    })
