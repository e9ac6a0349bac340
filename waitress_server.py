from waitress import serve
from pyramid.paster import get_app, setup_logging
from dotenv import load_dotenv
import logging
import os
import sys

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))

log = logging.getLogger('booking_api.server')


def create_app(config_file=None):
    """Load the Pyramid app and its logging setup from the ini file."""
    config_file = config_file or os.getenv('BOOKING_CONFIG', os.path.join(BASE_DIR, 'development.ini'))
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")

    setup_logging(config_file)
    return get_app(config_file, 'main')


if __name__ == '__main__':
    host = os.getenv('BOOKING_HOST', '0.0.0.0')
    port = int(os.getenv('BOOKING_PORT', '6543'))

    try:
        app = create_app()
        log.info(f"Starting server on {host}:{port}")
        serve(app, host=host, port=port, threads=6)
    except KeyboardInterrupt:
        log.info("Server stopped")
    except Exception as e:
        log.exception(f"Server error: {e}")
        sys.exit(1)
