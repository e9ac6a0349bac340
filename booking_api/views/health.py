from pyramid.view import view_config


@view_config(route_name='health', request_method='GET', renderer='json')
def health_check(request):
    """Health check endpoint that tests database connectivity"""
    try:
        from ..models import DBSession
        from sqlalchemy import text

        DBSession.execute(text("SELECT 1")).fetchone()

        db_status = "connected"
        db_message = "Database connection successful"

    except Exception as e:
        db_status = "disconnected"
        db_message = f"Database connection failed: {str(e)}"

    return {
        'status': 'healthy' if db_status == 'connected' else 'unhealthy',
        'service': 'Booking API',
        'version': '0.1.0',
        'database': {
            'status': db_status,
            'message': db_message
        }
    }
