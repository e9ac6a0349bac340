from pyramid.view import view_config
from pyramid.httpexceptions import HTTPBadRequest
import logging
from ..models import DBSession
from ..models.user import User
from ..auth import AuthService
from ..exceptions import AuthenticationError, handle_errors

log = logging.getLogger(__name__)


@view_config(route_name='login', request_method='POST', renderer='json')
@handle_errors
def login(request):
    """User login endpoint"""
    try:
        data = request.json_body
    except ValueError:
        raise HTTPBadRequest('Invalid JSON')

    username = data.get('username')
    password = data.get('password')

    if not username or not password:
        raise HTTPBadRequest('Username and password required')

    user = DBSession.query(User).filter_by(username=username).first()

    if not user or not user.check_password(password):
        log.warning(f"Failed login for {username!r}")
        raise AuthenticationError('Invalid credentials')

    if not user.active:
        raise AuthenticationError('Account is deactivated')

    token = AuthService.generate_token(user.id, user.username)
    log.info(f"User {user.id} logged in")

    return {
        'token': token,
        'user': user.to_dict()
    }
