from pyramid.view import view_config
from pyramid.httpexceptions import HTTPBadRequest
import logging

from ..auth import require_auth
from ..exceptions import handle_errors
from ..models.booking import STATUS_BY_NAME
from ..schemas import TableActionParamsSchema, load_params
from ..services.manageusers_table import ManageUsersTable

log = logging.getLogger(__name__)


def _table(request):
    try:
        optionid = int(request.matchdict['optionid'])
    except (KeyError, ValueError):
        raise HTTPBadRequest('Invalid option id')

    statusname = request.params.get('status', 'waitinglist')
    if statusname not in STATUS_BY_NAME:
        raise HTTPBadRequest(f'Unknown status {statusname}')

    return ManageUsersTable(optionid, request.user, status=STATUS_BY_NAME[statusname])


@view_config(route_name='manageusers', request_method='GET', renderer='json')
@handle_errors
@require_auth
def list_rows(request):
    """
    GET /manageusers/{optionid}?status=waitinglist

    Rows of the manager table, ordered by timemodified.
    """
    table = _table(request)
    return {'optionid': table.optionid, 'rows': table.rows()}


@view_config(route_name='manageusers_action', request_method='POST', renderer='json')
@handle_errors
@require_auth
def table_action(request):
    """
    POST /manageusers/{optionid}/action/{action}

    Body: {"id": int, "data": "<json string>"}. Permission failures come back
    as {"success": 0, ...} with status 200.
    """
    table = _table(request)
    try:
        body = request.json_body
    except ValueError:
        raise HTTPBadRequest('Invalid JSON')

    params = load_params(TableActionParamsSchema(), body)
    result = table.execute_action(request.matchdict['action'], params['id'], params['data'])

    if not result.success:
        log.warning(f"Table action {request.matchdict['action']} refused for user {request.user.id}: {result.message}")
    return result.to_dict()
