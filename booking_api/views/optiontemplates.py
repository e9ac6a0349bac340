from pyramid.view import view_config
from pyramid.httpexceptions import HTTPBadRequest
import logging

from ..auth import require_auth
from ..models.context import CONTEXT_MODULE
from ..services.booking_option import BookingOptionService
from ..services.capability_service import CapabilityService, CAP_MANAGE_OPTION_TEMPLATES
from ..services.context_service import ContextService
from ..services.optionformconfig import CAPABILITIES, OptionFormConfigService, parse_configuration

log = logging.getLogger(__name__)


def _required_int(source, name):
    value = source.get(name)
    if value is None:
        raise HTTPBadRequest(f'{name} is required')
    try:
        return int(value)
    except ValueError:
        raise HTTPBadRequest(f'{name} must be an integer')


@view_config(route_name='edit_optiontemplate', request_method='GET',
             renderer='booking_api:templates/edit_optiontemplate.jinja2')
@require_auth
def edit_optiontemplate(request):
    """
    GET /booking/{id}/optiontemplates/{optionid}/edit

    Edit form of an option template. ``id`` is the course module id.
    """
    cmid = _required_int(request.matchdict, 'id')
    optionid = _required_int(request.matchdict, 'optionid')

    options = BookingOptionService()
    cm, booking = options.get_booking_by_cmid(cmid)

    context = ContextService().instance(CONTEXT_MODULE, cm.id)
    CapabilityService().require_capability(CAP_MANAGE_OPTION_TEMPLATES, context, request.user)

    template = options.get_template(optionid)

    defaultvalues = template.to_dict()
    defaultvalues.update({
        'optionid': optionid,
        'bookingid': 0,
        'bookingname': booking.name,
        'id': cm.id,
    })

    # The form shows the fields of the expert configuration for this module
    stored = OptionFormConfigService().return_configured_fields_for_capability(context.id, CAPABILITIES[0])
    formfields = [f for f in parse_configuration(stored['json']) or [] if f['checked'] == 1]

    log.info(f"User {request.user.id} opened option template {optionid} in course module {cm.id}")
    return {
        'title': booking.name,
        'heading': booking.name,
        'defaultvalues': defaultvalues,
        'formfields': formfields,
        'returnurl': request.route_path('edit_optiontemplate', id=cm.id, optionid=optionid),
    }
