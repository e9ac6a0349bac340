"""
Option form configuration: webservices and the admin page.
"""

from pyramid.view import view_config
import logging

from ..auth import require_auth
from ..exceptions import handle_errors
from ..schemas import (
    ConfiguredFieldsParamsSchema, SaveConfiguredFieldsParamsSchema,
    FieldStatusParamsSchema, ConfiguredFieldsSchema, load_params,
)
from ..services.capability_service import CapabilityService, CAP_SITE_CONFIG
from ..services.context_service import ContextService
from ..services.optionformconfig import (
    OptionFormConfigService, CAPABILITIES, parse_configuration,
    NOCONFIGURATION, SHOWFIELD, HIDEFIELD,
)

log = logging.getLogger(__name__)

STATUS_NAMES = {
    NOCONFIGURATION: 'noconfiguration',
    SHOWFIELD: 'show',
    HIDEFIELD: 'hide',
}


def _require_config_capability(request, contextid):
    contexts = ContextService()
    context = contexts.instance_by_id(contextid) if contextid else contexts.system()
    CapabilityService().require_capability(CAP_SITE_CONFIG, context, request.user)
    return context


@view_config(route_name='ws_optionformconfig', request_method='GET', renderer='json')
@handle_errors
@require_auth
def get_configured_fields(request):
    """
    GET /webservice/optionformconfig?contextid=<int>

    Effective field configuration for every capability. 0 is the system context.
    """
    params = load_params(ConfiguredFieldsParamsSchema(), request.params)
    context = _require_config_capability(request, params['contextid'])

    result = OptionFormConfigService().return_configured_fields(context.id)
    return ConfiguredFieldsSchema(many=True).dump(result)


@view_config(route_name='ws_optionformconfig', request_method='POST', renderer='json')
@handle_errors
@require_auth
def save_configured_fields(request):
    """
    POST /webservice/optionformconfig

    Body: {"contextid": int, "capability": str, "json": str}
    """
    try:
        data = request.json_body
    except ValueError:
        data = request.POST

    params = load_params(SaveConfiguredFieldsParamsSchema(), data)
    context = _require_config_capability(request, params['contextid'])

    status = OptionFormConfigService().save_configured_fields(
        context.id, params['capability'], params['json']
    )
    log.info(f"User {request.user.id} saved form config for {params['capability']} in context {context.id}")
    return {'status': status}


@view_config(route_name='ws_optionformconfig_status', request_method='GET', renderer='json')
@handle_errors
@require_auth
def get_field_status(request):
    """
    GET /webservice/optionformconfig/status?fieldid=&contextid=&capability=[&userid=]
    """
    params = load_params(FieldStatusParamsSchema(), request.params)
    context = _require_config_capability(request, params['contextid'])

    status = OptionFormConfigService().return_status_for_field(
        params['fieldid'],
        params['userid'] or request.user.id,
        context.id,
        params['capability']
    )
    return {
        'fieldid': params['fieldid'],
        'status': status,
        'statusname': STATUS_NAMES[status],
    }


@view_config(route_name='optionformconfig_page', request_method='GET',
             renderer='booking_api:templates/optionformconfig.jinja2')
@require_auth
def optionformconfig_page(request):
    """Admin page listing each capability with its effective field configuration."""
    contexts = ContextService()
    system = contexts.system()
    CapabilityService().require_capability(CAP_SITE_CONFIG, system, request.user)

    service = OptionFormConfigService()
    roles = []
    for capability in CAPABILITIES:
        stored = service.return_configured_fields_for_capability(system.id, capability)
        roles.append({
            'capability': capability,
            'fields': parse_configuration(stored['json']) or [],
        })

    return {
        'title': 'Booking option form configuration',
        'contextid': system.id,
        'roles': roles,
    }
