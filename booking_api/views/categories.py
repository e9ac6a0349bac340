"""
Category dashboard webservice.

GET /webservice/categories?coursecategoryid=<int>

Returns the course categories the caller may view, each with the booking
instances below it. Without a category id a summary row comes first.
"""

from pyramid.view import view_config
import json
import logging
import os

from ..auth import require_auth
from ..exceptions import handle_errors
from ..schemas import CategoryParamsSchema, CategorySummarySchema, BookingSummarySchema, load_params
from ..services.capability_service import CapabilityService, CAP_DASHBOARD_VIEW
from ..services.context_service import ContextService
from ..services.coursecategories import CourseCategoriesService

log = logging.getLogger(__name__)

DASHBOARD_SUMMARY = 'Summary'
DASHBOARD_SUMMARY_DESC = 'Booking summary over all course categories'


def dashboard_capability(request=None):
    settings = getattr(getattr(request, 'registry', None), 'settings', None) or {}
    return (
        settings.get('booking.dashboard_capability')
        or os.getenv('BOOKING_DASHBOARD_CAPABILITY')
        or CAP_DASHBOARD_VIEW
    )


def get_parent_categories(user, coursecategoryid=0, capability=CAP_DASHBOARD_VIEW):
    categories = CourseCategoriesService()
    contexts = ContextService()
    capabilities = CapabilityService()

    records = categories.return_course_categories(coursecategoryid)

    returnarray = []
    if not coursecategoryid:
        returnarray.append({
            'id': 0,
            'name': DASHBOARD_SUMMARY,
            'contextid': 1,
            'coursecount': 0,
            'description': DASHBOARD_SUMMARY_DESC,
            'path': '',
            'json': '',
        })

    coursecount = 0
    for record in records:
        context = contexts.instance_by_id(record['contextid'])
        if not capabilities.has_capability(capability, context, user):
            continue

        coursecount += record['coursecount'] or 0

        bookingoptions = categories.return_booking_information_for_coursecategory(record['contextid'])
        if bookingoptions:
            record['json'] = json.dumps({
                'booking': BookingSummarySchema(many=True).dump(bookingoptions),
            })

        returnarray.append(record)

    # The summary row carries the combined course count
    if not coursecategoryid:
        returnarray[0]['coursecount'] = coursecount

    return CategorySummarySchema(many=True).dump(returnarray)


@view_config(route_name='ws_categories', request_method='GET', renderer='json')
@handle_errors
@require_auth
def parent_categories(request):
    params = load_params(CategoryParamsSchema(), request.params)

    result = get_parent_categories(
        request.user,
        params['coursecategoryid'],
        capability=dashboard_capability(request)
    )
    log.info(f"Returned {len(result)} categories to user {request.user.id}")
    return result
