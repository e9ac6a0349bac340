"""
Option form field configuration.

Decides per context and capability which fields of the booking option form
are shown. A configuration saved for a context applies to every context
below it unless a deeper context has its own record. Without any record a
default configuration is derived from the field registry.
"""

import json
import logging
from marshmallow import ValidationError as MarshmallowValidationError

from ..models import DBSession
from ..models.context import Context
from ..models.formconfig import BookingFormConfig
from ..schemas import FieldEntrySchema
from ..exceptions import DatabaseTransaction
from .context_service import ContextService
from .option_fields import get_registered_fields

log = logging.getLogger(__name__)

AREA_OPTION = 'option'

NOCONFIGURATION = 0
SHOWFIELD = 1
HIDEFIELD = 2

CAPABILITIES = [
    'mod/booking:expertoptionform',
    'mod/booking:reducedoptionform1',
    'mod/booking:reducedoptionform2',
    'mod/booking:reducedoptionform3',
    'mod/booking:reducedoptionform4',
    'mod/booking:reducedoptionform5',
]


class OptionFormConfigService:

    def __init__(self, session=None, context_service=None, fields=None):
        self.session = session or DBSession
        self.contexts = context_service or ContextService(self.session)
        self._fields = fields

    @property
    def fields(self):
        if self._fields is None:
            return get_registered_fields()
        return sorted(self._fields, key=lambda f: f.id)

    def return_configured_fields(self, contextid=0):
        """Effective configuration of every capability, for the webservice."""
        if contextid:
            context = self.contexts.instance_by_id(contextid)
        else:
            context = self.contexts.system()

        return [
            self.return_configured_fields_for_capability(context.id, capability)
            for capability in CAPABILITIES
        ]

    def save_configured_fields(self, contextid, capability, json_payload):
        """Store the configuration for exactly this context, replacing any existing one."""
        with DatabaseTransaction(self.session):
            record = (
                self.session.query(BookingFormConfig)
                .filter_by(area=AREA_OPTION, capability=capability, contextid=contextid)
                .first()
            )
            if record:
                record.json = json_payload
                log.info(f"Updated form config {record.id} for {capability} in context {contextid}")
            else:
                record = BookingFormConfig(
                    area=AREA_OPTION,
                    capability=capability,
                    contextid=contextid,
                    json=json_payload
                )
                self.session.add(record)
                log.info(f"Created form config for {capability} in context {contextid}")

        return 'success'

    def return_configured_fields_for_capability(self, contextid, capability):
        context = self.contexts.instance_by_id(contextid)

        # A config may live anywhere on the path, e.g. on the course category.
        # The deepest one wins.
        record = (
            self.session.query(BookingFormConfig)
            .join(Context, BookingFormConfig.contextid == Context.id)
            .filter(
                BookingFormConfig.area == AREA_OPTION,
                BookingFormConfig.capability == capability,
                BookingFormConfig.contextid.in_(context.ancestor_ids())
            )
            .order_by(Context.depth.desc(), BookingFormConfig.id.desc())
            .first()
        )

        if record:
            payload = record.json
        else:
            payload = json.dumps(self.default_configuration())

        return {
            'id': contextid,
            'capability': capability,
            'json': payload,
        }

    def default_configuration(self):
        return [
            {
                'id': f.id,
                'classname': f.classname,
                'checked': 1 if f.is_standard else 0,
                'necessary': 1 if f.is_necessary else 0,
                'incompatible': list(f.incompatible),
            }
            for f in self.fields
        ]

    def return_status_for_field(self, fieldid, userid, contextid, capability):
        stored = self.return_configured_fields_for_capability(contextid, capability)

        entries = parse_configuration(stored['json'])
        if entries is None:
            log.warning(f"Unreadable form config for {capability} in context {contextid}")
            return NOCONFIGURATION

        if any(entry['id'] == fieldid and entry['checked'] == 1 for entry in entries):
            return SHOWFIELD
        return HIDEFIELD


def parse_configuration(payload):
    """Parse a stored payload into field entries, or None if it is not one."""
    try:
        data = json.loads(payload or '')
    except (TypeError, ValueError):
        return None

    if not isinstance(data, list):
        return None

    try:
        return FieldEntrySchema(many=True).load(data, unknown='exclude')
    except MarshmallowValidationError:
        return None
