"""
Manager table over the answers of one booking option.

Rows are the answers in one waiting-list state, ordered by timemodified so
that reordering is a matter of rewriting timestamps. Row actions follow the
transmit-action pattern: the frontend posts the method name plus a JSON
string, the table answers with a success payload. For row actions a missing
capability is a soft failure reported in the payload; listing the rows
without it raises AuthorizationError.
"""

import json
import logging
from dataclasses import dataclass

from ..models import DBSession
from ..models.booking import BookingAnswer, STATUS_WAITINGLIST, STATUS_NAMES
from ..models.user import User
from ..exceptions import DatabaseTransaction, ResourceNotFoundError, ValidationError
from .booking_option import BookingOptionService
from .capability_service import CapabilityService, CAP_BOOK_FOR_OTHERS

log = logging.getLogger(__name__)


@dataclass
class ActionResult:
    success: bool
    message: str
    reload: bool = False

    def to_dict(self):
        result = {
            'success': 1 if self.success else 0,
            'message': self.message,
        }
        if self.reload:
            result['reload'] = 1
        return result


def transform_actionbuttons(buttons):
    """Turn each button's data dict into key/value pairs for the template."""
    for button in buttons:
        button['data'] = [{'key': k, 'value': v} for k, v in button.get('data', {}).items()]
    return buttons


class ManageUsersTable:

    ACTIONS = ('reorderrows', 'confirmbooking', 'deletebooking')

    def __init__(self, optionid, user, status=STATUS_WAITINGLIST, session=None,
                 option_service=None, capability_service=None):
        self.optionid = optionid
        self.user = user
        self.status = status
        self.session = session or DBSession
        self.options = option_service or BookingOptionService(self.session)
        self.capabilities = capability_service or CapabilityService(self.session)

    def query_rows(self):
        """Answers of the table's option and status, oldest first, keyed by answer id."""
        rows = (
            self.session.query(
                BookingAnswer.id,
                BookingAnswer.optionid,
                BookingAnswer.userid,
                BookingAnswer.waitinglist,
                BookingAnswer.timemodified,
                User.username,
                User.firstname,
                User.lastname,
                User.email
            )
            .join(User, BookingAnswer.userid == User.id)
            .filter(BookingAnswer.optionid == self.optionid, BookingAnswer.waitinglist == self.status)
            .order_by(BookingAnswer.timemodified, BookingAnswer.id)
            .all()
        )
        return {row.id: row for row in rows}

    def rows(self):
        option = self.options.get_option(self.optionid)
        context = self.options.module_context_for_option(option)
        self.capabilities.require_capability(CAP_BOOK_FOR_OTHERS, context, self.user)

        fully_booked = self.options.is_fully_booked(option)
        return [
            {
                'id': values.id,
                'dragable': self.col_dragable(values),
                'name': self.col_name(values),
                'action': self.col_action(values, fully_booked=fully_booked),
            }
            for values in self.query_rows().values()
        ]

    def col_dragable(self, values):
        return {'sortable': True, 'id': values.id}

    def col_name(self, values):
        return {
            'id': values.id,
            'firstname': values.firstname,
            'lastname': values.lastname,
            'email': values.email,
            'status': STATUS_NAMES.get(values.waitinglist, 'unknown'),
            'userprofilelink': f'/user/profile.php?id={values.userid}',
        }

    def col_action(self, values, fully_booked=None):
        if fully_booked is None:
            option = self.options.get_option(values.optionid)
            fully_booked = self.options.is_fully_booked(option)

        buttons = []
        if not fully_booked:
            buttons.append({
                'label': '',
                'class': 'btn btn-nolabel',
                'href': '#',
                'iclass': 'fa fa-check',
                'id': values.id,
                'name': values.id,
                'methodname': 'confirmbooking',
                'data': {
                    'id': values.id,
                    'labelcolumn': 'username',
                    'titlestring': 'confirmbooking',
                    'bodystring': 'confirmbookinglong',
                    'submitbuttonstring': 'booking:choose',
                    'component': 'mod_booking',
                },
            })

        buttons.append({
            'label': '',
            'class': '',
            'href': '#',
            'iclass': 'fa fa-trash',
            'id': values.id,
            'name': values.id,
            'methodname': 'deletebooking',
            'data': {
                'id': values.id,
                'labelcolumn': 'username',
                'titlestring': 'deletebooking',
                'bodystring': 'deletebookinglong',
                'submitbuttonstring': 'delete',
                'component': 'mod_booking',
            },
        })

        return transform_actionbuttons(buttons)

    def execute_action(self, action, id, data):
        """Dispatch a transmitted action to its ``action_<name>`` method."""
        if action not in self.ACTIONS:
            raise ValidationError(f'Unknown table action {action}', field='action', value=action)
        return getattr(self, f'action_{action}')(id, data)

    def action_reorderrows(self, id, data):
        ids = _reorder_ids(data)

        option = self.options.get_option(self.optionid)
        context = self.options.module_context_for_option(option)
        if not self.capabilities.has_capability(CAP_BOOK_FOR_OTHERS, context, self.user):
            return ActionResult(False, 'No right to reorder')

        rawdata = self.query_rows()

        # Rows are ordered by timemodified, so the first id sets the reference
        # and every following row gets one second more.
        newtimemodified = None
        with DatabaseTransaction(self.session):
            for answerid in ids:
                if answerid not in rawdata:
                    raise ResourceNotFoundError(
                        f'Answer {answerid} is not part of this table',
                        resource_type='booking_answer',
                        resource_id=answerid
                    )
                if newtimemodified is None:
                    newtimemodified = rawdata[answerid].timemodified
                else:
                    newtimemodified += 1

                self.session.query(BookingAnswer).filter_by(id=answerid).update(
                    {'timemodified': newtimemodified}
                )

        log.info(f"Reordered {len(ids)} answers of option {self.optionid}")
        return ActionResult(True, 'Rows reordered', reload=True)

    def action_confirmbooking(self, id, data):
        answer = self.options.get_answer(_answer_id(data))
        option = self.options.get_option(answer.optionid)
        context = self.options.module_context_for_option(option)

        if not self.capabilities.has_capability(CAP_BOOK_FOR_OTHERS, context, self.user):
            return ActionResult(False, 'No right to book')

        with DatabaseTransaction(self.session):
            self.options.confirm_answer(answer)
        return ActionResult(True, 'Booking confirmed', reload=True)

    def action_deletebooking(self, id, data):
        answer = self.options.get_answer(_answer_id(data))
        option = self.options.get_option(answer.optionid)
        context = self.options.module_context_for_option(option)

        if not self.capabilities.has_capability(CAP_BOOK_FOR_OTHERS, context, self.user):
            return ActionResult(False, 'No right to book')

        with DatabaseTransaction(self.session):
            self.options.delete_answer(answer)
        return ActionResult(True, 'Booking deleted', reload=True)


def _decode(data):
    try:
        decoded = json.loads(data)
    except (TypeError, ValueError) as e:
        raise ValidationError('Action data is not valid JSON', field='data') from e
    if not isinstance(decoded, dict):
        raise ValidationError('Action data must be a JSON object', field='data')
    return decoded


def _answer_id(data):
    answerid = _decode(data).get('id')
    try:
        return int(answerid)
    except (TypeError, ValueError) as e:
        raise ValidationError('Action data needs an answer id', field='id', value=answerid) from e


def _reorder_ids(data):
    ids = _decode(data).get('ids')
    if not isinstance(ids, list):
        raise ValidationError('Reordering needs a list of ids', field='ids')
    try:
        return [int(answerid) for answerid in ids]
    except (TypeError, ValueError) as e:
        raise ValidationError('Reordering ids must be integers', field='ids', value=ids) from e
