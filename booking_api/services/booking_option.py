"""
Booking option operations used by the manager table and page controllers.
"""

import logging
import time

from ..models import DBSession
from ..models.booking import (
    Booking, BookingOption, BookingAnswer, CourseModule, Module,
    STATUS_BOOKED, STATUS_DELETED,
)
from ..models.context import CONTEXT_MODULE
from ..exceptions import ResourceNotFoundError, ValidationError
from .context_service import ContextService

log = logging.getLogger(__name__)


class BookingOptionService:

    def __init__(self, session=None, context_service=None):
        self.session = session or DBSession
        self.contexts = context_service or ContextService(self.session)

    def get_option(self, optionid):
        option = self.session.query(BookingOption).filter_by(id=optionid).first()
        if not option:
            raise ResourceNotFoundError(
                f'Booking option {optionid} not found',
                resource_type='booking_option',
                resource_id=optionid
            )
        return option

    def get_answer(self, answerid):
        answer = self.session.query(BookingAnswer).filter_by(id=answerid).first()
        if not answer:
            raise ResourceNotFoundError(
                f'Booking answer {answerid} not found',
                resource_type='booking_answer',
                resource_id=answerid
            )
        return answer

    def get_course_module_for_option(self, option):
        cm = (
            self.session.query(CourseModule)
            .join(Module, CourseModule.module == Module.id)
            .filter(Module.name == 'booking', CourseModule.instance == option.bookingid)
            .first()
        )
        if not cm:
            raise ResourceNotFoundError(
                f'No course module for booking {option.bookingid}',
                resource_type='course_module',
                resource_id=option.bookingid
            )
        return cm

    def get_booking_by_cmid(self, cmid):
        """Course module and booking instance for a course module id."""
        row = (
            self.session.query(CourseModule, Booking)
            .join(Module, CourseModule.module == Module.id)
            .join(Booking, CourseModule.instance == Booking.id)
            .filter(CourseModule.id == cmid, Module.name == 'booking')
            .first()
        )
        if not row:
            raise ValidationError('Course module id is incorrect', field='id', value=cmid)
        return row

    def module_context_for_option(self, option):
        cm = self.get_course_module_for_option(option)
        return self.contexts.instance(CONTEXT_MODULE, cm.id)

    def get_template(self, optionid):
        """Option templates are options not attached to a booking instance."""
        template = (
            self.session.query(BookingOption)
            .filter_by(id=optionid, bookingid=0)
            .first()
        )
        if not template:
            raise ResourceNotFoundError(
                'This booking template does not exist',
                resource_type='option_template',
                resource_id=optionid
            )
        return template

    def count_booked(self, optionid):
        return (
            self.session.query(BookingAnswer)
            .filter_by(optionid=optionid, waitinglist=STATUS_BOOKED)
            .count()
        )

    def is_fully_booked(self, option):
        if not option.maxanswers:
            return False
        return self.count_booked(option.id) >= option.maxanswers

    def confirm_answer(self, answer):
        """Move an answer from the waiting list onto the booked list."""
        answer.waitinglist = STATUS_BOOKED
        answer.timemodified = int(time.time())
        log.info(f"Confirmed booking answer {answer.id} of user {answer.userid} for option {answer.optionid}")
        return answer

    def delete_answer(self, answer):
        answer.waitinglist = STATUS_DELETED
        answer.timemodified = int(time.time())
        log.info(f"Deleted booking answer {answer.id} of user {answer.userid} for option {answer.optionid}")
        return answer
