"""
Course categories and the booking information aggregated below them.
"""

import logging
from sqlalchemy import and_, func

from ..models import DBSession
from ..models.booking import (
    Module, CourseModule, Booking, BookingOption, BookingAnswer,
    STATUS_BOOKED, STATUS_WAITINGLIST, STATUS_RESERVED,
)
from ..models.category import CourseCategory
from ..models.context import Context, CONTEXT_COURSECAT, CONTEXT_MODULE
from .context_service import ContextService

log = logging.getLogger(__name__)


class CourseCategoriesService:

    def __init__(self, session=None, context_service=None):
        self.session = session or DBSession
        self.contexts = context_service or ContextService(self.session)

    def return_course_categories(self, categoryid=0, onlyparents=True):
        """Categories with their context id.

        When ``categoryid`` is 0 all categories are returned, otherwise only
        that one. ``onlyparents`` restricts the result to top-level categories.
        """
        query = (
            self.session.query(
                CourseCategory.id,
                CourseCategory.name,
                CourseCategory.description,
                CourseCategory.path,
                CourseCategory.coursecount,
                Context.id.label('contextid')
            )
            .join(Context, and_(
                Context.instanceid == CourseCategory.id,
                Context.contextlevel == CONTEXT_COURSECAT
            ))
        )

        if categoryid:
            query = query.filter(CourseCategory.id == categoryid)
        if onlyparents:
            query = query.filter(CourseCategory.parent == 0)

        return [row._asdict() for row in query.order_by(CourseCategory.id).all()]

    def return_booking_information_for_coursecategory(self, contextid):
        """Booking instances below a context with counts of their answers.

        One row per booking course module. Instances without options or
        answers report 0.
        """
        booked = self._answer_counts(STATUS_BOOKED, 'booked')
        waitinglist = self._answer_counts(STATUS_WAITINGLIST, 'waitinglist')
        reserved = self._answer_counts(STATUS_RESERVED, 'reserved')

        query = (
            self.session.query(
                CourseModule.id,
                Booking.name,
                Booking.intro,
                func.count(BookingOption.id).label('bookingoptions'),
                func.coalesce(func.sum(booked.c.booked), 0).label('booked'),
                func.coalesce(func.sum(waitinglist.c.waitinglist), 0).label('waitinglist'),
                func.coalesce(func.sum(reserved.c.reserved), 0).label('reserved')
            )
            .select_from(CourseModule)
            .join(Module, CourseModule.module == Module.id)
            .join(Booking, CourseModule.instance == Booking.id)
            .join(Context, and_(
                Context.instanceid == CourseModule.id,
                Context.contextlevel == CONTEXT_MODULE
            ))
            .outerjoin(BookingOption, BookingOption.bookingid == Booking.id)
            .outerjoin(booked, booked.c.optionid == BookingOption.id)
            .outerjoin(waitinglist, waitinglist.c.optionid == BookingOption.id)
            .outerjoin(reserved, reserved.c.optionid == BookingOption.id)
            .filter(Module.name == 'booking')
        )

        if contextid:
            parent = self.contexts.instance_by_id(contextid)
            query = query.filter(Context.path.like(f'{parent.path}/%'))

        rows = (
            query.group_by(CourseModule.id, Booking.name, Booking.intro)
            .order_by(CourseModule.id)
            .all()
        )
        return [
            {
                'id': row.id,
                'name': row.name,
                'intro': row.intro,
                'bookingoptions': int(row.bookingoptions or 0),
                'booked': int(row.booked or 0),
                'waitinglist': int(row.waitinglist or 0),
                'reserved': int(row.reserved or 0),
            }
            for row in rows
        ]

    def _answer_counts(self, status, label):
        return (
            self.session.query(
                BookingAnswer.optionid.label('optionid'),
                func.count(BookingAnswer.id).label(label)
            )
            .filter(BookingAnswer.waitinglist == status)
            .group_by(BookingAnswer.optionid)
            .subquery()
        )
