"""
Shared fixtures: an in-memory database and a small site to run against.

The site looks like this (contexts in brackets):

    system [1]
    ├── Sports (top-level)            coursecount 3
    │   └── Swimming                  coursecount 2
    │       └── course 1
    │           ├── booking "Summer courses"   options: pool (max 2), lake (unlimited)
    │           └── forum (not a booking)
    └── Languages (top-level)         coursecount 1
        └── course 2
            └── booking "Empty booking"        no options

Answers on "pool": booked (anna), waiting list (ben at t=100, clara at t=200),
reserved (dora), deleted (emil). On "lake": booked (ben).
"""

import pytest
from types import SimpleNamespace
from sqlalchemy import create_engine

from booking_api.models import DBSession, Base, initialize_sql
from booking_api.models.booking import (
    Module, CourseModule, Booking, BookingOption, BookingAnswer,
    STATUS_BOOKED, STATUS_WAITINGLIST, STATUS_RESERVED, STATUS_DELETED,
)
from booking_api.models.category import CourseCategory
from booking_api.models.context import CONTEXT_SYSTEM, CONTEXT_COURSECAT, CONTEXT_COURSE, CONTEXT_MODULE
from booking_api.models.user import User
from booking_api.services.capability_service import (
    CapabilityService, CAP_SITE_CONFIG, CAP_BOOK_FOR_OTHERS,
    CAP_MANAGE_OPTION_TEMPLATES, CAP_DASHBOARD_VIEW,
)
from booking_api.services.context_service import ContextService

ADMIN_PASSWORD = 'admin-secret'


def _user(session, username, **kwargs):
    user = User(username=username, email=f'{username}@example.com',
                firstname=username.capitalize(), lastname='Tester', **kwargs)
    session.add(user)
    session.flush()
    return user


def _category(session, contexts, name, parent_category, parent_context, coursecount):
    category = CourseCategory(
        name=name,
        description=f'{name} courses',
        parent=parent_category.id if parent_category else 0,
        coursecount=coursecount
    )
    session.add(category)
    session.flush()
    prefix = parent_category.path if parent_category else ''
    category.path = f'{prefix}/{category.id}'
    context = contexts.create(CONTEXT_COURSECAT, category.id, parent_context)
    return category, context


def _booking_module(session, contexts, module, course_context, name):
    booking = Booking(course=course_context.instanceid, name=name, intro=f'{name} intro')
    session.add(booking)
    session.flush()
    cm = CourseModule(course=course_context.instanceid, module=module.id, instance=booking.id)
    session.add(cm)
    session.flush()
    context = contexts.create(CONTEXT_MODULE, cm.id, course_context)
    return booking, cm, context


def _answer(session, option, user, status, timemodified=0):
    answer = BookingAnswer(optionid=option.id, userid=user.id, waitinglist=status,
                           timecreated=timemodified, timemodified=timemodified)
    session.add(answer)
    session.flush()
    return answer


def build_site_data(session):
    contexts = ContextService(session)
    capabilities = CapabilityService(session)

    system = contexts.create(CONTEXT_SYSTEM, 0)

    admin = _user(session, 'admin', is_siteadmin=True)
    admin.set_password(ADMIN_PASSWORD)
    manager = _user(session, 'manager')
    configurator = _user(session, 'configurator')
    outsider = _user(session, 'outsider')
    anna = _user(session, 'anna')
    ben = _user(session, 'ben')
    clara = _user(session, 'clara')
    dora = _user(session, 'dora')
    emil = _user(session, 'emil')

    booking_module = Module(name='booking')
    forum_module = Module(name='forum')
    session.add_all([booking_module, forum_module])
    session.flush()

    sports, sports_ctx = _category(session, contexts, 'Sports', None, system, 3)
    swimming, swimming_ctx = _category(session, contexts, 'Swimming', sports, sports_ctx, 2)
    languages, languages_ctx = _category(session, contexts, 'Languages', None, system, 1)

    course1_ctx = contexts.create(CONTEXT_COURSE, 1, swimming_ctx)
    course2_ctx = contexts.create(CONTEXT_COURSE, 2, languages_ctx)

    summer, summer_cm, summer_ctx = _booking_module(session, contexts, booking_module, course1_ctx, 'Summer courses')
    empty, empty_cm, empty_ctx = _booking_module(session, contexts, booking_module, course2_ctx, 'Empty booking')

    # A forum pointing at the same instance id must not be counted
    forum_cm = CourseModule(course=1, module=forum_module.id, instance=summer.id)
    session.add(forum_cm)
    session.flush()
    contexts.create(CONTEXT_MODULE, forum_cm.id, course1_ctx)

    pool = BookingOption(bookingid=summer.id, text='Pool', maxanswers=2)
    lake = BookingOption(bookingid=summer.id, text='Lake', maxanswers=0)
    template = BookingOption(bookingid=0, text='Template option', description='Reusable', maxanswers=10)
    session.add_all([pool, lake, template])
    session.flush()

    booked_anna = _answer(session, pool, anna, STATUS_BOOKED, 50)
    waiting_ben = _answer(session, pool, ben, STATUS_WAITINGLIST, 100)
    waiting_clara = _answer(session, pool, clara, STATUS_WAITINGLIST, 200)
    reserved_dora = _answer(session, pool, dora, STATUS_RESERVED, 300)
    deleted_emil = _answer(session, pool, emil, STATUS_DELETED, 400)
    _answer(session, lake, ben, STATUS_BOOKED, 500)

    capabilities.assign(manager.id, CAP_DASHBOARD_VIEW, sports_ctx)
    capabilities.assign(manager.id, CAP_BOOK_FOR_OTHERS, swimming_ctx)
    capabilities.assign(manager.id, CAP_MANAGE_OPTION_TEMPLATES, summer_ctx)
    capabilities.assign(configurator.id, CAP_SITE_CONFIG, system)

    site = SimpleNamespace(
        system_ctx=system.id,
        sports=sports.id, sports_ctx=sports_ctx.id,
        swimming=swimming.id, swimming_ctx=swimming_ctx.id,
        languages=languages.id, languages_ctx=languages_ctx.id,
        course1_ctx=course1_ctx.id,
        summer=summer.id, summer_cm=summer_cm.id, summer_ctx=summer_ctx.id,
        empty=empty.id, empty_cm=empty_cm.id, empty_ctx=empty_ctx.id,
        forum_cm=forum_cm.id,
        pool=pool.id, lake=lake.id, template=template.id,
        admin=admin.id, manager=manager.id, configurator=configurator.id, outsider=outsider.id,
        booked_anna=booked_anna.id, waiting_ben=waiting_ben.id, waiting_clara=waiting_clara.id,
        reserved_dora=reserved_dora.id, deleted_emil=deleted_emil.id,
    )
    session.commit()
    return site


@pytest.fixture
def db_session():
    """Fresh in-memory database bound to the scoped session"""
    engine = create_engine('sqlite://')
    initialize_sql(engine)
    yield DBSession
    DBSession.rollback()
    DBSession.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def site(db_session):
    return build_site_data(db_session)


@pytest.fixture
def get_user(db_session):
    def _get(userid):
        return db_session.query(User).filter_by(id=userid).one()
    return _get
