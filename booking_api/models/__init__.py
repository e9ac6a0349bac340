from sqlalchemy import event
from sqlalchemy.orm import declarative_base, scoped_session, sessionmaker
import logging

log = logging.getLogger(__name__)

DBSession = scoped_session(sessionmaker())
Base = declarative_base()


def initialize_sql(engine):
    # Sessions created before configure() would keep the old bind
    DBSession.remove()
    DBSession.configure(bind=engine)
    Base.metadata.create_all(engine)

    # Add event listeners for connection monitoring
    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_connection, connection_record):
        log.debug("Database connection established")

    @event.listens_for(engine, "close")
    def receive_close(dbapi_connection, connection_record):
        log.debug("Database connection closed")


# Import all models so create_all() sees every table
from .context import Context  # noqa: E402,F401
from .user import User, CapabilityAssignment  # noqa: E402,F401
from .category import CourseCategory  # noqa: E402,F401
from .booking import (  # noqa: E402,F401
    Module, CourseModule, Booking, BookingOption, BookingAnswer,
)
from .formconfig import BookingFormConfig  # noqa: E402,F401
