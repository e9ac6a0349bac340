from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index
from . import Base


# booking_answers.waitinglist values
STATUS_BOOKED = 0
STATUS_WAITINGLIST = 1
STATUS_RESERVED = 2
STATUS_DELETED = 5

STATUS_NAMES = {
    STATUS_BOOKED: 'booked',
    STATUS_WAITINGLIST: 'waitinglist',
    STATUS_RESERVED: 'reserved',
    STATUS_DELETED: 'deleted',
}
STATUS_BY_NAME = {name: status for status, name in STATUS_NAMES.items()}


class Module(Base):
    __tablename__ = 'modules'

    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)


class CourseModule(Base):
    __tablename__ = 'course_modules'

    id = Column(Integer, primary_key=True)
    course = Column(Integer, nullable=False, default=0)
    module = Column(Integer, ForeignKey('modules.id'), nullable=False)
    instance = Column(Integer, nullable=False)  # id in the module's own table


class Booking(Base):
    __tablename__ = 'booking'

    id = Column(Integer, primary_key=True)
    course = Column(Integer, nullable=False, default=0)
    name = Column(String(255), nullable=False)
    intro = Column(Text)

    def to_dict(self):
        return {
            'id': self.id,
            'course': self.course,
            'name': self.name,
            'intro': self.intro,
        }


class BookingOption(Base):
    __tablename__ = 'booking_options'

    id = Column(Integer, primary_key=True)
    bookingid = Column(Integer, nullable=False, default=0)  # 0 marks an option template
    text = Column(String(255), nullable=False)
    description = Column(Text)
    maxanswers = Column(Integer, nullable=False, default=0)  # 0 means unlimited
    maxoverbooking = Column(Integer, nullable=False, default=0)
    timemodified = Column(Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'bookingid': self.bookingid,
            'text': self.text,
            'description': self.description,
            'maxanswers': self.maxanswers,
            'maxoverbooking': self.maxoverbooking,
            'timemodified': self.timemodified,
        }


class BookingAnswer(Base):
    __tablename__ = 'booking_answers'
    __table_args__ = (
        Index('ix_booking_answers_option_status', 'optionid', 'waitinglist'),
    )

    id = Column(Integer, primary_key=True)
    optionid = Column(Integer, ForeignKey('booking_options.id'), nullable=False)
    userid = Column(Integer, ForeignKey('users.id'), nullable=False)
    waitinglist = Column(Integer, nullable=False, default=STATUS_BOOKED)
    timecreated = Column(Integer, nullable=False, default=0)
    timemodified = Column(Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'optionid': self.optionid,
            'userid': self.userid,
            'waitinglist': self.waitinglist,
            'timecreated': self.timecreated,
            'timemodified': self.timemodified,
        }
