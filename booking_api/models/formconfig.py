from sqlalchemy import Column, Integer, String, Text, ForeignKey
from . import Base


class BookingFormConfig(Base):
    """Stored field configuration of the option form for one context and capability."""
    __tablename__ = 'booking_form_config'

    id = Column(Integer, primary_key=True)
    area = Column(String(100), nullable=False)
    capability = Column(String(255), nullable=False)
    contextid = Column(Integer, ForeignKey('context.id'), nullable=False)
    json = Column(Text)  # serialized list of field entries

    def to_dict(self):
        return {
            'id': self.id,
            'area': self.area,
            'capability': self.capability,
            'contextid': self.contextid,
            'json': self.json,
        }
