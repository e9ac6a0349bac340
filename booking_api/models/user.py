from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from . import Base
import bcrypt


class User(Base):
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    username = Column(String(100), unique=True, nullable=False)
    email = Column(String(255), nullable=False)
    firstname = Column(String(100), nullable=False, default='')
    lastname = Column(String(100), nullable=False, default='')
    password_hash = Column(String(255))
    active = Column(Boolean, default=True)
    is_siteadmin = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def set_password(self, password):
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash:
            return False
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'firstname': self.firstname,
            'lastname': self.lastname,
            'active': self.active,
            'is_siteadmin': self.is_siteadmin,
        }


class CapabilityAssignment(Base):
    """Grants a capability to a user at a context and all contexts below it."""
    __tablename__ = 'capability_assignments'
    __table_args__ = (
        UniqueConstraint('userid', 'contextid', 'capability', name='uq_capability_assignment'),
    )

    id = Column(Integer, primary_key=True)
    userid = Column(Integer, ForeignKey('users.id'), nullable=False)
    contextid = Column(Integer, ForeignKey('context.id'), nullable=False)
    capability = Column(String(255), nullable=False)
