from sqlalchemy import Column, Integer, String, Index
from . import Base


CONTEXT_SYSTEM = 10
CONTEXT_COURSECAT = 40
CONTEXT_COURSE = 50
CONTEXT_MODULE = 70


class Context(Base):
    """A node in the permission scope tree (system > category > course > module)."""
    __tablename__ = 'context'
    __table_args__ = (
        Index('ix_context_level_instance', 'contextlevel', 'instanceid'),
    )

    id = Column(Integer, primary_key=True)
    contextlevel = Column(Integer, nullable=False)
    instanceid = Column(Integer, nullable=False, default=0)
    path = Column(String(255))  # e.g. '/1/3/15', root first
    depth = Column(Integer, nullable=False, default=0)

    def ancestor_ids(self):
        """Context ids along the path, from the root down to this context."""
        if not self.path:
            return [self.id]
        return [int(part) for part in self.path.split('/') if part]

    def to_dict(self):
        return {
            'id': self.id,
            'contextlevel': self.contextlevel,
            'instanceid': self.instanceid,
            'path': self.path,
            'depth': self.depth,
        }
