from sqlalchemy import Column, Integer, String, Text
from . import Base


class CourseCategory(Base):
    __tablename__ = 'course_categories'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    parent = Column(Integer, nullable=False, default=0)  # 0 for top-level categories
    path = Column(String(255), nullable=False, default='')  # e.g. '/2/5'
    coursecount = Column(Integer, nullable=False, default=0)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'parent': self.parent,
            'path': self.path,
            'coursecount': self.coursecount,
        }
