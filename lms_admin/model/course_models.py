"""
Course structure models: courses, their team, chapters and lectures
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Boolean,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from lms_admin.model.base import Base, BaseMixin
from lms_admin.model.enums import LectureType


class Course(Base, BaseMixin):
    __tablename__ = "courses"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    owner = relationship("User")
    chapters = relationship(
        "Chapter",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="Chapter.order",
    )
    team_members = relationship(
        "CourseTeamMember",
        back_populates="course",
        cascade="all, delete-orphan",
    )
    ratings = relationship(
        "Rating",
        primaryjoin="and_(Rating.rateable_type == 'course', "
                    "foreign(Rating.rateable_id) == Course.id)",
        viewonly=True,
    )

    def __repr__(self):
        return f"<Course(id={self.id}, title={self.title})>"


class CourseTeamMember(Base, BaseMixin):
    """A user allowed to edit a course they do not own"""

    __tablename__ = "course_team_members"
    __table_args__ = (UniqueConstraint("course_id", "user_id"),)

    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    course = relationship("Course", back_populates="team_members")

    def __repr__(self):
        return f"<CourseTeamMember(course_id={self.course_id}, user_id={self.user_id})>"


class Chapter(Base, BaseMixin):
    __tablename__ = "course_chapters"

    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    order = Column(Integer, default=0, nullable=False)

    # Relationships
    course = relationship("Course", back_populates="chapters")
    lectures = relationship(
        "Lecture",
        back_populates="chapter",
        order_by=lambda: [Lecture.order, Lecture.id],
    )

    def __repr__(self):
        return f"<Chapter(id={self.id}, title={self.title})>"


class Lecture(Base, BaseMixin):
    """
    A chapter lecture. ``type`` selects which one of the content
    relationships (video, document, quiz, assignment) is meaningful.
    """

    __tablename__ = "course_chapter_lectures"

    course_chapter_id = Column(
        Integer,
        ForeignKey("course_chapters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    type = Column(String(31), default=LectureType.VIDEO.value, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    order = Column(Integer, default=0, nullable=False)

    # Relationships
    chapter = relationship("Chapter", back_populates="lectures")
    video = relationship(
        "LectureVideo", back_populates="lecture", uselist=False, cascade="all, delete-orphan"
    )
    document = relationship(
        "LectureDocument", back_populates="lecture", uselist=False, cascade="all, delete-orphan"
    )
    quiz = relationship(
        "Quiz", back_populates="lecture", uselist=False, cascade="all, delete-orphan"
    )
    assignment = relationship(
        "LectureAssignment", back_populates="lecture", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def lecture_type(self) -> LectureType:
        return LectureType(self.type)

    def __repr__(self):
        return f"<Lecture(id={self.id}, title={self.title}, type={self.type})>"
