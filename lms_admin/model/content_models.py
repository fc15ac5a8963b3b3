"""
Lecture content payloads for the video, document and assignment lecture types
"""

from sqlalchemy import Column, String, Text, Integer, ForeignKey
from sqlalchemy.orm import relationship

from lms_admin.model.base import Base, BaseMixin


class LectureVideo(Base, BaseMixin):
    __tablename__ = "lecture_videos"

    lecture_id = Column(
        Integer,
        ForeignKey("course_chapter_lectures.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    title = Column(String(255), nullable=True)
    video_url = Column(String(1024), nullable=False)
    # HLS playlist produced by the external transcoder, when available
    hls_path = Column(String(1024), nullable=True)
    duration = Column(Integer, nullable=True)

    lecture = relationship("Lecture", back_populates="video")


class LectureDocument(Base, BaseMixin):
    __tablename__ = "lecture_documents"

    lecture_id = Column(
        Integer,
        ForeignKey("course_chapter_lectures.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    title = Column(String(255), nullable=True)
    file_path = Column(String(1024), nullable=False)
    file_type = Column(String(50), nullable=True)

    lecture = relationship("Lecture", back_populates="document")


class LectureAssignment(Base, BaseMixin):
    __tablename__ = "lecture_assignments"

    lecture_id = Column(
        Integer,
        ForeignKey("course_chapter_lectures.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    title = Column(String(255), nullable=False)
    instructions = Column(Text, nullable=True)
    max_points = Column(Integer, default=100, nullable=False)
    due_days = Column(Integer, nullable=True)

    lecture = relationship("Lecture", back_populates="assignment")
