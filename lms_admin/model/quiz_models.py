"""
Quiz-related models (Quiz, QuizQuestion, QuizAnswer)
"""

from sqlalchemy import (
    Column, Text, Float, Integer, Boolean, ForeignKey, String
)
from sqlalchemy.orm import relationship

from lms_admin.model.base import Base, BaseMixin
from lms_admin.model.enums import QuestionType


class Quiz(Base, BaseMixin):
    """
    Quiz content of a lecture with type ``quiz``.
    """
    __tablename__ = 'quizzes'

    lecture_id = Column(
        Integer,
        ForeignKey('course_chapter_lectures.id', ondelete='CASCADE'),
        nullable=False,
        unique=True,
    )
    title = Column(String(255), nullable=False)
    time_limit = Column(Integer, default=0)  # in minutes, 0 means no limit
    passing_score = Column(Float, default=70.0)
    allow_retake = Column(Boolean, default=True)

    # Relationships
    lecture = relationship("Lecture", back_populates="quiz")
    questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="QuizQuestion.id",
    )

    def __repr__(self):
        return f"<Quiz(id={self.id})>"


class QuizQuestion(Base, BaseMixin):
    __tablename__ = 'quiz_questions'

    quiz_id = Column(
        Integer,
        ForeignKey('quizzes.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    question = Column(Text, nullable=False)
    question_type = Column(
        String(31),
        default=QuestionType.SINGLE_CHOICE.value,
        nullable=False
    )
    point = Column(Float, default=1.0)

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
    answers = relationship(
        "QuizAnswer",
        back_populates="question",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="QuizAnswer.id",
    )

    def __repr__(self):
        return f"<QuizQuestion(id={self.id}, type={self.question_type})>"


class QuizAnswer(Base, BaseMixin):
    __tablename__ = 'quiz_answers'

    quiz_question_id = Column(
        Integer,
        ForeignKey('quiz_questions.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    answer = Column(Text, nullable=False)
    is_correct = Column(Boolean, default=False)

    # Relationships
    question = relationship("QuizQuestion", back_populates="answers")

    def __repr__(self):
        return f"<QuizAnswer(id={self.id}, is_correct={self.is_correct})>"
