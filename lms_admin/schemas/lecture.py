from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lms_admin.model.enums import LectureType


# =============================
#   Request Schemas
# =============================
class LectureCreateRequest(BaseModel):
    """Request schema for creating a lecture"""

    title: str = Field(..., max_length=255, description="Lecture title")
    type: LectureType = Field(..., description="Which content the lecture holds")
    description: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0, description="Duration in seconds")
    is_active: bool = True
    order: Optional[int] = Field(
        None, ge=0, description="Position in the chapter, appended last when omitted"
    )

    @field_validator("order")
    @classmethod
    def order_not_null(cls, value):
        if value is None:
            raise ValueError("The order field must be an integer.")
        return value


class LectureUpdateRequest(BaseModel):
    """Partial update; only the fields sent are changed"""

    title: Optional[str] = Field(None, max_length=255)
    type: Optional[LectureType] = None
    description: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    order: Optional[int] = Field(None, ge=0)

    @field_validator("title", "type", "is_active", "order")
    @classmethod
    def present_fields_not_null(cls, value, info):
        # Only runs for fields that were sent
        if value is None:
            raise ValueError(f"The {info.field_name} field is required when present.")
        return value


class LectureOrderItem(BaseModel):
    id: int
    order: int = Field(..., ge=0)


class ReorderLecturesRequest(BaseModel):
    lectures: List[LectureOrderItem] = Field(..., min_length=1)


# =============================
#   Response Schemas
# =============================
class VideoContent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["video"] = "video"
    id: int
    title: Optional[str] = None
    video_url: str
    hls_path: Optional[str] = None
    duration: Optional[int] = None


class DocumentContent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["document"] = "document"
    id: int
    title: Optional[str] = None
    file_path: str
    file_type: Optional[str] = None


class AssignmentContent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["assignment"] = "assignment"
    id: int
    title: str
    instructions: Optional[str] = None
    max_points: int
    due_days: Optional[int] = None


class QuizAnswerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    answer: str
    is_correct: bool


class QuizQuestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    question: str
    question_type: str
    point: Optional[float] = None
    answers: List[QuizAnswerOut] = []


class QuizContent(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["quiz"] = "quiz"
    id: int
    title: str
    time_limit: Optional[int] = None
    passing_score: Optional[float] = None
    allow_retake: Optional[bool] = None
    # Only filled when a single lecture is shown
    questions: Optional[List[QuizQuestionOut]] = None


LectureContent = Union[VideoContent, DocumentContent, QuizContent, AssignmentContent]


class LectureResponse(BaseModel):
    """Lecture with the content payload selected by its type"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    course_chapter_id: int
    title: str
    type: LectureType
    description: Optional[str] = None
    duration: Optional[int] = None
    is_active: bool
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    content: Optional[LectureContent] = None
