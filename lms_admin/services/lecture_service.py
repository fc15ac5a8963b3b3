"""
Lecture Service - chapter lecture CRUD and reordering.

Architecture:
    - CourseRepository: Resolves the course and the chapter inside it
    - CoursePolicy: Owner / team member check guarding every write
    - LectureRepository: Lectures and their type-selected content
    - LectureService: Orchestrates the above (injectable via FastAPI Depends)
"""

import logging
from typing import List, Optional

from lms_admin.model.course_models import Chapter, Lecture
from lms_admin.model.enums import LectureType
from lms_admin.model.user_models import User
from lms_admin.repositories.course_repo import CourseRepository
from lms_admin.repositories.lecture_repo import LectureRepository, CONTENT_RELATIONS
from lms_admin.schemas.lecture import (
    AssignmentContent,
    DocumentContent,
    LectureCreateRequest,
    LectureResponse,
    LectureUpdateRequest,
    QuizContent,
    ReorderLecturesRequest,
    VideoContent,
)
from lms_admin.services.course_policy import CoursePolicy
from lms_admin.utils.exceptions import (
    AccessDeniedException,
    BadRequestException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

CONTENT_SCHEMAS = {
    LectureType.VIDEO: VideoContent,
    LectureType.DOCUMENT: DocumentContent,
    LectureType.QUIZ: QuizContent,
    LectureType.ASSIGNMENT: AssignmentContent,
}


class LectureService:
    """
    Service for the lectures of one course chapter.

    Example:
        @router.get("")
        async def index(
            chapter: Chapter = Depends(course_chapter()),
            lecture_service: LectureService = Depends(get_lecture_service),
        ):
            return await lecture_service.list_lectures(chapter)
    """

    def __init__(
            self,
            lecture_repository: LectureRepository,
            course_repository: CourseRepository,
            course_policy: CoursePolicy,
    ):
        self._lecture_repository = lecture_repository
        self._course_repository = course_repository
        self._course_policy = course_policy

    async def resolve_chapter(
            self,
            course_id: int,
            chapter_id: int,
            user: User,
            action: Optional[str] = None,
    ) -> Chapter:
        """
        Find a chapter through its course, checking write access on the way.

        The course is looked up first, then the policy is applied when
        ``action`` is given, and only then the chapter is looked up.

        Args:
            course_id: ID of the course in the path
            chapter_id: ID of the chapter in the path
            user: Authenticated user
            action: Wording used in the 403 message; None for read access

        Raises:
            ResourceNotFoundException: Course or chapter not found
            AccessDeniedException: User neither owns the course nor is on its team
        """
        course = await self._course_repository.get_by_id(course_id)
        if not course:
            raise ResourceNotFoundException(f"Course not found with ID: {course_id}")

        if action is not None and not await self._course_policy.can_modify(user, course):
            logger.warning(f"User {user.id} may not modify course {course_id}")
            raise AccessDeniedException(CoursePolicy.denied_message(action))

        chapter = await self._course_repository.get_chapter(course_id, chapter_id)
        if not chapter:
            raise ResourceNotFoundException(f"Chapter not found with ID: {chapter_id}")
        return chapter

    async def list_lectures(self, chapter: Chapter) -> List[LectureResponse]:
        lectures = await self._lecture_repository.get_lectures_by_chapter_id(chapter.id)
        await self._lecture_repository.load_content(lectures)
        return [self.to_response(lecture) for lecture in lectures]

    async def get_lecture(self, chapter: Chapter, lecture_id: int) -> LectureResponse:
        lecture = await self._get_lecture_or_404(chapter, lecture_id)
        await self._lecture_repository.load_content([lecture])
        return self.to_response(lecture, with_questions=True)

    async def create_lecture(self, chapter: Chapter, request: LectureCreateRequest) -> LectureResponse:
        """
        Create a lecture; without an explicit ``order`` it is appended after
        the last lecture of the chapter.
        """
        data = request.model_dump(mode="json", exclude_unset=True)
        data["course_chapter_id"] = chapter.id
        if data.get("order") is None:
            data["order"] = await self._lecture_repository.get_max_order(chapter.id) + 1

        lecture = await self._lecture_repository.create(data)
        logger.info(f"Created lecture {lecture.id} in chapter {chapter.id} at order {lecture.order}")

        await self._lecture_repository.load_content([lecture])
        return self.to_response(lecture)

    async def update_lecture(
            self,
            chapter: Chapter,
            lecture_id: int,
            request: LectureUpdateRequest,
    ) -> LectureResponse:
        """
        Apply a partial update. Switching ``type`` drops the content of the
        previous type in the same transaction.
        """
        lecture = await self._get_lecture_or_404(chapter, lecture_id)
        data = request.model_dump(mode="json", exclude_unset=True)

        try:
            new_type = data.get("type")
            if new_type is not None and LectureType(new_type) != lecture.lecture_type:
                dropped = await self._lecture_repository.delete_content(lecture, commit=False)
                if dropped:
                    logger.info(f"Dropped {lecture.type} content of lecture {lecture.id}")
            lecture = await self._lecture_repository.update(lecture, data)
        except Exception:
            await self._lecture_repository.rollback()
            raise

        await self._lecture_repository.load_content([lecture])
        return self.to_response(lecture)

    async def delete_lecture(self, chapter: Chapter, lecture_id: int):
        lecture = await self._get_lecture_or_404(chapter, lecture_id)
        try:
            await self._lecture_repository.delete_with_content(lecture)
        except Exception:
            await self._lecture_repository.rollback()
            raise
        logger.info(f"Deleted lecture {lecture_id} from chapter {chapter.id}")

    async def reorder_lectures(self, chapter: Chapter, request: ReorderLecturesRequest):
        """
        Set the ``order`` of several lectures at once.

        Every item is checked before anything is written, so the batch is
        applied completely or not at all.

        Raises:
            ValidationException: An ID matches no lecture
            BadRequestException: A lecture belongs to another chapter
        """
        ids = [item.id for item in request.lectures]
        lectures = {
            lecture.id: lecture
            for lecture in await self._lecture_repository.get_by_ids(ids)
        }

        errors = {
            f"lectures.{index}.id": [f"The selected lectures.{index}.id is invalid."]
            for index, item in enumerate(request.lectures)
            if item.id not in lectures
        }
        if errors:
            raise ValidationException(errors)

        if any(lecture.course_chapter_id != chapter.id for lecture in lectures.values()):
            raise BadRequestException("One or more lectures do not belong to this chapter")

        try:
            for item in request.lectures:
                lectures[item.id].order = item.order
            await self._lecture_repository.commit()
        except Exception:
            await self._lecture_repository.rollback()
            raise
        logger.info(f"Reordered {len(lectures)} lectures in chapter {chapter.id}")

    async def _get_lecture_or_404(self, chapter: Chapter, lecture_id: int) -> Lecture:
        lecture = await self._lecture_repository.get_in_chapter(chapter.id, lecture_id)
        if not lecture:
            raise ResourceNotFoundException(f"Lecture not found with ID: {lecture_id}")
        return lecture

    @staticmethod
    def to_response(lecture: Lecture, with_questions: bool = False) -> LectureResponse:
        """
        Serialize a lecture whose content has been loaded. Quiz questions
        are only included when ``with_questions`` is set.
        """
        response = LectureResponse.model_validate(lecture)

        payload = getattr(lecture, CONTENT_RELATIONS[lecture.lecture_type])
        if payload is not None:
            content = CONTENT_SCHEMAS[lecture.lecture_type].model_validate(payload)
            if isinstance(content, QuizContent) and not with_questions:
                content.questions = None
            response.content = content

        return response
