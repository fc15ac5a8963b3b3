import logging
from typing import List

from fastapi import APIRouter, Depends, status

from lms_admin.dependencies.services import chapter_payload, course_chapter, get_lecture_service
from lms_admin.model.course_models import Chapter
from lms_admin.schemas.generic import ApiResponse
from lms_admin.schemas.lecture import (
    LectureCreateRequest,
    LectureResponse,
    LectureUpdateRequest,
    ReorderLecturesRequest,
)
from lms_admin.services.lecture_service import LectureService

logger = logging.getLogger(__name__)

STORE_ACTION = "add lectures to this course"
REORDER_ACTION = "reorder lectures"
UPDATE_ACTION = "update this lecture"

router = APIRouter(
    prefix="/courses/{course}/chapters/{chapter}/lectures",
    tags=["Lecture"],
)


@router.get(
    "",
    response_model=ApiResponse[List[LectureResponse]],
    summary="List Chapter Lectures",
    description="Lectures of a chapter ordered by position, each with its content (quizzes without questions).",
)
async def index(
        chapter: Chapter = Depends(course_chapter()),
        lecture_service: LectureService = Depends(get_lecture_service),
) -> ApiResponse[List[LectureResponse]]:
    lectures = await lecture_service.list_lectures(chapter)
    return ApiResponse[List[LectureResponse]].success(data=lectures)


@router.post(
    "",
    response_model=ApiResponse[LectureResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create Lecture",
)
async def store(
        chapter: Chapter = Depends(course_chapter(STORE_ACTION)),
        request: LectureCreateRequest = Depends(chapter_payload(LectureCreateRequest, STORE_ACTION)),
        lecture_service: LectureService = Depends(get_lecture_service),
) -> ApiResponse[LectureResponse]:
    """
    Create a lecture in the chapter.

    - **order**: Position in the chapter; appended after the last lecture when omitted

    Raises:
        - 403 Forbidden: User neither owns the course nor is on its team
        - 404 Not Found: Course or chapter not found
        - 422 Unprocessable Entity: Invalid payload
    """
    logger.info(f"Creating {request.type.value} lecture in chapter {chapter.id}")
    lecture = await lecture_service.create_lecture(chapter, request)
    return ApiResponse[LectureResponse].success(
        data=lecture, message="Lecture created successfully"
    )


@router.post(
    "/reorder",
    response_model=ApiResponse[None],
    summary="Reorder Lectures",
    description="Set the order of several lectures of the chapter in one batch.",
)
async def reorder(
        chapter: Chapter = Depends(course_chapter(REORDER_ACTION)),
        request: ReorderLecturesRequest = Depends(chapter_payload(ReorderLecturesRequest, REORDER_ACTION)),
        lecture_service: LectureService = Depends(get_lecture_service),
) -> ApiResponse[None]:
    """
    Raises:
        - 400 Bad Request: A lecture belongs to another chapter (nothing is changed)
        - 422 Unprocessable Entity: Empty list or unknown lecture ID
    """
    await lecture_service.reorder_lectures(chapter, request)
    return ApiResponse[None].success(message="Lectures reordered successfully")


@router.get(
    "/{lecture}",
    response_model=ApiResponse[LectureResponse],
    summary="Get Lecture",
    description="One lecture with its content; quizzes include questions and answers.",
)
async def show(
        lecture: int,
        chapter: Chapter = Depends(course_chapter()),
        lecture_service: LectureService = Depends(get_lecture_service),
) -> ApiResponse[LectureResponse]:
    data = await lecture_service.get_lecture(chapter, lecture)
    return ApiResponse[LectureResponse].success(data=data)


@router.put(
    "/{lecture}",
    response_model=ApiResponse[LectureResponse],
    summary="Update Lecture",
)
async def update(
        lecture: int,
        chapter: Chapter = Depends(course_chapter(UPDATE_ACTION)),
        request: LectureUpdateRequest = Depends(chapter_payload(LectureUpdateRequest, UPDATE_ACTION)),
        lecture_service: LectureService = Depends(get_lecture_service),
) -> ApiResponse[LectureResponse]:
    """
    Partially update a lecture. Only the fields sent are changed; changing
    **type** removes the content of the previous type.
    """
    data = await lecture_service.update_lecture(chapter, lecture, request)
    return ApiResponse[LectureResponse].success(
        data=data, message="Lecture updated successfully"
    )


@router.delete(
    "/{lecture}",
    response_model=ApiResponse[None],
    summary="Delete Lecture",
    description="Delete a lecture and the content matching its type.",
)
async def destroy(
        lecture: int,
        chapter: Chapter = Depends(course_chapter("delete this lecture")),
        lecture_service: LectureService = Depends(get_lecture_service),
) -> ApiResponse[None]:
    await lecture_service.delete_lecture(chapter, lecture)
    return ApiResponse[None].success(message="Lecture deleted successfully")
