from fastapi import APIRouter

from lms_admin.api.v1.endpoints import lecture_controller

api_router = APIRouter()

# Include lecture endpoints
api_router.include_router(lecture_controller.router)
