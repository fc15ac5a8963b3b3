import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from lms_admin.dependencies.services import get_staff_service, require_permissions
from lms_admin.model.enums import StaffPermission
from lms_admin.model.user_models import User
from lms_admin.schemas.generic import ApiResponse
from lms_admin.schemas.staff import (
    ChangePasswordRequest,
    StaffCreateRequest,
    StaffCreatedData,
    StaffTableResponse,
    StaffUpdateRequest,
)
from lms_admin.services.staff_service import StaffService, custom_role_options

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[2] / "templates"))

router = APIRouter(prefix="/staffs", tags=["Staff"])


@router.get("", response_class=HTMLResponse, name="staffs.index", include_in_schema=False)
async def index(
        request: Request,
        user: User = Depends(require_permissions(
            StaffPermission.LIST.value,
            StaffPermission.CREATE.value,
            StaffPermission.EDIT.value,
            StaffPermission.DELETE.value,
        )),
        staff_service: StaffService = Depends(get_staff_service),
):
    roles = await staff_service.get_custom_roles()
    return templates.TemplateResponse(
        request,
        "staff/index.html",
        {
            "roles": custom_role_options(roles),
            "type_menu": "staffs",
            "can_create": user.has_permission(StaffPermission.CREATE.value),
        },
    )


@router.get("/create", response_class=HTMLResponse, name="staffs.create", include_in_schema=False)
async def create(
        request: Request,
        user: User = Depends(require_permissions(StaffPermission.CREATE.value)),
        staff_service: StaffService = Depends(get_staff_service),
):
    roles = await staff_service.get_custom_roles()
    return templates.TemplateResponse(
        request,
        "staff/create.html",
        {"roles": custom_role_options(roles), "type_menu": "staffs"},
    )


@router.get(
    "/show",
    response_model=StaffTableResponse,
    name="staffs.show",
    summary="Staff Table",
    description="One page of staff members for the admin table.",
    dependencies=[Depends(require_permissions(StaffPermission.LIST.value))],
)
async def show(
        request: Request,
        offset: int = Query(0, ge=0),
        limit: Optional[int] = Query(None, ge=1),
        sort: str = "id",
        order: str = "DESC",
        show_deleted: Optional[str] = None,
        search: Optional[str] = None,
        staff_service: StaffService = Depends(get_staff_service),
) -> StaffTableResponse:
    """
    - **show_deleted**: `1` lists only soft-deleted staff, anything else only live staff
    - **search**: Case-insensitive match against name or email
    """
    return await staff_service.staff_table(
        url_for=lambda name, **params: str(request.url_for(name, **params)),
        offset=offset,
        limit=limit,
        sort=sort,
        order=order,
        show_deleted=show_deleted == "1",
        search=search,
    )


@router.post(
    "",
    response_model=ApiResponse[StaffCreatedData],
    name="staffs.store",
    summary="Create Staff",
    dependencies=[Depends(require_permissions(StaffPermission.CREATE.value))],
)
async def store(
        request: Request,
        staff_request: StaffCreateRequest,
        staff_service: StaffService = Depends(get_staff_service),
) -> ApiResponse[StaffCreatedData]:
    """
    Create a staff member. The initial password is the part of the email
    before ``@``.

    Raises:
        - 422 Unprocessable Entity: Email already taken or role is not a custom role
        - 500 Internal Server Error: Nothing was saved
    """
    await staff_service.create_staff(staff_request)
    return ApiResponse[StaffCreatedData].success(
        data=StaffCreatedData(redirect_url=str(request.url_for("staffs.index"))),
        message="Staff Created Successfully",
    )


@router.put(
    "/{id}",
    response_model=ApiResponse[None],
    name="staffs.update",
    summary="Update Staff",
    dependencies=[Depends(require_permissions(StaffPermission.EDIT.value))],
)
async def update(
        id: int,
        staff_request: StaffUpdateRequest,
        staff_service: StaffService = Depends(get_staff_service),
) -> ApiResponse[None]:
    await staff_service.update_staff(id, staff_request)
    return ApiResponse[None].success(message="User Update Successfully")


@router.delete(
    "/{id}",
    response_model=ApiResponse[None],
    name="staffs.destroy",
    summary="Delete Staff",
    dependencies=[Depends(require_permissions(StaffPermission.DELETE.value))],
)
async def destroy(
        id: int,
        staff_service: StaffService = Depends(get_staff_service),
) -> ApiResponse[None]:
    await staff_service.delete_staff(id)
    return ApiResponse[None].success(message="Staff Deleted Successfully")


@router.put(
    "/{id}/change-password",
    response_model=ApiResponse[None],
    name="staffs.change-password",
    summary="Reset Staff Password",
    dependencies=[Depends(require_permissions(StaffPermission.EDIT.value))],
)
async def change_password(
        id: int,
        password_request: ChangePasswordRequest,
        staff_service: StaffService = Depends(get_staff_service),
) -> ApiResponse[None]:
    await staff_service.change_password(id, password_request)
    return ApiResponse[None].success(message="Password Reset Successfully")
