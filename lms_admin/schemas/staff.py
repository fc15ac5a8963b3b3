from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


# =============================
#   Request Schemas
# =============================
class StaffCreateRequest(BaseModel):
    """Request schema for creating a staff member"""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., description="Login email, also seeds the initial password")
    role: int = Field(..., description="ID of a custom role")
    is_active: bool = False


class StaffUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    role_id: int = Field(..., description="ID of the custom role replacing the current one")


class ChangePasswordRequest(BaseModel):
    new_password: str = Field(..., min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.confirm_password != self.new_password:
            raise ValueError("The confirm password and new password must match.")
        return self


# =============================
#   Response Schemas
# =============================
class StaffCreatedData(BaseModel):
    redirect_url: str


class StaffRow(BaseModel):
    """One row of the staff table"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    slug: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    status: bool = True
    role_id: Optional[int] = None
    operate: str = ""


class StaffTableResponse(BaseModel):
    total: int
    rows: List[StaffRow]
