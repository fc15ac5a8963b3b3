from typing import Optional, TypeVar, Generic

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform `{status, message, data}` envelope used by every JSON endpoint"""
    status: str
    message: Optional[str] = None
    code: Optional[int] = None
    data: Optional[T] = None
    errors: Optional[dict[str, list[str]]] = None

    @classmethod
    def success(cls, data: Optional[T] = None, message: Optional[str] = None):
        return cls(
            status="success",
            message=message,
            data=data,
        )

    @classmethod
    def error(
            cls,
            code: int,
            message: str,
            data: Optional[T] = None,
            errors: Optional[dict[str, list[str]]] = None,
    ):
        return cls(
            status="error",
            message=message,
            code=code,
            data=data,
            errors=errors,
        )


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    version: str
    environment: str
