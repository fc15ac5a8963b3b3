from typing import Optional


class LmsAdminException(Exception):
    """Base exception for the admin service"""
    pass


class BadRequestException(LmsAdminException):
    """Exception for Bad Request (400)"""

    def __init__(self, message: str = "Bad Request"):
        self.message = message
        super().__init__(self.message)


class ResourceNotFoundException(LmsAdminException):
    """Exception for Not Found (404)"""

    def __init__(self, message: str = "Resource Not Found"):
        self.message = message
        super().__init__(self.message)


class AccessDeniedException(LmsAdminException):
    """Exception for Forbidden (403)"""

    def __init__(self, message: str = "Access Denied"):
        self.message = message
        super().__init__(self.message)


class PermissionDeniedException(AccessDeniedException):
    """Missing back-office permission (403, or a redirect home for browsers)"""

    def __init__(self, message: str = "You don't have enough permissions"):
        super().__init__(message)


class UnauthorizedException(LmsAdminException):
    """Exception for Unauthorized (401)"""

    def __init__(self, message: str = "Unauthorized"):
        self.message = message
        super().__init__(self.message)


class ValidationException(LmsAdminException):
    """
    Exception for Unprocessable Entity (422).

    ``errors`` maps a field name to its list of messages; the first message
    doubles as the human readable summary.
    """

    def __init__(self, errors: dict[str, list[str]], message: Optional[str] = None):
        self.errors = errors
        if message is None:
            first = next(iter(errors.values()), [])
            message = first[0] if first else "The given data was invalid."
        self.message = message
        super().__init__(self.message)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationException":
        return cls({field: [message]})


class OperationFailedException(LmsAdminException):
    """Exception for a failed write that was rolled back (500)"""

    def __init__(self, message: str = "Something Went Wrong"):
        self.message = message
        super().__init__(self.message)
