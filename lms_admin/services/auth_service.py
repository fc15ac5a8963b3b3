import jwt
from fastapi import Request

from lms_admin.config import get_settings
from lms_admin.utils.exceptions import UnauthorizedException

ACCESS_TOKEN_COOKIE = "access_token"


class AuthService:
    @staticmethod
    def get_current_user(request: Request) -> int:
        """Return the ``userId`` claim of the request's access token"""
        decoded = AuthService._get_decoded_jwt(request)

        user_id = decoded.get("userId")
        if not user_id:
            raise UnauthorizedException("Invalid token")

        try:
            return int(user_id)
        except (TypeError, ValueError):
            raise UnauthorizedException("Invalid token")

    @staticmethod
    def _get_token(request: Request) -> str:
        # Browser views carry the token in a cookie instead of a header
        auth_header = request.headers.get("Authorization")
        if not auth_header:
            token = request.cookies.get(ACCESS_TOKEN_COOKIE)
            if not token:
                raise UnauthorizedException("Authorization header missing")
            return token
        if not auth_header.startswith("Bearer "):
            raise UnauthorizedException("Invalid Authorization header format")
        return auth_header.split(" ", 1)[1]

    @staticmethod
    def _get_decoded_jwt(request: Request) -> dict:
        settings = get_settings()
        token = AuthService._get_token(request)
        try:
            decoded = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
                options={"verify_signature": settings.jwt_verify_signature},
            )
        except jwt.PyJWTError:
            raise UnauthorizedException("Invalid token")
        return decoded
