"""
Custom exceptions for the ExamFlex API
"""
from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """Base exception for all API errors"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: str = None,
        headers: dict = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class UnauthorizedException(BaseAPIException):
    """Missing or invalid client credentials"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=message,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Basic"}
        )


class BadRequestException(BaseAPIException):
    """Bad request - invalid input"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
            error_code="BAD_REQUEST"
        )


class ConfigExpiredException(BaseAPIException):
    """Stored mark entry config is gone"""

    def __init__(self, temp_id: str = None):
        detail = "Config expired or invalid"
        if temp_id:
            detail += f": {temp_id}"
        super().__init__(
            status_code=status.HTTP_410_GONE,
            detail=detail,
            error_code="CONFIG_EXPIRED"
        )
