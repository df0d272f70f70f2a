from fastapi import status
from src.libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


# Use case error codes that are the caller's fault, by HTTP status
CLIENT_ERROR_STATUS = {
    "INVALID_CODE_FORMAT": status.HTTP_400_BAD_REQUEST,
    "INVALID_CODE": status.HTTP_400_BAD_REQUEST,
    "CODE_EXPIRED": status.HTTP_400_BAD_REQUEST,
    "WEAK_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "PASSWORD_TOO_LONG": status.HTTP_400_BAD_REQUEST,
    "SAME_EMAIL": status.HTTP_400_BAD_REQUEST,
    "SAME_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INVALID_PASSWORD": status.HTTP_401_UNAUTHORIZED,
    "EMAIL_NOT_VERIFIED": status.HTTP_403_FORBIDDEN,
    "USER_DISABLED": status.HTTP_403_FORBIDDEN,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VERIFICATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "EMAIL_IN_USE": status.HTTP_409_CONFLICT,
    "CODE_ALREADY_USED": status.HTTP_409_CONFLICT,
    "CONCURRENT_UPDATE": status.HTTP_409_CONFLICT,
    "RATE_LIMITED": status.HTTP_429_TOO_MANY_REQUESTS,
    "RESEND_LIMIT_REACHED": status.HTTP_429_TOO_MANY_REQUESTS,
    "TOO_MANY_ATTEMPTS": status.HTTP_429_TOO_MANY_REQUESTS,
}


def raise_for_error(error: Error):
    """Raise the HTTP error for a failed use case result"""
    status_code = CLIENT_ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
