"""
Error taxonomy for the request pipeline.

Every failure a caller can see is an ApiError subclass:

    NetworkError          no response was received
    AuthenticationError   401 that a token refresh cannot fix
    SessionExpiredError   the refresh itself failed; the session is gone
    ValidationError       any other 4xx, carries the server's detail
    ServerError           5xx
"""
from typing import Any, Dict, Optional


class ApiError(Exception):
    """Base class for request failures"""
    error_type = 'unknown'

    def __init__(self, message: str, status: Optional[int] = None, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.detail = detail


class NetworkError(ApiError):
    error_type = 'network'


class AuthenticationError(ApiError):
    error_type = 'authentication'


class SessionExpiredError(AuthenticationError):
    error_type = 'session_expired'

    def __init__(self, message: str = "Session expired, please log in again", status: Optional[int] = 401,
                 detail: Any = None):
        super().__init__(message, status=status, detail=detail)


class ValidationError(ApiError):
    error_type = 'validation'


class ServerError(ApiError):
    error_type = 'server'


def _message_from_detail(status: int, detail: Any) -> str:
    # DRF style bodies: {"detail": "..."} or {"field": ["msg", ...]}
    if isinstance(detail, dict):
        if isinstance(detail.get('detail'), str):
            return detail['detail']
        for key, value in detail.items():
            if isinstance(value, list) and value:
                return f"{key}: {value[0]}"
            if isinstance(value, str):
                return f"{key}: {value}"
    if isinstance(detail, str) and detail:
        return detail
    return f"Request failed with status {status}"


def error_from_response(response) -> ApiError:
    """Map a non-2xx ApiResponse to the matching ApiError."""
    status = response.status
    detail = response.data
    message = _message_from_detail(status, detail)
    if status == 401:
        return AuthenticationError(message, status=status, detail=detail)
    if status >= 500:
        return ServerError(message, status=status, detail=detail)
    return ValidationError(message, status=status, detail=detail)


def describe_error(error: BaseException) -> Dict[str, Any]:
    """Summarize an error for display by a UI collaborator."""
    if isinstance(error, ApiError):
        return {
            'error_type': error.error_type,
            'message': error.message,
            'detail': error.detail,
        }
    return {
        'error_type': ApiError.error_type,
        'message': str(error),
        'detail': None,
    }
