"""
Service Exceptions
Error taxonomy raised by services and converted to HTTP responses at the
application boundary
"""

from typing import Any, Dict, List, Optional


class ServiceError(Exception):
    """
    Base class for all service-layer errors

    Attributes:
        message: Human readable description
        status_code: HTTP status the error maps to
        errors: Optional list of field-level details
        details: Extra context for logging
    """

    status_code: int = 500
    error_code: str = "INTERNAL"

    def __init__(
        self,
        message: str = "Something went wrong",
        errors: Optional[List[Any]] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "errors": self.errors,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


# ============================================================================
# Client Errors
# ============================================================================


class ValidationError(ServiceError):
    """Malformed or missing input"""

    status_code = 400
    error_code = "BAD_REQUEST"

    def __init__(self, message: str, field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field


class AuthenticationError(ServiceError):
    """Missing, invalid, expired or reused credentials"""

    status_code = 401
    error_code = "UNAUTHORIZED"


class PermissionDeniedError(ServiceError):
    """Authenticated user may not act on the resource"""

    status_code = 403
    error_code = "FORBIDDEN"


class ResourceNotFoundError(ServiceError):
    """Referenced entity does not exist"""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(message or f"{resource_type} not found")
        self.resource_type = resource_type
        self.resource_id = resource_id


class ResourceConflictError(ServiceError):
    """Operation conflicts with current state (e.g. duplicate membership)"""

    status_code = 409
    error_code = "CONFLICT"


class ResourceAlreadyExistsError(ResourceConflictError):
    """Unique field already taken"""

    def __init__(self, resource_type: str, resource_id: Optional[str] = None, message: Optional[str] = None):
        super().__init__(message or f"{resource_type} already exists")
        self.resource_type = resource_type
        self.resource_id = resource_id


# ============================================================================
# Server / Upstream Errors
# ============================================================================


class ExternalServiceError(ServiceError):
    """Upstream dependency failed"""

    status_code = 502
    error_code = "UPSTREAM_FAILURE"

    def __init__(self, service_name: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or f"{service_name} request failed", **kwargs)
        self.service_name = service_name


class MediaUploadError(ExternalServiceError):
    """Media host rejected or failed an upload"""

    def __init__(self, message: str = "Failed to upload media", **kwargs):
        super().__init__("media", message, **kwargs)


class InternalError(ServiceError):
    """Unexpected store or server error"""

    status_code = 500
    error_code = "INTERNAL"
