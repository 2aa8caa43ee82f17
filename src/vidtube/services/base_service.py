"""
Base Service
Shared helpers for logging, validation and pagination
"""

import logging
import uuid
from typing import Any, Dict, Optional, Tuple

from vidtube.services.exceptions import (
    InternalError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)


class BaseService:
    """
    Base class for business services

    Subclasses implement ``get_service_name`` and receive repositories through
    their constructor.
    """

    DEFAULT_PAGE = 1
    DEFAULT_LIMIT = 10
    MAX_LIMIT = 100

    def __init__(self, config=None):
        self.config = config
        self.logger = logging.getLogger(f"vidtube.services.{self.get_service_name()}")

    def get_service_name(self) -> str:
        return "base"

    # ========================================================================
    # Logging
    # ========================================================================

    def log_info(self, message: str) -> None:
        self.logger.info(message)

    def log_debug(self, message: str) -> None:
        self.logger.debug(message)

    def log_warning(self, message: str) -> None:
        self.logger.warning(message)

    def log_error(self, message: str, error: Optional[Exception] = None) -> None:
        if error is not None:
            self.logger.error(f"{message}: {error}")
        else:
            self.logger.error(message)

    # ========================================================================
    # Validation
    # ========================================================================

    @staticmethod
    def validate_required(value: Any, field_name: str) -> None:
        """Reject None and blank strings"""
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{field_name} is required", field=field_name)

    @staticmethod
    def validate_id(value: Optional[str], field_name: str) -> str:
        """
        Check that an identifier is a well-formed reference

        Args:
            value: Raw identifier from path, query or body
            field_name: Name used in the error message

        Returns:
            Canonical identifier string

        Raises:
            ValidationError: If missing or not a UUID
        """
        BaseService.validate_required(value, field_name)
        try:
            return str(uuid.UUID(str(value).strip()))
        except ValueError:
            raise ValidationError(f"Invalid {field_name}", field=field_name)

    @staticmethod
    def ensure_owner(owner_id: str, user_id: str, resource_type: str) -> None:
        if owner_id != user_id:
            raise PermissionDeniedError(
                f"You are not allowed to modify this {resource_type.lower()}"
            )

    # ========================================================================
    # Pagination
    # ========================================================================

    def calculate_pagination(self, page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
        """
        Convert page/limit into offset/limit

        Returns:
            Tuple of (skip, limit)
        """
        page = page or self.DEFAULT_PAGE
        limit = limit or self.DEFAULT_LIMIT
        if page < 1:
            raise ValidationError("page must be >= 1", field="page")
        if limit < 1:
            raise ValidationError("limit must be >= 1", field="limit")
        limit = min(limit, self.MAX_LIMIT)
        return (page - 1) * limit, limit

    # ========================================================================
    # Error Handling
    # ========================================================================

    def handle_error(
        self, error: Exception, operation: str, context: Optional[Dict[str, Any]] = None
    ) -> ServiceError:
        """
        Convert an unexpected exception into a ServiceError

        Service errors pass through unchanged; anything else becomes
        InternalError with the operation name attached.
        """
        if isinstance(error, ServiceError):
            return error

        self.log_error(f"{operation} failed {context or {}}", error=error)
        return InternalError(f"Failed to {operation.replace('_', ' ')}", details=context)
