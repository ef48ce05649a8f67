"""Domain-specific exceptions for service layer operations.

This module provides a structured exception hierarchy for bill tracking and
pairing operations, enabling consistent logging and client response generation.

Architecture:
- ServiceError: Base exception with correlation ID and context support
- Category Base Classes: AuthError, BusinessError, InfrastructureError
- Specific Exceptions: Concrete exceptions for bills, codes and connections
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union
from http import HTTPStatus


class ErrorSeverity(Enum):
    """Error severity levels for logging and monitoring."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification and handling."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    INFRASTRUCTURE = "infrastructure"
    SYSTEM = "system"


class ServiceError(Exception):
    """Base exception for all service layer errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for client handling
        correlation_id: Request correlation ID for tracing
        details: Additional error context (sanitized for logging)
        user_message: User-friendly message for client display
        severity: Error severity level for logging/monitoring
        category: Error category for classification
        http_status: HTTP status code for API responses
    """

    def __init__(
        self,
        message: str,
        error_code: str = "SERVICE_ERROR",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.correlation_id = correlation_id
        self.details = details or {}
        self.user_message = user_message or message
        self.severity = severity
        self.category = category
        self.http_status = http_status

    def to_dict(self, include_sensitive: bool = False) -> Dict[str, Any]:
        """Convert exception to dictionary for logging or client response.

        Args:
            include_sensitive: Whether to include sensitive details

        Returns:
            Dictionary representation of the error
        """
        result = {
            "error_code": self.error_code,
            "message": self.user_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "http_status": self.http_status.value
        }

        if self.correlation_id:
            result["correlation_id"] = self.correlation_id

        if include_sensitive and self.details:
            result["details"] = self.details
            result["internal_message"] = self.message

        return result

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


# =============================================================================
# AUTHENTICATION & AUTHORIZATION ERRORS
# =============================================================================

class AuthError(ServiceError):
    """Base class for authentication and authorization errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.AUTHENTICATION,
        http_status: HTTPStatus = HTTPStatus.UNAUTHORIZED
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            user_message=user_message,
            severity=severity,
            category=category,
            http_status=http_status
        )


class AuthenticationError(AuthError):
    """Authentication failed (no session, bad or expired token)."""

    def __init__(
        self,
        message: str = "Authentication failed",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="AUTH_FAILED",
            correlation_id=correlation_id,
            details=details,
            user_message="Authentication failed. Please sign in again."
        )


class TokenRevokedError(AuthError):
    """Token belongs to a session that has been signed out."""

    def __init__(self, correlation_id: Optional[str] = None):
        super().__init__(
            message="Token has been revoked",
            error_code="TOKEN_REVOKED",
            correlation_id=correlation_id,
            user_message="Your session has ended. Please sign in again.",
            severity=ErrorSeverity.LOW
        )


class UserNotFoundError(AuthError):
    """User not found during authentication."""

    def __init__(
        self,
        email: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message="User not found",
            error_code="USER_NOT_FOUND",
            correlation_id=correlation_id,
            details={"email": email},
            user_message="User account not found. Please check your email address.",
            category=ErrorCategory.RESOURCE_NOT_FOUND,
            http_status=HTTPStatus.NOT_FOUND
        )


class InvalidPasswordError(AuthError):
    """Invalid password provided."""

    def __init__(
        self,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message="Invalid password",
            error_code="INVALID_PASSWORD",
            correlation_id=correlation_id,
            user_message="Invalid password. Please try again.",
            severity=ErrorSeverity.LOW
        )


class EmailAlreadyExistsError(AuthError):
    """Email address is already registered."""

    def __init__(
        self,
        email: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message="Email address already registered",
            error_code="EMAIL_EXISTS",
            correlation_id=correlation_id,
            details={"email": email},
            user_message="This email address is already registered. Please use a different email or try logging in.",
            category=ErrorCategory.CONFLICT,
            http_status=HTTPStatus.CONFLICT
        )


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(ServiceError):
    """Input validation failed."""

    def __init__(
        self,
        field: str,
        message: str,
        correlation_id: Optional[str] = None,
        validation_errors: Optional[List[Dict[str, str]]] = None
    ):
        details = {"field": field, "validation_message": message}
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=f"Validation failed for {field}: {message}",
            error_code="VALIDATION_ERROR",
            correlation_id=correlation_id,
            details=details,
            user_message=f"Invalid {field}: {message}",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
            http_status=HTTPStatus.BAD_REQUEST
        )


# =============================================================================
# BUSINESS DOMAIN ERRORS
# =============================================================================

class BusinessError(ServiceError):
    """Base class for business domain errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_RULE,
        http_status: HTTPStatus = HTTPStatus.BAD_REQUEST
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            user_message=user_message,
            severity=severity,
            category=category,
            http_status=http_status
        )


class ResourceNotFoundError(BusinessError):
    """Base class for resource not found errors."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Union[int, str, None],
        user_id: Optional[int] = None,
        correlation_id: Optional[str] = None
    ):
        details = {"resource_type": resource_type, "resource_id": resource_id}
        if user_id is not None:
            details["user_id"] = user_id

        super().__init__(
            message=f"{resource_type} not found or access denied",
            error_code=f"{resource_type.upper()}_NOT_FOUND",
            correlation_id=correlation_id,
            details=details,
            user_message=f"{resource_type} not found or you don't have permission to access it.",
            category=ErrorCategory.RESOURCE_NOT_FOUND,
            http_status=HTTPStatus.NOT_FOUND
        )


# =============================================================================
# BILL DOMAIN ERRORS
# =============================================================================

class BillNotFoundError(ResourceNotFoundError):
    """Bill not found or not visible to the user."""

    def __init__(
        self,
        bill_id: int,
        user_id: int,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            resource_type="Bill",
            resource_id=bill_id,
            user_id=user_id,
            correlation_id=correlation_id
        )


class InvalidSplitError(BusinessError):
    """Split percentages are not usable."""

    def __init__(
        self,
        bill_id: int,
        reason: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"Invalid split for bill {bill_id}: {reason}",
            error_code="INVALID_SPLIT",
            correlation_id=correlation_id,
            details={"bill_id": bill_id, "reason": reason},
            user_message="Split percentages must add up to 100.",
            severity=ErrorSeverity.LOW
        )


# =============================================================================
# PAIRING DOMAIN ERRORS
# =============================================================================

class ConnectionCodeInvalidError(BusinessError):
    """Code cannot be redeemed; reason is one of not_found, expired, already_used."""

    def __init__(
        self,
        reason: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"Connection code rejected: {reason}",
            error_code="CONNECTION_CODE_INVALID",
            correlation_id=correlation_id,
            details={"reason": reason},
            user_message="Invalid or expired connection code.",
            severity=ErrorSeverity.LOW
        )
        self.reason = reason

    def to_dict(self, include_sensitive: bool = False) -> Dict[str, Any]:
        result = super().to_dict(include_sensitive)
        result["reason"] = self.reason
        return result


class ConnectionNotFoundError(ResourceNotFoundError):
    """User has no shared connection."""

    def __init__(
        self,
        user_id: int,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            resource_type="Connection",
            resource_id=None,
            user_id=user_id,
            correlation_id=correlation_id
        )


class AlreadyConnectedError(BusinessError):
    """A participant already belongs to a connection."""

    def __init__(
        self,
        user_id: int,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"User {user_id} already belongs to a shared connection",
            error_code="ALREADY_CONNECTED",
            correlation_id=correlation_id,
            details={"user_id": user_id},
            user_message="One of you is already connected. Disconnect first to pair again.",
            category=ErrorCategory.CONFLICT,
            http_status=HTTPStatus.CONFLICT
        )


class SelfConnectionError(BusinessError):
    """User tried to redeem their own code."""

    def __init__(
        self,
        user_id: int,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message="Cannot connect with yourself",
            error_code="SELF_CONNECTION",
            correlation_id=correlation_id,
            details={"user_id": user_id},
            user_message="You cannot use your own connection code.",
            severity=ErrorSeverity.LOW
        )


class ConnectionNotActiveError(BusinessError):
    """Operation needs both sides to have accepted."""

    def __init__(
        self,
        user_id: int,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message="Shared connection is not active",
            error_code="CONNECTION_NOT_ACTIVE",
            correlation_id=correlation_id,
            details={"user_id": user_id},
            user_message="Both of you need to accept the connection first."
        )


# =============================================================================
# INFRASTRUCTURE ERRORS
# =============================================================================

class InfrastructureError(ServiceError):
    """Base class for infrastructure-related errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH,
        http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            user_message=user_message or "A system error occurred. Please try again later.",
            severity=severity,
            category=ErrorCategory.INFRASTRUCTURE,
            http_status=http_status
        )


class BackendError(InfrastructureError):
    """Table-store operation failed."""

    def __init__(
        self,
        operation: str,
        reason: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"Backend {operation} failed: {reason}",
            error_code="BACKEND_ERROR",
            correlation_id=correlation_id,
            details={"operation": operation, "reason": reason},
            severity=ErrorSeverity.CRITICAL
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def create_error_response(
    error: ServiceError,
    include_details: bool = False
) -> Dict[str, Any]:
    """Create standardized error response dictionary.

    Args:
        error: ServiceError instance
        include_details: Whether to include sensitive details

    Returns:
        Standardized error response dictionary
    """
    return error.to_dict(include_sensitive=include_details)


def get_http_status_for_error(error: Exception) -> HTTPStatus:
    """Get appropriate HTTP status code for an exception.

    Args:
        error: Exception instance

    Returns:
        Appropriate HTTP status code
    """
    if isinstance(error, ServiceError):
        return error.http_status

    error_mappings = {
        ValueError: HTTPStatus.BAD_REQUEST,
        TypeError: HTTPStatus.BAD_REQUEST,
        KeyError: HTTPStatus.NOT_FOUND,
        NotImplementedError: HTTPStatus.NOT_IMPLEMENTED,
    }

    return error_mappings.get(type(error), HTTPStatus.INTERNAL_SERVER_ERROR)
