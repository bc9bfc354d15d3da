"""
Custom Exceptions for EventHub
==============================

Services raise these instead of HTTPException so that the same business
rules can be exercised without a request. Every exception carries the HTTP
status it maps to; the handlers registered in ``eventhub.main`` turn them
into ``{"error": message}`` responses.

Usage:
    from eventhub.core.exceptions import EventNotFoundError, CapacityExceededError

    if event is None:
        raise EventNotFoundError(event_id)

    if count >= event.max_participants:
        raise CapacityExceededError("participant")
"""

from typing import Optional, Any, Dict


class EventHubError(Exception):
    """Base exception for all EventHub errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(EventHubError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class ConflictError(EventHubError):
    """Resource already exists (reported as 400, not 409)"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")


class AlreadyRegisteredError(ConflictError):
    """Student already holds this role for the event"""

    def __init__(self, role: str = "participant"):
        if role == "volunteer":
            message = "Already volunteered for this event"
        else:
            message = "Already joined this event"
        super().__init__(message)
        self.code = "ALREADY_REGISTERED"
        self.details = {"role": role}


class CapacityExceededError(EventHubError):
    """Event has no free slots for this role"""

    status_code = 400

    def __init__(self, role: str = "participant"):
        super().__init__(
            f"No more {role} slots available",
            code="CAPACITY_EXCEEDED",
            details={"role": role}
        )


class AlreadyMarkedError(EventHubError):
    """Attendance was already recorded"""

    status_code = 400

    def __init__(self, role: str = "participant"):
        super().__init__(
            f"{role.capitalize()} already checked in",
            code="ALREADY_MARKED",
            details={"role": role}
        )


class InvalidSignatureError(EventHubError):
    """Payment signature did not match"""

    status_code = 400

    def __init__(self):
        super().__init__(
            "Payment verification failed. Invalid signature.",
            code="INVALID_SIGNATURE"
        )


class InvalidResetTokenError(EventHubError):
    """Password reset token unknown or already used"""

    status_code = 400

    def __init__(self):
        super().__init__("Invalid or expired reset token", code="INVALID_TOKEN")


class ExpiredResetTokenError(EventHubError):
    """Password reset token past its expiry"""

    status_code = 400

    def __init__(self):
        super().__init__("Reset token has expired", code="EXPIRED_TOKEN")


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(EventHubError):
    """No valid session"""

    status_code = 401

    def __init__(self, message: str = "Please sign in first"):
        super().__init__(message, code="AUTH_REQUIRED")


class InvalidCredentialsError(AuthenticationError):
    """Unknown USN or wrong password - deliberately indistinguishable"""

    def __init__(self):
        super().__init__("Invalid USN or password")
        self.code = "INVALID_CREDENTIALS"


class ForbiddenError(EventHubError):
    """Authenticated but not permitted"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(EventHubError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class EventNotFoundError(ResourceNotFoundError):
    """Event not found"""

    def __init__(self, event_id: Any):
        super().__init__("Event", event_id)


class StudentNotFoundError(ResourceNotFoundError):
    """Student not found"""

    def __init__(self, usn: str):
        super().__init__("User", usn)


class RegistrationNotFoundError(ResourceNotFoundError):
    """No participant/volunteer row for (student, event)"""

    def __init__(self, role: str, usn: str, event_id: Any):
        super().__init__(
            "Registration",
            f"{usn}:{event_id}",
            message=f"{role.capitalize()} not found for this event"
        )
        self.details["role"] = role


# ============================================
# Infrastructure Errors (500-type)
# ============================================

class StorageError(EventHubError):
    """Database operation failed"""

    status_code = 500

    def __init__(self, message: str = "Database error"):
        super().__init__(message, code="STORAGE_ERROR")


class ExternalServiceError(EventHubError):
    """Email or payment gateway call failed"""

    status_code = 500

    def __init__(self, service: str, message: str):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", details={"service": service})


class FeatureDisabledError(EventHubError):
    """Endpoint switched off by configuration"""

    status_code = 410

    def __init__(self, feature: str):
        super().__init__(f"{feature} is no longer available", code="FEATURE_DISABLED")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: EventHubError) -> Dict[str, Any]:
    """Convert exception to the API error body"""
    return {"error": error.message}
