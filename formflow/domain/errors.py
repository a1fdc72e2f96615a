"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class WorkflowValidationError(ValidationError):
    """Workflow step list failed structural validation"""
    error_code = "WORKFLOW_VALIDATION_ERROR"


class StepConfigurationError(ValidationError):
    """A workflow step is missing required configuration"""
    error_code = "STEP_CONFIGURATION_ERROR"


class FormulaError(ValidationError):
    """Calculation formula could not be evaluated"""
    error_code = "FORMULA_ERROR"


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class FormNotFoundError(NotFoundError):
    """Form not found"""
    error_code = "FORM_NOT_FOUND"


class SubmissionNotFoundError(NotFoundError):
    """Submission not found"""
    error_code = "SUBMISSION_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict"""
    error_code = "CONFLICT"
    http_status = 409


class AlreadyExistsError(ConflictError):
    """Resource already exists"""
    error_code = "ALREADY_EXISTS"


# Storage Errors
class StorageError(DomainError):
    """Persistence collaborator failed"""
    error_code = "STORAGE_ERROR"
    http_status = 503


# External Service Errors
class ExternalServiceError(DomainError):
    """External service failure"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502


class NotificationSendError(ExternalServiceError):
    """Notification transport failed"""
    error_code = "NOTIFICATION_SEND_ERROR"


class EmailSendError(NotificationSendError):
    """Email sending failed"""
    error_code = "EMAIL_SEND_ERROR"


class NotificationNotConfiguredError(NotificationSendError):
    """Notification transport has no credentials/endpoint configured"""
    error_code = "NOTIFICATION_NOT_CONFIGURED"
    http_status = 500
