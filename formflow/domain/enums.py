"""Domain Enumerations - All status and type definitions"""
from enum import Enum


class SubmissionStatus(str, Enum):
    """Lifecycle of one form submission"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class StepType(str, Enum):
    """Types of workflow steps"""
    CONDITION = "condition"
    NOTIFICATION = "notification"
    ACTION = "action"
    INTEGRATION = "integration"


class ConditionOperator(str, Enum):
    """Comparison operators for condition steps"""
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"


class NotificationType(str, Enum):
    """Notification channels"""
    EMAIL = "email"
    SMS = "sms"
    SLACK = "slack"
    PUSH = "push"


class ActionType(str, Enum):
    """Action step kinds"""
    WEBHOOK = "webhook"
    EMAIL = "email"  # Accepted by the designer; not executable as an action
    REDIRECT = "redirect"
    DATABASE = "database"
    CALCULATION = "calculation"


class HttpMethod(str, Enum):
    """HTTP methods for webhook/integration calls"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class IntegrationService(str, Enum):
    """Third-party integration targets"""
    ZAPIER = "zapier"
    INTEGROMAT = "integromat"  # Accepted by the designer; no executor
    CUSTOM = "custom"


class LogLevel(str, Enum):
    """Severity of a stored workflow log entry"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
