"""Domain Models - Pydantic schemas for forms, submissions and workflows

Wire names are camelCase (the form designer speaks JSON in camelCase);
attributes are snake_case. Models accept either spelling on input.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import StepType, SubmissionStatus, LogLevel
from ..utils.idgen import generate_step_id
from ..utils.time import utc_now


class CamelModel(BaseModel):
    """Base model serialising to camelCase"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ============================================================================
# Form Definition
# ============================================================================

class ValidationRule(CamelModel):
    """Validation rule attached to a form element"""
    type: str = Field(..., description="required, minLength, maxLength, email, pattern, min, max")
    value: Optional[Any] = None
    message: str = ""


class FormElement(CamelModel):
    """A single form element; layout keys (position, size, style) are ignored"""
    id: str = Field(..., description="Unique within the form")
    type: str = Field(..., description="Element kind, e.g. text, email, select, checkbox")
    label: str = ""
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[str]] = None
    properties: Dict[str, Any] = Field(default_factory=dict)
    validation: List[ValidationRule] = Field(default_factory=list)
    page_id: Optional[str] = None


class FormPage(CamelModel):
    """Ordered page of elements"""
    id: str
    title: str = ""
    description: Optional[str] = None
    elements: List[FormElement] = Field(default_factory=list)
    order: int = 0


# ============================================================================
# Workflow Step Configuration
# ============================================================================

class WorkflowAction(CamelModel):
    """Mutation requested by a matching condition step"""
    type: str = Field(..., description="show, hide, setValue, redirect, calculate, validate")
    target_id: Optional[str] = None
    value: Optional[str] = None
    formula: Optional[str] = None


class ConditionConfig(CamelModel):
    """Condition branch of a workflow step"""
    model_config = ConfigDict(extra="allow")

    field: str = ""
    operator: str = ""
    value: Optional[Any] = ""
    actions: List[WorkflowAction] = Field(default_factory=list)


class NotificationConfig(CamelModel):
    """Notification branch of a workflow step"""
    model_config = ConfigDict(extra="allow")

    type: str = Field("email", description="email, sms, slack, push")
    recipients: List[str] = Field(default_factory=list)
    subject: Optional[str] = None
    message: str = ""
    template: Optional[str] = None
    webhook_url: Optional[str] = Field(None, description="Slack webhook override")
    channel: Optional[str] = None
    username: Optional[str] = None
    icon: Optional[str] = None


class ActionConfig(CamelModel):
    """Action branch of a workflow step"""
    model_config = ConfigDict(extra="allow")

    type: str = Field(..., description="webhook, email, redirect, database, calculation")
    endpoint: Optional[str] = None
    method: Optional[str] = "POST"
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    template: Optional[str] = None
    table_name: Optional[str] = Field(None, description="Target table/collection for database actions")
    additional_fields: Dict[str, Any] = Field(default_factory=dict)
    formula: Optional[str] = Field(None, description="Arithmetic formula for calculation actions")
    target_field: Optional[str] = None


class IntegrationConfig(CamelModel):
    """Integration branch of a workflow step"""
    model_config = ConfigDict(extra="allow")

    service: str = Field("custom", description="zapier, integromat, custom")
    endpoint: str = ""
    api_key: Optional[str] = None
    mapping: Dict[str, str] = Field(default_factory=dict)
    method: Optional[str] = "POST"
    headers: Dict[str, str] = Field(default_factory=dict)
    additional_data: Dict[str, Any] = Field(default_factory=dict)


class WorkflowConfig(CamelModel):
    """Step configuration; exactly one branch, matching the step type, is expected"""
    condition: Optional[ConditionConfig] = None
    notification: Optional[NotificationConfig] = None
    action: Optional[ActionConfig] = None
    integration: Optional[IntegrationConfig] = None

    def populated(self) -> List[str]:
        """Names of the branches that are set"""
        return [step_type.value for step_type in StepType if getattr(self, step_type.value) is not None]


class WorkflowStep(CamelModel):
    """One unit of workflow automation"""
    id: str = Field(default_factory=generate_step_id)
    type: StepType
    title: str = ""
    description: str = ""
    order: int = 0
    enabled: bool = True
    config: WorkflowConfig = Field(default_factory=WorkflowConfig)

    def branch(self) -> Optional[CamelModel]:
        """Config branch selected by the step type, or None when absent"""
        return getattr(self.config, StepType(self.type).value, None)


class FormDefinition(CamelModel):
    """Form snapshot consumed by the workflow engine"""
    id: str = ""
    title: str = ""
    description: str = ""
    pages: List[FormPage] = Field(default_factory=list)
    workflow: List[WorkflowStep] = Field(default_factory=list)
    settings: Dict[str, Any] = Field(default_factory=dict)
    theme: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_template: bool = False
    template_category: Optional[str] = None

    def elements(self) -> List[FormElement]:
        """All elements across pages, in page then element order"""
        return [element for page in self.pages for element in page.elements]

    def element_ids(self) -> List[str]:
        """Ids of every element in the form"""
        return [element.id for element in self.elements()]


# ============================================================================
# Submission
# ============================================================================

class Submission(CamelModel):
    """One completed instance of a user filling out a form"""
    id: str
    form_id: str
    data: Dict[str, Any] = Field(default_factory=dict)
    submitted_at: datetime = Field(default_factory=utc_now)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.PENDING


# ============================================================================
# Results
# ============================================================================

class WorkflowResult(CamelModel):
    """Aggregate outcome of one workflow run"""
    success: bool
    errors: List[str] = Field(default_factory=list)
    logs: List[str] = Field(default_factory=list)
    redirect_url: Optional[str] = None


class ValidationResult(CamelModel):
    """Outcome of static workflow validation"""
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class StepTestResult(CamelModel):
    """Dry-run outcome for one step"""
    step_id: str
    step_type: str
    step_title: str
    success: bool
    message: str
    execution_time: float = Field(..., description="Milliseconds")
    error: Optional[str] = None


class WorkflowTestReport(CamelModel):
    """Outcome of a full workflow test (dry-run checks + engine run)"""
    success: bool
    message: str
    errors: List[str] = Field(default_factory=list)
    logs: List[str] = Field(default_factory=list)
    execution_time: float = Field(..., description="Milliseconds")
    step_results: List[StepTestResult] = Field(default_factory=list)


class PerformanceReport(CamelModel):
    """Aggregated timings over repeated workflow tests"""
    average_time: float
    min_time: float
    max_time: float
    success_rate: float = Field(..., description="Percentage of successful runs")
    results: List[WorkflowTestReport] = Field(default_factory=list)


class SubmissionResponse(CamelModel):
    """Result of submitting a form"""
    success: bool
    submission_id: str
    message: str
    errors: List[str] = Field(default_factory=list)
    redirect_url: Optional[str] = None


class WorkflowLogEntry(CamelModel):
    """Stored log line for a submission's workflow run"""
    submission_id: str
    message: str
    level: LogLevel = LogLevel.INFO
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now)
