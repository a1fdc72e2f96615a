"""Submission Service - Accepts form submissions and runs their workflow

Flow of submit_form:
1. Load the form (FormNotFoundError when unknown)
2. Persist the submission as pending
3. Run the form's workflow once
4. Mark the submission completed/failed and store the run's log lines
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo.errors import PyMongoError

from ..domain.models import Submission, SubmissionResponse, WorkflowLogEntry, WorkflowResult
from ..domain.enums import LogLevel, SubmissionStatus
from ..domain.errors import StorageError
from ..engine.engine import WorkflowEngine
from ..repositories.form_repo import FormRepository
from ..repositories.submission_repo import SubmissionRepository
from ..repositories.workflow_log_repo import WorkflowLogRepository
from ..utils.idgen import generate_submission_id
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SubmissionService:
    """Service for form submissions"""

    def __init__(
        self,
        engine: WorkflowEngine,
        forms: Optional[FormRepository] = None,
        submissions: Optional[SubmissionRepository] = None,
        workflow_logs: Optional[WorkflowLogRepository] = None
    ):
        self.engine = engine
        self.forms = forms or FormRepository()
        self.submissions = submissions or SubmissionRepository()
        self.workflow_logs = workflow_logs or WorkflowLogRepository()

    async def submit_form(
        self,
        form_id: str,
        data: Dict[str, Any],
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> SubmissionResponse:
        """
        Store a submission and run the form's workflow

        The submission is kept whatever the workflow outcome; its status
        reflects WorkflowResult.success.

        Raises:
            FormNotFoundError: Unknown form
            StorageError: The submission could not be stored
        """
        form = self.forms.get_form_or_raise(form_id)

        submission = Submission(
            id=generate_submission_id(),
            form_id=form.id,
            data=data,
            ip_address=ip_address,
            user_agent=user_agent,
            status=SubmissionStatus.PENDING,
        )
        try:
            self.submissions.create_submission(submission)
        except PyMongoError as e:
            logger.error(f"Failed to store submission: {e}", extra={"form_id": form_id})
            raise StorageError("Submission could not be stored", details={"form_id": form_id})

        result = await self.engine.execute_workflow(form.workflow, submission, form)

        status = SubmissionStatus.COMPLETED if result.success else SubmissionStatus.FAILED
        try:
            self.submissions.update_status(submission.id, status)
            self.workflow_logs.append_many(self._log_entries(submission.id, result))
        except PyMongoError as e:
            logger.error(
                f"Failed to record workflow outcome: {e}",
                extra={"submission_id": submission.id, "status": status.value}
            )

        return SubmissionResponse(
            success=result.success,
            submission_id=submission.id,
            message="Form submitted successfully" if result.success else "Form submitted but workflow failed",
            errors=result.errors,
            redirect_url=result.redirect_url,
        )

    def _log_entries(self, submission_id: str, result: WorkflowResult) -> List[WorkflowLogEntry]:
        entries = [
            WorkflowLogEntry(submission_id=submission_id, message=line, level=LogLevel.INFO)
            for line in result.logs
        ]
        entries.extend(
            WorkflowLogEntry(submission_id=submission_id, message=error, level=LogLevel.ERROR)
            for error in result.errors
        )
        return entries

    def list_submissions(
        self,
        form_id: str,
        since: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Submission]:
        """Submissions of an existing form, newest first"""
        self.forms.get_form_or_raise(form_id)
        return self.submissions.list_for_form(form_id, since=since, skip=skip, limit=limit)

    # =========================================================================
    # Workflow status log
    # =========================================================================

    def get_status_logs(self, submission_id: str) -> List[WorkflowLogEntry]:
        """Stored workflow log entries of a submission"""
        return self.workflow_logs.list_for_submission(submission_id)

    def append_status_log(
        self,
        submission_id: str,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[Dict[str, Any]] = None
    ) -> WorkflowLogEntry:
        """Append an externally reported entry to a submission's log"""
        entry = WorkflowLogEntry(
            submission_id=submission_id,
            message=message,
            level=level,
            details=details or {},
        )
        return self.workflow_logs.append(entry)
