"""Submission Repository - Data access for form submissions"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import DESCENDING

from .mongo_client import get_collection, SUBMISSIONS
from ..domain.models import Submission
from ..domain.enums import SubmissionStatus
from ..domain.errors import SubmissionNotFoundError
from ..utils.logger import get_logger
from ..utils.time import format_iso

logger = get_logger(__name__)


class SubmissionRepository:
    """Repository for submission operations"""

    def __init__(self, collection: Optional[Collection] = None):
        self._submissions: Collection = collection if collection is not None else get_collection(SUBMISSIONS)

    def create_submission(self, submission: Submission) -> Submission:
        """Persist a new submission"""
        doc = submission.model_dump(mode="json", by_alias=True)
        doc["_id"] = submission.id
        # Fixed millisecond form so string order is time order for the since filter
        doc["submittedAt"] = format_iso(submission.submitted_at)

        self._submissions.insert_one(doc)
        logger.info(
            f"Created submission: {submission.id}",
            extra={"submission_id": submission.id, "form_id": submission.form_id}
        )
        return submission

    def get_submission(self, submission_id: str) -> Optional[Submission]:
        """Get submission by ID"""
        doc = self._submissions.find_one({"_id": submission_id})
        if doc:
            doc.pop("_id", None)
            return Submission.model_validate(doc)
        return None

    def get_submission_or_raise(self, submission_id: str) -> Submission:
        """Get submission by ID or raise error"""
        submission = self.get_submission(submission_id)
        if not submission:
            raise SubmissionNotFoundError(f"Submission {submission_id} not found")
        return submission

    def update_status(self, submission_id: str, status: SubmissionStatus) -> None:
        """Set the final status of a submission"""
        result = self._submissions.update_one(
            {"_id": submission_id},
            {"$set": {"status": status.value}}
        )
        if result.matched_count == 0:
            raise SubmissionNotFoundError(f"Submission {submission_id} not found")
        logger.info(
            f"Submission {submission_id} marked {status.value}",
            extra={"submission_id": submission_id, "status": status.value}
        )

    def list_for_form(
        self,
        form_id: str,
        since: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Submission]:
        """Submissions of a form, newest first"""
        query: Dict[str, Any] = {"formId": form_id}
        if since is not None:
            query["submittedAt"] = {"$gte": format_iso(since)}
        cursor = self._submissions.find(query).sort("submittedAt", DESCENDING).skip(skip).limit(limit)

        submissions = []
        for doc in cursor:
            doc.pop("_id", None)
            submissions.append(Submission.model_validate(doc))
        return submissions

    def count_for_form(self, form_id: str) -> int:
        """Number of submissions received by a form"""
        return self._submissions.count_documents({"formId": form_id})
