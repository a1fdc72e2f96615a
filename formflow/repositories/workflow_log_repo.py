"""Workflow Log Repository - Append-only status log per submission"""
from typing import List, Optional
from pymongo.collection import Collection
from pymongo import ASCENDING

from .mongo_client import get_collection, WORKFLOW_LOGS
from ..domain.models import WorkflowLogEntry
from ..utils.logger import get_logger

logger = get_logger(__name__)


class WorkflowLogRepository:
    """Repository for workflow log entries (append-only)"""

    def __init__(self, collection: Optional[Collection] = None):
        self._logs: Collection = collection if collection is not None else get_collection(WORKFLOW_LOGS)

    def append(self, entry: WorkflowLogEntry) -> WorkflowLogEntry:
        """Append one entry"""
        self._logs.insert_one(entry.model_dump(mode="json", by_alias=True))
        return entry

    def append_many(self, entries: List[WorkflowLogEntry]) -> List[WorkflowLogEntry]:
        """Append several entries in one round trip"""
        if not entries:
            return []
        self._logs.insert_many([entry.model_dump(mode="json", by_alias=True) for entry in entries])
        logger.info(
            f"Stored {len(entries)} workflow log entries",
            extra={"submission_id": entries[0].submission_id}
        )
        return entries

    def list_for_submission(self, submission_id: str, limit: int = 500) -> List[WorkflowLogEntry]:
        """Entries for a submission in the order they were written"""
        cursor = (
            self._logs.find({"submissionId": submission_id})
            .sort([("timestamp", ASCENDING), ("_id", ASCENDING)])
            .limit(limit)
        )
        entries = []
        for doc in cursor:
            doc.pop("_id", None)
            entries.append(WorkflowLogEntry.model_validate(doc))
        return entries
