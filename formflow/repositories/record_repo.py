"""Record Repository - Sink for database workflow actions

Each database action writes one record per (formId, submissionId) into the
collection named by the action's tableName.
"""
from typing import Any, Dict, Optional
from pymongo.database import Database

from .mongo_client import get_database, DEFAULT_RECORD_TABLE, RESERVED_COLLECTIONS
from ..domain.errors import StepConfigurationError
from ..utils.idgen import generate_record_id
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


class RecordRepository:
    """Repository for records written by database actions"""

    def __init__(self, database: Optional[Database] = None):
        self._database = database

    def _db(self) -> Database:
        # Resolved on first write so an unreachable server surfaces as PyMongoError there
        if self._database is None:
            self._database = get_database()
        return self._database

    def save_record(
        self,
        form_id: str,
        submission_id: str,
        record: Dict[str, Any],
        table_name: Optional[str] = None
    ) -> str:
        """
        Upsert the record for a submission

        Returns:
            The record id (kept stable across repeated writes)

        Raises:
            StepConfigurationError: table_name is one of the service's own collections
            PyMongoError: The database could not be reached or rejected the write
        """
        table = table_name or DEFAULT_RECORD_TABLE
        if table in RESERVED_COLLECTIONS:
            raise StepConfigurationError(
                f'Table name "{table}" is reserved',
                details={"table_name": table}
            )
        key = {"formId": form_id, "submissionId": submission_id}
        record_id = generate_record_id()

        result = self._db()[table].find_one_and_update(
            key,
            {
                "$set": {**record, **key, "updatedAt": utc_now()},
                "$setOnInsert": {"recordId": record_id, "createdAt": utc_now()},
            },
            upsert=True,
            return_document=True,
        )
        stored_id = result.get("recordId", record_id) if result else record_id

        logger.info(
            f"Saved record {stored_id} to {table}",
            extra={"form_id": form_id, "submission_id": submission_id}
        )
        return stored_id

    def get_record(self, form_id: str, submission_id: str, table_name: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Stored record for a submission, without the Mongo _id"""
        doc = self._db()[table_name or DEFAULT_RECORD_TABLE].find_one(
            {"formId": form_id, "submissionId": submission_id}
        )
        if doc:
            doc.pop("_id", None)
        return doc
