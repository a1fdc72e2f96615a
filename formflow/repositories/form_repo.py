"""Form Repository - Data access for form definitions"""
from typing import Any, Dict, List, Optional
from pymongo.collection import Collection
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError
from pydantic import ValidationError

from .mongo_client import get_collection, FORMS
from ..domain.models import FormDefinition
from ..domain.errors import FormNotFoundError, AlreadyExistsError
from ..utils.logger import get_logger
from ..utils.time import utc_now

logger = get_logger(__name__)


def _to_doc(form: FormDefinition) -> Dict[str, Any]:
    doc = form.model_dump(mode="json", by_alias=True)
    doc["_id"] = form.id
    return doc


def _from_doc(doc: Dict[str, Any]) -> FormDefinition:
    doc.pop("_id", None)
    return FormDefinition.model_validate(doc)


class FormRepository:
    """Repository for form definitions"""

    def __init__(self, collection: Optional[Collection] = None):
        self._forms: Collection = collection if collection is not None else get_collection(FORMS)

    def create_form(self, form: FormDefinition) -> FormDefinition:
        """Insert a new form definition"""
        now = utc_now()
        form = form.model_copy(update={"created_at": form.created_at or now, "updated_at": now})

        try:
            self._forms.insert_one(_to_doc(form))
        except DuplicateKeyError:
            raise AlreadyExistsError(f"Form {form.id} already exists")

        logger.info(f"Created form: {form.id}", extra={"form_id": form.id})
        return form

    def get_form(self, form_id: str) -> Optional[FormDefinition]:
        """Get form by ID"""
        doc = self._forms.find_one({"_id": form_id})
        if not doc:
            return None
        try:
            return _from_doc(doc)
        except ValidationError as e:
            logger.error(
                f"Corrupted form data for {form_id}. Validation failed: {str(e)[:500]}",
                extra={"form_id": form_id}
            )
            raise

    def get_form_or_raise(self, form_id: str) -> FormDefinition:
        """Get form by ID or raise error"""
        form = self.get_form(form_id)
        if not form:
            raise FormNotFoundError(f"Form {form_id} not found", details={"form_id": form_id})
        return form

    def list_forms(
        self,
        category: Optional[str] = None,
        is_template: Optional[bool] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[FormDefinition]:
        """List forms, most recently updated first"""
        query: Dict[str, Any] = {}
        if category:
            query["templateCategory"] = category
        if is_template is not None:
            query["isTemplate"] = is_template

        cursor = self._forms.find(query).sort("updatedAt", DESCENDING).skip(skip).limit(limit)
        return [_from_doc(doc) for doc in cursor]

    def update_form(self, form_id: str, form: FormDefinition) -> FormDefinition:
        """Replace a stored form; the id and creation time are preserved"""
        existing = self.get_form_or_raise(form_id)
        form = form.model_copy(update={
            "id": form_id,
            "created_at": existing.created_at,
            "updated_at": utc_now(),
        })
        self._forms.replace_one({"_id": form_id}, _to_doc(form))
        logger.info(f"Updated form: {form_id}", extra={"form_id": form_id})
        return form

    def delete_form(self, form_id: str) -> None:
        """Delete a form or raise when it does not exist"""
        result = self._forms.delete_one({"_id": form_id})
        if result.deleted_count == 0:
            raise FormNotFoundError(f"Form {form_id} not found", details={"form_id": form_id})
        logger.info(f"Deleted form: {form_id}", extra={"form_id": form_id})
