"""
Document store used for groups and notifications.

Documents are plain dicts. The store assigns ids and timestamps and returns
every document with ``id``, ``created_at`` and ``updated_at`` merged into its
data.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from .exceptions import DocumentNotFoundError, DuplicateDocumentError, StoreUnavailableError
from ..models.document import Document

logger = logging.getLogger(__name__)

Filter = Tuple[str, str, Any]

OPERATORS = {
    "==": lambda field, value: field == value,
    "!=": lambda field, value: field != value,
    "in": lambda field, value: field in value,
    "array-contains": lambda field, value: isinstance(field, list) and value in field,
}


def matches_filters(data: Dict[str, Any], filters: Iterable[Filter]) -> bool:
    """Check a document against AND-ed ``(field, operator, value)`` filters."""
    for field, operator, value in filters:
        try:
            compare = OPERATORS[operator]
        except KeyError:
            raise ValueError(f"Unsupported query operator: {operator}")
        if field not in data or not compare(data[field], value):
            return False
    return True


class DocumentStore(ABC):
    """Minimal create/read/update contract over document collections."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document, or None if it does not exist."""

    @abstractmethod
    def query(self, collection: str, filters: Iterable[Filter] = ()) -> List[Dict[str, Any]]:
        """Return documents matching every filter, oldest first."""

    @abstractmethod
    def create(
        self,
        collection: str,
        data: Dict[str, Any],
        unique_field: Optional[str] = None,
    ) -> str:
        """
        Store a new document and return its id.

        When ``unique_field`` is given the store rejects the write with
        DuplicateDocumentError if another document in the collection already
        holds the same value for that field.
        """

    @abstractmethod
    def update(self, collection: str, doc_id: str, partial: Dict[str, Any]) -> None:
        """Shallow-merge ``partial`` into the document and refresh updated_at."""


class SQLDocumentStore(DocumentStore):
    """Document store backed by a single SQL table with a JSON column."""

    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _to_dict(row: Document) -> Dict[str, Any]:
        return {
            **row.data,
            "id": row.id,
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }

    def _load(self, collection: str, doc_id: str) -> Optional[Document]:
        try:
            return self.session.exec(
                select(Document).where(
                    Document.collection == collection, Document.id == doc_id
                )
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read {collection}/{doc_id}: {e}")
            raise StoreUnavailableError() from e

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        row = self._load(collection, doc_id)
        return self._to_dict(row) if row else None

    def query(self, collection: str, filters: Iterable[Filter] = ()) -> List[Dict[str, Any]]:
        """
        Return documents matching every filter, oldest first.

        ``==`` filters on string values run in SQL against the JSON column.
        Every other filter is applied in Python to the rows that come back,
        so ``array-contains`` lookups scan the whole collection.
        """
        filters = list(filters)
        statement = select(Document).where(Document.collection == collection)
        for field, operator, value in filters:
            if operator == "==" and isinstance(value, str):
                statement = statement.where(Document.data[field].as_string() == value)

        try:
            rows = self.session.exec(statement.order_by(Document.created_at)).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to query {collection}: {e}")
            raise StoreUnavailableError() from e

        return [self._to_dict(row) for row in rows if matches_filters(row.data, filters)]

    def create(
        self,
        collection: str,
        data: Dict[str, Any],
        unique_field: Optional[str] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        unique_key = None
        if unique_field is not None:
            if data.get(unique_field) is None:
                raise ValueError(f"Unique field {unique_field!r} has no value")
            unique_key = str(data[unique_field])

        row = Document(
            collection=collection,
            unique_key=unique_key,
            data=dict(data),
            created_at=now,
            updated_at=now,
        )

        try:
            self.session.add(row)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Duplicate {unique_field}={unique_key} in {collection}")
            raise DuplicateDocumentError(
                f"A document with {unique_field} {unique_key} already exists"
            ) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to create document in {collection}: {e}")
            raise StoreUnavailableError() from e

        logger.info(f"Created document {collection}/{row.id}")
        return row.id

    def update(self, collection: str, doc_id: str, partial: Dict[str, Any]) -> None:
        row = self._load(collection, doc_id)
        if row is None:
            raise DocumentNotFoundError(f"Document {collection}/{doc_id} not found")

        # JSON columns are not mutation-tracked, so assign a fresh dict
        row.data = {**row.data, **partial}
        row.updated_at = datetime.now(timezone.utc)

        try:
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Failed to update {collection}/{doc_id}: {e}")
            raise StoreUnavailableError() from e

        logger.info(f"Updated document {collection}/{doc_id}: {sorted(partial)}")
