from sqlmodel import SQLModel, Field, Column, JSON
from sqlalchemy import UniqueConstraint
from uuid import uuid4
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class Document(SQLModel, table=True):
    """Schemaless document row backing the document store."""

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True, max_length=32)
    collection: str = Field(index=True, max_length=64)

    # Value of the collection's unique field, when the writer asked for one
    unique_key: Optional[str] = Field(default=None, max_length=255)

    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("collection", "unique_key", name="uq_document_collection_unique_key"),
    )
