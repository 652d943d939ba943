"""
Record model backing the hurl/view key-value store.

Every stored document is addressed by a collection name and a
content-derived key, so the same key can appear once per collection.
"""

from datetime import datetime

from sqlalchemy import String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base


class Record(Base):
    """
    SQLAlchemy model for a stored document.

    Attributes:
        collection: Collection name ("hurls" or "views")
        key: Content-derived id, shared by a hurl and its view
        data: The JSON document
        saved_at: Timestamp of the last write
    """
    __tablename__ = "records"

    collection: Mapped[str] = mapped_column(String(20), primary_key=True)
    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, default=dict)
    saved_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)
