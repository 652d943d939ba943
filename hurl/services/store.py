"""
Key-value persistence for hurls and views.

Documents are addressed by collection and content-derived id. Writes are
upserts, so saving the same id twice simply replaces the document.
"""

from typing import Any, Literal, get_args

from sqlalchemy.orm import Session

from ..models.record import Record


Collection = Literal["hurls", "views"]

COLLECTIONS = get_args(Collection)


def _check_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {collection}")


def save(db: Session, collection: Collection, id: str, record: dict[str, Any]) -> str:
    """
    Store ``record`` under ``id``, replacing any previous document.

    Returns:
        The id the record was stored under
    """
    _check_collection(collection)

    existing = db.get(Record, (collection, id))
    if existing is None:
        db.add(Record(collection=collection, key=id, data=dict(record)))
    else:
        existing.data = dict(record)
    db.commit()
    return id


def find(db: Session, collection: Collection, id: str) -> dict[str, Any] | None:
    """Return the document stored under ``id``, or None."""
    _check_collection(collection)

    record = db.get(Record, (collection, id))
    if record is None:
        return None
    return dict(record.data)


def delete(db: Session, collection: Collection, id: str) -> bool:
    """Delete the document stored under ``id``. Returns False if there was none."""
    _check_collection(collection)

    record = db.get(Record, (collection, id))
    if record is None:
        return False
    db.delete(record)
    db.commit()
    return True
