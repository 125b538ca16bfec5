# server/core/store.py

import logging
import re
from contextlib import contextmanager
from typing import Any, Optional

from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session


logger = logging.getLogger(__name__)

OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{32}")


class StoreError(Exception):
    """The backing database failed or could not be reached."""


class DuplicateKeyError(StoreError):
    """A unique index rejected the write."""


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def is_duplicate_key(error: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed", postgres: "duplicate key value", mysql: "Duplicate entry"
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message


# -------------------------------
# Document Store
# -------------------------------

class DocumentStore:
    """
    Document-style access to one table.

    Every record is handed out as a plain dict produced by the model's
    `to_document()`, keyed by a server-generated hex `_id`. Writes take
    column names as keys. Database failures surface as StoreError so
    callers never see SQLAlchemy exceptions.
    """

    def __init__(self, db: Session, model):
        self.db = db
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            if not is_duplicate_key(e):
                logger.exception(f"{self.name} {operation} violated a constraint")
                raise StoreError(str(e.orig)) from e
            logger.info(f"{self.name} {operation} rejected by unique index: {e.orig}")
            raise DuplicateKeyError(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception(f"{self.name} {operation} failed")
            raise StoreError(str(e)) from e

    def _filter(self, filters: dict, match_any: bool):
        clauses = [getattr(self.model, key) == value for key, value in filters.items()]
        return or_(*clauses) if match_any else and_(*clauses)

    def insert(self, fields: dict) -> dict:
        with self._guard("insert"):
            obj = self.model(**fields)
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            return obj.to_document()

    def find_one(self, match_any: bool = False, **filters) -> Optional[dict]:
        """
        Returns the first document matching all filters,
        or any of them when `match_any` is set.
        """
        if not filters:
            raise ValueError("find_one requires at least one filter")
        with self._guard("find_one"):
            obj = self.db.query(self.model).filter(self._filter(filters, match_any)).first()
            return obj.to_document() if obj else None

    def find_all(self) -> list[dict]:
        with self._guard("find_all"):
            return [obj.to_document() for obj in self.db.query(self.model).all()]

    def find_by_id(self, object_id: str) -> Optional[dict]:
        with self._guard("find_by_id"):
            obj = self.db.get(self.model, object_id)
            return obj.to_document() if obj else None

    def update_by_id(self, object_id: str, fields: dict) -> Optional[dict]:
        with self._guard("update_by_id"):
            obj = self.db.get(self.model, object_id)
            if obj is None:
                return None
            for key, value in fields.items():
                setattr(obj, key, value)
            self.db.commit()
            self.db.refresh(obj)
            return obj.to_document()

    def delete_by_id(self, object_id: str) -> Optional[dict]:
        with self._guard("delete_by_id"):
            obj = self.db.get(self.model, object_id)
            if obj is None:
                return None
            document = obj.to_document()
            self.db.delete(obj)
            self.db.commit()
            return document
