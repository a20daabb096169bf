"""Company record store.

Wraps the ``companies`` table with the operations the two pages need plus a
change feed: ``subscribe`` registers a callback that receives the full list,
ordered by ``created_at`` descending, immediately and again after every
successful write. Callbacks run on the writer's thread.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from company_board.core.errors import RecordNotFound, StoreError
from company_board.models.company import Company
from company_board.schemas.company import CompanyFields, CompanyRecord

logger = logging.getLogger(__name__)

OnChange = Callable[[List[CompanyRecord]], None]


class Subscription:
    """Detach handle returned by ``CompanyStore.subscribe``."""

    def __init__(self, store: "CompanyStore", key: int) -> None:
        self._store = store
        self._key = key
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._store._detach(self._key)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class CompanyStore:
    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._lock = threading.Lock()
        # Serializes deliveries so a subscriber never sees an older list after a newer one
        self._deliver_lock = threading.RLock()
        self._subscribers: Dict[int, OnChange] = {}
        self._next_key = 0

    @contextmanager
    def _session(self):
        db: Session = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(str(e)) from e
        finally:
            db.close()

    # -------- writes --------

    def create(self, fields: CompanyFields) -> str:
        with self._session() as db:
            company = Company(**fields.model_dump())
            db.add(company)
            db.commit()
            company_id = company.id
        logger.info("Created company %s (%s)", company_id, fields.name)
        self._notify()
        return company_id

    def update(self, company_id: str, fields: CompanyFields) -> None:
        with self._session() as db:
            company = db.get(Company, company_id)
            if company is None:
                raise RecordNotFound(company_id)
            for key, value in fields.model_dump().items():
                setattr(company, key, value)
            company.updated_at = datetime.utcnow()
            db.commit()
        logger.info("Updated company %s", company_id)
        self._notify()

    def delete(self, company_id: str) -> None:
        with self._session() as db:
            company = db.get(Company, company_id)
            if company is None:
                raise RecordNotFound(company_id)
            db.delete(company)
            db.commit()
        logger.info("Deleted company %s", company_id)
        self._notify()

    # -------- reads --------

    def fetch_all(self) -> List[CompanyRecord]:
        with self._session() as db:
            rows = db.query(Company).order_by(Company.created_at.desc()).all()
            return [CompanyRecord.model_validate(row) for row in rows]

    def subscribe(self, on_change: OnChange) -> Subscription:
        with self._deliver_lock:
            with self._lock:
                key = self._next_key
                self._next_key += 1
                self._subscribers[key] = on_change
            self._deliver(on_change, self._snapshot())
        return Subscription(self, key)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def _detach(self, key: int) -> None:
        with self._lock:
            self._subscribers.pop(key, None)

    def _snapshot(self) -> List[CompanyRecord]:
        try:
            return self.fetch_all()
        except StoreError:
            # Subscribers cannot tell this apart from an empty collection.
            logger.exception("Change feed fetch failed; delivering an empty list")
            return []

    def _notify(self) -> None:
        with self._deliver_lock:
            with self._lock:
                callbacks = list(self._subscribers.values())
            if not callbacks:
                return
            records = self._snapshot()
            for callback in callbacks:
                self._deliver(callback, records)

    def _deliver(self, callback: OnChange, records: List[CompanyRecord]) -> None:
        try:
            callback(list(records))
        except Exception:
            logger.exception("Company subscriber failed")
