import os
import tempfile
from datetime import datetime, timedelta

# Must be set before company_board settings are imported.
_DB_DIR = tempfile.mkdtemp(prefix="company_board_tests_")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "test.db")
os.environ["ENV"] = "test"

import pytest  # noqa: E402

from company_board.core.errors import RecordNotFound, StoreError  # noqa: E402
from company_board.db.init_db import create_tables, drop_tables  # noqa: E402
from company_board.db.session import SessionLocal  # noqa: E402
from company_board.schemas.company import CompanyFields, CompanyRecord  # noqa: E402
from company_board.services.company_store import CompanyStore, Subscription  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    drop_tables()
    create_tables()
    yield


@pytest.fixture
def store():
    return CompanyStore(SessionLocal)


def make_fields(name="Kalyan", **overrides) -> CompanyFields:
    data = {
        "name": name,
        "ticket_number": "123",
        "opening_time": "09:05",
        "closing_time": "13:30",
        "jodi_info": "",
        "panel_info": "",
    }
    data.update(overrides)
    return CompanyFields(**data)


def make_record(name, record_id=None, **overrides) -> CompanyRecord:
    fields = make_fields(name, **overrides)
    return CompanyRecord(id=record_id or name.lower().replace(" ", "-"), created_at=datetime.utcnow(), **fields.model_dump())


class FakeStore:
    """In-memory stand-in for CompanyStore that records write calls."""

    def __init__(self, records=(), fail=False):
        self.records = list(records)
        self.fail = fail
        self.created = []
        self.updated = []
        self._subscribers = {}

    def _check(self):
        if self.fail:
            raise StoreError("unavailable")

    def create(self, fields):
        self._check()
        record_id = f"id-{len(self.records) + 1}"
        self.created.append(fields)
        self.records.insert(0, CompanyRecord(
            id=record_id,
            created_at=datetime.utcnow() + timedelta(seconds=len(self.records)),
            **fields.model_dump(),
        ))
        return record_id

    def update(self, record_id, fields):
        self._check()
        self.updated.append((record_id, fields))
        for index, record in enumerate(self.records):
            if record.id == record_id:
                self.records[index] = record.model_copy(update=fields.model_dump())
                return
        raise RecordNotFound(record_id)

    def fetch_all(self):
        self._check()
        return list(self.records)

    def subscribe(self, on_change):
        key = len(self._subscribers)
        self._subscribers[key] = on_change
        on_change(self.fetch_all())
        return Subscription(self, key)

    def _detach(self, key):
        self._subscribers.pop(key, None)

    @property
    def subscriber_count(self):
        return len(self._subscribers)
