"""Admin form state: the records snapshot, the record being edited, working
values, field errors and pending toasts for one form session."""
from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import List, Mapping, Optional

from pydantic import ValidationError

from company_board.core.errors import CapacityError, StoreError
from company_board.schemas.company import (
    EDITABLE_FIELDS,
    CompanyFields,
    CompanyRecord,
    empty_form,
    field_errors,
)
from company_board.services.company_store import CompanyStore

logger = logging.getLogger(__name__)


@dataclass
class Toast:
    title: str
    description: str
    variant: str = "default"


class SubmitResult(enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    INVALID = "invalid"
    AT_CAPACITY = "at_capacity"
    FAILED = "failed"
    BUSY = "busy"


class CompanyFormController:
    def __init__(self, store: CompanyStore, max_companies: int = 3) -> None:
        self.store = store
        self.max_companies = max_companies
        self.companies: List[CompanyRecord] = []
        self.editing_id: Optional[str] = None
        self.values: dict[str, str] = empty_form()
        self.errors: dict[str, str] = {}
        self.toasts: List[Toast] = []
        self.loading = False
        self._lock = threading.Lock()

    # -------- view helpers --------

    @property
    def at_capacity(self) -> bool:
        return len(self.companies) >= self.max_companies and self.editing_id is None

    @property
    def title(self) -> str:
        if self.at_capacity:
            return "Select Company to Edit"
        return "Edit Company Details" if self.editing_id else "Add New Company"

    @property
    def submit_label(self) -> str:
        return "Update Company" if self.editing_id else "Add Company"

    def find(self, company_id: str) -> Optional[CompanyRecord]:
        return next((c for c in self.companies if c.id == company_id), None)

    def pop_toasts(self) -> List[Toast]:
        toasts, self.toasts = self.toasts, []
        return toasts

    # -------- operations --------

    def refresh(self) -> None:
        try:
            self.companies = self.store.fetch_all()
        except StoreError:
            logger.exception("Error fetching companies")
            self.toasts.append(Toast("Error", "Failed to fetch companies", "destructive"))

    def validate(self, data: Mapping[str, str]) -> Optional[CompanyFields]:
        self.values = {key: str(data.get(key) or "") for key in EDITABLE_FIELDS}
        try:
            fields = CompanyFields.model_validate(self.values)
        except ValidationError as e:
            self.errors = field_errors(e)
            return None
        self.errors = {}
        return fields

    def _ensure_capacity(self) -> None:
        # Advisory: the snapshot may be stale and another session may create concurrently.
        if self.editing_id is None and len(self.companies) >= self.max_companies:
            raise CapacityError(self.max_companies)

    def submit(self, data: Mapping[str, str]) -> SubmitResult:
        with self._lock:
            if self.loading:
                return SubmitResult.BUSY
            self.loading = True
        try:
            return self._submit(data)
        finally:
            self.loading = False

    def _submit(self, data: Mapping[str, str]) -> SubmitResult:
        fields = self.validate(data)
        if fields is None:
            return SubmitResult.INVALID
        try:
            self._ensure_capacity()
        except CapacityError as e:
            self.toasts.append(Toast("Limit Reached", str(e), "destructive"))
            return SubmitResult.AT_CAPACITY

        try:
            if self.editing_id:
                self.store.update(self.editing_id, fields)
                result = SubmitResult.UPDATED
                self.toasts.append(Toast("Success", "Company updated successfully!"))
            else:
                self.store.create(fields)
                result = SubmitResult.CREATED
                self.toasts.append(Toast("Success", "Company added successfully!"))
        except StoreError:
            logger.exception("Error saving company")
            self.toasts.append(Toast("Error", "Failed to save company. Please try again.", "destructive"))
            return SubmitResult.FAILED

        self.editing_id = None
        self.values = empty_form()
        self.refresh()
        return result

    def select_for_edit(self, record: CompanyRecord) -> None:
        self.values = {
            "name": record.name,
            "ticketNumber": record.ticket_number,
            "openingTime": record.opening_time,
            "closingTime": record.closing_time,
            "jodiInfo": record.jodi_info or "",
            "panelInfo": record.panel_info or "",
        }
        self.errors = {}
        self.editing_id = record.id

    def cancel_edit(self) -> None:
        self.editing_id = None
        self.values = empty_form()
        self.errors = {}
