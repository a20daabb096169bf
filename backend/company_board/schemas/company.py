from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic.alias_generators import to_camel

class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

class CompanyFields(_CamelModel):
    """Editable fields of a company, as submitted by the admin form."""
    name: str = Field(min_length=2)
    ticket_number: str = Field(min_length=1)
    opening_time: str = Field(min_length=1)
    closing_time: str = Field(min_length=1)
    jodi_info: Optional[str] = ""
    panel_info: Optional[str] = ""

class CompanyRecord(CompanyFields):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class CompanyCard(_CamelModel):
    """A record as the display page shows it."""
    id: str
    name: str
    ticket_number: str
    opening_time: str
    closing_time: str
    jodi_info: str
    panel_info: str
    gradient: int

# Keyed by the form field name (camelCase alias)
FIELD_MESSAGES = {
    "name": "Company name must be at least 2 characters",
    "ticketNumber": "Ticket number is required",
    "openingTime": "Opening time is required",
    "closingTime": "Closing time is required",
}

EDITABLE_FIELDS = ("name", "ticketNumber", "openingTime", "closingTime", "jodiInfo", "panelInfo")

def empty_form() -> dict[str, str]:
    return {key: "" for key in EDITABLE_FIELDS}

def field_errors(exc: ValidationError) -> dict[str, str]:
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else ""
        if field and field not in errors:
            errors[field] = FIELD_MESSAGES.get(field, err["msg"])
    return errors
