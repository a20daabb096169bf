from fastapi import Request

from company_board.core.config import settings
from company_board.db.session import SessionLocal
from company_board.services.company_store import CompanyStore
from company_board.services.form_controller import CompanyFormController
from company_board.services.form_sessions import FormSessions

store = CompanyStore(SessionLocal)
form_sessions = FormSessions(
    lambda: CompanyFormController(get_store(), max_companies=settings.max_companies),
    max_sessions=settings.max_form_sessions,
)

def get_store() -> CompanyStore:
    return store

def get_form_sessions() -> FormSessions:
    return form_sessions

def session_id_from(request: Request) -> str | None:
    return request.cookies.get(settings.form_session_cookie)
