from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from company_board.api.deps import get_form_sessions, session_id_from
from company_board.core.config import settings
from company_board.services.form_controller import Toast
from company_board.services.form_sessions import FormSessions

router = APIRouter()

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[2] / "templates"))

FORM_URL = "/update-form"


def _controller(request: Request, sessions: FormSessions):
    return sessions.get_or_create(session_id_from(request))


def _respond(response, session_id: str, created: bool):
    if created:
        response.set_cookie(settings.form_session_cookie, session_id, httponly=True, samesite="lax")
    return response


def _back_to_form(session_id: str, created: bool):
    # Post/Redirect/Get
    return _respond(RedirectResponse(FORM_URL, status_code=303), session_id, created)


@router.get("/", response_class=HTMLResponse)
def display_page(request: Request):
    """Public display page; cards arrive over /ws/companies."""
    return templates.TemplateResponse(request, "display.html", {"title": "FANCY MATKA"})


@router.get(FORM_URL, response_class=HTMLResponse)
def form_page(request: Request, sessions: FormSessions = Depends(get_form_sessions)):
    session_id, controller, created = _controller(request, sessions)
    # The cap is checked against this snapshot on the next submit.
    controller.refresh()
    response = templates.TemplateResponse(
        request,
        "update_form.html",
        {"form": controller, "toasts": controller.pop_toasts()},
    )
    return _respond(response, session_id, created)


@router.post(FORM_URL)
async def submit_form(request: Request, sessions: FormSessions = Depends(get_form_sessions)):
    session_id, controller, created = _controller(request, sessions)
    data = await request.form()
    # Store calls are blocking; keep them off the event loop.
    await run_in_threadpool(controller.submit, {k: v for k, v in data.items() if isinstance(v, str)})
    return _back_to_form(session_id, created)


@router.post(FORM_URL + "/edit/{company_id}")
def select_for_edit(company_id: str, request: Request, sessions: FormSessions = Depends(get_form_sessions)):
    session_id, controller, created = _controller(request, sessions)
    record = controller.find(company_id)
    if record is None:
        controller.refresh()
        record = controller.find(company_id)
    if record is None:
        controller.toasts.append(Toast("Error", "Company not found", "destructive"))
    else:
        controller.select_for_edit(record)
    return _back_to_form(session_id, created)


@router.post(FORM_URL + "/cancel")
def cancel_edit(request: Request, sessions: FormSessions = Depends(get_form_sessions)):
    session_id, controller, created = _controller(request, sessions)
    controller.cancel_edit()
    return _back_to_form(session_id, created)
