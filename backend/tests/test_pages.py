import pytest
from fastapi.testclient import TestClient

from company_board.api.deps import get_form_sessions, get_store
from company_board.main import app
from conftest import make_fields

FORM = {
    "name": "Kalyan",
    "ticketNumber": "7",
    "openingTime": "15:45",
    "closingTime": "17:45",
    "jodiInfo": "45",
    "panelInfo": "",
}


@pytest.fixture
def client():
    get_form_sessions().clear()
    return TestClient(app)


def add(client, **overrides):
    return client.post("/update-form", data=dict(FORM, **overrides))


def test_health(client):
    r = client.get("/health/")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_display_page_starts_loading(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "Loading Companies..." in r.text
    assert "/ws/companies" in r.text


def test_form_page_sets_session_cookie(client):
    r = client.get("/update-form")
    assert r.status_code == 200
    assert "Add New Company" in r.text
    assert "form_session" in r.cookies


def test_create_through_form(client):
    r = add(client)
    assert r.status_code == 200
    assert "Company added successfully!" in r.text
    data = client.get("/api/companies").json()
    assert len(data) == 1
    assert data[0]["name"] == "Kalyan"
    assert data[0]["ticketNumber"] == "7"
    assert data[0]["jodiInfo"] == "45"
    assert data[0]["createdAt"]


def test_validation_error_is_shown_on_field(client):
    r = add(client, name="A")
    assert "Company name must be at least 2 characters" in r.text
    assert client.get("/api/companies").json() == []


def test_cap_blocks_fourth_company(client):
    for name in ["Alpha", "Bravo", "Charlie"]:
        add(client, name=name)
    r = client.get("/update-form")
    assert "Select Company to Edit" in r.text
    r = add(client, name="Delta")
    assert "Limit Reached" in r.text
    assert len(client.get("/api/companies").json()) == 3


def test_edit_then_submit_updates(client):
    add(client, name="Alpha")
    [company] = client.get("/api/companies").json()
    r = client.post(f"/update-form/edit/{company['id']}")
    assert "Edit Company Details" in r.text
    assert 'value="Alpha"' in r.text
    r = add(client, name="Alpha Prime")
    assert "Company updated successfully!" in r.text
    [updated] = client.get("/api/companies").json()
    assert updated["id"] == company["id"]
    assert updated["name"] == "Alpha Prime"
    assert updated["updatedAt"]


def test_cancel_edit(client):
    add(client, name="Alpha")
    [company] = client.get("/api/companies").json()
    client.post(f"/update-form/edit/{company['id']}")
    r = client.post("/update-form/cancel")
    assert "Add New Company" in r.text
    add(client, name="Bravo")
    assert len(client.get("/api/companies").json()) == 2


def test_edit_unknown_company(client):
    r = client.post("/update-form/edit/nope")
    assert "Company not found" in r.text


def test_sessions_do_not_share_edit_state(client):
    add(client, name="Alpha")
    [company] = client.get("/api/companies").json()
    client.post(f"/update-form/edit/{company['id']}")
    other = TestClient(app)
    assert "Add New Company" in other.get("/update-form").text


def test_live_feed_pushes_sorted_cards(client):
    store = get_store()
    store.create(make_fields("Alpha"))
    with client.websocket_connect("/ws/companies") as ws:
        first = ws.receive_json()
        assert first["type"] == "companies"
        assert [c["name"] for c in first["data"]] == ["Alpha"]

        store.create(make_fields("Lucky Night", opening_time="21:00", closing_time="23:30"))
        update = ws.receive_json()
        assert [c["name"] for c in update["data"]] == ["Lucky Night", "Alpha"]
        card = update["data"][0]
        assert card["openingTime"] == "09:00 PM"
        assert card["closingTime"] == "11:30 PM"
        assert card["gradient"] == 0
