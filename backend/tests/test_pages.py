"""
Tests for the calculator web pages
"""
from webcalc.models.calculation_history import WINDOW_ID_MAX_LENGTH


def test_root_redirects_to_calculator(client):
    r = client.get("/", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"].endswith("/calculator")


def test_calculator_without_window_gets_new_window(client):
    r = client.get("/calculator", follow_redirects=False)
    assert r.status_code == 307
    assert "window_id=" in r.headers["location"]


def test_new_window_link(client):
    r = client.get("/calculator/new")
    assert r.status_code == 200
    assert "window_id=" in str(r.url)


def test_calculator_page_renders(client):
    r = client.get("/calculator", params={"window_id": "page-1"})
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert 'data-testid="display">0<' in r.text
    assert "No calculations yet." in r.text


def test_press_form_redirects_back_to_window(client):
    r = client.post("/calculator/press", data={"window_id": "page-1", "digit": "7"}, follow_redirects=False)
    assert r.status_code == 303
    assert "window_id=page-1" in r.headers["location"]


def test_full_calculation_shows_history(client):
    for field, value in [("digit", "7"), ("action", "*"), ("digit", "8"), ("action", "=")]:
        client.post("/calculator/press", data={"window_id": "page-1", field: value})

    r = client.get("/calculator", params={"window_id": "page-1"})
    assert 'data-testid="display">56<' in r.text
    assert "7 * 8 = 56" in r.text


def test_division_by_zero_shows_error(client):
    for field, value in [("digit", "5"), ("action", "/"), ("digit", "0")]:
        client.post("/calculator/press", data={"window_id": "page-2", field: value})

    r = client.post("/calculator/press", data={"window_id": "page-2", "action": "="}, follow_redirects=False)
    assert r.status_code == 200
    assert "Cannot divide by zero" in r.text


def test_clear_history_form(client):
    for field, value in [("digit", "1"), ("action", "+"), ("digit", "1"), ("action", "=")]:
        client.post("/calculator/press", data={"window_id": "page-3", field: value})

    r = client.post("/calculator/clear-history", data={"window_id": "page-3"})
    assert r.status_code == 200
    assert "No calculations yet." in r.text


def test_press_form_rejects_bad_digit(client):
    r = client.post("/calculator/press", data={"window_id": "page-1", "digit": "42"})
    assert r.status_code == 422


def test_window_id_too_long_rejected(client):
    long_id = "p" * (WINDOW_ID_MAX_LENGTH + 1)

    r = client.get("/calculator", params={"window_id": long_id})
    assert r.status_code == 422

    r = client.post("/calculator/press", data={"window_id": long_id, "digit": "1"})
    assert r.status_code == 422

    r = client.post("/calculator/clear-history", data={"window_id": long_id})
    assert r.status_code == 422
