"""
Tests for health and metrics endpoints
"""


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["service"] == "WebCalc"


def test_liveness(client):
    r = client.get("/health/liveness")
    assert r.json()["status"] == "alive"


def test_readiness(client):
    r = client.get("/health/readiness")
    assert r.status_code == 200
    assert r.json()["status"] == "ready"


def test_detailed_health(client):
    client.post("/api/calculator/windows")

    r = client.get("/health/detailed")
    body = r.json()
    assert body["status"] == "healthy"
    assert body["components"]["database"]["status"] == "healthy"
    assert body["components"]["database"]["history_records"] == 0
    assert body["components"]["window_store"]["open_windows"] == 1


def test_metrics_endpoint(client):
    window_id = client.post("/api/calculator/windows").json()["window_id"]
    for payload in ({"digit": 6}, {"action": "/"}, {"digit": 0}, {"action": "="}):
        client.post(f"/api/calculator/windows/{window_id}/press", json=payload)

    r = client.get("/metrics")
    assert r.status_code == 200
    assert "calculator_key_presses_total" in r.text
    assert 'calculator_errors_total{error_type="division_by_zero"}' in r.text
    assert "http_requests_total" in r.text
