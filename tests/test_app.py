# tests/test_app.py
def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.get_json()["db"] == "up"


def test_request_id_and_security_headers(client):
    r = client.get("/healthz", headers={"X-Request-Id": "abc-123"})
    assert r.headers["X-Request-Id"] == "abc-123"
    assert r.headers["X-Content-Type-Options"] == "nosniff"

    generated = client.get("/healthz").headers["X-Request-Id"]
    assert generated and generated != "abc-123"


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.get_json()["error"]["code"] == "http_error"


def test_unexpected_errors_do_not_leak(app, client):
    @app.get("/boom")
    def boom():
        raise RuntimeError("secret internals")

    r = client.get("/boom")
    assert r.status_code == 500
    body = r.get_json()
    assert body["error"]["code"] == "internal_error"
    assert "secret" not in body["error"]["message"]


def test_openapi_document(client):
    r = client.get("/openapi.json")
    assert r.status_code == 200
    doc = r.get_json()
    assert doc["info"]["title"] == "NoteSync API"
    for path in ("/api/auth/register", "/api/notes", "/api/notes/{id}/restore",
                 "/api/notes/trash/all", "/api/user/profile"):
        assert path in doc["paths"]
    assert "NoteOut" in doc["components"]["schemas"]
