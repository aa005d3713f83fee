def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_unknown_api_route_is_404_envelope(client):
    res = client.get("/api/nothing-here")

    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "Ruta no encontrada"}


def test_wrong_method_is_404_envelope(client):
    res = client.post("/api/contacts", json={})

    assert res.status_code == 404
    assert res.json()["success"] is False


def test_cors_is_open(client):
    res = client.options(
        "/api/contact",
        headers={"Origin": "https://example.org", "Access-Control-Request-Method": "POST"},
    )

    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] in {"*", "https://example.org"}


def test_bad_query_parameter_is_400(client):
    res = client.get("/api/contacts", params={"limit": "0"})

    assert res.status_code == 400
    assert res.json()["success"] is False
