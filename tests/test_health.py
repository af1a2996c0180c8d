def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["database"] == "healthy"
    assert body["storage"] == "local"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/v1/nowhere")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Not Found"}
