from fastapi import HTTPException
from fastapi.testclient import TestClient

from services.errors import Forbidden, InvalidState, Unavailable


def test_http_exception_returns_json_and_status(test_app):
    async def raise_400():
        raise HTTPException(status_code=400, detail="Bad request example")

    test_app.add_api_route("/test/raise400", raise_400, methods=["GET"])  # type: ignore[arg-type]

    client = TestClient(test_app)

    resp = client.get("/test/raise400")
    assert resp.status_code == 400
    assert resp.headers.get("content-type", "").startswith("application/json")
    assert resp.json() == {"detail": "Bad request example"}


def test_relationship_errors_carry_kind_and_status(test_app):
    async def forbidden():
        raise Forbidden("Only the recipient can answer a request.")

    async def invalid_state():
        raise InvalidState("Cannot accept a relationship that is accepted.")

    async def unavailable():
        raise Unavailable("Storage is unavailable, try again later.")

    test_app.add_api_route("/test/forbidden", forbidden, methods=["GET"])  # type: ignore[arg-type]
    test_app.add_api_route("/test/state", invalid_state, methods=["GET"])  # type: ignore[arg-type]
    test_app.add_api_route("/test/down", unavailable, methods=["GET"])  # type: ignore[arg-type]

    client = TestClient(test_app)

    resp = client.get("/test/forbidden")
    assert resp.status_code == 403
    assert resp.json() == {
        "detail": "Only the recipient can answer a request.",
        "kind": "forbidden",
    }
    assert client.get("/test/state").json()["kind"] == "invalid_state"
    assert client.get("/test/state").status_code == 409
    assert client.get("/test/down").status_code == 503


def test_validation_errors_are_invalid_arguments(client, login, alice):
    login(alice)

    resp = client.post("/relationships", json={})
    assert resp.status_code == 400
    body = resp.json()
    assert body["kind"] == "invalid_argument"
    assert "recipient" in body["detail"]
