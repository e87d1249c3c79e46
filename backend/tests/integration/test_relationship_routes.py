import pytest
from fastapi.testclient import TestClient


def test_request_accept_flow(client: TestClient, login, alice, bob):
    # As Alice
    login(alice)
    r = client.get(f"/relationships/status/{bob.id}")
    assert r.status_code == 200
    assert r.json()["status"] == "none"

    r = client.post("/relationships", json={"recipient": bob.id})
    assert r.status_code == 201
    rel = r.json()
    assert rel["status"] == "pending"
    assert rel["requester"] == {
        "id": alice.id,
        "displayName": alice.name,
        "avatarUrl": alice.picture,
    }
    assert rel["recipient"]["id"] == bob.id
    assert {"id", "createdAt", "updatedAt"} <= rel.keys()

    # Double submission returns the same record
    r = client.post("/relationships", json={"recipient": bob.id})
    assert r.status_code == 200
    assert r.json()["id"] == rel["id"]

    r = client.get("/relationships/pending")
    assert r.status_code == 200
    assert r.json()["incoming"] == []
    assert [p["other"]["id"] for p in r.json()["outgoing"]] == [bob.id]

    # Alice cannot accept her own request
    r = client.put(f"/relationships/{rel['id']}", json={"status": "accepted"})
    assert r.status_code == 403
    assert r.json()["kind"] == "forbidden"

    # Switch to Bob
    login(bob)
    r = client.get("/relationships/pending")
    incoming = r.json()["incoming"]
    assert len(incoming) == 1
    assert incoming[0]["relationshipId"] == rel["id"]
    assert incoming[0]["other"]["id"] == alice.id

    # Bob creating the reverse request gets the existing record
    r = client.post("/relationships", json={"recipient": alice.id})
    assert r.status_code == 200
    assert r.json()["id"] == rel["id"]

    r = client.put(f"/relationships/{rel['id']}", json={"status": "accepted"})
    assert r.status_code == 200
    assert r.json()["status"] == "accepted"

    r = client.put(f"/relationships/{rel['id']}", json={"status": "accepted"})
    assert r.status_code == 409
    assert r.json()["kind"] == "invalid_state"

    r = client.get("/relationships/friends")
    friends = r.json()
    assert [f["other"]["id"] for f in friends] == [alice.id]
    assert friends[0]["status"] == "accepted"

    login(alice)
    r = client.get(f"/relationships/status/{bob.id}")
    assert r.json()["status"] == "friends"
    r = client.get("/relationships/friends")
    assert [f["other"]["id"] for f in r.json()] == [bob.id]


@pytest.mark.parametrize(
    "payload",
    [{}, {"recipient": ""}, {"recipient": None}, {"recipient": "bad id"}],
)
def test_create_rejects_bad_recipient(client, login, alice, payload):
    login(alice)

    r = client.post("/relationships", json=payload)
    assert r.status_code == 400
    assert r.json()["kind"] == "invalid_argument"


def test_create_rejects_self(client, login, alice):
    login(alice)

    r = client.post("/relationships", json={"recipient": alice.id})
    assert r.status_code == 400
    assert r.json()["detail"] == "Cannot create a relationship with yourself."


def test_create_unknown_user(client, login, alice):
    login(alice)

    r = client.post("/relationships", json={"recipient": "ghost"})
    assert r.status_code == 404


def test_requires_authentication(client, alice, bob):
    assert client.post("/relationships", json={"recipient": bob.id}).status_code == 401
    assert client.get("/relationships/friends").status_code == 401
    assert client.get("/users/search", params={"q": "a"}).status_code == 401


def test_update_validation(client, login, alice, bob):
    login(alice)
    rel = client.post("/relationships", json={"recipient": bob.id}).json()

    login(bob)
    r = client.put(f"/relationships/{rel['id']}", json={"status": "pending"})
    assert r.status_code == 400
    r = client.put(f"/relationships/{rel['id']}", json={"status": "married"})
    assert r.status_code == 400
    r = client.put("/relationships/not-an-id", json={"status": "accepted"})
    assert r.status_code == 400
    r = client.put(f"/relationships/{'0' * 32}", json={"status": "accepted"})
    assert r.status_code == 404


def test_reject_then_block_then_delete(client, login, alice, bob, carol):
    login(alice)
    rel = client.post("/relationships", json={"recipient": bob.id}).json()

    login(bob)
    r = client.put(f"/relationships/{rel['id']}", json={"status": "rejected"})
    assert r.json()["status"] == "rejected"

    login(alice)
    r = client.get(f"/relationships/status/{bob.id}")
    assert r.json()["status"] == "rejected"
    r = client.put(f"/relationships/{rel['id']}", json={"status": "blocked"})
    assert r.status_code == 200
    assert r.json()["status"] == "blocked"
    assert r.json()["blockedBy"] == alice.id

    r = client.get("/relationships/blocked")
    assert [b["other"]["id"] for b in r.json()] == [bob.id]

    # Bob no longer sees Alice
    login(bob)
    assert client.get(f"/users/{alice.id}").status_code == 404

    # Carol is not a party
    login(carol)
    assert client.get(f"/relationships/{rel['id']}").status_code == 403
    assert client.delete(f"/relationships/{rel['id']}").status_code == 403

    # The blocked party can still delete
    login(bob)
    r = client.delete(f"/relationships/{rel['id']}")
    assert r.status_code == 200

    login(alice)
    assert client.get(f"/relationships/{rel['id']}").status_code == 404
    assert client.delete(f"/relationships/{rel['id']}").status_code == 404


def test_admin_can_view_and_delete(client, login, alice, bob, admin):
    login(alice)
    rel = client.post("/relationships", json={"recipient": bob.id}).json()

    login(admin)
    assert client.get(f"/relationships/{rel['id']}").status_code == 200
    assert client.delete(f"/relationships/{rel['id']}").status_code == 200

    login(alice)
    assert client.get(f"/relationships/status/{bob.id}").json()["status"] == "none"


def test_unfriend_by_counterpart(client, login, alice, bob):
    login(alice)
    rel = client.post("/relationships", json={"recipient": bob.id}).json()
    login(bob)
    client.put(f"/relationships/{rel['id']}", json={"status": "accepted"})

    r = client.delete(f"/relationships/with/{alice.id}")
    assert r.status_code == 200
    assert r.json() == {"message": "Relationship deleted"}
    assert client.get("/relationships/friends").json() == []

    r = client.delete(f"/relationships/with/{alice.id}")
    assert r.status_code == 404


def test_friends_of_another_user(client, login, alice, bob, carol):
    login(alice)
    rel = client.post("/relationships", json={"recipient": bob.id}).json()
    login(bob)
    client.put(f"/relationships/{rel['id']}", json={"status": "accepted"})

    login(carol)
    r = client.get("/relationships/friends", params={"userId": bob.id})
    assert r.status_code == 200
    assert [f["other"]["id"] for f in r.json()] == [alice.id]

    r = client.get("/relationships/friends", params={"userId": "ghost"})
    assert r.status_code == 404

    r = client.get("/relationships/friends", params={"userId": ""})
    assert r.status_code == 400
    assert r.json()["kind"] == "invalid_argument"
