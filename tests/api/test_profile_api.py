"""Profile and onboarding routes."""

from __future__ import annotations

from fastapi.testclient import TestClient


def test_profile_lifecycle(client: TestClient, alice_headers: dict) -> None:
    assert client.get("/api/profile", headers=alice_headers).json() is None

    created = client.post(
        "/api/profile",
        json={"username": "Alice", "displayName": "Alice A."},
        headers=alice_headers,
    )
    assert created.status_code == 201
    assert created.json()["username"] == "alice"
    assert created.json()["displayName"] == "Alice A."
    assert created.json()["supportBanner"] == "none"

    patched = client.patch("/api/profile", json={"bio": "Hi"}, headers=alice_headers)
    assert patched.status_code == 200
    assert patched.json()["bio"] == "Hi"
    assert patched.json()["displayName"] == "Alice A."


def test_username_conflict_is_409(
    client: TestClient, alice_headers: dict, bob_headers: dict
) -> None:
    client.post("/api/profile", json={"username": "alice"}, headers=alice_headers)

    response = client.post("/api/profile", json={"username": "ALICE"}, headers=bob_headers)

    assert response.status_code == 409
    assert response.json()["detail"][0]["code"] == "username_taken"


def test_invalid_username_is_422(client: TestClient, alice_headers: dict) -> None:
    response = client.post("/api/profile", json={"username": "a!"}, headers=alice_headers)
    assert response.status_code == 422


def test_empty_patch_is_422(client: TestClient, alice_headers: dict) -> None:
    client.post("/api/profile", json={"username": "alice"}, headers=alice_headers)
    response = client.patch("/api/profile", json={}, headers=alice_headers)
    assert response.status_code == 422
    assert response.json()["detail"][0]["code"] == "empty_update"


def test_onboarding(client: TestClient, alice_headers: dict) -> None:
    state = client.get("/api/onboarding", headers=alice_headers).json()
    assert state == {"isOnboardingComplete": False}

    response = client.post(
        "/api/onboarding/complete",
        json={
            "username": "alice",
            "bio": "Hello",
            "links": [
                {"title": "Site", "url": "https://alice.example"},
                {"title": "Twitch", "url": "https://twitch.tv/alice", "platformName": "Twitch"},
            ],
        },
        headers=alice_headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["profile"]["onboardingCompletedAt"] is not None
    assert [link["type"] for link in body["links"]] == ["custom", "platform"]
    assert client.get("/api/onboarding", headers=alice_headers).json() == {
        "isOnboardingComplete": True
    }


def test_onboarding_rejects_contact_links(client: TestClient, alice_headers: dict) -> None:
    response = client.post(
        "/api/onboarding/complete",
        json={
            "username": "alice",
            "links": [{"title": "Mail", "url": "https://x.example", "type": "contact"}],
        },
        headers=alice_headers,
    )
    assert response.status_code == 422
    assert client.get("/api/profile", headers=alice_headers).json() is None
