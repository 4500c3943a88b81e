from fastapi.testclient import TestClient

_PAYLOAD = {
    "sneaker_id": "DD1391-100",
    "name": "Nike Dunk Low Panda",
    "brand": "Nike",
    "retail_price": 110.0,
}


def test_session_resolves_identity(client: TestClient, alice_headers: dict) -> None:
    response = client.get("/api/v1/session", headers=alice_headers)
    assert response.status_code == 200
    assert response.json() == {"user_id": "user_alice"}


def test_invalid_api_key_is_rejected(client: TestClient) -> None:
    response = client.get("/api/v1/session", headers={"X-API-Key": "wrong"})
    assert response.status_code == 401


def test_missing_api_key_is_rejected(client: TestClient) -> None:
    assert client.get("/api/v1/vault").status_code in (401, 403)


def test_vault_add_status_and_remove(client: TestClient, alice_headers: dict) -> None:
    assert client.get("/api/v1/vault/DD1391-100", headers=alice_headers).json() == {
        "sneaker_id": "DD1391-100",
        "saved": False,
    }

    created = client.post("/api/v1/vault", json=_PAYLOAD, headers=alice_headers)
    assert created.status_code == 201
    assert created.json()["user_id"] == "user_alice"

    status = client.get("/api/v1/vault/DD1391-100", headers=alice_headers).json()
    assert status["saved"] is True

    listing = client.get("/api/v1/vault", headers=alice_headers).json()
    assert [i["sneaker_id"] for i in listing] == ["DD1391-100"]

    assert client.delete("/api/v1/vault/DD1391-100", headers=alice_headers).status_code == 204
    assert client.delete("/api/v1/vault/DD1391-100", headers=alice_headers).status_code == 404


def test_vault_duplicate_is_conflict(client: TestClient, alice_headers: dict) -> None:
    client.post("/api/v1/vault", json=_PAYLOAD, headers=alice_headers)
    response = client.post("/api/v1/vault", json=_PAYLOAD, headers=alice_headers)
    assert response.status_code == 409


def test_vault_is_per_user(client: TestClient, alice_headers: dict, bob_headers: dict) -> None:
    client.post("/api/v1/vault", json=_PAYLOAD, headers=alice_headers)

    assert client.get("/api/v1/vault/DD1391-100", headers=bob_headers).json()["saved"] is False
    assert client.get("/api/v1/vault", headers=bob_headers).json() == []
    assert client.post("/api/v1/vault", json=_PAYLOAD, headers=bob_headers).status_code == 201


def test_vault_rejects_invalid_payload(client: TestClient, alice_headers: dict) -> None:
    response = client.post(
        "/api/v1/vault", json={"sneaker_id": "", "name": "x"}, headers=alice_headers
    )
    assert response.status_code == 422
