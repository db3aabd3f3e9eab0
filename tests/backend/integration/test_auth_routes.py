import uuid

import pytest


pytestmark = pytest.mark.asyncio


def _register_payload(**overrides):
    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "emailId": f"ada_{uuid.uuid4().hex[:6]}@Example.com",
        "password": "StrongPass!23",
    }
    payload.update(overrides)
    return payload


async def login_user(client, email: str, password: str):
    return await client.post("/api/v1/auth/login", json={"emailId": email, "password": password})


async def test_register_and_login_flow(client):
    payload = _register_payload(skills=["python", " rust "], gender="Female", age=28)

    resp = await client.post("/api/v1/auth/register", json=payload)
    body = resp.json()
    assert resp.status_code == 201
    assert body["success"] is True
    assert body["data"]["emailId"] == payload["emailId"].lower()
    assert body["data"]["skills"] == ["python", "rust"]
    assert body["data"]["gender"] == "female"
    assert body["data"]["bio"] == "Default Bio"
    assert "password" not in body["data"]
    assert "password_hash" not in body["data"]

    # Duplicate email (case-insensitive) should fail
    dup_resp = await client.post("/api/v1/auth/register", json=_register_payload(emailId=payload["emailId"].upper()))
    assert dup_resp.status_code == 400
    assert dup_resp.json()["success"] is False
    assert dup_resp.json()["error"]["code"] == "EMAIL_EXISTS"

    login_resp = await login_user(client, payload["emailId"], payload["password"])
    login_body = login_resp.json()
    assert login_resp.status_code == 200
    assert login_body["success"] is True
    assert "accessToken" in login_body["data"]
    assert "accessToken" in login_resp.cookies

    bad_login = await login_user(client, payload["emailId"], "wrong-password")
    assert bad_login.status_code == 401
    assert bad_login.json()["error"]["code"] == "AUTH_INVALID_CREDENTIALS"


async def test_register_validation_errors(client):
    resp = await client.post("/api/v1/auth/register", json=_register_payload(emailId="not-an-email"))
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    resp = await client.post("/api/v1/auth/register", json=_register_payload(password="123"))
    assert resp.status_code == 400

    resp = await client.post("/api/v1/auth/register", json=_register_payload(skills=[f"s{i}" for i in range(11)]))
    assert resp.status_code == 400
    assert "10 skills" in resp.json()["error"]["message"]

    missing = await client.post("/api/v1/auth/register", json={"emailId": "x@example.com"})
    assert missing.status_code == 400
    assert missing.json()["error"]["code"] == "VALIDATION_ERROR"

    bad_login = await login_user(client, "not-an-email", "whatever1")
    assert bad_login.status_code == 400
    assert "emailId" in bad_login.json()["error"]["message"]


async def test_me_and_logout(client):
    payload = _register_payload()
    await client.post("/api/v1/auth/register", json=payload)
    token = (await login_user(client, payload["emailId"], payload["password"])).json()["data"]["accessToken"]
    headers = {"Authorization": f"Bearer {token}"}

    me_resp = await client.get("/api/v1/auth/me", headers=headers)
    assert me_resp.status_code == 200
    assert me_resp.json()["data"]["firstName"] == "Ada"

    logout_resp = await client.post("/api/v1/auth/logout", headers=headers)
    assert logout_resp.status_code == 200
    assert logout_resp.json()["success"] is True


async def test_auth_requires_token(client):
    unauth_me = await client.get("/api/v1/auth/me")
    assert unauth_me.status_code == 401
    assert unauth_me.json()["success"] is False
    assert unauth_me.json()["error"]["code"] == "AUTH_REQUIRED"

    bad_token = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nope"})
    assert bad_token.status_code == 401
    assert bad_token.json()["error"]["code"] == "AUTH_INVALID_TOKEN"

    feed = await client.get("/api/v1/user/feed")
    assert feed.status_code == 401
