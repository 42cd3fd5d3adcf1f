"""
Integration tests for /login, /me and /logout
"""
import pytest

from tests.utils.cookies import cookie_header, session_cookie_from


@pytest.mark.asyncio
async def test_login_success(client, register_account):
    await register_account()

    response = await client.post("/login", json={"email": "ALICE@example.com", "password": "S3cure!"})

    assert response.status_code == 200
    assert response.json()["status"] == "signed_in"
    token = session_cookie_from(response)

    me = await client.get("/me", headers=cookie_header(token))
    assert me.status_code == 200
    assert me.json()["id"] == response.json()["account_id"]


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_email_match(client, register_account):
    await register_account()

    wrong = await client.post("/login", json={"email": "alice@example.com", "password": "Wr0ng!!"})
    unknown = await client.post("/login", json={"email": "nobody@example.com", "password": "S3cure!"})

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()


@pytest.mark.asyncio
async def test_me_without_cookie(client):
    response = await client.get("/me")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "SESSION_INVALID"


@pytest.mark.asyncio
async def test_me_with_tampered_cookie(client, register_account):
    token = session_cookie_from(await register_account())
    tampered = token[:-4] + ("AAAA" if not token.endswith("AAAA") else "BBBB")

    response = await client.get("/me", headers=cookie_header(tampered))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_clears_cookie(client):
    response = await client.post("/logout")

    assert response.status_code == 200
    assert response.json() == {"status": "signed_out"}
    header = response.headers["set-cookie"].lower()
    assert "authcore_session=" in header
    assert "max-age=0" in header
