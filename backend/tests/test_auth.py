from jose import jwt

from app.config import settings
from app.users.models import UserRole
from conftest import auth_headers


async def register(client, email="writer@example.com", password="correct-horse", name="Writer"):
    return await client.post("/api/auth/register", json={"email": email, "password": password, "name": name})


async def login(client, email="writer@example.com", password="correct-horse"):
    return await client.post("/api/auth/login", data={"username": email, "password": password})


async def test_register_creates_plain_user(client):
    resp = await register(client)
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["role"] == "user"
    assert data["email"] == "writer@example.com"
    assert "password" not in data and "passwordHash" not in data


async def test_register_duplicate_email(client):
    await register(client)
    resp = await register(client)
    assert resp.status_code == 409


async def test_register_short_password_rejected(client):
    resp = await register(client, password="short")
    assert resp.status_code == 400


async def test_login_issues_tokens_with_role_claim(client):
    await register(client)
    resp = await login(client)
    assert resp.status_code == 200, resp.text
    tokens = resp.json()
    assert tokens["token_type"] == "bearer"

    payload = jwt.decode(tokens["access_token"], settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    assert payload["sub"] == "writer@example.com"
    assert payload["role"] == "user"
    assert payload["type"] == "access"


async def test_login_wrong_password(client):
    await register(client)
    resp = await login(client, password="wrong-password")
    assert resp.status_code == 401


async def test_login_without_password_hash_fails(client, make_user):
    await make_user("oauth@example.com", UserRole.USER)
    resp = await login(client, email="oauth@example.com", password="anything")
    assert resp.status_code == 401


async def test_refresh_returns_new_access_token(client):
    await register(client)
    tokens = (await login(client)).json()

    resp = await client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert resp.status_code == 200
    assert resp.json()["access_token"]

    # An access token is not accepted as a refresh token.
    resp = await client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert resp.status_code == 401


async def test_me(client, admin_user):
    resp = await client.get("/api/users/me", headers=auth_headers(admin_user))
    assert resp.status_code == 200
    assert resp.json()["email"] == admin_user.email
    assert resp.json()["role"] == "admin"


async def test_me_requires_valid_token(client):
    assert (await client.get("/api/users/me")).status_code == 401
    assert (await client.get("/api/users/me", headers={"Authorization": "Bearer garbage"})).status_code == 401


async def test_update_me(client, regular_user):
    resp = await client.patch(
        "/api/users/me", json={"name": "Renamed", "image": "https://img.example.com/me.png"},
        headers=auth_headers(regular_user),
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"
    assert resp.json()["role"] == "user"


async def test_update_me_cannot_change_role(client, regular_user):
    resp = await client.patch("/api/users/me", json={"role": "admin"}, headers=auth_headers(regular_user))
    assert resp.status_code == 400
    me = await client.get("/api/users/me", headers=auth_headers(regular_user))
    assert me.json()["role"] == "user"


async def test_health(client):
    resp = await client.get("/health")
    assert resp.json() == {"status": "ok"}
