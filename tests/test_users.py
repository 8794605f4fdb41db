import pytest
from sqlalchemy import select
from pawhub.models.enums import UserRole
from pawhub.models.user import User

pytestmark = pytest.mark.asyncio

PASSWORD = "longpassword1"


async def _register(client, phone, name="Someone"):
    response = await client.post("/api/v1/auth/register", json={
        "name": name,
        "phone_number": phone,
        "password": PASSWORD,
    })
    return response.json()["id"]


async def _login(client, phone):
    """Return (access_token, raw_refresh_token)."""
    login = await client.post("/api/v1/auth/login", json={"phone_number": phone, "password": PASSWORD})
    raw_refresh = login.headers["set-cookie"].split(";")[0].partition("=")[2]
    return login.json()["access_token"], raw_refresh


async def _promote_to_admin(db_session, phone):
    user = (await db_session.execute(select(User).where(User.phone_number == phone))).scalar_one()
    user.role = UserRole.ADMIN.value
    await db_session.flush()


async def test_get_me(client):
    user_id = await _register(client, "+15550100")
    token, _ = await _login(client, "+15550100")
    response = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["id"] == user_id
    assert response.json()["phone_number"] == "+15550100"


async def test_get_me_unauthenticated(client):
    response = await client.get("/api/v1/users/me")
    assert response.status_code == 401


async def test_admin_deactivates_user_and_ends_sessions(client, db_session):
    await _register(client, "+15550201", name="Admin")
    await _promote_to_admin(db_session, "+15550201")
    admin_token, _ = await _login(client, "+15550201")

    user_id = await _register(client, "+15550200")
    _, user_refresh = await _login(client, "+15550200")

    response = await client.patch(
        f"/api/v1/users/{user_id}/active",
        json={"is_active": False},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    client.cookies.clear()
    refresh = await client.post("/api/v1/auth/refresh", headers={"Cookie": f"refresh_token={user_refresh}"})
    assert refresh.status_code == 401

    login = await client.post("/api/v1/auth/login", json={"phone_number": "+15550200", "password": PASSWORD})
    assert login.status_code == 401


async def test_set_active_unknown_user(client, db_session):
    await _register(client, "+15550400", name="Admin")
    await _promote_to_admin(db_session, "+15550400")
    admin_token, _ = await _login(client, "+15550400")
    response = await client.patch(
        "/api/v1/users/00000000-0000-0000-0000-000000000000/active",
        json={"is_active": False},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert response.status_code == 404


async def test_non_admin_cannot_change_active_flag(client):
    user_id = await _register(client, "+15550300")
    token, _ = await _login(client, "+15550300")
    response = await client.patch(
        f"/api/v1/users/{user_id}/active",
        json={"is_active": False},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 403
