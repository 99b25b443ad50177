from sqlalchemy import select

from app.articles.models import Article
from app.users.models import User, UserRole
from conftest import auth_headers


async def publish(client, author, title, published=True):
    resp = await client.post(
        "/api/articles",
        json={"title": title, "excerpt": "e", "content": "c", "published": published},
        headers=auth_headers(author),
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


async def test_superadmin_changes_role(client, superadmin_user, regular_user):
    resp = await client.patch(
        f"/api/admin/users/{regular_user.id}", json={"role": "admin"}, headers=auth_headers(superadmin_user)
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["role"] == "admin"
    assert data["email"] == regular_user.email
    assert set(data) == {"id", "email", "name", "image", "role", "createdAt"}


async def test_admin_can_be_promoted_straight_to_superadmin(client, superadmin_user, admin_user):
    resp = await client.patch(
        f"/api/admin/users/{admin_user.id}", json={"role": "superadmin"}, headers=auth_headers(superadmin_user)
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "superadmin"


async def test_invalid_role_is_400(client, superadmin_user, regular_user):
    resp = await client.patch(
        f"/api/admin/users/{regular_user.id}", json={"role": "owner"}, headers=auth_headers(superadmin_user)
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid role"


async def test_superadmin_cannot_demote_self(client, superadmin_user, db):
    resp = await client.patch(
        f"/api/admin/users/{superadmin_user.id}", json={"role": "admin"}, headers=auth_headers(superadmin_user)
    )
    assert resp.status_code == 400
    stored = (await db.execute(select(User.role).where(User.id == superadmin_user.id))).scalar_one()
    assert stored == "superadmin"


async def test_superadmin_setting_self_to_superadmin_is_noop(client, superadmin_user):
    resp = await client.patch(
        f"/api/admin/users/{superadmin_user.id}", json={"role": "superadmin"}, headers=auth_headers(superadmin_user)
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "superadmin"


async def test_admin_cannot_change_roles(client, admin_user, regular_user):
    resp = await client.patch(
        f"/api/admin/users/{regular_user.id}", json={"role": "admin"}, headers=auth_headers(admin_user)
    )
    assert resp.status_code == 403


async def test_change_role_requires_session(client, regular_user):
    resp = await client.patch(f"/api/admin/users/{regular_user.id}", json={"role": "admin"})
    assert resp.status_code == 401


async def test_change_role_of_missing_user_is_404(client, superadmin_user):
    resp = await client.patch(
        "/api/admin/users/does-not-exist", json={"role": "admin"}, headers=auth_headers(superadmin_user)
    )
    assert resp.status_code == 404


async def test_superadmin_cannot_delete_self(client, superadmin_user, db):
    resp = await client.delete(f"/api/admin/users/{superadmin_user.id}", headers=auth_headers(superadmin_user))
    assert resp.status_code == 400
    assert resp.json()["error"] == "Cannot delete yourself"
    assert (await db.execute(select(User.id).where(User.id == superadmin_user.id))).scalar_one_or_none()


async def test_delete_user_cascades_to_articles(client, superadmin_user, admin_user, db):
    await publish(client, admin_user, "Admin post")
    await publish(client, superadmin_user, "Root post")

    resp = await client.delete(f"/api/admin/users/{admin_user.id}", headers=auth_headers(superadmin_user))
    assert resp.status_code == 200
    assert resp.json() == {"message": "User deleted successfully"}

    assert (await db.execute(select(User.id).where(User.id == admin_user.id))).scalar_one_or_none() is None
    remaining = (await db.execute(select(Article.slug))).scalars().all()
    assert remaining == ["root-post"]


async def test_admin_cannot_delete_users(client, admin_user, regular_user):
    resp = await client.delete(f"/api/admin/users/{regular_user.id}", headers=auth_headers(admin_user))
    assert resp.status_code == 403


async def test_delete_missing_user_is_404(client, superadmin_user):
    resp = await client.delete("/api/admin/users/does-not-exist", headers=auth_headers(superadmin_user))
    assert resp.status_code == 404


async def test_stats(client, admin_user, regular_user):
    await publish(client, admin_user, "One")
    await publish(client, admin_user, "Two")
    await publish(client, admin_user, "Draft", published=False)

    resp = await client.get("/api/admin/stats", headers=auth_headers(admin_user))
    assert resp.status_code == 200
    assert resp.json() == {
        "totalUsers": 2,
        "totalArticles": 3,
        "publishedArticles": 2,
        "draftArticles": 1,
        "recentUsers": 2,
    }


async def test_stats_forbidden_for_user_role(client, regular_user):
    resp = await client.get("/api/admin/stats", headers=auth_headers(regular_user))
    assert resp.status_code == 403


async def test_list_users_with_article_counts(client, admin_user, regular_user):
    await publish(client, admin_user, "One")
    await publish(client, admin_user, "Two")

    resp = await client.get("/api/admin/users", headers=auth_headers(admin_user))
    assert resp.status_code == 200
    counts = {u["email"]: u["articleCount"] for u in resp.json()}
    assert counts == {admin_user.email: 2, regular_user.email: 0}
    assert all("passwordHash" not in u for u in resp.json())


async def test_role_change_takes_effect_without_new_token(client, superadmin_user, make_user):
    editor = await make_user("editor@example.com", UserRole.ADMIN)
    headers = auth_headers(editor)
    assert (await client.get("/api/admin/stats", headers=headers)).status_code == 200

    await client.patch(f"/api/admin/users/{editor.id}", json={"role": "user"}, headers=auth_headers(superadmin_user))
    assert (await client.get("/api/admin/stats", headers=headers)).status_code == 403


async def test_unknown_stored_role_is_reported_as_user(client, admin_user, regular_user, db):
    regular_user.role = "editor"
    await db.commit()

    resp = await client.get("/api/admin/users", headers=auth_headers(admin_user))
    assert resp.status_code == 200, resp.text
    roles = {u["email"]: u["role"] for u in resp.json()}
    assert roles[regular_user.email] == "user"

    resp = await client.get("/api/users/me", headers=auth_headers(regular_user))
    assert resp.status_code == 200
    assert resp.json()["role"] == "user"
