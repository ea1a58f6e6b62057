from app.models import CV, Comment, User
from conftest import auth_header


def test_admin_lists_users(client, user, admin, admin_headers):
    response = client.get("/api/users", headers=admin_headers)

    assert response.status_code == 200
    emails = {u["email"] for u in response.json()}
    assert emails == {user.email, admin.email}


def test_listing_users_is_admin_only(client, user_headers):
    assert client.get("/api/users", headers=user_headers).status_code == 403


def test_delete_user_cascades_to_comments_and_cv(client, db, user, user_headers, other_user, admin_headers, upload_dir):
    user_id = user.id
    client.post("/api/comments", json={"message": "Mine"}, headers=user_headers)
    client.post("/api/comments", json={"message": "Theirs"}, headers=auth_header(other_user))
    client.post(
        "/api/cv/upload",
        files={"cv": ("resume.pdf", b"%PDF", "application/pdf")},
        headers=user_headers,
    )

    response = client.delete(f"/api/users/{user_id}", headers=admin_headers)

    assert response.status_code == 200
    db.expire_all()
    assert db.query(User).filter(User.id == user_id).first() is None
    assert db.query(CV).count() == 0
    assert list(upload_dir.iterdir()) == []
    assert [c.message for c in db.query(Comment).all()] == ["Theirs"]


def test_admin_cannot_delete_self(client, admin, admin_headers):
    response = client.delete(f"/api/users/{admin.id}", headers=admin_headers)

    assert response.status_code == 400


def test_delete_unknown_user(client, admin_headers):
    assert client.delete("/api/users/999", headers=admin_headers).status_code == 404
