from app.models.user import User


def test_admin_lists_users(client, admin, student):
    response = client.get("/api/v1/users", headers=admin["headers"])
    assert response.status_code == 200
    assert {u["username"] for u in response.json()} == {"admin", "student"}


def test_student_cannot_list_users(client, student):
    response = client.get("/api/v1/users", headers=student["headers"])
    assert response.status_code == 403
    assert response.json()["reason"] == "role_mismatch"


def test_user_reads_only_self(client, admin, student):
    own = client.get(f"/api/v1/users/{student['user']['id']}", headers=student["headers"])
    assert own.status_code == 200

    other = client.get(f"/api/v1/users/{admin['user']['id']}", headers=student["headers"])
    assert other.status_code == 403
    assert other.json()["reason"] == "not_owner"

    by_admin = client.get(f"/api/v1/users/{student['user']['id']}", headers=admin["headers"])
    assert by_admin.status_code == 200


def test_soft_delete_keeps_row_and_blocks_login(client, admin, student, db_session):
    response = client.delete(f"/api/v1/users/{student['user']['id']}", headers=admin["headers"])
    assert response.status_code == 200

    row = db_session.get(User, student["user"]["id"])
    assert row is not None
    assert row.is_active is False
    assert row.deleted_at is not None

    response = client.post("/api/v1/auth/login", json={"email": "student@mail.com", "password": "Passw0rd!"})
    assert response.status_code == 401
    assert client.get(f"/api/v1/users/{student['user']['id']}", headers=admin["headers"]).status_code == 404
    assert [u["username"] for u in client.get("/api/v1/users", headers=admin["headers"]).json()] == ["admin"]


def test_admin_cannot_delete_self(client, admin):
    response = client.delete(f"/api/v1/users/{admin['user']['id']}", headers=admin["headers"])
    assert response.status_code == 400
    assert response.json()["error"] == "bad_request"


def test_delete_unknown_user_is_not_found(client, admin):
    response = client.delete("/api/v1/users/999", headers=admin["headers"])
    assert response.status_code == 404
