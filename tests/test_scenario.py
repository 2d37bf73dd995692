from app.models.course import Course
from conftest import auth_header, login, register


def test_role_and_enrollment_gating_end_to_end(client, db_session):
    # A - обычный пользователь
    register(client, "user_a", role="user")
    headers_a = auth_header(login(client, "user_a"))

    response = client.post(
        "/api/v1/courses",
        data={"name": "Algorithms", "description": "Sorting", "price": "0"},
        headers=headers_a,
    )
    assert response.json()["error"] == "forbidden"
    assert response.json()["reason"] == "role_mismatch"
    assert db_session.query(Course).count() == 0

    # B - администратор
    user_b = register(client, "user_b", role="admin")
    headers_b = auth_header(login(client, "user_b"))

    response = client.post(
        "/api/v1/courses",
        data={"name": "Algorithms", "description": "Sorting", "price": "0"},
        headers=headers_b,
    )
    assert response.status_code == 201
    course_id = response.json()["id"]
    assert db_session.get(Course, course_id).owner_id == user_b["id"]

    lessons_url = f"/api/v1/courses/{course_id}/lessons"
    response = client.post(lessons_url, data={"name": "Bubble sort", "description": "Swap"}, headers=headers_b)
    assert response.status_code == 201

    # До записи A не видит уроки
    assert client.get(lessons_url, headers=headers_a).json()["reason"] == "not_enrolled"

    assert client.post(f"/api/v1/courses/{course_id}/enroll", headers=headers_a).status_code == 201

    response = client.get(lessons_url, headers=headers_a)
    assert response.status_code == 200
    assert [l["name"] for l in response.json()] == ["Bubble sort"]

    # C без учетных данных
    response = client.get(lessons_url)
    assert response.json()["error"] == "missing_credential"
