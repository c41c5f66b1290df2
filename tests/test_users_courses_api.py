from __future__ import annotations

import pytest

from tutormarket.core.errors import DuplicateEntityError
from tutormarket.db.models import RoleName
from tutormarket.repositories import users as users_repo
from tutormarket.services.users import UserService


def _register(client, first_name: str, last_name: str, roles: list[str]):
    return client.post(
        "/api/v1/users/",
        json={
            "first_name": first_name,
            "last_name": last_name,
            "email": f"{first_name}.{last_name}@example.edu".lower(),
            "roles": roles,
        },
    )


@pytest.mark.usefixtures("session_scope")
def test_register_and_fetch_user(client) -> None:
    response = _register(client, "Grace", "Hopper", ["TUTOR", "VERIFIER"])
    assert response.status_code == 201, response.text
    created = response.json()
    assert sorted(created["roles"]) == ["TUTOR", "VERIFIER"]

    response = client.get(f"/api/v1/users/{created['id']}")
    assert response.status_code == 200
    assert response.json()["email"] == "grace.hopper@example.edu"


@pytest.mark.usefixtures("session_scope")
def test_default_role_is_student(client) -> None:
    response = client.post(
        "/api/v1/users/",
        json={"first_name": "Alan", "last_name": "Turing", "email": "alan@example.edu"},
    )
    assert response.status_code == 201, response.text
    assert response.json()["roles"] == ["STUDENT"]


@pytest.mark.usefixtures("session_scope")
def test_duplicate_email_is_rejected(client) -> None:
    assert _register(client, "Grace", "Hopper", ["TUTOR"]).status_code == 201
    response = _register(client, "Grace", "Hopper", ["STUDENT"])
    assert response.status_code == 409


@pytest.mark.usefixtures("session_scope")
def test_count_and_filter_by_role(client) -> None:
    _register(client, "Grace", "Hopper", ["TUTOR"])
    _register(client, "Edsger", "Dijkstra", ["TUTOR"])
    _register(client, "Alan", "Turing", ["STUDENT"])

    assert client.get("/api/v1/users/count", params={"role": "TUTOR"}).json()["count"] == 2
    assert client.get("/api/v1/users/count", params={"role": "STUDENT"}).json()["count"] == 1

    tutors = client.get("/api/v1/users/", params={"role": "TUTOR"}).json()["items"]
    assert [item["last_name"] for item in tutors] == ["Dijkstra", "Hopper"]


@pytest.mark.usefixtures("session_scope")
def test_search_tutors_by_full_name(client) -> None:
    _register(client, "Grace", "Hopper", ["TUTOR"])
    _register(client, "Grace", "Student", ["STUDENT"])

    found = client.get("/api/v1/users/tutors/search", params={"name": "grace hop"}).json()["items"]
    assert [item["last_name"] for item in found] == ["Hopper"]

    assert client.get("/api/v1/users/tutors/search", params={"name": "  "}).json()["items"] == []


@pytest.mark.usefixtures("session_scope")
def test_only_tutors_can_create_courses(client) -> None:
    student_id = _register(client, "Alan", "Turing", ["STUDENT"]).json()["id"]

    response = client.post(
        "/api/v1/courses/",
        json={"course_name": "Computability", "description_short": "Machines", "tutor_id": student_id},
    )
    assert response.status_code == 403

    response = client.post(
        "/api/v1/courses/",
        json={"course_name": "Computability", "description_short": "Machines", "tutor_id": 4242},
    )
    assert response.status_code == 404


@pytest.mark.usefixtures("session_scope")
def test_course_dates_are_validated(client) -> None:
    tutor_id = _register(client, "Grace", "Hopper", ["TUTOR"]).json()["id"]

    response = client.post(
        "/api/v1/courses/",
        json={
            "course_name": "Compilers",
            "description_short": "From source to machine code",
            "tutor_id": tutor_id,
            "start_date": "2026-11-01",
            "end_date": "2026-10-01",
        },
    )
    assert response.status_code == 422


@pytest.mark.usefixtures("session_scope")
def test_search_courses_by_name_and_tutor(client) -> None:
    hopper = _register(client, "Grace", "Hopper", ["TUTOR"]).json()["id"]
    dijkstra = _register(client, "Edsger", "Dijkstra", ["TUTOR"]).json()["id"]
    for name, tutor in (("Compiler Construction", hopper), ("Graph Algorithms", dijkstra), ("Compiler Lab", dijkstra)):
        response = client.post(
            "/api/v1/courses/",
            json={"course_name": name, "description_short": "Course", "tutor_id": tutor},
        )
        assert response.status_code == 201, response.text

    by_name = client.get("/api/v1/courses/", params={"name": "compiler"}).json()["items"]
    assert [item["course_name"] for item in by_name] == ["Compiler Construction", "Compiler Lab"]

    by_tutor = client.get("/api/v1/courses/", params={"tutor_id": dijkstra}).json()["items"]
    assert [item["course_name"] for item in by_tutor] == ["Compiler Lab", "Graph Algorithms"]


@pytest.mark.usefixtures("session_scope")
def test_address_registry(client) -> None:
    response = client.post(
        "/api/v1/addresses/",
        json={
            "campus_name": "Campus East",
            "street": "Prittwitzstrasse",
            "house_number": "10",
            "postal_code": "89075",
            "city": "Ulm",
        },
    )
    assert response.status_code == 201, response.text
    address_id = response.json()["id"]

    assert client.get(f"/api/v1/addresses/{address_id}").json()["campus_name"] == "Campus East"
    assert client.get("/api/v1/addresses/9999").status_code == 404
    assert len(client.get("/api/v1/addresses/").json()["items"]) == 1


@pytest.mark.usefixtures("session_scope")
def test_email_is_stored_lower_case_and_unique_across_case(client) -> None:
    response = client.post(
        "/api/v1/users/",
        json={"first_name": "Grace", "last_name": "Hopper", "email": "Grace.Hopper@Example.EDU"},
    )
    assert response.status_code == 201, response.text
    assert response.json()["email"] == "grace.hopper@example.edu"

    response = client.post(
        "/api/v1/users/",
        json={"first_name": "Grace", "last_name": "Hopper", "email": "GRACE.HOPPER@example.edu"},
    )
    assert response.status_code == 409


def test_registration_that_loses_the_email_race_is_a_duplicate(session_scope, monkeypatch) -> None:
    service = UserService()
    service.create_user(
        session_scope, first_name="Grace", last_name="Hopper", email="grace@example.edu", roles=[RoleName.TUTOR]
    )
    session_scope.commit()

    # A concurrent registration that ran its lookup before the first one committed.
    monkeypatch.setattr(users_repo, "get_by_email", lambda session, email: None)
    with pytest.raises(DuplicateEntityError):
        service.create_user(
            session_scope, first_name="Grace", last_name="Again", email="Grace@Example.edu", roles=[RoleName.STUDENT]
        )

    assert [user.last_name for user in service.list_users(session_scope)] == ["Hopper"]


@pytest.mark.usefixtures("session_scope")
def test_update_user_replaces_profile_fields(client) -> None:
    user_id = _register(client, "Grace", "Hopper", ["TUTOR"]).json()["id"]
    other_id = _register(client, "Alan", "Turing", ["STUDENT"]).json()["id"]

    response = client.put(
        f"/api/v1/users/{user_id}",
        json={
            "first_name": "Grace",
            "last_name": "Murray Hopper",
            "email": "Grace@Navy.mil",
            "description": "Rear admiral",
        },
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["last_name"] == "Murray Hopper"
    assert body["email"] == "grace@navy.mil"
    assert body["roles"] == ["TUTOR"]

    response = client.put(
        f"/api/v1/users/{other_id}",
        json={"first_name": "Alan", "last_name": "Turing", "email": "grace@navy.mil"},
    )
    assert response.status_code == 409

    response = client.put(
        "/api/v1/users/9999",
        json={"first_name": "Nobody", "last_name": "Here", "email": "nobody@example.edu"},
    )
    assert response.status_code == 404


@pytest.mark.usefixtures("session_scope")
def test_course_count_and_duplicate_names(client) -> None:
    tutor_id = _register(client, "Grace", "Hopper", ["TUTOR"]).json()["id"]
    assert client.get("/api/v1/courses/count").json()["count"] == 0

    payload = {"course_name": "Compilers", "description_short": "Front to back", "tutor_id": tutor_id}
    assert client.post("/api/v1/courses/", json=payload).status_code == 201
    assert client.post("/api/v1/courses/", json={**payload, "course_name": "compilers"}).status_code == 409

    assert client.get("/api/v1/courses/count").json()["count"] == 1


@pytest.mark.usefixtures("session_scope")
def test_update_course_replaces_fields_and_checks_the_tutor(client) -> None:
    hopper = _register(client, "Grace", "Hopper", ["TUTOR"]).json()["id"]
    dijkstra = _register(client, "Edsger", "Dijkstra", ["TUTOR"]).json()["id"]
    student = _register(client, "Alan", "Turing", ["STUDENT"]).json()["id"]
    course_id = client.post(
        "/api/v1/courses/",
        json={"course_name": "Compilers", "description_short": "Front to back", "tutor_id": hopper},
    ).json()["id"]

    update = {
        "course_name": "Structured Programming",
        "description_short": "Goto considered harmful",
        "tutor_id": dijkstra,
        "start_date": "2026-11-01",
        "end_date": "2027-02-01",
    }
    response = client.put(f"/api/v1/courses/{course_id}", json=update)
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["course_name"] == "Structured Programming"
    assert body["tutor_id"] == dijkstra
    assert body["end_date"] == "2027-02-01"

    assert client.put(f"/api/v1/courses/{course_id}", json={**update, "tutor_id": student}).status_code == 403
    assert client.put("/api/v1/courses/9999", json=update).status_code == 404
    response = client.put(f"/api/v1/courses/{course_id}", json={**update, "end_date": "2026-10-01"})
    assert response.status_code == 422
