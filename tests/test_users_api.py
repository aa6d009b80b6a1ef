import uuid

from projecthub.models.user import User, UserRole
from tests.helpers import make_project, make_task, make_team, make_user

NEW_USER = {"name": "Carol", "email": "carol@example.com", "password": "Abcdef12!", "role": "manager"}


class TestCreateUser:
    def test_admin_creates_user(self, client, admin_headers):
        response = client.post("/users/create", json=NEW_USER, headers=admin_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Carol"
        assert data["role"] == "manager"
        assert "password" not in data

    def test_duplicate_email_conflicts(self, client, admin_headers):
        client.post("/users/create", json=NEW_USER, headers=admin_headers)
        response = client.post("/users/create", json={**NEW_USER, "email": "CAROL@example.com"}, headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["message"] == "Email already exists."

    def test_weak_password_rejected(self, client, admin_headers, db_session):
        response = client.post("/users/create", json={**NEW_USER, "password": "short"}, headers=admin_headers)
        assert response.status_code == 422
        assert {error["field"] for error in response.json()["errors"]} == {"password"}
        assert db_session.query(User).filter(User.email == "carol@example.com").count() == 0

    def test_requires_token(self, client, db_session):
        response = client.post("/users/create", json=NEW_USER)
        assert response.status_code == 401
        assert db_session.query(User).count() == 0


class TestListAndGetUsers:
    def test_list_paginates_and_numbers(self, client, admin_headers, db_session):
        for index in range(4):
            make_user(db_session, name=f"Member {index}")
        response = client.get("/users/all?page=2&limit=2", headers=admin_headers)
        body = response.json()
        assert response.status_code == 200
        assert body["totalData"] == 5
        assert body["totalPages"] == 3
        assert body["currentPage"] == 2
        assert [item["no"] for item in body["data"]] == [3, 4]

    def test_search_and_role_filter(self, client, admin_headers, db_session):
        make_user(db_session, name="Zed Manager", role=UserRole.manager)
        make_user(db_session, name="Zed Member")
        response = client.get("/users/all?search=zed&role=manager", headers=admin_headers)
        names = [item["name"] for item in response.json()["data"]]
        assert names == ["Zed Manager"]

    def test_get_unknown_user(self, client, admin_headers):
        response = client.get(f"/users/{uuid.uuid4()}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "User not found"}

    def test_get_with_malformed_id_is_404(self, client, admin_headers):
        assert client.get("/users/not-a-uuid", headers=admin_headers).status_code == 404

    def test_role_counts(self, client, admin_headers, db_session):
        make_user(db_session, role=UserRole.manager)
        make_user(db_session, role=UserRole.member)
        make_user(db_session, role=UserRole.member)
        response = client.get("/users/roles/count", headers=admin_headers)
        assert response.json()["data"] == {"admin": 1, "manager": 1, "member": 2}


class TestUpdateUser:
    def test_partial_update_keeps_other_fields(self, client, admin_headers, member_user):
        before = client.get(f"/users/{member_user.id}", headers=admin_headers).json()["data"]
        response = client.put(f"/users/update/{member_user.id}", json={"name": "Robert"}, headers=admin_headers)
        assert response.status_code == 200
        after = client.get(f"/users/{member_user.id}", headers=admin_headers).json()["data"]
        assert after["name"] == "Robert"
        assert after["email"] == before["email"]
        assert after["role"] == before["role"]

    def test_email_taken_by_another_user(self, client, admin_headers, admin_user, member_user):
        response = client.put(
            f"/users/update/{member_user.id}",
            json={"email": admin_user.email},
            headers=admin_headers,
        )
        assert response.status_code == 409
        assert response.json()["message"] == "Email already in use by another user."

    def test_password_change_allows_login(self, client, admin_headers, member_user):
        client.put(f"/users/update/{member_user.id}", json={"password": "NewPass99!"}, headers=admin_headers)
        response = client.post("/auth/login", json={"email": member_user.email, "password": "NewPass99!"})
        assert response.status_code == 200


class TestDeleteUser:
    def test_delete_twice(self, client, admin_headers, member_user):
        first = client.delete(f"/users/delete/{member_user.id}", headers=admin_headers)
        second = client.delete(f"/users/delete/{member_user.id}", headers=admin_headers)
        assert first.status_code == 200
        assert first.json()["message"] == "User deleted successfully"
        assert second.status_code == 404

    def test_member_cannot_delete(self, client, member_headers, admin_user):
        response = client.delete(f"/users/delete/{admin_user.id}", headers=member_headers)
        assert response.status_code == 403

    def test_user_owning_tasks_cannot_be_deleted(self, client, admin_headers, admin_user, db_session):
        worker = make_user(db_session, name="Worker")
        team = make_team(db_session, admin_user)
        make_task(db_session, make_project(db_session, team), worker)
        response = client.delete(f"/users/delete/{worker.id}", headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["message"] == "User still owns teams or tasks."
