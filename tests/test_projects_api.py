import uuid
from types import SimpleNamespace

import pytest

from projecthub.models.notification import Notification
from projecthub.models.project import Project, ProjectStatus
from tests.helpers import make_project, make_team, make_user


@pytest.fixture()
def team(db_session, admin_user, member_user):
    third = make_user(db_session, name="Carl")
    return make_team(db_session, admin_user, name="Core", members=(admin_user, member_user, third))


def _project_body(team, **overrides):
    body = {
        "team_id": str(team.id),
        "name": "Apollo",
        "description": "Moon shot",
        "status": "planning",
        "deadline": "2030-01-31",
    }
    body.update(overrides)
    return body


class TestCreateProject:
    def test_create_notifies_members_except_actor(self, client, admin_headers, admin_user, team, db_session):
        response = client.post("/projects/create", json=_project_body(team), headers=admin_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["name"] == "Apollo"
        assert data["status"] == "planning"
        assert data["team"]["name"] == "Core"
        rows = db_session.query(Notification).all()
        assert len(rows) == 2
        assert admin_user.id not in {row.user_id for row in rows}
        assert rows[0].message == 'New project "Apollo" has been created by Alice Admin'

    def test_duplicate_name_in_team_conflicts(self, client, admin_headers, team, db_session):
        make_project(db_session, team, name="Apollo")
        response = client.post("/projects/create", json=_project_body(team), headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["message"] == "Project with the same name already exists in the team."

    def test_same_name_in_other_team_is_allowed(self, client, admin_headers, admin_user, team, db_session):
        other = make_team(db_session, admin_user, name="Other")
        make_project(db_session, other, name="Apollo")
        response = client.post("/projects/create", json=_project_body(team), headers=admin_headers)
        assert response.status_code == 201

    def test_unknown_team_is_404(self, client, admin_headers):
        body = _project_body(SimpleNamespace(id=uuid.uuid4()))
        response = client.post("/projects/create", json=body, headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Team not found"

    def test_invalid_body_creates_nothing(self, client, admin_headers, team, db_session):
        response = client.post(
            "/projects/create",
            json=_project_body(team, status="archived", deadline="someday"),
            headers=admin_headers,
        )
        assert response.status_code == 422
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"status", "deadline"}
        assert db_session.query(Project).count() == 0
        assert db_session.query(Notification).count() == 0


class TestListProjects:
    def test_pagination_numbers_rows(self, client, admin_headers, team, db_session):
        for index in range(12):
            make_project(db_session, team, name=f"Project {index}")
        body = client.get("/projects/all?page=2&limit=5", headers=admin_headers).json()
        assert body["totalData"] == 12
        assert body["totalPages"] == 3
        assert [item["no"] for item in body["data"]] == [6, 7, 8, 9, 10]

    def test_lenient_page_params(self, client, admin_headers, team, db_session):
        make_project(db_session, team)
        body = client.get("/projects/all?page=abc&limit=-3", headers=admin_headers).json()
        assert body["currentPage"] == 1
        assert body["totalData"] == 1

    def test_status_filter(self, client, admin_headers, team, db_session):
        make_project(db_session, team, name="Done", status=ProjectStatus.completed)
        make_project(db_session, team, name="Fresh")
        body = client.get("/projects/all?status=completed", headers=admin_headers).json()
        assert [item["name"] for item in body["data"]] == ["Done"]

    def test_search_escapes_wildcards(self, client, admin_headers, team, db_session):
        make_project(db_session, team, name="100% done")
        make_project(db_session, team, name="1000 things")
        body = client.get("/projects/all?search=100%25", headers=admin_headers).json()
        assert [item["name"] for item in body["data"]] == ["100% done"]


class TestUpdateProject:
    def test_partial_update_keeps_other_fields(self, client, admin_headers, team, db_session):
        project = make_project(db_session, team, name="Apollo")
        before = client.get(f"/projects/{project.id}", headers=admin_headers).json()["data"]
        response = client.put(f"/projects/update/{project.id}", json={"description": "New"}, headers=admin_headers)
        after = response.json()["data"]
        assert response.status_code == 200
        assert after["description"] == "New"
        assert after["name"] == before["name"]
        assert after["deadline"] == before["deadline"]
        assert db_session.query(Notification).count() == 0

    def test_empty_update_is_rejected(self, client, admin_headers, team, db_session):
        project = make_project(db_session, team)
        response = client.put(f"/projects/update/{project.id}", json={}, headers=admin_headers)
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "body"

    def test_status_change_notifies_all_members(self, client, admin_headers, team, db_session):
        project = make_project(db_session, team, name="Apollo")
        client.put(f"/projects/update/{project.id}", json={"status": "completed"}, headers=admin_headers)
        rows = db_session.query(Notification).all()
        assert len(rows) == 3
        assert rows[0].message == 'Project "Apollo" status changed to completed by Alice Admin'

    def test_rename_clash_in_same_team(self, client, admin_headers, team, db_session):
        make_project(db_session, team, name="Apollo")
        other = make_project(db_session, team, name="Gemini")
        response = client.put(f"/projects/update/{other.id}", json={"name": "Apollo"}, headers=admin_headers)
        assert response.status_code == 409


class TestDeleteProject:
    def test_delete_notifies_all_members(self, client, admin_headers, team, db_session):
        project = make_project(db_session, team, name="Apollo")
        response = client.delete(f"/projects/delete/{project.id}", headers=admin_headers)
        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.query(Project).count() == 0
        messages = {row.message for row in db_session.query(Notification).all()}
        assert messages == {'Project "Apollo" has been deleted by Alice Admin'}
        assert db_session.query(Notification).count() == 3

    def test_delete_unknown_project(self, client, admin_headers):
        response = client.delete(f"/projects/delete/{uuid.uuid4()}", headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Project not found"
