import uuid
from types import SimpleNamespace

import pytest

from projecthub.models.comment import Comment
from projecthub.models.notification import Notification
from projecthub.models.task import Task, TaskStatus
from tests.helpers import make_project, make_task, make_team, make_user


@pytest.fixture()
def project(db_session, admin_user, member_user):
    team = make_team(db_session, admin_user, name="Core", members=(admin_user, member_user))
    return make_project(db_session, team, name="Apollo")


def _task_body(project, assignee, **overrides):
    body = {
        "project_id": str(project.id),
        "assign_to": str(assignee.id),
        "title": "Write docs",
        "description": "All of them",
        "priority": "high",
        "status": "todo",
        "due_date": "2030-02-01T10:00:00Z",
    }
    body.update(overrides)
    return body


def _notifications_for(db, user):
    return db.query(Notification).filter(Notification.user_id == user.id).all()


class TestTasks:
    def test_create_notifies_assignee(self, client, admin_headers, project, member_user, db_session):
        response = client.post("/tasks/create", json=_task_body(project, member_user), headers=admin_headers)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["assignedUser"]["id"] == str(member_user.id)
        assert data["project"]["name"] == "Apollo"
        (row,) = _notifications_for(db_session, member_user)
        assert row.message == 'You have been assigned a new task: "Write docs" by Alice Admin'

    def test_duplicate_title_in_project_conflicts(self, client, admin_headers, project, member_user, db_session):
        make_task(db_session, project, member_user, title="Write docs")
        response = client.post("/tasks/create", json=_task_body(project, member_user), headers=admin_headers)
        assert response.status_code == 409
        assert response.json()["message"] == "Task with the same title already exists in the project."

    def test_unknown_assignee_is_404(self, client, admin_headers, project):
        body = _task_body(project, SimpleNamespace(id=uuid.uuid4()))
        response = client.post("/tasks/create", json=body, headers=admin_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_validation_reports_every_field(self, client, admin_headers, db_session):
        response = client.post("/tasks/create", json={"priority": "urgent"}, headers=admin_headers)
        assert response.status_code == 422
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"project_id", "assign_to", "title", "priority", "status", "due_date"}
        assert db_session.query(Task).count() == 0

    def test_filters(self, client, admin_headers, project, member_user, db_session):
        make_task(db_session, project, member_user, title="Open", status=TaskStatus.todo)
        make_task(db_session, project, member_user, title="Closed", status=TaskStatus.done)
        body = client.get(f"/tasks/all?status=done&project_id={project.id}", headers=admin_headers).json()
        assert [item["title"] for item in body["data"]] == ["Closed"]
        assert client.get("/tasks/all?priority=urgent", headers=admin_headers).json()["totalData"] == 0

    def test_status_change_notifies_assignee_and_team(self, client, admin_headers, project, member_user, db_session):
        task = make_task(db_session, project, member_user, title="Ship")
        response = client.put(f"/tasks/update/{task.id}", json={"status": "done"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "done"
        rows = db_session.query(Notification).all()
        assert len(rows) == 2
        assert {row.message for row in rows} == {'Task "Ship" status changed to done by Alice Admin'}

    def test_reassignment_notifies_new_assignee(self, client, admin_headers, project, member_user, db_session):
        newcomer = make_user(db_session, name="Newcomer")
        task = make_task(db_session, project, member_user, title="Ship")
        client.put(f"/tasks/update/{task.id}", json={"assign_to": str(newcomer.id)}, headers=admin_headers)
        (row,) = db_session.query(Notification).all()
        assert row.user_id == newcomer.id
        assert row.message == 'You have been assigned a new task: "Ship" by Alice Admin'

    def test_update_without_changes_sends_nothing(self, client, admin_headers, project, member_user, db_session):
        task = make_task(db_session, project, member_user)
        response = client.put(f"/tasks/update/{task.id}", json={"description": "More"}, headers=admin_headers)
        assert response.json()["data"]["description"] == "More"
        assert db_session.query(Notification).count() == 0

    def test_delete_notifies_assignee_and_removes_comments(self, client, admin_headers, project, member_user, db_session):
        task = make_task(db_session, project, member_user, title="Ship")
        db_session.add(Comment(task_id=task.id, user_id=member_user.id, content="On it"))
        db_session.commit()
        response = client.delete(f"/tasks/delete/{task.id}", headers=admin_headers)
        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.query(Task).count() == 0
        assert db_session.query(Comment).count() == 0
        (row,) = _notifications_for(db_session, member_user)
        assert row.message == 'Task "Ship" has been deleted by Alice Admin'


class TestComments:
    def test_assignee_comment_by_other_user_notifies_assignee(
        self, client, admin_headers, admin_user, project, member_user, db_session
    ):
        task = make_task(db_session, project, member_user, title="Review")
        response = client.post(
            "/comments/create",
            json={"task_id": str(task.id), "user_id": str(admin_user.id), "content": "Looks good"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["content"] == "Looks good"
        assert data["user"]["id"] == str(admin_user.id)
        (row,) = _notifications_for(db_session, member_user)
        assert row.message == 'Alice Admin commented on task: "Review"'

    def test_own_comment_sends_nothing(self, client, project, member_user, member_headers, db_session):
        task = make_task(db_session, project, member_user)
        response = client.post(
            "/comments/create",
            json={"task_id": str(task.id), "user_id": str(member_user.id), "content": "Note to self"},
            headers=member_headers,
        )
        assert response.status_code == 201
        assert db_session.query(Notification).count() == 0

    def test_comment_authored_as_assignee_sends_nothing(self, client, admin_headers, project, member_user, db_session):
        task = make_task(db_session, project, member_user)
        response = client.post(
            "/comments/create",
            json={"task_id": str(task.id), "user_id": str(member_user.id), "content": "Posted for Bob"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert db_session.query(Notification).count() == 0

    def test_comment_names_author_not_caller(
        self, client, member_headers, admin_user, project, member_user, db_session
    ):
        task = make_task(db_session, project, member_user, title="Review")
        response = client.post(
            "/comments/create",
            json={"task_id": str(task.id), "user_id": str(admin_user.id), "content": "Relayed"},
            headers=member_headers,
        )
        assert response.status_code == 201
        (row,) = _notifications_for(db_session, member_user)
        assert row.message == 'Alice Admin commented on task: "Review"'

    def test_delete_by_assignee_sends_nothing(self, client, member_headers, admin_user, project, member_user, db_session):
        task = make_task(db_session, project, member_user)
        comment = Comment(task_id=task.id, user_id=admin_user.id, content="Old")
        db_session.add(comment)
        db_session.commit()
        assert client.delete(f"/comments/delete/{comment.id}", headers=member_headers).status_code == 200
        assert db_session.query(Notification).count() == 0

    def test_outsider_cannot_comment(self, client, admin_headers, project, member_user, db_session):
        outsider = make_user(db_session, name="Outsider")
        task = make_task(db_session, project, member_user)
        response = client.post(
            "/comments/create",
            json={"task_id": str(task.id), "user_id": str(outsider.id), "content": "Hi"},
            headers=admin_headers,
        )
        assert response.status_code == 403
        assert response.json()["message"] == "Access denied to this task"
        assert db_session.query(Comment).count() == 0

    def test_unknown_task_is_404(self, client, admin_headers, admin_user):
        response = client.post(
            "/comments/create",
            json={"task_id": str(uuid.uuid4()), "user_id": str(admin_user.id), "content": "Hi"},
            headers=admin_headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Task not found"

    def test_search_treats_percent_literally(self, client, admin_headers, admin_user, project, member_user, db_session):
        task = make_task(db_session, project, member_user)
        for content in ("50% done", "500 lines"):
            db_session.add(Comment(task_id=task.id, user_id=admin_user.id, content=content))
        db_session.commit()
        body = client.get(f"/comments/all?task_id={task.id}&search=50%25", headers=admin_headers).json()
        assert [item["content"] for item in body["data"]] == ["50% done"]

    def test_update_requires_a_field(self, client, admin_headers, admin_user, project, member_user, db_session):
        task = make_task(db_session, project, member_user)
        comment = Comment(task_id=task.id, user_id=admin_user.id, content="Old")
        db_session.add(comment)
        db_session.commit()
        assert client.put(f"/comments/update/{comment.id}", json={}, headers=admin_headers).status_code == 422
        response = client.put(f"/comments/update/{comment.id}", json={"content": "New"}, headers=admin_headers)
        assert response.json()["data"]["content"] == "New"

    def test_delete_notifies_assignee(self, client, admin_headers, admin_user, project, member_user, db_session):
        task = make_task(db_session, project, member_user, title="Review")
        comment = Comment(task_id=task.id, user_id=admin_user.id, content="Old")
        db_session.add(comment)
        db_session.commit()
        response = client.delete(f"/comments/delete/{comment.id}", headers=admin_headers)
        assert response.status_code == 200
        (row,) = _notifications_for(db_session, member_user)
        assert row.message == 'A comment on task "Review" has been deleted by Alice Admin'
