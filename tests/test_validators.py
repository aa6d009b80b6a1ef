"""Tests for the declarative request-body rules."""

from datetime import datetime

from projecthub.validators.accounts import register_rules, user_update_rules
from projecthub.validators.rules import (
    AtLeastOne,
    FieldRules,
    IsEmail,
    IsISODate,
    IsUUID,
    Length,
    NotEmpty,
    OneOf,
    RuleSet,
    ValidationIssue,
    parse_iso_datetime,
)
from projecthub.validators.teams import member_create_rules, team_create_rules
from projecthub.validators.work import comment_update_rules, project_update_rules, task_create_rules


def _fields(issues):
    return [issue.field for issue in issues]


class TestFieldRules:
    def test_collects_every_violation_in_order(self):
        rules = RuleSet(
            FieldRules("name", NotEmpty("Name is required"), Length(min=2, message="Too short")),
            FieldRules("email", NotEmpty("Email is required"), IsEmail()),
        )
        issues = rules.check({})
        assert issues == [
            ValidationIssue("name", "Name is required"),
            ValidationIssue("name", "Too short"),
            ValidationIssue("email", "Email is required"),
            ValidationIssue("email", "Invalid email format"),
        ]

    def test_optional_field_skipped_when_absent(self):
        rules = RuleSet(FieldRules("name", NotEmpty("Name cannot be empty"), optional=True))
        assert rules.check({}) == []

    def test_optional_field_checked_when_present_but_empty(self):
        rules = RuleSet(FieldRules("name", NotEmpty("Name cannot be empty"), optional=True))
        assert rules.check({"name": ""}) == [ValidationIssue("name", "Name cannot be empty")]

    def test_trim_writes_back_stripped_value(self):
        body = {"name": "  Core  "}
        rules = RuleSet(FieldRules("name", NotEmpty(), trim=True))
        assert rules.check(body) == []
        assert body["name"] == "Core"

    def test_whitespace_only_value_fails_after_trim(self):
        rules = RuleSet(FieldRules("name", NotEmpty("Team name is required"), trim=True))
        assert _fields(rules.check({"name": "   "})) == ["name"]

    def test_composite_runs_after_field_rules(self):
        rules = RuleSet(
            FieldRules("status", OneOf(("a", "b")), optional=True),
            composite=[AtLeastOne(("status", "name"))],
        )
        issues = rules.check({"status": ""})
        assert _fields(issues) == ["status", "body"]


class TestRules:
    def test_is_uuid(self):
        assert IsUUID().passes("7f1b1c9e-8a53-4f7c-9d9a-2a1f3a0b6c11")
        assert not IsUUID().passes("not-a-uuid")
        assert not IsUUID().passes(42)

    def test_is_email(self):
        assert IsEmail().passes("a@example.com")
        assert not IsEmail().passes("a@")

    def test_iso_date_accepts_date_and_zulu_datetime(self):
        assert IsISODate().passes("2030-01-31")
        assert IsISODate().passes("2030-01-31T10:00:00Z")
        assert not IsISODate().passes("31/01/2030")

    def test_parse_iso_datetime_date_only(self):
        assert parse_iso_datetime("2030-01-31") == datetime(2030, 1, 31)

    def test_length_max(self):
        assert Length(max=3).passes("abc")
        assert not Length(max=3).passes("abcd")


class TestEntityRuleSets:
    def test_register_password_complexity(self):
        issues = register_rules.check(
            {"name": "Al", "email": "al@example.com", "password": "abcdef", "role": "admin"}
        )
        messages = [issue.message for issue in issues if issue.field == "password"]
        assert "Password must contain at least one uppercase letter" in messages
        assert "Password must contain at least one number" in messages
        assert "Password must contain at least one special character" in messages

    def test_register_rejects_unknown_role(self):
        issues = register_rules.check(
            {"name": "Alice", "email": "al@example.com", "password": "Abc123!", "role": "owner"}
        )
        assert issues == [ValidationIssue("role", "Role must be either admin, manager, or member")]

    def test_user_update_partial_body_is_valid(self):
        assert user_update_rules.check({"name": "New Name"}) == []

    def test_team_create_requires_name(self):
        assert team_create_rules.check({"description": "x"}) == [ValidationIssue("name", "Team name is required")]

    def test_member_create_checks_ids_and_role(self):
        issues = member_create_rules.check({"team_id": "bad", "user_id": "bad", "role": "boss"})
        assert _fields(issues) == ["team_id", "user_id", "role"]

    def test_project_update_needs_at_least_one_field(self):
        issues = project_update_rules.check({})
        assert issues == [ValidationIssue("body", "At least one field must be provided for update")]

    def test_task_create_reports_each_missing_field(self):
        issues = task_create_rules.check({})
        assert set(_fields(issues)) == {"project_id", "assign_to", "title", "priority", "status", "due_date"}

    def test_comment_update_empty_content_rejected(self):
        issues = comment_update_rules.check({"content": ""})
        assert "content" in _fields(issues)
