"""Rules for projects, tasks and comments."""

from projecthub.models.project import ProjectStatus
from projecthub.models.task import TaskPriority, TaskStatus
from projecthub.validators.rules import (
    AtLeastOne,
    FieldRules,
    IsISODate,
    IsString,
    IsUUID,
    Length,
    NotEmpty,
    OneOf,
    RuleSet,
)

PROJECT_STATUSES = tuple(status.value for status in ProjectStatus)
TASK_PRIORITIES = tuple(priority.value for priority in TaskPriority)
TASK_STATUSES = tuple(status.value for status in TaskStatus)

_PROJECT_STATUS_MESSAGE = f"Invalid status value. Allowed values: {', '.join(PROJECT_STATUSES)}"
_TASK_PRIORITY_MESSAGE = "Priority must be one of: low, medium, high"
_TASK_STATUS_MESSAGE = "Status must be one of: todo, in_progress, done"

project_create_rules = RuleSet(
    FieldRules("team_id", NotEmpty("Team ID is required"), IsUUID("Team ID must be a valid UUID")),
    FieldRules(
        "name",
        NotEmpty("Project name is required"),
        Length(max=100, message="Project name cannot exceed 100 characters"),
        trim=True,
    ),
    FieldRules(
        "description",
        Length(max=500, message="Description cannot exceed 500 characters"),
        optional=True,
    ),
    FieldRules("status", NotEmpty("Status is required"), OneOf(PROJECT_STATUSES, _PROJECT_STATUS_MESSAGE)),
    FieldRules("deadline", NotEmpty("Deadline is required"), IsISODate("Deadline must be a valid date")),
)

project_update_rules = RuleSet(
    FieldRules("team_id", NotEmpty("Team ID cannot be empty"), IsUUID("Team ID must be a valid UUID"), optional=True),
    FieldRules(
        "name",
        NotEmpty("Project name cannot be empty"),
        Length(max=100, message="Project name cannot exceed 100 characters"),
        optional=True,
        trim=True,
    ),
    FieldRules(
        "description",
        Length(max=500, message="Description cannot exceed 500 characters"),
        optional=True,
    ),
    FieldRules("status", OneOf(PROJECT_STATUSES, _PROJECT_STATUS_MESSAGE), optional=True),
    FieldRules("deadline", IsISODate("Deadline must be a valid date"), optional=True),
    composite=[AtLeastOne(("team_id", "name", "description", "status", "deadline"))],
)

task_create_rules = RuleSet(
    FieldRules("project_id", NotEmpty("Project ID is required"), IsUUID("Project ID must be a valid UUID")),
    FieldRules("assign_to", NotEmpty("Assign To is required"), IsUUID("Assign To must be a valid UUID")),
    FieldRules(
        "title",
        NotEmpty("Title is required"),
        Length(min=1, max=255, message="Title must be between 1 and 255 characters"),
    ),
    FieldRules("description", IsString("Description must be a string"), optional=True),
    FieldRules("priority", NotEmpty("Priority is required"), OneOf(TASK_PRIORITIES, _TASK_PRIORITY_MESSAGE)),
    FieldRules("status", NotEmpty("Status is required"), OneOf(TASK_STATUSES, _TASK_STATUS_MESSAGE)),
    FieldRules("due_date", NotEmpty("Due Date is required"), IsISODate("Due Date must be a valid date")),
)

task_update_rules = RuleSet(
    FieldRules("project_id", IsUUID("Project ID must be a valid UUID"), optional=True),
    FieldRules("assign_to", IsUUID("Assign To must be a valid UUID"), optional=True),
    FieldRules(
        "title",
        Length(min=1, max=255, message="Title must be between 1 and 255 characters"),
        optional=True,
    ),
    FieldRules("description", IsString("Description must be a string"), optional=True),
    FieldRules("priority", OneOf(TASK_PRIORITIES, _TASK_PRIORITY_MESSAGE), optional=True),
    FieldRules("status", OneOf(TASK_STATUSES, _TASK_STATUS_MESSAGE), optional=True),
    FieldRules("due_date", IsISODate("Due Date must be a valid date"), optional=True),
)

comment_create_rules = RuleSet(
    FieldRules("task_id", NotEmpty("Task ID is required"), IsUUID("Task ID must be a valid UUID")),
    FieldRules("user_id", NotEmpty("User ID is required"), IsUUID("User ID must be a valid UUID")),
    FieldRules(
        "content",
        NotEmpty("Content is required"),
        Length(min=1, max=1000, message="Content must be between 1 and 1000 characters"),
    ),
)

comment_update_rules = RuleSet(
    FieldRules("task_id", IsUUID("Task ID must be a valid UUID"), optional=True),
    FieldRules("user_id", IsUUID("User ID must be a valid UUID"), optional=True),
    FieldRules(
        "content",
        NotEmpty("Content cannot be empty"),
        Length(min=1, max=1000, message="Content must be between 1 and 1000 characters"),
        optional=True,
    ),
    composite=[AtLeastOne(("task_id", "user_id", "content"))],
)
