from projecthub.models.activity import ActivityEntityType, ActivityLog
from projecthub.models.comment import Comment
from projecthub.models.notification import Notification
from projecthub.models.project import Project, ProjectStatus
from projecthub.models.task import OPEN_TASK_STATUSES, Task, TaskPriority, TaskStatus
from projecthub.models.team import Team, TeamMember, TeamMemberRole
from projecthub.models.user import User, UserRole

__all__ = [
    "ActivityEntityType",
    "ActivityLog",
    "Comment",
    "Notification",
    "OPEN_TASK_STATUSES",
    "Project",
    "ProjectStatus",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "Team",
    "TeamMember",
    "TeamMemberRole",
    "User",
    "UserRole",
]
