from projecthub.models.team import TeamMemberRole
from projecthub.validators.rules import FieldRules, IsUUID, Length, NotEmpty, OneOf, RuleSet

MEMBER_ROLES = tuple(role.value for role in TeamMemberRole)
_ROLE_MESSAGE = f"Invalid role value. Allowed roles: {', '.join(MEMBER_ROLES)}."

team_create_rules = RuleSet(
    FieldRules(
        "name",
        NotEmpty("Team name is required"),
        Length(max=50, message="Team name must not exceed 50 characters"),
        trim=True,
    ),
    FieldRules(
        "description",
        Length(max=255, message="Description must not exceed 255 characters"),
        optional=True,
        trim=True,
    ),
)

team_update_rules = RuleSet(
    FieldRules(
        "name",
        NotEmpty("Team name cannot be empty"),
        Length(max=50, message="Team name must not exceed 50 characters"),
        optional=True,
        trim=True,
    ),
    FieldRules(
        "description",
        Length(max=255, message="Description must not exceed 255 characters"),
        optional=True,
        trim=True,
    ),
)

member_create_rules = RuleSet(
    FieldRules("team_id", NotEmpty("Team ID is required"), IsUUID("Team ID must be a valid UUID")),
    FieldRules("user_id", NotEmpty("User ID is required"), IsUUID("User ID must be a valid UUID")),
    FieldRules("role", NotEmpty("Role is required"), OneOf(MEMBER_ROLES, _ROLE_MESSAGE)),
)

member_update_rules = RuleSet(
    FieldRules("role", NotEmpty("Role is required"), OneOf(MEMBER_ROLES, _ROLE_MESSAGE)),
)
