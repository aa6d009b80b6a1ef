"""Rules for notifications and activity log entries."""

from projecthub.models.activity import ActivityEntityType
from projecthub.validators.rules import FieldRules, IsBoolean, IsUUID, Length, NotEmpty, OneOf, RuleSet

ENTITY_TYPES = tuple(kind.value for kind in ActivityEntityType)

notification_create_rules = RuleSet(
    FieldRules("user_id", NotEmpty("User ID is required"), IsUUID("User ID must be a valid UUID")),
    FieldRules(
        "message",
        NotEmpty("Message is required"),
        Length(min=1, max=1000, message="Message must be between 1 and 1000 characters"),
    ),
    FieldRules("is_read", IsBoolean("is_read must be a boolean value"), optional=True),
)

activity_create_rules = RuleSet(
    FieldRules("user_id", NotEmpty("User ID is required"), IsUUID("User ID must be a valid UUID")),
    FieldRules(
        "action",
        NotEmpty("Action is required"),
        Length(min=1, max=225, message="Action must be between 1 and 225 characters"),
    ),
    FieldRules(
        "entity_type",
        NotEmpty("Entity type is required"),
        OneOf(ENTITY_TYPES, f"Entity type must be one of: {', '.join(ENTITY_TYPES)}"),
    ),
    FieldRules("entity_id", NotEmpty("Entity ID is required"), IsUUID("Entity ID must be a valid UUID")),
)
