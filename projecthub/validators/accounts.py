from projecthub.models.user import UserRole
from projecthub.validators.rules import FieldRules, IsEmail, Length, Matches, NotEmpty, OneOf, RuleSet

USER_ROLES = tuple(role.value for role in UserRole)


def _password_strength(min_length: int) -> tuple:
    return (
        Length(min=min_length, message=f"Password must be at least {min_length} characters long"),
        Matches(r"[A-Z]", "Password must contain at least one uppercase letter"),
        Matches(r"[a-z]", "Password must contain at least one lowercase letter"),
        Matches(r"[0-9]", "Password must contain at least one number"),
        Matches(r"[\W_]", "Password must contain at least one special character"),
    )


register_rules = RuleSet(
    FieldRules(
        "name",
        NotEmpty("Name is required"),
        Length(min=2, message="Name must be at least 2 characters long"),
        Length(max=25, message="Name must be at most 25 characters long"),
        trim=True,
    ),
    FieldRules("email", NotEmpty("Email is required"), IsEmail("Invalid email format"), trim=True),
    FieldRules("password", NotEmpty("Password is required"), *_password_strength(6)),
    FieldRules(
        "role",
        NotEmpty("Role is required"),
        OneOf(USER_ROLES, "Role must be either admin, manager, or member"),
        trim=True,
    ),
)

login_rules = RuleSet(
    FieldRules("email", NotEmpty("Email is required"), IsEmail("Invalid email format"), trim=True),
    FieldRules(
        "password",
        NotEmpty("Password is required"),
        Length(min=6, message="Password must be at least 6 characters long"),
    ),
)

user_create_rules = RuleSet(
    FieldRules(
        "name",
        NotEmpty("Name is required"),
        Length(max=25, message="Name must not exceed 25 characters"),
        trim=True,
    ),
    FieldRules("email", NotEmpty("Email is required"), IsEmail("Email is invalid"), trim=True),
    FieldRules("password", NotEmpty("Password is required"), *_password_strength(8)),
    FieldRules(
        "role",
        OneOf(USER_ROLES, "Invalid role value. Allowed roles: admin, manager, member."),
        optional=True,
    ),
    FieldRules("avatar_url", Length(max=500, message="Avatar URL must not exceed 500 characters"), optional=True),
)

user_update_rules = RuleSet(
    FieldRules(
        "name",
        NotEmpty("Name cannot be empty"),
        Length(max=25, message="Name must not exceed 25 characters"),
        optional=True,
        trim=True,
    ),
    FieldRules(
        "email",
        NotEmpty("Email cannot be empty"),
        IsEmail("Email is invalid"),
        optional=True,
        trim=True,
    ),
    FieldRules("password", *_password_strength(8), optional=True),
    FieldRules(
        "role",
        OneOf(USER_ROLES, "Invalid role value. Allowed roles: admin, manager, member."),
        optional=True,
    ),
    FieldRules("avatar_url", Length(max=500, message="Avatar URL must not exceed 500 characters"), optional=True),
)
