from mt5platform.core.modules.access.models import Role
from mt5platform.core.modules.user.models import UserStatus
from mt5platform.errors import ValidationError


def validate_role(role: str) -> Role:
    """Parse a role name into the closed Role set.

    Raises:
        ValidationError: If the role is not one of admin, manager, trader, viewer
    """
    try:
        return Role(role)
    except ValueError:
        raise ValidationError("Invalid role") from None


def validate_status(status: str) -> UserStatus:
    try:
        return UserStatus(status)
    except ValueError:
        raise ValidationError("Invalid status") from None


def validate_password(password: str) -> None:
    """Validate password can be hashed.

    Requirements:
    - Not empty
    - At most 72 bytes in UTF-8 (bcrypt limit)

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if not password:
        raise ValidationError("Password cannot be empty")

    if len(password.encode("utf-8")) > 72:
        raise ValidationError("Password must be at most 72 bytes long")
