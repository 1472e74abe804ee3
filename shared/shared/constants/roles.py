from enum import Enum


class Role(str, Enum):
    """Values of the ``user_roles.role`` column."""

    USER = "user"
    SUPER_ADMIN = "super_admin"
