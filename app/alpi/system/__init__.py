"""systemd service and user group management."""

from alpi.system.groups import GroupChange, add_user_to_group, group_exists, user_groups
from alpi.system.services import ServiceChange, enable_service, is_service_enabled

__all__ = [
    "GroupChange",
    "ServiceChange",
    "add_user_to_group",
    "enable_service",
    "group_exists",
    "is_service_enabled",
    "user_groups",
]
