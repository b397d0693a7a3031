"""User identity and membership package."""

from jellypick.users.identity import CatalogCredentials
from jellypick.users.identity import MembershipIndex
from jellypick.users.identity import User
from jellypick.users.identity import new_guest_id
from jellypick.users.models import UserPayload

__all__ = [
    "CatalogCredentials",
    "MembershipIndex",
    "User",
    "UserPayload",
    "new_guest_id",
]
