"""
app/models/user.py

Purpose: User document model

- Natural ID userId (USR00001, USR00002, ...)
- Login credentials (email + bcrypt password hash)
- Contact details, role and account status
- Address list (opaque strings)
"""

from app.models.entity import EntityKind
from utils.time_utils import utc_now

DEFAULT_ROLE = "user"
DEFAULT_STATUS = "active"


def _user_defaults():
    return {
        "role": DEFAULT_ROLE,
        "status": DEFAULT_STATUS,
        "address": [],
        "createdAt": utc_now(),
    }


User = EntityKind(
    name="User",
    collection="users",
    prefix="USR",
    defaults=_user_defaults,
)
