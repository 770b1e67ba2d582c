"""Read-access policy for profiles."""

from typing import Optional

from repositories.db_models import (
    Profile,
    ProfileVisibility,
    User,
    UserRole,
    UserStatus,
)


def can_view_profile(
    profile: Profile,
    target_user: User,
    requester_id: Optional[int] = None,
    requester_role: Optional[UserRole] = None,
) -> bool:
    """
    Decide whether a requester may read a profile. First matching rule wins:

    1. the owner always sees their own profile;
    2. admins see every profile;
    3. accounts that are not APPROVED are hidden from everyone else;
    4. PUBLIC profiles are visible to anyone, including anonymous callers;
    5. STUDENTS_ONLY profiles are visible to any authenticated caller;
    6. PRIVATE profiles are hidden.
    """
    if requester_id is not None and requester_id == target_user.id:
        return True
    if requester_role == UserRole.ADMIN:
        return True
    if target_user.status != UserStatus.APPROVED:
        return False
    if profile.visibility == ProfileVisibility.PUBLIC:
        return True
    if profile.visibility == ProfileVisibility.STUDENTS_ONLY:
        return requester_id is not None
    return False
