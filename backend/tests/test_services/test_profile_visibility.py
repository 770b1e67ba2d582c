"""Tests for the profile read-access policy."""

import pytest

from repositories.db_models import (
    Profile,
    ProfileVisibility,
    User,
    UserRole,
    UserStatus,
)
from services.profile_visibility import can_view_profile

OWNER_ID = 1
OTHER_ID = 2


def _target(status: UserStatus, visibility: ProfileVisibility) -> tuple[Profile, User]:
    user = User(id=OWNER_ID, status=status, role=UserRole.STUDENT)
    return Profile(user_id=OWNER_ID, visibility=visibility), user


class TestCanViewProfile:
    @pytest.mark.parametrize("visibility", list(ProfileVisibility))
    @pytest.mark.parametrize("status", list(UserStatus))
    def test_owner_always_sees_own_profile(self, status, visibility):
        profile, user = _target(status, visibility)
        assert can_view_profile(profile, user, OWNER_ID, UserRole.STUDENT)

    @pytest.mark.parametrize("visibility", list(ProfileVisibility))
    @pytest.mark.parametrize("status", list(UserStatus))
    def test_admin_sees_everything(self, status, visibility):
        profile, user = _target(status, visibility)
        assert can_view_profile(profile, user, OTHER_ID, UserRole.ADMIN)

    @pytest.mark.parametrize("status", [UserStatus.PENDING, UserStatus.REJECTED])
    def test_unapproved_hidden_even_when_public(self, status):
        profile, user = _target(status, ProfileVisibility.PUBLIC)
        assert not can_view_profile(profile, user, OTHER_ID, UserRole.STUDENT)
        assert not can_view_profile(profile, user)

    def test_public_visible_to_anonymous(self):
        profile, user = _target(UserStatus.APPROVED, ProfileVisibility.PUBLIC)
        assert can_view_profile(profile, user)

    def test_students_only_requires_authentication(self):
        profile, user = _target(UserStatus.APPROVED, ProfileVisibility.STUDENTS_ONLY)
        assert can_view_profile(profile, user, OTHER_ID, UserRole.STUDENT)
        assert not can_view_profile(profile, user)

    def test_private_hidden_from_other_students(self):
        profile, user = _target(UserStatus.APPROVED, ProfileVisibility.PRIVATE)
        assert not can_view_profile(profile, user, OTHER_ID, UserRole.STUDENT)
        assert not can_view_profile(profile, user)
