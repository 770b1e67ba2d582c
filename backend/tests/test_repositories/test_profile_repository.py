"""Tests for ProfileRepository and the academic repositories."""

import repositories.db_models as db_models
from repositories.academic_repository import DepartmentRepository, FacultyRepository
from repositories.profile_repository import ProfileRepository


class TestProfileRepository:
    def test_get_by_user_id(self, db_session, student):
        profile = ProfileRepository(db_session).get_by_user_id(student.id)

        assert profile.user_id == student.id
        assert ProfileRepository(db_session).get_by_user_id(9999) is None

    def test_public_directory_filters(self, db_session, make_user, student):
        make_user(
            "hidden@eng.psu.edu.eg",
            "29901010000001",
            visibility=db_models.ProfileVisibility.STUDENTS_ONLY,
        )
        make_user(
            "rejected@eng.psu.edu.eg",
            "29901010000002",
            status=db_models.UserStatus.REJECTED,
        )
        make_user(
            "boss@eng.psu.edu.eg",
            "29901010000003",
            role=db_models.UserRole.ADMIN,
        )

        profiles = ProfileRepository(db_session).get_public_approved_students()

        assert [p.user.email for p in profiles] == [student.email]

    def test_public_directory_sorted_by_name(self, db_session, make_user):
        make_user("b@eng.psu.edu.eg", "29901010000004", last_name="Zaki")
        make_user("a@eng.psu.edu.eg", "29901010000005", last_name="Amin")

        profiles = ProfileRepository(db_session).get_public_approved_students()

        assert [p.user.last_name for p in profiles] == ["Amin", "Zaki"]


class TestAcademicRepositories:
    def test_departments_filtered_by_faculty(
        self, db_session, department, other_department
    ):
        repo = DepartmentRepository(db_session)

        assert {d.id for d in repo.list_all()} == {department.id, other_department.id}
        assert [d.id for d in repo.list_all(department.faculty_id)] == [department.id]

    def test_faculty_by_name(self, db_session, faculty):
        repo = FacultyRepository(db_session)

        assert repo.get_by_name("Faculty of Engineering").id == faculty.id
        assert repo.get_by_name("Faculty of Magic") is None
