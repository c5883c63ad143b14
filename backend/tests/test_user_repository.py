import pytest
from sqlalchemy import inspect

from models.users import Student, UserRole
from repositories.users import UserFilters, UserRepository
from schemas.common import PaginationParams


def test_student_resolves_to_student_profile_only(db, make_user):
    user = make_user(UserRole.STUDENT, study_program="Computer Science", skills=["python"])
    db.expunge_all()

    resolved = UserRepository().get_by_id_with_profile(db, user.id)

    assert resolved.kind == UserRole.STUDENT
    assert isinstance(resolved.profile, Student)
    assert resolved.profile.study_program == "Computer Science"
    # Only the matching relation was loaded
    unloaded = inspect(resolved.user).unloaded
    assert "coordinator" in unloaded
    assert "organization" in unloaded
    assert "administrator" in unloaded
    assert "student" not in unloaded


def test_each_role_resolves_its_own_profile(db, make_user):
    repository = UserRepository()
    for role, relation in (
        (UserRole.COORDINATOR, "coordinator"),
        (UserRole.ORGANIZATION, "organization"),
        (UserRole.ADMINISTRATOR, "administrator"),
    ):
        user = make_user(role)
        resolved = repository.get_by_id_with_profile(db, user.id)
        assert resolved.kind == role
        assert resolved.profile is getattr(resolved.user, relation)
        assert resolved.profile.kind == role.value


def test_unknown_id_resolves_to_none(db):
    assert UserRepository().get_by_id_with_profile(db, "does-not-exist") is None


def test_user_without_profile_row_resolves_with_empty_profile(db):
    user = UserRepository().create(db, {"email": "bare@test.edu", "name": "Bare", "role": UserRole.STUDENT})

    resolved = UserRepository().get_by_id_with_profile(db, user.id)

    assert resolved.kind == UserRole.STUDENT
    assert resolved.profile is None


def test_pagination_second_page(db, make_user):
    for i in range(25):
        make_user(UserRole.STUDENT, name=f"Student {i:02d}")

    page = UserRepository().find_many(db, PaginationParams(page=2, page_size=10), sort_by="name", order="asc")

    assert page.total == 25
    assert page.total_pages == 3
    assert len(page.items) == 10
    assert [u.name for u in page.items][0] == "Student 10"


def test_last_page_is_partial(db, make_user):
    for i in range(25):
        make_user(UserRole.STUDENT, name=f"Student {i:02d}")

    page = UserRepository().find_many(db, PaginationParams(page=3, page_size=10))

    assert len(page.items) == 5
    assert page.total_pages == 3


def test_search_is_case_insensitive_over_name_and_email(db, make_user):
    make_user(UserRole.STUDENT, email="anna@test.edu", name="Anna Nowak")
    make_user(UserRole.STUDENT, email="bob@test.edu", name="Bob Smith")

    repository = UserRepository()
    by_name = repository.find_many(db, PaginationParams(), UserFilters(search="NOWAK"))
    by_email = repository.find_many(db, PaginationParams(), UserFilters(search="BOB@"))

    assert [u.name for u in by_name.items] == ["Anna Nowak"]
    assert [u.name for u in by_email.items] == ["Bob Smith"]


@pytest.mark.parametrize("term", ["_", "%", "a_na"])
def test_search_wildcards_match_only_themselves(db, make_user, term):
    make_user(UserRole.STUDENT, email="anna@test.edu", name="Anna Nowak")

    page = UserRepository().find_many(db, PaginationParams(), UserFilters(search=term))

    assert page.total == 0


def test_search_finds_underscore_in_email(db, make_user):
    make_user(UserRole.STUDENT, email="anna_nowak@test.edu", name="Anna")
    make_user(UserRole.STUDENT, email="annaxnowak@test.edu", name="Other Anna")

    page = UserRepository().find_many(db, PaginationParams(), UserFilters(search="anna_"))

    assert [u.email for u in page.items] == ["anna_nowak@test.edu"]


def test_filters_combine_with_and(db, make_user):
    make_user(UserRole.STUDENT, name="Alice Student")
    make_user(UserRole.COORDINATOR, name="Alice Coordinator")

    page = UserRepository().find_many(
        db, PaginationParams(), UserFilters(search="alice", role=UserRole.COORDINATOR)
    )

    assert page.total == 1
    assert page.items[0].role == UserRole.COORDINATOR


def test_get_by_email_ignores_case(db, make_user):
    user = make_user(UserRole.STUDENT, email="mixed@test.edu")

    assert UserRepository().get_by_email(db, "MIXED@Test.edu").id == user.id
