import pytest

from models.project import ProjectCategory, ProjectStatus
from models.users import UserRole
from repositories.projects import ProjectFilters, ProjectRepository
from schemas.common import PaginationParams
from utils.errors import NotFoundError


@pytest.fixture
def organization(make_user):
    return make_user(UserRole.ORGANIZATION, name="Helping Hands").organization


def _create(db, organization, title, description="Project description", **extra):
    data = {
        "title": title,
        "description": description,
        "category": ProjectCategory.SOFTWARE_DEVELOPMENT,
        "organization_id": organization.id,
    }
    data.update(extra)
    return ProjectRepository().create(db, data)


@pytest.mark.parametrize("term", ["website", "WEBSITE", "Website"])
def test_search_matches_title_substring_in_any_case(db, organization, term):
    _create(db, organization, "Develop Website")
    _create(db, organization, "Social media campaign")

    page = ProjectRepository().find_many(db, PaginationParams(), ProjectFilters(search=term))

    assert [p.title for p in page.items] == ["Develop Website"]


def test_search_also_covers_description(db, organization):
    _create(db, organization, "Newsletter", description="Rebuild the WEBSITE newsletter signup")

    page = ProjectRepository().find_many(db, PaginationParams(), ProjectFilters(search="website"))

    assert page.total == 1


@pytest.mark.parametrize("term", ["%", "_", "Web_ite", "\\"])
def test_wildcard_characters_in_search_are_literal(db, organization, term):
    _create(db, organization, "Develop Website")
    _create(db, organization, "Social media campaign")

    page = ProjectRepository().find_many(db, PaginationParams(), ProjectFilters(search=term))

    assert page.total == 0


def test_search_finds_literal_percent_sign(db, organization):
    _create(db, organization, "100% volunteer run")
    _create(db, organization, "1000 flyers")

    page = ProjectRepository().find_many(db, PaginationParams(), ProjectFilters(search="100%"))

    assert [p.title for p in page.items] == ["100% volunteer run"]


def test_status_and_organization_filters(db, organization, make_user):
    other = make_user(UserRole.ORGANIZATION).organization
    _create(db, organization, "Draft one")
    _create(db, organization, "Published one", status=ProjectStatus.PUBLISHED)
    _create(db, other, "Someone else's", status=ProjectStatus.PUBLISHED)

    page = ProjectRepository().find_many(
        db,
        PaginationParams(),
        ProjectFilters(status=ProjectStatus.PUBLISHED, organization_id=organization.id),
    )

    assert [p.title for p in page.items] == ["Published one"]


def test_sort_by_title_ascending(db, organization):
    for title in ("Charlie", "Alpha", "Bravo"):
        _create(db, organization, title)

    page = ProjectRepository().find_many(db, PaginationParams(), sort_by="title", order="asc")

    assert [p.title for p in page.items] == ["Alpha", "Bravo", "Charlie"]


def test_unknown_sort_field_falls_back_to_created_at(db, organization):
    _create(db, organization, "Only one")

    page = ProjectRepository().find_many(db, PaginationParams(), sort_by="nonsense")

    assert page.total == 1


def test_page_beyond_the_end_is_empty(db, organization):
    _create(db, organization, "Only one")

    page = ProjectRepository().find_many(db, PaginationParams(page=5, page_size=10))

    assert page.items == []
    assert page.total == 1
    assert page.total_pages == 1


def test_get_by_id_returns_none_but_update_and_delete_raise(db):
    repository = ProjectRepository()

    assert repository.get_by_id(db, "missing") is None
    with pytest.raises(NotFoundError):
        repository.update(db, "missing", {"title": "x"})
    with pytest.raises(NotFoundError):
        repository.delete(db, "missing")


def test_project_exposes_organization_name(db, organization):
    project = _create(db, organization, "Named")

    loaded = ProjectRepository().get_by_id(db, project.id)

    assert loaded.organization_name == "Helping Hands"
    assert loaded.coordinator_name is None
