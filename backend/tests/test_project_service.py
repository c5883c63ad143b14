import pytest

from models.project import ProjectCategory, ProjectStatus
from models.users import UserRole
from repositories.projects import ProjectRepository
from utils.errors import AuthorizationError, BusinessRuleError, NotFoundError


@pytest.fixture
def org_user(make_user):
    return make_user(UserRole.ORGANIZATION, name="Helping Hands", is_verified=True)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMINISTRATOR)


@pytest.fixture
def coordinator_user(make_user):
    return make_user(UserRole.COORDINATOR, name="Dr. Coordinator")


@pytest.fixture
def project(db, services, org_user):
    return services.projects.create_project(
        db,
        org_user,
        {
            "title": "Website relaunch",
            "description": "Rebuild the volunteer website",
            "category": ProjectCategory.SOFTWARE_DEVELOPMENT,
            "number_of_students": 2,
        },
    )


def test_new_projects_start_as_draft(project, org_user):
    assert project.status == ProjectStatus.DRAFT
    assert project.organization.user_id == org_user.id


def test_full_lifecycle_sets_timestamps(db, services, project, org_user, admin, coordinator_user):
    projects = services.projects

    projects.submit_for_review(db, org_user, project.id)
    assigned = projects.assign_coordinator(db, admin, project.id, coordinator_user.id)
    assert assigned.status == ProjectStatus.COORDINATOR_ASSIGNED
    assert assigned.coordinator_name == "Dr. Coordinator"

    published = projects.change_status(db, coordinator_user, project.id, ProjectStatus.PUBLISHED)
    assert published.published_at is not None
    started = projects.change_status(db, coordinator_user, project.id, ProjectStatus.IN_PROGRESS)
    assert started.started_at is not None
    completed = projects.change_status(db, coordinator_user, project.id, ProjectStatus.COMPLETED)
    assert completed.completed_at is not None


def test_skipping_a_step_is_an_invalid_transition(db, services, project, admin):
    with pytest.raises(BusinessRuleError) as exc:
        services.projects.change_status(db, admin, project.id, ProjectStatus.PUBLISHED)

    assert exc.value.message == "errors.project.invalid_transition"


def test_dedicated_targets_are_refused_by_change_status(db, services, project, admin):
    with pytest.raises(BusinessRuleError):
        services.projects.change_status(db, admin, project.id, ProjectStatus.COORDINATOR_ASSIGNED)


def test_unverified_organization_cannot_submit(db, services, make_user):
    unverified = make_user(UserRole.ORGANIZATION)
    project = services.projects.create_project(
        db, unverified, {"title": "Draft", "description": "d", "category": ProjectCategory.OTHER}
    )

    with pytest.raises(BusinessRuleError) as exc:
        services.projects.submit_for_review(db, unverified, project.id)

    assert exc.value.message == "errors.organization.not_verified"


def test_only_the_assigned_coordinator_may_publish(db, services, project, org_user, admin, coordinator_user, make_user):
    other_coordinator = make_user(UserRole.COORDINATOR)
    services.projects.submit_for_review(db, org_user, project.id)
    services.projects.assign_coordinator(db, admin, project.id, coordinator_user.id)

    with pytest.raises(AuthorizationError):
        services.projects.change_status(db, other_coordinator, project.id, ProjectStatus.PUBLISHED)


def test_any_coordinator_may_reject_a_pending_project(db, services, project, org_user, make_user):
    reviewer = make_user(UserRole.COORDINATOR)
    services.projects.submit_for_review(db, org_user, project.id)

    rejected = services.projects.reject(db, reviewer, project.id, "Too vague")

    assert rejected.status == ProjectStatus.DRAFT
    assert rejected.rejection_reason == "Too vague"


def test_other_organizations_cannot_edit(db, services, project, make_user):
    stranger = make_user(UserRole.ORGANIZATION, is_verified=True)

    with pytest.raises(AuthorizationError):
        services.projects.update_project(db, stranger, project.id, {"title": "Mine now"})


@pytest.mark.parametrize("status", [ProjectStatus.COMPLETED, ProjectStatus.ARCHIVED])
def test_finished_project_rejects_edits(db, services, project, org_user, status):
    ProjectRepository().update(db, project.id, {"status": status})

    with pytest.raises(BusinessRuleError) as exc:
        services.projects.update_project(db, org_user, project.id, {"title": "Renamed"})

    assert exc.value.message == "errors.project.not_editable"


def test_archiving_twice_is_refused(db, services, project, org_user):
    services.projects.archive(db, org_user, project.id)

    with pytest.raises(BusinessRuleError):
        services.projects.archive(db, org_user, project.id)


def test_drafts_are_hidden_from_the_public(db, services, project, org_user):
    with pytest.raises(NotFoundError):
        services.projects.get_visible_project(db, None, project.id)

    assert services.projects.get_visible_project(db, org_user, project.id).id == project.id
