from models.application import ApplicationStatus
from models.project import Project, ProjectCategory, ProjectStatus
from models.users import UserRole
from repositories.aggregation import count_by_category
from repositories.applications import ApplicationRepository
from repositories.projects import ProjectRepository
from repositories.users import UserRepository


def _project(db, organization_id, status, title="Project"):
    return ProjectRepository().create(
        db,
        {
            "title": title,
            "description": "Some work",
            "category": ProjectCategory.RESEARCH,
            "organization_id": organization_id,
            "status": status,
        },
    )


def test_empty_tables_report_every_member_as_zero(db):
    assert UserRepository().count_by_role(db) == {role: 0 for role in UserRole}
    assert ProjectRepository().count_by_status(db) == {status: 0 for status in ProjectStatus}
    assert ApplicationRepository().count_by_status(db) == {status: 0 for status in ApplicationStatus}


def test_project_counts_fill_missing_statuses(db, make_user):
    org = make_user(UserRole.ORGANIZATION)
    _project(db, org.organization.id, ProjectStatus.DRAFT)
    _project(db, org.organization.id, ProjectStatus.DRAFT)
    _project(db, org.organization.id, ProjectStatus.PUBLISHED)

    counts = ProjectRepository().count_by_status(db)

    assert counts[ProjectStatus.DRAFT] == 2
    assert counts[ProjectStatus.PUBLISHED] == 1
    assert set(counts) == set(ProjectStatus)
    assert sum(counts.values()) == 3
    assert all(value == 0 for key, value in counts.items() if key not in (ProjectStatus.DRAFT, ProjectStatus.PUBLISHED))


def test_counts_are_scoped_by_organization(db, make_user):
    org_a = make_user(UserRole.ORGANIZATION)
    org_b = make_user(UserRole.ORGANIZATION)
    _project(db, org_a.organization.id, ProjectStatus.DRAFT)
    _project(db, org_b.organization.id, ProjectStatus.PUBLISHED)

    counts = ProjectRepository().count_by_status(db, organization_id=org_a.organization.id)

    assert counts[ProjectStatus.DRAFT] == 1
    assert counts[ProjectStatus.PUBLISHED] == 0


def test_application_counts_join_through_projects(db, make_user):
    org_a = make_user(UserRole.ORGANIZATION)
    org_b = make_user(UserRole.ORGANIZATION)
    student = make_user(UserRole.STUDENT)
    project_a = _project(db, org_a.organization.id, ProjectStatus.PUBLISHED)
    project_b = _project(db, org_b.organization.id, ProjectStatus.PUBLISHED)

    applications = ApplicationRepository()
    for project, status in ((project_a, ApplicationStatus.PENDING), (project_b, ApplicationStatus.ACCEPTED)):
        applications.create(
            db,
            {
                "student_id": student.student.id,
                "project_id": project.id,
                "motivation_statement": "I would love to help",
                "status": status,
            },
        )

    scoped = applications.count_by_status(db, organization_id=org_a.organization.id)
    everything = applications.count_by_status(db)

    assert scoped[ApplicationStatus.PENDING] == 1
    assert scoped[ApplicationStatus.ACCEPTED] == 0
    assert everything[ApplicationStatus.ACCEPTED] == 1
    assert set(scoped) == set(ApplicationStatus)


def test_user_counts_by_role(db, make_user):
    make_user(UserRole.STUDENT)
    make_user(UserRole.STUDENT)
    make_user(UserRole.COORDINATOR)

    counts = UserRepository().count_by_role(db)

    assert counts == {
        UserRole.STUDENT: 2,
        UserRole.COORDINATOR: 1,
        UserRole.ORGANIZATION: 0,
        UserRole.ADMINISTRATOR: 0,
    }


def test_count_by_category_applies_criteria(db, make_user):
    org = make_user(UserRole.ORGANIZATION)
    _project(db, org.organization.id, ProjectStatus.DRAFT, title="alpha")
    _project(db, org.organization.id, ProjectStatus.DRAFT, title="beta")

    counts = count_by_category(db, Project.status, ProjectStatus, Project.title == "alpha")

    assert counts[ProjectStatus.DRAFT] == 1
