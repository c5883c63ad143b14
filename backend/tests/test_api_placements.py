import pytest

from models.project import ProjectCategory, ProjectStatus
from models.users import UserRole
from repositories.projects import ProjectRepository

MOTIVATION = "I have built several websites for student clubs."


@pytest.fixture
def people(make_user, auth_headers):
    org = make_user(UserRole.ORGANIZATION, name="Helping Hands", is_verified=True)
    coordinator = make_user(UserRole.COORDINATOR, name="Dr. Coordinator")
    student = make_user(UserRole.STUDENT, name="Anna Student")
    admin = make_user(UserRole.ADMINISTRATOR)
    return {
        "org": (org, auth_headers(org)),
        "coordinator": (coordinator, auth_headers(coordinator)),
        "student": (student, auth_headers(student)),
        "admin": (admin, auth_headers(admin)),
    }


def _published_project(db, org_user, number_of_students=1, title="Website relaunch"):
    return ProjectRepository().create(
        db,
        {
            "title": title,
            "description": "Rebuild the volunteer website",
            "category": ProjectCategory.SOFTWARE_DEVELOPMENT,
            "organization_id": org_user.organization.id,
            "number_of_students": number_of_students,
            "status": ProjectStatus.PUBLISHED,
        },
    )


def _apply(client, project_id, headers):
    return client.post(f"/projects/{project_id}/apply", json={"motivation_statement": MOTIVATION}, headers=headers)


def test_project_goes_from_draft_to_a_completed_portfolio_entry(client, people):
    org, org_headers = people["org"]
    coordinator, coordinator_headers = people["coordinator"]
    student, student_headers = people["student"]
    admin, admin_headers = people["admin"]

    created = client.post(
        "/organization/projects",
        json={"title": "Website relaunch", "description": "Rebuild it", "category": "SOFTWARE_DEVELOPMENT"},
        headers=org_headers,
    )
    assert created.status_code == 201
    project = created.json()["data"]
    assert project["status"] == "DRAFT"
    assert project["organization_name"] == "Helping Hands"
    project_id = project["id"]

    submitted = client.post(f"/organization/projects/{project_id}/submit", headers=org_headers)
    assert submitted.json()["data"]["status"] == "PENDING_REVIEW"

    pending = client.get("/coordinator/projects/pending", headers=coordinator_headers).json()["data"]
    assert [p["id"] for p in pending["items"]] == [project_id]

    assigned = client.post(
        f"/admin/projects/{project_id}/assign-coordinator",
        json={"coordinator_user_id": coordinator.id},
        headers=admin_headers,
    )
    assert assigned.json()["data"]["coordinator_name"] == "Dr. Coordinator"

    published = client.post(
        f"/coordinator/projects/{project_id}/status", json={"status": "PUBLISHED"}, headers=coordinator_headers
    )
    assert published.json()["data"]["published_at"] is not None

    applied = _apply(client, project_id, student_headers)
    assert applied.status_code == 201
    application = applied.json()["data"]
    assert application["status"] == "PENDING"
    assert application["student_name"] == "Anna Student"
    assert application["project_title"] == "Website relaunch"

    accepted = client.post(f"/organization/applications/{application['id']}/accept", headers=org_headers)
    assert accepted.json()["data"]["status"] == "ACCEPTED"
    assert accepted.json()["data"]["reviewed_by"] == org.id

    for status in ("IN_PROGRESS", "COMPLETED"):
        response = client.post(
            f"/coordinator/projects/{project_id}/status", json={"status": status}, headers=coordinator_headers
        )
        assert response.json()["data"]["status"] == status

    recorded = client.post(
        f"/organization/projects/{project_id}/completions",
        json={
            "student_id": application["student_id"],
            "role_description": "Frontend developer",
            "skills_developed": ["react"],
            "organization_performance_rating": "EXCELLENT",
            "organization_written_evaluation": "Reliable and creative.",
        },
        headers=org_headers,
    )
    assert recorded.status_code == 201

    portfolio = client.get("/student/portfolio", headers=student_headers).json()["data"]
    assert portfolio["total"] == 1
    assert portfolio["items"][0]["project_title"] == "Website relaunch"


def test_public_listing_shows_published_projects_only(client, db, people):
    org, _ = people["org"]
    _published_project(db, org, title="Open project")
    ProjectRepository().create(
        db,
        {
            "title": "Secret draft",
            "description": "Not ready",
            "category": ProjectCategory.OTHER,
            "organization_id": org.organization.id,
        },
    )

    response = client.get("/projects", params={"q": "PROJECT"})

    titles = [p["title"] for p in response.json()["data"]["items"]]
    assert titles == ["Open project"]


def test_drafts_are_hidden_from_anonymous_visitors(client, db, people):
    org, org_headers = people["org"]
    draft = ProjectRepository().create(
        db,
        {
            "title": "Secret draft",
            "description": "Not ready",
            "category": ProjectCategory.OTHER,
            "organization_id": org.organization.id,
        },
    )

    assert client.get(f"/projects/{draft.id}").status_code == 404
    assert client.get(f"/projects/{draft.id}", headers=org_headers).status_code == 200


def test_applying_twice_is_a_conflict(client, db, people):
    org, _ = people["org"]
    _, student_headers = people["student"]
    project = _published_project(db, org)

    first = _apply(client, project.id, student_headers)
    second = _apply(client, project.id, student_headers)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["error"] == "errors.application.already_applied"


def test_cannot_apply_to_a_draft(client, db, people):
    org, _ = people["org"]
    _, student_headers = people["student"]
    project = ProjectRepository().create(
        db,
        {
            "title": "Draft",
            "description": "Not ready",
            "category": ProjectCategory.OTHER,
            "organization_id": org.organization.id,
        },
    )

    response = _apply(client, project.id, student_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "errors.application.project_not_open"


def test_only_students_apply(client, db, people):
    org, org_headers = people["org"]
    project = _published_project(db, org)

    response = _apply(client, project.id, org_headers)

    assert response.status_code == 403
    assert response.json()["error"] == "errors.auth.student_required"


def test_accepting_beyond_capacity_is_refused(client, db, people, make_user, auth_headers):
    org, org_headers = people["org"]
    _, first_headers = people["student"]
    second = make_user(UserRole.STUDENT)
    project = _published_project(db, org, number_of_students=1)

    first_application = _apply(client, project.id, first_headers).json()["data"]
    second_application = _apply(client, project.id, auth_headers(second)).json()["data"]
    client.post(f"/organization/applications/{first_application['id']}/accept", headers=org_headers)

    response = client.post(f"/organization/applications/{second_application['id']}/accept", headers=org_headers)

    assert response.status_code == 400
    assert response.json()["error"] == "errors.application.project_full"


def test_withdrawn_application_cannot_be_reviewed(client, db, people):
    org, org_headers = people["org"]
    _, student_headers = people["student"]
    project = _published_project(db, org)
    application = _apply(client, project.id, student_headers).json()["data"]

    withdrawn = client.post(f"/student/applications/{application['id']}/withdraw", headers=student_headers)
    rejected = client.post(
        f"/organization/applications/{application['id']}/reject", json={"reason": "Too late"}, headers=org_headers
    )

    assert withdrawn.json()["data"]["status"] == "WITHDRAWN"
    assert rejected.status_code == 400
    assert rejected.json()["error"] == "errors.application.not_pending"


def test_other_organizations_cannot_review(client, db, people, make_user, auth_headers):
    org, _ = people["org"]
    _, student_headers = people["student"]
    stranger = make_user(UserRole.ORGANIZATION, is_verified=True)
    project = _published_project(db, org)
    application = _apply(client, project.id, student_headers).json()["data"]

    response = client.post(f"/organization/applications/{application['id']}/accept", headers=auth_headers(stranger))

    assert response.status_code == 403


def test_student_lists_own_applications(client, db, people, make_user, auth_headers):
    org, _ = people["org"]
    _, student_headers = people["student"]
    other = make_user(UserRole.STUDENT)
    project = _published_project(db, org)
    _apply(client, project.id, student_headers)
    _apply(client, project.id, auth_headers(other))

    page = client.get("/student/applications", headers=student_headers).json()["data"]

    assert page["total"] == 1


def test_completion_requires_completed_project(client, db, people):
    org, org_headers = people["org"]
    student, _ = people["student"]
    project = _published_project(db, org)

    response = client.post(
        f"/organization/projects/{project.id}/completions",
        json={
            "student_id": student.student.id,
            "role_description": "Helper",
            "organization_performance_rating": "GOOD",
            "organization_written_evaluation": "Fine.",
        },
        headers=org_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "errors.completion.project_not_completed"


def test_dashboards_report_every_status(client, db, people):
    org, org_headers = people["org"]
    _, student_headers = people["student"]
    _, admin_headers = people["admin"]
    _, coordinator_headers = people["coordinator"]
    project = _published_project(db, org)
    _apply(client, project.id, student_headers)

    admin = client.get("/stats/dashboard", headers=admin_headers).json()["data"]
    organization = client.get("/stats/dashboard", headers=org_headers).json()["data"]
    student = client.get("/stats/dashboard", headers=student_headers).json()["data"]
    coordinator = client.get("/stats/dashboard", headers=coordinator_headers).json()["data"]

    assert admin["role"] == "ADMINISTRATOR"
    assert admin["users_by_role"] == {"STUDENT": 1, "COORDINATOR": 1, "ORGANIZATION": 1, "ADMINISTRATOR": 1}
    assert admin["projects_by_status"]["PUBLISHED"] == 1
    assert admin["projects_by_status"]["ARCHIVED"] == 0
    assert organization["applications_by_status"] == {"PENDING": 1, "ACCEPTED": 0, "REJECTED": 0, "WITHDRAWN": 0}
    assert organization["is_verified"] is True
    assert student["applications_by_status"]["PENDING"] == 1
    assert student["portfolio_entries"] == 0
    assert coordinator["projects_by_status"] == {status.value: 0 for status in ProjectStatus}


def test_daily_registrations_cover_every_day(client, people):
    _, admin_headers = people["admin"]

    response = client.get("/stats/registrations", params={"days": 7}, headers=admin_headers)

    days = response.json()["data"]
    assert len(days) == 7
    assert days[-1]["count"] == 4
    assert all(day["count"] == 0 for day in days[:-1])


def test_admin_verifies_pending_organizations(client, people, make_user):
    _, admin_headers = people["admin"]
    newcomer = make_user(UserRole.ORGANIZATION, name="New NGO")

    pending = client.get("/admin/organizations/pending", headers=admin_headers).json()["data"]
    verified = client.post(f"/admin/organizations/{newcomer.id}/verify", headers=admin_headers)
    again = client.post(f"/admin/organizations/{newcomer.id}/verify", headers=admin_headers)

    assert [o["user"]["name"] for o in pending] == ["New NGO"]
    assert verified.json()["data"]["is_verified"] is True
    assert again.status_code == 400
