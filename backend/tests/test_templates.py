import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models.project import Project
from app.models.task import Task
from app.models.template import ProjectTemplate, TemplateTask
from app.services.project_service import ProjectService


@pytest.fixture
def template_data():
    """Template creation payload"""
    return {
        "name": "Website Launch",
        "description": "Plan, build and ship a marketing site",
        "category": "web-development",
        "isPublic": True,
        "tags": ["web", " launch "],
        "estimatedDuration": 10,
        "tasks": [
            {"title": "Kickoff", "priority": "HIGH"},
            {"title": "Design mockups", "daysFromStart": 2, "estimatedHours": 6},
            {"title": "Go live", "daysFromStart": 9, "description": "Flip DNS"},
        ],
    }


@pytest.mark.asyncio
async def test_create_template(client: AsyncClient, auth_headers, workspace, template_data, test_user):
    """Template creation numbers tasks in request order"""
    response = await client.post(
        f"/api/v1/workspaces/{workspace.id}/templates",
        json=template_data,
        headers=auth_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Template created successfully"
    data = body["data"]
    assert data["name"] == "Website Launch"
    assert data["category"] == "web-development"
    assert data["tags"] == ["web", "launch"]
    assert data["usageCount"] == 0
    assert data["version"] == "1.0.0"
    assert data["createdBy"] == test_user.id

    details = await client.get(f"/api/v1/templates/{data['id']}")
    tasks = details.json()["data"]["tasks"]
    assert [t["title"] for t in tasks] == ["Kickoff", "Design mockups", "Go live"]
    assert [t["order"] for t in tasks] == [1, 2, 3]
    assert tasks[0]["priority"] == "HIGH"
    assert tasks[0]["estimatedHours"] == 1.0
    assert tasks[0]["daysFromStart"] == 0
    assert tasks[1]["estimatedHours"] == 6
    assert tasks[2]["description"] == "Flip DNS"


@pytest.mark.asyncio
async def test_create_template_validation(client: AsyncClient, auth_headers, workspace, template_data):
    """Bad payloads are rejected before reaching the service"""
    template_data["category"] = "gardening"
    response = await client.post(
        f"/api/v1/workspaces/{workspace.id}/templates",
        json=template_data,
        headers=auth_headers
    )
    assert response.status_code == 422

    template_data["category"] = "design"
    template_data["tasks"] = [{"title": "Sketch", "estimatedHours": 0.25}]
    response = await client.post(
        f"/api/v1/workspaces/{workspace.id}/templates",
        json=template_data,
        headers=auth_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_template_unauthorized(client: AsyncClient, workspace, template_data):
    """Test creating template without authentication"""
    response = await client.post(f"/api/v1/workspaces/{workspace.id}/templates", json=template_data)

    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_get_template_not_found(client: AsyncClient):
    response = await client.get("/api/v1/templates/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Template not found"
    assert body["error"]["code"] == "TEMPLATE_NOT_FOUND"


@pytest.mark.asyncio
async def test_list_public_templates(client: AsyncClient, make_template, other_user):
    """Only public templates, ordered by usage then recency"""
    await make_template(name="Quiet", usage_count=1)
    await make_template(name="Busy", usage_count=7)
    await make_template(name="Hidden", is_public=False, usage_count=50)
    await make_template(name="Campaign", category="marketing", created_by=other_user.id, usage_count=3)

    response = await client.get("/api/v1/templates")

    assert response.status_code == 200
    body = response.json()
    assert [t["name"] for t in body["data"]] == ["Busy", "Campaign", "Quiet"]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 3, "totalPages": 1}


@pytest.mark.asyncio
async def test_list_public_templates_filters(client: AsyncClient, make_template):
    await make_template(name="Mobile MVP", category="mobile-development", tags=["ios"])
    await make_template(name="Spring Campaign", category="marketing", tags=["email"])
    await make_template(name="Landing page", category="marketing", tags=["seo"])

    response = await client.get("/api/v1/templates", params={"category": "marketing"})
    assert {t["name"] for t in response.json()["data"]} == {"Spring Campaign", "Landing page"}

    response = await client.get("/api/v1/templates", params={"search": "SEO"})
    assert [t["name"] for t in response.json()["data"]] == ["Landing page"]

    response = await client.get("/api/v1/templates", params={"limit": 2, "page": 2})
    body = response.json()
    assert len(body["data"]) == 1
    assert body["pagination"]["totalPages"] == 2


@pytest.mark.asyncio
async def test_list_public_templates_rejects_bad_paging(client: AsyncClient):
    assert (await client.get("/api/v1/templates", params={"page": 0})).status_code == 422
    assert (await client.get("/api/v1/templates", params={"limit": 1000})).status_code == 422
    assert (await client.get("/api/v1/templates", params={"category": "nope"})).status_code == 422


@pytest.mark.asyncio
async def test_popular_templates(client: AsyncClient, make_template):
    for count in (5, 1, 9):
        await make_template(name=f"T{count}", usage_count=count)

    response = await client.get("/api/v1/templates/popular", params={"limit": 2})

    assert response.status_code == 200
    assert [t["usageCount"] for t in response.json()["data"]] == [9, 5]


@pytest.mark.asyncio
async def test_template_categories(client: AsyncClient):
    response = await client.get("/api/v1/templates/categories")

    assert response.status_code == 200
    categories = response.json()["data"]
    assert len(categories) == 8
    assert categories[0] == {"value": "web-development", "label": "Web Development"}
    assert {"value": "other", "label": "Other"} in categories


@pytest.mark.asyncio
async def test_workspace_templates_include_own_private(
    client: AsyncClient, auth_headers, workspace, make_template, other_user
):
    await make_template(name="Mine", is_public=False)
    await make_template(name="Theirs", is_public=False, created_by=other_user.id)
    await make_template(name="Shared", created_by=other_user.id)

    response = await client.get(f"/api/v1/workspaces/{workspace.id}/templates", headers=auth_headers)

    assert response.status_code == 200
    assert {t["name"] for t in response.json()["data"]} == {"Mine", "Shared"}


@pytest.mark.asyncio
async def test_update_template(client: AsyncClient, auth_headers, workspace, make_template):
    template = await make_template(usage_count=4)

    response = await client.put(
        f"/api/v1/workspaces/{workspace.id}/templates/{template.id}",
        json={"name": "Website Relaunch", "isPublic": False, "usageCount": 999},
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Website Relaunch"
    assert data["isPublic"] is False
    assert data["description"] == template.description
    assert data["usageCount"] == 4


@pytest.mark.asyncio
async def test_update_template_requires_ownership(
    client: AsyncClient, other_auth_headers, workspace, make_template
):
    template = await make_template()

    response = await client.put(
        f"/api/v1/workspaces/{workspace.id}/templates/{template.id}",
        json={"name": "Hijacked"},
        headers=other_auth_headers
    )

    assert response.status_code == 404
    assert "permission to update" in response.json()["message"]


@pytest.mark.asyncio
async def test_delete_template_cascades(client: AsyncClient, auth_headers, workspace, make_template, db_session):
    template = await make_template(tasks=[{"order": 1}, {"order": 2}])

    response = await client.delete(
        f"/api/v1/workspaces/{workspace.id}/templates/{template.id}",
        headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Template deleted successfully", "data": None}

    remaining = await db_session.scalar(
        select(func.count(TemplateTask.id)).where(TemplateTask.template_id == template.id)
    )
    assert remaining == 0
    assert (await client.get(f"/api/v1/templates/{template.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_template_requires_ownership(
    client: AsyncClient, other_auth_headers, workspace, make_template
):
    template = await make_template()

    response = await client.delete(
        f"/api/v1/workspaces/{workspace.id}/templates/{template.id}",
        headers=other_auth_headers
    )

    assert response.status_code == 404
    assert (await client.get(f"/api/v1/templates/{template.id}")).status_code == 200


# ========== Project from template ==========

@pytest.mark.asyncio
async def test_create_project_from_template(client: AsyncClient, auth_headers, workspace, make_template, test_user):
    """Website Launch example: two tasks, due dates carry the one-day buffer"""
    template = await make_template(
        tasks=[
            {"order": 1, "days_from_start": 0, "title": "Kickoff"},
            {"order": 2, "days_from_start": 3, "title": "Build"},
        ]
    )

    response = await client.post(
        f"/api/v1/workspaces/{workspace.id}/projects/from-template/{template.id}",
        json={"projectName": "Acme site", "startDate": "2024-01-01T00:00:00Z"},
        headers=auth_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["tasksCreated"] == 2
    project = body["data"]["project"]
    assert project["name"] == "Acme site"
    assert project["description"] == template.description
    assert project["workspaceId"] == workspace.id
    assert project["userId"] == test_user.id

    tasks = await client.get(
        f"/api/v1/workspaces/{workspace.id}/projects/{project['id']}/tasks",
        headers=auth_headers
    )
    due = {t["title"]: t["dueDate"] for t in tasks.json()["data"]}
    assert due["Kickoff"].startswith("2024-01-02")
    assert due["Build"].startswith("2024-01-05")


@pytest.mark.asyncio
async def test_create_project_from_template_assignments(
    client: AsyncClient, auth_headers, workspace, make_template, other_user, db_session
):
    template = await make_template(tasks=[{"order": 1}, {"order": 2}, {"order": 3}])
    template_tasks = (
        await db_session.execute(
            select(TemplateTask).where(TemplateTask.template_id == template.id).order_by(TemplateTask.order)
        )
    ).scalars().all()

    response = await client.post(
        f"/api/v1/workspaces/{workspace.id}/projects/from-template/{template.id}",
        json={
            "projectName": "Assigned",
            "projectDescription": "Custom description",
            "customizations": {"taskAssignments": {template_tasks[1].id: other_user.id}},
        },
        headers=auth_headers
    )

    assert response.status_code == 201
    project_id = response.json()["data"]["project"]["id"]
    assert response.json()["data"]["project"]["description"] == "Custom description"

    tasks = (await db_session.execute(select(Task).where(Task.project_id == project_id))).scalars().all()
    assignees = {t.title: t.assigned_to for t in tasks}
    assert assignees == {"Task 1": None, "Task 2": other_user.id, "Task 3": None}


@pytest.mark.asyncio
async def test_create_project_from_missing_template(client: AsyncClient, auth_headers, workspace, db_session):
    """Missing template: 404 and nothing written"""
    response = await client.post(
        f"/api/v1/workspaces/{workspace.id}/projects/from-template/not-a-template",
        json={"projectName": "Ghost"},
        headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert await db_session.scalar(select(func.count(Project.id))) == 0
    assert await db_session.scalar(select(func.count(Task.id))) == 0


@pytest.mark.asyncio
async def test_create_project_from_template_missing_workspace(client: AsyncClient, auth_headers, make_template):
    template = await make_template(tasks=[{"order": 1}])

    response = await client.post(
        f"/api/v1/workspaces/no-such-workspace/projects/from-template/{template.id}",
        json={"projectName": "Nowhere"},
        headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "WORKSPACE_NOT_FOUND"


@pytest.mark.asyncio
async def test_create_project_from_template_increments_usage(
    client: AsyncClient, auth_headers, workspace, make_template, db_session
):
    template = await make_template(tasks=[{"order": n} for n in range(1, 6)])

    for name in ("First", "Second"):
        response = await client.post(
            f"/api/v1/workspaces/{workspace.id}/projects/from-template/{template.id}",
            json={"projectName": name},
            headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["data"]["tasksCreated"] == 5

    usage = await db_session.scalar(
        select(ProjectTemplate.usage_count).where(ProjectTemplate.id == template.id)
    )
    assert usage == 2


@pytest.mark.asyncio
async def test_create_project_from_template_validation(client: AsyncClient, auth_headers, workspace, make_template):
    template = await make_template()
    url = f"/api/v1/workspaces/{workspace.id}/projects/from-template/{template.id}"

    assert (await client.post(url, json={}, headers=auth_headers)).status_code == 422
    assert (await client.post(url, json={"projectName": ""}, headers=auth_headers)).status_code == 422
    assert (
        await client.post(url, json={"projectName": "x", "startDate": "next week"}, headers=auth_headers)
    ).status_code == 422
    assert (
        await client.post(
            url,
            json={"projectName": "x", "customizations": {"taskAssignments": {"a": 5}}},
            headers=auth_headers,
        )
    ).status_code == 422


@pytest.mark.asyncio
async def test_update_template_without_changes(client: AsyncClient, auth_headers, workspace, make_template):
    template = await make_template()

    response = await client.put(
        f"/api/v1/workspaces/{workspace.id}/templates/{template.id}",
        json={},
        headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_create_project_from_template_store_failure(
    unguarded_client: AsyncClient, auth_headers, workspace, make_template, db_session, monkeypatch
):
    """A failing task write answers a generic 500 and leaves no project behind"""
    template = await make_template(tasks=[{"order": 1}, {"order": 2}])
    url = f"/api/v1/workspaces/{workspace.id}/projects/from-template/{template.id}"

    async def create_task(self, *args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(ProjectService, "create_task", create_task)

    response = await unguarded_client.post(url, json={"projectName": "Broken"}, headers=auth_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Internal server error"
    assert await db_session.scalar(select(func.count(Project.id))) == 0
    assert await db_session.scalar(select(func.count(Task.id))) == 0
