"""Integration tests for API endpoints."""

import io
import zipfile
from datetime import timedelta

import httpx
import pytest
from httpx import AsyncClient

from promptbuilder.api.v1.admin import ensure_default_admin
from promptbuilder.config import settings
from promptbuilder.core.storage import InMemoryStorage
from promptbuilder.models.common import utcnow
from tests.conftest import (
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    MOBILE_CODE,
    WEBSITE_CODE,
    FakeCompletionAPI,
    FakeHostingAPI,
    completion_body,
    prompt_of,
    register,
    respond_by_prompt,
)


async def create_project(
    client: AsyncClient, headers: dict[str, str], generated_code: dict | None = None
) -> dict:
    response = await client.post(
        "/api/projects",
        json={
            "name": "Todo App",
            "prompt": "A todo app",
            "generatedCode": generated_code or {"website": WEBSITE_CODE},
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["project"]


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_check(self, client: AsyncClient):
        """Test health check returns healthy status."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "environment" in data
        assert "timestamp" in data
        assert data["generationEnabled"] is True
        assert data["deploymentPlatforms"] == ["vercel", "netlify"]

    @pytest.mark.asyncio
    async def test_request_id_header(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"
        assert "X-Response-Time" in response.headers


class TestAuthEndpoints:
    """Tests for registration and login."""

    @pytest.mark.asyncio
    async def test_register_and_me(self, client: AsyncClient):
        headers = await register(client)

        response = await client.get("/api/auth/me", headers=headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "ada@example.com"
        assert "passwordHash" not in user

    @pytest.mark.asyncio
    async def test_duplicate_registration(self, client: AsyncClient):
        await register(client)

        response = await client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "ADA@example.com", "password": "another-pass"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICTERROR"

    @pytest.mark.asyncio
    async def test_login(self, client: AsyncClient):
        await register(client)

        response = await client.post(
            "/api/auth/login",
            json={"email": "ada@example.com", "password": "s3cret-pass"},
        )

        assert response.status_code == 200
        assert response.json()["token"]

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient):
        await register(client)

        response = await client.post(
            "/api/auth/login",
            json={"email": "ada@example.com", "password": "wrong-pass"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/projects")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "AUTHERROR"

    @pytest.mark.asyncio
    async def test_bad_token(self, client: AsyncClient):
        response = await client.get(
            "/api/projects", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_register_rejects_overlong_password(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "ada@example.com", "password": "p" * 100},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_register_rejects_password_over_bcrypt_limit(self, client: AsyncClient):
        """40 characters but 80 UTF-8 bytes."""
        response = await client.post(
            "/api/auth/register",
            json={"name": "Ada", "email": "ada@example.com", "password": "é" * 40},
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATIONERROR"
        assert error["details"]["field"] == "password"

    @pytest.mark.asyncio
    async def test_login_with_overlong_password(self, client: AsyncClient):
        await register(client)

        response = await client.post(
            "/api/auth/login",
            json={"email": "ada@example.com", "password": "p" * 100},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_admin_token_is_not_a_user_token(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.get("/api/projects", headers=admin_headers)

        assert response.status_code == 401


class TestGenerateEndpoints:
    """Tests for generation endpoints."""

    @pytest.mark.asyncio
    async def test_generate_single_type(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.post(
            "/api/generate",
            json={"prompt": "A todo app", "type": "website"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["types"] == ["website"]
        assert data["generatedCode"]["website"]["files"]["index.html"].startswith("<!DOCTYPE")
        assert data["project"] is None

    @pytest.mark.asyncio
    async def test_generate_both_types(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.post(
            "/api/generate",
            json={"prompt": "A todo app", "types": ["website", "mobile-app"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert set(data["generatedCode"]) == {"website", "mobile-app"}
        assert data["message"] == "Website and mobile app generated successfully"

    @pytest.mark.asyncio
    async def test_partial_success(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        fake_api: FakeCompletionAPI,
    ):
        def responder(payload):
            if "mobile app based on" in prompt_of(payload):
                return httpx.Response(500, json={"error": {"message": "model crashed"}})
            return respond_by_prompt(payload)

        fake_api.responder = responder

        response = await client.post(
            "/api/generate",
            json={"prompt": "A todo app", "types": ["website", "mobile-app"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        generated = response.json()["generatedCode"]
        assert "files" in generated["website"]
        assert generated["mobile-app"]["error"] == "Failed to generate mobile-app"
        assert "model crashed" in generated["mobile-app"]["details"]

    @pytest.mark.asyncio
    async def test_deeply_nested_response_falls_back(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        fake_api: FakeCompletionAPI,
    ):
        nested = "[" * 100000

        def responder(payload):
            if "mobile app based on" in prompt_of(payload):
                return respond_by_prompt(payload)
            return httpx.Response(200, json=completion_body(nested))

        fake_api.responder = responder

        response = await client.post(
            "/api/generate",
            json={"prompt": "A todo app", "types": ["website", "mobile-app"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        generated = response.json()["generatedCode"]
        assert generated["website"]["files"] == {"index.html": nested}
        assert generated["mobile-app"]["files"] == MOBILE_CODE["files"]

    @pytest.mark.asyncio
    async def test_total_failure(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        fake_api: FakeCompletionAPI,
    ):
        fake_api.responder = lambda payload: httpx.Response(503, text="unavailable")

        response = await client.post(
            "/api/generate",
            json={"prompt": "A todo app", "types": ["website", "mobile-app"]},
            headers=auth_headers,
        )

        assert response.status_code == 502
        error = response.json()["error"]
        assert error["message"] == "Failed to generate project"
        assert set(error["details"]["generatedCode"]) == {"website", "mobile-app"}

    @pytest.mark.asyncio
    async def test_invalid_types_rejected_before_generation(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        fake_api: FakeCompletionAPI,
    ):
        response = await client.post(
            "/api/generate",
            json={"prompt": "A todo app", "types": ["website", "desktop"]},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert "Invalid types: desktop" in response.json()["error"]["message"]
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_missing_prompt(self, client: AsyncClient, auth_headers: dict[str, str]):
        response = await client.post(
            "/api/generate",
            json={"type": "website"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Please provide a prompt"

    @pytest.mark.asyncio
    async def test_missing_types(self, client: AsyncClient, auth_headers: dict[str, str]):
        response = await client.post(
            "/api/generate",
            json={"prompt": "A todo app"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Please provide type or types array"

    @pytest.mark.asyncio
    async def test_generate_and_save(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.post(
            "/api/generate",
            json={"prompt": "A todo app", "types": ["website", "mobile-app"], "name": "Todo"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        project = response.json()["project"]
        assert project["type"] == "both"
        assert len(project["versions"]) == 1

    @pytest.mark.asyncio
    async def test_enhance_code(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        fake_api: FakeCompletionAPI,
    ):
        response = await client.post(
            "/api/generate/enhance",
            json={"existingCode": WEBSITE_CODE, "enhancementPrompt": "Add dark mode"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert "dark" in response.json()["enhancedCode"]["files"]["index.html"]
        assert "Add dark mode" in fake_api.prompts[0]

    @pytest.mark.asyncio
    async def test_enhance_requires_both_fields(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.post(
            "/api/generate/enhance",
            json={"enhancementPrompt": "Add dark mode"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == (
            "Please provide existing code and enhancement prompt"
        )


class TestProjectEndpoints:
    """Tests for project management endpoints."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, client: AsyncClient, auth_headers: dict[str, str]):
        project = await create_project(client, auth_headers)

        assert project["type"] == "website"
        assert project["framework"] == "html"
        assert project["status"] == "draft"
        assert project["versions"][0]["description"] == "Initial version"

        response = await client.get(f"/api/projects/{project['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["project"]["name"] == "Todo App"

    @pytest.mark.asyncio
    async def test_create_ignores_failed_types(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        project = await create_project(
            client,
            auth_headers,
            {
                "website": {"error": "Failed to generate website", "details": "timeout"},
                "mobile-app": MOBILE_CODE,
            },
        )

        assert project["type"] == "mobile-app"
        assert project["generatedCode"]["framework"] == "react-native"

    @pytest.mark.asyncio
    async def test_create_with_only_failures(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.post(
            "/api/projects",
            json={
                "name": "Todo App",
                "prompt": "A todo app",
                "generatedCode": {
                    "website": {"error": "Failed to generate website", "details": "timeout"}
                },
            },
            headers=auth_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_only_own_projects(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        await create_project(client, auth_headers)
        other_headers = await register(client, email="grace@example.com")
        await create_project(client, other_headers)

        response = await client.get("/api/projects", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["count"] == 1

    @pytest.mark.asyncio
    async def test_other_users_project_forbidden(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        project = await create_project(client, auth_headers)
        other_headers = await register(client, email="grace@example.com")

        response = await client.get(f"/api/projects/{project['id']}", headers=other_headers)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "OWNERSHIPERROR"

    @pytest.mark.asyncio
    async def test_missing_project(self, client: AsyncClient, auth_headers: dict[str, str]):
        response = await client.get("/api/projects/does-not-exist", headers=auth_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_code_adds_version(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        project = await create_project(client, auth_headers)
        new_code = {**WEBSITE_CODE, "files": {"index.html": "<p>v2</p>"}}

        response = await client.put(
            f"/api/projects/{project['id']}",
            json={"generatedCode": new_code, "versionDescription": "Second pass"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        updated = response.json()["project"]
        assert updated["generatedCode"]["files"] == {"index.html": "<p>v2</p>"}

        versions = await client.get(
            f"/api/projects/{project['id']}/versions", headers=auth_headers
        )
        data = versions.json()
        assert data["count"] == 2
        assert [v["description"] for v in data["versions"]] == ["Initial version", "Second pass"]
        assert data["versions"][0]["code"]["files"]["styles.css"] == "body { margin: 0; }"

    @pytest.mark.asyncio
    async def test_update_fields_only(self, client: AsyncClient, auth_headers: dict[str, str]):
        project = await create_project(client, auth_headers)

        response = await client.put(
            f"/api/projects/{project['id']}",
            json={"name": "Renamed", "status": "archived"},
            headers=auth_headers,
        )

        updated = response.json()["project"]
        assert updated["name"] == "Renamed"
        assert updated["status"] == "archived"
        assert len(updated["versions"]) == 1

    @pytest.mark.asyncio
    async def test_update_rejects_wrong_snapshot_shape(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        project = await create_project(client, auth_headers)

        response = await client.put(
            f"/api/projects/{project['id']}",
            json={"generatedCode": {"website": WEBSITE_CODE, "mobile-app": MOBILE_CODE}},
            headers=auth_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_both_project_needs_every_part(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        project = await create_project(
            client, auth_headers, {"website": WEBSITE_CODE, "mobile-app": MOBILE_CODE}
        )

        response = await client.put(
            f"/api/projects/{project['id']}",
            json={"generatedCode": {"website": WEBSITE_CODE}},
            headers=auth_headers,
        )

        assert response.status_code == 400
        stored = (
            await client.get(f"/api/projects/{project['id']}", headers=auth_headers)
        ).json()["project"]
        assert set(stored["generatedCode"]) == {"website", "mobile-app"}
        assert len(stored["versions"]) == 1

    @pytest.mark.asyncio
    async def test_delete(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        storage: InMemoryStorage,
    ):
        project = await create_project(client, auth_headers)

        response = await client.delete(f"/api/projects/{project['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert await storage.get_project(project["id"]) is None

    @pytest.mark.asyncio
    async def test_enhance_project(self, client: AsyncClient, auth_headers: dict[str, str]):
        project = await create_project(client, auth_headers)

        response = await client.post(
            f"/api/projects/{project['id']}/enhance",
            json={"enhancementPrompt": "Add dark mode"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        updated = response.json()["project"]
        assert "dark" in updated["generatedCode"]["files"]["index.html"]
        assert updated["versions"][-1]["description"] == "Enhanced: Add dark mode"

    @pytest.mark.asyncio
    async def test_enhance_both_project_needs_target(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        project = await create_project(
            client, auth_headers, {"website": WEBSITE_CODE, "mobile-app": MOBILE_CODE}
        )

        response = await client.post(
            f"/api/projects/{project['id']}/enhance",
            json={"enhancementPrompt": "Add dark mode"},
            headers=auth_headers,
        )
        assert response.status_code == 400

        response = await client.post(
            f"/api/projects/{project['id']}/enhance",
            json={"enhancementPrompt": "Add dark mode", "target": "website"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        code = response.json()["project"]["generatedCode"]
        assert "dark" in code["website"]["files"]["index.html"]
        assert code["mobile-app"]["files"]["App.js"].startswith("import React")

    @pytest.mark.asyncio
    async def test_export_both_project(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        project = await create_project(
            client, auth_headers, {"website": WEBSITE_CODE, "mobile-app": MOBILE_CODE}
        )

        response = await client.get(
            f"/api/projects/{project['id']}/export", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="todo-app.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            names = set(archive.namelist())
        assert {"website/index.html", "mobile-app/index.html", "mobile-app/App.js"} <= names


class TestDeployEndpoints:
    """Tests for deployment endpoints."""

    @pytest.mark.asyncio
    async def test_deploy_marks_published(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        fake_hosting: FakeHostingAPI,
    ):
        project = await create_project(client, auth_headers)

        response = await client.post(
            "/api/deploy/vercel",
            json={"projectId": project["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["url"] == "https://todo-app.vercel.app"
        assert data["deploymentId"] == "dpl_abc123"
        assert data["message"] == "Successfully deployed to Vercel"

        stored = (
            await client.get(f"/api/projects/{project['id']}", headers=auth_headers)
        ).json()["project"]
        assert stored["status"] == "published"
        assert stored["deploymentUrl"] == "https://todo-app.vercel.app"
        assert stored["deploymentPlatform"] == "vercel"
        assert [f["file"] for f in fake_hosting.payload()["files"]] == [
            "index.html",
            "styles.css",
            "script.js",
        ]

    @pytest.mark.asyncio
    async def test_deploy_failure(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        fake_hosting: FakeHostingAPI,
    ):
        project = await create_project(client, auth_headers)
        fake_hosting.fail_with = 500

        response = await client.post(
            "/api/deploy/netlify",
            json={"projectId": project["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 502
        assert response.json()["error"]["details"]["platform"] == "netlify"

        stored = (
            await client.get(f"/api/projects/{project['id']}", headers=auth_headers)
        ).json()["project"]
        assert stored["status"] == "draft"

    @pytest.mark.asyncio
    async def test_deploy_unexpected_response(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        fake_hosting: FakeHostingAPI,
    ):
        project = await create_project(client, auth_headers)
        fake_hosting.override = httpx.Response(200, text="<html>maintenance</html>")

        response = await client.post(
            "/api/deploy/vercel",
            json={"projectId": project["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "DEPLOYMENTERROR"
        assert error["details"]["platform"] == "vercel"

        stored = (
            await client.get(f"/api/projects/{project['id']}", headers=auth_headers)
        ).json()["project"]
        assert stored["status"] == "draft"

    @pytest.mark.asyncio
    async def test_unknown_platform(self, client: AsyncClient, auth_headers: dict[str, str]):
        project = await create_project(client, auth_headers)

        response = await client.post(
            "/api/deploy/heroku",
            json={"projectId": project["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_deploy_other_users_project(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        project = await create_project(client, auth_headers)
        other_headers = await register(client, email="grace@example.com")

        response = await client.post(
            "/api/deploy/vercel",
            json={"projectId": project["id"]},
            headers=other_headers,
        )

        assert response.status_code == 403


class TestAdminEndpoints:
    """Tests for the admin console."""

    @pytest.mark.asyncio
    async def test_login(self, client: AsyncClient, admin, storage: InMemoryStorage):
        response = await client.post(
            "/api/admin/login",
            json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token"]
        assert body["admin"] == {
            "id": admin.id,
            "username": ADMIN_USERNAME,
            "email": "root@example.com",
        }
        assert (await storage.get_admin(admin.id)).last_login is not None
        assert await storage.get_admin_session(body["token"]) is not None

    @pytest.mark.asyncio
    async def test_login_requires_both_fields(self, client: AsyncClient, admin):
        response = await client.post("/api/admin/login", json={"username": ADMIN_USERNAME})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Username and password required"

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, admin):
        response = await client.post(
            "/api/admin/login",
            json={"username": ADMIN_USERNAME, "password": "nope"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid credentials"

    @pytest.mark.asyncio
    async def test_requires_admin_token(self, client: AsyncClient):
        response = await client.get("/api/admin/users")

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Admin authentication required"

    @pytest.mark.asyncio
    async def test_user_token_rejected(
        self, client: AsyncClient, auth_headers: dict[str, str]
    ):
        response = await client.get("/api/admin/users", headers=auth_headers)

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid admin token"

    @pytest.mark.asyncio
    async def test_expired_session(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        storage: InMemoryStorage,
    ):
        token = admin_headers["Authorization"].removeprefix("Bearer ")
        session = await storage.get_admin_session(token)
        await storage.create_admin_session(
            session.model_copy(update={"expires_at": utcnow() - timedelta(minutes=1)})
        )

        response = await client.get("/api/admin/users", headers=admin_headers)

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Session expired"

    @pytest.mark.asyncio
    async def test_logout_ends_session(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.post("/api/admin/logout", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"

        response = await client.get("/api/admin/users", headers=admin_headers)
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Session expired"

    @pytest.mark.asyncio
    async def test_users_with_activity(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        auth_headers: dict[str, str],
    ):
        await create_project(client, auth_headers)
        await register(client, "grace@example.com")

        response = await client.get("/api/admin/users", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        by_email = {u["email"]: u for u in body["users"]}
        ada = by_email["ada@example.com"]
        assert "passwordHash" not in ada
        assert ada["projectCount"] == 1
        assert ada["activity"]["totalGenerations"] == 1
        assert ada["activity"]["prompts"][0]["text"] == "A todo app"

        grace = by_email["grace@example.com"]
        assert grace["projectCount"] == 0
        assert grace["activity"]["totalGenerations"] == 0
        assert grace["activity"]["prompts"] == []
        assert grace["activity"]["lastActive"] == grace["createdAt"]

    @pytest.mark.asyncio
    async def test_user_details(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        auth_headers: dict[str, str],
    ):
        project = await create_project(client, auth_headers)
        me = (await client.get("/api/auth/me", headers=auth_headers)).json()["user"]

        response = await client.get(f"/api/admin/users/{me['id']}", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["email"] == "ada@example.com"
        assert [p["id"] for p in body["projects"]] == [project["id"]]
        assert body["activity"]["projects"] == [project["id"]]

    @pytest.mark.asyncio
    async def test_missing_user(self, client: AsyncClient, admin_headers: dict[str, str]):
        response = await client.get("/api/admin/users/nope", headers=admin_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_prompts(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        auth_headers: dict[str, str],
    ):
        first = await create_project(client, auth_headers)
        other = await register(client, "grace@example.com")
        second = await create_project(client, other, {"mobile-app": MOBILE_CODE})

        response = await client.get("/api/admin/prompts", headers=admin_headers)

        assert response.status_code == 200
        prompts = response.json()["prompts"]
        assert [p["id"] for p in prompts] == [second["id"], first["id"]]
        assert prompts[0]["userEmail"] == "grace@example.com"
        assert prompts[0]["type"] == "mobile-app"
        assert prompts[1]["prompt"] == "A todo app"
        assert prompts[1]["projectName"] == "Todo App"

        response = await client.get(
            f"/api/admin/prompts/user/{first['ownerId']}", headers=admin_headers
        )
        assert [p["id"] for p in response.json()["prompts"]] == [first["id"]]

    @pytest.mark.asyncio
    async def test_project_code(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        auth_headers: dict[str, str],
    ):
        project = await create_project(client, auth_headers)

        response = await client.get(f"/api/admin/code/{project['id']}", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["project"]["userName"] == "Ada"
        assert body["project"]["userEmail"] == "ada@example.com"
        assert body["code"]["files"] == WEBSITE_CODE["files"]

    @pytest.mark.asyncio
    async def test_missing_project_code(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.get("/api/admin/code/nope", headers=admin_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_analytics(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        auth_headers: dict[str, str],
    ):
        await create_project(client, auth_headers)
        await create_project(client, auth_headers, {"mobile-app": MOBILE_CODE})
        latest = await create_project(
            client, auth_headers, {"website": WEBSITE_CODE, "mobile-app": MOBILE_CODE}
        )
        await register(client, "grace@example.com")

        response = await client.get("/api/admin/analytics", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["totalUsers"] == 2
        assert body["totalProjects"] == 3
        assert body["totalGenerations"] == 3
        assert body["stats"] == {"websiteProjects": 2, "mobileProjects": 2, "dualProjects": 1}
        assert len(body["recentActivity"]) == 3
        assert body["recentActivity"][0]["projectId"] == latest["id"]
        assert body["recentActivity"][0]["type"] == "both"
        assert body["recentActivity"][0]["userName"] == "Ada"

    @pytest.mark.asyncio
    async def test_default_admin_seeded_once(
        self, client: AsyncClient, storage: InMemoryStorage, monkeypatch
    ):
        monkeypatch.setattr(settings, "admin_username", "owner")
        monkeypatch.setattr(settings, "admin_password", "seed-pass")

        seeded = await ensure_default_admin(storage)
        assert await ensure_default_admin(storage) == seeded

        response = await client.post(
            "/api/admin/login", json={"username": "owner", "password": "seed-pass"}
        )
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_empty_admin_password_skips_seeding(
        self, storage: InMemoryStorage, monkeypatch
    ):
        monkeypatch.setattr(settings, "admin_password", "")

        assert await ensure_default_admin(storage) is None
        assert await storage.find_admin_by_username(settings.admin_username) is None
