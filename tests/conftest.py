"""Pytest configuration and fixtures."""

import json
from typing import Any, Callable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from promptbuilder.api.deps import get_completion, get_deployer, get_store
from promptbuilder.config import Settings
from promptbuilder.core.security import hash_password
from promptbuilder.core.storage import InMemoryStorage
from promptbuilder.main import app
from promptbuilder.models.admin import Admin, NewAdmin
from promptbuilder.services.completion_service import CompletionClient
from promptbuilder.services.deployment_service import DeploymentService

WEBSITE_CODE: dict[str, Any] = {
    "type": "website",
    "framework": "html",
    "files": {
        "index.html": "<!DOCTYPE html><html><body><h1>Todo</h1></body></html>",
        "styles.css": "body { margin: 0; }",
        "script.js": "console.log('todo');",
    },
    "dependencies": {},
    "structure": ["index.html", "styles.css", "script.js"],
    "instructions": "Open index.html in a browser",
}

MOBILE_CODE: dict[str, Any] = {
    "type": "mobile-app",
    "framework": "react-native",
    "files": {
        "App.js": "import React from 'react';\nexport default function App() { return null; }",
        "screens/HomeScreen.js": "export default function HomeScreen() { return null; }",
        "index.html": "<!-- web preview -->",
    },
    "dependencies": {"react": "18.2.0", "react-native": "0.72.0"},
    "structure": ["App.js", "screens/"],
    "instructions": "Setup: npm install && npx expo start",
}

ENHANCED_CODE: dict[str, Any] = {
    "type": "website",
    "framework": "html",
    "files": {
        "index.html": "<!DOCTYPE html><html><body class='dark'><h1>Todo</h1></body></html>",
        "styles.css": "body.dark { background: #111; }",
    },
    "structure": ["index.html", "styles.css"],
}


def completion_body(content: str) -> dict[str, Any]:
    """Build a chat-completion response body."""
    return {
        "id": "cmpl-test",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
        "usage": {"total_tokens": 42},
    }


def prompt_of(payload: dict[str, Any]) -> str:
    """The user message of a chat-completion request."""
    return payload["messages"][-1]["content"]


def respond_by_prompt(payload: dict[str, Any]) -> httpx.Response:
    """Answer website, mobile app and enhancement prompts with canned code."""
    prompt = prompt_of(payload)
    if prompt.startswith("Enhance"):
        content = json.dumps(ENHANCED_CODE)
    elif "mobile app based on" in prompt:
        content = json.dumps(MOBILE_CODE)
    else:
        content = "```json\n" + json.dumps(WEBSITE_CODE) + "\n```"
    return httpx.Response(200, json=completion_body(content))


class FakeCompletionAPI:
    """Scripted chat-completion endpoint for ``httpx.MockTransport``."""

    def __init__(self):
        self.requests: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []
        self.responder: Callable[[dict[str, Any]], httpx.Response] = respond_by_prompt

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        self.headers.append(request.headers)
        return self.responder(payload)

    @property
    def prompts(self) -> list[str]:
        return [prompt_of(p) for p in self.requests]


class FakeHostingAPI:
    """Scripted Vercel and Netlify endpoints."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None
        self.override: httpx.Response | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.override is not None:
            return self.override
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": {"message": "quota exceeded"}})

        path = request.url.path
        if path.endswith("/v13/deployments"):
            return httpx.Response(200, json={"id": "dpl_abc123", "url": "todo-app.vercel.app"})
        if path.endswith("/sites"):
            return httpx.Response(
                201,
                json={"id": "site-1", "url": "http://todo-app.netlify.app", "ssl_url": "https://todo-app.netlify.app"},
            )
        if path.endswith("/deploys"):
            return httpx.Response(200, json={"id": "deploy-1"})
        return httpx.Response(404, json={"message": "not found"})

    def payload(self, index: int = 0) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing every outbound call at fake hosts."""
    return Settings(
        completion_api_key="test-key",
        completion_api_url="https://completion.test/v1",
        completion_timeout_seconds=5,
        generation_timeout_seconds=5,
        vercel_token="vercel-token",
        vercel_api_url="https://vercel.test",
        netlify_token="netlify-token",
        netlify_api_url="https://netlify.test/api/v1",
    )


@pytest.fixture
def fake_api() -> FakeCompletionAPI:
    return FakeCompletionAPI()


@pytest.fixture
def fake_hosting() -> FakeHostingAPI:
    return FakeHostingAPI()


@pytest.fixture
async def completion_client(
    fake_api: FakeCompletionAPI, test_settings: Settings
) -> CompletionClient:
    """Completion client wired to the fake completion API."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler)) as http:
        yield CompletionClient(config=test_settings, http_client=http)


@pytest.fixture
async def deployment_service(
    fake_hosting: FakeHostingAPI, test_settings: Settings
) -> DeploymentService:
    """Deployment service wired to the fake hosting APIs."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_hosting.handler)) as http:
        yield DeploymentService(config=test_settings, http_client=http)


@pytest.fixture
def storage() -> InMemoryStorage:
    """Create a fresh storage backend."""
    return InMemoryStorage()


@pytest.fixture
async def client(
    storage: InMemoryStorage,
    completion_client: CompletionClient,
    deployment_service: DeploymentService,
) -> AsyncClient:
    """Create an async test client with fake collaborators."""
    app.dependency_overrides[get_store] = lambda: storage
    app.dependency_overrides[get_completion] = lambda: completion_client
    app.dependency_overrides[get_deployer] = lambda: deployment_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def register(client: AsyncClient, email: str = "ada@example.com") -> dict[str, str]:
    """Register a user and return auth headers."""
    response = await client.post(
        "/api/auth/register",
        json={"name": "Ada", "email": email, "password": "s3cret-pass"},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Auth headers for a freshly registered user."""
    return await register(client)


ADMIN_USERNAME = "root"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
async def admin(storage: InMemoryStorage) -> Admin:
    """An admin account in the test storage."""
    return await storage.create_admin(
        NewAdmin(
            username=ADMIN_USERNAME,
            password_hash=hash_password(ADMIN_PASSWORD),
            email="root@example.com",
        )
    )


@pytest.fixture
async def admin_headers(client: AsyncClient, admin: Admin) -> dict[str, str]:
    """Auth headers for a logged-in admin session."""
    response = await client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
