"""Pytest configuration and fixtures."""

import base64
import hashlib
import json
import re
from typing import Callable

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from nacl.public import PrivateKey

from quick_deploy.api.deps import get_http_client
from quick_deploy.config import settings
from quick_deploy.core.exceptions import ExternalApiError
from quick_deploy.core.session import encode_session
from quick_deploy.main import app
from quick_deploy.models.fastly import (
    DictionaryItemAction,
    FastlyBackend,
    FastlyDictionary,
    FastlyDomain,
    FastlyService,
    FastlyServiceVersion,
)
from quick_deploy.models.github import GitHubFile, RepositoryPublicKey
from quick_deploy.models.session import SessionState

SAMPLE_MANIFEST = """# This file describes a Fastly Compute@Edge package.
authors = ["dev@example.com"]
description = "A starter kit"
language = "rust"
manifest_version = 1
name = "starter"
service_id = ""

[local_server]
  [local_server.backends]
    [local_server.backends.origin]
    url = "https://example.org/"
"""

SAMPLE_DEPLOY_SPEC = """[setup]

[[setup.dictionaries]]
name = "config"

[[setup.dictionaries.items]]
key = "greeting"
input_type = "string"
prompt = "Greeting"
value = "hello"
"""


def _sha(content: str) -> str:
    return hashlib.sha1(content.encode("utf-8")).hexdigest()


@pytest.fixture
def sample_manifest() -> str:
    return SAMPLE_MANIFEST


@pytest.fixture
def sample_deploy_spec() -> str:
    return SAMPLE_DEPLOY_SPEC


# ---------------------------------------------------------------------------
# In-memory collaborators for pipeline tests
# ---------------------------------------------------------------------------


class FakeFastly:
    """Records every call; raises ``ExternalApiError`` on ``fail_on``."""

    def __init__(self, calls: list[str], fail_on: str | None = None):
        self.calls = calls
        self.fail_on = fail_on
        self.services: list[str] = []
        self.domains: list[str] = []
        self.backends: list[FastlyBackend] = []
        self.dictionaries: list[str] = []
        self.dictionary_items: dict[str, list[DictionaryItemAction]] = {}
        self.active = False

    def _record(self, name: str) -> None:
        self.calls.append(f"fastly.{name}")
        if self.fail_on == name:
            raise ExternalApiError(f"{name} failed", "fastly", 500)

    async def create_service(self, name: str) -> FastlyService:
        self._record("create_service")
        self.services.append(name)
        return FastlyService(id="svc-123", name=name)

    async def create_domain(self, service_id: str, version: int, name: str) -> FastlyDomain:
        self._record("create_domain")
        self.domains.append(name)
        return FastlyDomain(name=name)

    async def create_backend(
        self, service_id: str, version: int, backend: FastlyBackend
    ) -> FastlyBackend:
        self._record("create_backend")
        self.backends.append(backend)
        return backend

    async def create_dictionary(
        self, service_id: str, version: int, name: str
    ) -> FastlyDictionary:
        self._record("create_dictionary")
        self.dictionaries.append(name)
        return FastlyDictionary(id=f"dict-{len(self.dictionaries)}", name=name)

    async def update_dictionary_items(
        self, service_id: str, dictionary_id: str, items: list[DictionaryItemAction]
    ) -> None:
        self._record("update_dictionary_items")
        self.dictionary_items[dictionary_id] = items

    async def get_service_version(self, service_id: str, version: int) -> FastlyServiceVersion:
        self._record("get_service_version")
        return FastlyServiceVersion(number=version, active=self.active)


class FakeGitHub:
    """Repository-side collaborator backed by a dict of files."""

    def __init__(
        self,
        calls: list[str],
        private_key: PrivateKey,
        files: dict[str, GitHubFile],
        fail_on: str | None = None,
    ):
        self.calls = calls
        self.private_key = private_key
        self.files = dict(files)
        self.fail_on = fail_on
        self.enabled_workflows: list[str] = []
        self.secrets: dict[str, tuple[str, str]] = {}
        self.pushed: dict[str, str] = {}

    def _record(self, name: str) -> None:
        self.calls.append(f"github.{name}")
        if self.fail_on == name:
            raise ExternalApiError(f"{name} failed", "github", 500)

    async def enable_workflow(self, nwo: str, workflow: str) -> None:
        self._record("enable_workflow")
        self.enabled_workflows.append(workflow)

    async def get_repository_public_key(self, nwo: str) -> RepositoryPublicKey:
        self._record("get_repository_public_key")
        key = base64.b64encode(bytes(self.private_key.public_key)).decode("ascii")
        return RepositoryPublicKey(key=key, key_id="key-1")

    async def create_secret(
        self, nwo: str, name: str, encrypted_value: str, key_id: str
    ) -> None:
        self._record("create_secret")
        self.secrets[name] = (encrypted_value, key_id)

    async def get_file(self, nwo: str, path: str) -> GitHubFile | None:
        self._record("get_file")
        return self.files.get(path)

    async def update_file(
        self, nwo: str, file: GitHubFile, content: str, message: str
    ) -> None:
        self._record("update_file")
        self.pushed[file.path] = content


@pytest.fixture
def repo_private_key() -> PrivateKey:
    """Key pair standing in for the repository's Actions secrets key."""
    return PrivateKey.generate()


@pytest.fixture
def manifest_file() -> GitHubFile:
    return GitHubFile(path="fastly.toml", content=SAMPLE_MANIFEST, sha=_sha(SAMPLE_MANIFEST))


@pytest.fixture
def make_collaborators(
    repo_private_key: PrivateKey, manifest_file: GitHubFile
) -> Callable[..., tuple[list[str], FakeGitHub, FakeFastly]]:
    """Build fake GitHub/Fastly collaborators sharing one call log."""

    def _make(
        fail_on: str | None = None,
        files: dict[str, GitHubFile] | None = None,
    ) -> tuple[list[str], FakeGitHub, FakeFastly]:
        calls: list[str] = []
        github = FakeGitHub(
            calls,
            repo_private_key,
            files if files is not None else {manifest_file.path: manifest_file},
            fail_on=fail_on,
        )
        fastly = FakeFastly(calls, fail_on=fail_on)
        return calls, github, fastly

    return _make


# ---------------------------------------------------------------------------
# Fake provider APIs for endpoint tests
# ---------------------------------------------------------------------------


class FakeProviderApi:
    """A tiny GitHub + Fastly served through ``httpx.MockTransport``."""

    GITHUB_TOKEN = "gh-token"
    FASTLY_TOKEN = "fastly-token"
    GOOD_CODE = "good-code"

    def __init__(self, private_key: PrivateKey):
        self.private_key = private_key
        self.requests: list[tuple[str, str]] = []
        self.service_active = False
        self.repos: dict[str, dict] = {}
        self.files: dict[tuple[str, str], str] = {}
        self.secrets: dict[str, str] = {}
        self.dictionary_items: list[dict] = []

        self.add_repo("fastly/starter", is_template=True)
        self.files[("fastly/starter", "fastly.toml")] = SAMPLE_MANIFEST
        self.files[("fastly/starter", "quick-deploy.toml")] = SAMPLE_DEPLOY_SPEC
        self.add_repo("someone/plain", is_template=False)

    def add_repo(self, nwo: str, is_template: bool = False) -> dict:
        owner, name = nwo.split("/")
        repo = {
            "name": name,
            "full_name": nwo,
            "default_branch": "main",
            "owner": {"login": owner},
            "forks_count": 3,
            "stargazers_count": 42,
            "is_template": is_template,
        }
        self.repos[nwo] = repo
        return repo

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, f"{request.url.host}{request.url.path}"))
        if request.url.host == "github.com":
            return self._github_oauth(request)
        if request.url.host == "api.github.com":
            return self._github_api(request)
        if request.url.host == "accounts.fastly.com":
            return httpx.Response(200, json={"access_token": self.FASTLY_TOKEN})
        if request.url.host == "api.fastly.com":
            return self._fastly_api(request)
        return httpx.Response(404, json={"message": "Not Found"})

    def _github_oauth(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body.get("code") != self.GOOD_CODE:
            return httpx.Response(
                200,
                json={
                    "error": "bad_verification_code",
                    "error_description": "The code passed is incorrect or expired.",
                },
            )
        return httpx.Response(200, json={"access_token": self.GITHUB_TOKEN})

    def _github_api(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        sent_token = "Authorization" in request.headers
        authorized = request.headers.get("Authorization") == f"token {self.GITHUB_TOKEN}"

        # A bad token is rejected everywhere, even for public data
        if sent_token and not authorized:
            return httpx.Response(401, json={"message": "Bad credentials"})

        if path == "/user":
            if not authorized:
                return httpx.Response(401, json={"message": "Requires authentication"})
            return httpx.Response(200, json={"login": "octocat", "name": "The Octocat"})

        match = re.fullmatch(r"/repos/([^/]+/[^/]+)(/.*)?", path)
        if not match:
            return httpx.Response(404, json={"message": "Not Found"})
        nwo, rest = match.group(1), match.group(2) or ""

        if rest == "" and request.method == "GET":
            repo = self.repos.get(nwo)
            if repo is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=repo)

        if rest in ("/generate", "/forks") and request.method == "POST":
            name = json.loads(request.content)["name"]
            dest = f"octocat/{name}"
            created = self.add_repo(dest)
            for (src_nwo, file_path), content in list(self.files.items()):
                if src_nwo == nwo:
                    self.files[(dest, file_path)] = content
            return httpx.Response(201, json=created)

        if rest.startswith("/contents/"):
            file_path = rest[len("/contents/"):]
            content = self.files.get((nwo, file_path))
            if request.method == "GET":
                if content is None:
                    return httpx.Response(404, json={"message": "Not Found"})
                encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
                return httpx.Response(
                    200,
                    json={
                        "path": file_path,
                        "sha": _sha(content),
                        # The contents API wraps base64 at 60 columns
                        "content": "\n".join(
                            encoded[i : i + 60] for i in range(0, len(encoded), 60)
                        ),
                    },
                )
            body = json.loads(request.content)
            if content is None or body["sha"] != _sha(content):
                return httpx.Response(
                    409, json={"message": f"{file_path} does not match {body['sha']}"}
                )
            self.files[(nwo, file_path)] = base64.b64decode(body["content"]).decode("utf-8")
            return httpx.Response(200, json={"content": {"path": file_path}})

        if rest.startswith("/actions/workflows/"):
            return httpx.Response(204)

        if rest == "/actions/secrets/public-key":
            key = base64.b64encode(bytes(self.private_key.public_key)).decode("ascii")
            return httpx.Response(200, json={"key": key, "key_id": "key-1"})

        if rest.startswith("/actions/secrets/"):
            self.secrets[rest.rsplit("/", 1)[1]] = json.loads(request.content)["encrypted_value"]
            return httpx.Response(201)

        return httpx.Response(404, json={"message": "Not Found"})

    def _fastly_api(self, request: httpx.Request) -> httpx.Response:
        if request.headers.get("Fastly-Key") != self.FASTLY_TOKEN:
            return httpx.Response(
                401, json={"msg": "Provided credentials are missing or invalid"}
            )

        path = request.url.path
        if path == "/current_user":
            return httpx.Response(200, json={"name": "Edge Dev", "customer_id": "cust-1"})
        if path == "/service" and request.method == "POST":
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": "svc-1", "name": body["name"]})
        if path.endswith("/domain") or path.endswith("/backend"):
            return httpx.Response(200, json=json.loads(request.content))
        if path.endswith("/dictionary"):
            body = json.loads(request.content)
            return httpx.Response(200, json={"id": "dict-1", "name": body["name"]})
        if path.endswith("/items") and request.method == "PATCH":
            self.dictionary_items.extend(json.loads(request.content)["items"])
            return httpx.Response(200, json={"status": "ok"})
        if re.fullmatch(r"/service/[^/]+/version/1", path):
            return httpx.Response(200, json={"number": 1, "active": self.service_active})
        return httpx.Response(404, json={"msg": "Record not found"})


def cookie_value(response: httpx.Response, name: str) -> str | None:
    """Value of a cookie set by ``response``, if any."""
    for header in response.headers.get_list("set-cookie"):
        key, _, rest = header.partition("=")
        if key == name:
            return rest.split(";", 1)[0]
    return None


class WizardClient:
    """Test client that sends an explicit session cookie with each request."""

    def __init__(self, client: AsyncClient):
        self.client = client
        self.cookie_name = settings.session_cookie_name

    async def request(
        self,
        method: str,
        url: str,
        state: SessionState | None = None,
        **kwargs,
    ) -> httpx.Response:
        self.client.cookies.clear()
        headers = dict(kwargs.pop("headers", {}))
        if state is not None:
            headers["Cookie"] = f"{self.cookie_name}={encode_session(state)}"
        return await self.client.request(method, url, headers=headers, **kwargs)

    async def get(self, url: str, state: SessionState | None = None, **kwargs) -> httpx.Response:
        return await self.request("GET", url, state, **kwargs)

    async def post(self, url: str, state: SessionState | None = None, **kwargs) -> httpx.Response:
        return await self.request("POST", url, state, **kwargs)

    def token_from(self, response: httpx.Response) -> str | None:
        return cookie_value(response, self.cookie_name)


@pytest.fixture
def provider_api(repo_private_key: PrivateKey) -> FakeProviderApi:
    return FakeProviderApi(repo_private_key)


@pytest.fixture
async def client(provider_api: FakeProviderApi) -> WizardClient:
    """Async test client whose outbound calls hit the fake provider APIs."""

    async def _http_client():
        async with httpx.AsyncClient(transport=provider_api.transport()) as http:
            yield http

    app.dependency_overrides[get_http_client] = _http_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as ac:
        yield WizardClient(ac)

    app.dependency_overrides.clear()
