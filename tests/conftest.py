"""
Pytest configuration and shared fixtures.

Provides an in-memory stand-in for the PyGithub repository object, a
file-backed SQLite record store, wired services, and an HTTP client
for the FastAPI app.
"""

import hashlib
import itertools
import threading
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from types import SimpleNamespace
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from github import GithubException
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from docpush.core.config import RepositoryConfig, Settings
from docpush.core.retry import RetryOptions
from docpush.core.security import create_access_token
from docpush.db.base import Base
from docpush.db.session import create_session_factory
from docpush.db.store import DraftStore
from docpush.main import create_app
from docpush.schemas.auth import Principal, Role
from docpush.services.document_service import DocumentService
from docpush.services.draft_service import DraftService
from docpush.services.github_service import GitHubService
from docpush.services.media_service import MediaService

OWNER = "acme"
BASE_BRANCH = "main"
ADMIN_PASSWORD = "review-secret"


def blob_sha(data: bytes) -> str:
    """Git blob SHA of the given bytes."""
    return hashlib.sha1(b"blob %d\x00" % len(data) + data).hexdigest()  # noqa: S324


def github_error(status: int, message: str, headers: dict[str, str] | None = None) -> Exception:
    return GithubException(status, {"message": message}, headers or {})


class FakeContentFile:
    def __init__(self, path: str, data: bytes) -> None:
        self.path = path
        self.decoded_content = data
        self.sha = blob_sha(data)


class FakeGitRef:
    def __init__(self, repo: "FakeRepository", name: str, sha: str) -> None:
        self._repo = repo
        self._name = name
        self.ref = f"refs/heads/{name}"
        self.object = SimpleNamespace(sha=sha)

    def delete(self) -> None:
        self._repo.delete_branch(self._name)


class FakePullRequest:
    def __init__(self, repo: "FakeRepository", number: int, head: str, base: str) -> None:
        self._repo = repo
        self.number = number
        self.head = head
        self.base = base
        self.state = "open"
        self.merged = False

    def merge(self, merge_method: str = "merge") -> SimpleNamespace:
        return self._repo.merge_pull(self, merge_method)


class FakeRepository:
    """
    Thread-safe in-memory model of the PyGithub Repository calls the
    GitHub service makes.

    Branches hold full file snapshots. Each branch remembers the base
    snapshot it was forked from so squash merges only apply its own
    changes. Failures can be queued per method with fail_next.
    """

    def __init__(self, owner: str = OWNER, base_branch: str = BASE_BRANCH) -> None:
        self.owner = owner
        self.base_branch = base_branch
        self.branches: dict[str, dict[str, bytes]] = {base_branch: {}}
        self.fork_points: dict[str, dict[str, bytes]] = {}
        self.heads: dict[str, str] = {base_branch: self._next_commit_sha()}
        self.commits: list[dict[str, Any]] = []
        self.pulls: dict[int, FakePullRequest] = {}
        self.calls: list[str] = []
        self._failures: dict[str, list[Exception]] = {}
        self._numbers = itertools.count(1)
        self._lock = threading.Lock()

    # Test helpers

    def seed(self, path: str, content: str | bytes, branch: str | None = None) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        self.branches[branch or self.base_branch][path] = data

    def file(self, path: str, branch: str | None = None) -> bytes | None:
        return self.branches.get(branch or self.base_branch, {}).get(path)

    def fail_next(self, method: str, error: Exception, times: int = 1) -> None:
        self._failures.setdefault(method, []).extend([error] * times)

    def count(self, method: str) -> int:
        return self.calls.count(method)

    def _enter(self, method: str) -> None:
        self.calls.append(method)
        queued = self._failures.get(method)
        if queued:
            raise queued.pop(0)

    def _next_commit_sha(self) -> str:
        return uuid4().hex + uuid4().hex[:8]

    def _branch(self, name: str) -> dict[str, bytes]:
        if name not in self.branches:
            raise github_error(404, "Branch not found")
        return self.branches[name]

    def _record_commit(self, branch: str, path: str, message: str) -> str:
        seed = f"{branch}:{path}:{len(self.commits)}"
        sha = hashlib.sha1(seed.encode()).hexdigest()  # noqa: S324
        self.heads[branch] = sha
        self.commits.append(
            {
                "sha": sha,
                "branch": branch,
                "path": path,
                "message": message,
                "date": datetime.now(UTC),
            }
        )
        return sha

    # Repository API

    def get_contents(self, path: str, ref: str | None = None) -> FakeContentFile:
        with self._lock:
            self._enter("get_contents")
            files = self._branch(ref or self.base_branch)
            if path not in files:
                raise github_error(404, "Not Found")
            return FakeContentFile(path, files[path])

    def create_file(
        self, path: str, message: str, content: str | bytes, branch: str | None = None
    ) -> dict[str, Any]:
        with self._lock:
            self._enter("create_file")
            branch = branch or self.base_branch
            files = self._branch(branch)
            if path in files:
                raise github_error(422, "Invalid request.\n\n\"sha\" wasn't supplied.")
            data = content.encode("utf-8") if isinstance(content, str) else content
            files[path] = data
            commit_sha = self._record_commit(branch, path, message)
            return {
                "content": FakeContentFile(path, data),
                "commit": SimpleNamespace(sha=commit_sha),
            }

    def update_file(
        self,
        path: str,
        message: str,
        content: str | bytes,
        sha: str,
        branch: str | None = None,
    ) -> dict[str, Any]:
        with self._lock:
            self._enter("update_file")
            branch = branch or self.base_branch
            files = self._branch(branch)
            if path not in files:
                raise github_error(404, "Not Found")
            if blob_sha(files[path]) != sha:
                raise github_error(409, f"{path} does not match {sha}")
            data = content.encode("utf-8") if isinstance(content, str) else content
            files[path] = data
            commit_sha = self._record_commit(branch, path, message)
            return {
                "content": FakeContentFile(path, data),
                "commit": SimpleNamespace(sha=commit_sha),
            }

    def get_git_ref(self, ref: str) -> FakeGitRef:
        with self._lock:
            self._enter("get_git_ref")
            name = ref.removeprefix("heads/")
            if name not in self.branches:
                raise github_error(404, "Not Found")
            return FakeGitRef(self, name, self.heads[name])

    def create_git_ref(self, ref: str, sha: str) -> FakeGitRef:
        with self._lock:
            self._enter("create_git_ref")
            name = ref.removeprefix("refs/heads/")
            if name in self.branches:
                raise github_error(422, "Reference already exists")
            source = next(b for b, head in self.heads.items() if head == sha)
            self.branches[name] = dict(self.branches[source])
            self.fork_points[name] = dict(self.branches[source])
            self.heads[name] = sha
            return FakeGitRef(self, name, sha)

    def delete_branch(self, name: str) -> None:
        with self._lock:
            self._enter("delete_ref")
            if name not in self.branches:
                raise github_error(422, "Reference does not exist")
            del self.branches[name]
            del self.heads[name]
            self.fork_points.pop(name, None)

    def get_git_tree(self, sha: str, recursive: bool = False) -> SimpleNamespace:
        with self._lock:
            self._enter("get_git_tree")
            files = self._branch(sha)
            dirs: set[str] = set()
            for path in files:
                parts = path.split("/")[:-1]
                dirs.update("/".join(parts[: i + 1]) for i in range(len(parts)))
            elements = [SimpleNamespace(path=d, type="tree") for d in sorted(dirs)]
            elements += [SimpleNamespace(path=p, type="blob") for p in sorted(files)]
            return SimpleNamespace(tree=elements)

    def create_pull(self, base: str, head: str, title: str, body: str) -> FakePullRequest:
        with self._lock:
            self._enter("create_pull")
            if head not in self.branches:
                raise github_error(422, "Validation Failed")
            for pull in self.pulls.values():
                if pull.head == head and pull.state == "open":
                    raise github_error(422, f"A pull request already exists for {OWNER}:{head}.")
            pull = FakePullRequest(self, next(self._numbers), head, base)
            self.pulls[pull.number] = pull
            return pull

    def get_pull(self, number: int) -> FakePullRequest:
        with self._lock:
            self._enter("get_pull")
            if number not in self.pulls:
                raise github_error(404, "Not Found")
            return self.pulls[number]

    def get_pulls(
        self, state: str = "open", head: str | None = None, base: str | None = None
    ) -> list[FakePullRequest]:
        with self._lock:
            self._enter("get_pulls")
            branch = head.split(":", 1)[-1] if head else None
            return [
                pull
                for pull in self.pulls.values()
                if pull.state == state
                and (branch is None or pull.head == branch)
                and (base is None or pull.base == base)
            ]

    def merge_pull(self, pull: FakePullRequest, merge_method: str) -> SimpleNamespace:
        with self._lock:
            self._enter("merge")
            if pull.merged:
                raise github_error(405, "Pull Request is not mergeable")
            head = self._branch(pull.head)
            base = self._branch(pull.base)
            fork = self.fork_points.get(pull.head, {})

            changed = {p: data for p, data in head.items() if fork.get(p) != data}
            for path, data in changed.items():
                if base.get(path) != fork.get(path) and base.get(path) != data:
                    raise github_error(405, "Pull Request is not mergeable")

            base.update(changed)
            sha = self._record_commit(pull.base, ",".join(sorted(changed)), f"PR #{pull.number}")
            pull.merged = True
            pull.state = "closed"
            return SimpleNamespace(merged=True, sha=sha, message="Pull Request successfully merged")

    def get_commits(self, sha: str | None = None, path: str | None = None) -> list[Any]:
        with self._lock:
            self._enter("get_commits")
            branch = sha or self.base_branch
            matching = [
                c
                for c in reversed(self.commits)
                if c["branch"] == branch and (path is None or path in c["path"].split(","))
            ]
            return [
                SimpleNamespace(
                    sha=c["sha"],
                    commit=SimpleNamespace(
                        message=c["message"],
                        author=SimpleNamespace(name="Docs Bot", date=c["date"]),
                    ),
                )
                for c in matching
            ]


@pytest.fixture
def fake_repo() -> FakeRepository:
    """Fake repository seeded with a published index page."""
    repo = FakeRepository()
    repo.seed("docs/index.md", "# Welcome")
    repo.seed("docs/guides/setup.md", "# Setup")
    return repo


@pytest.fixture
def repository_config() -> RepositoryConfig:
    return RepositoryConfig(owner=OWNER, name="handbook", base_branch=BASE_BRANCH)


@pytest.fixture
def github_service(fake_repo: FakeRepository, repository_config: RepositoryConfig) -> GitHubService:
    """GitHub service backed by the fake repository with near-instant backoff."""
    return GitHubService(
        repository_config,
        retry_options=RetryOptions(max_retries=3, base_delay=0.001, max_delay=0.004),
        repository=fake_repo,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for public mode with an admin password."""
    return Settings(
        SECRET_KEY="test-secret-key",
        AUTH={"mode": "public", "admin_password": ADMIN_PASSWORD},
        ADMIN_EMAILS="lead@example.com",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path}/drafts.db",
        GITHUB_TOKEN="test-token",
        GITHUB_OWNER=OWNER,
        GITHUB_REPO="handbook",
        LOG_LEVEL="WARNING",
    )


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine]:
    """Create a file-backed SQLite engine so concurrent sessions behave like production."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(test_engine)


@pytest.fixture
def store(session_factory: async_sessionmaker[AsyncSession]) -> DraftStore:
    return DraftStore(session_factory)


@pytest.fixture
def draft_service(github_service: GitHubService, store: DraftStore) -> DraftService:
    return DraftService(github_service, store)


@pytest.fixture
def document_service(github_service: GitHubService) -> DocumentService:
    return DocumentService(github_service)


@pytest.fixture
def media_service(github_service: GitHubService) -> MediaService:
    return MediaService(github_service, max_upload_size=1024)


@pytest.fixture
def editor() -> Principal:
    return Principal(id="editor-1", email="writer@example.com", name="Writer", role=Role.EDITOR)


@pytest.fixture
def admin() -> Principal:
    return Principal(id="admin", email="lead@example.com", name="Lead", role=Role.ADMIN)


@pytest_asyncio.fixture(scope="function")
async def async_client(
    settings: Settings, github_service: GitHubService, test_engine: AsyncEngine
) -> AsyncGenerator[AsyncClient]:
    """Provide async HTTP client for API testing."""
    app = create_app(settings, github=github_service, engine=test_engine)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def editor_headers(settings: Settings, editor: Principal) -> dict[str, str]:
    """Authorization headers for an editor."""
    return {"Authorization": f"Bearer {create_access_token(editor, settings)}"}


@pytest.fixture
def admin_headers(settings: Settings, admin: Principal) -> dict[str, str]:
    """Authorization headers for an admin."""
    return {"Authorization": f"Bearer {create_access_token(admin, settings)}"}
