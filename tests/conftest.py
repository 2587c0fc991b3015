"""Shared test fixtures for Brewpublish.

``FakeGitHub`` is an in-memory stand-in for the GitHub REST API, served to
the real ``RemoteRepositoryClient`` through ``httpx.MockTransport``. It keeps
releases, assets and repository files, and records every request so tests
can assert on exactly which calls were made.
"""

from __future__ import annotations

import base64
import hashlib
import json
import plistlib
import re
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from brewpublish.config import PublisherConfig
from brewpublish.core.client import RemoteRepositoryClient
from brewpublish.core.orchestrator import PublishOrchestrator
from brewpublish.core.run_lock import RunLockRegistry
from brewpublish.models.request import PackageKind, PublishRequest

API = "https://api.github.com"
UPLOADS = "https://uploads.github.com"

_RELEASES_RE = re.compile(r"^/repos/([^/]+/[^/]+)/releases$")
_RELEASE_TAG_RE = re.compile(r"^/repos/([^/]+/[^/]+)/releases/tags/(.+)$")
_ASSET_RE = re.compile(r"^/repos/([^/]+/[^/]+)/releases/assets/(\d+)$")
_UPLOAD_RE = re.compile(r"^/repos/([^/]+/[^/]+)/releases/(\d+)/assets$")
_CONTENTS_RE = re.compile(r"^/repos/([^/]+/[^/]+)/contents/(.+)$")


def _json(status: int, payload: Any) -> httpx.Response:
    return httpx.Response(status, json=payload)


class FakeGitHub:
    """In-memory GitHub: releases, assets and repository contents."""

    def __init__(self) -> None:
        self.releases: dict[int, dict[str, Any]] = {}
        self.files: dict[tuple[str, str], dict[str, str]] = {}
        self.uploads: dict[int, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.requests: list[httpx.Request] = []
        # timeout extension of each request, in request order
        self.timeouts: list[dict[str, float | None]] = []
        # (method, path) -> (status, body) served once instead of the real route
        self.failures: dict[tuple[str, str], tuple[int, str]] = {}
        # (method, path) -> exception raised once instead of answering
        self.transport_errors: dict[tuple[str, str], Exception] = {}
        self.user = {"id": 1, "login": "octo", "name": "Octo Cat", "avatar_url": ""}
        self._next_id = 100

    # ------------------------------------------------------------------
    # Seeding and queries
    # ------------------------------------------------------------------

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def seed_release(self, repo: str, tag: str) -> dict[str, Any]:
        release_id = self._new_id()
        release = {
            "id": release_id,
            "repo": repo,
            "tag_name": tag,
            "name": tag,
            "upload_url": f"{UPLOADS}/repos/{repo}/releases/{release_id}/assets{{?name,label}}",
            "html_url": f"https://github.com/{repo}/releases/tag/{tag}",
            "assets": [],
        }
        self.releases[release_id] = release
        return release

    def seed_asset(self, release: dict[str, Any], name: str, data: bytes = b"old") -> dict[str, Any]:
        asset = {
            "id": self._new_id(),
            "name": name,
            "browser_download_url": (
                f"https://github.com/{release['repo']}/releases/download/"
                f"{release['tag_name']}/{name}"
            ),
        }
        release["assets"].append(asset)
        self.uploads[asset["id"]] = data
        return asset

    def seed_file(self, repo: str, path: str, content: str) -> str:
        sha = hashlib.sha1(content.encode("utf-8")).hexdigest()
        self.files[(repo, path)] = {"sha": sha, "content": content}
        return sha

    def releases_for(self, repo: str, tag: str) -> list[dict[str, Any]]:
        return [
            r for r in self.releases.values() if r["repo"] == repo and r["tag_name"] == tag
        ]

    def file_content(self, repo: str, path: str) -> str | None:
        entry = self.files.get((repo, path))
        return entry["content"] if entry else None

    def count(self, method: str, path_prefix: str = "") -> int:
        return sum(
            1 for m, p in self.calls if m == method and p.startswith(path_prefix)
        )

    def put_bodies(self) -> list[dict[str, Any]]:
        return [
            json.loads(r.content) for r in self.requests if r.method == "PUT"
        ]

    def fail_once(self, method: str, path: str, status: int, body: str) -> None:
        self.failures[(method, path)] = (status, body)

    def raise_once(self, method: str, path: str, exc: Exception) -> None:
        self.transport_errors[(method, path)] = exc

    # ------------------------------------------------------------------
    # Transport entry point
    # ------------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        self.calls.append((method, path))
        self.requests.append(request)
        self.timeouts.append(dict(request.extensions.get("timeout", {})))

        if (method, path) in self.transport_errors:
            raise self.transport_errors.pop((method, path))
        if (method, path) in self.failures:
            status, body = self.failures.pop((method, path))
            return httpx.Response(status, text=body)

        if request.headers.get("Authorization") != "Bearer test-token":
            return _json(401, {"message": "Bad credentials"})

        host = request.url.host
        if host == "uploads.github.com":
            match = _UPLOAD_RE.match(path)
            if method == "POST" and match:
                return self._upload(int(match.group(2)), request)
            return _json(404, {"message": "Not Found"})

        if path == "/user" and method == "GET":
            return _json(200, self.user)

        match = _RELEASES_RE.match(path)
        if match and method == "POST":
            return self._create_release(match.group(1), json.loads(request.content))
        match = _RELEASE_TAG_RE.match(path)
        if match and method == "GET":
            return self._get_release(match.group(1), match.group(2))
        match = _ASSET_RE.match(path)
        if match and method == "DELETE":
            return self._delete_asset(int(match.group(2)))
        match = _CONTENTS_RE.match(path)
        if match and method == "GET":
            return self._get_file(match.group(1), match.group(2))
        if match and method == "PUT":
            return self._put_file(match.group(1), match.group(2), json.loads(request.content))

        return _json(404, {"message": "Not Found"})

    # ------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------

    def _public(self, release: dict[str, Any]) -> dict[str, Any]:
        data = {k: v for k, v in release.items() if k != "repo"}
        data["assets"] = [dict(a) for a in release["assets"]]
        return data

    def _create_release(self, repo: str, body: dict[str, Any]) -> httpx.Response:
        tag = body["tag_name"]
        if self.releases_for(repo, tag):
            return _json(
                422,
                {"message": "Validation Failed", "errors": [{"code": "already_exists"}]},
            )
        return _json(201, self._public(self.seed_release(repo, tag)))

    def _get_release(self, repo: str, tag: str) -> httpx.Response:
        found = self.releases_for(repo, tag)
        if not found:
            return _json(404, {"message": "Not Found"})
        return _json(200, self._public(found[0]))

    def _upload(self, release_id: int, request: httpx.Request) -> httpx.Response:
        release = self.releases.get(release_id)
        if release is None:
            return _json(404, {"message": "Not Found"})
        name = request.url.params.get("name", "")
        if any(a["name"] == name for a in release["assets"]):
            return _json(
                422,
                {"message": "Validation Failed", "errors": [{"code": "already_exists"}]},
            )
        asset = self.seed_asset(release, name, request.content)
        return _json(201, asset)

    def _delete_asset(self, asset_id: int) -> httpx.Response:
        for release in self.releases.values():
            for asset in release["assets"]:
                if asset["id"] == asset_id:
                    release["assets"].remove(asset)
                    self.uploads.pop(asset_id, None)
                    return httpx.Response(204)
        return _json(404, {"message": "Not Found"})

    def _get_file(self, repo: str, path: str) -> httpx.Response:
        entry = self.files.get((repo, path))
        if entry is None:
            return _json(404, {"message": "Not Found"})
        return _json(
            200,
            {
                "name": path.rsplit("/", 1)[-1],
                "path": path,
                "sha": entry["sha"],
                "content": base64.b64encode(entry["content"].encode()).decode(),
            },
        )

    def _put_file(self, repo: str, path: str, body: dict[str, Any]) -> httpx.Response:
        entry = self.files.get((repo, path))
        sha = body.get("sha")
        if entry is not None and sha is None:
            return _json(422, {"message": "Invalid request.\n\n\"sha\" wasn't supplied."})
        if entry is not None and sha != entry["sha"]:
            return _json(409, {"message": f"{path} does not match {sha}"})
        content = base64.b64decode(body["content"]).decode("utf-8")
        new_sha = self.seed_file(repo, path, content)
        status = 201 if entry is None else 200
        return _json(status, {"content": {"path": path, "sha": new_sha}})


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide a fresh in-memory GitHub."""
    return FakeGitHub()


@pytest.fixture
def client(fake_github: FakeGitHub) -> RemoteRepositoryClient:
    """Provide a client whose requests are served by ``fake_github``."""
    return RemoteRepositoryClient(
        "test-token",
        api_base_url=API,
        transport=httpx.MockTransport(fake_github.handler),
    )


@pytest.fixture
def locks() -> RunLockRegistry:
    """Provide a run-lock registry private to the test."""
    return RunLockRegistry()


@pytest.fixture
def publisher_config() -> PublisherConfig:
    """Provide a config that ignores the environment and any .env file."""
    return PublisherConfig(_env_file=None, github_token="test-token")


@pytest.fixture
def orchestrator(
    client: RemoteRepositoryClient,
    locks: RunLockRegistry,
    publisher_config: PublisherConfig,
) -> PublishOrchestrator:
    """Provide an orchestrator wired to the fake GitHub."""
    return PublishOrchestrator(client, config=publisher_config, locks=locks)


def write_zip(path: Path, info_plist: dict[str, Any] | None = None, app_name: str = "MyApp") -> Path:
    """Write a small zip archive, optionally with an app bundle Info.plist."""
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("README.txt", "hello")
        if info_plist is not None:
            archive.writestr(
                f"{app_name}.app/Contents/Info.plist", plistlib.dumps(info_plist)
            )
    return path


@pytest.fixture
def make_artifact(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write a zip archive into the temp directory."""

    def _factory(
        name: str = "x.zip",
        info_plist: dict[str, Any] | None = None,
        app_name: str = "MyApp",
    ) -> Path:
        return write_zip(tmp_path / name, info_plist, app_name)

    return _factory


@pytest.fixture
def make_request(make_artifact: Callable[..., Path]) -> Callable[..., PublishRequest]:
    """Factory fixture: build a PublishRequest with sensible defaults."""

    def _factory(**overrides: Any) -> PublishRequest:
        defaults: dict[str, Any] = {
            "package_name": "mytool",
            "version": "1.2.0",
            "description": "A tool",
            "homepage": "https://example.com",
            "owner": "octo",
            "source_repo": "mytool",
            "tap_repo": "homebrew-tap",
            "kind": PackageKind.FORMULA,
        }
        defaults.update(overrides)
        if "artifact_path" not in defaults:
            defaults["artifact_path"] = make_artifact()
        return PublishRequest(**defaults)

    return _factory
