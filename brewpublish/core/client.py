"""Typed async client for the GitHub release, asset and contents endpoints.

Every operation is a single HTTP exchange with bearer-token authorization.
Each call opens its own ``httpx.AsyncClient``, so an instance holds nothing
but its construction parameters and can be shared by concurrent runs.

Status handling is done here, not by callers: a non-2xx response becomes
``ApiRejected`` (or ``NotFound`` for 404) carrying the status and raw body.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from brewpublish.config import PublisherConfig
from brewpublish.core.errors import (
    ApiRejected,
    InvalidEndpoint,
    MalformedResponse,
    MissingToken,
    NotFound,
    TransportFailure,
)
from brewpublish.core.hasher import read_artifact
from brewpublish.models.github import (
    AssetRecord,
    GitHubUser,
    ReleaseRecord,
    RepositoryFileRecord,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_REPO_SLUG_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

DEFAULT_RELEASE_BODY = "Released via brewpublish"


class RemoteRepositoryClient:
    """GitHub REST client used by every publish step.

    Parameters
    ----------
    token:
        Bearer token. An empty token raises ``MissingToken`` immediately.
    api_base_url:
        Root of the REST API, ``https://api.github.com`` by default.
    timeout:
        Per-request timeout in seconds for JSON endpoints.
    upload_timeout:
        Per-request timeout in seconds for asset uploads.
    transport:
        Optional httpx transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        token: str,
        *,
        api_base_url: str = "https://api.github.com",
        api_version: str = "2022-11-28",
        user_agent: str = "brewpublish",
        timeout: float = 30.0,
        upload_timeout: float = 300.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not token or not token.strip():
            raise MissingToken()
        self._token = token.strip()
        self._base_url = self._validate_base_url(api_base_url)
        self._api_version = api_version
        self._user_agent = user_agent
        self._timeout = timeout
        self._upload_timeout = upload_timeout
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: PublisherConfig,
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> RemoteRepositoryClient:
        """Build a client from ``PublisherConfig``; ``token`` overrides the config."""
        return cls(
            token if token is not None else config.github_token,
            api_base_url=config.api_base_url,
            api_version=config.api_version,
            user_agent=config.user_agent,
            timeout=config.request_timeout_seconds,
            upload_timeout=config.upload_timeout_seconds,
            transport=transport,
        )

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def create_release(
        self,
        repo: str,
        tag: str,
        *,
        name: str | None = None,
        body: str = DEFAULT_RELEASE_BODY,
    ) -> ReleaseRecord:
        """Create a published (non-draft, non-prerelease) release for ``tag``."""
        url = self._repo_url(repo, "releases")
        payload = {
            "tag_name": tag,
            "name": name or tag,
            "body": body,
            "draft": False,
            "prerelease": False,
        }
        response = await self._request("POST", url, json=payload)
        return self._decode(response, ReleaseRecord)

    async def get_release_by_tag(self, repo: str, tag: str) -> ReleaseRecord:
        """Fetch the release for ``tag``; raises ``NotFound`` if there is none."""
        url = self._repo_url(repo, "releases", "tags", tag)
        response = await self._request("GET", url)
        return self._decode(response, ReleaseRecord)

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    async def upload_asset(
        self,
        upload_url: str,
        artifact_path: Path,
        *,
        file_name: str | None = None,
        data: bytes | None = None,
    ) -> AssetRecord:
        """Upload a zip archive to a release's upload endpoint.

        ``upload_url`` is the URI template from the release record; its
        ``{?name,label}`` suffix is dropped and the file name is sent as the
        ``name`` query parameter. When ``data`` is given it is sent as the
        body instead of reading ``artifact_path``.
        """
        endpoint = self.upload_endpoint(upload_url)
        name = file_name or artifact_path.name
        if data is None:
            data = await asyncio.to_thread(read_artifact, artifact_path)

        logger.info("Uploading %s (%d bytes) to %s", name, len(data), endpoint)
        response = await self._request(
            "POST",
            endpoint,
            params={"name": name},
            content=data,
            headers={"Content-Type": "application/zip"},
            timeout=self._upload_timeout,
        )
        return self._decode(response, AssetRecord)

    async def delete_asset(self, repo: str, asset_id: int) -> None:
        """Delete a release asset. An asset that is already gone is not an error."""
        url = self._repo_url(repo, "releases", "assets", str(asset_id))
        try:
            await self._request("DELETE", url)
        except NotFound:
            logger.info("Asset %s in %s was already deleted", asset_id, repo)

    # ------------------------------------------------------------------
    # Repository contents
    # ------------------------------------------------------------------

    async def get_file(self, repo: str, path: str) -> RepositoryFileRecord | None:
        """Return the file's record, or None when the repository has no such file."""
        url = self._contents_url(repo, path)
        try:
            response = await self._request("GET", url)
        except NotFound:
            return None
        data = self._json(response)
        if not isinstance(data, dict):
            raise MalformedResponse(f"{path} in {repo} is not a file")
        data.setdefault("path", path)
        return self._validate(data, RepositoryFileRecord)

    async def put_file(
        self,
        repo: str,
        path: str,
        content_b64: str,
        message: str,
        sha: str | None = None,
    ) -> None:
        """Create or overwrite a file.

        ``sha`` must be the file's current hash when it already exists; the
        remote rejects the write otherwise.
        """
        url = self._contents_url(repo, path)
        payload: dict[str, Any] = {"message": message, "content": content_b64}
        if sha is not None:
            payload["sha"] = sha
        await self._request("PUT", url, json=payload)

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    async def get_authenticated_user(self) -> GitHubUser:
        """Return the account the token belongs to."""
        response = await self._request("GET", f"{self._base_url}/user")
        return self._decode(response, GitHubUser)

    # ------------------------------------------------------------------
    # URL construction
    # ------------------------------------------------------------------

    @staticmethod
    def upload_endpoint(upload_url: str) -> str:
        """Strip the URI-template suffix from a release's ``upload_url``."""
        endpoint = upload_url.split("{", 1)[0].strip()
        try:
            parsed = httpx.URL(endpoint)
        except httpx.InvalidURL as exc:
            raise InvalidEndpoint(f"Malformed upload URL {upload_url!r}: {exc}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise InvalidEndpoint(f"Malformed upload URL {upload_url!r}")
        return endpoint

    @staticmethod
    def _validate_base_url(base_url: str) -> str:
        try:
            parsed = httpx.URL(base_url)
        except httpx.InvalidURL as exc:
            raise InvalidEndpoint(f"Malformed API base URL {base_url!r}: {exc}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise InvalidEndpoint(f"Malformed API base URL {base_url!r}")
        return base_url.rstrip("/")

    def _repo_url(self, repo: str, *segments: str) -> str:
        if not _REPO_SLUG_RE.match(repo):
            raise InvalidEndpoint(f"Repository must look like 'owner/name', got {repo!r}")
        if any(not segment for segment in segments):
            raise InvalidEndpoint(f"Empty path segment in request for {repo}")
        tail = "/".join(quote(segment, safe="") for segment in segments)
        return f"{self._base_url}/repos/{repo}/{tail}"

    def _contents_url(self, repo: str, path: str) -> str:
        parts = [part for part in path.split("/") if part]
        if not parts:
            raise InvalidEndpoint(f"Empty file path for {repo}")
        return self._repo_url(repo, "contents", *parts)

    # ------------------------------------------------------------------
    # Exchange
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self._api_version,
            "User-Agent": self._user_agent,
        }

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: dict[str, Any] | None = None,
        content: bytes | None = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Send one request and translate its outcome into the error taxonomy."""
        request_headers = self._headers()
        if headers:
            request_headers.update(headers)

        logger.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=httpx.Timeout(timeout or self._timeout),
            ) as client:
                response = await client.request(
                    method,
                    url,
                    json=json,
                    content=content,
                    params=params,
                    headers=request_headers,
                )
        except httpx.InvalidURL as exc:
            raise InvalidEndpoint(f"Cannot request {url!r}: {exc}") from exc
        except httpx.UnsupportedProtocol as exc:
            raise InvalidEndpoint(f"Cannot request {url!r}: {exc}") from exc
        except httpx.TimeoutException as exc:
            raise TransportFailure(f"{method} {url} timed out") from exc
        except httpx.RequestError as exc:
            raise TransportFailure(f"{method} {url} failed: {exc}") from exc

        logger.debug("%s %s -> %d", method, url, response.status_code)
        if response.status_code == 404:
            raise NotFound(response.text, method=method, url=url)
        if not response.is_success:
            raise ApiRejected(
                response.status_code, response.text, method=method, url=url
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse(
                f"Expected JSON from {response.request.url}, got: {response.text[:200]}"
            ) from exc

    @staticmethod
    def _validate(data: Any, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise MalformedResponse(
                f"Unexpected {model.__name__} payload: {exc}"
            ) from exc

    def _decode(self, response: httpx.Response, model: type[ModelT]) -> ModelT:
        return self._validate(self._json(response), model)
