"""Error taxonomy for the publish workflow.

``NotFound`` is the only expected error: the release resolver and the file
lookup turn it into control flow. Every other ``PublishError`` aborts the
run and its message is shown to the operator verbatim.
"""

from __future__ import annotations


class PublishError(RuntimeError):
    """Base class for every failure the publish workflow reports."""


class ArtifactUnreadable(PublishError):
    """The local artifact could not be opened or read to completion."""

    def __init__(self, path: object, reason: str = "") -> None:
        self.path = str(path)
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot read artifact {self.path}{detail}")


class ApiRejected(PublishError):
    """The remote API answered with a non-2xx status.

    Carries the numeric status and the raw response body so the
    transcript can show the exact rejection reason.
    """

    def __init__(self, status: int, body: str, *, method: str = "", url: str = "") -> None:
        self.status = status
        self.body = body
        self.method = method
        self.url = url
        super().__init__(
            f"GitHub API rejected the request (status {status}): {body}"
        )


class NotFound(ApiRejected):
    """The remote answered 404 where absence is an expected outcome."""

    def __init__(self, body: str = "", *, method: str = "", url: str = "") -> None:
        super().__init__(404, body, method=method, url=url)


class InvalidEndpoint(PublishError):
    """A request URL could not be built from the given parts."""


class TransportFailure(PublishError):
    """The request never produced a response (network error or timeout)."""


class MalformedResponse(PublishError):
    """A 2xx response body did not have the expected shape."""


class MissingToken(PublishError):
    """No GitHub token was supplied; no remote call is attempted."""

    def __init__(self) -> None:
        super().__init__(
            "No GitHub token configured. Set BREWPUBLISH_GITHUB_TOKEN or pass --token."
        )


class PublishInProgress(PublishError):
    """Another run is already publishing the same repository and tag."""

    def __init__(self, repo: str, tag: str) -> None:
        self.repo = repo
        self.tag = tag
        super().__init__(f"A publish of {repo}@{tag} is already in progress")


class PublishCancelled(PublishError):
    """The run was asked to stop between two steps."""
