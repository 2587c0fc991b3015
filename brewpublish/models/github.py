"""Records parsed from GitHub REST API responses.

Only the fields the publish workflow reads are declared; everything else in
the response body is ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AssetRecord(BaseModel):
    """A binary file attached to a release."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    browser_download_url: str


class ReleaseRecord(BaseModel):
    """A tagged release and the assets currently attached to it.

    ``upload_url`` is a URI template such as
    ``https://uploads.github.com/repos/o/r/releases/1/assets{?name,label}``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    tag_name: str = ""
    upload_url: str
    html_url: str = ""
    assets: list[AssetRecord] = []

    def find_asset(self, name: str) -> AssetRecord | None:
        """Return the first attached asset whose name matches exactly."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


class RepositoryFileRecord(BaseModel):
    """A file in a repository; ``sha`` is the token required to overwrite it."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: str
    sha: str
    name: str = ""


class GitHubUser(BaseModel):
    """The account a token authenticates as."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    login: str
    name: str | None = None
    avatar_url: str = ""
