"""Publisher configuration, read from the environment.

Centralized config using pydantic-settings. Reads from a .env file and
BREWPUBLISH_* environment variables. The GitHub token is the credential
source for every remote call.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class PublisherConfig(BaseSettings):
    """Publisher configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BREWPUBLISH_GITHUB_TOKEN=ghp_xxx
        export BREWPUBLISH_LOG_LEVEL=DEBUG
        export BREWPUBLISH_STRICT_FILE_LOOKUP=false

    Or via .env file::

        BREWPUBLISH_GITHUB_TOKEN=ghp_xxx
        BREWPUBLISH_DEFAULT_TAP_REPO=homebrew-tools
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BREWPUBLISH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Credentials
    github_token: str = ""

    # Remote API
    api_base_url: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    user_agent: str = "brewpublish"
    request_timeout_seconds: float = 30.0
    upload_timeout_seconds: float = 300.0

    # Publish defaults
    default_tap_repo: str = "homebrew-tap"
    release_body: str = "Released via brewpublish"

    # Abort the run when the tap file lookup fails for a reason other than 404.
    # When false the failure is logged and the file is written as new.
    strict_file_lookup: bool = True

    log_level: str = "INFO"

    @property
    def has_token(self) -> bool:
        """Whether a non-blank token is configured."""
        return bool(self.github_token.strip())


# Module-level singleton; import as `from brewpublish.config import config`
config = PublisherConfig()
