"""GitHub storage data models."""

import os

from pydantic import BaseModel, ConfigDict


class StoreConfig(BaseModel):
    """Connection settings for the backing repository, resolved once."""

    model_config = ConfigDict(frozen=True)

    account: str
    repo: str
    token: str | None = None
    branch: str = "main"
    api_url: str = "https://api.github.com/repos"
    raw_url: str = "https://raw.githubusercontent.com"
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """
        Build config from GITHUB_TOKEN, GITHUB_ACCOUNT and GITHUB_REPO.

        Raises:
            KeyError: If the account or repository is not set
        """
        return cls(
            account=os.environ["GITHUB_ACCOUNT"],
            repo=os.environ["GITHUB_REPO"],
            token=os.environ.get("GITHUB_TOKEN") or None,
        )

    @property
    def contents_base(self) -> str:
        return f"{self.api_url}/{self.account}/{self.repo}/contents"

    @property
    def raw_base(self) -> str:
        return f"{self.raw_url}/{self.account}/{self.repo}/{self.branch}"


class FileRecord(BaseModel):
    """File returned by a structured read, with decoded content."""

    name: str
    sha: str
    size: int
    type: str
    encoding: str
    url: str
    html_url: str
    git_url: str
    download_url: str | None
    path: str = ""
    content: str | bytes  # Decoded text, or raw bytes for binary reads
