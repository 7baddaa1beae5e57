"""Configuration management for releasestats."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepoConfig(BaseModel):
    """A repository whose releases are collected."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class RepoDefaults(BaseModel):
    """Values applied to every entry of repos.yaml that leaves them out."""

    owner: str = ""


class RepoEntry(BaseModel):
    """One ``repos`` entry as written in repos.yaml."""

    name: str
    owner: str | None = None


class ReposConfig(BaseModel):
    """Contents of repos.yaml.

    Example::

        defaults:
          owner: daangn
        repos:
          - name: seed-design
          - name: stackflow
            owner: someone-else
    """

    defaults: RepoDefaults = Field(default_factory=RepoDefaults)
    repos: list[RepoEntry] = Field(default_factory=list)

    def get_repos(self) -> list[RepoConfig]:
        """Resolve entries into repositories, filling in the default owner."""
        return [
            RepoConfig(owner=entry.owner or self.defaults.owner, name=entry.name)
            for entry in self.repos
        ]


class Settings(BaseSettings):
    """Settings read from ``RELEASESTATS_*`` variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="RELEASESTATS_",
        env_file=".env",
        extra="ignore",
    )

    github_token: str = ""
    data_dir: Path = Path("data")
    config_dir: Path = Path("config")
    host: str = "127.0.0.1"
    port: int = 3000

    @property
    def repos_file(self) -> Path:
        return self.config_dir / "repos.yaml"

    def load_repos(self) -> list[RepoConfig]:
        """Load the repositories listed in ``config_dir/repos.yaml``.

        Returns:
            Configured repositories, or an empty list when the file is
            missing or empty.

        Raises:
            pydantic.ValidationError: If an entry has no name or the file
                has the wrong shape.
        """
        if not self.repos_file.exists():
            return []

        with open(self.repos_file) as f:
            data = yaml.safe_load(f)

        return ReposConfig.model_validate(data or {}).get_repos()


def get_settings() -> Settings:
    return Settings()
