"""Validation of GitHub release objects into ReleaseRecord."""

from dataclasses import dataclass, field
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from releasestats.models import ReleaseRecord
from releasestats.windows import to_utc


class AuthorPayload(BaseModel):
    """Subset of the release author object."""

    model_config = ConfigDict(extra="ignore")

    login: str
    html_url: str = ""


class AssetPayload(BaseModel):
    """Subset of a release asset object."""

    model_config = ConfigDict(extra="ignore")

    download_count: int = 0


class ReleasePayload(BaseModel):
    """Fields of a GitHub release object the reports rely on."""

    model_config = ConfigDict(extra="ignore")

    id: int
    tag_name: str
    name: str | None = None
    html_url: str = ""
    draft: bool = False
    prerelease: bool = False
    created_at: datetime | None = None
    published_at: datetime | None = None
    target_commitish: str = ""
    author: AuthorPayload | None = None
    assets: list[AssetPayload] = Field(default_factory=list)

    def to_record(self, repository: str) -> ReleaseRecord:
        """Map the validated payload onto the internal record type.

        Args:
            repository: Repository the release belongs to.

        Returns:
            ReleaseRecord with UTC timestamps.
        """
        return ReleaseRecord(
            repository=repository,
            release_id=self.id,
            tag_name=self.tag_name,
            published_at=to_utc(self.published_at) if self.published_at else None,
            is_draft=self.draft,
            is_prerelease=self.prerelease,
            author_name=self.author.login if self.author else None,
            release_name=self.name or "",
            html_url=self.html_url,
            created_at=to_utc(self.created_at) if self.created_at else None,
            target_branch=self.target_commitish,
            asset_count=len(self.assets),
            download_count=sum(a.download_count for a in self.assets),
        )


@dataclass
class IngestResult:
    """Outcome of validating one repository's release objects.

    Attributes:
        records: Releases that passed validation.
        rejected: Short descriptions of objects that failed validation.
    """

    records: list[ReleaseRecord] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)


def ingest_releases(repository: str, items: list[dict]) -> IngestResult:
    """Validate raw release objects, keeping the well-formed ones.

    Args:
        repository: Repository the objects were fetched from.
        items: Raw release objects from the API.

    Returns:
        IngestResult with the mapped records and the rejected entries.
    """
    result = IngestResult()
    for item in items:
        try:
            payload = ReleasePayload.model_validate(item)
        except ValidationError as e:
            ident = item.get("id", "?") if isinstance(item, dict) else "?"
            result.rejected.append(f"release {ident}: {e.error_count()} invalid field(s)")
            continue
        result.records.append(payload.to_record(repository))
    return result
