"""Candidate and source record models.

A candidate carries up to three source records. Each record is a variant
tagged by ``source_type``. Payloads come from upstream scrapers and parsers
we do not control, so the declared fields only name the usual keys of each
source and accept any JSON value; extra keys are kept as received.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import ConfigDict, Field

from .analysis import AnalysisResult
from .base import HireSenseBaseModel
from .enums import SourceType


class BaseSourceRecord(HireSenseBaseModel):
    """Common behaviour of all source records."""

    model_config = ConfigDict(extra="allow", str_strip_whitespace=False)

    is_dummy_data: bool = Field(
        False,
        alias="isDummyData",
        description="Provenance marker: record was synthesized for testing",
    )

    def document(self) -> dict[str, Any]:
        """Return the payload sent for analysis.

        Values are kept as received; keys whose value is null are omitted, as
        are the source tag and the provenance marker.
        """
        return self.model_dump(
            mode="json",
            exclude_none=True,
            exclude={"source_type", "is_dummy_data"},
        )

    def is_empty(self) -> bool:
        return not self.document()


class CvRecord(BaseSourceRecord):
    """Parsed CV / resume."""

    source_type: Literal["cv"] = "cv"

    name: Any = None
    email: Any = None
    headline: Any = None
    work_experience: Any = Field(None, description="Positions, usually a list of objects")
    education: Any = None
    skills: Any = Field(None, description="Strings or objects with a name")


class LinkedInRecord(BaseSourceRecord):
    """Professional network profile."""

    source_type: Literal["linkedin"] = "linkedin"

    name: Any = None
    headline: Any = None
    location: Any = None
    experience: Any = None
    education: Any = None
    connections: Any = Field(None, description='Count, or a bucket such as "500+"')


class GitHubRecord(BaseSourceRecord):
    """Code hosting profile."""

    source_type: Literal["github"] = "github"

    login: Any = None
    name: Any = None
    bio: Any = None
    public_repos: Any = None
    followers: Any = None
    repositories: Any = None
    contributions: Any = Field(None, description="Contributions in the last year")


SourceRecord = Annotated[
    Union[CvRecord, LinkedInRecord, GitHubRecord],
    Field(discriminator="source_type"),
]


class Candidate(HireSenseBaseModel):
    """Job applicant as held by the candidate store."""

    id: str = Field(..., min_length=1, description="Stable unique identifier")
    name: str = Field(..., description="Display name")
    email: str | None = Field(None, description="Contact email")
    role: str | None = Field(None, description="Role applied for")

    # None means the source is absent; an empty record is still present
    cv_data: CvRecord | None = Field(None, description="CV record")
    li_data: LinkedInRecord | None = Field(None, description="LinkedIn record")
    gh_data: GitHubRecord | None = Field(None, description="GitHub record")

    ai_data: AnalysisResult | None = Field(None, description="Latest credibility analysis")
    score: int | None = Field(None, ge=0, le=100, description="Score of the latest analysis")

    def record_for(self, source_type: SourceType | str) -> BaseSourceRecord | None:
        return {
            SourceType.CV: self.cv_data,
            SourceType.LINKEDIN: self.li_data,
            SourceType.GITHUB: self.gh_data,
        }[SourceType(source_type)]

    def to_record(self) -> dict[str, Any]:
        """Serialize with wire aliases for storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
