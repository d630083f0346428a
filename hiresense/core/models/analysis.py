"""Credibility analysis models: flags, per-source analyses and the final verdict."""

from datetime import datetime

from pydantic import ConfigDict, Field

from .base import HireSenseBaseModel, utc_now
from .enums import FlagKind, SourceType

DEFAULT_SCORE = 50
DEGRADED_SEVERITY = 5

TECHNICAL_ERROR_SUMMARY = "Analysis could not be completed due to technical error."
FOLLOW_UP_QUESTION = "Could you provide additional information about your background?"


class Flag(HireSenseBaseModel):
    """A structured credibility concern."""

    model_config = ConfigDict(frozen=True)

    kind: FlagKind = Field(..., alias="type", description="red or yellow")
    category: str = Field(..., description="Free-form label, e.g. verification, consistency")
    message: str = Field(..., description="Human-readable concern")
    severity: int = Field(..., ge=1, le=10, description="Severity 1-10")


class SourceAnalysis(HireSenseBaseModel):
    """Result of analyzing one data source in isolation."""

    model_config = ConfigDict(frozen=True)

    source_type: SourceType = Field(..., alias="type", description="Analyzed source")
    score: int = Field(DEFAULT_SCORE, ge=0, le=100, description="Credibility of this source alone")
    summary: str = Field("", description="One to two sentence summary")
    flags: list[Flag] = Field(default_factory=list, description="Flags raised for this source")

    @classmethod
    def degraded(cls, source_type: SourceType | str) -> "SourceAnalysis":
        """Fixed result used when the source could not be analyzed."""
        label = SourceType(source_type).value.upper()
        return cls(
            source_type=source_type,
            score=DEFAULT_SCORE,
            summary=f"Analysis of the {label} failed due to a technical error.",
            flags=[
                Flag(
                    kind=FlagKind.YELLOW,
                    category="system",
                    message=f"The {label} analysis could not be completed.",
                    severity=DEGRADED_SEVERITY,
                )
            ],
        )


class AnalysisResult(HireSenseBaseModel):
    """Unified credibility verdict stored on the candidate as ``ai_data``."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(DEFAULT_SCORE, ge=0, le=100, description="Overall credibility score")
    summary: str = Field(..., description="Overall judgment")
    flags: list[Flag] = Field(default_factory=list, description="Merged and cross-source flags")
    suggested_questions: list[str] = Field(
        default_factory=list, alias="suggestedQuestions", description="Clarifying questions"
    )
    analysis_date: datetime = Field(
        default_factory=utc_now, alias="analysisDate", description="Completion time"
    )
    sources: list[SourceAnalysis] = Field(
        default_factory=list, description="Per-source analyses, in submission order"
    )
    error: str | None = Field(None, description="Diagnostic message for unexpected failures")

    @classmethod
    def degraded(
        cls,
        flag_message: str = "Analysis system temporarily unavailable",
        error: str | None = None,
    ) -> "AnalysisResult":
        """Fixed verdict used when synthesis or the whole run failed."""
        return cls(
            score=DEFAULT_SCORE,
            summary=TECHNICAL_ERROR_SUMMARY,
            flags=[
                Flag(
                    kind=FlagKind.YELLOW,
                    category="verification",
                    message=flag_message,
                    severity=DEGRADED_SEVERITY,
                )
            ],
            suggested_questions=[FOLLOW_UP_QUESTION],
            sources=[],
            error=error or None,
        )

    @classmethod
    def no_data(cls) -> "AnalysisResult":
        """Verdict for a candidate without any data source."""
        return cls(
            score=DEFAULT_SCORE,
            summary="No data sources available for credibility analysis.",
            flags=[
                Flag(
                    kind=FlagKind.YELLOW,
                    category="verification",
                    message="No data sources (CV, LinkedIn, or GitHub) available for analysis.",
                    severity=DEGRADED_SEVERITY,
                )
            ],
            suggested_questions=[
                "Could you provide a CV, LinkedIn profile, or GitHub profile for analysis?"
            ],
            sources=[],
        )

    @property
    def red_flags(self) -> list[Flag]:
        return [flag for flag in self.flags if flag.kind == FlagKind.RED]

    def to_record(self) -> dict:
        """Serialize with wire aliases, as stored in the candidate's ``ai_data``."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
