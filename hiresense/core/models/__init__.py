"""HireSense data models for candidates, sources and credibility analyses."""

from .analysis import AnalysisResult, Flag, SourceAnalysis
from .audit import AgentTrace
from .base import (
    AgentContext,
    AgentResult,
    HireSenseBaseModel,
    IdentifiedSchema,
    TimestampSchema,
    utc_now,
)
from .candidate import (
    BaseSourceRecord,
    Candidate,
    CvRecord,
    GitHubRecord,
    LinkedInRecord,
    SourceRecord,
)
from .enums import AgentType, FlagKind, SourceType

__all__ = [
    # Base
    "HireSenseBaseModel",
    "IdentifiedSchema",
    "TimestampSchema",
    "AgentContext",
    "AgentResult",
    "utc_now",
    # Enums
    "AgentType",
    "FlagKind",
    "SourceType",
    # Candidate
    "Candidate",
    "BaseSourceRecord",
    "CvRecord",
    "LinkedInRecord",
    "GitHubRecord",
    "SourceRecord",
    # Analysis
    "Flag",
    "SourceAnalysis",
    "AnalysisResult",
    # Audit
    "AgentTrace",
]
