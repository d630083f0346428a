"""Enumeration types for HireSense models."""

from enum import Enum


class SourceType(str, Enum):
    """Candidate data channels, in analysis submission order."""

    CV = "cv"
    LINKEDIN = "linkedin"
    GITHUB = "github"


class FlagKind(str, Enum):
    """Credibility flag colours."""

    RED = "red"
    YELLOW = "yellow"


class AgentType(str, Enum):
    """Agent type identifiers."""

    SOURCE_ANALYSIS = "source_analysis"
    SYNTHESIS = "synthesis"
