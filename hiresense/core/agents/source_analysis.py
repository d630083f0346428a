"""Source Analysis Agent - scores a single candidate data source in isolation."""

import json
from typing import Any, Type

from pydantic import Field

from ..models.analysis import SourceAnalysis
from ..models.base import AgentContext, AgentResult, HireSenseBaseModel
from ..models.enums import AgentType, SourceType
from .base import BaseAgent
from .normalization import (
    drop_name_mismatch_flags,
    normalize_flags,
    normalize_score,
    normalize_summary,
)

# What "authentic and professional" looks like differs per channel
SOURCE_GUIDANCE: dict[SourceType, str] = {
    SourceType.CV: (
        "Check that dates, job titles and employers form a plausible timeline, "
        "that claimed skills are backed by described work, and that the document "
        "does not read as templated or padded."
    ),
    SourceType.LINKEDIN: (
        "Check that the profile looks maintained by a real person: consistent "
        "positions and dates, a believable network size, and a headline that "
        "matches the listed experience."
    ),
    SourceType.GITHUB: (
        "Check for genuine, sustained activity: original repositories rather than "
        "only forks, meaningful descriptions, and contribution levels that match "
        "the account's age."
    ),
}


class SourceAnalysisInput(HireSenseBaseModel):
    """Input for Source Analysis Agent."""

    source_type: SourceType = Field(..., description="Source being analyzed")
    document: dict[str, Any] = Field(..., description="Raw source payload")
    candidate_name: str | None = Field(None, description="Candidate display name")
    synthetic: bool = Field(False, description="Payload is simulated test data")


class SourceAnalysisAgent(BaseAgent[SourceAnalysisInput, SourceAnalysis]):
    """Agent that analyzes one data source (CV, LinkedIn or GitHub)."""

    @property
    def agent_type(self) -> AgentType:
        return AgentType.SOURCE_ANALYSIS

    @property
    def output_schema(self) -> Type[SourceAnalysis]:
        return SourceAnalysis

    async def analyze(
        self,
        source_type: SourceType | str,
        source_document: dict[str, Any],
        candidate_name: str | None = None,
        *,
        context: AgentContext,
        synthetic: bool = False,
    ) -> SourceAnalysis:
        """Analyze one source; never raises.

        Any provider, transport or parsing failure is turned into the fixed
        degraded analysis for that source so the rest of the run continues.
        """
        source_type = SourceType(source_type)
        try:
            input_data = SourceAnalysisInput(
                source_type=source_type,
                document=source_document,
                candidate_name=candidate_name,
                synthetic=synthetic,
            )
            result = await self.execute(input_data, context)
            if not result.success or result.data is None:
                raise RuntimeError(result.error or "source analysis returned no data")
            return result.data
        except Exception as e:
            self.logger.warning(
                "source_analysis_degraded",
                candidate_id=context.candidate_id,
                source=source_type.value,
                error=str(e),
            )
            return SourceAnalysis.degraded(source_type)

    async def process(
        self, input_data: SourceAnalysisInput, context: AgentContext
    ) -> AgentResult[SourceAnalysis]:
        prompt = self._build_prompt(input_data, context)
        raw, metadata = await self._call_reasoning(prompt, context)

        label = SourceType(input_data.source_type).value.upper()
        flags = normalize_flags(raw.get("flags"))
        if input_data.synthetic:
            # Simulated records carry placeholder names
            flags = drop_name_mismatch_flags(flags)

        analysis = SourceAnalysis(
            source_type=input_data.source_type,
            score=normalize_score(raw.get("score")),
            summary=normalize_summary(
                raw.get("summary"), f"No summary could be generated for the {label}."
            ),
            flags=flags,
        )

        return AgentResult(
            success=True,
            data=analysis,
            tokens_used=metadata.get("tokens_total", 0),
            metadata=metadata,
        )

    def _build_prompt(self, input_data: SourceAnalysisInput, context: AgentContext) -> str:
        source_type = SourceType(input_data.source_type)
        label = source_type.value.upper()
        synthetic_note = (
            "\nNOTE: This data is simulated for testing purposes. "
            "Do not treat a name mismatch with the candidate as a flag.\n"
            if input_data.synthetic
            else ""
        )

        return f"""You are a credibility-checking assistant. Your task is to analyze a single data source for a candidate and provide a summary, a credibility score (0-100), and any potential flags.

**Candidate Name:** {input_data.candidate_name or 'Not provided'}
**Data Source Type:** {label}
{synthetic_note}
**Data:**
{json.dumps(input_data.document, sort_keys=True)}

**Your Tasks:**
1. Analyze the provided {label} data for signs of authenticity and professionalism. {SOURCE_GUIDANCE[source_type]}
2. Identify any red or yellow flags (e.g., inconsistencies, low-quality content, fake-looking profile).
3. Provide a credibility score for this specific data source (0-100).
4. Write a concise summary of your findings.

**Output Format:**
Return a JSON object with:
{{
  "score": 0-100,
  "summary": "1-2 sentence summary of this source.",
  "flags": [{{"type": "red"|"yellow", "category": "...", "message": "...", "severity": 1-10}}]
}}"""
