"""Synthesis Agent - reduces per-source analyses into one credibility verdict.

The synthesis prompt only ever sees the per-source summaries, scores and
flags, never the raw source documents. That keeps the prompt bounded and
makes the step a pure summary-of-summaries reduction.
"""

from typing import Type

from pydantic import Field

from ..models.analysis import AnalysisResult, Flag, SourceAnalysis
from ..models.base import AgentContext, AgentResult, HireSenseBaseModel, utc_now
from ..models.enums import AgentType, SourceType
from .base import BaseAgent
from .normalization import (
    drop_name_mismatch_flags,
    normalize_flags,
    normalize_questions,
    normalize_score,
    normalize_summary,
)

SCORING_BANDS = """- 90-100: Highly credible, minimal concerns
- 70-89: Generally credible with minor concerns
- 50-69: Moderate concerns, requires attention
- 30-49: Significant red flags, requires investigation
- 0-29: High risk, major credibility issues"""


class SynthesisInput(HireSenseBaseModel):
    """Input for Synthesis Agent."""

    analyses: list[SourceAnalysis] = Field(default_factory=list, description="Per-source results")
    candidate_name: str | None = Field(None, description="Candidate display name")
    candidate_email: str | None = Field(None, description="Candidate email")
    role: str | None = Field(None, description="Role applied for")
    linkedin_is_synthetic: bool = Field(False, description="LinkedIn record is test data")


def render_flags(flags: list[Flag]) -> str:
    if not flags:
        return "None"
    return ", ".join(f"({flag.kind}) {flag.message}" for flag in flags)


class SynthesisAgent(BaseAgent[SynthesisInput, AnalysisResult]):
    """Agent that produces the final cross-referenced credibility verdict."""

    @property
    def agent_type(self) -> AgentType:
        return AgentType.SYNTHESIS

    @property
    def output_schema(self) -> Type[AnalysisResult]:
        return AnalysisResult

    async def synthesize(
        self,
        source_analyses: list[SourceAnalysis],
        candidate_name: str | None,
        candidate_email: str | None,
        role: str | None = None,
        linkedin_is_synthetic: bool = False,
        *,
        context: AgentContext,
    ) -> AnalysisResult:
        """Synthesize a verdict; never raises.

        On failure the fixed degraded verdict is returned and the per-source
        analyses are dropped, which tells callers the reduction itself failed.
        """
        try:
            input_data = SynthesisInput(
                analyses=source_analyses,
                candidate_name=candidate_name,
                candidate_email=candidate_email,
                role=role,
                linkedin_is_synthetic=linkedin_is_synthetic,
            )
            result = await self.execute(input_data, context)
            if not result.success or result.data is None:
                raise RuntimeError(result.error or "synthesis returned no data")
            # Cached verdicts carry the date of the run that produced them
            return result.data.model_copy(update={"analysis_date": utc_now()})
        except Exception as e:
            self.logger.error(
                "synthesis_failed",
                candidate_id=context.candidate_id,
                sources=len(source_analyses),
                error=str(e),
            )
            return AnalysisResult.degraded()

    async def process(
        self, input_data: SynthesisInput, context: AgentContext
    ) -> AgentResult[AnalysisResult]:
        prompt = self._build_prompt(input_data, context)
        raw, metadata = await self._call_reasoning(prompt, context)

        flags = normalize_flags(raw.get("flags"))
        if input_data.linkedin_is_synthetic:
            kept = drop_name_mismatch_flags(flags, linkedin_only=True)
            if len(kept) != len(flags):
                self.logger.info(
                    "synthetic_name_flags_suppressed",
                    candidate_id=context.candidate_id,
                    dropped=len(flags) - len(kept),
                )
            flags = kept

        verdict = AnalysisResult(
            score=normalize_score(raw.get("score")),
            summary=normalize_summary(
                raw.get("summary"), "Analysis completed with available data."
            ),
            flags=flags,
            suggested_questions=normalize_questions(raw.get("suggestedQuestions")),
            sources=input_data.analyses,
        )

        return AgentResult(
            success=True,
            data=verdict,
            tokens_used=metadata.get("tokens_total", 0),
            metadata=metadata,
        )

    def _render_analyses(self, analyses: list[SourceAnalysis]) -> str:
        if not analyses:
            return "No analysis summaries were generated."

        blocks = []
        for analysis in analyses:
            blocks.append(
                f"**Source: {SourceType(analysis.source_type).value.upper()}**\n"
                f"- **Credibility Score:** {analysis.score}\n"
                f"- **Summary:** {analysis.summary}\n"
                f"- **Flags:** {render_flags(analysis.flags)}\n"
            )
        return "\n".join(blocks)

    def _build_prompt(self, input_data: SynthesisInput, context: AgentContext) -> str:
        notes = []
        if input_data.linkedin_is_synthetic:
            notes.append(
                "**IMPORTANT**: LinkedIn data is simulated for testing purposes. "
                "Do not treat name mismatches as red flags."
            )
        if len(input_data.analyses) == 1:
            notes.append(
                "**NOTE**: Only one data source is available, so there is nothing to "
                "cross-reference. Do not report cross-source inconsistencies."
            )
        notes_block = "\n\n".join(notes)

        return f"""You are a credibility-checking assistant inside HireSense, a tool used by hiring managers to verify whether candidates are being honest and consistent in their job applications.

Your job is to review pre-analyzed summaries from different data sources (CV, LinkedIn, GitHub) and produce a final, unified credibility assessment. You are not scoring technical ability, only consistency and believability based on the summaries provided.

**Candidate Information:**
- Name: {input_data.candidate_name or 'Not provided'}
- Email: {input_data.candidate_email or 'Not provided'}
- Role: {input_data.role or 'Not specified'}

**Individual Analysis Summaries:**

{self._render_analyses(input_data.analyses)}

{notes_block}

**Your Tasks:**

1. **Synthesize Findings:** Based *only* on the summaries provided, create a final, overall credibility score and a concise summary.
2. **Cross-Reference:** Look for inconsistencies *between* the summaries. For example, if the CV summary mentions a job that the LinkedIn summary doesn't, that's a flag.
3. **Aggregate Flags:** Combine flags from individual analyses and add new ones for any cross-source inconsistencies you find.
4. **Suggest Questions:** Based on the combined findings and any inconsistencies, suggest 1-3 clarifying questions to ask the candidate.

**Scoring Guidelines:**
{SCORING_BANDS}

**Output Format:**

Return a JSON object with:
{{
  "score": 0-100,
  "summary": "1-2 sentence judgment",
  "flags": [{{"type": "red"|"yellow", "category": "consistency"|"verification"|"authenticity"|"activity", "message": "specific concern", "severity": 1-10}}],
  "suggestedQuestions": ["array of clarifying questions to ask the candidate"]
}}

Be objective. Do not make assumptions. Only work with the summaries provided."""
