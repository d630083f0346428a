"""AnalysisOrchestrator - runs the credibility analysis for one candidate."""

from typing import Any

from ..agents.source_analysis import SourceAnalysisAgent
from ..agents.synthesis import SynthesisAgent
from ..models.analysis import AnalysisResult
from ..models.base import AgentContext
from ..models.candidate import Candidate
from ..storage.object_store import CandidateStore
from .planner import SourceAggregationPlanner
from ...integrations.reasoning_client import ReasoningClient
from ...observability.logger import get_logger

logger = get_logger(__name__)


class AnalysisOrchestrator:
    """Top-level entry point of the credibility pipeline.

    Every invocation ends in one of three outcomes: the no-data verdict, the
    synthesized verdict (possibly built from degraded per-source analyses),
    or the degraded verdict for unexpected errors. It never raises.
    """

    def __init__(
        self,
        client: ReasoningClient,
        store: CandidateStore | None = None,
        config: dict[str, Any] | None = None,
    ):
        self.store = store
        self.config = config or {}

        self.source_agent = SourceAnalysisAgent(client, store)
        self.synthesis_agent = SynthesisAgent(client, store)
        self.planner = SourceAggregationPlanner(self.source_agent)

    async def analyze(self, candidate: Candidate) -> AnalysisResult:
        """Produce a fresh credibility verdict for the candidate."""
        logger.info("analysis_started", candidate_id=candidate.id)

        try:
            context = AgentContext(candidate_id=candidate.id, config=self.config)

            planned = self.planner.plan(candidate)
            if not planned:
                logger.info("no_data_sources", candidate_id=candidate.id)
                return AnalysisResult.no_data()

            analyses = await self.planner.run(candidate, context)

            linkedin_is_synthetic = bool(candidate.li_data and candidate.li_data.is_dummy_data)
            result = await self.synthesis_agent.synthesize(
                analyses,
                candidate.name,
                candidate.email,
                candidate.role,
                linkedin_is_synthetic,
                context=context,
            )

            logger.info(
                "analysis_completed",
                candidate_id=candidate.id,
                score=result.score,
                sources=len(result.sources),
                flags=len(result.flags),
            )
            return result

        except Exception as e:
            logger.exception("analysis_failed", candidate_id=candidate.id, error=str(e))
            return AnalysisResult.degraded(
                flag_message="Analysis could not be completed due to technical error",
                error=str(e),
            )

    async def analyze_applicant(self, candidate: Candidate) -> Candidate:
        """Analyze the candidate and attach the verdict.

        Returns a copy of the candidate whose ``ai_data`` is replaced by the
        new verdict and whose ``score`` equals the verdict's score. When a
        store is configured both are persisted in a single write.
        """
        result = await self.analyze(candidate)

        if self.store is not None:
            try:
                self.store.save_analysis(candidate.id, result)
            except Exception as e:
                logger.error(
                    "analysis_persist_failed",
                    candidate_id=candidate.id,
                    error=str(e),
                    exc_info=True,
                )

        return candidate.model_copy(update={"ai_data": result, "score": result.score})
