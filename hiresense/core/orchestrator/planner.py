"""SourceAggregationPlanner - fans out one source analysis per present source."""

import asyncio

from ..agents.source_analysis import SourceAnalysisAgent
from ..models.analysis import SourceAnalysis
from ..models.base import AgentContext
from ..models.candidate import BaseSourceRecord, Candidate
from ..models.enums import SourceType
from ...observability.logger import get_logger

logger = get_logger(__name__)

# Submission order; downstream prompts and stored results follow it
SOURCE_ORDER: tuple[SourceType, ...] = (SourceType.CV, SourceType.LINKEDIN, SourceType.GITHUB)


class SourceAggregationPlanner:
    """Determines which sources a candidate has and analyzes them concurrently."""

    def __init__(self, source_agent: SourceAnalysisAgent):
        self.source_agent = source_agent

    @staticmethod
    def plan(candidate: Candidate) -> list[tuple[SourceType, BaseSourceRecord]]:
        """Present sources in submission order.

        A record counts as present whenever it is not ``None``, including an
        empty document.
        """
        planned = []
        for source_type in SOURCE_ORDER:
            record = candidate.record_for(source_type)
            if record is not None:
                planned.append((source_type, record))
        return planned

    async def run(self, candidate: Candidate, context: AgentContext) -> list[SourceAnalysis]:
        """Analyze every present source and return results in submission order.

        ``SourceAnalysisAgent.analyze`` never raises, so the join always
        completes with one analysis per planned source.
        """
        planned = self.plan(candidate)

        logger.info(
            "source_fan_out",
            candidate_id=candidate.id,
            sources=[source_type.value for source_type, _ in planned],
        )

        # gather keeps positional order regardless of completion order
        analyses = await asyncio.gather(
            *(
                self.source_agent.analyze(
                    source_type,
                    record.document(),
                    candidate.name,
                    context=context,
                    synthetic=record.is_dummy_data,
                )
                for source_type, record in planned
            )
        )

        return list(analyses)
