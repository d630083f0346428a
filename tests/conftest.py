"""Shared fixtures: a scripted reasoning client and sample candidates."""

import asyncio
import copy
import re
from typing import Any

import pytest

from hiresense.core.models.base import AgentContext
from hiresense.core.models.candidate import Candidate, CvRecord, GitHubRecord, LinkedInRecord

SYNTHESIS_MARKER = "Individual Analysis Summaries"
_SOURCE_TYPE = re.compile(r"\*\*Data Source Type:\*\* (\w+)")


class StubReasoningClient:
    """Deterministic stand-in for ReasoningClient.

    Responses are scripted per source ("cv", "linkedin", "github") and for
    the synthesis step. A scripted exception is raised instead of returned.
    """

    def __init__(
        self,
        sources: dict[str, Any] | None = None,
        synthesis: Any = None,
        delays: dict[str, float] | None = None,
    ):
        self.sources = sources or {}
        self.synthesis = {} if synthesis is None else synthesis
        self.delays = delays or {}
        self.prompts: dict[str, str] = {}
        self.calls: list[str] = []

    async def complete_json(self, prompt, model=None, temperature=None):
        if SYNTHESIS_MARKER in prompt:
            key = "synthesis"
            response = self.synthesis
        else:
            key = _SOURCE_TYPE.search(prompt).group(1).lower()
            response = self.sources.get(key, {})

        self.prompts[key] = prompt
        if self.delays.get(key):
            await asyncio.sleep(self.delays[key])
        self.calls.append(key)

        if isinstance(response, BaseException):
            raise response
        return copy.deepcopy(response), {"tokens_total": 42, "model": model or "stub-model"}


@pytest.fixture
def make_client():
    return StubReasoningClient


@pytest.fixture
def context():
    return AgentContext(candidate_id="cand-1", config={})


@pytest.fixture
def cv_record():
    return CvRecord(
        name="Ada Lovelace",
        email="ada@example.com",
        work_experience=[{"company": "Analytical Engines Ltd", "title": "Engineer", "start": "2019"}],
        skills=["python", "mathematics"],
    )


@pytest.fixture
def linkedin_record():
    return LinkedInRecord(
        name="Ada Lovelace",
        headline="Engineer at Analytical Engines Ltd",
        experience=[{"company": "Analytical Engines Ltd", "title": "Engineer"}],
        connections=340,
    )


@pytest.fixture
def github_record():
    return GitHubRecord(login="ada", name="Ada Lovelace", public_repos=40, followers=120)


@pytest.fixture
def make_candidate(cv_record, linkedin_record, github_record):
    def factory(cv=True, linkedin=True, github=True, **overrides):
        data = {
            "id": "cand-1",
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "role": "Backend Engineer",
            "cv_data": cv_record if cv else None,
            "li_data": linkedin_record if linkedin else None,
            "gh_data": github_record if github else None,
        }
        data.update(overrides)
        return Candidate(**data)

    return factory
