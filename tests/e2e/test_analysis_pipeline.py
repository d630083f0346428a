"""End-to-end credibility analysis with a scripted reasoning service."""

import asyncio

from openai import OpenAIError

from hiresense.core.orchestrator.pipeline import AnalysisOrchestrator
from hiresense.core.storage.object_store import CandidateStore
from hiresense.integrations.reasoning_client import ReasoningClient, ReasoningResponseError


def _analyze(orchestrator, candidate):
    return asyncio.run(orchestrator.analyze(candidate))


def test_candidate_without_sources_gets_no_data_verdict(make_client, make_candidate):
    client = make_client()
    result = _analyze(AnalysisOrchestrator(client), make_candidate(cv=False, linkedin=False, github=False))

    assert client.calls == []
    assert result.score == 50
    assert result.sources == []
    [flag] = result.flags
    assert (flag.kind, flag.category, flag.severity) == ("yellow", "verification", 5)
    assert flag.message == "No data sources (CV, LinkedIn, or GitHub) available for analysis."
    assert result.suggested_questions == [
        "Could you provide a CV, LinkedIn profile, or GitHub profile for analysis?"
    ]


def test_full_run_reports_every_source_in_order(make_client, make_candidate):
    client = make_client(
        sources={
            "cv": {"score": 85, "summary": "Consistent CV."},
            "linkedin": {"score": 80, "summary": "Maintained profile."},
            "github": {"score": 90, "summary": "Active account."},
        },
        synthesis={
            "score": 84,
            "summary": "Credible candidate with consistent history.",
            "flags": [],
            "suggestedQuestions": ["What was your biggest project at Analytical Engines?"],
        },
        delays={"cv": 0.03},
    )
    result = _analyze(AnalysisOrchestrator(client), make_candidate())

    assert result.score == 84
    assert [s.source_type for s in result.sources] == ["cv", "linkedin", "github"]
    assert [s.score for s in result.sources] == [85, 80, 90]
    assert client.calls[-1] == "synthesis"
    assert len(client.calls) == 4

    prompt = client.prompts["synthesis"]
    assert prompt.index("**Source: CV**") < prompt.index("**Source: LINKEDIN**") < prompt.index("**Source: GITHUB**")
    assert "Consistent CV." in prompt
    # Raw documents never reach the synthesis step
    assert "Analytical Engines Ltd" not in prompt


def test_malformed_responses_are_bounded(make_client, make_candidate):
    client = make_client(
        sources={
            "cv": {"score": 250, "flags": [{"type": "critical", "severity": 99}]},
            "linkedin": {"score": -5, "flags": "not a list"},
            "github": {"score": "lots"},
        },
        synthesis={"score": 1000, "flags": [{"type": "red", "severity": -3}, 42]},
    )
    result = _analyze(AnalysisOrchestrator(client), make_candidate())

    assert result.score == 100
    assert [s.score for s in result.sources] == [100, 0, 50]
    all_flags = result.flags + [flag for source in result.sources for flag in source.flags]
    assert all_flags
    for flag in all_flags:
        assert flag.kind in ("red", "yellow")
        assert 1 <= flag.severity <= 10


def test_one_failing_source_still_yields_full_result(make_client, make_candidate):
    client = make_client(
        sources={"cv": {"score": 78, "summary": "Plausible CV."}, "github": ReasoningResponseError("garbled")},
        synthesis={"score": 70, "summary": "Partially verified."},
    )
    result = _analyze(AnalysisOrchestrator(client), make_candidate(linkedin=False))

    assert result.summary == "Partially verified."
    assert len(result.sources) == 2
    cv, github = result.sources
    assert cv.score == 78
    assert github.score == 50
    [flag] = github.flags
    assert (flag.kind, flag.category, flag.severity) == ("yellow", "system", 5)
    assert "- **Flags:** (yellow) The GITHUB analysis could not be completed." in client.prompts["synthesis"]


def test_synthesis_failure_discards_source_analyses(make_client, make_candidate):
    client = make_client(
        sources={"cv": {"score": 90}, "github": {"score": 88}},
        synthesis=OpenAIError("service unavailable"),
    )
    result = _analyze(AnalysisOrchestrator(client), make_candidate(linkedin=False))

    assert result.score == 50
    assert result.sources == []
    assert result.summary == "Analysis could not be completed due to technical error."
    assert result.suggested_questions == ["Could you provide additional information about your background?"]


def test_repeated_runs_are_equivalent(make_client, make_candidate):
    responses = {
        "sources": {"cv": {"score": 72, "summary": "Fine."}, "github": {"score": 66, "summary": "Quiet."}},
        "synthesis": {"score": 69, "summary": "Some gaps.", "suggestedQuestions": ["Why the gap in 2021?"]},
    }
    candidate = make_candidate(linkedin=False)

    first = _analyze(AnalysisOrchestrator(make_client(**responses)), candidate)
    second = _analyze(AnalysisOrchestrator(make_client(**responses)), candidate)

    assert first.model_dump(exclude={"analysis_date"}) == second.model_dump(exclude={"analysis_date"})


def test_single_strong_code_profile(make_client, make_candidate):
    client = make_client(
        sources={
            "github": {
                "score": 86,
                "summary": "Forty original repositories and steady contributions.",
                "flags": [{"type": "yellow", "category": "activity", "message": "Few recent commits", "severity": 2}],
            }
        },
        synthesis={
            "score": 82,
            "summary": "Code profile supports the application.",
            "flags": [{"type": "yellow", "category": "activity", "message": "Few recent commits", "severity": 2}],
        },
    )
    result = _analyze(AnalysisOrchestrator(client), make_candidate(cv=False, linkedin=False))

    assert result.score >= 70
    assert result.red_flags == []
    assert len(result.sources) == 1
    assert "Only one data source is available" in client.prompts["synthesis"]


def test_synthetic_linkedin_name_mismatch_is_not_flagged(make_client, make_candidate):
    client = make_client(
        synthesis={
            "score": 75,
            "flags": [
                {"type": "red", "category": "consistency", "message": "Name on LinkedIn differs from CV", "severity": 7}
            ],
        }
    )
    candidate = make_candidate(github=False, li_data={"name": "Test User", "isDummyData": True})
    result = _analyze(AnalysisOrchestrator(client), candidate)

    assert result.flags == []
    assert "LinkedIn data is simulated for testing purposes" in client.prompts["synthesis"]
    assert "simulated for testing" in client.prompts["linkedin"]
    assert "simulated for testing" not in client.prompts["cv"]


def test_unexpected_error_yields_degraded_verdict_with_diagnostic(make_client, make_candidate, monkeypatch):
    orchestrator = AnalysisOrchestrator(make_client())

    async def explode(candidate, context):
        raise RuntimeError("corrupt candidate record")

    monkeypatch.setattr(orchestrator.planner, "run", explode)
    result = _analyze(orchestrator, make_candidate())

    assert result.score == 50
    assert result.sources == []
    assert result.error == "corrupt candidate record"
    assert result.flags[0].message == "Analysis could not be completed due to technical error"


def test_analyze_applicant_persists_analysis_and_score(tmp_path, make_client, make_candidate):
    store = CandidateStore(tmp_path)
    candidate = make_candidate(linkedin=False)
    store.save_candidate(candidate)
    client = make_client(synthesis={"score": 77, "summary": "Consistent."})

    updated = asyncio.run(AnalysisOrchestrator(client, store=store).analyze_applicant(candidate))

    assert updated.score == 77
    assert updated.ai_data.score == 77
    assert candidate.ai_data is None

    stored = store.load_candidate(candidate.id)
    assert stored.score == 77
    assert stored.ai_data.summary == "Consistent."
    assert len(stored.ai_data.sources) == 2
    assert (tmp_path / candidate.id / "traces" / "synthesis").is_dir()


def test_analyze_applicant_without_stored_record_still_returns(tmp_path, make_client, make_candidate):
    store = CandidateStore(tmp_path)
    updated = asyncio.run(
        AnalysisOrchestrator(make_client(), store=store).analyze_applicant(make_candidate())
    )
    assert updated.score == 50
    assert store.load_candidate("cand-1") is None


def test_idempotency_reuses_stored_traces(tmp_path, make_client, make_candidate):
    store = CandidateStore(tmp_path)
    candidate = make_candidate()
    config = {"pipeline": {"idempotency": True}}
    responses = {"sources": {"cv": {"score": 61}}, "synthesis": {"score": 63, "summary": "Cached."}}

    first_client = make_client(**responses)
    first = _analyze(AnalysisOrchestrator(first_client, store=store, config=config), candidate)
    second_client = make_client()
    second = _analyze(AnalysisOrchestrator(second_client, store=store, config=config), candidate)

    assert len(first_client.calls) == 4
    assert second_client.calls == []
    assert second.score == 63
    assert second.summary == "Cached."
    assert [s.score for s in second.sources] == [61, 50, 50]


def test_synthetic_linkedin_source_flags_do_not_reach_synthesis(make_client, make_candidate):
    message = "LinkedIn name does not match the candidate name"
    client = make_client(
        sources={"linkedin": {"score": 65, "flags": [{"type": "red", "category": "consistency", "message": message, "severity": 8}]}},
        synthesis={"score": 72, "summary": "Consistent."},
    )
    candidate = make_candidate(github=False, li_data={"name": "Test User", "isDummyData": True})
    result = _analyze(AnalysisOrchestrator(client), candidate)

    assert [flag.message for source in result.sources for flag in source.flags] == []
    assert message not in client.prompts["synthesis"]


def test_oversized_severity_in_verdict_is_clamped(make_client, make_candidate):
    reply = ReasoningClient.parse_content(
        '{"score": 80, "summary": "Mostly consistent.", '
        '"flags": [{"type": "red", "category": "consistency", "message": "Dates overlap", "severity": 1' + "0" * 400 + "}]}"
    )
    client = make_client(synthesis=reply)
    result = _analyze(AnalysisOrchestrator(client), make_candidate(linkedin=False))

    assert result.score == 80
    assert result.flags[0].severity == 10
    assert len(result.sources) == 2
