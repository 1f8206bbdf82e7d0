"""Tests for council/deliberation.py."""

import logging

from council.deliberation import build_ranking_prompt, stage1_collect_responses, stage2_collect_rankings
from council.models import CouncilMember, IndividualResponse
from council.providers.base import ProviderError
from council.ranking import assign_labels


def _prompt_sent(mock_provider, stage: str) -> str:
    for call in mock_provider.invoke.call_args_list:
        content = call.args[1][-1]["content"]
        if content.startswith(stage):
            return content
    raise AssertionError(f"no {stage} prompt sent")


# --- Stage 1 ---

async def test_stage1_wraps_query_in_peer_template(registry, mock_provider, members, prompts, options):
    await stage1_collect_responses("What is 2+2?", members, registry, prompts, options)
    prompt = _prompt_sent(mock_provider, "STAGE1")
    assert "What is 2+2?" in prompt
    assert "one of 3 council members" in prompt
    assert mock_provider.calls_for("STAGE1") == ["model-a", "model-b", "model-c"]


async def test_stage1_preserves_member_order_minus_failures(registry, mock_provider, prompts, options):
    members = [CouncilMember(n, "mock", f"model-{n}") for n in ["D", "C", "B", "A"]]
    mock_provider.replies["model-C"] = ProviderError("mock", "down")

    results = await stage1_collect_responses("q", members, registry, prompts, options)

    assert [r.member for r in results] == ["D", "B", "A"]
    assert results[0] == IndividualResponse("D", "model-D", "mock", "STAGE1 reply from model-D")


async def test_stage1_all_fail_returns_empty(registry, mock_provider, members, prompts, options):
    for m in members:
        mock_provider.replies[m.model] = ProviderError("mock", "down")
    assert await stage1_collect_responses("q", members, registry, prompts, options) == []


async def test_stage1_quality_gate_warns(registry, mock_provider, members, prompts, options, caplog):
    mock_provider.replies["model-b"] = ProviderError("mock", "down")
    mock_provider.replies["model-c"] = ProviderError("mock", "down")

    with caplog.at_level(logging.WARNING):
        await stage1_collect_responses("q", members, registry, prompts, options)

    assert any("Only 1/3" in msg for msg in caplog.messages)


async def test_stage1_quality_gate_silent_when_enough_respond(registry, members, prompts, options, caplog):
    with caplog.at_level(logging.WARNING):
        await stage1_collect_responses("q", members, registry, prompts, options)
    assert not any("quality is degraded" in msg for msg in caplog.messages)


# --- Stage 2 ---

def _stage1(*pairs: tuple[str, str]) -> list[IndividualResponse]:
    return [IndividualResponse(name, f"model-{name}", "mock", text) for name, text in pairs]


def test_ranking_prompt_is_anonymized(prompts):
    stage1 = _stage1(("Alpha", "Paris."), ("Beta", "Lyon."))
    prompt = build_ranking_prompt("Capital of France?", stage1, assign_labels(stage1), prompts)
    assert "Response A:\nParis." in prompt
    assert "Response B:\nLyon." in prompt
    assert "Alpha" not in prompt
    assert "model-Beta" not in prompt
    assert "Capital of France?" in prompt


async def test_stage2_parses_each_ranking(registry, mock_provider, members, prompts, options):
    stage1 = _stage1(("Alpha", "x"), ("Beta", "y"))
    mock_provider.replies[("model-a", "RANK")] = "B is better.\nFINAL RANKING:\n1. Response B\n2. Response A"
    mock_provider.replies[("model-b", "RANK")] = "FINAL RANKING:\n1. Response A\n2. Response B"

    rankings = await stage2_collect_rankings(
        "q", stage1, assign_labels(stage1), members, registry, prompts, options
    )

    by_member = {r.member: r for r in rankings}
    assert by_member["Alpha"].parsed_ranking == ["Response B", "Response A"]
    assert by_member["Beta"].parsed_ranking == ["Response A", "Response B"]
    assert by_member["Alpha"].ranking.startswith("B is better.")


async def test_stage2_stage1_non_responders_still_rank(registry, mock_provider, members, prompts, options):
    stage1 = _stage1(("Alpha", "x"), ("Beta", "y"))  # Gamma did not answer in Stage 1
    rankings = await stage2_collect_rankings(
        "q", stage1, assign_labels(stage1), members, registry, prompts, options
    )
    assert [r.member for r in rankings] == ["Alpha", "Beta", "Gamma"]
    assert mock_provider.calls_for("RANK") == ["model-a", "model-b", "model-c"]


async def test_stage2_keeps_unparseable_rankings(registry, mock_provider, members, prompts, options):
    stage1 = _stage1(("Alpha", "x"), ("Beta", "y"))
    mock_provider.replies[("model-c", "RANK")] = "They are all fine."
    rankings = await stage2_collect_rankings(
        "q", stage1, assign_labels(stage1), members, registry, prompts, options
    )
    gamma = next(r for r in rankings if r.member == "Gamma")
    assert gamma.parsed_ranking == []
    assert gamma.ranking == "They are all fine."


async def test_stage2_drops_failed_reviewers(registry, mock_provider, members, prompts, options):
    stage1 = _stage1(("Alpha", "x"), ("Beta", "y"))
    mock_provider.replies[("model-b", "RANK")] = ProviderError("mock", "rate limited")
    rankings = await stage2_collect_rankings(
        "q", stage1, assign_labels(stage1), members, registry, prompts, options
    )
    assert [r.member for r in rankings] == ["Alpha", "Gamma"]
