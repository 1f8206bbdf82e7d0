"""Tests for council/output.py."""

import pytest
from rich.console import Console

import council.output as output
from council.models import (
    AggregateRankingEntry,
    CouncilRunResult,
    FinalAnswer,
    IndividualResponse,
    PeerRanking,
)


@pytest.fixture
def recording_console(monkeypatch) -> Console:
    console = Console(record=True, width=120)
    monkeypatch.setattr(output, "console", console)
    return console


@pytest.fixture
def sample_result() -> CouncilRunResult:
    return CouncilRunResult(
        query="What is 2+2?",
        individual_responses=[
            IndividualResponse("Alpha", "model-a", "groq", "Four. " * 80),
            IndividualResponse("Beta", "model-b", "together", "It is 4."),
        ],
        peer_rankings=[
            PeerRanking("Alpha", "model-a", "groq", "...", ["Response B", "Response A"]),
            PeerRanking("Beta", "model-b", "together", "no idea", []),
        ],
        final_answer=FinalAnswer("Chair", "model-chair", "together", "**4**"),
        label_to_member={"Response A": "Alpha", "Response B": "Beta"},
        aggregate_rankings=[
            AggregateRankingEntry("Beta", 1.0, 1),
            AggregateRankingEntry("Alpha", 2.0, 1),
        ],
    )


def test_response_preview_truncates(sample_result):
    preview = output._response_preview(sample_result.individual_responses[0], words=5)
    assert preview == "Four. Four. Four. Four. Four...."


def test_print_rankings_resolves_labels(recording_console, sample_result):
    output.print_rankings(sample_result)
    text = recording_console.export_text()
    assert "Response B (Beta)" in text
    assert "unparsed" in text
    assert "1.00" in text


def test_print_final_answer_shows_chairman(recording_console, sample_result):
    output.print_final_answer(sample_result)
    text = recording_console.export_text()
    assert "Chairman: Chair (together/model-chair)" in text
    assert "4" in text
