"""Anonymized labels, the FINAL RANKING parser, and rank aggregation."""

import logging
import re
import string
from decimal import ROUND_HALF_UP, Decimal

from council.models import AggregateRankingEntry, IndividualResponse, PeerRanking

logger = logging.getLogger(__name__)

RANKING_MARKER = "FINAL RANKING:"

_NUMBERED_ENTRY = re.compile(r"\d+\.\s*Response [A-Z]")
_LABEL = re.compile(r"Response [A-Z]")


def _round_rank(value: float) -> float:
    """Two decimals, halves rounded up (1.125 -> 1.13)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def label_for(index: int) -> str:
    """0 -> 'Response A', 1 -> 'Response B', ..."""
    return f"Response {string.ascii_uppercase[index]}"


def assign_labels(stage1_results: list[IndividualResponse]) -> dict[str, str]:
    """Map anonymized labels to member names in Stage 1 order.

    This map is the only way back from a label to a member, so it is built once
    right after Stage 1 and passed along explicitly.

    Raises:
        ValueError: More responses than single-letter labels.
    """
    if len(stage1_results) > len(string.ascii_uppercase):
        raise ValueError(f"Cannot label {len(stage1_results)} responses with single letters")
    return {label_for(i): result.member for i, result in enumerate(stage1_results)}


def _labels_in(region: str) -> list[str]:
    numbered = _NUMBERED_ENTRY.findall(region)
    if numbered:
        return [_LABEL.search(entry).group(0) for entry in numbered]
    return _LABEL.findall(region)


def parse_ranking_from_text(ranking_text: str) -> list[str]:
    """Extract the ordered 'Response X' labels from a reviewer's free-form text.

    Looks after the first FINAL RANKING: marker for a numbered list, then for
    bare labels. Without the marker the same two passes run over the whole
    text, so labels mentioned in the critique prose can leak in. Never raises;
    an unparseable text gives [].
    """
    if not ranking_text:
        return []

    _, marker, after = ranking_text.partition(RANKING_MARKER)
    return _labels_in(after if marker else ranking_text)


def calculate_aggregate_rankings(
    peer_rankings: list[PeerRanking],
    label_to_member: dict[str, str],
) -> list[AggregateRankingEntry]:
    """Average the 1-indexed position each member received across all rankings.

    Labels missing from label_to_member are skipped. Members nobody ranked are
    left out entirely. Lower average_rank is better; ties keep the order in
    which members were first seen.
    """
    member_positions: dict[str, list[int]] = {}

    for ranking in peer_rankings:
        for position, label in enumerate(ranking.parsed_ranking, start=1):
            member = label_to_member.get(label)
            if member is None:
                logger.debug("Ranking by %s references unknown label %s", ranking.member, label)
                continue
            member_positions.setdefault(member, []).append(position)

    aggregate = [
        AggregateRankingEntry(
            member=member,
            average_rank=_round_rank(sum(positions) / len(positions)),
            rankings_count=len(positions),
        )
        for member, positions in member_positions.items()
    ]
    aggregate.sort(key=lambda entry: entry.average_rank)
    return aggregate
