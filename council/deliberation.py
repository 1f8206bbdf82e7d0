"""Stage 1 (collect answers) and Stage 2 (anonymous peer ranking)."""

import logging

from config.config_loader import PromptsConfig
from council.fanout import query_members_parallel
from council.models import ChatOptions, CouncilMember, IndividualResponse, PeerRanking
from council.providers.registry import ProviderRegistry
from council.ranking import parse_ranking_from_text

logger = logging.getLogger(__name__)

# Quality gate: warn when a panel of 3+ gets fewer than this many Stage 1 answers
_MIN_QUALITY_RESPONSES = 2


async def stage1_collect_responses(
    user_query: str,
    members: list[CouncilMember],
    registry: ProviderRegistry,
    prompts: PromptsConfig,
    options: ChatOptions,
) -> list[IndividualResponse]:
    """Ask every member the question concurrently.

    Returns:
        One IndividualResponse per member that answered, in roster order.
        Members that failed are left out.
    """
    logger.info("Stage 1: collecting responses from %d members", len(members))

    prompt = prompts.stage1.format(question=user_query, member_count=len(members))
    replies = await query_members_parallel(
        registry, members, [{"role": "user", "content": prompt}], options
    )

    stage1_results: list[IndividualResponse] = []
    for member in members:
        reply = replies.get(member.name)
        if reply:
            stage1_results.append(
                IndividualResponse(
                    member=member.name,
                    model=member.model,
                    provider=member.provider,
                    response=reply,
                )
            )
            logger.debug("%s responded", member.name)
        else:
            logger.debug("%s failed", member.name)

    if len(members) >= 3 and 0 < len(stage1_results) < _MIN_QUALITY_RESPONSES:
        logger.warning(
            "WARNING: Only %d/%d members responded in Stage 1. Peer ranking quality is degraded.",
            len(stage1_results),
            len(members),
        )

    logger.info("Stage 1 complete: %d/%d responses", len(stage1_results), len(members))
    return stage1_results


def build_ranking_prompt(
    user_query: str,
    stage1_results: list[IndividualResponse],
    label_to_member: dict[str, str],
    prompts: PromptsConfig,
) -> str:
    """Render the labeled responses into the peer-review prompt. No member names leak in.

    label_to_member was built from stage1_results in order, so labels and
    results pair up by position.
    """
    responses_text = "\n\n".join(
        f"{label}:\n{result.response}" for label, result in zip(label_to_member, stage1_results)
    )
    return prompts.ranking.format(question=user_query, responses=responses_text)


async def stage2_collect_rankings(
    user_query: str,
    stage1_results: list[IndividualResponse],
    label_to_member: dict[str, str],
    members: list[CouncilMember],
    registry: ProviderRegistry,
    prompts: PromptsConfig,
    options: ChatOptions,
) -> list[PeerRanking]:
    """Have every member rank the anonymized Stage 1 answers.

    Members that did not answer in Stage 1 still get to rank.

    Returns:
        One PeerRanking per member that replied, in roster order, whether or
        not a ranking could be parsed from its text.
    """
    logger.info("Stage 2: collecting rankings from %d members", len(members))

    ranking_prompt = build_ranking_prompt(user_query, stage1_results, label_to_member, prompts)
    replies = await query_members_parallel(
        registry, members, [{"role": "user", "content": ranking_prompt}], options
    )

    stage2_results: list[PeerRanking] = []
    for member in members:
        reply = replies.get(member.name)
        if not reply:
            logger.debug("%s failed to rank", member.name)
            continue
        parsed = parse_ranking_from_text(reply)
        if not parsed:
            logger.warning("Could not parse a ranking from %s", member.name)
        stage2_results.append(
            PeerRanking(
                member=member.name,
                model=member.model,
                provider=member.provider,
                ranking=reply,
                parsed_ranking=parsed,
            )
        )

    logger.info("Stage 2 complete: %d/%d rankings", len(stage2_results), len(members))
    return stage2_results
