"""Stage 3: chairman synthesis, plus conversation title generation."""

import logging

from config.config_loader import PromptsConfig
from council.fanout import query_member
from council.models import (
    CHAIRMAN_FAILED_TEXT,
    ChatOptions,
    CouncilMember,
    FinalAnswer,
    IndividualResponse,
    PeerRanking,
)
from council.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "New Conversation"
_MAX_TITLE_LEN = 50


def _format_stage1(stage1_results: list[IndividualResponse]) -> str:
    return "\n\n".join(
        f"Member: {r.member} ({r.provider}/{r.model})\nResponse: {r.response}"
        for r in stage1_results
    )


def _format_stage2(peer_rankings: list[PeerRanking]) -> str:
    return "\n\n".join(f"Member: {r.member}\nRanking: {r.ranking}" for r in peer_rankings)


def build_chairman_prompt(
    user_query: str,
    stage1_results: list[IndividualResponse],
    peer_rankings: list[PeerRanking],
    prompts: PromptsConfig,
) -> str:
    return prompts.chairman.format(
        question=user_query,
        stage1_text=_format_stage1(stage1_results),
        stage2_text=_format_stage2(peer_rankings),
    )


async def stage3_synthesize_final(
    user_query: str,
    stage1_results: list[IndividualResponse],
    peer_rankings: list[PeerRanking],
    chairman: CouncilMember,
    registry: ProviderRegistry,
    prompts: PromptsConfig,
    options: ChatOptions,
) -> FinalAnswer:
    """Make exactly one chairman call and return its answer.

    A failed call is reported as a FinalAnswer carrying the chairman's identity
    and CHAIRMAN_FAILED_TEXT; this never raises.
    """
    logger.info("Stage 3: %s synthesizing final answer", chairman.name)

    prompt = build_chairman_prompt(user_query, stage1_results, peer_rankings, prompts)
    response = await query_member(
        registry, chairman, [{"role": "user", "content": prompt}], options
    )

    if response is None:
        logger.error("Chairman %s failed to respond", chairman.name)
        response = CHAIRMAN_FAILED_TEXT
    else:
        logger.info("Stage 3 complete")

    return FinalAnswer(
        chairman=chairman.name,
        model=chairman.model,
        provider=chairman.provider,
        response=response,
    )


def clean_title(raw: str) -> str:
    """Strip quotes and cap the title at 50 characters."""
    title = raw.strip().replace('"', "").replace("'", "")
    if len(title) > _MAX_TITLE_LEN:
        title = title[: _MAX_TITLE_LEN - 3] + "..."
    return title


async def generate_conversation_title(
    user_query: str,
    title_member: CouncilMember,
    registry: ProviderRegistry,
    prompts: PromptsConfig,
    options: ChatOptions,
) -> str:
    """Ask a fast model for a 3-5 word title. Falls back to DEFAULT_TITLE."""
    prompt = prompts.title.format(question=user_query)
    response = await query_member(
        registry, title_member, [{"role": "user", "content": prompt}], options
    )
    if response is None:
        return DEFAULT_TITLE
    return clean_title(response) or DEFAULT_TITLE
