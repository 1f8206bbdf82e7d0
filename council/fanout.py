"""Fan-out executor: one concurrent call per council member, joined on all outcomes."""

import asyncio
import logging

from council.models import ChatMessage, ChatOptions, CouncilMember
from council.providers.base import ProviderError
from council.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


async def query_member(
    registry: ProviderRegistry,
    member: CouncilMember,
    messages: list[ChatMessage],
    options: ChatOptions,
) -> str | None:
    """Call a single member's provider.

    Never raises; returns None on any failure or blank reply.
    """
    provider = registry.get(member.provider)
    if provider is None:
        logger.warning("Member %s uses unknown provider '%s'", member.name, member.provider)
        return None

    try:
        text = await provider.invoke(member.model, messages, options)
    except ProviderError as exc:
        logger.warning("Member %s (%s/%s) failed: %s", member.name, member.provider, member.model, exc)
        return None
    except Exception as exc:
        logger.warning(
            "Member %s (%s/%s) unexpected failure: %s",
            member.name, member.provider, member.model, exc,
        )
        return None

    if not text or not text.strip():
        logger.warning("Member %s (%s/%s) returned empty text", member.name, member.provider, member.model)
        return None
    return text


async def query_members_parallel(
    registry: ProviderRegistry,
    members: list[CouncilMember],
    messages: list[ChatMessage],
    options: ChatOptions,
) -> dict[str, str | None]:
    """Send the same messages to every member concurrently.

    Waits for the slowest call; timeouts belong to the provider adapters.

    Returns:
        Dict mapping member name -> reply text, or None when that member failed.
        Keys follow the order of ``members``.
    """
    if not members:
        return {}

    results = await asyncio.gather(
        *(query_member(registry, m, messages, options) for m in members)
    )
    return {member.name: text for member, text in zip(members, results)}
