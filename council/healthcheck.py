"""Member health checks: ping each roster model before running a council."""

import asyncio
import logging

from council.models import ChatOptions, CouncilMember
from council.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

_PING_MESSAGES = [{"role": "user", "content": "Reply with the word OK only."}]
_PING_OPTIONS = ChatOptions(temperature=0.0, max_tokens=16)
_TIMEOUT_SEC = 15.0


async def _check_one(registry: ProviderRegistry, member: CouncilMember) -> tuple[bool, str]:
    """Ping a single member's model. Returns (ok, error_message)."""
    provider = registry.get(member.provider)
    if provider is None:
        logger.warning("Health check %s: unknown provider '%s'", member.name, member.provider)
        return False, f"unknown provider '{member.provider}'"
    try:
        await asyncio.wait_for(
            provider.invoke(member.model, _PING_MESSAGES, _PING_OPTIONS),
            timeout=_TIMEOUT_SEC,
        )
        return True, ""
    except Exception as exc:
        err = str(exc) or type(exc).__name__
        logger.warning("Health check %s (%s/%s) failed: %s", member.name, member.provider, member.model, err)
        return False, err


async def run_health_checks(
    registry: ProviderRegistry,
    members: list[CouncilMember],
) -> dict[CouncilMember, tuple[bool, str]]:
    """Ping all members in parallel.

    Returns:
        Dict mapping each member (name, provider, model) -> (ok, error_message).
        error_message is "" when ok is True. A chairman sharing a member's name
        but not its model gets its own entry.
    """
    results = await asyncio.gather(*(_check_one(registry, m) for m in members))
    return dict(zip(members, results))
