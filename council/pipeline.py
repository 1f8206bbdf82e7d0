"""Council entry point: runs collect -> rank -> synthesize and owns config edits."""

import copy
import logging

from config.config_loader import AppConfig, PromptsConfig
from council.deliberation import stage1_collect_responses, stage2_collect_rankings
from council.models import (
    ALL_MODELS_FAILED_TEXT,
    ERROR_CHAIRMAN,
    ChatOptions,
    CouncilConfig,
    CouncilMember,
    CouncilRunResult,
    FinalAnswer,
)
from council.providers.registry import ProviderRegistry, build_registry
from council.ranking import assign_labels, calculate_aggregate_rankings
from council.roster import MAX_MEMBERS, MIN_MEMBERS, validate_roster
from council.store import CouncilConfigStore, FileKeyValueStore, council_config_from_settings
from council.synthesis import generate_conversation_title, stage3_synthesize_final

logger = logging.getLogger(__name__)


def _all_failed_result(user_query: str) -> CouncilRunResult:
    return CouncilRunResult(
        query=user_query,
        individual_responses=[],
        peer_rankings=[],
        final_answer=FinalAnswer(
            chairman=ERROR_CHAIRMAN,
            model="none",
            provider="none",
            response=ALL_MODELS_FAILED_TEXT,
        ),
        label_to_member={},
        aggregate_rankings=[],
    )


class Council:
    """A council bound to one provider registry and one config store. No module-level state."""

    def __init__(
        self,
        registry: ProviderRegistry,
        store: CouncilConfigStore,
        prompts: PromptsConfig,
        options: ChatOptions | None = None,
        min_members: int = MIN_MEMBERS,
        max_members: int = MAX_MEMBERS,
        title_member: CouncilMember | None = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.prompts = prompts
        self.options = options or ChatOptions()
        self.min_members = min_members
        self.max_members = max_members
        self.title_member = title_member

    @classmethod
    def from_app_config(cls, config: AppConfig, registry: ProviderRegistry | None = None) -> "Council":
        """Wire a Council from settings.yaml: file-backed store, registry from providers."""
        defaults = config.defaults
        title = defaults.title_member
        return cls(
            registry=registry if registry is not None else build_registry(config),
            store=CouncilConfigStore(
                FileKeyValueStore(defaults.store_dir),
                council_config_from_settings(defaults),
            ),
            prompts=config.prompts,
            options=ChatOptions(temperature=defaults.temperature, max_tokens=defaults.max_tokens),
            min_members=defaults.min_members,
            max_members=defaults.max_members,
            title_member=CouncilMember(name=title.name, provider=title.provider, model=title.model),
        )

    # --- configuration -------------------------------------------------

    def get_effective_config(self) -> CouncilConfig:
        return self.store.get_effective()

    def save_config(self, config: CouncilConfig) -> None:
        """Persist a roster edit.

        Raises:
            RosterError: The roster is outside [min_members, max_members] or malformed.
        """
        validate_roster(config, self.min_members, self.max_members)
        self.store.save(config)

    def reset_config(self) -> CouncilConfig:
        return self.store.reset()

    def is_any_provider_configured(self) -> bool:
        return self.registry.is_any_configured()

    def provider_availability(self) -> dict[str, bool]:
        return self.registry.availability()

    # --- pipeline ------------------------------------------------------

    async def run_council(self, user_query: str, config: CouncilConfig | None = None) -> CouncilRunResult:
        """Run Stage 1, peer ranking, aggregation and chairman synthesis.

        The roster is read once and copied up front; edits saved while the run
        is in flight do not affect it. Provider failures only shrink the result
        arrays or swap in sentinel answers; check CouncilRunResult.is_degraded.
        """
        council_config = copy.deepcopy(config if config is not None else self.store.get_effective())
        members = list(council_config.members)
        logger.info(
            "Starting council: %d members, chairman %s", len(members), council_config.chairman.name
        )

        stage1_results = await stage1_collect_responses(
            user_query, members, self.registry, self.prompts, self.options
        )

        if not stage1_results:
            logger.error("All %d members failed in Stage 1; skipping ranking and synthesis", len(members))
            return _all_failed_result(user_query)

        label_to_member = assign_labels(stage1_results)
        logger.debug("Label map: %s", label_to_member)

        peer_rankings = await stage2_collect_rankings(
            user_query,
            stage1_results,
            label_to_member,
            members,
            self.registry,
            self.prompts,
            self.options,
        )

        aggregate_rankings = calculate_aggregate_rankings(peer_rankings, label_to_member)

        final_answer = await stage3_synthesize_final(
            user_query,
            stage1_results,
            peer_rankings,
            council_config.chairman,
            self.registry,
            self.prompts,
            self.options,
        )

        logger.info("Council complete")
        return CouncilRunResult(
            query=user_query,
            individual_responses=stage1_results,
            peer_rankings=peer_rankings,
            final_answer=final_answer,
            label_to_member=label_to_member,
            aggregate_rankings=aggregate_rankings,
        )

    async def generate_title(self, user_query: str) -> str:
        """Short conversation title from the title model, or the chairman if none is set."""
        member = self.title_member or self.store.get_effective().chairman
        return await generate_conversation_title(
            user_query, member, self.registry, self.prompts, self.options
        )
