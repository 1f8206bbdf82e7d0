"""Shared pytest fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from config.config_loader import PromptsConfig
from council.models import ChatMessage, ChatOptions, CouncilConfig, CouncilMember
from council.pipeline import Council
from council.providers.base import ChatProvider
from council.providers.registry import ProviderRegistry
from council.store import CouncilConfigStore, MemoryKeyValueStore

# Each template starts with a stage tag so test doubles can tell the stages apart.
TEST_PROMPTS = PromptsConfig(
    stage1="STAGE1 You are one of {member_count} council members.\nQuestion: {question}",
    ranking="RANK Question: {question}\n\n{responses}\n\nCritique each, then end with FINAL RANKING:",
    chairman="CHAIR Question: {question}\n\n{stage1_text}\n\n{stage2_text}\n\nSynthesize:",
    title="TITLE {question}",
)


def stage_of(messages: list[ChatMessage]) -> str:
    """'STAGE1', 'RANK', 'CHAIR' or 'TITLE' for a prompt built from TEST_PROMPTS."""
    return messages[-1]["content"].split(" ", 1)[0]


class MockProvider(ChatProvider):
    """Test double ChatProvider.

    ``replies`` maps ``(model, stage)`` or ``model`` to a reply string or an
    exception instance to raise. Anything unmapped gets a canned reply.
    """

    def __init__(
        self,
        provider_name: str = "mock",
        replies: dict | None = None,
        configured: bool = True,
    ) -> None:
        self._name = provider_name
        self._configured = configured
        self.replies = dict(replies or {})
        # Shadow the class method with an AsyncMock at the instance level.
        # ABC check passes because invoke is defined in the class body below.
        self.invoke = AsyncMock(side_effect=self._reply)  # type: ignore[method-assign]

    def _reply(self, model: str, messages: list[ChatMessage], options: ChatOptions) -> str:
        stage = stage_of(messages)
        reply = self.replies.get((model, stage), self.replies.get(model, f"{stage} reply from {model}"))
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def name(self) -> str:
        return self._name

    def is_configured(self) -> bool:
        return self._configured

    async def invoke(self, model: str, messages: list[ChatMessage], options: ChatOptions) -> str:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return self._reply(model, messages, options)

    def calls_for(self, stage: str) -> list[str]:
        """Models invoked with a prompt of the given stage, in call order."""
        return [c.args[0] for c in self.invoke.call_args_list if stage_of(c.args[1]) == stage]


@pytest.fixture
def prompts() -> PromptsConfig:
    return TEST_PROMPTS


@pytest.fixture
def options() -> ChatOptions:
    return ChatOptions()


@pytest.fixture
def members() -> list[CouncilMember]:
    return [
        CouncilMember("Alpha", "mock", "model-a"),
        CouncilMember("Beta", "mock", "model-b"),
        CouncilMember("Gamma", "mock", "model-c"),
    ]


@pytest.fixture
def chairman() -> CouncilMember:
    return CouncilMember("Chair", "mock", "model-chair")


@pytest.fixture
def council_config(members, chairman) -> CouncilConfig:
    return CouncilConfig(members=list(members), chairman=chairman)


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def registry(mock_provider: MockProvider) -> ProviderRegistry:
    return ProviderRegistry({"mock": mock_provider})


@pytest.fixture
def store(council_config: CouncilConfig) -> CouncilConfigStore:
    return CouncilConfigStore(MemoryKeyValueStore(), council_config)


@pytest.fixture
def council(registry, store, prompts) -> Council:
    return Council(registry=registry, store=store, prompts=prompts)


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    """Write a minimal valid settings.yaml to a temp path."""
    path = tmp_path / "settings.yaml"
    path.write_text(
        f"""
defaults:
  store_dir: {tmp_path / "store"}
  min_members: 2
  max_members: 4
  temperature: 0.5
  max_tokens: 1024
  members:
    - {{name: One, provider: groq, model: llama-3.1-8b-instant}}
    - {{name: Two, provider: together, model: qwen-x}}
  chairman: {{name: Boss, provider: together, model: qwen-x}}
  title_member: {{name: Titler, provider: groq, model: llama-3.1-8b-instant}}
providers:
  groq:
    sdk: openai_compat
    api_key_env: TEST_GROQ_KEY
    base_url: https://api.groq.com/openai/v1
    timeout_sec: 30
  together:
    sdk: openai_compat
    api_key_env: TEST_TOGETHER_KEY
    base_url: https://api.together.xyz/v1
    timeout_sec: 60
prompts:
  stage1: "Q ({{member_count}}): {{question}}"
  ranking: "Q: {{question}}\\n{{responses}}"
  chairman: "Q: {{question}}\\n{{stage1_text}}\\n{{stage2_text}}"
  title: "Title: {{question}}"
""",
        encoding="utf-8",
    )
    return path
