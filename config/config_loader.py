"""Load settings.yaml into typed dataclasses. Reports provider availability at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class ProviderConfig:
    name: str
    sdk: str
    api_key_env: str
    timeout_sec: int
    base_url: str | None = None


@dataclass
class MemberConfig:
    name: str
    provider: str
    model: str


@dataclass
class PromptsConfig:
    stage1: str
    ranking: str
    chairman: str
    title: str


@dataclass
class DefaultsConfig:
    store_dir: Path
    chairman: MemberConfig
    title_member: MemberConfig
    members: list[MemberConfig] = field(default_factory=list)
    min_members: int = 2
    max_members: int = 10
    temperature: float = 0.7
    max_tokens: int = 4096


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    providers: dict[str, ProviderConfig]
    prompts: PromptsConfig
    available_providers: set[str] = field(default_factory=set)


def _member(raw: dict) -> MemberConfig:
    return MemberConfig(
        name=str(raw["name"]),
        provider=str(raw["provider"]),
        model=str(raw["model"]),
    )


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    Logs providers without an API key but does not raise; the registry reports
    them as unconfigured and callers check is_any_provider_configured().
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults_raw = raw["defaults"]
    defaults = DefaultsConfig(
        store_dir=Path(defaults_raw["store_dir"]),
        chairman=_member(defaults_raw["chairman"]),
        title_member=_member(defaults_raw["title_member"]),
        members=[_member(m) for m in defaults_raw["members"]],
        min_members=int(defaults_raw.get("min_members", 2)),
        max_members=int(defaults_raw.get("max_members", 10)),
        temperature=float(defaults_raw.get("temperature", 0.7)),
        max_tokens=int(defaults_raw.get("max_tokens", 4096)),
    )

    prompts_raw = raw["prompts"]
    prompts = PromptsConfig(
        stage1=prompts_raw["stage1"],
        ranking=prompts_raw["ranking"],
        chairman=prompts_raw["chairman"],
        title=prompts_raw["title"],
    )

    providers: dict[str, ProviderConfig] = {}
    available_providers: set[str] = set()

    for provider_name, provider_raw in raw["providers"].items():
        providers[provider_name] = ProviderConfig(
            name=provider_name,
            sdk=provider_raw["sdk"],
            api_key_env=provider_raw["api_key_env"],
            timeout_sec=int(provider_raw["timeout_sec"]),
            base_url=provider_raw.get("base_url"),
        )

        api_key = os.environ.get(provider_raw["api_key_env"], "").strip()
        if api_key:
            available_providers.add(provider_name)
            logger.info("Provider available: %s", provider_name)
        else:
            logger.info(
                "Provider not configured (no API key): %s (set %s in .env)",
                provider_name,
                provider_raw["api_key_env"],
            )

    return AppConfig(
        defaults=defaults,
        providers=providers,
        prompts=prompts,
        available_providers=available_providers,
    )
