"""Council configuration persistence over a small key-value byte store."""

import copy
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import asdict
from pathlib import Path

import yaml

from config.config_loader import DefaultsConfig, MemberConfig
from council.models import CouncilConfig, CouncilMember

logger = logging.getLogger(__name__)

COUNCIL_CONFIG_KEY = "agent_council_config"


class KeyValueStore(ABC):
    """Byte-oriented persistence backend."""

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        ...

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        ...


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)


class FileKeyValueStore(KeyValueStore):
    """One file per key under a directory. Writes go through a temp file and rename."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.yaml"

    def get(self, key: str) -> bytes | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_bytes(value)
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise


def _member_from_dict(raw: dict) -> CouncilMember:
    return CouncilMember(name=str(raw["name"]), provider=str(raw["provider"]), model=str(raw["model"]))


def dump_council_config(config: CouncilConfig) -> bytes:
    data = {
        "members": [asdict(m) for m in config.members],
        "chairman": asdict(config.chairman),
    }
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True).encode("utf-8")


def parse_council_config(payload: bytes) -> CouncilConfig:
    """Raises ValueError on anything that is not a members/chairman mapping."""
    raw = yaml.safe_load(payload.decode("utf-8"))
    if not isinstance(raw, dict) or not isinstance(raw.get("members"), list):
        raise ValueError("expected a mapping with a 'members' list")
    try:
        return CouncilConfig(
            members=[_member_from_dict(m) for m in raw["members"]],
            chairman=_member_from_dict(raw["chairman"]),
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"malformed council config: {exc}") from exc


def council_config_from_settings(defaults: DefaultsConfig) -> CouncilConfig:
    def to_member(m: MemberConfig) -> CouncilMember:
        return CouncilMember(name=m.name, provider=m.provider, model=m.model)

    return CouncilConfig(
        members=[to_member(m) for m in defaults.members],
        chairman=to_member(defaults.chairman),
    )


class CouncilConfigStore:
    """Load/save/reset of the council roster. Performs no validation.

    Persistence errors are logged, never raised: a failed load reads as
    "nothing saved", so get_effective() always has the default to fall back on.
    """

    def __init__(self, backend: KeyValueStore, default: CouncilConfig) -> None:
        self._backend = backend
        self._default = copy.deepcopy(default)

    def default(self) -> CouncilConfig:
        return copy.deepcopy(self._default)

    def load(self) -> CouncilConfig | None:
        try:
            payload = self._backend.get(COUNCIL_CONFIG_KEY)
        except Exception as exc:
            logger.error("Error loading council config: %s", exc)
            return None
        if payload is None:
            return None
        try:
            return parse_council_config(payload)
        except (ValueError, yaml.YAMLError, UnicodeDecodeError) as exc:
            logger.error("Ignoring unreadable council config: %s", exc)
            return None

    def save(self, config: CouncilConfig) -> None:
        try:
            self._backend.set(COUNCIL_CONFIG_KEY, dump_council_config(config))
        except Exception as exc:
            logger.error("Error saving council config: %s", exc)

    def get_effective(self) -> CouncilConfig:
        return self.load() or self.default()

    def reset(self) -> CouncilConfig:
        config = self.default()
        self.save(config)
        logger.info("Council config reset to default")
        return config
