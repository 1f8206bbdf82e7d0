"""Roster edits with the member-count guard. Every helper returns a new CouncilConfig."""

from dataclasses import replace

from council.models import CouncilConfig, CouncilMember

MIN_MEMBERS = 2
MAX_MEMBERS = 10


class RosterError(ValueError):
    """Raised when an edit would leave the council in an invalid shape."""


def validate_roster(
    config: CouncilConfig,
    min_members: int = MIN_MEMBERS,
    max_members: int = MAX_MEMBERS,
) -> None:
    count = len(config.members)
    if count < min_members:
        raise RosterError(f"A council needs a minimum of {min_members} members, got {count}")
    if count > max_members:
        raise RosterError(f"A council allows a maximum of {max_members} members, got {count}")

    for member in [*config.members, config.chairman]:
        if not (member.name.strip() and member.provider.strip() and member.model.strip()):
            raise RosterError(f"Member {member!r} has a blank name, provider or model")

    seen: set[str] = set()
    for member in config.members:
        if member.name in seen:
            raise RosterError(f"Duplicate member name: {member.name}")
        seen.add(member.name)


def _index_of(config: CouncilConfig, name: str) -> int:
    for i, member in enumerate(config.members):
        if member.name == name:
            return i
    raise RosterError(f"No member named {name!r}")


def add_member(config: CouncilConfig, member: CouncilMember, max_members: int = MAX_MEMBERS) -> CouncilConfig:
    if len(config.members) >= max_members:
        raise RosterError(f"A council allows a maximum of {max_members} members")
    if any(m.name == member.name for m in config.members):
        raise RosterError(f"Duplicate member name: {member.name}")
    return replace(config, members=[*config.members, member])


def remove_member(config: CouncilConfig, name: str, min_members: int = MIN_MEMBERS) -> CouncilConfig:
    index = _index_of(config, name)
    if len(config.members) <= min_members:
        raise RosterError(f"A council needs a minimum of {min_members} members")
    return replace(config, members=config.members[:index] + config.members[index + 1:])


def replace_member(config: CouncilConfig, name: str, member: CouncilMember) -> CouncilConfig:
    index = _index_of(config, name)
    if member.name != name and any(m.name == member.name for m in config.members):
        raise RosterError(f"Duplicate member name: {member.name}")
    members = list(config.members)
    members[index] = member
    return replace(config, members=members)


def set_chairman(config: CouncilConfig, chairman: CouncilMember) -> CouncilConfig:
    return replace(config, chairman=chairman)
