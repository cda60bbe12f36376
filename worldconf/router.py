"""
Section routing.

Classifies a raw section name into the default section, a common section,
a singleton section or a numbered per-instance section. Exact names are
matched before prefixes so ``game_common`` never reads as ``game`` plus a
bad suffix.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from .errors import InvalidSectionIdError, UnknownSectionError
from .schema import DEFAULT_SECTION, MAX_INSTANCE_ID, ROLES, SINGLETON_SECTIONS

_DIGITS = re.compile(r"[0-9]+")


class SectionKind(str, Enum):
    DEFAULT = "default"
    COMMON = "common"
    SINGLETON = "singleton"
    INSTANCE = "instance"


@dataclass(frozen=True)
class SectionRoute:
    """
    Where a section goes.

    Attributes:
        section: Section name as written in the file
        kind: Classification of the section
        target: Role name for COMMON/INSTANCE, section name for SINGLETON
        instance_id: Numeric suffix for INSTANCE sections
    """

    section: str
    kind: SectionKind
    target: str = ""
    instance_id: int | None = None


_COMMON_NAMES: dict[str, str] = {name: role.role for role in ROLES for name in role.common_names}

# Longest first so "gateway7" is never split as "gate" + "way7"
_PREFIXES: list[tuple[str, str]] = sorted(
    ((prefix, role.role) for role in ROLES for prefix in role.prefixes),
    key=lambda item: len(item[0]),
    reverse=True,
)


def parse_instance_id(section: str, suffix: str) -> int:
    """
    Parse the numeric suffix of a per-instance section.

    Raises:
        InvalidSectionIdError: If the suffix is not an unsigned 16-bit decimal
    """
    if not _DIGITS.fullmatch(suffix):
        raise InvalidSectionIdError(f"invalid section name: {section} (expected a numeric ID, got {suffix!r})")
    instance_id = int(suffix)
    if instance_id > MAX_INSTANCE_ID:
        raise InvalidSectionIdError(f"invalid section name: {section} (ID {instance_id} exceeds {MAX_INSTANCE_ID})")
    return instance_id


def classify_section(section: str) -> SectionRoute:
    """
    Classify a section name, case-insensitively.

    Raises:
        UnknownSectionError: If the name matches no known section or prefix
        InvalidSectionIdError: If a known prefix is followed by a non-numeric ID
    """
    name = section.lower()

    if name == DEFAULT_SECTION:
        return SectionRoute(section, SectionKind.DEFAULT)
    if name in _COMMON_NAMES:
        return SectionRoute(section, SectionKind.COMMON, _COMMON_NAMES[name])
    if name in SINGLETON_SECTIONS:
        return SectionRoute(section, SectionKind.SINGLETON, name)

    for prefix, role in _PREFIXES:
        if name.startswith(prefix):
            suffix = name[len(prefix) :]
            if not suffix:
                break
            return SectionRoute(section, SectionKind.INSTANCE, role, parse_instance_id(section, suffix))

    raise UnknownSectionError(f"unknown section: {section}")
