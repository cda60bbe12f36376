"""Configuration type definitions.

Defines the schema for configuration keys including types and coercion rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any

from .errors import ValidationError

_TRUE_VALUES = frozenset({"1", "t", "true", "y", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "f", "false", "n", "no", "off"})


class ConfigType(Enum):
    """Supported configuration value types."""

    INT = "int"
    BOOL = "bool"
    STRING = "string"
    SECONDS = "seconds"


@dataclass(frozen=True)
class ConfigKey:
    """
    Definition of a configuration key within a section.

    Attributes:
        key: The lowercase key name as written in the file (e.g., "boot_entity")
        config_type: The expected type of the value
        field: Model field the value is assigned to (defaults to ``key``)
        description: Human-readable description
        default: Fallback used when the value is empty (SECONDS keys only)
    """

    key: str
    config_type: ConfigType
    field: str = ""
    description: str = ""
    default: Any = None

    @property
    def target(self) -> str:
        return self.field or self.key

    def convert(self, raw: str, section: str) -> Any:
        """
        Convert a raw string value to this key's type.

        Args:
            raw: The value as read from the file
            section: Section name, used in error messages

        Returns:
            The typed value

        Raises:
            ValidationError: If the value cannot be converted
        """
        if self.config_type == ConfigType.STRING:
            return raw
        if self.config_type == ConfigType.INT:
            return self._parse_int(raw, section)
        if self.config_type == ConfigType.SECONDS:
            if raw == "" and self.default is not None:
                return self.default
            return timedelta(seconds=self._parse_int(raw, section))
        if self.config_type == ConfigType.BOOL:
            lowered = raw.lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValidationError(f"section {section}: {self.key} must be a boolean, got {raw!r}")
        return raw

    def _parse_int(self, raw: str, section: str) -> int:
        try:
            return int(raw, 10)
        except ValueError as e:
            raise ValidationError(f"section {section}: {self.key} must be an integer, got {raw!r}") from e
