"""Line parsing for sensor parameter files and device messages."""

from __future__ import annotations

import re
from enum import IntEnum

COMMENT_PREFIX = "#"
INDICATOR_TYPES_KEY = "INDICATOR_TYPES"
SEPARATOR_TYPES_KEY = "SEPARATOR_TYPES"

DEFAULT_INDICATOR_TYPES = ("LCD", "FLG")
DEFAULT_SEPARATOR_NAMES = (
    "GROUPS_SEPARATOR",
    "GNAMES_SEPARATOR",
    "INDICS_SEPARATOR",
    "PARAMS_SEPARATOR",
    "VALUES_SEPARATOR",
)
DEFAULT_SEPARATOR_PATTERNS = (
    r"[;]\s*",
    r"[:]\s*",
    r"[{}]\s*",
    r"[\[\]]\s*",
    r"[ ]\s*",
)


class Separator(IntEnum):
    """Positions of the configurable separators."""

    GROUP = 0
    NAMES = 1
    INDICATOR = 2
    PARAM = 3
    VALUE = 4


def _split(pattern: re.Pattern[str], text: str) -> list[str]:
    pieces = pattern.split(text)
    if pattern.groups:
        # Drop the captured separator text that re.split interleaves.
        pieces = pieces[:: pattern.groups + 1]
    return [piece for piece in pieces if piece]


class DeviceParser:
    """Splits configuration and message lines using configurable separators.

    Separators and indicator names start from their defaults and can be
    changed by comment lines such as ``#GROUPS_SEPARATOR: [;]\\s*``.
    """

    def __init__(self) -> None:
        self._line_names: dict[str, list[str]] = {
            INDICATOR_TYPES_KEY: list(DEFAULT_INDICATOR_TYPES),
            SEPARATOR_TYPES_KEY: list(DEFAULT_SEPARATOR_NAMES),
        }
        self._separators: dict[int, re.Pattern[str]] = {
            int(position): re.compile(pattern)
            for position, pattern in zip(Separator, DEFAULT_SEPARATOR_PATTERNS)
        }

    def is_comment(self, line: str) -> bool:
        return line.startswith(COMMENT_PREFIX)

    def is_data_line(self, line: str) -> bool:
        return bool(line) and not line.startswith(COMMENT_PREFIX)

    def starts_with_name(self, line: str) -> bool:
        return line.startswith("NAME")

    def starts_with_value(self, line: str) -> bool:
        return line.startswith("VALUE")

    def indicator_types(self) -> list[str]:
        """Return the indicator type names currently configured."""
        return list(self._line_names[INDICATOR_TYPES_KEY])

    def set_config(self, line: str) -> None:
        """Apply a configuration comment line, if it names a known setting."""
        for key in self._line_names:
            prefix = f"{COMMENT_PREFIX}{key}:"
            if line.startswith(prefix):
                self._line_names[key] = self.parse(
                    line.replace(prefix, "").strip(), Separator.VALUE
                )
                break

        for position, name in enumerate(self._line_names[SEPARATOR_TYPES_KEY]):
            prefix = f"{COMMENT_PREFIX}{name}:"
            if line.startswith(prefix):
                self._separators[position] = re.compile(
                    line.replace(prefix, "").strip()
                )
                break

    def parse(self, line: str, separator: Separator | int) -> list[str]:
        """Split ``line`` on a separator, dropping empty and comment parts."""
        pattern = self._separators[int(separator)]
        return [
            part for part in _split(pattern, line)
            if not part.startswith(COMMENT_PREFIX)
        ]

    def parse_name_line(self, line: str) -> str | None:
        """Return the sensor name of a ``NAME: <sensor>; ...`` line, or None."""
        groups = self.parse(line, Separator.GROUP)
        if not groups:
            return None
        parts = self.parse(groups[0], Separator.NAMES)
        if len(parts) <= 1:
            return None
        return parts[1]

    def parse_value_line(self, line: str) -> list[str]:
        """Split a ``VALUE: {TYPE} [measure unit limits...]`` line.

        The result starts with the indicator type followed by the words
        inside the brackets; an empty list means the line is malformed.
        """
        fields = self.parse(line, Separator.NAMES)
        if len(fields) <= 1:
            return []

        indicator_parts = self.parse(fields[1], Separator.INDICATOR)
        if len(indicator_parts) <= 1:
            indicator_parts.insert(0, "")
        if len(indicator_parts) <= 1:
            return []
        indicator_name = indicator_parts[0]

        measures = self.parse(indicator_parts[1], Separator.PARAM)
        if not measures:
            return []

        return [indicator_name, *self.parse(measures[0], Separator.VALUE)]