"""
String format registry.

A format is a named pair of functions converting between the textual form
found in plain data and a typed Python value:

    parse("2021-06-15") -> datetime.date(2021, 6, 15)
    render(datetime.date(2021, 6, 15)) -> "2021-06-15"

Property declarations reference formats by name ({"type": "string",
"format": "date"}). Unknown formats are not an error: the raw string is kept.

INITIALIZATION CONTRACT:
    Registries are filled in a single phase before any model is constructed.
    Registration is add-only: a name can never be overridden.
    Call freeze() to make any later registration fail loudly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from typedmodel.errors import DuplicateFormatError, FormatRegistryFrozenError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatEntry:
    """
    A registered string format.

    Properties:
        parse: converts the textual form to a typed value
        render: converts a typed value back to text
    """

    parse: Callable[[str], Any]
    render: Callable[[Any], str]


class FormatRegistry:
    """Table of string formats keyed by name."""

    def __init__(self):
        self._formats: Dict[str, FormatEntry] = {}
        self._frozen = False

    @classmethod
    def with_builtins(cls) -> FormatRegistry:
        """Create a registry holding the built-in `date` and `date-time` formats."""
        registry = cls()
        registry.register("date", parse=parse_date, render=render_date)
        registry.register("date-time", parse=parse_datetime, render=render_datetime)
        return registry

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(
        self,
        name: str,
        parse: Callable[[str], Any],
        render: Callable[[Any], str],
    ) -> None:
        """
        Register a new string format.

        Raises:
            DuplicateFormatError: If `name` is already registered
            FormatRegistryFrozenError: If the registry was frozen
        """
        if self._frozen:
            raise FormatRegistryFrozenError(name)
        if name in self._formats:
            raise DuplicateFormatError(name)
        self._formats[name] = FormatEntry(parse=parse, render=render)
        logger.debug("Registered string format %r", name)

    def find(self, name: Optional[str]) -> Optional[FormatEntry]:
        """Find a format by name. Returns None when not registered."""
        if not name:
            return None
        return self._formats.get(name)

    def parse(self, name: Optional[str], value: Any) -> Any:
        entry = self.find(name)
        return entry.parse(value) if entry else value

    def render(self, name: Optional[str], value: Any) -> Any:
        if isinstance(value, str):
            return value
        entry = self.find(name)
        return entry.render(value) if entry else str(value)

    def freeze(self) -> None:
        """End the initialization phase. Later registrations will fail."""
        self._frozen = True
        logger.debug("Format registry frozen with %d formats", len(self._formats))

    def names(self) -> List[str]:
        return list(self._formats)

    def __contains__(self, name: object) -> bool:
        return name in self._formats

    def __len__(self) -> int:
        return len(self._formats)

    def __repr__(self) -> str:
        state = " frozen" if self._frozen else ""
        return f"<FormatRegistry{state} {self.names()}>"


def parse_date(text: str) -> date:
    # Full date-time strings are accepted and truncated to their date.
    if len(text) > 10:
        return parse_datetime(text).date()
    return date.fromisoformat(text)


def render_date(value: date) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def parse_datetime(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def render_datetime(value: datetime) -> str:
    return value.isoformat()


# Process-wide registry used by TypedModel unless a model family scopes its own.
DEFAULT_FORMATS = FormatRegistry.with_builtins()


__all__ = [
    "FormatEntry",
    "FormatRegistry",
    "DEFAULT_FORMATS",
    "parse_date",
    "render_date",
    "parse_datetime",
    "render_datetime",
]
