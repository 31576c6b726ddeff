"""Pydantic models for the rendered log document — shared by the session and the CLI."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field

from .ansi import Color, EventKind, StyleEvent


# ---------------------------------------------------------------------------
# Workflow commands
# ---------------------------------------------------------------------------

class Command(int, Enum):
    """Structural command prefix, e.g. ``##[group]``.

    See https://docs.github.com/en/actions/using-workflows/workflow-commands-for-github-actions
    """
    COMMAND = 1
    DEBUG = 2
    ERROR = 3
    INFO = 4
    NOTICE = 5
    VERBOSE = 6
    WARNING = 7
    GROUP = 8
    END_GROUP = 9

    @classmethod
    def from_name(cls, name: str) -> Optional["Command"]:
        return _COMMAND_NAMES.get(name)


_COMMAND_NAMES = {
    "command": Command.COMMAND,
    "debug": Command.DEBUG,
    "error": Command.ERROR,
    "info": Command.INFO,
    "notice": Command.NOTICE,
    "verbose": Command.VERBOSE,
    "warning": Command.WARNING,
    "group": Command.GROUP,
    "endgroup": Command.END_GROUP,
}


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------

class Styles(BaseModel):
    """Cumulative rendering state at a content offset.

    ``highlight`` belongs to search, not to the terminal, so a ``RESET``
    never clears it.
    """
    bold: bool = Field(default=False, serialization_alias="b")
    italic: bool = Field(default=False, serialization_alias="i")
    underline: bool = Field(default=False, serialization_alias="u")
    highlight: bool = Field(default=False, serialization_alias="hl")
    fg: Optional[Color] = None
    bg: Optional[Color] = None

    def apply_all(self, events: Iterable[StyleEvent]) -> None:
        for event in events:
            self.apply(event)

    def apply(self, event: StyleEvent) -> None:
        kind = event.kind
        if kind is EventKind.RESET:
            self.bold = False
            self.italic = False
            self.underline = False
            self.fg = None
            self.bg = None
        elif kind is EventKind.BOLD:
            self.bold = True
        elif kind is EventKind.ITALIC:
            self.italic = True
        elif kind is EventKind.UNDERLINE:
            self.underline = True
        elif kind is EventKind.UNSET_BOLD:
            self.bold = False
        elif kind is EventKind.UNSET_ITALIC:
            self.italic = False
        elif kind is EventKind.UNSET_UNDERLINE:
            self.underline = False
        elif kind in (EventKind.SET_FG, EventKind.SET_FG_RGB):
            self.fg = event.color
        elif kind is EventKind.DEFAULT_FG:
            self.fg = None
        elif kind in (EventKind.SET_BG, EventKind.SET_BG_RGB):
            self.bg = event.color
        elif kind is EventKind.DEFAULT_BG:
            self.bg = None


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------

class TextElement(BaseModel):
    """A run of text sharing one set of styles."""
    content: str
    styles: Styles


class LinkElement(BaseModel):
    """A hyperlink; its children are the styled runs of the link text."""
    href: str
    children: list[Element]


Element = Union[TextElement, LinkElement]

LinkElement.model_rebuild()


# ---------------------------------------------------------------------------
# Serialized lines
# ---------------------------------------------------------------------------

class GroupNode(BaseModel):
    ended: bool
    children: list[LineNode]


class LineNode(BaseModel):
    """One top-level (or grouped) line as exposed to a viewer."""
    ts: int
    n: int
    cmd: Optional[Command] = None
    group: Optional[GroupNode] = None
    elements: list[Element]


GroupNode.model_rebuild()
LineNode.model_rebuild()
