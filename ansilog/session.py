"""Log session — ingests raw lines in order, groups them and keeps a search applied.

A session owns a flat list of top-level lines. ``##[group]`` starts a new
top-level line that collects the following lines as children until the
matching ``##[endgroup]`` (or the next ``##[group]``). There is only one
level of nesting.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from .line import Line, build_line
from .models import Command, GroupNode, LineNode

logger = logging.getLogger(__name__)

_NODES = TypeAdapter(list[LineNode])


class SerializationError(RuntimeError):
    """The session could not be encoded as JSON."""


class Session:
    """Group-aware parser state for one log."""

    def __init__(self) -> None:
        self._lines: list[Line] = []
        self._next_number = 1
        # always lowercase, empty when no search is active
        self._search = ""

    @property
    def lines(self) -> list[Line]:
        return list(self._lines)

    @property
    def next_line_number(self) -> int:
        return self._next_number

    @property
    def search_term(self) -> str:
        return self._search

    def reset(self) -> None:
        """Drop every line and restart numbering; the search term is kept."""
        self._lines.clear()
        self._next_number = 1

    def set_raw(self, raw: str) -> None:
        """Replace the session contents with every line of ``raw``."""
        self.reset()
        for text in split_lines(raw):
            self.add_line(None, text)
        logger.debug("Loaded %d line(s), %d top-level", self._next_number - 1, len(self._lines))

    def add_line(self, line_id: Optional[str], raw: str) -> None:
        line = build_line(self._next_number, line_id or None, raw)
        self._next_number += 1

        if self._search:
            line.highlight(self._search)

        if line.command is Command.END_GROUP:
            if self._in_group():
                # a matching endgroup only closes the group, it is not shown
                self._end_group()
                return
            logger.debug("Line %d: endgroup without an open group, keeping it", line.number)
            self._lines.append(line)
        elif line.command is Command.GROUP:
            self._end_group()
            line.start_group()
            self._lines.append(line)
        elif self._in_group():
            self._lines[-1].add_child(line)
        else:
            self._lines.append(line)

    def set_search(self, term: str) -> None:
        self._search = term.lower()
        for line in self._lines:
            line.highlight(self._search)
        logger.debug("Search %r: %d match(es)", self._search, self.total_matches())

    def total_matches(self) -> int:
        return sum(line.matches() for line in self._lines)

    def nodes(self) -> list[LineNode]:
        return [_to_node(line) for line in self._lines]

    def serialize(self, pretty: bool = False) -> str:
        """Encode every top-level line (with its group) as a JSON array."""
        try:
            data = _NODES.dump_json(
                self.nodes(),
                indent=2 if pretty else None,
                by_alias=True,
                exclude_defaults=True,
            )
        except PydanticSerializationError as exc:
            raise SerializationError(f"Failed to serialize session: {exc}") from exc
        return data.decode()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _in_group(self) -> bool:
        return bool(self._lines) and self._lines[-1].is_open_group

    def _end_group(self) -> None:
        if self._lines:
            self._lines[-1].end_group()


def new_session() -> Session:
    return Session()


def split_lines(raw: str) -> list[str]:
    """Split on ``\\n`` or ``\\r\\n``; a final newline does not start an empty line.

    A ``\\r`` not followed by ``\\n`` stays part of the line.
    """
    *lines, last = raw.split("\n")
    lines = [text[:-1] if text.endswith("\r") else text for text in lines]
    if last:
        lines.append(last)
    return lines


def _to_node(line: Line) -> LineNode:
    group = None
    if line.group is not None:
        group = GroupNode(
            ended=line.group.ended,
            children=[_to_node(child) for child in line.group.children],
        )
    return LineNode(
        ts=line.timestamp,
        n=line.number,
        cmd=line.command,
        group=group,
        elements=line.elements,
    )
