"""Line model — one log record with its timestamp, workflow command, styles, links and search hits."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from linkify_it import LinkifyIt

from .ansi import StyleEvent, decode
from .elements import build_elements
from .models import Command, Element

logger = logging.getLogger(__name__)

# Completed logs prefix every line with e.g. "2024-01-15T00:14:43.5805748Z "
_TS_LEN = 28
_TS_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})"
)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_LINKIFY = LinkifyIt(options={"fuzzy_link": False, "fuzzy_email": False, "fuzzy_ip": False})
_LINK_SCHEMAS = ("http:", "https:")

_UNIX_MS_RE = re.compile(r"\d+", re.ASCII)


@dataclass
class Group:
    children: list[Line] = field(default_factory=list)
    ended: bool = False


@dataclass
class Line:
    number: int
    timestamp: int  # unix millis
    command: Optional[Command]
    content: str
    links: dict[int, int] = field(default_factory=dict)
    style_events: dict[int, list[StyleEvent]] = field(default_factory=dict)
    highlights: dict[int, int] = field(default_factory=dict)
    group: Optional[Group] = None
    elements: list[Element] = field(default_factory=list)

    @property
    def children(self) -> list[Line]:
        return self.group.children if self.group is not None else []

    @property
    def group_closed(self) -> bool:
        return self.group is not None and self.group.ended

    @property
    def is_open_group(self) -> bool:
        return self.group is not None and not self.group.ended

    def start_group(self) -> None:
        if self.group is None:
            self.group = Group()

    def end_group(self) -> None:
        if self.group is not None:
            self.group.ended = True

    def add_child(self, child: Line) -> None:
        self.start_group()
        self.group.children.append(child)

    def matches(self) -> int:
        """Search hits on this line plus those on its children."""
        return len(self.highlights) + sum(child.matches() for child in self.children)

    def highlight(self, term: str) -> None:
        """Recompute search highlights for ``term`` (empty clears them)."""
        had_highlights = bool(self.highlights)
        if term:
            self.highlights = {
                m.start(): m.end()
                for m in re.finditer(re.escape(term), self.content, re.IGNORECASE)
            }
        else:
            self.highlights = {}

        if self.highlights or had_highlights:
            self.rebuild()

        for child in self.children:
            child.highlight(term)

    def rebuild(self) -> None:
        self.elements = build_elements(self)


def build_line(number: int, line_id: Optional[str], raw: str) -> Line:
    """Parse one raw log line.

    ``line_id`` is the streaming sequence token (``<unix-millis>-<seq>``),
    used for the timestamp only when ``raw`` carries none of its own.
    """
    timestamp, content = _parse_timestamp(line_id, raw)
    command, content = _parse_command(content)
    content, style_events = decode(content)

    line = Line(
        number=number,
        timestamp=timestamp,
        command=command,
        content=content,
        links=find_links(content),
        style_events=style_events,
    )
    line.rebuild()
    return line


def line_from_raw(raw: str) -> Line:
    """Build an un-numbered line, e.g. for rendering a one-off snippet."""
    return build_line(0, None, raw)


def find_links(content: str) -> dict[int, int]:
    """Return ``start -> end`` for every http(s) URL in ``content``."""
    matches = _LINKIFY.match(content) or []
    return {m.index: m.last_index for m in matches if m.schema in _LINK_SCHEMAS}


def _parse_timestamp(line_id: Optional[str], raw: str) -> tuple[int, str]:
    # Completed logs: timestamp at the start of the line
    if len(raw) >= _TS_LEN:
        ts = _parse_rfc3339(raw[:_TS_LEN])
        if ts is not None:
            # skip the timestamp and the separator after it
            return ts, raw[_TS_LEN + 1:]

    # Streaming logs: timestamp in the id, e.g. 1696290982067-0
    if line_id and "-" in line_id:
        unix_ms = line_id.split("-", 1)[0]
        if _UNIX_MS_RE.fullmatch(unix_ms):
            return int(unix_ms), raw
        logger.debug("Ignoring non-numeric line id %r", line_id)

    return _now_ms(), raw


def _parse_rfc3339(text: str) -> Optional[int]:
    if not _TS_RE.fullmatch(text):
        return None
    try:
        dt = datetime.fromisoformat(text.upper())
    except ValueError:
        return None
    return (dt - _EPOCH) // timedelta(milliseconds=1)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _parse_command(content: str) -> tuple[Optional[Command], str]:
    if content.startswith("##["):
        start = 3
    elif content.startswith("["):
        start = 1
    else:
        return None, content

    name, sep, rest = content[start:].partition("]")
    if not sep:
        return None, content
    command = Command.from_name(name)
    if command is None:
        return None, content
    return command, rest
