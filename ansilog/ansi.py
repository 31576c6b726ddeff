"""ANSI SGR escape sequence decoder.

Strips ``ESC [ <params> m`` sequences out of raw text and records what they
did as style events keyed by the offset in the scrubbed text:

    decode("\\x1b[31mfoo\\x1b[0m") -> ("foo", {0: [SET_FG(1)], 3: [RESET]})

Anything that is not a well-formed SGR sequence is kept as literal text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)

_CSI = "\x1b["

# 8-bit palette index, or a 24-bit (r, g, b) triple
Color = Union[int, tuple[int, int, int]]


class EventKind(str, Enum):
    RESET = "reset"
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    UNSET_BOLD = "unset_bold"
    UNSET_ITALIC = "unset_italic"
    UNSET_UNDERLINE = "unset_underline"
    SET_FG = "set_fg"
    DEFAULT_FG = "default_fg"
    SET_BG = "set_bg"
    DEFAULT_BG = "default_bg"
    SET_FG_RGB = "set_fg_rgb"
    SET_BG_RGB = "set_bg_rgb"


@dataclass(frozen=True)
class StyleEvent:
    """A single style change; ``color`` is set only for the SET_* kinds."""
    kind: EventKind
    color: Optional[Color] = None


# Codes that take exactly one parameter and carry no color
_SIMPLE_CODES = {
    0: StyleEvent(EventKind.RESET),
    1: StyleEvent(EventKind.BOLD),
    3: StyleEvent(EventKind.ITALIC),
    4: StyleEvent(EventKind.UNDERLINE),
    22: StyleEvent(EventKind.UNSET_BOLD),
    23: StyleEvent(EventKind.UNSET_ITALIC),
    24: StyleEvent(EventKind.UNSET_UNDERLINE),
    39: StyleEvent(EventKind.DEFAULT_FG),
    49: StyleEvent(EventKind.DEFAULT_BG),
}


def _parse_params(text: str) -> Optional[list[int]]:
    params: list[int] = []
    for piece in text.split(";"):
        if not (piece.isascii() and piece.isdigit()):
            return None
        value = int(piece)
        if value > 255:
            return None
        params.append(value)
    return params


def _extended_color(params: list[int], i: int) -> tuple[Optional[Color], int]:
    """Read the color following a 38/48 code at ``params[i]``.

    Returns the color and the number of parameters consumed, including the
    38/48 itself, or ``(None, 0)`` when the tail is malformed.
    """
    mode = params[i + 1] if i + 1 < len(params) else None
    if mode == 5 and i + 2 < len(params):
        return params[i + 2], 3
    if mode == 2 and i + 4 < len(params):
        return (params[i + 2], params[i + 3], params[i + 4]), 5
    return None, 0


def parse_sgr(text: str) -> Optional[list[StyleEvent]]:
    """Classify the parameter text found between ``ESC [`` and ``m``.

    Codes are consumed greedily left to right. Returns None when any code is
    unknown or malformed: one bad code invalidates the whole sequence.
    """
    params = _parse_params(text)
    if params is None:
        return None

    events: list[StyleEvent] = []
    i = 0
    while i < len(params):
        p = params[i]
        if p in _SIMPLE_CODES:
            events.append(_SIMPLE_CODES[p])
            i += 1
        # https://en.wikipedia.org/wiki/ANSI_escape_code#3-bit_and_4-bit
        elif 30 <= p <= 37:
            events.append(StyleEvent(EventKind.SET_FG, p - 30))
            i += 1
        elif 40 <= p <= 47:
            events.append(StyleEvent(EventKind.SET_BG, p - 40))
            i += 1
        elif 90 <= p <= 97:
            events.append(StyleEvent(EventKind.SET_FG, p - 90 + 8))
            i += 1
        elif 100 <= p <= 107:
            events.append(StyleEvent(EventKind.SET_BG, p - 100 + 8))
            i += 1
        elif p in (38, 48):
            color, consumed = _extended_color(params, i)
            if color is None:
                return None
            if isinstance(color, tuple):
                kind = EventKind.SET_FG_RGB if p == 38 else EventKind.SET_BG_RGB
            else:
                kind = EventKind.SET_FG if p == 38 else EventKind.SET_BG
            events.append(StyleEvent(kind, color))
            i += consumed
        else:
            return None
    return events


def decode(raw: str) -> tuple[str, dict[int, list[StyleEvent]]]:
    """Split raw text into scrubbed text and offset-keyed style events.

    Events of one sequence all land at the scrubbed length at the point the
    sequence was seen; sequences meeting at the same offset append, in order.
    """
    parts: list[str] = []
    events: dict[int, list[StyleEvent]] = {}
    length = 0
    pos = 0

    while True:
        start = raw.find(_CSI, pos)
        if start < 0:
            parts.append(raw[pos:])
            break
        parts.append(raw[pos:start])
        length += start - pos

        end = raw.find("m", start + len(_CSI))
        if end < 0:
            # unterminated, keep the fragment as text
            parts.append(raw[start:])
            break

        seqs = parse_sgr(raw[start + len(_CSI):end])
        if seqs is None:
            logger.debug("Passing through invalid SGR sequence %r", raw[start:end + 1])
            parts.append(raw[start:end + 1])
            length += end + 1 - start
        else:
            events.setdefault(length, []).extend(seqs)
        pos = end + 1

    return "".join(parts), events
