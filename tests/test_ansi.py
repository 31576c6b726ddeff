"""Tests for the ANSI SGR decoder."""

from __future__ import annotations

import pytest

from ansilog.ansi import EventKind, StyleEvent, decode, parse_sgr

RESET = StyleEvent(EventKind.RESET)


def fg(color):
    kind = EventKind.SET_FG_RGB if isinstance(color, tuple) else EventKind.SET_FG
    return StyleEvent(kind, color)


def bg(color):
    kind = EventKind.SET_BG_RGB if isinstance(color, tuple) else EventKind.SET_BG
    return StyleEvent(kind, color)


@pytest.mark.parametrize(
    "code, expected",
    [
        (0, RESET),
        (1, StyleEvent(EventKind.BOLD)),
        (3, StyleEvent(EventKind.ITALIC)),
        (4, StyleEvent(EventKind.UNDERLINE)),
        (22, StyleEvent(EventKind.UNSET_BOLD)),
        (23, StyleEvent(EventKind.UNSET_ITALIC)),
        (24, StyleEvent(EventKind.UNSET_UNDERLINE)),
        (39, StyleEvent(EventKind.DEFAULT_FG)),
        (49, StyleEvent(EventKind.DEFAULT_BG)),
    ]
    + [(c, fg(c - 30)) for c in range(30, 38)]
    + [(c, bg(c - 40)) for c in range(40, 48)]
    + [(c, fg(c - 90 + 8)) for c in range(90, 98)]
    + [(c, bg(c - 100 + 8)) for c in range(100, 108)],
)
def test_single_parameter_codes(code, expected):
    scrubbed, events = decode(f"\x1b[{code}mX")
    assert scrubbed == "X"
    assert events == {0: [expected]}


def test_reset_on_both_ends():
    assert decode("\x1b[0mreset\x1b[0m") == ("reset", {0: [RESET], 5: [RESET]})


def test_bold_then_unset():
    scrubbed, events = decode("\x1b[1mbold\x1b[22m")
    assert scrubbed == "bold"
    assert events == {0: [StyleEvent(EventKind.BOLD)], 4: [StyleEvent(EventKind.UNSET_BOLD)]}


def test_sequences_at_same_offset_append():
    raw = "\x1b[30m\x1b[31m\x1b[32m4bit-colors\x1b[39m"
    scrubbed, events = decode(raw)
    assert scrubbed == "4bit-colors"
    assert events == {0: [fg(0), fg(1), fg(2)], 11: [StyleEvent(EventKind.DEFAULT_FG)]}


def test_multi_code_sequence():
    scrubbed, events = decode("\x1b[36;1mbold cyan\x1b[0m")
    assert scrubbed == "bold cyan"
    assert events == {0: [fg(6), StyleEvent(EventKind.BOLD)], 9: [RESET]}


def test_8bit_colors():
    assert decode("\x1b[38;5;111m8-bit\x1b[0m") == ("8-bit", {0: [fg(111)], 5: [RESET]})
    assert decode("\x1b[48;5;111m8-bit\x1b[0m") == ("8-bit", {0: [bg(111)], 5: [RESET]})


def test_24bit_colors():
    assert decode("\x1b[38;2;100;110;111m24-bit") == ("24-bit", {0: [fg((100, 110, 111))]})
    assert decode("\x1b[48;2;100;110;111m24-bit") == ("24-bit", {0: [bg((100, 110, 111))]})


def test_extended_color_followed_by_more_codes():
    assert parse_sgr("38;5;111;1") == [fg(111), StyleEvent(EventKind.BOLD)]
    assert parse_sgr("1;48;2;1;2;3;4") == [
        StyleEvent(EventKind.BOLD),
        bg((1, 2, 3)),
        StyleEvent(EventKind.UNDERLINE),
    ]


@pytest.mark.parametrize(
    "raw",
    [
        "\x1b[38;5;256mX",
        "\x1b[48;2;256;0;0mX",
        "\x1b[38;5;256m\x1b[48;5;256minvalid",
        "\x1b[38;2;256;100;100m\x1b[48;2;256;100;100minvalid",
        "\x1b[1337minvalid\x1b[1337;1337;1337;1337mwithout an m:\x1b[0",
        "\x1b[mempty",
        "\x1b[38;5mshort",
        "\x1b[38;2;1;2mshort",
        "\x1b[38;9;1mbad mode",
        "\x1b[2mdim is not supported",
    ],
)
def test_invalid_sequences_pass_through(raw):
    scrubbed, events = decode(raw)
    assert scrubbed == raw
    assert events == {}


def test_one_bad_code_poisons_the_sequence():
    assert parse_sgr("1;31;999") is None
    assert decode("\x1b[1;31;5mX") == ("\x1b[1;31;5mX", {})


def test_invalid_sequence_shifts_following_offsets():
    scrubbed, events = decode("\x1b[99mab\x1b[1mc")
    assert scrubbed == "\x1b[99mabc"
    assert events == {7: [StyleEvent(EventKind.BOLD)]}


def test_bare_escape_is_text():
    assert decode("a\x1bb") == ("a\x1bb", {})


def test_plain_text_untouched():
    assert decode("hello world") == ("hello world", {})
    assert decode("") == ("", {})
