"""Element builder — merges ANSI styles, search highlights and links into renderable elements.

Every span boundary (style change, highlight start/end, link start/end) is
an event at a content offset. One forward scan folds those events into a
small accumulator, which emits a new text run whenever the styles change
and wraps link text in a ``LinkElement``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .models import Element, LinkElement, Styles, TextElement

if TYPE_CHECKING:
    from .line import Line


class ElementBuilder:
    """Accumulator for a single pass over one line."""

    def __init__(self) -> None:
        # output elements
        self.elements: list[Element] = []
        # pending text, emitted with ``styles`` on flush
        self.text: list[str] = []
        self.styles = Styles()
        # end offset of the highlight in progress
        self.highlight_end: Optional[int] = None
        # the open link, if any
        self.link_end: Optional[int] = None
        self.link_href: Optional[str] = None
        self.link_children: list[Element] = []

    @property
    def in_link(self) -> bool:
        return self.link_end is not None

    def build(self, line: Line) -> list[Element]:
        content = line.content
        for i, ch in enumerate(content):
            link_end = line.links.get(i)
            if link_end is not None:
                self.flush()
                if self.in_link:
                    self.end_link()
                self.start_link(link_end, content[i:link_end])

            if self.link_end == i:
                self.flush()
                self.end_link()

            new_styles = self.styles_at(line, i)
            if new_styles is not None and new_styles != self.styles:
                self.flush()
                self.styles = new_styles

            self.text.append(ch)

        self.flush()
        if self.in_link:
            self.end_link()
        return self.elements

    def styles_at(self, line: Line, i: int) -> Optional[Styles]:
        """Styles in effect from offset ``i``, or None if nothing happens there."""
        highlight_end = line.highlights.get(i)
        events = line.style_events.get(i)
        highlight_ends = self.highlight_end == i
        if highlight_end is None and events is None and not highlight_ends:
            return None

        styles = self.styles.model_copy()
        if highlight_end is not None:
            # a highlight starting here also covers one ending here
            styles.highlight = True
            self.highlight_end = highlight_end
        elif highlight_ends:
            styles.highlight = False
            self.highlight_end = None

        if events:
            styles.apply_all(events)
        return styles

    def flush(self) -> None:
        if not self.text:
            return
        element = TextElement(content="".join(self.text), styles=self.styles)
        if self.in_link:
            self.link_children.append(element)
        else:
            self.elements.append(element)
        self.text = []

    def start_link(self, end: int, href: str) -> None:
        self.link_end = end
        self.link_href = href

    def end_link(self) -> None:
        self.elements.append(LinkElement(href=self.link_href, children=self.link_children))
        self.link_children = []
        self.link_end = None
        self.link_href = None


def build_elements(line: Line) -> list[Element]:
    return ElementBuilder().build(line)
