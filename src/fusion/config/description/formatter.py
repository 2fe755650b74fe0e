"""
Base class for description renderers.

A Formatter walks a Description and produces one markup string. All node
dispatch happens in Formatter.render(); subclasses only say how each kind
of node looks in their target markup:

- format_text: a text run (placeholders already substituted)
- format_link: a hyperlink
- format_line_break: a forced break
- format_list: a bulleted list of already-rendered entries
- escape: markup escaping for literal source text (default: none)

Nested inline elements are rendered independently and substituted into
their parent's text in positional order. Literal text between placeholders
goes through escape() exactly once; rendered children are not re-escaped.
"""

import abc as _abc
import typing as _typing

import fusion.config.description.elements as elements


class Formatter(_abc.ABC):
    """Renders a Description into a target markup string."""

    def format(self, description: elements.Description) -> str:
        """Render every block of a description and join the results."""
        return "".join(self.render(block) for block in description.blocks)

    def render(self, element: elements.BlockElement | elements.InlineElement) -> str:
        """Render a single node (and its children)."""
        if isinstance(element, elements.TextElement):
            return self._render_text(element)
        if isinstance(element, elements.LinkElement):
            return self.format_link(element.link, element.text)
        if isinstance(element, elements.LineBreakElement):
            return self.format_line_break()
        if isinstance(element, elements.ListElement):
            return self.format_list([self.render(entry) for entry in element.entries])
        raise TypeError(f"Unknown description element: {element!r}")

    def _render_text(self, element: elements.TextElement) -> str:
        segments = element.format.split(elements.PLACEHOLDER)
        placeholders = len(segments) - 1
        if placeholders != len(element.elements):
            raise ValueError(
                f"Text {element.format!r} has {placeholders} placeholder(s) "
                f"but {len(element.elements)} element(s)"
            )

        parts = [self.escape(segments[0])]
        for child, segment in zip(element.elements, segments[1:]):
            parts.append(self.render(child))
            parts.append(self.escape(segment))
        return self.format_text("".join(parts), element.styles)

    def escape(self, value: str) -> str:
        """Escape literal source text for the target markup."""
        return value

    @_abc.abstractmethod
    def format_text(self, value: str, styles: _typing.AbstractSet[elements.TextStyle]) -> str:
        """Render a text run with the given styles."""
        ...

    @_abc.abstractmethod
    def format_link(self, link: str, text: str) -> str:
        """Render a hyperlink."""
        ...

    @_abc.abstractmethod
    def format_line_break(self) -> str:
        """Render a line break."""
        ...

    @_abc.abstractmethod
    def format_list(self, entries: list[str]) -> str:
        """Render a bulleted list of rendered entries."""
        ...
