"""
Description node tree for documenting configuration options.

The node set is closed:
- TextElement: text with %s placeholders filled by nested inline elements
- LinkElement: hyperlink (inline only)
- LineBreakElement: forced line break (inline or block)
- ListElement: bulleted list of inline elements (block only)

A Description is an ordered tuple of block elements. Nodes are immutable;
rendering is done by a Formatter (see formatter.py).
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import typing as _typing

PLACEHOLDER = "%s"
"""Positional placeholder in TextElement.format."""


class TextStyle(_enum.Enum):
    """Styles applicable to a TextElement."""

    CODE = "code"


@_dataclasses.dataclass(frozen=True)
class TextElement:
    """Text with positional placeholders and optional styles."""

    format: str
    elements: tuple[InlineElement, ...] = ()
    styles: frozenset[TextStyle] = frozenset()


@_dataclasses.dataclass(frozen=True)
class LinkElement:
    """Hyperlink with visible text."""

    link: str
    text: str


@_dataclasses.dataclass(frozen=True)
class LineBreakElement:
    """Forced line break."""


@_dataclasses.dataclass(frozen=True)
class ListElement:
    """Bulleted list. Each entry is rendered independently."""

    entries: tuple[InlineElement, ...] = ()


InlineElement: _typing.TypeAlias = TextElement | LinkElement | LineBreakElement
BlockElement: _typing.TypeAlias = TextElement | LineBreakElement | ListElement

_INLINE_TYPES = (TextElement, LinkElement, LineBreakElement)
_BLOCK_TYPES = (TextElement, LineBreakElement, ListElement)


def _check_inline(elements: _typing.Iterable[_typing.Any]) -> tuple[InlineElement, ...]:
    result = tuple(elements)
    for element in result:
        if not isinstance(element, _INLINE_TYPES):
            raise TypeError(f"Not an inline element: {element!r}")
    return result


# =============================================================================
# Element factories
# =============================================================================


def text(format: str, *elements: InlineElement) -> TextElement:
    """
    Create a text element.

    Args:
        format: Text, optionally with %s placeholders.
        *elements: Inline elements substituted for the placeholders in order.
    """
    return TextElement(format, _check_inline(elements))


def code(value: str) -> TextElement:
    """Create a text element rendered in code style."""
    return TextElement(value, (), frozenset({TextStyle.CODE}))


def wrap(*elements: InlineElement) -> TextElement:
    """Concatenate inline elements into a single text element."""
    return TextElement(PLACEHOLDER * len(elements), _check_inline(elements))


def link(url: str, text: str | None = None) -> LinkElement:
    """Create a link. The URL doubles as the visible text when none is given."""
    return LinkElement(url, url if text is None else text)


def linebreak() -> LineBreakElement:
    """Create a line break."""
    return LineBreakElement()


def list_of(*entries: InlineElement) -> ListElement:
    """Create a bulleted list."""
    return ListElement(_check_inline(entries))


# =============================================================================
# Description
# =============================================================================


@_dataclasses.dataclass(frozen=True)
class Description:
    """Ordered sequence of block elements."""

    blocks: tuple[BlockElement, ...] = ()

    @staticmethod
    def builder() -> DescriptionBuilder:
        """Start building a description."""
        return DescriptionBuilder()

    @classmethod
    def of(cls, value: str) -> Description:
        """Description consisting of a single text block."""
        return cls((text(value),))


class DescriptionBuilder:
    """
    Fluent builder for Description.

    Example:
        >>> desc = (
        ...     Description.builder()
        ...     .text("Port to listen on, see %s.", link("https://example.com", "docs"))
        ...     .linebreak()
        ...     .list(text("first"), text("second"))
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._blocks: list[BlockElement] = []

    def text(self, format: str, *elements: InlineElement) -> DescriptionBuilder:
        """Append a text block."""
        self._blocks.append(text(format, *elements))
        return self

    def add(self, block: BlockElement) -> DescriptionBuilder:
        """Append an existing block element."""
        if not isinstance(block, _BLOCK_TYPES):
            raise TypeError(f"Not a block element: {block!r}")
        self._blocks.append(block)
        return self

    def linebreak(self) -> DescriptionBuilder:
        """Append a line break."""
        self._blocks.append(linebreak())
        return self

    def list(self, *entries: InlineElement) -> DescriptionBuilder:
        """Append a bulleted list."""
        self._blocks.append(list_of(*entries))
        return self

    def build(self) -> Description:
        """Return the finished Description."""
        return Description(tuple(self._blocks))


EMPTY_DESCRIPTION = Description((text(""),))
"""Description attached to options that have none."""
