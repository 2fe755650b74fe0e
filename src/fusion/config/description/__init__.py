"""
Rich-text descriptions for configuration options.

Descriptions are small immutable node trees rendered by a Formatter into
documentation markup (HTML, Markdown, Rich console markup).

Example:
    >>> import fusion.config.description as description
    >>> desc = (
    ...     description.Description.builder()
    ...     .text("Use %s to enable it.", description.code("true"))
    ...     .build()
    ... )
    >>> description.HtmlFormatter().format(desc)
    'Use <code class="highlighter-rouge">true</code> to enable it.'
"""

from fusion.config.description.elements import (
    EMPTY_DESCRIPTION,
    PLACEHOLDER,
    BlockElement,
    Description,
    DescriptionBuilder,
    InlineElement,
    LineBreakElement,
    LinkElement,
    ListElement,
    TextElement,
    TextStyle,
    code,
    linebreak,
    link,
    list_of,
    text,
    wrap,
)
from fusion.config.description.formatter import Formatter
from fusion.config.description.html import HtmlFormatter
from fusion.config.description.markdown import MarkdownFormatter
from fusion.config.description.rich_formatter import RichFormatter

__all__ = [
    "EMPTY_DESCRIPTION",
    "PLACEHOLDER",
    "BlockElement",
    "Description",
    "DescriptionBuilder",
    "Formatter",
    "HtmlFormatter",
    "InlineElement",
    "LineBreakElement",
    "LinkElement",
    "ListElement",
    "MarkdownFormatter",
    "RichFormatter",
    "TextElement",
    "TextStyle",
    "code",
    "linebreak",
    "link",
    "list_of",
    "text",
    "wrap",
]
