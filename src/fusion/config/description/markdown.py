"""Markdown renderer for option descriptions.

Useful for generating README-style option tables.
"""

import typing as _typing

import fusion.config.description.elements as elements
import fusion.config.description.formatter as formatter


class MarkdownFormatter(formatter.Formatter):
    """Render descriptions as GitHub-flavored markdown."""

    def format_text(self, value: str, styles: _typing.AbstractSet[elements.TextStyle]) -> str:
        if elements.TextStyle.CODE in styles:
            # Backticks inside the code span need a longer fence
            fence = "``" if "`" in value else "`"
            return f"{fence}{value}{fence}"
        return value

    def format_link(self, link: str, text: str) -> str:
        return f"[{text}]({link})"

    def format_line_break(self) -> str:
        return "  \n"

    def format_list(self, entries: list[str]) -> str:
        return "".join(f"\n- {entry}" for entry in entries) + "\n"
