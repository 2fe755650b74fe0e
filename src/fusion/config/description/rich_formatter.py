"""
Rich console renderer for option descriptions.

Produces Rich console markup, so descriptions can be printed with
``rich.console.Console().print(...)`` in the calling application's help
output. Literal text is escaped with rich.markup.escape so square brackets
in descriptions are not taken as markup tags.
"""

import typing as _typing

import rich.markup as _rich_markup

import fusion.config.description.elements as elements
import fusion.config.description.formatter as formatter


class RichFormatter(formatter.Formatter):
    """Render descriptions as Rich console markup."""

    def __init__(self, *, code_style: str = "bold cyan", bullet: str = "•") -> None:
        """
        Initialize the renderer.

        Args:
            code_style: Rich style applied to code text.
            bullet: Marker placed before each list entry.
        """
        self._code_style = code_style
        self._bullet = bullet

    def escape(self, value: str) -> str:
        return _rich_markup.escape(value)

    def format_text(self, value: str, styles: _typing.AbstractSet[elements.TextStyle]) -> str:
        if elements.TextStyle.CODE in styles:
            return f"[{self._code_style}]{value}[/]"
        return value

    def format_link(self, link: str, text: str) -> str:
        return f"[link={link}]{self.escape(text)}[/link]"

    def format_line_break(self) -> str:
        return "\n"

    def format_list(self, entries: list[str]) -> str:
        return "".join(f"\n{self._bullet} {entry}" for entry in entries) + "\n"
