"""HTML renderer for option descriptions."""

import typing as _typing

import fusion.config.description.elements as elements
import fusion.config.description.formatter as formatter


class HtmlFormatter(formatter.Formatter):
    """
    Render descriptions as HTML fragments.

    Links become anchors, breaks become <br />, code text is wrapped in a
    highlighter span and lists become <ul>.
    """

    def escape(self, value: str) -> str:
        return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    def format_text(self, value: str, styles: _typing.AbstractSet[elements.TextStyle]) -> str:
        if elements.TextStyle.CODE in styles:
            return f'<code class="highlighter-rouge">{value}</code>'
        return value

    def format_link(self, link: str, text: str) -> str:
        href = self.escape(link).replace('"', "&quot;")
        return f'<a href="{href}">{self.escape(text)}</a>'

    def format_line_break(self) -> str:
        return "<br />"

    def format_list(self, entries: list[str]) -> str:
        items = "".join(f"<li>{entry}</li>" for entry in entries)
        return f"<ul>{items}</ul>"
