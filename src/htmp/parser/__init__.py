"""HTML parsing, serialization and formatting for htmp."""

from htmp.parser.html import TreeBuilder, parse_html
from htmp.parser.serializer import format_html, render_html

__all__ = ["TreeBuilder", "format_html", "parse_html", "render_html"]
