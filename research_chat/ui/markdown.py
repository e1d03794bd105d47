"""Markdown to HTML conversion for chat display."""

import html
import re

from research_chat.models.schemas import GroundingChunk

_HEADING_CLASSES = {
    1: "text-lg font-semibold mt-3 mb-1",
    2: "text-base font-semibold mt-3 mb-1",
    3: "text-sm font-semibold mt-2 mb-1",
}


def _convert_lists(text: str, pattern: str, tag: str, css: str) -> str:
    lines = text.split("\n")
    in_list = False
    result = []
    for line in lines:
        stripped = line.strip()
        if re.match(pattern, stripped):
            if not in_list:
                result.append(f'<{tag} class="{css}">')
                in_list = True
            item = re.sub(pattern, "", stripped)
            result.append(f"<li>{item}</li>")
        else:
            if in_list:
                result.append(f"</{tag}>")
                in_list = False
            result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: headings, horizontal rules, bold, italic, inline code,
    code blocks, links, lists. Underscore emphasis is not supported so
    that URLs containing underscores survive.
    """
    # Escape HTML entities first
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")

    # Code blocks (```code```)
    text = re.sub(
        r"```(\w*)\n?([\s\S]*?)```",
        r'<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs"><code>\2</code></pre>',
        text,
    )

    # Inline code (`code`)
    text = re.sub(
        r"`([^`]+)`",
        r'<code class="bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs">\1</code>',
        text,
    )

    # Headings (# to ###, deeper levels render as ###)
    def heading(match: re.Match[str]) -> str:
        level = min(len(match.group(1)), 3)
        return f'<h{level} class="{_HEADING_CLASSES[level]}">{match.group(2)}</h{level}>'

    text = re.sub(r"^(#{1,6})[ \t]+(.+)$", heading, text, flags=re.MULTILINE)

    # Horizontal rules
    text = re.sub(r"^[ \t]*-{3,}[ \t]*$", '<hr class="my-2 border-gray-300">', text, flags=re.MULTILINE)

    # Bold (**text**)
    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)

    # Links [text](url)
    text = re.sub(
        r"\[([^\]]+)\]\(([^)]+)\)",
        r'<a href="\2" class="text-blue-600 underline" target="_blank">\1</a>',
        text,
    )

    # Lists must be converted before single-star italics consume the markers
    text = _convert_lists(text, r"^[-*]\s+", "ul", "list-disc list-inside my-2 space-y-1")
    text = _convert_lists(text, r"^\d+\.\s+", "ol", "list-decimal list-inside my-2 space-y-1")

    # Italic (*text*)
    text = re.sub(r"\*([^*\n]+)\*", r"<em>\1</em>", text)

    # Line breaks (preserve newlines as <br>)
    text = text.replace("\n", "<br>")

    return text


def citations_to_html(chunks: list[GroundingChunk] | None) -> str:
    """Render grounding citations as a numbered source list.

    Returns an empty string when there are no citations.
    """
    items = []
    for chunk in chunks or []:
        if chunk.web is None:
            continue
        uri = html.escape(chunk.web.uri, quote=True)
        title = html.escape(chunk.web.title or chunk.web.uri)
        items.append(
            f'<li><a href="{uri}" class="text-blue-600 underline" target="_blank">{title}</a></li>'
        )

    if not items:
        return ""

    return (
        '<div class="text-xs text-gray-500 mt-2">Sources:</div>'
        f'<ol class="list-decimal list-inside text-xs space-y-0.5">{"".join(items)}</ol>'
    )
