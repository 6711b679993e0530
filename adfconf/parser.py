"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import re

import lxml.html

from .adf import AdfDocument, AdfMark, AdfNode, paragraph, text_node
from .markdown import markdown_to_html

LOGGER = logging.getLogger(__name__)

ElementType = lxml.html.HtmlElement

_BLOCK_TAGS = frozenset(["p", "h1", "h2", "h3", "h4", "h5", "h6", "ul", "ol", "pre", "table", "hr", "blockquote", "div", "dl", "details"])

_MARK_TAGS = {
    "strong": "strong",
    "b": "strong",
    "em": "em",
    "i": "em",
    "code": "code",
    "del": "strike",
    "s": "strike",
    "ins": "underline",
    "u": "underline",
}


def _is_block(element: ElementType) -> bool:
    return isinstance(element.tag, str) and element.tag in _BLOCK_TAGS


def _normalize_space(text: str) -> str:
    "Folds line breaks in running text, which Markdown treats as a space."

    return re.sub(r"\s*\n\s*", " ", text)


class HtmlToAdfConverter:
    """
    Converts XHTML produced by Python-Markdown into an Atlassian Document Format (ADF) tree.
    """

    def convert(self, html: str) -> AdfDocument:
        if not html.strip():
            return AdfDocument(content=[])

        root = lxml.html.fragment_fromstring(html, create_parent="div")
        return AdfDocument(content=self._mixed(root))

    def _inline(self, element: ElementType, marks: list[AdfMark]) -> list[AdfNode]:
        "Converts the content of an element into a list of inline nodes."

        nodes: list[AdfNode] = []
        if element.text:
            self._append_text(nodes, element.text, marks)

        for child in element:
            nodes.extend(self._inline_element(child, marks))
            if child.tail:
                self._append_text(nodes, child.tail, marks)

        return nodes

    def _append_text(self, nodes: list[AdfNode], text: str, marks: list[AdfMark]) -> None:
        text = _normalize_space(text)
        if text:
            nodes.append(text_node(text, list(marks)))

    def _inline_element(self, element: ElementType, marks: list[AdfMark]) -> list[AdfNode]:
        if not isinstance(element.tag, str):
            return []

        if element.tag == "br":
            return [AdfNode(type="hardBreak")]

        if element.tag == "img":
            alt = element.get("alt")
            return [text_node(alt, list(marks))] if alt else []

        if element.tag == "a":
            href = element.get("href")
            if href:
                return self._inline(element, marks + [AdfMark(type="link", attrs={"href": href})])
            return self._inline(element, marks)

        mark_type = _MARK_TAGS.get(element.tag)
        if mark_type is not None and all(mark.type != mark_type for mark in marks):
            return self._inline(element, marks + [AdfMark(type=mark_type)])

        return self._inline(element, marks)

    def _mixed(self, element: ElementType) -> list[AdfNode]:
        """
        Converts the content of a container element into a list of block nodes.

        Runs of inline content between block elements are wrapped in paragraphs.
        """

        blocks: list[AdfNode] = []
        inline: list[AdfNode] = []

        def flush() -> None:
            # whitespace between block elements is not content
            if any(node.type != "text" or (node.text or "").strip() for node in inline):
                _strip_edges(inline)
                blocks.append(paragraph(*inline))
            inline.clear()

        if element.text:
            self._append_text(inline, element.text, [])

        for child in element:
            if _is_block(child):
                flush()
                blocks.extend(self._block(child))
            else:
                inline.extend(self._inline_element(child, []))
            if child.tail:
                self._append_text(inline, child.tail, [])

        flush()
        return blocks

    def _block(self, element: ElementType) -> list[AdfNode]:
        tag = element.tag

        if tag == "p":
            content = self._inline(element, [])
            _strip_edges(content)
            if not content:
                return []
            return [AdfNode(type="paragraph", content=content)]

        if m := re.match(r"^h([1-6])$", tag):
            content = self._inline(element, [])
            _strip_edges(content)
            return [AdfNode(type="heading", attrs={"level": int(m.group(1))}, content=content)]

        if tag == "ul":
            return [AdfNode(type="bulletList", content=self._list_items(element))]

        if tag == "ol":
            start = element.get("start")
            attrs = {"order": int(start)} if start and start.isdigit() else None
            return [AdfNode(type="orderedList", attrs=attrs, content=self._list_items(element))]

        if tag == "pre":
            return [self._code_block(element)]

        if tag == "table":
            return [AdfNode(type="table", content=self._table_rows(element))]

        if tag == "hr":
            return [AdfNode(type="rule")]

        if tag == "blockquote":
            return [AdfNode(type="blockquote", content=self._mixed(element))]

        # containers with no ADF equivalent are flattened into their children
        return self._mixed(element)

    def _list_items(self, element: ElementType) -> list[AdfNode]:
        items: list[AdfNode] = []
        for child in element:
            if child.tag == "li":
                items.append(AdfNode(type="listItem", content=self._mixed(child) or [paragraph()]))
        return items

    def _code_block(self, element: ElementType) -> AdfNode:
        "Converts `<pre><code class=\"language-...\">...</code></pre>` into a code block."

        code = element[0] if len(element) == 1 and element[0].tag == "code" else element

        language: str | None = None
        for css_class in code.get("class", "").split():
            if m := re.match(r"^language-(.+)$", css_class):
                language = m.group(1)
                break

        text = code.text_content().rstrip("\n")
        attrs = {"language": language} if language else None
        content = [text_node(text)] if text else None
        return AdfNode(type="codeBlock", attrs=attrs, content=content)

    def _table_rows(self, element: ElementType) -> list[AdfNode]:
        rows: list[AdfNode] = []
        for row in element.iter("tr"):
            cells: list[AdfNode] = []
            for cell in row:
                match cell.tag:
                    case "th":
                        cells.append(AdfNode(type="tableHeader", content=self._mixed(cell) or [paragraph()]))
                    case "td":
                        cells.append(AdfNode(type="tableCell", content=self._mixed(cell) or [paragraph()]))
            rows.append(AdfNode(type="tableRow", content=cells))
        return rows


def _strip_edges(nodes: list[AdfNode]) -> None:
    "Removes leading and trailing whitespace from a run of inline nodes."

    if nodes and nodes[0].type == "text" and nodes[0].text is not None:
        nodes[0].text = nodes[0].text.lstrip()
    if nodes and nodes[-1].type == "text" and nodes[-1].text is not None:
        nodes[-1].text = nodes[-1].text.rstrip()
    nodes[:] = [node for node in nodes if node.type != "text" or node.text]


def html_to_adf(html: str) -> AdfDocument:
    "Converts XHTML into an ADF document."

    return HtmlToAdfConverter().convert(html)


def markdown_to_adf(content: str) -> AdfDocument:
    """
    Converts a Markdown document into an ADF document.

    :param content: Markdown input as a string.
    :returns: ADF document tree.
    """

    html = markdown_to_html(content)
    LOGGER.debug("Generated HTML:\n%s", html)
    return html_to_adf(html)
