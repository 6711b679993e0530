"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from .adf import OUTPUT_TYPE_INLINE, OUTPUT_TYPE_PARAMETER, PLANTUML_EXTENSION_KEY, TITLE_PARAMETER, AdfDocument, AdfMark, AdfNode, get_macro_params

_CDATA_END = "]]>"


def escape_xml(text: str) -> str:
    "Escapes characters with special meaning in XML."

    # `&` comes first such that entities produced by later substitutions are left intact
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;").replace("'", "&apos;")


def wrap_cdata(text: str) -> str:
    """
    Wraps text in a CDATA section.

    The sequence `]]>` would terminate a CDATA section. Text that contains it is split into several adjacent sections,
    with the escaped form `]]&gt;` placed between them.
    """

    return "]]&gt;".join(f"<![CDATA[{part}]]>" for part in text.split(_CDATA_END))


def _macro_parameter(name: str, value: str) -> str:
    return f'<ac:parameter ac:name="{name}">{escape_xml(value)}</ac:parameter>'


def _apply_mark(mark: AdfMark, text: str) -> str:
    match mark.type:
        case "strong":
            return f"<strong>{text}</strong>"
        case "em":
            return f"<em>{text}</em>"
        case "code":
            return f"<code>{text}</code>"
        case "strike":
            return f"<s>{text}</s>"
        case "underline":
            return f"<u>{text}</u>"
        case "link":
            href = (mark.attrs or {}).get("href")
            if not href:
                return text
            return f'<a href="{escape_xml(str(href))}">{text}</a>'
        case _:
            return text


def _convert_text(node: AdfNode) -> str:
    text = escape_xml(node.text or "")
    for mark in node.marks or []:
        text = _apply_mark(mark, text)
    return text


def _convert_code_block(node: AdfNode) -> str:
    # code is kept verbatim in a CDATA section
    code = "".join(child.text or "" for child in node.children)
    language = node.get_attr("language")

    parts = ['<ac:structured-macro ac:name="code">']
    if language:
        parts.append(_macro_parameter("language", str(language)))
    parts.append(f"<ac:plain-text-body>{wrap_cdata(code)}</ac:plain-text-body>")
    parts.append("</ac:structured-macro>")
    return "".join(parts)


def _extension_body(node: AdfNode) -> str:
    "Extracts the diagram source from the paragraph nested in an extension node."

    if not node.content or not node.content[0].content:
        return ""
    return node.content[0].content[0].text or ""


def _convert_extension(node: AdfNode) -> str:
    if node.get_attr("extensionKey") != PLANTUML_EXTENSION_KEY:
        # extensions other than PlantUML have no storage format equivalent
        return ""

    title = get_macro_params(node).get(TITLE_PARAMETER, "")

    parts = [f'<ac:structured-macro ac:name="{PLANTUML_EXTENSION_KEY}" ac:schema-version="1">']
    parts.append(_macro_parameter(OUTPUT_TYPE_PARAMETER, OUTPUT_TYPE_INLINE))
    if title:
        parts.append(_macro_parameter(TITLE_PARAMETER, title))
    parts.append(f"<ac:plain-text-body>{wrap_cdata(_extension_body(node))}</ac:plain-text-body>")
    parts.append("</ac:structured-macro>")
    return "".join(parts)


def _heading_level(node: AdfNode) -> int:
    level = node.get_attr("level")
    if not isinstance(level, int) or isinstance(level, bool):
        return 1
    return min(max(level, 1), 6)


def _convert_children(node: AdfNode) -> str:
    return "".join(convert_node(child) for child in node.children)


def convert_node(node: AdfNode) -> str:
    """
    Compiles an ADF node and its descendants into Confluence Storage Format.

    Node types with no equivalent are transparent: their children are compiled in their place.
    """

    match node.type:
        case "paragraph":
            return f"<p>{_convert_children(node)}</p>"
        case "text":
            return _convert_text(node)
        case "hardBreak":
            return "<br/>"
        case "heading":
            level = _heading_level(node)
            return f"<h{level}>{_convert_children(node)}</h{level}>"
        case "codeBlock":
            return _convert_code_block(node)
        case "table":
            return f"<table><tbody>{_convert_children(node)}</tbody></table>"
        case "tableRow":
            return f"<tr>{_convert_children(node)}</tr>"
        case "tableHeader":
            return f"<th>{_convert_children(node)}</th>"
        case "tableCell":
            return f"<td>{_convert_children(node)}</td>"
        case "bulletList":
            return f"<ul>{_convert_children(node)}</ul>"
        case "orderedList":
            return f"<ol>{_convert_children(node)}</ol>"
        case "listItem":
            return f"<li>{_convert_children(node)}</li>"
        case "extension":
            return _convert_extension(node)
        case _:
            return _convert_children(node)


def adf_to_storage(document: AdfDocument) -> str:
    """
    Compiles an ADF document into Confluence Storage Format (XHTML).

    :param document: ADF document, typically with PlantUML code blocks already replaced with extension nodes.
    :returns: Confluence Storage Format document as a string.
    """

    return "".join(convert_node(node) for node in document.content)
