"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from dataclasses import dataclass, field
from typing import Any

# identifiers that Confluence expects for the PlantUML macro
EXTENSION_TYPE = "com.atlassian.confluence.macro.core"
PLANTUML_EXTENSION_KEY = "plantuml"
OUTPUT_TYPE_PARAMETER = "atlassian-macro-output-type"
OUTPUT_TYPE_INLINE = "INLINE"
TITLE_PARAMETER = "title"
DEFAULT_LAYOUT = "default"


@dataclass
class AdfMark:
    """
    Inline formatting applied to a text node.

    :param type: Mark type, e.g. `strong`, `em`, `code` or `link`.
    :param attrs: Mark attributes, e.g. `href` for links.
    """

    type: str
    attrs: dict[str, Any] | None = None


@dataclass
class AdfNode:
    """
    A node in an Atlassian Document Format (ADF) tree.

    :param type: Node type discriminant, e.g. `paragraph`, `text` or `codeBlock`.
    :param attrs: Attributes specific to the node type, e.g. heading level or code block language.
    :param content: Child nodes, or `None` for leaf nodes.
    :param text: Text content, only for nodes of type `text`.
    :param marks: Inline formatting, only for nodes of type `text`.
    """

    type: str
    attrs: dict[str, Any] | None = None
    content: "list[AdfNode] | None" = None
    text: str | None = None
    marks: list[AdfMark] | None = None

    def get_attr(self, name: str) -> Any:
        "Returns the value of a node attribute, or `None` if the node has no such attribute."

        if self.attrs is None:
            return None
        return self.attrs.get(name)

    @property
    def children(self) -> "list[AdfNode]":
        return self.content or []


@dataclass
class AdfDocument:
    """
    The root of an Atlassian Document Format (ADF) tree.

    :param content: Top-level block nodes.
    :param version: ADF schema version.
    :param type: Always `doc`.
    """

    content: list[AdfNode] = field(default_factory=list)
    version: int = 1
    type: str = "doc"


def text_node(text: str, marks: list[AdfMark] | None = None) -> AdfNode:
    return AdfNode(type="text", text=text, marks=marks or None)


def paragraph(*content: AdfNode) -> AdfNode:
    return AdfNode(type="paragraph", content=list(content))


def get_macro_params(node: AdfNode) -> dict[str, str]:
    "Extracts the macro parameters of an extension node."

    parameters = node.get_attr("parameters")
    if not isinstance(parameters, dict):
        return {}
    macro_params = parameters.get("macroParams")
    if not isinstance(macro_params, dict):
        return {}
    return {str(key): str(value) for key, value in macro_params.items() if value is not None}
