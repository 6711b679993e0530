"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import re
from dataclasses import dataclass

from .adf import (
    DEFAULT_LAYOUT,
    EXTENSION_TYPE,
    OUTPUT_TYPE_INLINE,
    OUTPUT_TYPE_PARAMETER,
    PLANTUML_EXTENSION_KEY,
    TITLE_PARAMETER,
    AdfNode,
    paragraph,
    text_node,
)
from .extension import CodeBlockExtension
from .extra import override

LOGGER = logging.getLogger(__name__)

# code block languages that identify a PlantUML diagram
PLANTUML_LANGUAGES = frozenset(["plantuml", "plantuml-svg", "plantuml-ascii"])

# prefixes of lines that are PlantUML statements rather than a free-text title
_KEYWORDS = ["!theme", "skinparam", "package", "class", "interface", "enum", "actor", "participant", "note"]
_DIRECTIVES = ["@startuml", "@enduml"]

_START_NAME_REGEXP = re.compile(r"@startuml\s+(.+)", flags=re.IGNORECASE)
_START_LINE_REGEXP = re.compile(r"\A\s*@startuml[^\n]*\n?", flags=re.IGNORECASE)
_END_LINE_REGEXP = re.compile(r"\n?\s*@enduml\s*\Z", flags=re.IGNORECASE)

_TITLE_PREFIX = "title "


@dataclass(frozen=True)
class PlantUMLDiagram:
    """
    A PlantUML diagram prepared for the Confluence macro `plantuml`.

    :param title: Diagram title, or an empty string if the diagram has no title.
    :param body: Diagram source without `@startuml`/`@enduml` and without the line that holds the title.
    """

    title: str
    body: str


def is_plantuml_language(language: str | None) -> bool:
    "True if a code block language tag stands for a PlantUML diagram."

    return language in PLANTUML_LANGUAGES


def is_plantuml_syntax(line: str) -> bool:
    "True if a (stripped) line starts with a PlantUML keyword or directive."

    if line.startswith(tuple(_KEYWORDS)):
        return True
    return line.lower().startswith(tuple(_DIRECTIVES))


def _title_from_start(lines: list[str]) -> str:
    "Extracts the diagram name in `@startuml name` from the first non-empty line."

    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        if m := _START_NAME_REGEXP.match(stripped):
            return m.group(1).strip()
        return ""
    return ""


def _title_from_directive(lines: list[str]) -> str:
    "Extracts the diagram title from the first `title` statement."

    for line in lines:
        stripped = line.strip()
        if stripped.startswith(_TITLE_PREFIX):
            return stripped[len(_TITLE_PREFIX) :].strip()
    return ""


def _title_from_first_line(lines: list[str]) -> str:
    "Treats the first line as a title unless it looks like a PlantUML statement."

    if not lines:
        return ""
    first_line = lines[0].strip()
    if not first_line or is_plantuml_syntax(first_line):
        return ""
    return first_line


def extract_title(content: str) -> str:
    """
    Determines the title of a PlantUML diagram.

    The first applicable rule wins:

    1. name that follows `@startuml` in the first non-empty line,
    2. text that follows the first `title` statement,
    3. the first line if it is not a PlantUML statement.

    :returns: Diagram title, or an empty string if none of the rules apply.
    """

    lines = content.split("\n")
    return _title_from_start(lines) or _title_from_directive(lines) or _title_from_first_line(lines)


def _remove_title(content: str, title: str) -> str:
    "Removes `title` statements and free-text lines that repeat the diagram title."

    lines: list[str] = []
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith(_TITLE_PREFIX):
            continue
        if stripped == title and not is_plantuml_syntax(stripped):
            continue
        lines.append(line)
    return "\n".join(lines).strip()


def extract_diagram(content: str) -> PlantUMLDiagram:
    """
    Splits PlantUML diagram source into a title and a body for the Confluence macro `plantuml`.

    The macro adds `@startuml` and `@enduml` on its own, and shows the title as a macro parameter. If nothing is left
    of the body after removing these, the original source is kept.

    :param content: PlantUML source, as found in a fenced code block.
    :returns: Diagram title and cleaned-up body.
    """

    title = extract_title(content)

    body = _START_LINE_REGEXP.sub("", content, count=1)
    body = _END_LINE_REGEXP.sub("", body, count=1)
    body = body.strip()

    if title:
        body = _remove_title(body, title)

    if not body:
        LOGGER.debug("PlantUML diagram is empty after cleanup; keeping original source")
        body = content

    return PlantUMLDiagram(title=title, body=body)


def create_plantuml_extension(diagram: PlantUMLDiagram) -> AdfNode:
    """
    Creates an ADF extension node that invokes the Confluence macro `plantuml`.

    The diagram body travels as a text node nested in a paragraph, which is where the storage format serializer
    looks for it.
    """

    macro_params: dict[str, str] = {OUTPUT_TYPE_PARAMETER: OUTPUT_TYPE_INLINE}
    if diagram.title:
        macro_params[TITLE_PARAMETER] = diagram.title

    return AdfNode(
        type="extension",
        attrs={
            "extensionType": EXTENSION_TYPE,
            "extensionKey": PLANTUML_EXTENSION_KEY,
            "parameters": {"macroParams": macro_params},
            "layout": DEFAULT_LAYOUT,
        },
        content=[paragraph(text_node(diagram.body))],
    )


class PlantUMLExtension(CodeBlockExtension):
    "Turns PlantUML code blocks into the Confluence macro `plantuml`."

    @override
    def matches(self, language: str | None) -> bool:
        return is_plantuml_language(language)

    @override
    def transform_fenced(self, content: str) -> AdfNode:
        diagram = extract_diagram(content)
        if diagram.title:
            LOGGER.debug("Converting PlantUML diagram with title: %s", diagram.title)
        else:
            LOGGER.debug("Converting PlantUML diagram with no title")
        return create_plantuml_extension(diagram)
