"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
from pathlib import Path

from .adf import AdfDocument, AdfNode
from .api_types import ConfluencePageBody, ConfluencePageContent, ConfluenceRepresentation
from .domain import ConfluencePageID
from .environment import DocumentError
from .frontmatter import extract_properties
from .parser import markdown_to_adf
from .rewriter import DocumentRewriter
from .serializer import json_to_string
from .storage import adf_to_storage
from .transclusion import FileResolver, resolve_transclusions

LOGGER = logging.getLogger(__name__)


def _node_text(node: AdfNode) -> str:
    if node.text is not None:
        return node.text
    return "".join(_node_text(child) for child in node.children)


def first_heading_text(document: AdfDocument) -> str | None:
    "Returns the text of the first top-level heading, or `None` if the document has no such heading."

    for node in document.content:
        if node.type == "heading":
            return _node_text(node).strip() or None
    return None


class ConfluenceDocument:
    """
    A Markdown document converted into Atlassian Document Format (ADF), ready to be published to Confluence.

    :param title: Confluence page title.
    :param page_id: Confluence page ID, if the document has been published before.
    :param publish: Explicit publish setting in front-matter, if any.
    :param adf: ADF document with PlantUML code blocks replaced with macro extension nodes.
    """

    absolute_path: Path
    title: str
    page_id: ConfluencePageID | None
    publish: bool | None
    adf: AdfDocument

    def __init__(self, absolute_path: Path, title: str, page_id: ConfluencePageID | None, publish: bool | None, adf: AdfDocument) -> None:
        self.absolute_path = absolute_path
        self.title = title
        self.page_id = page_id
        self.publish = publish
        self.adf = adf

    @classmethod
    def create(
        cls,
        absolute_path: Path,
        resolver: FileResolver,
        rewriter: DocumentRewriter | None = None,
        *,
        title_from_heading: bool = False,
    ) -> "ConfluenceDocument":
        """
        Reads and converts a Markdown document.

        :param absolute_path: Path to the Markdown file.
        :param resolver: Looks up PlantUML files referenced with transclusion syntax.
        :param rewriter: Replaces diagram code blocks with macro extension nodes.
        :param title_from_heading: Whether to use the first heading as page title when front-matter has no title.
        """

        LOGGER.info("Converting Markdown document: %s", absolute_path)
        try:
            with open(absolute_path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as ex:
            raise DocumentError(f"unable to read Markdown document: {absolute_path}") from ex

        return cls.from_text(text, absolute_path, resolver, rewriter, title_from_heading=title_from_heading)

    @classmethod
    def from_text(
        cls,
        text: str,
        absolute_path: Path,
        resolver: FileResolver,
        rewriter: DocumentRewriter | None = None,
        *,
        title_from_heading: bool = False,
    ) -> "ConfluenceDocument":
        "Converts Markdown text that has been read from the given path."

        properties, text = extract_properties(text)
        text = resolve_transclusions(text, absolute_path, resolver)

        adf = markdown_to_adf(text)
        adf = (rewriter or DocumentRewriter()).rewrite(adf)

        title = properties.title
        if title is None and title_from_heading:
            title = first_heading_text(adf)

        return cls(
            absolute_path=absolute_path,
            title=title or absolute_path.stem,
            page_id=ConfluencePageID(properties.page_id) if properties.page_id else None,
            publish=properties.publish,
            adf=adf,
        )

    def storage(self) -> str:
        "Compiles the document into Confluence Storage Format."

        return adf_to_storage(self.adf)

    def json(self) -> str:
        "Serializes the document as an ADF JSON string."

        return json_to_string(self.adf)

    def body(self) -> ConfluencePageBody:
        "Page body in Atlassian Document Format, as submitted to Confluence REST API."

        return ConfluencePageBody(atlas_doc_format=ConfluencePageContent(value=self.json(), representation=ConfluenceRepresentation.ATLAS))
