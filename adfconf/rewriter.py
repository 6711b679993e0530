"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import dataclasses
import logging
from typing import Sequence

from .adf import AdfDocument, AdfNode
from .extension import CodeBlockExtension
from .plantuml import PlantUMLExtension

LOGGER = logging.getLogger(__name__)


def code_block_text(node: AdfNode) -> str | None:
    "Returns the source text held by a code block, or `None` if the code block is empty."

    if not node.content:
        return None
    return node.content[0].text or None


class DocumentRewriter:
    """
    Replaces fenced code blocks written in a diagram language with Confluence macro extension nodes.

    Nodes other than code blocks are rebuilt with their children rewritten; leaf nodes are shared with the input tree,
    which is never modified.
    """

    extensions: list[CodeBlockExtension]

    def __init__(self, extensions: Sequence[CodeBlockExtension] | None = None) -> None:
        if extensions is None:
            extensions = [PlantUMLExtension()]
        self.extensions = list(extensions)

    def rewrite(self, document: AdfDocument) -> AdfDocument:
        "Returns a new document in which matching code blocks are replaced."

        return dataclasses.replace(document, content=[self.rewrite_node(node) for node in document.content])

    def rewrite_node(self, node: AdfNode) -> AdfNode:
        if node.type == "codeBlock":
            return self._rewrite_code_block(node)

        if node.content is None:
            return node

        return dataclasses.replace(node, content=[self.rewrite_node(child) for child in node.content])

    def _find_extension(self, language: str | None) -> CodeBlockExtension | None:
        for extension in self.extensions:
            if extension.matches(language):
                return extension
        return None

    def _rewrite_code_block(self, node: AdfNode) -> AdfNode:
        language = node.get_attr("language")
        extension = self._find_extension(language)
        if extension is None:
            return node

        content = code_block_text(node)
        if content is None:
            LOGGER.debug("Skipping empty code block with language: %s", language)
            return node

        return extension.transform_fenced(content)


def rewrite_document(document: AdfDocument) -> AdfDocument:
    "Replaces PlantUML code blocks in a document with Confluence macro extension nodes."

    return DocumentRewriter().rewrite(document)
