"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
from pathlib import Path

from .api import ConfluenceSession
from .document import ConfluenceDocument
from .domain import DocumentOptions
from .environment import ArgumentError
from .extra import override
from .processor import Processor
from .rewriter import DocumentRewriter

LOGGER = logging.getLogger(__name__)


class Publisher(Processor):
    """
    Publishes a single Markdown page or a directory of Markdown pages to Confluence.

    A document with a page ID in its front-matter updates that page. Other documents are paired with an existing page
    by title, or published as a new child of the root page.
    """

    api: ConfluenceSession

    def __init__(self, api: ConfluenceSession, options: DocumentOptions, rewriter: DocumentRewriter | None = None) -> None:
        super().__init__(options, rewriter)
        self.api = api

    def _get_or_create_page(self, document: ConfluenceDocument) -> str | None:
        """
        Finds the page matching the document title, or creates a new page under the root page.

        :returns: ID of an existing page to update, or `None` if a new page has been created with the document content.
        """

        page_id = self.api.page_exists(document.title)
        if page_id is not None:
            LOGGER.info("Found existing page %s with title: %s", page_id, document.title)
            return page_id

        if self.options.root_page_id is None:
            raise ArgumentError(f"expected: root page ID to create new page with title: {document.title}")

        page = self.api.create_page(title=document.title, body=document.body(), parent_id=self.options.root_page_id.page_id)
        LOGGER.info("Created page %s for document: %s", page.id, document.absolute_path)
        return None

    @override
    def _update_page(self, document: ConfluenceDocument, path: Path, root_dir: Path) -> None:
        if document.page_id is not None:
            page_id: str | None = document.page_id.page_id
        else:
            page_id = self._get_or_create_page(document)

        if page_id is None:
            return

        version = self.api.get_page_version(page_id)
        self.api.update_page(page_id, document.body(), title=document.title, version=version + 1)
