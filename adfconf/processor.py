"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from .document import ConfluenceDocument
from .domain import DocumentOptions
from .environment import ArgumentError
from .rewriter import DocumentRewriter
from .transclusion import FileResolver, LocalFileResolver

LOGGER = logging.getLogger(__name__)


class Processor(ABC):
    """
    Processes a single Markdown page or a directory of Markdown pages.
    """

    options: DocumentOptions
    rewriter: DocumentRewriter

    def __init__(self, options: DocumentOptions, rewriter: DocumentRewriter | None = None) -> None:
        self.options = options
        self.rewriter = rewriter or DocumentRewriter()

    def process(self, path: Path) -> None:
        """
        Processes a single Markdown file or a directory of Markdown files.
        """

        path = path.resolve(True)
        if path.is_dir():
            self.process_directory(path)
        elif path.is_file():
            self.process_page(path)
        else:
            raise ArgumentError(f"expected: valid file or directory path; got: {path}")

    def process_directory(self, local_dir: Path) -> None:
        """
        Recursively scans a directory hierarchy for Markdown files, and processes each in sorted order.
        """

        local_dir = local_dir.resolve(True)
        LOGGER.info("Processing directory: %s", local_dir)

        paths = sorted(path for path in local_dir.rglob("*.md") if path.is_file())
        LOGGER.info("Indexed %d document(s)", len(paths))

        resolver = LocalFileResolver(local_dir)
        for path in paths:
            self._process_file(path, local_dir, resolver)

    def process_page(self, path: Path) -> None:
        """
        Processes a single Markdown file.
        """

        path = path.resolve(True)
        LOGGER.info("Processing page: %s", path)

        self._process_file(path, path.parent, LocalFileResolver(path.parent))

    def _process_file(self, path: Path, root_dir: Path, resolver: FileResolver) -> None:
        document = ConfluenceDocument.create(path, resolver, self.rewriter, title_from_heading=self.options.title_from_heading)
        if document.publish is False and self.options.skip_unpublished:
            LOGGER.info("Skipping unpublished document: %s", path)
            return

        self._update_page(document, path, root_dir)

    @abstractmethod
    def _update_page(self, document: ConfluenceDocument, path: Path, root_dir: Path) -> None:
        """
        Saves the document to its destination.

        :param document: Converted Markdown document.
        :param path: Absolute path of the Markdown file.
        :param root_dir: Directory being processed, or the parent directory of a single Markdown file.
        """
        ...
