"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import os
from pathlib import Path

from .csf import content_to_string
from .document import ConfluenceDocument
from .domain import DocumentOptions
from .extra import override
from .processor import Processor
from .rewriter import DocumentRewriter

LOGGER = logging.getLogger(__name__)


class LocalConverter(Processor):
    """
    Transforms a single Markdown page or a directory of Markdown pages into Confluence Storage Format (CSF) or
    Atlassian Document Format (ADF) documents saved to the local disk.
    """

    out_dir: Path | None
    use_storage_format: bool

    def __init__(
        self,
        options: DocumentOptions,
        out_dir: Path | None = None,
        use_storage_format: bool = True,
        rewriter: DocumentRewriter | None = None,
    ) -> None:
        """
        Initializes a new converter instance.

        :param options: Options that control the generated page content.
        :param out_dir: File system directory to write generated documents to; defaults to the source directory.
        :param use_storage_format: Whether to write Confluence Storage Format (`.csf`) rather than ADF (`.adf.json`).
        :param rewriter: Replaces diagram code blocks with macro extension nodes.
        """

        super().__init__(options, rewriter)
        self.out_dir = out_dir
        self.use_storage_format = use_storage_format

    @override
    def _update_page(self, document: ConfluenceDocument, path: Path, root_dir: Path) -> None:
        """
        Saves the document as Confluence Storage Format XHTML or ADF JSON to the local disk.
        """

        if self.use_storage_format:
            content = content_to_string(document.storage())
            suffix = ".csf"
        else:
            content = document.json()
            suffix = ".adf.json"

        relative_path = path.relative_to(root_dir)
        out_dir = self.out_dir or root_dir
        out_path = out_dir / relative_path.parent / f"{relative_path.stem}{suffix}"
        os.makedirs(out_path.parent, exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(content)

        LOGGER.info("Saved document: %s", out_path)
