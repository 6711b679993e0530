"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ConfluencePageID:
    """
    Encapsulates a Confluence page ID.

    :param page_id: Confluence page ID.
    """

    page_id: str

    def __str__(self) -> str:
        return self.page_id


@dataclass
class DocumentOptions:
    """
    Options that control the generated page content.

    :param root_page_id: Confluence page to assume root page role for publishing new pages.
    :param skip_unpublished: Whether to skip documents whose front-matter sets `connie-publish` to false.
    :param title_from_heading: Whether the first heading replaces the file name as page title when front-matter has
        no title.
    """

    root_page_id: ConfluencePageID | None = None
    skip_unpublished: bool = True
    title_from_heading: bool = False
