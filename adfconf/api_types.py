"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import enum
from dataclasses import dataclass


@enum.unique
class ConfluenceVersion(enum.Enum):
    """
    Confluence REST API version an HTTP request corresponds to.

    Confluence Server and Data Center support v1 endpoints only, which is why page content is read and written with v1
    endpoints exclusively.
    """

    VERSION_1 = "rest/api"


@enum.unique
class ConfluenceRepresentation(enum.Enum):
    STORAGE = "storage"
    ATLAS = "atlas_doc_format"


@dataclass(frozen=True)
class ConfluenceContentVersion:
    number: int
    minorEdit: bool = False
    message: str | None = None


@dataclass(frozen=True)
class ConfluencePageContent:
    """
    Holds Confluence page content.

    :param value: Body of the content, in the format found in the representation field.
    :param representation: Type of content representation used (e.g. Confluence Storage Format).
    """

    value: str
    representation: ConfluenceRepresentation


@dataclass(frozen=True)
class ConfluencePageBody:
    """
    Holds Confluence page content in one of the supported representations.

    :param storage: Content in Confluence Storage Format (XHTML).
    :param atlas_doc_format: Content in Atlassian Document Format (ADF) serialized as a JSON string.
    """

    storage: ConfluencePageContent | None = None
    atlas_doc_format: ConfluencePageContent | None = None


@dataclass(frozen=True)
class ConfluenceSpace:
    key: str


@dataclass(frozen=True)
class ConfluencePageRef:
    id: str


@dataclass(frozen=True)
class ConfluenceUser:
    """
    A Confluence user.

    Confluence Cloud identifies users with an account ID whereas Confluence Server and Data Center use a user key.

    :param accountId: Account ID (Confluence Cloud).
    :param userKey: User key (Confluence Server and Data Center).
    :param username: User name (Confluence Server and Data Center).
    :param displayName: Name shown in the user interface.
    """

    accountId: str | None = None
    userKey: str | None = None
    username: str | None = None
    displayName: str | None = None


@dataclass(frozen=True)
class ConfluencePage:
    """
    Holds Confluence page data returned by REST API v1.

    :param id: Confluence page ID.
    :param title: Page title.
    :param status: Page status, e.g. `current` or `draft`.
    :param space: Confluence space the page belongs to.
    :param version: Page version. Incremented when the page is updated.
    """

    id: str
    title: str
    status: str | None = None
    space: ConfluenceSpace | None = None
    version: ConfluenceContentVersion | None = None


@dataclass(frozen=True)
class ConfluenceCreatePageRequest:
    type: str
    title: str
    space: ConfluenceSpace
    body: ConfluencePageBody
    ancestors: list[ConfluencePageRef] | None = None


@dataclass(frozen=True)
class ConfluenceUpdatePageRequest:
    id: str
    type: str
    title: str
    space: ConfluenceSpace
    body: ConfluencePageBody
    version: ConfluenceContentVersion
