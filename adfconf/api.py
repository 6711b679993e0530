"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import dataclasses
import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Callable, Generic, ParamSpec, TypeVar, cast
from urllib.parse import urlencode, urlparse, urlunparse

import requests

from .adf import AdfDocument
from .api_types import (
    ConfluenceContentVersion,
    ConfluenceCreatePageRequest,
    ConfluencePage,
    ConfluencePageBody,
    ConfluencePageContent,
    ConfluencePageRef,
    ConfluenceRepresentation,
    ConfluenceSpace,
    ConfluenceUpdatePageRequest,
    ConfluenceUser,
    ConfluenceVersion,
)
from .environment import ArgumentError, ConfluenceError, ConnectionProperties
from .serializer import JsonType, json_to_object, object_to_json_payload, string_to_json
from .storage import adf_to_storage

LOGGER = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R", ConfluenceCreatePageRequest, ConfluenceUpdatePageRequest)


def build_url(base_url: str, query: dict[str, str] | None = None) -> str:
    "Builds a URL with scheme, host, port, path and query string parameters."

    scheme, netloc, path, params, query_str, fragment = urlparse(base_url)

    if params:
        raise ValueError("expected: url with no parameters")
    if query_str:
        raise ValueError("expected: url with no query string")
    if fragment:
        raise ValueError("expected: url with no fragment")

    url_parts = (scheme, netloc, path, None, urlencode(query) if query else None, None)
    return urlunparse(url_parts)


def to_storage_body(body: ConfluencePageBody) -> ConfluencePageBody:
    """
    Converts a page body in Atlassian Document Format into Confluence Storage Format.

    A body that has no ADF representation is returned unchanged.
    """

    if body.atlas_doc_format is None:
        return body

    document = json_to_object(AdfDocument, string_to_json(body.atlas_doc_format.value))
    return ConfluencePageBody(storage=ConfluencePageContent(value=adf_to_storage(document), representation=ConfluenceRepresentation.STORAGE))


def map_user_keys(data: JsonType) -> JsonType:
    """
    Maps the `userKey` property of Confluence Server and Data Center to `accountId` used by Confluence Cloud.

    Applies recursively to nested objects and arrays. An existing `accountId` is never overwritten.
    """

    if isinstance(data, dict):
        result = {key: map_user_keys(value) for key, value in data.items()}
        if "userKey" in result and "accountId" not in result:
            result["accountId"] = result["userKey"]
        return result
    elif isinstance(data, list):
        return [map_user_keys(item) for item in data]
    else:
        return data


@dataclass(frozen=True)
class StorageFormatOperation(Generic[R]):
    """
    Wraps a page create or update operation such that page content is submitted in Confluence Storage Format.

    :param operation: The operation that submits the request to Confluence.
    """

    operation: Callable[[R], JsonType]

    def __call__(self, request: R) -> JsonType:
        if request.body.atlas_doc_format is not None:
            LOGGER.debug("Converting page body to Confluence Storage Format: %s", request.title)
            request = dataclasses.replace(request, body=to_storage_body(request.body))
        return self.operation(request)


@dataclass(frozen=True)
class UserKeyOperation(Generic[P]):
    """
    Wraps an operation such that user keys in the response are exposed as account IDs.

    :param operation: The operation that returns a JSON response from Confluence.
    """

    operation: Callable[P, JsonType]

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> JsonType:
        return map_user_keys(self.operation(*args, **kwargs))


class ConfluenceAPI:
    """
    Represents an active connection to a Confluence server.
    """

    properties: ConnectionProperties
    session: "ConfluenceSession | None" = None

    def __init__(self, properties: ConnectionProperties | None = None) -> None:
        self.properties = properties or ConnectionProperties()

    def __enter__(self) -> "ConfluenceSession":
        session = requests.Session()
        if self.properties.personal_access_token:
            session.headers.update({"Authorization": f"Bearer {self.properties.personal_access_token}"})
        elif self.properties.user_name:
            session.auth = (self.properties.user_name, self.properties.api_key or "")
        else:
            session.headers.update({"Authorization": f"Bearer {self.properties.api_key}"})

        if self.properties.headers:
            session.headers.update(self.properties.headers)

        self.session = ConfluenceSession(
            session,
            domain=self.properties.domain,
            base_path=self.properties.base_path,
            space_key=self.properties.space_key,
            use_storage_format=self.properties.use_storage_format,
            map_user_keys=self.properties.uses_personal_access_token,
        )
        return self.session

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.session is not None:
            self.session.close()
            self.session = None


class ConfluenceSession:
    """
    Represents an active connection to a Confluence server via REST API v1.

    Page create and update operations, as well as operations that return user information, are composed when the
    session is set up. Depending on connection settings, page content is converted into Confluence Storage Format
    before being sent, and user keys in responses are mapped to account IDs.
    """

    _session: requests.Session
    _api_url: str

    domain: str
    base_path: str
    space_key: str | None

    _create_page: Callable[[ConfluenceCreatePageRequest], JsonType]
    _update_page: Callable[[ConfluenceUpdatePageRequest], JsonType]
    _get_page: Callable[[str], JsonType]
    _get_current_user: Callable[[], JsonType]

    def __init__(
        self,
        session: requests.Session,
        *,
        domain: str,
        base_path: str,
        space_key: str | None = None,
        use_storage_format: bool = False,
        map_user_keys: bool = False,
    ) -> None:
        self._session = session
        self.domain = domain
        self.base_path = base_path
        self.space_key = space_key

        self._api_url = f"https://{domain}{base_path}"
        LOGGER.info("Configured Confluence REST API URL: %s", self._api_url)

        # Data Center/Server versions require a `Content-Type` header even for requests with no payload
        self._session.headers.update({"Content-Type": "application/json"})

        create_page: Callable[[ConfluenceCreatePageRequest], JsonType] = self._post_page
        update_page: Callable[[ConfluenceUpdatePageRequest], JsonType] = self._put_page
        get_page: Callable[[str], JsonType] = self._get_page_json
        get_current_user: Callable[[], JsonType] = self._get_current_user_json

        if use_storage_format:
            LOGGER.info("Pages are submitted in Confluence Storage Format")
            create_page = StorageFormatOperation(create_page)
            update_page = StorageFormatOperation(update_page)

        if map_user_keys:
            LOGGER.info("User keys are mapped to account IDs")
            create_page = UserKeyOperation(create_page)
            update_page = UserKeyOperation(update_page)
            get_page = UserKeyOperation(get_page)
            get_current_user = UserKeyOperation(get_current_user)

        self._create_page = create_page
        self._update_page = update_page
        self._get_page = get_page
        self._get_current_user = get_current_user

    def close(self) -> None:
        self._session.close()
        self._session = requests.Session()

    def _build_url(self, path: str, query: dict[str, str] | None = None) -> str:
        """
        Builds a full URL for invoking the Confluence API.

        :param path: Path of API endpoint to invoke.
        :param query: Query parameters to pass to the API endpoint.
        :returns: A full URL.
        """

        base_url = f"{self._api_url}{ConfluenceVersion.VERSION_1.value}{path}"
        return build_url(base_url, query)

    def _get(self, path: str, *, query: dict[str, str] | None = None) -> JsonType:
        "Retrieves an object via Confluence REST API."

        url = self._build_url(path, query)
        response = self._session.get(url, headers={"Accept": "application/json"}, verify=True)
        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        response.raise_for_status()
        return response.json()

    def _post(self, path: str, body: Any) -> JsonType:
        "Creates a new object via Confluence REST API."

        url = self._build_url(path)
        response = self._session.post(url, data=object_to_json_payload(body), headers={"Accept": "application/json"}, verify=True)
        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        response.raise_for_status()
        return response.json()

    def _put(self, path: str, body: Any) -> JsonType:
        "Updates an existing object via Confluence REST API."

        url = self._build_url(path)
        response = self._session.put(url, data=object_to_json_payload(body), headers={"Accept": "application/json"}, verify=True)
        if response.text:
            LOGGER.debug("Received HTTP payload:\n%s", response.text)
        response.raise_for_status()
        return response.json()

    def _post_page(self, request: ConfluenceCreatePageRequest) -> JsonType:
        return self._post("/content", request)

    def _put_page(self, request: ConfluenceUpdatePageRequest) -> JsonType:
        return self._put(f"/content/{request.id}", request)

    def _get_page_json(self, page_id: str) -> JsonType:
        return self._get(f"/content/{page_id}", query={"expand": "space,version"})

    def _get_current_user_json(self) -> JsonType:
        return self._get("/user/current")

    def _space_key(self, space_key: str | None) -> str:
        key = space_key or self.space_key
        if not key:
            raise ArgumentError("Confluence space key not specified")
        return key

    def get_page(self, page_id: str) -> ConfluencePage:
        "Retrieves Confluence page details."

        return json_to_object(ConfluencePage, self._get_page(page_id))

    def get_page_version(self, page_id: str) -> int:
        "Retrieves the current version number of a Confluence page."

        page = self.get_page(page_id)
        if page.version is None:
            raise ConfluenceError(f"page version not available: {page_id}")
        return page.version.number

    def get_current_user(self) -> ConfluenceUser:
        "Retrieves the user the session is authenticated as."

        return json_to_object(ConfluenceUser, self._get_current_user())

    def page_exists(self, title: str, *, space_key: str | None = None) -> str | None:
        """
        Looks up a page by title within a space.

        :returns: Confluence page ID if a unique page with the title exists; `None` otherwise.
        """

        query = {"title": title, "type": "page", "spaceKey": self._space_key(space_key)}

        LOGGER.info("Checking if page exists with title: %s", title)

        data = cast(dict[str, JsonType], self._get("/content", query=query))
        results = cast(list[JsonType], data.get("results") or [])

        if len(results) == 1:
            result = cast(dict[str, JsonType], results[0])
            return cast(str, result["id"])
        else:
            return None

    def create_page(self, *, title: str, body: ConfluencePageBody, parent_id: str, space_key: str | None = None) -> ConfluencePage:
        """
        Creates a new page as a child of an existing page.

        :param title: Page title.
        :param body: Page content.
        :param parent_id: Parent page ID.
        :param space_key: Space key; defaults to the space key of the connection.
        :returns: Details about the newly created page.
        """

        LOGGER.info("Creating page: %s", title)

        request = ConfluenceCreatePageRequest(
            type="page",
            title=title,
            space=ConfluenceSpace(key=self._space_key(space_key)),
            body=body,
            ancestors=[ConfluencePageRef(id=parent_id)],
        )
        return json_to_object(ConfluencePage, self._create_page(request))

    def update_page(self, page_id: str, body: ConfluencePageBody, *, title: str, version: int, message: str | None = None, space_key: str | None = None) -> ConfluencePage:
        """
        Updates the content of an existing page.

        :param page_id: The Confluence page ID.
        :param body: Page content.
        :param title: New title to assign to the page. Needs to be unique within a space.
        :param version: New version to assign to the page.
        :param message: Version message.
        """

        LOGGER.info("Updating page: %s", page_id)

        request = ConfluenceUpdatePageRequest(
            id=page_id,
            type="page",
            title=title,
            space=ConfluenceSpace(key=self._space_key(space_key)),
            body=body,
            version=ConfluenceContentVersion(number=version, minorEdit=True, message=message),
        )
        return json_to_object(ConfluencePage, self._update_page(request))
