"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import os
from typing import overload


class ArgumentError(ValueError):
    "Raised when wrong arguments are passed to a function call."


class DocumentError(RuntimeError):
    "Raised when a Markdown document cannot be processed."


class ConfluenceError(RuntimeError):
    "Raised when a Confluence API call fails."


@overload
def _validate_domain(domain: str) -> str: ...


@overload
def _validate_domain(domain: str | None) -> str | None: ...


def _validate_domain(domain: str | None) -> str | None:
    if domain is None:
        return None

    if domain.startswith(("http://", "https://")) or domain.endswith("/"):
        raise ArgumentError("Confluence domain looks like a URL; only host name required")

    return domain


@overload
def _validate_base_path(base_path: str) -> str: ...


@overload
def _validate_base_path(base_path: str | None) -> str | None: ...


def _validate_base_path(base_path: str | None) -> str | None:
    if base_path is None:
        return None

    if not base_path.startswith("/") or not base_path.endswith("/"):
        raise ArgumentError("Confluence base path must start and end with a '/'")

    return base_path


def _parse_flag(name: str, value: str | None) -> bool | None:
    if value is None or value == "":
        return None

    match value.lower():
        case "true" | "yes" | "on" | "1":
            return True
        case "false" | "no" | "off" | "0":
            return False
        case _:
            raise ArgumentError(f"expected: boolean value for {name}; got: {value}")


def storage_format_enabled(use_storage_format: bool | None = None) -> bool:
    """
    Determines whether pages are produced in Confluence Storage Format.

    Falls back to the environment variable `CONFLUENCE_USE_STORAGE_FORMAT` when no explicit value is given, and
    defaults to `True`.
    """

    if use_storage_format is not None:
        return use_storage_format

    value = _parse_flag("CONFLUENCE_USE_STORAGE_FORMAT", os.getenv("CONFLUENCE_USE_STORAGE_FORMAT"))
    return value if value is not None else True


class ConnectionProperties:
    """
    Properties related to connecting to Confluence.

    :param domain: Domain name for Confluence site, e.g. `markdown-to-confluence.atlassian.net`.
    :param base_path: Base path for Confluence site, e.g. `/wiki/`.
    :param space_key: Confluence space key for pages to be published.
    :param user_name: Confluence user name.
    :param api_key: Confluence API key.
    :param personal_access_token: Personal access token for Confluence Server and Data Center.
    :param use_storage_format: Whether to submit pages in Confluence Storage Format instead of ADF.
    :param headers: Additional HTTP headers to pass to Confluence REST API calls.
    """

    domain: str
    base_path: str
    space_key: str | None
    user_name: str | None
    api_key: str | None
    personal_access_token: str | None
    use_storage_format: bool
    headers: dict[str, str] | None

    def __init__(
        self,
        *,
        domain: str | None = None,
        base_path: str | None = None,
        user_name: str | None = None,
        api_key: str | None = None,
        personal_access_token: str | None = None,
        space_key: str | None = None,
        use_storage_format: bool | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        opt_domain = domain or os.getenv("CONFLUENCE_DOMAIN")
        opt_base_path = base_path or os.getenv("CONFLUENCE_PATH")
        opt_space_key = space_key or os.getenv("CONFLUENCE_SPACE_KEY")
        opt_user_name = user_name or os.getenv("CONFLUENCE_USER_NAME")
        opt_api_key = api_key or os.getenv("CONFLUENCE_API_KEY")
        opt_token = personal_access_token or os.getenv("CONFLUENCE_PERSONAL_ACCESS_TOKEN")

        if not opt_domain:
            raise ArgumentError("Confluence domain not specified")
        if not opt_api_key and not opt_token:
            raise ArgumentError("Confluence API key or personal access token not specified")
        if not opt_base_path:
            opt_base_path = "/wiki/"

        self.domain = _validate_domain(opt_domain)
        self.base_path = _validate_base_path(opt_base_path)
        self.space_key = opt_space_key
        self.user_name = opt_user_name
        self.api_key = opt_api_key
        self.personal_access_token = opt_token or None
        self.use_storage_format = storage_format_enabled(use_storage_format)
        self.headers = headers

    @property
    def uses_personal_access_token(self) -> bool:
        return bool(self.personal_access_token)
