"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import re
import typing
from dataclasses import dataclass, field

import yaml

from .serializer import JsonType

LOGGER = logging.getLogger(__name__)


def extract_value(expr: re.Pattern[str], text: str) -> tuple[str | None, str]:
    """
    Extracts the value captured by the first group in a regular expression.

    :returns: A tuple of (1) the value extracted and (2) remaining text without the captured text.
    """

    if expr.groups != 1:
        raise ValueError("expected: a single group whose value to extract")

    class _Matcher:
        value: str | None = None

        def __call__(self, match: re.Match[str]) -> str:
            self.value = match.group(1)
            return ""

    matcher = _Matcher()
    text = expr.sub(matcher, text, count=1)
    return matcher.value, text


_FRONT_MATTER_REGEXP = re.compile(r"\A---\n(.+?)^---\n", flags=re.DOTALL | re.MULTILINE)


def extract_frontmatter_json(text: str) -> tuple[dict[str, JsonType] | None, str]:
    "Extracts the front-matter from a Markdown document into a JSON object."

    block, text = extract_value(_FRONT_MATTER_REGEXP, text)
    if block is None:
        return None, text

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as ex:
        LOGGER.warning("Ignoring malformed front-matter: %s", ex)
        return None, text

    if not isinstance(data, dict):
        return None, text
    return typing.cast(dict[str, JsonType], data), text


@dataclass
class DocumentProperties:
    """
    Per-page settings read from the front-matter of a Markdown document.

    :param title: Confluence page title (`connie-title`).
    :param page_id: Confluence page ID (`connie-page-id`).
    :param publish: Whether the page is to be published (`connie-publish`).
    :param data: All front-matter properties.
    """

    title: str | None = None
    page_id: str | None = None
    publish: bool | None = None
    data: dict[str, JsonType] = field(default_factory=dict)


def extract_properties(text: str) -> tuple[DocumentProperties, str]:
    """
    Extracts per-page settings from a Markdown document.

    :returns: A tuple of (1) page settings and (2) document text without the front-matter block.
    """

    data, text = extract_frontmatter_json(text)
    if data is None:
        return DocumentProperties(), text

    title = data.get("connie-title")
    page_id = data.get("connie-page-id")
    publish = data.get("connie-publish")

    return (
        DocumentProperties(
            title=str(title) if title is not None else None,
            page_id=str(page_id) if page_id is not None else None,
            publish=publish if isinstance(publish, bool) else None,
            data=data,
        ),
        text,
    )
