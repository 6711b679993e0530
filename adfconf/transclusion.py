"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

LOGGER = logging.getLogger(__name__)

# `![[diagram.puml]]` or `![[diagram.puml|alias]]`, anywhere in a line
_TRANSCLUSION_REGEXP = re.compile(r"!\[\[([^\]]+\.puml)(?:\|[^\]]+)?\]\]")


class FileResolver(Protocol):
    "Looks up the content of a file referenced from a document."

    def resolve(self, path: str, context: Path) -> str | None:
        """
        Reads the file that a reference points to.

        :param path: Path as written in the reference.
        :param context: Path to the document that holds the reference.
        :returns: File content, or `None` if no such file exists.
        :raises OSError: Raised when the file exists but cannot be read.
        :raises ValueError: Raised when the path is malformed or the file is not valid UTF-8 text.
        """
        ...


@dataclass(frozen=True)
class TransclusionReference:
    """
    A reference to a PlantUML source file in document text.

    :param match: The reference as it appears in the text, e.g. `![[diagram.puml|alias]]`.
    :param path: The referenced path, e.g. `diagram.puml`.
    :param index: Position of the reference in the text.
    """

    match: str
    path: str
    index: int

    @property
    def end(self) -> int:
        return self.index + len(self.match)


def find_transclusions(text: str) -> list[TransclusionReference]:
    "Collects all PlantUML transclusion references in order of appearance."

    return [TransclusionReference(match=m.group(0), path=m.group(1), index=m.start()) for m in _TRANSCLUSION_REGEXP.finditer(text)]


def _fenced_block(content: str) -> str:
    return f"```plantuml\n{content}\n```"


def _read_reference(reference: TransclusionReference, context: Path, resolver: FileResolver) -> str | None:
    try:
        content = resolver.resolve(reference.path, context)
    except (OSError, ValueError) as ex:
        LOGGER.warning("Unable to read transcluded file %s referenced in %s: %s", reference.path, context, ex)
        return None

    if content is None:
        LOGGER.debug("Transcluded file not found: %s referenced in %s", reference.path, context)
    return content


def resolve_transclusions(text: str, context: Path, resolver: FileResolver) -> str:
    """
    Replaces references to PlantUML source files with fenced code blocks that hold the file content.

    References that cannot be resolved are left as they are.

    :param text: Markdown document text.
    :param context: Path to the document, used to resolve relative references.
    :param resolver: Looks up the content of referenced files.
    :returns: Markdown document text with references inlined.
    """

    references = find_transclusions(text)
    if not references:
        return text

    parts: list[str] = []
    position = 0
    for reference in references:
        parts.append(text[position : reference.index])
        content = _read_reference(reference, context, resolver)
        if content is not None:
            LOGGER.debug("Inlining transcluded file: %s", reference.path)
            parts.append(_fenced_block(content))
        else:
            parts.append(reference.match)
        position = reference.end
    parts.append(text[position:])
    return "".join(parts)


class LocalFileResolver:
    """
    Resolves references against files in a local directory tree.

    A reference is looked up relative to the directory of the referencing document, then relative to the root
    directory. A bare file name also matches a file with the same name anywhere under the root directory.
    """

    root_dir: Path

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = root_dir.resolve()

    def _is_within_root(self, path: Path) -> bool:
        return path.is_relative_to(self.root_dir)

    def find(self, path: str, context: Path) -> Path | None:
        "Finds the file a reference points to."

        candidates = [context.parent / path, self.root_dir / path]
        for candidate in candidates:
            candidate = candidate.resolve()
            if self._is_within_root(candidate) and candidate.is_file():
                return candidate

        if "/" in path or os.sep in path:
            return None

        for dir_path, dir_names, file_names in os.walk(self.root_dir):
            dir_names.sort()
            if path in file_names:
                candidate = (Path(dir_path) / path).resolve()
                if self._is_within_root(candidate) and candidate.is_file():
                    return candidate
        return None

    def resolve(self, path: str, context: Path) -> str | None:
        file_path = self.find(path, context)
        if file_path is None:
            return None

        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()
