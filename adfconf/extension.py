"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

from abc import ABC, abstractmethod

from .adf import AdfNode


class CodeBlockExtension(ABC):
    """
    Replaces fenced code blocks written in a diagram language with a Confluence macro.
    """

    @abstractmethod
    def matches(self, language: str | None) -> bool:
        "True if this extension handles code blocks tagged with the given language."
        ...

    @abstractmethod
    def transform_fenced(self, content: str) -> AdfNode:
        """
        Emits an ADF node for the source text of a fenced code block.

        :param content: Text content of the code block.
        :returns: A node that replaces the code block.
        """
        ...
