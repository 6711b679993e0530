"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import markdown

_CONVERTER = markdown.Markdown(
    extensions=[
        "markdown.extensions.tables",
        "pymdownx.highlight",  # required by `pymdownx.superfences`
        "pymdownx.superfences",
        "pymdownx.tilde",
        "sane_lists",
    ],
    extension_configs={
        "pymdownx.highlight": {
            "use_pygments": False,
        },
    },
)


def markdown_to_html(content: str) -> str:
    """
    Converts a Markdown document into XHTML with Python-Markdown.

    :param content: Markdown input as a string.
    :returns: XHTML output as a string.
    :see: https://python-markdown.github.io/
    """

    _CONVERTER.reset()
    html = _CONVERTER.convert(content)
    return html
