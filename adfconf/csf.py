"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import lxml.etree as ET

# XML namespaces typically associated with Confluence Storage Format documents
_namespaces = {
    "ac": "http://atlassian.com/content",
    "ri": "http://atlassian.com/resource/identifier",
}
for key, value in _namespaces.items():
    ET.register_namespace(key, value)

ElementType = ET._Element  # pyright: ignore [reportPrivateUsage]


class ParseError(RuntimeError):
    pass


def _qname(namespace_uri: str, name: str) -> str:
    return ET.QName(namespace_uri, name).text


def AC_ATTR(name: str) -> str:
    return _qname(_namespaces["ac"], name)


def AC_TAG(name: str) -> str:
    return _qname(_namespaces["ac"], name)


def elements_from_string(content: str) -> ElementType:
    """
    Creates a Confluence Storage Format XML document tree from an XML fragment string.

    This function
    * wraps the content in a root element,
    * adds namespace declarations associated with Confluence documents.

    :param content: Confluence Storage Format content as a string.
    :returns: An XML document as an element tree.
    :raises ParseError: Raised when the content is not well-formed XML.
    """

    parser = ET.XMLParser(
        remove_blank_text=True,
        remove_comments=True,
        strip_cdata=False,
    )

    ns_attr_list = "".join(f' xmlns:{key}="{value}"' for key, value in _namespaces.items())

    data = [f"<root{ns_attr_list}>", content, "</root>"]

    try:
        return ET.fromstringlist(data, parser=parser)
    except ET.XMLSyntaxError as ex:
        raise ParseError() from ex


def content_to_string(content: str) -> str:
    """
    Converts a Confluence Storage Format document into a readable XML document.

    :param content: Confluence Storage Format content as a string.
    :returns: Pretty-printed XML as a string.
    """

    tree = elements_from_string(content)
    return ET.tostring(tree, pretty_print=True).decode("utf-8")
