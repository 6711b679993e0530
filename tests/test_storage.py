"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import unittest

from adfconf.adf import AdfDocument, AdfMark, AdfNode, paragraph, text_node
from adfconf.csf import AC_ATTR, AC_TAG, elements_from_string
from adfconf.plantuml import PlantUMLDiagram, create_plantuml_extension
from adfconf.storage import adf_to_storage, convert_node, escape_xml, wrap_cdata
from tests.utility import TypedTestCase, cdata_text, code_block

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
)


class TestStorage(TypedTestCase):
    def test_escape(self) -> None:
        self.assertEqual(escape_xml("""<a href="x">'&'</a>"""), "&lt;a href=&quot;x&quot;&gt;&apos;&amp;&apos;&lt;/a&gt;")
        self.assertEqual(escape_xml("&lt;"), "&amp;lt;")
        self.assertEqual(escape_xml("plain"), "plain")
        self.assertEqual(convert_node(text_node("<a & b>")), "&lt;a &amp; b&gt;")

    def test_cdata(self) -> None:
        self.assertEqual(wrap_cdata("A -> B"), "<![CDATA[A -> B]]>")
        self.assertEqual(wrap_cdata("a]]>b"), "<![CDATA[a]]>]]&gt;<![CDATA[b]]>")
        self.assertEqual(wrap_cdata(""), "<![CDATA[]]>")

    def test_cdata_reconstruct(self) -> None:
        for text in ["a]]>b", "]]>", "x]]>]]>y", "no terminator", "]]"]:
            with self.subTest(text=text):
                self.assertEqual(cdata_text(wrap_cdata(text)), text)

    def test_paragraph(self) -> None:
        node = paragraph(text_node("1 < 2 & 3 > 2"))
        self.assertEqual(convert_node(node), "<p>1 &lt; 2 &amp; 3 &gt; 2</p>")

    def test_marks(self) -> None:
        node = paragraph(
            text_node("bold", [AdfMark(type="strong")]),
            text_node(" and "),
            text_node("link", [AdfMark(type="link", attrs={"href": "https://example.com/?a=1&b=2"})]),
        )
        self.assertEqual(
            convert_node(node),
            '<p><strong>bold</strong> and <a href="https://example.com/?a=1&amp;b=2">link</a></p>',
        )

    def test_heading(self) -> None:
        self.assertEqual(convert_node(AdfNode(type="heading", attrs={"level": 2}, content=[text_node("Title")])), "<h2>Title</h2>")
        self.assertEqual(convert_node(AdfNode(type="heading", content=[text_node("Title")])), "<h1>Title</h1>")
        self.assertEqual(convert_node(AdfNode(type="heading", attrs={"level": 9}, content=[text_node("Title")])), "<h6>Title</h6>")

    def test_hard_break(self) -> None:
        self.assertEqual(convert_node(paragraph(text_node("a"), AdfNode(type="hardBreak"), text_node("b"))), "<p>a<br/>b</p>")

    def test_lists(self) -> None:
        node = AdfNode(
            type="bulletList",
            content=[
                AdfNode(type="listItem", content=[paragraph(text_node("one"))]),
                AdfNode(type="listItem", content=[paragraph(text_node("two"))]),
            ],
        )
        self.assertEqual(convert_node(node), "<ul><li><p>one</p></li><li><p>two</p></li></ul>")
        self.assertEqual(
            convert_node(AdfNode(type="orderedList", content=[AdfNode(type="listItem", content=[paragraph(text_node("x"))])])),
            "<ol><li><p>x</p></li></ol>",
        )

    def test_table(self) -> None:
        node = AdfNode(
            type="table",
            content=[
                AdfNode(type="tableRow", content=[AdfNode(type="tableHeader", content=[paragraph(text_node("H"))])]),
                AdfNode(type="tableRow", content=[AdfNode(type="tableCell", content=[paragraph(text_node("C"))])]),
            ],
        )
        self.assertEqual(convert_node(node), "<table><tbody><tr><th><p>H</p></th></tr><tr><td><p>C</p></td></tr></tbody></table>")

    def test_code_block(self) -> None:
        self.assertEqual(
            convert_node(code_block("if a < b && c:\n    pass", "python")),
            '<ac:structured-macro ac:name="code">'
            '<ac:parameter ac:name="language">python</ac:parameter>'
            "<ac:plain-text-body><![CDATA[if a < b && c:\n    pass]]></ac:plain-text-body>"
            "</ac:structured-macro>",
        )
        self.assertEqual(
            convert_node(code_block("text")),
            '<ac:structured-macro ac:name="code"><ac:plain-text-body><![CDATA[text]]></ac:plain-text-body></ac:structured-macro>',
        )

    def test_plantuml_macro(self) -> None:
        node = create_plantuml_extension(PlantUMLDiagram(title="T & U", body="A -> B"))
        self.assertEqual(
            convert_node(node),
            '<ac:structured-macro ac:name="plantuml" ac:schema-version="1">'
            '<ac:parameter ac:name="atlassian-macro-output-type">INLINE</ac:parameter>'
            '<ac:parameter ac:name="title">T &amp; U</ac:parameter>'
            "<ac:plain-text-body><![CDATA[A -> B]]></ac:plain-text-body>"
            "</ac:structured-macro>",
        )

    def test_plantuml_macro_without_title(self) -> None:
        node = create_plantuml_extension(PlantUMLDiagram(title="", body="A -> B"))
        markup = convert_node(node)
        self.assertIn('<ac:parameter ac:name="atlassian-macro-output-type">INLINE</ac:parameter>', markup)
        self.assertNotIn('ac:name="title"', markup)

    def test_plantuml_cdata_round_trip(self) -> None:
        body = "A -> B : data]]>more\nB --> A"
        markup = convert_node(create_plantuml_extension(PlantUMLDiagram(title="T", body=body)))
        self.assertEqual(cdata_text(markup), body)

    def test_unsupported_extension(self) -> None:
        node = AdfNode(
            type="extension",
            attrs={"extensionType": "com.atlassian.confluence.macro.core", "extensionKey": "toc"},
            content=[paragraph(text_node("ignored"))],
        )
        self.assertEqual(convert_node(node), "")

    def test_unknown_type(self) -> None:
        node = AdfNode(type="panel", content=[paragraph(text_node("inside"))])
        self.assertEqual(convert_node(node), "<p>inside</p>")
        self.assertEqual(convert_node(AdfNode(type="rule")), "")

    def test_empty_document(self) -> None:
        self.assertEqual(adf_to_storage(AdfDocument(content=[])), "")

    def test_deterministic(self) -> None:
        document = AdfDocument(
            content=[
                paragraph(text_node("x")),
                create_plantuml_extension(PlantUMLDiagram(title="T", body="A -> B")),
            ]
        )
        self.assertEqual(adf_to_storage(document), adf_to_storage(document))

    def test_well_formed(self) -> None:
        document = AdfDocument(
            content=[
                AdfNode(type="heading", attrs={"level": 1}, content=[text_node("<Diagrams> & 'more'")]),
                code_block("x = 1 ]]> 2", "python"),
                create_plantuml_extension(PlantUMLDiagram(title='"Quoted"', body="A -> B]]>")),
            ]
        )
        root = elements_from_string(adf_to_storage(document))

        heading = root.find("h1")
        self.assertIsNotNone(heading)
        assert heading is not None
        self.assertEqual(heading.text, "<Diagrams> & 'more'")

        macros = root.findall(AC_TAG("structured-macro"))
        self.assertEqual([macro.get(AC_ATTR("name")) for macro in macros], ["code", "plantuml"])

        body = macros[1].find(AC_TAG("plain-text-body"))
        assert body is not None
        self.assertEqual(body.text, "A -> B]]>")


if __name__ == "__main__":
    unittest.main()
