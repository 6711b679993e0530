"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import tempfile
import unittest
from pathlib import Path

from adfconf.api_types import ConfluenceRepresentation
from adfconf.document import ConfluenceDocument
from adfconf.domain import ConfluencePageID
from adfconf.environment import DocumentError
from adfconf.frontmatter import extract_properties
from adfconf.serializer import string_to_json
from adfconf.transclusion import LocalFileResolver
from tests.utility import TypedTestCase

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
)

MARKDOWN_DOCUMENT = """---
connie-title: "Sequence diagrams"
connie-page-id: 123456
---

# Overview

```plantuml
@startuml Greeting
Alice -> Bob: Hello
@enduml
```

![[flow.puml]]
"""

FLOW_DIAGRAM = """title Login Flow
actor User
User -> System: login
"""


class TestFrontMatter(TypedTestCase):
    def test_properties(self) -> None:
        properties, text = extract_properties("---\nconnie-title: Title\nconnie-publish: false\nother: 1\n---\n# Heading\n")
        self.assertEqual(properties.title, "Title")
        self.assertIsNone(properties.page_id)
        self.assertEqual(properties.publish, False)
        self.assertEqual(properties.data["other"], 1)
        self.assertEqual(text, "# Heading\n")

    def test_no_front_matter(self) -> None:
        properties, text = extract_properties("# Heading\n")
        self.assertIsNone(properties.title)
        self.assertIsNone(properties.publish)
        self.assertEqual(text, "# Heading\n")

    def test_malformed_front_matter(self) -> None:
        with self.assertLogs("adfconf.frontmatter", level=logging.WARNING):
            properties, _ = extract_properties("---\nkey: [unclosed\n---\n# Heading\n")
        self.assertIsNone(properties.title)


class TestDocument(TypedTestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root_dir = Path(self.temp_dir.name).resolve()
        (self.root_dir / "flow.puml").write_text(FLOW_DIAGRAM, encoding="utf-8")
        self.path = self.root_dir / "diagrams.md"
        self.path.write_text(MARKDOWN_DOCUMENT, encoding="utf-8")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_create(self) -> None:
        document = ConfluenceDocument.create(self.path, LocalFileResolver(self.root_dir))
        self.assertEqual(document.title, "Sequence diagrams")
        self.assertEqual(document.page_id, ConfluencePageID("123456"))
        self.assertIsNone(document.publish)

        nodes = document.adf.content
        self.assertEqual([node.type for node in nodes], ["heading", "extension", "extension"])
        self.assertExtension(nodes[1], "Greeting", "Alice -> Bob: Hello")
        self.assertExtension(nodes[2], "Login Flow", "actor User\nUser -> System: login")

    def test_storage(self) -> None:
        document = ConfluenceDocument.create(self.path, LocalFileResolver(self.root_dir))
        storage = document.storage()
        self.assertStartsWith(storage, "<h1>Overview</h1>")
        self.assertEqual(storage.count('<ac:structured-macro ac:name="plantuml" ac:schema-version="1">'), 2)
        self.assertIn('<ac:parameter ac:name="title">Greeting</ac:parameter>', storage)
        self.assertIn("<ac:plain-text-body><![CDATA[Alice -> Bob: Hello]]></ac:plain-text-body>", storage)
        self.assertNotIn("![[flow.puml]]", storage)

    def test_body(self) -> None:
        document = ConfluenceDocument.create(self.path, LocalFileResolver(self.root_dir))
        body = document.body()
        self.assertIsNone(body.storage)
        assert body.atlas_doc_format is not None
        self.assertEqual(body.atlas_doc_format.representation, ConfluenceRepresentation.ATLAS)

        data = string_to_json(body.atlas_doc_format.value)
        assert isinstance(data, dict)
        self.assertEqual(data["type"], "doc")
        self.assertEqual(data["version"], 1)

    def test_title_from_file_name(self) -> None:
        path = self.root_dir / "untitled.md"
        path.write_text("Text only.\n", encoding="utf-8")
        document = ConfluenceDocument.create(path, LocalFileResolver(self.root_dir))
        self.assertEqual(document.title, "untitled")
        self.assertIsNone(document.page_id)
        self.assertEqual(document.storage(), "<p>Text only.</p>")

    def test_title_from_heading(self) -> None:
        path = self.root_dir / "headed.md"
        path.write_text("Intro.\n\n## The **Big** Picture\n\n# Second\n", encoding="utf-8")
        document = ConfluenceDocument.create(path, LocalFileResolver(self.root_dir), title_from_heading=True)
        self.assertEqual(document.title, "The Big Picture")
        self.assertEqual([node.type for node in document.adf.content], ["paragraph", "heading", "heading"])

        document = ConfluenceDocument.create(path, LocalFileResolver(self.root_dir))
        self.assertEqual(document.title, "headed")

    def test_title_from_heading_precedence(self) -> None:
        document = ConfluenceDocument.create(self.path, LocalFileResolver(self.root_dir), title_from_heading=True)
        self.assertEqual(document.title, "Sequence diagrams")

        path = self.root_dir / "plain.md"
        path.write_text("No headings.\n", encoding="utf-8")
        document = ConfluenceDocument.create(path, LocalFileResolver(self.root_dir), title_from_heading=True)
        self.assertEqual(document.title, "plain")

    def test_missing_reference(self) -> None:
        path = self.root_dir / "missing.md"
        path.write_text("![[missing.puml]]\n", encoding="utf-8")
        document = ConfluenceDocument.create(path, LocalFileResolver(self.root_dir))
        self.assertNotIn("extension", [node.type for node in document.adf.content])

    def test_missing_file(self) -> None:
        with self.assertRaises(DocumentError):
            ConfluenceDocument.create(self.root_dir / "nonexistent.md", LocalFileResolver(self.root_dir))


if __name__ == "__main__":
    unittest.main()
