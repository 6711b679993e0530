"""
Publish Markdown files to Confluence wiki.

Copyright 2022-2026, Levente Hunyadi

:see: https://github.com/hunyadi/md2conf
"""

import logging
import os
import unittest
from unittest import mock

from adfconf.environment import ArgumentError, ConnectionProperties, storage_format_enabled
from tests.utility import TypedTestCase

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(funcName)s [%(lineno)d] - %(message)s",
)


class TestEnvironment(TypedTestCase):
    @mock.patch.dict(os.environ, {}, clear=True)
    def test_arguments(self) -> None:
        properties = ConnectionProperties(domain="example.atlassian.net", user_name="user", api_key="key", space_key="SPACE")
        self.assertEqual(properties.domain, "example.atlassian.net")
        self.assertEqual(properties.base_path, "/wiki/")
        self.assertEqual(properties.space_key, "SPACE")
        self.assertTrue(properties.use_storage_format)
        self.assertFalse(properties.uses_personal_access_token)

    @mock.patch.dict(
        os.environ,
        {
            "CONFLUENCE_DOMAIN": "confluence.example.com",
            "CONFLUENCE_PATH": "/",
            "CONFLUENCE_PERSONAL_ACCESS_TOKEN": "token",
            "CONFLUENCE_SPACE_KEY": "DOC",
            "CONFLUENCE_USE_STORAGE_FORMAT": "false",
        },
        clear=True,
    )
    def test_environment(self) -> None:
        properties = ConnectionProperties()
        self.assertEqual(properties.domain, "confluence.example.com")
        self.assertEqual(properties.base_path, "/")
        self.assertEqual(properties.space_key, "DOC")
        self.assertFalse(properties.use_storage_format)
        self.assertTrue(properties.uses_personal_access_token)

    @mock.patch.dict(os.environ, {"CONFLUENCE_USE_STORAGE_FORMAT": "false"}, clear=True)
    def test_argument_overrides_environment(self) -> None:
        properties = ConnectionProperties(domain="example.com", api_key="key", use_storage_format=True)
        self.assertTrue(properties.use_storage_format)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_validation(self) -> None:
        with self.assertRaises(ArgumentError):
            ConnectionProperties(api_key="key")
        with self.assertRaises(ArgumentError):
            ConnectionProperties(domain="example.com")
        with self.assertRaises(ArgumentError):
            ConnectionProperties(domain="https://example.com", api_key="key")
        with self.assertRaises(ArgumentError):
            ConnectionProperties(domain="example.com/", api_key="key")
        with self.assertRaises(ArgumentError):
            ConnectionProperties(domain="example.com", base_path="wiki", api_key="key")

    @mock.patch.dict(os.environ, {"CONFLUENCE_USE_STORAGE_FORMAT": "maybe"}, clear=True)
    def test_invalid_flag(self) -> None:
        with self.assertRaises(ArgumentError):
            storage_format_enabled()

    def test_storage_format_flag(self) -> None:
        for value, expected in [("true", True), ("YES", True), ("0", False), ("off", False), ("", True)]:
            with self.subTest(value=value):
                with mock.patch.dict(os.environ, {"CONFLUENCE_USE_STORAGE_FORMAT": value}, clear=True):
                    self.assertEqual(storage_format_enabled(), expected)
        self.assertFalse(storage_format_enabled(False))


if __name__ == "__main__":
    unittest.main()
