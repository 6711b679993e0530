"""
Publish Markdown files with PlantUML diagrams to Confluence wiki.

Parses Markdown files into Atlassian Document Format (ADF), turns PlantUML code blocks into Confluence macro extensions,
and either submits ADF directly or compiles it into the Confluence Storage Format (XHTML) before invoking Confluence
API endpoints.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

__author__ = "Levente Hunyadi"
__copyright__ = "Copyright 2022-2026, Levente Hunyadi"
__license__ = "MIT"
__maintainer__ = "Levente Hunyadi"
__status__ = "Production"
