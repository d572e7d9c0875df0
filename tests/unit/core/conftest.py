"""Shared fixtures for core unit tests"""

import pytest

from mdspec.core.context import ConversionContext
from mdspec.core.diagnostics import Reporter
from mdspec.core.nodes import MarkdownDocument
from mdspec.core.parse import parse_text
from mdspec.core.sections import build_section_table
from mdspec.core.spans import SpanRenderer
from mdspec.core.walker import TreeWalker


@pytest.fixture(name="reporter")
def reporter_fixture():
    return Reporter()


@pytest.fixture(name="context")
def context_fixture(reporter):
    return ConversionContext(reporter=reporter)


@pytest.fixture(name="renderer")
def renderer_fixture(context):
    return SpanRenderer(context, "test.md")


@pytest.fixture(name="walker")
def walker_fixture(context):
    """Walker over an empty document, for converting hand-built nodes."""
    return TreeWalker(MarkdownDocument("test.md", ()), context)


@pytest.fixture(name="convert")
def convert_fixture():
    """Parse markdown and convert it; the section table is built from the same text."""
    def _convert(markdown: str, filename: str = "test.md", context: ConversionContext = None):
        document = parse_text(markdown, filename)
        if context is None:
            context = ConversionContext(build_section_table([document]))
        return list(TreeWalker(document, context).convert()), context
    return _convert
