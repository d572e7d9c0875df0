"""Unit tests for core/utils/slug.py"""

import pytest

from mdspec.core.utils.slug import anchor_slug, bookmark_name


@pytest.mark.parametrize("title, expected", [
    ("Scope", "scope"),
    ("1.2 Scope", "12-scope"),
    ("7.4.2 Member access", "742-member-access"),
    ("Ref-safe contexts", "ref-safe-contexts"),
    ("The `is` operator", "the-is-operator"),
    ("snake_case names", "snake_case-names"),
])
def test_anchor_slug(title, expected):
    """Anchors are lowercase with punctuation dropped and spaces hyphenated."""
    assert anchor_slug(title) == expected


def test_bookmark_name_joins_sanitized_parts():
    """Bookmark names use underscores in place of anything non-alphanumeric."""
    assert bookmark_name("basic-concepts", "742-member-access") == "_basic_concepts_742_member_access"
