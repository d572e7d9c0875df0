"""Heading anchors and bookmark names"""

import re


def anchor_slug(text: str) -> str:
    """GitHub-style heading anchor: lowercase, punctuation dropped, spaces to hyphens."""
    text = text.strip().lower()
    text = re.sub(r'[^\w\- ]', '', text)
    return text.replace(' ', '-')


def bookmark_name(*parts: str) -> str:
    """Join parts into an identifier made of ASCII letters, digits and underscores."""
    joined = '_'.join(re.sub(r'[^A-Za-z0-9]+', '_', p).strip('_') for p in parts)
    return f"_{joined}"
