"""Textual workaround passes applied to code text, and vertical-position splitting.

The passes undo escapes that authors use to get pipes and code past the
Markdown parser. They run in a fixed order on every inline-code, math and
code-block string; their behavior is relied on by existing sources.
"""

from mdspec.core.document import VerticalPosition


PIPE_TOKEN = "ceci_n'est_pas_une_pipe"
RESERVED_PREFIX = "ceci_n'est_pas_une_"
ESCAPED_PIPE = "\\|"


def decode_pipe_token(s: str) -> str:
    return s.replace(PIPE_TOKEN, "|")


def strip_reserved_prefix(s: str) -> str:
    return s.replace(RESERVED_PREFIX, "")


def unescape_pipe(s: str) -> str:
    """Table cells escape literal pipes as `\\|`; the backslash never belongs in output."""
    return s.replace(ESCAPED_PIPE, "|")


NORMALIZATION_PASSES = (decode_pipe_token, strip_reserved_prefix, unescape_pipe)


def normalize_code(s: str) -> str:
    for normalize in NORMALIZATION_PASSES:
        s = normalize(s)
    return s


SUBSCRIPT_TO_ASCII = {
    "\u1d62": "i",
    "\u1d65": "v",
    "\u2080": "0",
    "\u2081": "1",
    "\u2082": "2",
    "\u2083": "3",
    "\u2084": "4",
    "\u2085": "5",
    "\u2086": "6",
    "\u2087": "7",
    "\u2088": "8",
    "\u2089": "9",
    "\u208a": "+",
    "\u208b": "-",
    "\u2091": "e",
    "\u2093": "x",
}

SUPERSCRIPT_TO_ASCII = {
    "\u00aa": "a",
    "\u207f": "n",
    "\u00b9": "1",
}


def split_by_vertical_position(code: str) -> list[tuple[str, VerticalPosition]]:
    """Split text into runs of baseline, subscript and superscript characters.

    Sub/superscript codepoints are replaced with their ASCII equivalent. Empty
    input yields a single empty baseline part.
    """
    parts: list[tuple[str, VerticalPosition]] = []
    current: list[str] = []
    position = VerticalPosition.baseline
    for c in code:
        if c in SUBSCRIPT_TO_ASCII:
            next_position, out = VerticalPosition.subscript, SUBSCRIPT_TO_ASCII[c]
        elif c in SUPERSCRIPT_TO_ASCII:
            next_position, out = VerticalPosition.superscript, SUPERSCRIPT_TO_ASCII[c]
        else:
            next_position, out = VerticalPosition.baseline, c
        if next_position != position and current:
            parts.append(("".join(current), position))
            current = []
        position = next_position
        current.append(out)
    parts.append(("".join(current), position))
    return parts
