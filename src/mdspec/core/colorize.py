"""Default code colorizer: plain text plus keyword/comment/string coloring for C# and VB"""

import re
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class ColorizedWord:
    text: str
    red: int = 0
    green: int = 0
    blue: int = 0
    italic: bool = False

    @property
    def color(self) -> str | None:
        """Hex RRGGBB, or None for the default (black) color."""
        if not (self.red or self.green or self.blue):
            return None
        return f"{self.red:02X}{self.green:02X}{self.blue:02X}"


@dataclass(frozen=True)
class ColorizedLine:
    words: tuple[ColorizedWord, ...]

    @property
    def length(self) -> int:
        return sum(len(w.text) for w in self.words)


class Colorizer(Protocol):
    def colorize(self, language: str, code: str) -> list[ColorizedLine]:
        ...


PLAIN = "plain"
CSHARP = "csharp"
VB = "vb"

KEYWORD = (0, 0, 255)
COMMENT = (0, 128, 0)
STRING = (163, 21, 21)

CSHARP_KEYWORDS = frozenset("""
    abstract as base bool break byte case catch char checked class const continue
    decimal default delegate do double else enum event explicit extern false finally
    fixed float for foreach goto if implicit in int interface internal is lock long
    namespace new null object operator out override params private protected public
    readonly ref return sbyte sealed short sizeof stackalloc static string struct
    switch this throw true try typeof uint ulong unchecked unsafe ushort using virtual
    void volatile while async await var dynamic record init get set value yield where
    """.split())

VB_KEYWORDS = frozenset(k.lower() for k in """
    AddHandler AddressOf Alias And AndAlso As Boolean ByRef Byte ByVal Call Case Catch
    CBool CByte CChar CDate CDbl CDec Char CInt Class CLng CObj Const Continue CSByte
    CShort CSng CStr CType CUInt CULng CUShort Date Decimal Declare Default Delegate Dim
    DirectCast Do Double Each Else ElseIf End Enum Erase Error Event Exit False Finally
    For Friend Function Get GetType Global GoTo Handles If Implements Imports In
    Inherits Integer Interface Is IsNot Let Lib Like Long Loop Me Mod Module MustInherit
    MustOverride MyBase MyClass Namespace Narrowing New Next Not Nothing Object Of On
    Operator Option Optional Or OrElse Overloads Overridable Overrides ParamArray
    Partial Private Property Protected Public RaiseEvent ReadOnly ReDim Return SByte
    Select Set Shadows Shared Short Single Static Step Stop String Structure Sub SyncLock
    Then Throw To True Try TryCast TypeOf UInteger ULong UShort Using When While Widening
    With WithEvents WriteOnly Xor
    """.split())

_CSHARP_TOKEN_RE = re.compile(r'(///.*$|//.*$|/\*|"(?:[^"\\]|\\.)*"?|\'(?:[^\'\\]|\\.)*\'?|[A-Za-z_]\w*)')
_VB_TOKEN_RE = re.compile(r"('.*$|\"(?:[^\"]|\"\")*\"?|[A-Za-z_]\w*)")


def _word(text: str, color: tuple[int, int, int] = (0, 0, 0), italic: bool = False) -> ColorizedWord:
    return ColorizedWord(text, *color, italic=italic)


def plain_text(code: str) -> list[ColorizedLine]:
    return [ColorizedLine((ColorizedWord(line),) if line else ()) for line in code.split("\n")]


def csharp(code: str) -> list[ColorizedLine]:
    lines = []
    in_comment = False
    for line in code.split("\n"):
        words: list[ColorizedWord] = []
        index = 0
        while index < len(line):
            if in_comment:
                end = line.find("*/", index)
                stop = len(line) if end == -1 else end + 2
                words.append(_word(line[index:stop], COMMENT))
                in_comment = end == -1
                index = stop
                continue
            m = _CSHARP_TOKEN_RE.search(line, index)
            if m is None:
                words.append(_word(line[index:]))
                break
            if m.start() > index:
                words.append(_word(line[index:m.start()]))
            token = m.group()
            if token == "/*":
                end = line.find("*/", m.end())
                stop = len(line) if end == -1 else end + 2
                words.append(_word(line[m.start():stop], COMMENT))
                in_comment = end == -1
                index = stop
                continue
            if token.startswith("///"):
                words.append(_word(token, COMMENT, italic=True))
            elif token.startswith("//"):
                words.append(_word(token, COMMENT))
            elif token[0] in "\"'":
                words.append(_word(token, STRING))
            elif token in CSHARP_KEYWORDS:
                words.append(_word(token, KEYWORD))
            else:
                words.append(_word(token))
            index = m.end()
        lines.append(ColorizedLine(tuple(words)))
    return lines


def vb(code: str) -> list[ColorizedLine]:
    lines = []
    for line in code.split("\n"):
        words: list[ColorizedWord] = []
        index = 0
        for m in _VB_TOKEN_RE.finditer(line):
            if m.start() > index:
                words.append(_word(line[index:m.start()]))
            token = m.group()
            if token.startswith("'"):
                words.append(_word(token, COMMENT))
            elif token.startswith('"'):
                words.append(_word(token, STRING))
            elif token.lower() in VB_KEYWORDS:
                words.append(_word(token, KEYWORD))
            else:
                words.append(_word(token))
            index = m.end()
        if index < len(line):
            words.append(_word(line[index:]))
        lines.append(ColorizedLine(tuple(words)))
    return lines


class DefaultColorizer:
    """Colorizer keyed by PLAIN/CSHARP/VB; anything else is treated as plain text."""

    def colorize(self, language: str, code: str) -> list[ColorizedLine]:
        if language == CSHARP:
            return csharp(code)
        if language == VB:
            return vb(code)
        return plain_text(code)
