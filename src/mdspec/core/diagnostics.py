"""Diagnostic records and the reporter that collects them during conversion"""

import logging
from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel


logger = logging.getLogger(__name__)


class Severity(str, Enum):
    info = "info"
    warning = "warning"
    error = "error"


_LOG_LEVELS = {
    Severity.info:    logging.INFO,
    Severity.warning: logging.WARNING,
    Severity.error:   logging.ERROR,
}


class DiagnosticCode:
    UNEXPECTED_LIST_ITEM   = "MDC008"
    UNKNOWN_LANGUAGE       = "MDC009"
    MISSING_TABLE_HEADER   = "MDC010"
    UNRECOGNIZED_BLOCK     = "MDC011"
    MIXED_LIST_ORDERING    = "MDC012"
    LIST_TOO_DEEP          = "MDC013"
    UNSUPPORTED_LIST_ITEM  = "MDC014"
    TERM_REDEFINED         = "MDC016"
    TERM_PREVIOUS_DEF      = "MDC016b"
    ODD_EMPHASIS           = "MDC017"
    BAD_LINK_ANCHOR        = "MDC018"
    ANCHOR_MISMATCH        = "MDC019"
    UNRECOGNIZED_SPAN      = "MDC020"
    UNKNOWN_SECTION        = "MDC021"
    DUPLICATE_SECTION      = "MDC022"
    UNRECOGNIZED_URL       = "MDC028"
    UNKNOWN_CUSTOM_BLOCK   = "MDC029"
    UNSUPPORTED_IN_QUOTE   = "MDC030"
    CODE_LINE_TOO_LONG     = "MDC032"
    MEMBERS_WITHOUT_TABLE  = "MDC033"
    UNEXPECTED_MEMBER_NODE = "MDC034"
    HEADING_TRACE          = "MDC999"
    REFERENCE_NOT_FOUND    = "TOC002"
    MALFORMED_REFERENCE    = "TOC003"


class Location(BaseModel):
    file: Optional[str] = None
    line: Optional[int] = None

    def __str__(self) -> str:
        if self.line is None:
            return self.file or "<unknown>"
        return f"{self.file or '<unknown>'}({self.line})"


class Diagnostic(BaseModel):
    code: str
    severity: Severity
    message: str
    location: Location = Location()
    line_offset: Optional[int] = None   # zero-based line within a code block

    def __str__(self) -> str:
        where = str(self.location)
        if self.line_offset is not None:
            where += f"+{self.line_offset}"
        return f"{where}: {self.severity.value} {self.code}: {self.message}"


class Reporter:
    """Collects diagnostics, mirrors them to logging and an optional sink.

    The walker keeps `current_file`/`current_line` up to date so that records
    carry the position of the block being converted.
    """

    def __init__(self, sink: Callable[[Diagnostic], None] = None):
        self.sink = sink
        self.diagnostics: list[Diagnostic] = []
        self.current_file: Optional[str] = None
        self.current_line: Optional[int] = None

    @property
    def location(self) -> Location:
        return Location(file=self.current_file, line=self.current_line)

    def log(self, code: str, message: str) -> Diagnostic:
        return self._report(Severity.info, code, message, None, None)

    def warning(self, code: str, message: str, location: Location = None, line_offset: int = None) -> Diagnostic:
        return self._report(Severity.warning, code, message, location, line_offset)

    def error(self, code: str, message: str, location: Location = None, line_offset: int = None) -> Diagnostic:
        return self._report(Severity.error, code, message, location, line_offset)

    def count(self, severity: Severity) -> int:
        return sum(1 for d in self.diagnostics if d.severity == severity)

    def _report(self, severity, code, message, location, line_offset) -> Diagnostic:
        diagnostic = Diagnostic(
            code=code,
            severity=severity,
            message=message,
            location=location or self.location,
            line_offset=line_offset,
        )
        self.diagnostics.append(diagnostic)
        logger.log(_LOG_LEVELS[severity], "%s", diagnostic)
        if self.sink is not None:
            self.sink(diagnostic)
        return diagnostic
