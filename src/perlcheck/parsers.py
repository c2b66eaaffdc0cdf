# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse ``perl -c`` output into diagnostics.

Perl reports every compile-time problem as ``<message> at <file> line <N>``
followed by ``.`` or by ``, near "..."`` style context. A single line
does not say whether it was fatal. The wording of perl's fatal compile
messages gives a first guess, and the abort marker plus the exit status
settle the rest.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Final

from .models import ParsedDiagnostic
from .severity import Severity

# Follow-on lines that restate an earlier error rather than adding one.
CHATTER_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^BEGIN failed--compilation aborted"),
    re.compile(r"^BEGIN not safe after errors--compilation aborted"),
    re.compile(r"had compilation errors\.$"),
    re.compile(r" syntax OK$"),
    re.compile(r"^Execution of .* aborted due to compilation errors\.$"),
)

FATAL_MESSAGE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"^syntax error"),
    re.compile(r"^Bareword \".*\" not allowed while \"strict subs\" in use"),
    re.compile(r"^Global symbol \".*\" requires explicit package name"),
    re.compile(r"^Can't locate \S+ in @INC"),
    re.compile(r"^Can't locate object method"),
    re.compile(r"^Can't find string terminator"),
    re.compile(r"^Can't use "),
    re.compile(r"^Can't modify "),
    re.compile(r"^Can't declare "),
    re.compile(r"^Missing right curly"),
    re.compile(r"^Unmatched right curly"),
    re.compile(r"^Not enough arguments for "),
    re.compile(r"^Too many arguments for "),
    re.compile(r"^Type of arg \d+ to .* must be "),
    re.compile(r"^Undefined subroutine "),
    re.compile(r"^Illegal declaration of "),
    re.compile(r"^Missing \$ on loop variable"),
    re.compile(r"^\S+ found where operator expected"),
    re.compile(r"^Unknown regexp modifier"),
    re.compile(r"^Unmatched [\[(]"),
    re.compile(r"^Experimental .* is not supported"),
    re.compile(r"^Illegal character in prototype", re.IGNORECASE),
    re.compile(r"^Unrecognized character "),
    re.compile(r"^Transliteration (?:pattern|replacement) not terminated"),
    re.compile(r"^Substitution (?:pattern|replacement) not terminated"),
    re.compile(r"^Search pattern not terminated"),
)

BEGIN_FAILED_MESSAGE: Final[str] = "BEGIN failed--compilation aborted"

# ``, <STDIN> line 3.`` marks the last read filehandle, not an error context.
_FILEHANDLE_TAIL: Final[re.Pattern[str]] = re.compile(r"^, <[^>]+> (?:line|chunk) \d+\.$")


def _location_pattern(filename: str) -> re.Pattern[str]:
    return re.compile(rf"^(?P<message>.+) at {re.escape(filename)} line (?P<line>\d+)(?P<tail>.*)$")


def _begin_failed_pattern(filename: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(BEGIN_FAILED_MESSAGE)} at {re.escape(filename)} line (?P<line>\d+)\.$")


def is_chatter(line: str) -> bool:
    """Return ``True`` when ``line`` only restates an earlier diagnostic."""

    return any(pattern.search(line) for pattern in CHATTER_PATTERNS)


def classify_message(message: str) -> Severity:
    """Return the severity perl implies for a ``... at FILE line N.`` message."""

    if any(pattern.search(message) for pattern in FATAL_MESSAGE_PATTERNS):
        return Severity.ERROR
    return Severity.WARNING


def parse_compile_line(line: str, pattern: re.Pattern[str]) -> ParsedDiagnostic | None:
    """Return the diagnostic described by a single output ``line``, if any."""

    stripped = line.rstrip()
    if not stripped or is_chatter(stripped):
        return None
    match = pattern.match(stripped)
    if match is None:
        return None
    message = match.group("message")
    tail = match.group("tail")
    line_no = int(match.group("line"))
    if line_no < 1:
        return None
    if tail == "." or _FILEHANDLE_TAIL.match(tail):
        return ParsedDiagnostic(severity=classify_message(message), message=message, line=line_no)
    if tail.startswith(","):
        return ParsedDiagnostic(severity=Severity.ERROR, message=f"{message}{tail}", line=line_no)
    return None


def parse_compile_output(
    output: str | Sequence[str],
    filename: str,
    *,
    returncode: int | None = None,
) -> list[ParsedDiagnostic]:
    """Convert interpreter output into diagnostics for ``filename``.

    Perl marks an aborted compile with ``BEGIN failed--compilation aborted``
    and a non-zero exit status. Both signals override the phrase-based
    severity so a failed compile always carries at least one error.

    Args:
        output: Combined stdout/stderr text, or its lines.
        filename: Path exactly as it was handed to the interpreter. Reports
            about other files (e.g. loaded modules) are ignored.
        returncode: Interpreter exit status, when known.

    Returns:
        list[ParsedDiagnostic]: Diagnostics in emission order. Lines that do
        not follow perl's diagnostic grammar are dropped.
    """

    lines: Iterable[str] = output.splitlines() if isinstance(output, str) else output
    pattern = _location_pattern(filename)
    begin_failed = _begin_failed_pattern(filename)
    results: list[ParsedDiagnostic] = []
    follows_diagnostic = False
    for raw_line in lines:
        aborted = begin_failed.match(raw_line.rstrip())
        if aborted is not None:
            _mark_abort(results, int(aborted.group("line")), follows_diagnostic=follows_diagnostic)
            follows_diagnostic = False
            continue
        parsed = parse_compile_line(raw_line, pattern)
        follows_diagnostic = parsed is not None
        if parsed is not None:
            results.append(parsed)
    if returncode and all(item.severity is Severity.WARNING for item in results):
        if results:
            results[-1] = _as_error(results[-1])
        else:
            results.append(
                ParsedDiagnostic(
                    severity=Severity.ERROR,
                    message=f"compilation failed with exit status {returncode}",
                    line=1,
                )
            )
    return results


def _mark_abort(results: list[ParsedDiagnostic], line_no: int, *, follows_diagnostic: bool) -> None:
    """Promote the diagnostic that caused an abort, or record the abort itself."""
    if line_no < 1:
        return
    if results and (follows_diagnostic or results[-1].line == line_no):
        results[-1] = _as_error(results[-1])
        return
    results.append(ParsedDiagnostic(severity=Severity.ERROR, message=BEGIN_FAILED_MESSAGE, line=line_no))


def _as_error(diagnostic: ParsedDiagnostic) -> ParsedDiagnostic:
    if diagnostic.severity is Severity.ERROR:
        return diagnostic
    return diagnostic.model_copy(update={"severity": Severity.ERROR})


__all__ = [
    "BEGIN_FAILED_MESSAGE",
    "CHATTER_PATTERNS",
    "FATAL_MESSAGE_PATTERNS",
    "classify_message",
    "is_chatter",
    "parse_compile_line",
    "parse_compile_output",
]
