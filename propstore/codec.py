"""
Properties codec.

Responsibilities:
- byte decoding (UTF-8 first, charset-normalizer as a fallback)
- line parsing into an ordered table
- malformed line / duplicate key reporting
- deterministic serialization (sorted keys, canonical list form)
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, Tuple, runtime_checkable

from charset_normalizer import from_bytes

from .errors import ParseError
from .models import ListValue, ParseReport, ParseResult, ReportItem, SingleValue, Table
from .rules import (
    COMMENT_PREFIXES,
    KEY_VALUE_SEPARATOR,
    LINE_TERMINATOR,
    LIST_SEPARATOR,
    OUTPUT_SEPARATOR,
    TARGET_ENCODING,
    UTF8_BOM,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class Codec(Protocol):
    name: str

    def parse(self, text: str) -> Table: ...

    def parse_with_report(self, text: str) -> ParseResult: ...

    def serialize(self, table: Table) -> str: ...


def decode_bytes(raw: bytes) -> Tuple[str, str]:
    """
    Turn file bytes into text.

    Rules:
    - A leading UTF-8 BOM is dropped.
    - Strict UTF-8 is tried first; almost every properties file is ASCII/UTF-8.
    - Otherwise the best charset-normalizer guess is used.
    - If nothing decodes, raise ParseError (no replacement characters, a
      settings file must not be silently altered).
    """
    if raw.startswith(UTF8_BOM):
        raw = raw[len(UTF8_BOM):]

    try:
        return raw.decode(TARGET_ENCODING), TARGET_ENCODING
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is not None:
        try:
            text = raw.decode(match.encoding)
        except (LookupError, UnicodeDecodeError):
            text = None
        if text is not None:
            logger.debug("decoded properties as %s (not %s)", match.encoding, TARGET_ENCODING)
            return text, match.encoding

    raise ParseError([
        ReportItem(
            issue="undecodable_content",
            value=f"{len(raw)} bytes",
            action="rejected",
        )
    ])


def is_comment(line: str) -> bool:
    return line.lstrip().startswith(COMMENT_PREFIXES)


def parse_value(raw: str):
    """A raw value with any separator is a list; segments are trimmed."""
    if LIST_SEPARATOR in raw:
        return ListValue(values=tuple(s.strip() for s in raw.split(LIST_SEPARATOR)))
    return SingleValue(value=raw)


def format_value(value) -> str:
    if isinstance(value, ListValue):
        return LIST_SEPARATOR.join(value.values)
    return value.value


def parse_with_report(text: str) -> ParseResult:
    """
    Parse properties text without raising.

    Malformed lines end up in report.errors and are skipped; every remaining
    line is still parsed. Repeated keys keep the last value and are reported
    as warnings.
    """
    table: Table = {}
    report = ParseReport()
    previous_line = {}

    # CRLF/CR -> LF, then split only on LF
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    report.summary.lines = len(lines)

    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        if is_comment(line):
            report.summary.comments += 1
            continue

        key, sep, raw = line.partition(KEY_VALUE_SEPARATOR)
        key = key.strip()

        if not sep:
            report.errors.append(ReportItem(
                line=lineno,
                issue="missing_separator",
                value=line,
                action="skipped",
            ))
            continue

        if not key:
            report.errors.append(ReportItem(
                line=lineno,
                issue="empty_key",
                value=line,
                action="skipped",
            ))
            continue

        if key in table:
            report.warnings.append(ReportItem(
                line=lineno,
                key=key,
                issue="duplicate_key",
                value=format_value(table[key]),
                action=f"overwritten_from_line_{previous_line[key]}",
            ))
            # re-insert so file order reflects the surviving occurrence
            del table[key]

        table[key] = parse_value(raw.strip())
        previous_line[key] = lineno

    report.summary.entries = len(table)
    report.summary.warnings = len(report.warnings)
    report.summary.errors = len(report.errors)

    if report.warnings or report.errors:
        logger.debug(
            "parsed %d entries with %d warnings, %d errors",
            len(table), len(report.warnings), len(report.errors),
        )

    return ParseResult(table=table, report=report)


def parse(text: str) -> Table:
    """Parse properties text, raising ParseError listing every malformed line."""
    result = parse_with_report(text)
    if result.report.errors:
        raise ParseError(result.report.errors)
    return result.table


def iter_lines(table: Table) -> Iterable[str]:
    for key in sorted(table):
        yield key + OUTPUT_SEPARATOR + format_value(table[key]) + LINE_TERMINATOR


def serialize(table: Table) -> str:
    return "".join(iter_lines(table))


class PropertiesCodec:
    """The `key = value` backend. Stateless; one instance can be shared."""

    name = "properties"

    def parse(self, text: str) -> Table:
        return parse(text)

    def parse_with_report(self, text: str) -> ParseResult:
        return parse_with_report(text)

    def serialize(self, table: Table) -> str:
        return serialize(table)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
