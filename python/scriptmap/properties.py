"""Line-oriented ``key=value`` properties format.

Reads and writes the classic properties layout: ``#``/``!`` comments,
backslash line continuations, ``=``/``:``/whitespace separators and
backslash escapes, with ``\\uXXXX`` escapes for anything outside printable
ASCII. Written files are pure ASCII; files are read as latin-1.

Usage:
    from scriptmap import properties

    text = properties.dumps({"Foo": "/tmp/foo.gradle"}, comment="Autogenerated.")
    assert properties.loads(text) == {"Foo": "/tmp/foo.gradle"}
"""

import re
import string
from datetime import datetime, timezone
from typing import IO

ENCODING = "latin-1"

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")
_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_COMMENT_MARKERS = "#!"

_UNESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ESCAPES = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_SPECIALS = "=:#!"


class PropertiesError(ValueError):
    """Raised when properties text cannot be decoded."""


def loads(text: str) -> dict[str, str]:
    """Parse properties text into a dict. Later duplicate keys win."""
    entries: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_entry(line)
        entries[_unescape(key)] = _unescape(value)
    return entries


def load(fp: IO[str]) -> dict[str, str]:
    return loads(fp.read())


def dumps(entries: dict[str, str], comment: str | None = None) -> str:
    """Serialize entries, sorted by key, behind comment and timestamp lines."""
    lines = []
    if comment is not None:
        for part in _NEWLINE_RE.split(comment):
            lines.append("# " + _escape_comment(part))
    lines.append("# " + _get_timestamp())
    for key in sorted(entries):
        lines.append(f"{_escape(key, is_key=True)}={_escape(entries[key], is_key=False)}")
    return "\n".join(lines) + "\n"


def dump(entries: dict[str, str], fp: IO[str], comment: str | None = None) -> None:
    fp.write(dumps(entries, comment=comment))


def _get_timestamp() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _logical_lines(text: str):
    """Yield logical lines with comments, blanks and continuations resolved."""
    pending: str | None = None
    for raw in _NEWLINE_RE.split(text):
        if pending is not None:
            line = pending + raw.lstrip(_WHITESPACE)
            pending = None
        else:
            line = raw.lstrip(_WHITESPACE)
            if not line or line[0] in _COMMENT_MARKERS:
                continue

        if _continues(line):
            pending = line[:-1]
            continue
        yield line

    # Input ended on a continuation
    if pending:
        yield pending


def _continues(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line into its still-escaped key and value."""
    n = len(line)
    i = 0
    while i < n:
        c = line[i]
        if c == "\\":
            i += 2
            continue
        if c in _SEPARATORS or c in _WHITESPACE:
            break
        i += 1
    i = min(i, n)
    key = line[:i]

    while i < n and line[i] in _WHITESPACE:
        i += 1
    if i < n and line[i] in _SEPARATORS:
        i += 1
    while i < n and line[i] in _WHITESPACE:
        i += 1
    return key, line[i:]


def _unescape(text: str) -> str:
    if "\\" not in text:
        return text

    out = []
    n = len(text)
    i = 0
    while i < n:
        c = text[i]
        i += 1
        if c != "\\":
            out.append(c)
            continue
        if i >= n:
            break
        c = text[i]
        i += 1
        if c == "u":
            digits = text[i:i + 4]
            if len(digits) != 4 or any(d not in string.hexdigits for d in digits):
                raise PropertiesError(f"Malformed \\uxxxx encoding: \\u{digits}")
            out.append(chr(int(digits, 16)))
            i += 4
        else:
            out.append(_UNESCAPES.get(c, c))

    # \u escapes carry UTF-16 code units; fold surrogate pairs back together.
    return "".join(out).encode("utf-16-le", "surrogatepass").decode(
        "utf-16-le", "surrogatepass"
    )


def _escape(text: str, is_key: bool) -> str:
    out = []
    for index, c in enumerate(text):
        if c == " ":
            out.append("\\ " if is_key or index == 0 else " ")
        elif c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif c in _SPECIALS:
            out.append("\\" + c)
        elif " " < c <= "~":
            out.append(c)
        else:
            out.append(_unicode_escape(c))
    return "".join(out)


def _escape_comment(text: str) -> str:
    return "".join(c if " " <= c <= "~" else _unicode_escape(c) for c in text)


def _unicode_escape(c: str) -> str:
    data = c.encode("utf-16-be", "surrogatepass")
    return "".join(
        "\\u%04X" % int.from_bytes(data[k:k + 2], "big")
        for k in range(0, len(data), 2)
    )
