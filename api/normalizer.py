# api/normalizer.py
"""
Source normalization for Kotlin snippets.

Turns an arbitrary, possibly incomplete snippet into a unit the remote
executor accepts: package declarations and the leading comment header are
removed, and the code is wrapped into a `fun main()` block unless a top-level
entry point already exists.

Structural checks run on a masked copy of the source (comments and string
contents blanked out), so text that only looks like a declaration or an entry
point inside a comment or a literal is ignored.
"""

import re
from enum import Enum
from typing import List

INDENT = "    "
PLACEHOLDER_BODY = 'println("No code provided")'

_PACKAGE_RE = re.compile(r"^[ \t]*package[ \t]+[A-Za-z_`][\w`]*(?:[ \t]*\.[ \t]*[A-Za-z_`][\w`]*)*")
_ENTRY_POINT_RE = re.compile(r"^[ \t]*fun[ \t]+main[ \t]*\([ \t]*\)\s*\{", re.MULTILINE)

# Scanner modes
_STRING = "string"
_RAW_STRING = "raw"
_TEMPLATE = "template"


class WrapStyle(str, Enum):
    """How a snippet without an entry point gets wrapped."""

    FUNCTION = "function"
    CONTAINERIZED = "containerized"


def _blank(chars: List[str], start: int, end: int) -> None:
    for k in range(start, end):
        if chars[k] != "\n":
            chars[k] = " "


def _block_comment_end(source: str, start: int) -> int:
    """
    Index just past the block comment opening at `start`.
    Kotlin block comments nest; an unterminated one runs to the end of text.
    """
    depth = 0
    i = start
    n = len(source)
    while i < n:
        if source.startswith("/*", i):
            depth += 1
            i += 2
        elif source.startswith("*/", i):
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    return n


def _line_end(source: str, start: int) -> int:
    end = source.find("\n", start)
    return len(source) if end == -1 else end


def _char_literal_end(source: str, start: int) -> int:
    i = start + 1
    n = len(source)
    while i < n and source[i] != "\n":
        if source[i] == "\\":
            i += 2
            continue
        if source[i] == "'":
            return i + 1
        i += 1
    return i


def mask_literals(source: str) -> str:
    """
    Return `source` with comments and string/char literal contents replaced by
    spaces. Length and line breaks are preserved, so offsets and line numbers
    in the result map 1:1 onto the input. Quote characters stay in place and
    `${...}` template expressions are scanned as code.
    """
    chars = list(source)
    n = len(source)
    # each entry is [mode, brace depth]; depth is only used by templates
    modes = []
    i = 0
    while i < n:
        mode = modes[-1][0] if modes else None

        if mode in (_STRING, _RAW_STRING):
            if mode == _RAW_STRING and source.startswith('"""', i):
                # a raw string may end with extra quotes; the last three close it
                while source.startswith('""""', i):
                    chars[i] = " "
                    i += 1
                modes.pop()
                i += 3
            elif mode == _STRING and source[i] == '"':
                modes.pop()
                i += 1
            elif mode == _STRING and source[i] == "\n":
                # plain strings cannot span lines
                modes.pop()
                i += 1
            elif mode == _STRING and source[i] == "\\":
                _blank(chars, i, min(i + 2, n))
                i += 2
            elif source.startswith("${", i):
                modes.append([_TEMPLATE, 0])
                i += 2
            else:
                _blank(chars, i, i + 1)
                i += 1
            continue

        # code, either top level or inside a ${...} template
        if source.startswith("//", i):
            end = _line_end(source, i)
            _blank(chars, i, end)
            i = end
        elif source.startswith("/*", i):
            end = _block_comment_end(source, i)
            _blank(chars, i, end)
            i = end
        elif source.startswith('"""', i):
            modes.append([_RAW_STRING, 0])
            i += 3
        elif source[i] == '"':
            modes.append([_STRING, 0])
            i += 1
        elif source[i] == "'":
            end = _char_literal_end(source, i)
            _blank(chars, i + 1, end)
            i = end
        elif mode == _TEMPLATE and source[i] == "{":
            modes[-1][1] += 1
            i += 1
        elif mode == _TEMPLATE and source[i] == "}":
            if modes[-1][1] == 0:
                modes.pop()
            else:
                modes[-1][1] -= 1
            i += 1
        else:
            i += 1

    return "".join(chars)


def strip_package_declarations(code: str) -> str:
    """
    Remove every line-anchored `package a.b.c` declaration, wherever it appears.
    The line break of a stripped line is kept.
    """
    masked_lines = mask_literals(code).split("\n")
    lines = code.split("\n")
    kept = []
    for line, masked in zip(lines, masked_lines):
        if _PACKAGE_RE.match(masked):
            kept.append("")
        else:
            kept.append(line)
    return "\n".join(kept)


def strip_leading_comments(code: str) -> str:
    """
    Drop the comment header (any run of `//` and `/* */` comments) that
    precedes the first real content.
    """
    rest = code.lstrip()
    while True:
        if rest.startswith("/*"):
            rest = rest[_block_comment_end(rest, 0):].lstrip()
        elif rest.startswith("//"):
            rest = rest[_line_end(rest, 0):].lstrip()
        else:
            return rest


def has_entry_point(code: str) -> bool:
    """
    True iff `code` declares a top-level `fun main() {` block.

    Only matches in real code count: the signature must not sit inside a
    comment or a string, and its line must be at brace depth zero.
    """
    masked = mask_literals(code)
    for match in _ENTRY_POINT_RE.finditer(masked):
        prefix = masked[:match.start()]
        if prefix.count("{") - prefix.count("}") == 0:
            return True
    return False


def _indent(code: str, unit: str) -> str:
    return "\n".join("" if line.strip() == "" else unit + line for line in code.split("\n"))


def wrap_in_entry_point(body: str, wrap_style: WrapStyle = WrapStyle.FUNCTION) -> str:
    """
    Wrap `body` into a synthesized entry point. An empty body is replaced by
    a placeholder statement; the executor rejects a main with no statements.
    """
    if not body.strip():
        body = PLACEHOLDER_BODY

    if wrap_style == WrapStyle.CONTAINERIZED:
        return (
            "object Main {\n"
            f"{INDENT}@JvmStatic\n"
            f"{INDENT}fun main(args: Array<String>) {{\n"
            f"{_indent(body, INDENT * 2)}\n"
            f"{INDENT}}}\n"
            "}"
        )
    return f"fun main() {{\n{_indent(body, INDENT)}\n}}"


def normalize(raw: str, wrap_style: WrapStyle = WrapStyle.FUNCTION) -> str:
    """
    Produce a compilable unit from a raw snippet.

    >>> normalize('package demo\\nprintln("hi")')
    'fun main() {\\n    println("hi")\\n}'
    """
    code = (raw or "").strip()
    code = strip_package_declarations(code)
    code = strip_leading_comments(code)
    code = code.strip()

    if has_entry_point(code):
        return code
    return wrap_in_entry_point(code, wrap_style)
