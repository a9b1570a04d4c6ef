"""Glob and content-pattern compilation for source tree queries.

Globs are matched against paths relative to the tree root, always using ``/``
as the separator:

- ``*`` matches any run of characters except ``/``; ``?`` matches one.
- ``**/`` matches zero or more leading directories and a trailing ``/**`` zero
  or more trailing ones; ``**`` elsewhere matches anything, separators included.
- ``[abc]``, ``[a-z]``, ``[!abc]`` are character classes (never matching ``/``).
- ``{a,b}`` matches either alternative (no nesting).
- ``\\x`` matches ``x`` literally.

A pattern without ``/`` and without ``**`` (e.g. ``README.md``) is matched
against the entry's base name only, so it finds entries at any depth.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Pattern

from .errors import InvalidPattern


@dataclass(frozen=True)
class GlobPattern:
    pattern: str
    regex: Pattern[str]
    name_only: bool

    def matches(self, relative_path: str) -> bool:
        target = relative_path.rsplit("/", 1)[-1] if self.name_only else relative_path
        return self.regex.fullmatch(target) is not None


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> GlobPattern:
    if not pattern:
        raise InvalidPattern(pattern, "pattern must not be empty")
    if pattern.startswith("/"):
        raise InvalidPattern(pattern, "pattern must be relative to the source tree root")

    translated = _translate(pattern)
    try:
        regex = re.compile(translated)
    except re.error as exc:
        raise InvalidPattern(pattern, str(exc)) from exc

    name_only = "/" not in pattern and "**" not in pattern
    return GlobPattern(pattern=pattern, regex=regex, name_only=name_only)


def compile_globs(patterns: Iterable[str]) -> tuple[GlobPattern, ...]:
    compiled = tuple(compile_glob(p) for p in patterns)
    if not compiled:
        raise InvalidPattern("", "at least one glob pattern is required")
    return compiled


def compile_content_pattern(pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern, re.MULTILINE)
    except re.error as exc:
        raise InvalidPattern(pattern, str(exc)) from exc


def _translate(pattern: str) -> str:
    parts: list[str] = []
    in_brace = False
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "/" and not in_brace and pattern[i:] == "/**":
            # A trailing "/**" also matches the directory itself.
            parts.append("(?:/.*)?")
            i += 3
        elif c == "*":
            if pattern.startswith("**/", i):
                parts.append("(?:.*/)?")
                i += 3
            elif pattern.startswith("**", i):
                parts.append(".*")
                i += 2
            else:
                parts.append("[^/]*")
                i += 1
        elif c == "?":
            parts.append("[^/]")
            i += 1
        elif c == "[":
            parts.append(_translate_class(pattern, i))
            i = pattern.index("]", _class_body_start(pattern, i)) + 1
        elif c == "{":
            if in_brace:
                raise InvalidPattern(pattern, "nested braces are not supported")
            in_brace = True
            parts.append("(?:")
            i += 1
        elif c == "," and in_brace:
            parts.append("|")
            i += 1
        elif c == "}" and in_brace:
            in_brace = False
            parts.append(")")
            i += 1
        elif c == "\\":
            if i + 1 >= n:
                raise InvalidPattern(pattern, "dangling escape at end of pattern")
            parts.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            parts.append(re.escape(c))
            i += 1

    if in_brace:
        raise InvalidPattern(pattern, "unterminated '{'")
    return "".join(parts)


def _class_body_start(pattern: str, start: int) -> int:
    j = start + 1
    if j < len(pattern) and pattern[j] in "!^":
        j += 1
    # A ']' directly after the opening bracket is a literal member.
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    return j


def _translate_class(pattern: str, start: int) -> str:
    body_start = _class_body_start(pattern, start)
    end = pattern.find("]", body_start)
    if end == -1:
        raise InvalidPattern(pattern, "unterminated character class")

    body = pattern[start + 1 : end]
    negate = body[:1] in ("!", "^")
    if negate:
        body = body[1:]
    body = body.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
    if negate:
        return f"[^/{body}]"
    return f"(?!/)[{body}]"
