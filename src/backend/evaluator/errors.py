from __future__ import annotations

from typing import Optional


class EvaluatorError(Exception):
    pass


class SourceUnavailable(EvaluatorError):
    """The project's source tree could not be materialized.

    Raised on every query against a tree whose clone failed, so callers can tell
    "nothing matched" apart from "there was nothing to look at".
    """

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Source tree at '{location}' is unavailable: {reason}")


class InvalidPattern(EvaluatorError, ValueError):
    """A glob or regular expression supplied by a rule author is malformed."""

    def __init__(self, pattern: str, reason: str, rule_name: Optional[str] = None):
        self.pattern = pattern
        self.reason = reason
        self.rule_name = rule_name
        prefix = f"Rule '{rule_name}': " if rule_name else ""
        super().__init__(f"{prefix}invalid pattern '{pattern}': {reason}")

    def with_rule(self, rule_name: str) -> "InvalidPattern":
        return InvalidPattern(self.pattern, self.reason, rule_name=rule_name)
