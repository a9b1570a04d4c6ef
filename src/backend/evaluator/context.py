from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .config import RulesConfig
from .models import Issue, Severity
from .source_tree import SourceTree


class IssueSink:
    """Append-only, ordered collection of the issues emitted during one evaluation run."""

    def __init__(self):
        self._lock = threading.Lock()
        self._issues: list[Issue] = []

    def append(self, issue: Issue) -> None:
        with self._lock:
            self._issues.append(issue)

    def snapshot(self) -> tuple[Issue, ...]:
        with self._lock:
            return tuple(self._issues)

    def by_severity(self, severity: Severity) -> list[Issue]:
        return [issue for issue in self.snapshot() if issue.severity is severity]

    def max_severity(self) -> Optional[Severity]:
        issues = self.snapshot()
        if not issues:
            return None
        return max(issue.severity for issue in issues)

    def __iter__(self) -> Iterator[Issue]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._issues)


@dataclass(frozen=True)
class RuleContext:
    analysis_result: Any
    source_tree: SourceTree
    rules_config: RulesConfig = field(default_factory=RulesConfig)
    issues: IssueSink = field(default_factory=IssueSink)

    def issues_at_least(self, threshold: Severity) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity >= threshold]
