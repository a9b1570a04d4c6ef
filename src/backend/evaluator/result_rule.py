from __future__ import annotations

from typing import Any

from .rule import Rule
from .source_tree import SourceTree


class ResultRule(Rule):
    """A rule that checks the analysis result as a whole rather than a single package or license."""

    @property
    def analysis_result(self) -> Any:
        return self.context.analysis_result

    @property
    def source_tree(self) -> SourceTree:
        """The project's source tree. Querying it may clone the repository and thus may take a while."""
        return self.context.source_tree

    @property
    def description(self) -> str:
        return f"Evaluating result rule '{self.name}'."

    def issue_source(self) -> str:
        return f"{self.name} - result"
