from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Type

from loguru import logger

from .config import RuleConfigBase
from .context import RuleContext
from .errors import InvalidPattern
from .matchers import RuleMatcher
from .models import Issue, LicenseSource, Severity
from .patterns import compile_content_pattern, compile_globs


class Rule(ABC):
    """A named unit of policy evaluation.

    Subclasses implement `run()`, which inspects the context and reports findings through `issue()`, `hint()`,
    `warning()` and `error()`. Matchers registered via `require()` gate whether `run()` is called at all.
    """

    config_model: Type[RuleConfigBase] = RuleConfigBase

    def __init__(self, context: RuleContext, name: str):
        if not name:
            raise ValueError("Rule must have a name")
        self.context = context
        self.name = name
        self._requirements: list[RuleMatcher] = []

    @property
    def description(self) -> str:
        return f"Evaluating rule '{self.name}'."

    def issue_source(self) -> str:
        return self.name

    @property
    def config(self) -> RuleConfigBase:
        return self.context.rules_config.get_rule_config(self.name, self.config_model)

    def require(self, *matchers: RuleMatcher) -> None:
        self._requirements.extend(matchers)

    def evaluate(self) -> bool:
        """Run the rule body if it is enabled and all required matchers match. Returns whether the body ran."""
        logger.info(self.description)
        if not self.config.enabled:
            logger.info("Rule '{}' is disabled by configuration.", self.name)
            return False

        for matcher in self._requirements:
            matched = matcher.matches()
            logger.debug("{}: {} -> {}", self.issue_source(), matcher.description, matched)
            if not matched:
                return False

        self.run()
        return True

    @abstractmethod
    def run(self) -> None:  # pragma: no cover
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Issue emission
    # ------------------------------------------------------------------
    def issue(
        self,
        severity: Severity,
        message: str,
        *,
        package_id: Optional[str] = None,
        license: Optional[str] = None,
        license_source: Optional[LicenseSource] = None,
        how_to_fix: str = "",
    ) -> None:
        issue = Issue(
            severity=severity,
            rule=self.name,
            package_id=package_id,
            license=license,
            license_source=license_source,
            message=message,
            how_to_fix=how_to_fix,
        )
        logger.debug("{}: {} {}", self.issue_source(), issue.severity.value, issue.message)
        self.context.issues.append(issue)

    def hint(self, message: str, **kwargs) -> None:
        self.issue(Severity.HINT, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.issue(Severity.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.issue(Severity.ERROR, message, **kwargs)

    # ------------------------------------------------------------------
    # Source tree matchers
    # ------------------------------------------------------------------
    def source_tree_has_directory(self, *patterns: str) -> RuleMatcher:
        """A matcher for "the project's source tree has at least one directory matching any of `patterns`"."""
        self._validate_globs(patterns)
        tree = self.context.source_tree
        return RuleMatcher(
            f"source_tree_has_directory('{', '.join(patterns)}')",
            lambda: tree.has_directory(*patterns),
        )

    def source_tree_has_file(self, *patterns: str) -> RuleMatcher:
        """A matcher for "the project's source tree has at least one file matching any of `patterns`"."""
        self._validate_globs(patterns)
        tree = self.context.source_tree
        return RuleMatcher(
            f"source_tree_has_file('{', '.join(patterns)}')",
            lambda: tree.has_file(*patterns),
        )

    def source_tree_has_file_with_contents(self, content_pattern: str, *file_patterns: str) -> RuleMatcher:
        """A matcher for "some file matching `file_patterns` has content matching the `content_pattern` regex"."""
        try:
            compile_content_pattern(content_pattern)
        except InvalidPattern as exc:
            raise exc.with_rule(self.name) from exc
        self._validate_globs(file_patterns)
        tree = self.context.source_tree
        return RuleMatcher(
            f"source_tree_has_file_with_contents('{content_pattern}', '{', '.join(file_patterns)}')",
            lambda: tree.has_file_with_contents(content_pattern, *file_patterns),
        )

    def _validate_globs(self, patterns: tuple[str, ...]) -> None:
        try:
            compile_globs(patterns)
        except InvalidPattern as exc:
            raise exc.with_rule(self.name) from exc
