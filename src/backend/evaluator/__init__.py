"""Rule evaluation against a project's analysis result and source tree.

This package intentionally contains only the evaluation core:
- Rules query a shared RuleContext (analysis result + source tree) and emit Issues.
- Orchestrating many rules into a run and reporting findings live elsewhere.
"""

from .config import EvaluatorSettings, RuleConfigBase, RulesConfig, get_settings
from .context import IssueSink, RuleContext
from .errors import EvaluatorError, InvalidPattern, SourceUnavailable
from .matchers import RuleMatcher, all_of, any_of, none_of, not_
from .models import Issue, LicenseSource, MaterializationState, Severity, VcsInfo, VcsType
from .result_rule import ResultRule
from .rule import Rule
from .source_tree import SourceTree

__all__ = [
    "EvaluatorError",
    "EvaluatorSettings",
    "InvalidPattern",
    "Issue",
    "IssueSink",
    "LicenseSource",
    "MaterializationState",
    "ResultRule",
    "Rule",
    "RuleConfigBase",
    "RuleContext",
    "RuleMatcher",
    "RulesConfig",
    "Severity",
    "SourceTree",
    "SourceUnavailable",
    "VcsInfo",
    "VcsType",
    "all_of",
    "any_of",
    "get_settings",
    "none_of",
    "not_",
]
