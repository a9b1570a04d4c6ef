from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type, TypeVar

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .models import Severity

T = TypeVar("T", bound=BaseModel)


load_dotenv()


class RuleConfigBase(BaseModel):
    enabled: bool = True


class LicenseFileRuleConfig(RuleConfigBase):
    severity: Severity = Severity.ERROR
    # A README section like "## License" counts as license documentation.
    accept_readme_section: bool = True

    @field_validator("severity", mode="before")
    @classmethod
    def _parse_severity(cls, value: Any) -> Severity:
        return Severity.parse(value)


class RulesConfig(BaseModel):
    """Per-rule configuration for one evaluation run.

    Rules pull their typed config via `get_rule_config`.
    """

    rules: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    def get_rule_config(
        self,
        rule_name: str,
        model: Type[T],
        default: Optional[T] = None,
    ) -> T:
        raw = self.rules.get(rule_name)
        if raw is None:
            return default if default is not None else model()  # type: ignore[call-arg]
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration for rule '{rule_name}': {exc}") from exc


@dataclass(frozen=True)
class EvaluatorSettings:
    clone_dir: str
    git_executable: str
    clone_depth: int


def get_settings() -> EvaluatorSettings:
    """
    Load evaluator settings from environment variables.

    Reads:
      EVALUATOR_CLONE_DIR    parent directory for clones (default: system temp dir)
      EVALUATOR_GIT          git executable (default: "git")
      EVALUATOR_CLONE_DEPTH  fetch depth, 0 for full history (default: 1)
    """
    return EvaluatorSettings(
        clone_dir=os.getenv("EVALUATOR_CLONE_DIR", "").strip(),
        git_executable=os.getenv("EVALUATOR_GIT", "").strip() or "git",
        clone_depth=_int_env("EVALUATOR_CLONE_DEPTH", 1),
    )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value
