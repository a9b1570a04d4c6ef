from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Severity(str, Enum):
    HINT = "HINT"
    WARNING = "WARNING"
    ERROR = "ERROR"

    @property
    def rank(self) -> int:
        # Ascending; thresholds compare on this, never on the string value.
        return {
            Severity.HINT: 0,
            Severity.WARNING: 1,
            Severity.ERROR: 2,
        }[self]

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        if isinstance(value, Severity):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {value!r}") from None

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


class LicenseSource(str, Enum):
    DECLARED = "DECLARED"
    DETECTED = "DETECTED"
    CONCLUDED = "CONCLUDED"


class VcsType(str, Enum):
    GIT = "Git"
    GIT_REPO = "GitRepo"
    MERCURIAL = "Mercurial"
    SUBVERSION = "Subversion"
    UNKNOWN = ""


class VcsInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: VcsType
    url: str
    revision: str = ""
    # Sub-directory of the repository the project lives in, if not the root.
    path: str = ""

    def describe(self) -> str:
        parts = [self.url]
        if self.revision:
            parts.append(f"@{self.revision}")
        if self.path:
            parts.append(f":{self.path}")
        return "".join(parts)


class MaterializationState(str, Enum):
    NOT_CLONED = "NOT_CLONED"
    CLONING = "CLONING"
    READY = "READY"
    FAILED = "FAILED"


class Issue(BaseModel):
    """A finding emitted by a rule. Immutable; duplicates are kept as-is."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    rule: str
    package_id: Optional[str] = None
    license: Optional[str] = None
    license_source: Optional[LicenseSource] = None
    message: str
    how_to_fix: str = ""

    @field_validator("message")
    @classmethod
    def _message_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Issue message must not be empty")
        return value

    def sort_key(self) -> tuple:
        return (
            self.severity.rank,
            self.rule,
            _optional_key(self.package_id),
            _optional_key(self.license),
            _optional_key(self.license_source.value if self.license_source else None),
            self.message,
            self.how_to_fix,
        )

    def __lt__(self, other: "Issue") -> bool:
        if not isinstance(other, Issue):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: "Issue") -> bool:
        if not isinstance(other, Issue):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: "Issue") -> bool:
        if not isinstance(other, Issue):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: "Issue") -> bool:
        if not isinstance(other, Issue):
            return NotImplemented
        return self.sort_key() >= other.sort_key()


def _optional_key(value: Optional[str]) -> tuple[bool, str]:
    # Absent sorts before any present value, including "".
    return (value is not None, value or "")
